"""JSON-backed history of repository analyses."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path

from .config import MAX_HISTORY_ITEMS, MAX_SCORE_SAMPLES
from .models import RepoStats

logger = logging.getLogger(__name__)


class HistoryStore:
    """Keeps the most recently analyzed repositories, newest first.

    Each repository appears once. Saving it again moves it to the front,
    keeps its tags and records the previous average in ``score_history``.
    """

    def __init__(
        self,
        path: str | Path,
        max_items: int = MAX_HISTORY_ITEMS,
        max_samples: int = MAX_SCORE_SAMPLES,
    ) -> None:
        self.path = Path(path)
        self.max_items = max_items
        self.max_samples = max_samples

    def load(self) -> list[RepoStats]:
        """Read all entries; an unreadable file reads as empty."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return [RepoStats.from_dict(item) for item in data]
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning("Ignoring unreadable history file %s: %s", self.path, e)
            return []

    def _write(self, entries: list[RepoStats]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def get(self, repo_name: str) -> RepoStats | None:
        return next((e for e in self.load() if e.repo_name == repo_name), None)

    def save(self, stats: RepoStats) -> RepoStats:
        """Store a fresh analysis, merging it with any earlier one.

        Returns:
            The entry as stored
        """
        entries = self.load()
        previous = next((e for e in entries if e.repo_name == stats.repo_name), None)

        samples = list(stats.score_history or [])
        tags = list(stats.tags or [])
        if previous is not None:
            samples = list(previous.score_history or []) + [previous.average_score] + samples
            tags = _merge_tags(previous.tags or [], tags)
        stored = replace(
            stats,
            tags=tags or None,
            score_history=samples[-self.max_samples :] if samples else None,
        )

        others = [e for e in entries if e.repo_name != stats.repo_name]
        self._write([stored, *others][: self.max_items])
        logger.debug("Saved analysis of %s to %s", stats.repo_name, self.path)
        return stored

    def add_tags(self, repo_name: str, tags: Iterable[str]) -> RepoStats:
        """Attach tags to a stored repository.

        Raises:
            KeyError: If the repository has no history entry
        """
        return self._update_tags(repo_name, lambda current: _merge_tags(current, tags))

    def remove_tag(self, repo_name: str, tag: str) -> RepoStats:
        """Detach a tag from a stored repository.

        Raises:
            KeyError: If the repository has no history entry
        """
        return self._update_tags(repo_name, lambda current: [t for t in current if t != tag])

    def _update_tags(
        self, repo_name: str, change: Callable[[list[str]], list[str]]
    ) -> RepoStats:
        entries = self.load()
        for index, entry in enumerate(entries):
            if entry.repo_name == repo_name:
                entries[index] = replace(entry, tags=change(entry.tags or []) or None)
                self._write(entries)
                return entries[index]
        raise KeyError(repo_name)

    def clear(self) -> None:
        """Remove all history."""
        if self.path.exists():
            self.path.unlink()


def _merge_tags(current: Iterable[str], new: Iterable[str]) -> list[str]:
    merged: list[str] = []
    for tag in (*current, *new):
        tag = tag.strip()
        if tag and tag not in merged:
            merged.append(tag)
    return merged
