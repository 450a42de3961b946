"""Git operations wrapper using subprocess."""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path

from .config import RICH_RULES, ScoringRules
from .models import Commit, FileChange
from .quality import score_commit_message

# Field and record separators for ``git log`` output
_FIELD = "\x1f"
_RECORD = "\x1e"
_LOG_FORMAT = f"%H{_FIELD}%an{_FIELD}%aI{_FIELD}%B{_RECORD}"

_STATUS_CODES = {
    "A": "added",
    "C": "added",
    "D": "removed",
    "M": "modified",
    "R": "renamed",
    "T": "modified",
}


class GitError(Exception):
    """Error during git operations."""

    pass


def parse_log(output: str) -> list[tuple[str, str, datetime, str]]:
    """Split ``git log`` output in :data:`_LOG_FORMAT` into records.

    Returns:
        List of (sha, author, date, message) tuples, newest first
    """
    records = []
    for block in output.split(_RECORD):
        block = block.strip("\n")
        if not block:
            continue
        fields = block.split(_FIELD, 3)
        if len(fields) < 4:
            continue
        sha, author, date, message = fields
        records.append((sha.strip(), author, datetime.fromisoformat(date), message.strip()))
    return records


def parse_name_status(output: str) -> list[tuple[str, str]]:
    """Parse ``git diff --name-status`` into (path, status) pairs.

    Renames and copies report the new path.
    """
    entries = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2 or not parts[0]:
            continue
        status = _STATUS_CODES.get(parts[0][0], "modified")
        entries.append((parts[-1], status))
    return entries


def parse_numstat(output: str) -> dict[str, tuple[int | None, int | None]]:
    """Parse ``git diff --numstat`` into {path: (additions, deletions)}.

    Binary files report ``-`` and come back as None.
    """
    counts: dict[str, tuple[int | None, int | None]] = {}
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        added, deleted, path = parts[0], parts[1], parts[-1]
        counts[path] = (
            int(added) if added.isdigit() else None,
            int(deleted) if deleted.isdigit() else None,
        )
    return counts


class GitRepo:
    """Wrapper for git operations using subprocess."""

    def __init__(self, path: str | Path | None = None) -> None:
        """Initialize git repository wrapper.

        Args:
            path: Path to the repository (defaults to current directory)
        """
        self.path = Path(path) if path else Path.cwd()

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        """Run a git command.

        Args:
            *args: Git command arguments
            check: Raise exception on non-zero exit

        Returns:
            CompletedProcess result

        Raises:
            GitError: If command fails and check is True
        """
        cmd = ["git", *args]
        try:
            return subprocess.run(
                cmd,
                cwd=self.path,
                check=check,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"Command failed: {' '.join(cmd)}\nExit code: {e.returncode}\nStderr: {e.stderr}"
            ) from e
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e

    def is_repository(self) -> bool:
        """Check if this is a valid git repository."""
        try:
            self._run("rev-parse", "--git-dir")
            return True
        except GitError:
            return False

    def check_repository(self) -> None:
        """Check if this is a valid git repository.

        Raises:
            GitError: If not a git repository
        """
        if not self.is_repository():
            raise GitError("Not a git repository!")

    @property
    def name(self) -> str:
        """Repository name, taken from the top-level directory."""
        result = self._run("rev-parse", "--show-toplevel")
        return Path(result.stdout.strip()).name

    def count_commits(self) -> int:
        """Count commits reachable from HEAD."""
        result = self._run("rev-list", "--count", "HEAD")
        return int(result.stdout.strip() or 0)

    def get_commits(
        self, max_commits: int | None = None, rules: ScoringRules = RICH_RULES
    ) -> list[Commit]:
        """Get scored commits in reverse chronological order.

        Args:
            max_commits: Maximum number of commits to return
            rules: Scoring rules applied to each message

        Returns:
            Commits, newest first
        """
        args = ["log", f"--format={_LOG_FORMAT}"]
        if max_commits and max_commits > 0:
            args.insert(1, f"-{max_commits}")
        result = self._run(*args)
        return [
            Commit(
                sha=sha,
                message=message,
                author=author,
                date=date,
                analysis=score_commit_message(message, rules),
            )
            for sha, author, date, message in parse_log(result.stdout)
        ]

    def get_staged_changes(self) -> list[FileChange]:
        """Describe staged changes as file changes with patches."""
        names = parse_name_status(self._run("diff", "--cached", "--name-status", "-M").stdout)
        numstat = parse_numstat(self._run("diff", "--cached", "--numstat", "-M").stdout)
        changes = []
        for path, status in names:
            additions, deletions = numstat.get(path, (None, None))
            patch = self._run("diff", "--cached", "-M", "--", path).stdout
            changes.append(
                FileChange(
                    filename=path,
                    status=status,
                    patch=patch or None,
                    additions=additions,
                    deletions=deletions,
                )
            )
        return changes

    def hooks_dir(self) -> Path:
        """Location of the repository's hooks directory."""
        result = self._run("rev-parse", "--git-path", "hooks")
        hooks = Path(result.stdout.strip())
        return hooks if hooks.is_absolute() else self.path / hooks
