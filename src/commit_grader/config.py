"""Scoring rules, fixed thresholds and environment settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Status tiers
GOOD_THRESHOLD = 8
WARNING_THRESHOLD = 5
PERFECT_SCORE = 10
MIN_SCORE = 0

# Aggregation
SAMPLE_WINDOW = 50
MORNING_START = 6
AFTERNOON_START = 12
EVENING_START = 18
CONSISTENCY_SCALE = 20

# GitHub API
DEFAULT_API_URL = "https://api.github.com"
COMMITS_PER_PAGE = 50
REPOS_PER_PAGE = 100
CACHE_SECONDS = 300
RETRY_ATTEMPTS = 3
RETRY_BASE_DELAY = 1.0

# History store
MAX_HISTORY_ITEMS = 20
MAX_SCORE_SAMPLES = 10


@dataclass(frozen=True)
class ScoringRules:
    """Knobs separating the lenient, badge-rich scorer from the strict one.

    Both presets run the same rule chain in :mod:`commit_grader.quality`;
    only the numbers and switches below differ.
    """

    wip_short_circuit: bool = True
    wip_score: int = 3
    empty_short_circuit: bool = False
    empty_score: int = 0
    min_subject_length: int = 5
    too_short_score: int = 2

    unknown_type_penalty: int = 1
    unknown_type_counts_as_missing: bool = True
    accept_sentence_style: bool = True
    sentence_style_penalty: int = 1
    missing_type_penalty: int = 2

    vague_penalty: int = 2
    short_penalty: int = 2
    long_penalty: int = 2
    max_subject_length: int = 72
    mood_penalty: int = 1
    trailing_period_penalty: int = 0

    issue_bonus: int = 1
    body_bonus: int = 1


RICH_RULES = ScoringRules()

STRICT_RULES = ScoringRules(
    wip_short_circuit=False,
    empty_short_circuit=True,
    min_subject_length=0,
    unknown_type_penalty=2,
    unknown_type_counts_as_missing=False,
    accept_sentence_style=False,
    trailing_period_penalty=1,
    issue_bonus=0,
    body_bonus=0,
)


@dataclass
class Settings:
    """Runtime settings read from the environment."""

    github_token: str | None = None
    api_url: str = DEFAULT_API_URL
    home: Path = Path.home() / ".commit-grader"
    debug: bool = False

    @property
    def history_path(self) -> Path:
        return self.home / "history.json"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``GITHUB_TOKEN``, ``GITHUB_API_URL`` and friends."""
        home = os.environ.get("COMMIT_GRADER_HOME")
        return cls(
            github_token=os.environ.get("GITHUB_TOKEN") or None,
            api_url=os.environ.get("GITHUB_API_URL", DEFAULT_API_URL).rstrip("/"),
            home=Path(home).expanduser() if home else Path.home() / ".commit-grader",
            debug=bool(os.environ.get("COMMIT_GRADER_DEBUG")),
        )
