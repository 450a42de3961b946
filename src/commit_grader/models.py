"""Value types passed into and returned from the analysis engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal

from .config import GOOD_THRESHOLD, WARNING_THRESHOLD

Status = Literal["good", "warning", "bad"]


def status_for(score: float) -> Status:
    """Map a score onto the good/warning/bad tiers."""
    if score >= GOOD_THRESHOLD:
        return "good"
    if score >= WARNING_THRESHOLD:
        return "warning"
    return "bad"


@dataclass(frozen=True)
class Achievement:
    """A badge unlocked by a single commit message."""

    id: str
    name: str
    description: str
    icon: str


CONVENTION_FOLLOWER = Achievement(
    id="conventional",
    name="Convention Follower",
    description="Follows Conventional Commits standard",
    icon="📋",
)
ISSUE_LINKER = Achievement(
    id="linked",
    name="Issue Linker",
    description="References an issue or ticket",
    icon="🔗",
)
STORYTELLER = Achievement(
    id="storyteller",
    name="Storyteller",
    description="Provides detailed context",
    icon="📖",
)
PROFESSIONAL_STYLE = Achievement(
    id="professional",
    name="Professional Style",
    description="Clean, imperative, and concise.",
    icon="👔",
)
PERFECTIONIST = Achievement(
    id="perfectionist",
    name="Perfectionist",
    description="Flawless commit message",
    icon="🌟",
)

ACHIEVEMENTS: dict[str, Achievement] = {
    badge.id: badge
    for badge in (CONVENTION_FOLLOWER, ISSUE_LINKER, STORYTELLER, PROFESSIONAL_STYLE, PERFECTIONIST)
}


@dataclass(frozen=True)
class Checklist:
    """Pass/fail breakdown of the five atomic subject-line rules."""

    conventional: bool
    length: bool
    specific: bool
    imperative: bool
    no_trailing_period: bool

    @property
    def passed(self) -> int:
        return sum(asdict(self).values())


@dataclass
class AnalysisResult:
    """Outcome of grading one commit message."""

    score: int
    feedback: list[str]
    status: Status
    conventional_type: str | None = None
    achievements: list[Achievement] = field(default_factory=list)
    suggestion: str | None = None
    checklist: Checklist | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FileChange:
    """A single file touched by a commit."""

    filename: str
    status: str = "modified"
    patch: str | None = None
    additions: int | None = None
    deletions: int | None = None

    @classmethod
    def from_github(cls, data: dict[str, Any]) -> FileChange:
        """Build from an entry of the GitHub commit ``files`` array."""
        return cls(
            filename=data.get("filename", ""),
            status=data.get("status", "modified"),
            patch=data.get("patch"),
            additions=data.get("additions"),
            deletions=data.get("deletions"),
        )


@dataclass
class Commit:
    """A commit fetched from a repository, with its analysis attached."""

    sha: str
    message: str
    author: str
    date: datetime
    url: str = ""
    analysis: AnalysisResult | None = None

    @property
    def subject(self) -> str:
        return self.message.strip().split("\n")[0]


@dataclass
class TimeDistribution:
    """Commit counts per time of day."""

    morning: int = 0
    afternoon: int = 0
    evening: int = 0
    night: int = 0


@dataclass
class RepoStats:
    """Repository-level statistics rolled up from many analyses."""

    repo_name: str
    average_score: float
    total_commits: int
    good_commits: int
    warning_commits: int
    bad_commits: int
    last_analyzed: str
    time_distribution: TimeDistribution = field(default_factory=TimeDistribution)
    type_distribution: dict[str, int] | None = None
    consistency_score: float | None = None
    achievements: list[Achievement] | None = None
    tags: list[str] | None = None
    score_history: list[float] | None = None

    @property
    def status(self) -> Status:
        return status_for(self.average_score)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepoStats:
        """Rebuild from :meth:`to_dict` output, ignoring unknown keys."""
        achievements = data.get("achievements")
        return cls(
            repo_name=data["repo_name"],
            average_score=float(data.get("average_score", 0.0)),
            total_commits=int(data.get("total_commits", 0)),
            good_commits=int(data.get("good_commits", 0)),
            warning_commits=int(data.get("warning_commits", 0)),
            bad_commits=int(data.get("bad_commits", 0)),
            last_analyzed=data.get("last_analyzed", ""),
            time_distribution=TimeDistribution(**(data.get("time_distribution") or {})),
            type_distribution=data.get("type_distribution"),
            consistency_score=data.get("consistency_score"),
            achievements=(
                [Achievement(**a) for a in achievements] if achievements is not None else None
            ),
            tags=data.get("tags"),
            score_history=data.get("score_history"),
        )


@dataclass
class Repository:
    """A public repository listed for a user."""

    name: str
    full_name: str
    description: str | None = None
    stars: int = 0
    language: str | None = None
    url: str = ""

    @classmethod
    def from_github(cls, data: dict[str, Any]) -> Repository:
        return cls(
            name=data.get("name", ""),
            full_name=data.get("full_name", ""),
            description=data.get("description"),
            stars=data.get("stargazers_count", 0),
            language=data.get("language"),
            url=data.get("html_url", ""),
        )
