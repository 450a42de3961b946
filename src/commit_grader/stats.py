"""Roll per-commit analyses up into repository statistics."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone, tzinfo
from typing import Literal

from .config import (
    AFTERNOON_START,
    CONSISTENCY_SCALE,
    EVENING_START,
    MORNING_START,
    SAMPLE_WINDOW,
)
from .models import Achievement, Commit, RepoStats, TimeDistribution

TimePeriod = Literal["morning", "afternoon", "evening", "night"]


def get_time_period(hour: int) -> TimePeriod:
    """Bucket an hour of the day (0-23)."""
    if MORNING_START <= hour < AFTERNOON_START:
        return "morning"
    if AFTERNOON_START <= hour < EVENING_START:
        return "afternoon"
    if EVENING_START <= hour < 24:
        return "evening"
    return "night"


def consistency_score(scores: Sequence[float]) -> float:
    """Map the spread of scores onto 0-100.

    ``max(0, 100 - sqrt(population variance) * 20)``; fewer than two
    scores means no spread, hence 100.
    """
    if not scores:
        return 100.0
    mean = sum(scores) / len(scores)
    variance = sum((s - mean) ** 2 for s in scores) / len(scores)
    return max(0.0, 100 - math.sqrt(variance) * CONSISTENCY_SCALE)


def aggregate(
    commits: Sequence[Commit],
    repo_name: str,
    total_count: int,
    *,
    analyzed_at: datetime | None = None,
    tz: tzinfo | None = None,
    tags: list[str] | None = None,
    score_history: list[float] | None = None,
) -> RepoStats:
    """Build repository statistics from already-scored commits.

    Only the first ``SAMPLE_WINDOW`` commits are looked at; ``total_count``
    is passed through untouched as the repository-wide commit count.

    Args:
        commits: Commits in the order they were fetched, newest first
        repo_name: Repository identifier, e.g. ``owner/repo``
        total_count: True number of commits in the repository
        analyzed_at: Timestamp to record; defaults to now (UTC)
        tz: Zone used to bucket commit hours; defaults to the local zone
        tags: Caller-owned tags, carried through
        score_history: Caller-owned score samples, carried through

    Returns:
        The aggregated statistics
    """
    window = list(commits[:SAMPLE_WINDOW])
    scores = [c.analysis.score if c.analysis else 0 for c in window]
    statuses = Counter(c.analysis.status for c in window if c.analysis)
    types = Counter(
        (c.analysis.conventional_type if c.analysis else None) or "unknown" for c in window
    )

    times = TimeDistribution()
    for commit in window:
        period = get_time_period(commit.date.astimezone(tz).hour)
        setattr(times, period, getattr(times, period) + 1)

    achievements: list[Achievement] = []
    for commit in window:
        if commit.analysis:
            achievements.extend(commit.analysis.achievements)

    return RepoStats(
        repo_name=repo_name,
        average_score=sum(scores) / len(scores) if scores else 0.0,
        total_commits=total_count,
        good_commits=statuses["good"],
        warning_commits=statuses["warning"],
        bad_commits=statuses["bad"],
        last_analyzed=(analyzed_at or datetime.now(timezone.utc)).isoformat(),
        time_distribution=times,
        type_distribution=dict(types),
        consistency_score=consistency_score(scores),
        achievements=achievements,
        tags=tags,
        score_history=score_history,
    )
