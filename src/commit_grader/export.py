"""Export analyses as CSV, Markdown or JSON."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from datetime import datetime

from .models import Commit, RepoStats

_STATUS_EMOJI = {"good": "✅", "warning": "⚠️", "bad": "❌"}


def _rows_to_csv(header: list[str], rows: list[list[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def _percent(part: int, total: int) -> str:
    return f"{part / total * 100:.1f}%" if total else "0.0%"


def _format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return value


def commits_to_csv(commits: Sequence[Commit]) -> str:
    """One row per commit with its score, status and type."""
    rows = [
        [
            c.sha,
            c.message.replace("\n", " "),
            c.author,
            c.date.isoformat(),
            c.analysis.score if c.analysis else 0,
            c.analysis.status if c.analysis else "unknown",
            (c.analysis.conventional_type if c.analysis else None) or "none",
        ]
        for c in commits
    ]
    return _rows_to_csv(["SHA", "Message", "Author", "Date", "Score", "Status", "Type"], rows)


def commits_to_markdown(commits: Sequence[Commit], stats: RepoStats) -> str:
    """Render a report with a summary section and one section per commit."""
    total = stats.total_commits
    lines = [
        f"# {stats.repo_name} - Commit Analysis Report",
        "",
        "## Summary",
        "",
        f"- **Average Score**: {stats.average_score:.1f}/10",
        f"- **Total Commits**: {total}",
        f"- **Good Commits**: {stats.good_commits} ({_percent(stats.good_commits, total)})",
        f"- **Warning Commits**: {stats.warning_commits} "
        f"({_percent(stats.warning_commits, total)})",
        f"- **Bad Commits**: {stats.bad_commits} ({_percent(stats.bad_commits, total)})",
    ]
    if stats.consistency_score is not None:
        lines.append(f"- **Consistency**: {stats.consistency_score:.0f}/100")
    lines += [f"- **Analyzed**: {_format_date(stats.last_analyzed)}", "", "## Commits", ""]

    for index, commit in enumerate(commits, start=1):
        analysis = commit.analysis
        status = analysis.status if analysis else "unknown"
        lines += [
            f"### {index}. {commit.subject}",
            "",
            f"{_STATUS_EMOJI.get(status, '❔')} **Score**: "
            f"{analysis.score if analysis else 0}/10 | **Status**: {status}",
            "",
            f"- **Author**: {commit.author}",
            f"- **Date**: {commit.date.strftime('%Y-%m-%d %H:%M')}",
            f"- **SHA**: `{commit.sha}`",
            f"- **Type**: {(analysis.conventional_type if analysis else None) or 'none'}",
        ]
        if analysis and analysis.feedback:
            lines += ["", "**Feedback**:", *(f"- {item}" for item in analysis.feedback)]
        if analysis and analysis.suggestion:
            lines += ["", f"**Suggestion**: `{analysis.suggestion}`"]
        lines.append("")

    return "\n".join(lines) + "\n"


def history_to_csv(history: Sequence[RepoStats]) -> str:
    """One row per stored repository."""
    rows = [
        [
            item.repo_name,
            f"{item.average_score:.2f}",
            item.total_commits,
            item.status.capitalize(),
            _format_date(item.last_analyzed).split(" ")[0],
            ";".join(item.tags or []),
        ]
        for item in history
    ]
    return _rows_to_csv(["Repository", "Score", "Total Commits", "Status", "Date", "Tags"], rows)


def history_to_json(history: Sequence[RepoStats]) -> str:
    return json.dumps([item.to_dict() for item in history], indent=2, ensure_ascii=False)
