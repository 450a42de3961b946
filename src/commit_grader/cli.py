"""CLI interface for commit-grader."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import RICH_RULES, SAMPLE_WINDOW, STRICT_RULES, Settings
from .diffs import synthesize_message
from .export import commits_to_csv, commits_to_markdown, history_to_csv, history_to_json
from .git import GitError, GitRepo
from .github import GitHubClient, GitHubError, parse_repo_url
from .history import HistoryStore
from .hooks import install_hooks
from .models import AnalysisResult, Commit, FileChange, RepoStats
from .quality import needs_improvement, score_commit_message
from .stats import aggregate

console = Console()

_STATUS_STYLE = {"good": "green", "warning": "yellow", "bad": "red"}

# Written by `git commit -v`; everything below it is the diff
SCISSORS_LINE = "# ------------------------ >8 ------------------------"


def setup_logging(verbose: bool = False) -> None:
    """Send library logs through rich; debug level with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


class GraderGroup(click.Group):
    """Command group that turns uncaught errors into a red message and exit code 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (click.ClickException, click.exceptions.Exit, click.exceptions.Abort):
            raise
        except Exception as e:
            if ctx.meta.get("verbose"):
                console.print_exception()
            else:
                console.print(f"\n[red]❌ Error: {e}[/]")
            ctx.exit(1)


def render_analysis(result: AnalysisResult, message: str) -> None:
    """Print one analysis as a small report."""
    subject = message.strip().split("\n")[0]
    style = _STATUS_STYLE[result.status]
    console.print(f"\n[bold]{subject}[/]")
    console.print(
        f"[{style}]Score: {result.score}/10 ({result.status})[/]"
        + (f"  [cyan]type: {result.conventional_type}[/]" if result.conventional_type else "")
    )
    for item in result.feedback:
        console.print(f"  [yellow]• {item}[/]")
    if not result.feedback:
        console.print("  [green]✓ No issues found[/]")
    if result.checklist:
        checks = result.checklist
        marks = [
            ("type", checks.conventional),
            ("length", checks.length),
            ("specific", checks.specific),
            ("imperative", checks.imperative),
            ("no period", checks.no_trailing_period),
        ]
        console.print(
            "  " + "  ".join(f"[green]✓ {label}[/]" if ok else f"[red]✗ {label}[/]" for label, ok in marks)
        )
    for badge in result.achievements:
        console.print(f"  {badge.icon} [bold]{badge.name}[/] [dim]- {badge.description}[/]")
    if result.suggestion:
        console.print(f"\n[blue]💡 Suggestion:[/] {result.suggestion}")


def render_stats(stats: RepoStats, commits: list[Commit]) -> None:
    """Print repository statistics and the sampled commits."""
    console.print(f"\n[cyan]📊 {stats.repo_name}[/]")
    console.print(
        f"[{_STATUS_STYLE[stats.status]}]  • Average score: {stats.average_score:.1f}/10[/]"
    )
    console.print(f"[blue]  • Total commits: {stats.total_commits}[/]")
    console.print(
        f"  • Good / warning / bad: [green]{stats.good_commits}[/] / "
        f"[yellow]{stats.warning_commits}[/] / [red]{stats.bad_commits}[/]"
    )
    if stats.consistency_score is not None:
        console.print(f"  • Consistency: {stats.consistency_score:.0f}/100")
    times = stats.time_distribution
    console.print(
        f"  • Morning {times.morning} · afternoon {times.afternoon} · "
        f"evening {times.evening} · night {times.night}"
    )
    if stats.type_distribution:
        types = sorted(stats.type_distribution.items(), key=lambda kv: (-kv[1], kv[0]))
        console.print("  • Types: " + ", ".join(f"{t} {n}" for t, n in types))
    if stats.achievements:
        unique = {badge.id: badge for badge in stats.achievements}
        console.print("  • Badges: " + " ".join(f"{b.icon} {b.name}" for b in unique.values()))

    table = Table(show_header=True, header_style="bold")
    table.add_column("SHA", style="dim")
    table.add_column("Score", justify="right")
    table.add_column("Subject")
    for commit in commits[:SAMPLE_WINDOW]:
        analysis = commit.analysis
        style = _STATUS_STYLE[analysis.status] if analysis else "dim"
        table.add_row(
            commit.sha[:8],
            f"[{style}]{analysis.score if analysis else '-'}[/]",
            commit.subject,
        )
    console.print(table)


def strip_comments(text: str) -> str:
    """Reduce a commit message file to what git will actually record."""
    lines = []
    for line in text.splitlines():
        if line.startswith(SCISSORS_LINE):
            break
        if not line.startswith("#"):
            lines.append(line)
    return "\n".join(lines)


def _write_output(content: str, output: str | None) -> None:
    if output:
        Path(output).write_text(content, encoding="utf-8")
        console.print(f"[green]✅ Wrote {output}[/]")
    else:
        click.echo(content)


def _history(ctx: click.Context) -> HistoryStore:
    return HistoryStore(ctx.obj.history_path)


def _client(ctx: click.Context) -> GitHubClient:
    settings: Settings = ctx.obj
    return GitHubClient(token=settings.github_token, base_url=settings.api_url)


@click.group(cls=GraderGroup)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs and full tracebacks")
@click.version_option(__version__)
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Grade commit messages and suggest better ones.

    \b
    Examples:
      # Grade a single message
      commit-grader score "fixed stuff"

      # Analyze the latest commits of a GitHub repository
      commit-grader repo https://github.com/owner/repo

      # Suggest a message for staged changes
      commit-grader suggest
    """
    settings = Settings.from_env()
    ctx.obj = settings
    ctx.meta["verbose"] = verbose or settings.debug
    setup_logging(ctx.meta["verbose"])


@main.command()
@click.argument("message")
@click.option("--strict", is_flag=True, help="Use the strict rule set")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis as JSON")
def score(message: str, strict: bool, as_json: bool) -> None:
    """Grade MESSAGE (use - to read it from stdin)."""
    if message == "-":
        message = click.get_text_stream("stdin").read()
    result = score_commit_message(message, STRICT_RULES if strict else RICH_RULES)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        render_analysis(result, message)


@main.command()
@click.argument("message_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--min-score", type=int, default=7, help="Minimum score (0-10) to accept")
@click.option("--strict", is_flag=True, help="Use the strict rule set")
def check(message_file: str, min_score: int, strict: bool) -> None:
    """Fail when the message in MESSAGE_FILE needs improvement (commit-msg hook)."""
    text = Path(message_file).read_text(encoding="utf-8", errors="replace")
    message = strip_comments(text)
    rules = STRICT_RULES if strict else RICH_RULES
    failed, reason = needs_improvement(message, min_score, rules)
    result = score_commit_message(message, rules)
    if failed:
        console.print(f"[red]✗ Commit message scored {result.score}/10 (minimum {min_score})[/]")
        console.print(f"[yellow]  {reason}[/]")
        if result.suggestion:
            console.print(f"[blue]  💡 Try: {result.suggestion}[/]")
        sys.exit(1)
    console.print(f"[green]✓ Commit message scored {result.score}/10[/]")


@main.command()
@click.argument("target")
@click.option("--page", type=int, default=1, help="Page of commits to fetch from GitHub")
@click.option("--max-commits", type=int, help="Process only the last N commits (local repos)")
@click.option("--strict", is_flag=True, help="Use the strict rule set")
@click.option("--save/--no-save", default=True, help="Record the result in the history")
@click.option("--export", "export_format", type=click.Choice(["csv", "md", "json"]))
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Export destination")
@click.pass_context
def repo(
    ctx: click.Context,
    target: str,
    page: int,
    max_commits: int | None,
    strict: bool,
    save: bool,
    export_format: str | None,
    output: str | None,
) -> None:
    """Analyze the commits of TARGET (GitHub URL, owner/repo or local path)."""
    rules = STRICT_RULES if strict else RICH_RULES
    if Path(target).exists():
        local = GitRepo(target)
        local.check_repository()
        commits = local.get_commits(max_commits or SAMPLE_WINDOW, rules)
        total = local.count_commits()
        repo_name = local.name
    else:
        info = parse_repo_url(target)
        if info is None:
            raise GitHubError(f"Invalid GitHub repository: {target}")
        with console.status(f"Fetching commits from {info[0]}/{info[1]}..."):
            with _client(ctx) as client:
                commits, total = client.fetch_commits(target, page, rules)
        repo_name = f"{info[0]}/{info[1]}"

    if not commits:
        console.print("[yellow]No commits found to analyze.[/]")
        return

    stats = aggregate(commits, repo_name, total)
    if save:
        stats = _history(ctx).save(stats)
    render_stats(stats, commits)

    if export_format == "csv":
        _write_output(commits_to_csv(commits), output)
    elif export_format == "md":
        _write_output(commits_to_markdown(commits, stats), output)
    elif export_format == "json":
        _write_output(json.dumps(stats.to_dict(), indent=2, ensure_ascii=False), output)


@main.command()
@click.option("--repo", "target", help="GitHub repository of the commit")
@click.option("--sha", help="Commit to analyze instead of the staged changes")
@click.pass_context
def suggest(ctx: click.Context, target: str | None, sha: str | None) -> None:
    """Suggest a commit message from changed files.

    Without options the staged changes of the current repository are used.
    """
    files: list[FileChange]
    if sha:
        if not target:
            raise click.UsageError("--sha requires --repo")
        with _client(ctx) as client:
            files = client.fetch_commit_files(target, sha)
    else:
        local = GitRepo()
        local.check_repository()
        files = local.get_staged_changes()
        if not files:
            raise GitError("No staged changes found. Stage your changes with: git add <files>")

    for change in files:
        counts = ""
        if change.additions is not None or change.deletions is not None:
            counts = f" [green]+{change.additions or 0}[/] [red]-{change.deletions or 0}[/]"
        console.print(f"[dim]{change.status:>8}[/] {change.filename}{counts}", highlight=False)
    click.echo(synthesize_message(files))


@main.command()
@click.argument("username")
@click.pass_context
def repos(ctx: click.Context, username: str) -> None:
    """List the public repositories of USERNAME."""
    with _client(ctx) as client:
        repositories = client.fetch_user_repos(username)
    table = Table(show_header=True, header_style="bold")
    table.add_column("Repository")
    table.add_column("★", justify="right")
    table.add_column("Language")
    table.add_column("Description")
    for item in repositories:
        table.add_row(item.full_name, str(item.stars), item.language or "", item.description or "")
    console.print(table)


@main.group()
def history() -> None:
    """Inspect and manage past analyses."""


@history.command("list")
@click.pass_context
def history_list(ctx: click.Context) -> None:
    """Show stored analyses, newest first."""
    entries = _history(ctx).load()
    if not entries:
        console.print("[dim]No history yet.[/]")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Repository")
    table.add_column("Score", justify="right")
    table.add_column("Commits", justify="right")
    table.add_column("Trend")
    table.add_column("Tags")
    for entry in entries:
        trend = " → ".join(f"{s:.1f}" for s in (entry.score_history or [])[-3:])
        table.add_row(
            entry.repo_name,
            f"[{_STATUS_STYLE[entry.status]}]{entry.average_score:.1f}[/]",
            str(entry.total_commits),
            trend,
            ", ".join(entry.tags or []),
        )
    console.print(table)


@history.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear your analysis history?")
@click.pass_context
def history_clear(ctx: click.Context) -> None:
    """Delete all stored analyses."""
    _history(ctx).clear()
    console.print("[green]✨ History cleared.[/]")


@history.command("tag")
@click.argument("repo_name")
@click.argument("tags", nargs=-1, required=True)
@click.pass_context
def history_tag(ctx: click.Context, repo_name: str, tags: tuple[str, ...]) -> None:
    """Attach TAGS to a stored repository."""
    try:
        entry = _history(ctx).add_tags(repo_name, tags)
    except KeyError:
        raise click.ClickException(f"No history for {repo_name}")
    console.print(f"[green]✓ {repo_name}: {', '.join(entry.tags or [])}[/]")


@history.command("untag")
@click.argument("repo_name")
@click.argument("tag")
@click.pass_context
def history_untag(ctx: click.Context, repo_name: str, tag: str) -> None:
    """Detach TAG from a stored repository."""
    try:
        entry = _history(ctx).remove_tag(repo_name, tag)
    except KeyError:
        raise click.ClickException(f"No history for {repo_name}")
    console.print(f"[green]✓ {repo_name}: {', '.join(entry.tags or []) or 'no tags'}[/]")


@history.command("export")
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), default="json")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Export destination")
@click.pass_context
def history_export(ctx: click.Context, fmt: str, output: str | None) -> None:
    """Export stored analyses."""
    entries = _history(ctx).load()
    _write_output(history_to_csv(entries) if fmt == "csv" else history_to_json(entries), output)


@main.command("install-hooks")
def install_hooks_command() -> None:
    """Install the commit-msg grading hook in the current repository."""
    install_hooks(console=console)


if __name__ == "__main__":
    main()
