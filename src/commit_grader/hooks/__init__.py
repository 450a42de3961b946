"""Git hook installation for commit message grading."""

from __future__ import annotations

import shutil
import stat
import sys
import time
from pathlib import Path

from rich.console import Console

from ..git import GitRepo
from .templates import HOOK_MARKER, get_commit_msg_hook

HOOK_NAME = "commit-msg"


def install_hooks(
    repo: GitRepo | None = None,
    console: Console | None = None,
    is_windows: bool | None = None,
) -> Path:
    """Install the commit-msg grading hook.

    An existing hook that was not written by this tool is backed up first.

    Args:
        repo: Repository to install into (defaults to the current directory)
        console: Rich console for output (creates new one if None)
        is_windows: Force the script flavour; detected from the platform if None

    Returns:
        Path to the installed hook

    Raises:
        GitError: If the target is not a git repository
    """
    if console is None:
        console = Console()
    if repo is None:
        repo = GitRepo()
    if is_windows is None:
        is_windows = sys.platform == "win32"

    repo.check_repository()
    console.print("\n[bold cyan]🎯 Installing Commit Message Grading Hook[/]\n")

    hooks_dir = repo.hooks_dir()
    hooks_dir.mkdir(parents=True, exist_ok=True)
    target_path = hooks_dir / HOOK_NAME

    existed_before = target_path.exists()
    if existed_before:
        existing_content = target_path.read_text(encoding="utf-8", errors="ignore")
        if HOOK_MARKER not in existing_content:
            backup_path = target_path.with_suffix(f".backup-{int(time.time())}")
            shutil.copy2(target_path, backup_path)
            console.print(
                f"  [yellow]⚠ {HOOK_NAME} - backed up existing to {backup_path.name}[/]"
            )

    target_path.write_text(get_commit_msg_hook(is_windows), encoding="utf-8")
    if not is_windows:
        target_path.chmod(target_path.stat().st_mode | stat.S_IEXEC)

    if existed_before:
        console.print(f"  [green]✓ {HOOK_NAME} - updated[/]")
    else:
        console.print(f"  [green]✓ {HOOK_NAME} - installed[/]")

    console.print("\n[blue]💡 Setup Instructions:[/]")
    console.print("[bold yellow]\n⚠️  IMPORTANT: The hook is opt-in[/]")
    console.print("\n1. Enable the hook (REQUIRED):")
    console.print("[dim]   git config hooks.commitGrader true[/]")
    console.print("\n2. Optional: change the minimum score (default 7):")
    console.print("[dim]   git config hooks.commitGraderMinScore 8[/]")

    return target_path


__all__ = ["install_hooks", "get_commit_msg_hook", "HOOK_NAME"]
