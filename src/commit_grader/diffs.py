"""Turn a set of changed files into a conventional commit message.

Three ordered rule tables are consulted in turn: rules that must hold for
every file, rules for a lone file, and rules for a multi-file change. The
first matching rule writes the message; if none matches, the message falls
back to counting files by change status. Several rules can match the same
file set, so table order is part of the behaviour.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath
from re import Pattern

from .models import FileChange

Files = Sequence[FileChange]

DOCS_PATTERN: Pattern[str] = re.compile(
    r"\.(md|txt)$|(^|/)(LICEN[CS]E|COPYING)(\.[a-z]+)?$", re.IGNORECASE
)
CONFIG_PATTERN: Pattern[str] = re.compile(
    r"(\.(json|ya?ml|toml|ini|cfg|lock)"
    r"|config(\.[cm]?[jt]s)?"
    r"|rc(\.[cm]?[jt]s)?"
    r"|ignore"
    r"|(^|/)\.env(\.[\w-]+)?)$",
    re.IGNORECASE,
)
PACKAGE_MANIFEST_PATTERN: Pattern[str] = re.compile(
    r"(^|/)(package\.json|package-lock\.json|yarn\.lock|pnpm-lock\.yaml"
    r"|pyproject\.toml|poetry\.lock|uv\.lock|Pipfile\.lock)$"
)
VERSION_LINE_PATTERN: Pattern[str] = re.compile(r'^[+-]\s*"?version"?\s*[:=]', re.MULTILINE)
STYLE_PATTERN: Pattern[str] = re.compile(r"\.(css|scss|sass|less|styl)$", re.IGNORECASE)
TEST_PATTERN: Pattern[str] = re.compile(
    r"\.(test|spec)\.|__tests__|(^|/)tests?/|(^|/)test_[^/]+\.py$|_test\.(py|go)$",
    re.IGNORECASE,
)
ASSET_PATTERN: Pattern[str] = re.compile(
    r"\.(png|jpe?g|gif|svg|ico|webp|woff2?|ttf|eot)$", re.IGNORECASE
)
HOOK_PATTERN: Pattern[str] = re.compile(r"^use[A-Z0-9]")

COMPONENT_DIRS = frozenset({"components"})
SERVICE_DIRS = frozenset({"services", "api"})
UTILITY_DIRS = frozenset({"utils", "lib", "helpers"})
REFACTOR_DIRS = frozenset({"utils", "types", "lib", "constants"})
SMALL_CHANGE_SET = 4


@dataclass(frozen=True)
class ClassifierRule:
    """A named guard and the message it produces when it fires."""

    name: str
    matches: Callable[[Files], bool]
    build: Callable[[Files], str]


def _path(change: FileChange) -> PurePosixPath:
    return PurePosixPath(change.filename)


def _stem(change: FileChange) -> str:
    return _path(change).name.split(".")[0]


def _extension(change: FileChange) -> str:
    suffix = _path(change).suffix
    return suffix[1:].lower() if suffix else ""


def _parent_dir(change: FileChange) -> str:
    parent = _path(change).parent.name
    return parent if parent not in ("", ".") else ""


def _in_dir(change: FileChange, names: frozenset[str]) -> bool:
    return any(part in names for part in _path(change).parts[:-1])


def _all_match(pattern: Pattern[str]) -> Callable[[Files], bool]:
    return lambda files: all(pattern.search(f.filename) for f in files)


def _any_match(files: Files, pattern: Pattern[str]) -> bool:
    return any(pattern.search(f.filename) for f in files)


def _fixed(message: str) -> Callable[[Files], str]:
    return lambda files: message


# --- rules over the whole file set -----------------------------------------


def _docs_message(files: Files) -> str:
    if any("readme" in f.filename.lower() for f in files):
        return "docs: update README documentation"
    return "docs: update project documentation"


def _config_message(files: Files) -> str:
    if _any_match(files, PACKAGE_MANIFEST_PATTERN):
        manifest = next(
            (f for f in files if f.filename.endswith(("package.json", "pyproject.toml"))), None
        )
        if manifest and manifest.patch:
            if VERSION_LINE_PATTERN.search(manifest.patch):
                return "chore: bump version"
            if "dependencies" in manifest.patch:
                return "chore: update dependencies"
        return "chore: update project dependencies"
    if any("tsconfig" in f.filename for f in files):
        return "chore: update TypeScript configuration"
    if any(re.search(r"eslint|prettier", f.filename) for f in files):
        return "chore: update linting configuration"
    if any(re.search(r"vite|webpack|rollup", f.filename) for f in files):
        return "chore: update build configuration"
    if any(".env" in f.filename for f in files):
        return "chore: update environment configuration"
    return "chore: update configuration files"


ALL_FILES_RULES: tuple[ClassifierRule, ...] = (
    ClassifierRule("docs", _all_match(DOCS_PATTERN), _docs_message),
    ClassifierRule("config", _all_match(CONFIG_PATTERN), _config_message),
    ClassifierRule("styles", _all_match(STYLE_PATTERN), _fixed("style: update visual styles")),
    ClassifierRule("tests", _all_match(TEST_PATTERN), _fixed("test: update test suite")),
    ClassifierRule("assets", _all_match(ASSET_PATTERN), _fixed("chore: update static assets")),
)


# --- rules for a single file -----------------------------------------------


def _is_component(files: Files) -> bool:
    change = files[0]
    return _extension(change) in ("tsx", "jsx") and _path(change).name[:1].isupper()


def _component_message(files: Files) -> str:
    change = files[0]
    name = _stem(change)
    if change.status == "added":
        return f"feat: add {name} component"
    if change.status == "removed":
        return f"refactor: remove {name} component"
    if change.patch:
        if "useEffect" in change.patch:
            return f"fix: update side effects in {name}"
        if "useState" in change.patch:
            return f"feat: add state management to {name}"
        if "interface" in change.patch or "type " in change.patch:
            return f"refactor: update types for {name}"
    return f"feat: update {name} component"


def _is_hook(files: Files) -> bool:
    change = files[0]
    return bool(HOOK_PATTERN.match(_path(change).name)) and _extension(change) in ("ts", "js")


def _is_service(files: Files) -> bool:
    change = files[0]
    name = _path(change).name
    return _in_dir(change, SERVICE_DIRS) or "Service" in name or "API" in name


def _is_type_declaration(files: Files) -> bool:
    change = files[0]
    return _parent_dir(change) == "types" or change.filename.endswith(".d.ts")


def _status_message(files: Files) -> str:
    change = files[0]
    name = _path(change).name
    if change.status == "added":
        return f"feat: add {name}"
    if change.status == "removed":
        return f"refactor: remove {name}"
    if change.status == "renamed":
        return f"refactor: rename {name}"
    return f"fix: update {name}"


SINGLE_FILE_RULES: tuple[ClassifierRule, ...] = (
    ClassifierRule("component", _is_component, _component_message),
    ClassifierRule("hook", _is_hook, lambda files: f"feat: update {_stem(files[0])} hook"),
    ClassifierRule("service", _is_service, _fixed("feat: update API integration logic")),
    ClassifierRule(
        "utility",
        lambda files: _in_dir(files[0], UTILITY_DIRS),
        _fixed("refactor: update utility functions"),
    ),
    ClassifierRule(
        "types", _is_type_declaration, _fixed("refactor: update type definitions")
    ),
    ClassifierRule("status", lambda files: True, _status_message),
)


# --- rules for several files -----------------------------------------------


def _components(files: Files) -> list[FileChange]:
    return [f for f in files if _in_dir(f, COMPONENT_DIRS)]


def _styled_component_message(files: Files) -> str:
    components = _components(files)
    name = _stem(components[0]) if components else "UI"
    return f"feat: style and update {name} component"


MULTI_FILE_RULES: tuple[ClassifierRule, ...] = (
    ClassifierRule(
        "styled-component",
        lambda files: bool(_components(files))
        and any(re.search(r"\.(css|scss)$", f.filename) for f in files)
        and len(files) <= SMALL_CHANGE_SET,
        _styled_component_message,
    ),
    ClassifierRule(
        "component-tests",
        lambda files: bool(_components(files))
        and any("test" in f.filename or "spec" in f.filename for f in files),
        _fixed("feat: update component and tests"),
    ),
    ClassifierRule(
        "cleanup",
        lambda files: all(_in_dir(f, REFACTOR_DIRS) for f in files),
        _fixed("refactor: cleanup project utilities and types"),
    ),
    ClassifierRule(
        "full-feature",
        lambda files: bool(_components(files)) and any(_in_dir(f, SERVICE_DIRS) for f in files),
        _fixed("feat: implement new feature with API integration"),
    ),
)


def _count_message(files: Files) -> str:
    """Summarize a mixed change by counting files per status."""
    counts = Counter(change.status for change in files)
    added, removed = counts["added"], counts["removed"]
    modified, renamed = counts["modified"], counts["renamed"]

    if renamed and renamed == len(files):
        return f"refactor: rename {renamed} files for better organization"
    if added > modified and added > removed:
        return f"feat: add {added} new files to project structure"
    if removed > added and removed > modified:
        return f"refactor: remove {removed} unused files from project"
    return f"feat: comprehensive update to {len(files)} project files"


def match_rule(files: Files) -> ClassifierRule | None:
    """Return the first rule that fires for this file set, if any.

    The single-file table ends with a catch-all, so ``None`` only comes back
    for empty input or a multi-file set that needs the counting fallback.
    """
    if not files:
        return None
    tables = [ALL_FILES_RULES]
    tables.append(SINGLE_FILE_RULES if len(files) == 1 else MULTI_FILE_RULES)
    for table in tables:
        for rule in table:
            if rule.matches(files):
                return rule
    return None


def synthesize_message(files: Files) -> str:
    """Suggest a commit message for a set of changed files.

    Args:
        files: The files touched by one commit

    Returns:
        A ``type: subject`` message, or an empty string for no files
    """
    if not files:
        return ""
    rule = match_rule(files)
    if rule is None:
        return _count_message(files)
    return rule.build(files)
