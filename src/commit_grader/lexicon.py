"""Static word lists and patterns used to grade commit messages."""

import re
from re import Pattern
from types import MappingProxyType

CONVENTIONAL_TYPES: tuple[str, ...] = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "build",
    "ci",
    "chore",
    "revert",
)

IMPERATIVE_VERBS: frozenset[str] = frozenset(
    {
        "add", "fix", "update", "remove", "change",
        "refactor", "merge", "create", "delete", "implement",
        "use", "optimize", "document", "correct", "handle",
        "improve", "clean", "init", "release", "bump",
        "revert", "move", "rename", "allow", "ensure",
        "prevent", "avoid", "simplify", "upgrade", "downgrade",
        "setup", "configure", "deploy", "build", "test",
        "verify", "validate", "check", "log", "start",
        "stop", "finish", "show", "hide", "render",
        "display", "fetch", "get", "set", "reset",
    }
)  # fmt: skip


# (imperative, past, gerund, third person)
_CONJUGATIONS: tuple[tuple[str, str, str, str], ...] = (
    ("Add", "added", "adding", "adds"),
    ("Fix", "fixed", "fixing", "fixes"),
    ("Update", "updated", "updating", "updates"),
    ("Remove", "removed", "removing", "removes"),
    ("Change", "changed", "changing", "changes"),
    ("Create", "created", "creating", "creates"),
    ("Delete", "deleted", "deleting", "deletes"),
    ("Refactor", "refactored", "refactoring", "refactors"),
    ("Merge", "merged", "merging", "merges"),
    ("Improve", "improved", "improving", "improves"),
    ("Correct", "corrected", "correcting", "corrects"),
    ("Move", "moved", "moving", "moves"),
    ("Rename", "renamed", "renaming", "renames"),
    ("Use", "used", "using", "uses"),
    ("Optimize", "optimized", "optimizing", "optimizes"),
    ("Document", "documented", "documenting", "documents"),
    ("Handle", "handled", "handling", "handles"),
    ("Clean", "cleaned", "cleaning", "cleans"),
    ("Release", "released", "releasing", "releases"),
    ("Bump", "bumped", "bumping", "bumps"),
    ("Revert", "reverted", "reverting", "reverts"),
    ("Allow", "allowed", "allowing", "allows"),
    ("Ensure", "ensured", "ensuring", "ensures"),
    ("Prevent", "prevented", "preventing", "prevents"),
    ("Avoid", "avoided", "avoiding", "avoids"),
    ("Simplify", "simplified", "simplifying", "simplifies"),
    ("Upgrade", "upgraded", "upgrading", "upgrades"),
    ("Downgrade", "downgraded", "downgrading", "downgrades"),
    ("Deploy", "deployed", "deploying", "deploys"),
    ("Build", "built", "building", "builds"),
    ("Test", "tested", "testing", "tests"),
    ("Verify", "verified", "verifying", "verifies"),
    ("Validate", "validated", "validating", "validates"),
    ("Check", "checked", "checking", "checks"),
    ("Log", "logged", "logging", "logs"),
    ("Start", "started", "starting", "starts"),
    ("Stop", "stopped", "stopping", "stops"),
    ("Finish", "finished", "finishing", "finishes"),
    ("Show", "showed", "showing", "shows"),
    ("Hide", "hid", "hiding", "hides"),
    ("Render", "rendered", "rendering", "renders"),
    ("Display", "displayed", "displaying", "displays"),
    ("Fetch", "fetched", "fetching", "fetches"),
    ("Get", "got", "getting", "gets"),
    ("Set", "set", "setting", "sets"),
    ("Reset", "reset", "resetting", "resets"),
)

_VERB_FORMS: dict[str, str] = {form: verb for verb, *forms in _CONJUGATIONS for form in forms}

# Irregular entries that do not fit the past/gerund/third-person pattern
_VERB_FORMS.update(
    {
        "initial": "Init",
        "initialized": "Init",
        "initializing": "Init",
        "setup": "Setup",
        "configuring": "Configure",
        "configures": "Configure",
    }
)

VERB_MAP: MappingProxyType[str, str] = MappingProxyType(_VERB_FORMS)

VAGUE_WORDS: tuple[str, ...] = (
    "stuff",
    "things",
    "changes",
    "minor",
    "fixes",
    "misc",
    "various",
    "bug",
    "code",
    "temp",
    "wip",
    "work",
    "later",
    "done",
    "fixed",
    "added",
)

# Keyword table for guessing a type from free text, first match wins
TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("fix", "bug"), "fix"),
    (("add", "feat", "new"), "feat"),
    (("doc",), "docs"),
    (("style", "format"), "style"),
    (("refactor", "clean"), "refactor"),
    (("test",), "test"),
    (("perf", "optimize"), "perf"),
    (("build", "dep"), "build"),
    (("ci",), "ci"),
)
DEFAULT_TYPE = "chore"

TYPE_PREFIX_PATTERN: Pattern[str] = re.compile(r"^([a-z]+)(\(.*\))?:")
SENTENCE_PATTERN: Pattern[str] = re.compile(r"^[A-Z][a-z]+ .*")
ISSUE_REF_PATTERN: Pattern[str] = re.compile(r"#\d+|[A-Z]+-\d+")
ISSUE_FIX_PATTERN: Pattern[str] = re.compile(r"fix(es|ed)?\s+(#\d+|[a-z]+-\d+)", re.IGNORECASE)
