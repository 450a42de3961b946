import subprocess
from datetime import datetime, timedelta, timezone

import pytest
from commit_grader.git import GitError, GitRepo, parse_log, parse_name_status, parse_numstat

LOG = (
    "a1\x1fOcto Cat\x1f2024-04-30T10:00:00+02:00\x1ffeat: add login\n\nWith OAuth.\n\x1e\n"
    "b2\x1fOcto Cat\x1f2024-04-29T23:15:00+00:00\x1fwip\n\x1e\n"
)


class FakeGit:
    """Answers ``GitRepo._run`` calls from a table of canned outputs."""

    def __init__(self, outputs):
        self.outputs = outputs
        self.calls = []

    def __call__(self, *args, check=True):
        self.calls.append(args)
        for prefix, stdout in self.outputs.items():
            if args[: len(prefix)] == prefix:
                return subprocess.CompletedProcess(["git", *args], 0, stdout, "")
        raise GitError(f"unexpected command: {args}")


def test_parse_log():
    records = parse_log(LOG)

    assert [r[0] for r in records] == ["a1", "b2"]
    sha, author, date, message = records[0]
    assert author == "Octo Cat"
    assert date.utcoffset() == timedelta(hours=2)
    assert message == "feat: add login\n\nWith OAuth."
    assert records[1][3] == "wip"


def test_parse_log_empty():
    assert parse_log("") == []


def test_parse_name_status():
    output = "A\tsrc/new.py\nM\tREADME.md\nD\told.py\nR087\tsrc/a.py\tsrc/b.py\nT\tlink\n"
    assert parse_name_status(output) == [
        ("src/new.py", "added"),
        ("README.md", "modified"),
        ("old.py", "removed"),
        ("src/b.py", "renamed"),
        ("link", "modified"),
    ]


def test_parse_numstat():
    output = "3\t1\tsrc/new.py\n-\t-\tlogo.png\n"
    assert parse_numstat(output) == {"src/new.py": (3, 1), "logo.png": (None, None)}


def test_get_commits_scores_messages(monkeypatch):
    repo = GitRepo("/work/demo")
    fake = FakeGit({("log",): LOG})
    monkeypatch.setattr(repo, "_run", fake)

    commits = repo.get_commits(max_commits=10)

    assert fake.calls[0][:2] == ("log", "-10")
    assert [c.sha for c in commits] == ["a1", "b2"]
    assert commits[0].analysis.score == 10
    assert commits[1].analysis.score == 3
    assert commits[1].date == datetime(2024, 4, 29, 23, 15, tzinfo=timezone.utc)


def test_get_staged_changes(monkeypatch):
    repo = GitRepo("/work/demo")
    fake = FakeGit(
        {
            ("diff", "--cached", "--name-status"): "A\tsrc/components/Card.tsx\n",
            ("diff", "--cached", "--numstat"): "12\t0\tsrc/components/Card.tsx\n",
            ("diff", "--cached", "-M", "--"): "+export function Card() {}\n",
        }
    )
    monkeypatch.setattr(repo, "_run", fake)

    changes = repo.get_staged_changes()

    assert len(changes) == 1
    change = changes[0]
    assert change.filename == "src/components/Card.tsx"
    assert change.status == "added"
    assert (change.additions, change.deletions) == (12, 0)
    assert change.patch.startswith("+export")


def test_repository_checks(monkeypatch):
    repo = GitRepo("/nowhere")

    def failing(*args, check=True):
        raise GitError("fatal: not a git repository")

    monkeypatch.setattr(repo, "_run", failing)

    assert not repo.is_repository()
    with pytest.raises(GitError, match="Not a git repository"):
        repo.check_repository()


def test_name_count_and_hooks_dir(monkeypatch):
    repo = GitRepo("/work/demo")
    fake = FakeGit(
        {
            ("rev-parse", "--show-toplevel"): "/work/demo\n",
            ("rev-list", "--count"): "42\n",
            ("rev-parse", "--git-path"): ".git/hooks\n",
        }
    )
    monkeypatch.setattr(repo, "_run", fake)

    assert repo.name == "demo"
    assert repo.count_commits() == 42
    assert repo.hooks_dir() == repo.path / ".git" / "hooks"


def test_run_wraps_failures(tmp_path):
    repo = GitRepo(tmp_path)
    with pytest.raises(GitError):
        repo._run("definitely-not-a-git-command")
