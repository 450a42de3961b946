import json
from datetime import datetime, timezone

import pytest
from click.testing import CliRunner
from commit_grader import cli
from commit_grader.github import RepositoryNotFoundError
from commit_grader.models import Commit, FileChange
from commit_grader.quality import score_commit_message


def _commit(sha, message):
    return Commit(
        sha=sha,
        message=message,
        author="Octo Cat",
        date=datetime(2024, 4, 30, 10, 0, tzinfo=timezone.utc),
        analysis=score_commit_message(message),
    )


COMMITS = [_commit("a1b2c3d4e5", "feat: add user login"), _commit("f6e5d4c3b2", "wip")]


class FakeClient:
    error = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        pass

    def fetch_commits(self, repo, page=1, rules=None):
        if self.error:
            raise self.error
        return list(COMMITS), 120

    def fetch_commit_files(self, repo, sha):
        return [FileChange("src/components/Card.tsx", "added", additions=12, deletions=0)]

    def fetch_user_repos(self, username):
        return []


class FakeRepo:
    def __init__(self, path=None):
        self.path = path

    def check_repository(self):
        pass

    @property
    def name(self):
        return "local-demo"

    def count_commits(self):
        return 2

    def get_commits(self, max_commits=None, rules=None):
        return list(COMMITS)

    def get_staged_changes(self):
        return [FileChange("README.md", "modified")]


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("COMMIT_GRADER_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr(cli, "GitHubClient", FakeClient)
    monkeypatch.setattr(cli, "GitRepo", FakeRepo)
    FakeClient.error = None
    return CliRunner()


def test_score(runner):
    result = runner.invoke(cli.main, ["score", "fixed stuff"])

    assert result.exit_code == 0
    assert "Score:" in result.output
    assert "Suggestion" in result.output


def test_score_json(runner):
    result = runner.invoke(cli.main, ["score", "feat: add user login", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["score"] == 10
    assert data["status"] == "good"
    assert data["conventional_type"] == "feat"


def test_score_from_stdin(runner):
    result = runner.invoke(cli.main, ["score", "-", "--json"], input="fix: handle null avatar\n")

    assert result.exit_code == 0
    assert json.loads(result.output)["conventional_type"] == "fix"


def test_check_accepts_good_message(runner, tmp_path):
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text("feat: add user login\n# Please enter the message\n", encoding="utf-8")

    result = runner.invoke(cli.main, ["check", str(message_file)])

    assert result.exit_code == 0


def test_check_rejects_poor_message(runner, tmp_path):
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text("wip\n", encoding="utf-8")

    result = runner.invoke(cli.main, ["check", str(message_file), "--min-score", "7"])

    assert result.exit_code == 1
    assert "3/10" in result.output


def test_repo_from_github_is_saved(runner, tmp_path):
    report = tmp_path / "report.md"
    result = runner.invoke(
        cli.main, ["repo", "octo/demo", "--export", "md", "-o", str(report)]
    )

    assert result.exit_code == 0, result.output
    assert "octo/demo" in result.output
    assert "Total commits: 120" in result.output
    assert report.read_text(encoding="utf-8").startswith("# octo/demo - Commit Analysis Report")

    history = json.loads((tmp_path / "home" / "history.json").read_text(encoding="utf-8"))
    assert history[0]["repo_name"] == "octo/demo"
    assert history[0]["total_commits"] == 120


def test_repo_without_saving(runner, tmp_path):
    result = runner.invoke(cli.main, ["repo", "octo/demo", "--no-save"])

    assert result.exit_code == 0
    assert not (tmp_path / "home" / "history.json").exists()


def test_repo_from_local_path(runner, tmp_path):
    result = runner.invoke(cli.main, ["repo", str(tmp_path), "--export", "csv"])

    assert result.exit_code == 0, result.output
    assert "local-demo" in result.output
    assert "SHA,Message,Author,Date,Score,Status,Type" in result.output


def test_repo_errors_exit_with_message(runner):
    FakeClient.error = RepositoryNotFoundError("Repository not found.")

    result = runner.invoke(cli.main, ["repo", "octo/missing"])

    assert result.exit_code == 1
    assert "Repository not found" in result.output


def test_repo_rejects_invalid_target(runner):
    result = runner.invoke(cli.main, ["repo", "not a repository"])

    assert result.exit_code == 1
    assert "Invalid GitHub repository" in result.output


def test_suggest_from_staged_changes(runner):
    result = runner.invoke(cli.main, ["suggest"])

    assert result.exit_code == 0
    assert result.output.strip().splitlines()[-1] == "docs: update README documentation"


def test_suggest_for_github_commit(runner):
    result = runner.invoke(cli.main, ["suggest", "--repo", "octo/demo", "--sha", "a1"])

    assert result.exit_code == 0
    assert result.output.strip().splitlines()[-1] == "feat: add Card component"


def test_suggest_sha_requires_repo(runner):
    result = runner.invoke(cli.main, ["suggest", "--sha", "a1"])

    assert result.exit_code == 2


def test_history_commands(runner):
    runner.invoke(cli.main, ["repo", "octo/demo"])

    listed = runner.invoke(cli.main, ["history", "list"])
    assert listed.exit_code == 0
    assert "octo/demo" in listed.output

    tagged = runner.invoke(cli.main, ["history", "tag", "octo/demo", "work"])
    assert tagged.exit_code == 0

    exported = runner.invoke(cli.main, ["history", "export", "--format", "csv"])
    assert exported.exit_code == 0
    assert "octo/demo" in exported.output
    assert "work" in exported.output

    untagged = runner.invoke(cli.main, ["history", "untag", "octo/other", "work"])
    assert untagged.exit_code == 1
    assert "No history for octo/other" in untagged.output

    cleared = runner.invoke(cli.main, ["history", "clear", "--yes"])
    assert cleared.exit_code == 0
    assert "No history yet" in runner.invoke(cli.main, ["history", "list"]).output


VERBOSE_COMMIT = """Updated styling
# Please enter the commit message for your changes.
# ------------------------ >8 ------------------------
# Do not modify or remove the line above.
diff --git a/src/app.css b/src/app.css
+/* spacing tweak for #123 */
+.card { margin: 0 }
"""


def test_strip_comments_stops_at_scissors():
    assert cli.strip_comments(VERBOSE_COMMIT) == "Updated styling"


def test_check_ignores_verbose_diff(runner, tmp_path):
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text(VERBOSE_COMMIT, encoding="utf-8")

    result = runner.invoke(cli.main, ["check", str(message_file), "--min-score", "9"])

    assert result.exit_code == 1
    assert "8/10" in result.output


def test_check_strict(runner, tmp_path):
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text("Add pagination to the user list\n", encoding="utf-8")

    relaxed = runner.invoke(cli.main, ["check", str(message_file), "--min-score", "9"])
    strict = runner.invoke(
        cli.main, ["check", str(message_file), "--min-score", "9", "--strict"]
    )

    assert relaxed.exit_code == 0
    assert strict.exit_code == 1
    assert "Missing conventional type" in strict.output
