import pytest
from commit_grader.diffs import match_rule, synthesize_message
from commit_grader.models import FileChange


def _files(*names, status="modified"):
    return [FileChange(filename=name, status=status) for name in names]


def test_no_files_gives_empty_message():
    assert synthesize_message([]) == ""
    assert match_rule([]) is None


def test_added_component():
    files = [FileChange("src/components/UserCard.tsx", "added")]
    assert synthesize_message(files) == "feat: add UserCard component"


def test_readme_change_is_docs():
    assert synthesize_message(_files("README.md")) == "docs: update README documentation"


def test_other_docs():
    message = synthesize_message(_files("docs/guide.md", "LICENSE"))
    assert message == "docs: update project documentation"


@pytest.mark.parametrize(
    "patch, expected",
    [
        ('-  "version": "1.1.0",\n+  "version": "1.2.0",', "chore: bump version"),
        ('   "dependencies": {\n+    "zod": "^3.0.0",', "chore: update dependencies"),
        (None, "chore: update project dependencies"),
    ],
)
def test_package_manifest(patch, expected):
    files = [FileChange("package.json", "modified", patch=patch), FileChange("yarn.lock")]
    assert synthesize_message(files) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("tsconfig.json", "chore: update TypeScript configuration"),
        (".eslintrc.json", "chore: update linting configuration"),
        ("vite.config.ts", "chore: update build configuration"),
        (".env.example", "chore: update environment configuration"),
        (".github/workflows/ci.yml", "chore: update configuration files"),
    ],
)
def test_config_files(name, expected):
    assert synthesize_message(_files(name)) == expected


def test_stylesheets():
    assert synthesize_message(_files("src/a.css", "src/b.scss")) == "style: update visual styles"


def test_test_files():
    files = _files("tests/test_quality.py", "src/Button.test.tsx")
    assert synthesize_message(files) == "test: update test suite"


def test_assets():
    files = _files("public/logo.png", "public/font.woff2")
    assert synthesize_message(files) == "chore: update static assets"


def test_whole_set_rules_win_over_single_file_rules():
    files = _files("src/__tests__/Button.tsx")
    assert match_rule(files).name == "tests"
    assert synthesize_message(files) == "test: update test suite"


@pytest.mark.parametrize(
    "patch, expected",
    [
        ("+  useEffect(() => {}, [])", "fix: update side effects in Profile"),
        ("+  const [open, setOpen] = useState(false)", "feat: add state management to Profile"),
        ("+interface ProfileProps {", "refactor: update types for Profile"),
        ("+  <div />", "feat: update Profile component"),
    ],
)
def test_modified_component_reads_patch(patch, expected):
    files = [FileChange("src/components/Profile.tsx", "modified", patch=patch)]
    assert synthesize_message(files) == expected


def test_removed_component():
    files = [FileChange("src/components/Old.jsx", "removed")]
    assert synthesize_message(files) == "refactor: remove Old component"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("src/hooks/useAuth.ts", "feat: update useAuth hook"),
        ("src/services/github.ts", "feat: update API integration logic"),
        ("src/UserService.py", "feat: update API integration logic"),
        ("src/utils/format.ts", "refactor: update utility functions"),
        ("src/types/index.ts", "refactor: update type definitions"),
        ("src/global.d.ts", "refactor: update type definitions"),
        ("src/user.ts", "fix: update user.ts"),
    ],
)
def test_single_file_conventions(name, expected):
    assert synthesize_message(_files(name)) == expected


@pytest.mark.parametrize(
    "status, expected",
    [
        ("added", "feat: add main.py"),
        ("removed", "refactor: remove main.py"),
        ("renamed", "refactor: rename main.py"),
        ("modified", "fix: update main.py"),
    ],
)
def test_single_file_status_fallback(status, expected):
    assert synthesize_message([FileChange("main.py", status)]) == expected


def test_component_with_styles():
    files = _files("src/components/Button.tsx", "src/components/Button.css")
    assert synthesize_message(files) == "feat: style and update Button component"


def test_component_with_tests():
    files = _files("src/components/Button.tsx", "src/components/Button.test.tsx")
    assert synthesize_message(files) == "feat: update component and tests"


def test_utility_cleanup():
    files = _files("src/utils/a.ts", "src/types/b.ts", "src/constants/c.ts")
    assert synthesize_message(files) == "refactor: cleanup project utilities and types"


def test_full_feature():
    files = _files("src/components/List.tsx", "src/services/api.ts")
    assert synthesize_message(files) == "feat: implement new feature with API integration"


def test_all_renamed():
    files = _files("a.py", "b.py", status="renamed")
    assert match_rule(files) is None
    assert synthesize_message(files) == "refactor: rename 2 files for better organization"


def test_mostly_added():
    files = [
        FileChange("src/a.py", "added"),
        FileChange("src/b.py", "added"),
        FileChange("src/c.py", "modified"),
    ]
    assert synthesize_message(files) == "feat: add 2 new files to project structure"


def test_mostly_removed():
    files = [
        FileChange("src/a.py", "removed"),
        FileChange("src/b.py", "removed"),
        FileChange("src/c.py", "modified"),
    ]
    assert synthesize_message(files) == "refactor: remove 2 unused files from project"


def test_generic_update():
    files = _files("src/a.py", "src/b.py")
    assert synthesize_message(files) == "feat: comprehensive update to 2 project files"


def test_synthesize_is_deterministic():
    files = _files("src/components/List.tsx", "src/services/api.ts", "README.md")
    assert synthesize_message(files) == synthesize_message(list(files))


def test_nested_component_with_service():
    files = _files("src/components/forms/Input.tsx", "src/services/api.ts")
    assert match_rule(files).name == "full-feature"
    assert synthesize_message(files) == "feat: implement new feature with API integration"


def test_nested_utilities_cleanup():
    files = _files("src/utils/dates/format.ts", "src/types/api/user.ts")
    assert synthesize_message(files) == "refactor: cleanup project utilities and types"


def test_cleanup_needs_every_file_in_shared_code():
    files = _files("src/utils/format.ts", "src/app.ts")
    assert match_rule(files) is None


@pytest.mark.parametrize(
    "files, expected",
    [
        ([FileChange("pyproject.toml"), FileChange("uv.lock")], "chore: update project dependencies"),
        ([FileChange("poetry.lock")], "chore: update project dependencies"),
        (
            [FileChange("pyproject.toml", patch='-version = "1.0.0"\n+version = "1.1.0"')],
            "chore: bump version",
        ),
        (
            [FileChange("pyproject.toml", patch=' dependencies = [\n+    "httpx>=0.25",')],
            "chore: update dependencies",
        ),
    ],
)
def test_python_manifests(files, expected):
    assert synthesize_message(files) == expected


def test_unchanged_version_line_is_not_a_bump():
    patch = '   "version": "1.1.0",\n   "dependencies": {\n+    "zod": "^3.0.0",'
    files = [FileChange("package.json", patch=patch)]
    assert synthesize_message(files) == "chore: update dependencies"
