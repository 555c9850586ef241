import sys
from pathlib import Path
from typing import Generator, List
from unittest.mock import MagicMock

import git
import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from git_ai_commit.config import CLIOptions, ConfigManager, Provider
from git_ai_commit.git import GitOperations
from git_ai_commit.providers import LLMProvider
from git_ai_commit.utils import GitChanges


class FakeProvider(LLMProvider):
    """Provider returning canned text and recording every prompt."""

    name = "fake"

    def __init__(self, branch_response: str = "feature-add-math",
                 commit_response: str = "feat: add math helpers") -> None:
        self.branch_response = branch_response
        self.commit_response = commit_response
        self.prompts: List[str] = []

    def _complete(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        if prompt.startswith("Based on the following git changes"):
            return self.branch_response
        return self.commit_response


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def sample_changes() -> GitChanges:
    return GitChanges(
        status=" M calc.py\n?? notes.md",
        diff="diff --git a/calc.py b/calc.py\n-    return 1\n+    return 2",
        has_staged_changes=False,
        has_unstaged_changes=True,
    )


@pytest.fixture
def mock_git(sample_changes) -> MagicMock:
    """GitOperations double for a repository with changes and no branches."""
    mock = MagicMock(spec=GitOperations)
    mock.is_repository.return_value = True
    mock.get_changes.return_value = sample_changes
    mock.has_changes.return_value = True
    mock.branch_exists.return_value = False
    mock.get_staged_diff.return_value = sample_changes.diff
    return mock


def make_options(provider: Provider = Provider.OPENAI, dry_run: bool = False,
                 verbose: bool = False) -> CLIOptions:
    return CLIOptions(provider=provider, dry_run=dry_run, verbose=verbose)


@pytest.fixture
def config_manager(tmp_path) -> ConfigManager:
    """ConfigManager pointed at files inside a temporary directory."""
    (tmp_path / "project").mkdir()
    (tmp_path / "home").mkdir()
    return ConfigManager(
        local_path=tmp_path / "project" / ".git-ai-commit.json",
        global_path=tmp_path / "home" / ".git-ai-commit.json",
    )


@pytest.fixture
def temp_git_repo(tmp_path) -> Generator[Path, None, None]:
    """Create a temporary Git repository with one commit and a bare origin."""
    origin_dir = tmp_path / "origin.git"
    git.Repo.init(origin_dir, bare=True)

    repo_dir = tmp_path / "repo"
    repo = git.Repo.init(repo_dir)

    # Configure git user for commits
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")

    calc = repo_dir / "calc.py"
    calc.write_text("def add(a: int, b: int) -> int:\n    return a + b\n")
    repo.index.add(["calc.py"])
    repo.index.commit("Initial commit")
    repo.create_remote("origin", str(origin_dir))

    yield repo_dir
    repo.close()


@pytest.fixture
def repo_with_changes(temp_git_repo: Path) -> git.Repo:
    """Temporary repository with one modified and one untracked file."""
    calc = temp_git_repo / "calc.py"
    calc.write_text(calc.read_text() + "\ndef multiply(a: int, b: int) -> int:\n    return a * b\n")
    (temp_git_repo / "notes.md").write_text("# Notes\n")
    return git.Repo(temp_git_repo)


@pytest.fixture
def repo_git(temp_git_repo: Path) -> GitOperations:
    return GitOperations(cwd=temp_git_repo)
