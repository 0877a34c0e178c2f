from pathlib import Path
from typing import Dict, Generator
from unittest.mock import MagicMock

import git
import pytest

from git_together.config import MemoryConfig
from git_together.together import GitTogether
from git_together.utils import SubprocessHandler

AUTHORS: Dict[str, str] = {
    "jh": "James Holden; jholden",
    "nn": "Naomi Nagata; nnagata",
    "ab": "Amos Burton; aburton",
    "ca": "Chrisjen Avasarala; avasarala@un.gov",
}


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch) -> Path:
    """Keep tests away from the user's git config and identity."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for name in ("XDG_CONFIG_HOME", "GIT_CONFIG_GLOBAL", "GIT_AUTHOR_NAME", "GIT_AUTHOR_EMAIL",
                 "GIT_COMMITTER_NAME", "GIT_COMMITTER_EMAIL", "GIT_TOGETHER_NO_SIGNOFF",
                 "GIT_TOGETHER_DEBUG", "GIT_TOGETHER_GIT"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def memory_config() -> MemoryConfig:
    """An in-memory store with the crew of the Rocinante configured."""
    data = {"git-together.domain": "rocinante.com", "user.name": "Test User", "user.email": "test@example.com"}
    data.update({f"git-together.authors.{initials}": raw for initials, raw in AUTHORS.items()})
    return MemoryConfig(data)


@pytest.fixture
def gt(memory_config: MemoryConfig) -> GitTogether:
    return GitTogether(memory_config)


@pytest.fixture
def handler() -> MagicMock:
    """A SubprocessHandler that pretends git always succeeds."""
    mock = MagicMock(spec=SubprocessHandler)
    mock.run_interactive.return_value = 0
    return mock


@pytest.fixture
def temp_git_repo(tmp_path, monkeypatch) -> Generator[git.Repo, None, None]:
    """Create a temporary Git repository with git-together authors configured."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    repo = git.Repo.init(repo_dir)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    repo.git.config("git-together.domain", "rocinante.com")
    for initials, raw in AUTHORS.items():
        repo.git.config(f"git-together.authors.{initials}", raw)

    monkeypatch.chdir(repo_dir)
    yield repo
    repo.close()


@pytest.fixture
def staged_file(temp_git_repo: git.Repo) -> Path:
    """Stage a new file so that a commit has something to record."""
    path = Path(temp_git_repo.working_dir) / "foo.txt"
    path.write_text("foo\n")
    temp_git_repo.index.add([str(path)])
    return path
