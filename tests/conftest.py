"""
Shared fixtures for zgit tests.
"""

import os
import shutil
import subprocess
import pytest
from pathlib import Path

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` with a throwaway identity and return stdout."""
    env = os.environ.copy()
    env.update({
        "GIT_AUTHOR_NAME": "Test",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test",
        "GIT_COMMITTER_EMAIL": "test@example.com",
        "GIT_CONFIG_NOSYSTEM": "1",
        "HOME": str(repo.parent),
    })
    result = subprocess.run(
        ["git", "-C", str(repo), *args],
        capture_output=True, text=True, check=True, env=env,
    )
    return result.stdout


@pytest.fixture
def make_repo(tmp_path):
    """Factory creating a git repository with one commit on branch ``main``."""

    def _make(name: str = "repo") -> Path:
        repo = tmp_path / name
        repo.mkdir()
        git(repo, "init", "-q")
        git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
        (repo / "README.md").write_text("hello\n")
        (repo / "doomed.txt").write_text("bye\n")
        git(repo, "add", ".")
        git(repo, "commit", "-q", "-m", "initial")
        return repo

    return _make


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir and clear ZGIT_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("ZGIT_"):
            monkeypatch.delenv(key)
    return home
