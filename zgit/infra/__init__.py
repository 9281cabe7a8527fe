"""
Infrastructure layer for zgit.

Contains abstractions for external systems:
- GitClient: Git command execution
- RepoStore: JSON repository registry

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient
from .repo_store import RepoStore

__all__ = [
    'GitClient',
    'RepoStore',
]
