"""
Repository registry persistence for zgit.

The registry is a JSON array of ``{"name", "location", "tag"}`` objects,
the format kept in ``~/.config/zg-repos.json``.

Writes are atomic (write to temp, then rename) and guarded by a lock.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..domain.repository import RepositoryDescriptor
from ..domain.tag import TagSelector
from ..exit_codes import RegistryError

logger = logging.getLogger(__name__)


class RepoStore:
    """
    JSON-backed list of registered repositories.

    Example:
        store = RepoStore(Path("~/.config/zg-repos.json"))
        store.register("/home/me/src/api", tag="api")
        for repo in store.filter("api"):
            print(repo.name)
    """

    def __init__(self, path: Union[str, Path], auto_create: bool = True):
        """
        Initialize RepoStore.

        Args:
            path: Path to the registry JSON file
            auto_create: Create the file (holding ``[]``) if it does not exist
        """
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

        if auto_create:
            self._ensure_exists()

    def _ensure_exists(self) -> None:
        """Create file and parent directories if needed."""
        if self.path.exists():
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write_atomic([])
        except OSError as e:
            raise RegistryError(f"Failed to create registry file {self.path}: {e}") from e
        logger.info(f"Created empty repository registry at {self.path}")

    def _write_atomic(self, repos: List[RepositoryDescriptor]) -> None:
        """Write data atomically using temp file and rename."""
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w') as f:
                json.dump([r.to_dict() for r in repos], f, indent=2, ensure_ascii=False)
                f.write('\n')

            os.replace(temp_path, self.path)

        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def load(self) -> List[RepositoryDescriptor]:
        """
        Read all registered repositories, in registration order.

        Raises:
            RegistryError: If the file cannot be read or is not a JSON list
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r') as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise RegistryError(f"Registry file {self.path} is not valid JSON: {e}") from e
        except OSError as e:
            raise RegistryError(f"Failed to read registry file {self.path}: {e}") from e

        if raw is None:
            return []
        if not isinstance(raw, list):
            raise RegistryError(f"Registry file {self.path} must contain a JSON list")

        repos = []
        for entry in raw:
            if not isinstance(entry, dict):
                logger.warning(f"Skipping malformed registry entry: {entry!r}")
                continue
            repos.append(RepositoryDescriptor.from_dict(entry))
        return repos

    def save(self, repos: List[RepositoryDescriptor]) -> None:
        with self._lock:
            try:
                self._write_atomic(list(repos))
            except OSError as e:
                raise RegistryError(f"Failed to save repos to {self.path}: {e}") from e

    def filter(self, selector: Union[TagSelector, str, None] = None) -> List[RepositoryDescriptor]:
        """Registered repositories selected by a tag filter, in order."""
        return [r for r in self.load() if r.matches(selector)]

    def register(self, location: Union[str, Path], tag: str = "") -> RepositoryDescriptor:
        """
        Add a working copy to the registry.

        The location is made absolute and the name is its last component.

        Raises:
            RegistryError: If the location does not exist
        """
        path = Path(location).expanduser().absolute()
        if not path.exists():
            raise RegistryError(f"Invalid path: {path}")

        descriptor = RepositoryDescriptor.from_path(path, tag=tag)
        repos = self.load()
        repos.append(descriptor)
        self.save(repos)
        logger.info(f"Registered {descriptor.name} at {descriptor.location}")
        return descriptor

    def unregister(self, location: Union[str, Path]) -> Optional[RepositoryDescriptor]:
        """
        Remove the first entry whose location matches.

        Returns:
            The removed descriptor, or None if nothing matched
        """
        target = str(Path(location).expanduser().absolute())
        repos = self.load()
        for i, repo in enumerate(repos):
            if repo.location == target:
                removed = repos.pop(i)
                self.save(repos)
                logger.info(f"Unregistered {removed.name} at {removed.location}")
                return removed
        return None
