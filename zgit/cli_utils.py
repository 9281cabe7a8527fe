"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from dataclasses import dataclass, field
from functools import wraps
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from .config import load_config, get_repos_file, setup_logging
from .domain.repository import RepositoryDescriptor
from .domain.tag import NoTag, TagSelector
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError, NoReposFoundError
)
from .infra.repo_store import RepoStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """
    Per-invocation state shared by all commands.

    The config file path is an explicit value here rather than a global;
    config and registry are loaded on first use so that load errors are
    reported through standard_command.
    """
    config_path: Optional[Path] = None
    tag: TagSelector = field(default_factory=NoTag)
    verbose: bool = False
    _config: Optional[Dict[str, Any]] = None
    _store: Optional[RepoStore] = None

    @property
    def config(self) -> Dict[str, Any]:
        if self._config is None:
            self._config = load_config(self.config_path)
            if not self.verbose:
                log = self._config.get('logging', {})
                setup_logging(log.get('level', 'WARNING'), log.get('format', '%(levelname)s: %(message)s'))
        return self._config

    @property
    def store(self) -> RepoStore:
        if self._store is None:
            self._store = RepoStore(get_repos_file(self.config))
        return self._store

    def repos(self) -> List[RepositoryDescriptor]:
        return self.store.load()

    def selected(self, repos: List[RepositoryDescriptor]) -> List[RepositoryDescriptor]:
        """
        Repositories matching the @tag filter.

        Raises:
            NoReposFoundError: If a tag is set and nothing carries it
        """
        selected = [r for r in repos if r.matches(self.tag)]
        if self.tag and not selected:
            raise NoReposFoundError(f"No repositories tagged '{self.tag.name}'")
        return selected


pass_app = click.make_pass_decorator(AppContext, ensure=True)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Consistent error handling with POSIX exit codes
    - Errors reported on stderr, data on stdout

    The wrapped command may return an int exit code; None means success.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            code = func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("ERROR: Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            click.echo(f"ERROR: {e}", err=True)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            click.echo(f"ERROR: Command failed: {e}", err=True)
            sys.exit(get_exit_code_for_exception(e))

        sys.exit(code if code is not None else SUCCESS)

    return wrapper
