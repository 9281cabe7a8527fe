"""
Git client infrastructure for zgit.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

The client never raises for a failed command. Non-zero exit, launch
failure and timeout all come back as an InspectionResult with
``failed=True`` so the caller decides how to react per call.
"""

import subprocess
import threading
from typing import Optional, List, Sequence, Set
import logging

from ..domain.status import InspectionResult, CANCELLED_MESSAGE

logger = logging.getLogger(__name__)

BRANCH_ARGS = ["rev-parse", "--abbrev-ref", "HEAD"]
EXACT_TAG_ARGS = ["describe", "--tags", "--exact-match"]
SHORT_COMMIT_ARGS = ["rev-parse", "--short", "HEAD"]
PORCELAIN_STATUS_ARGS = ["status", "--porcelain=v2"]


class GitClient:
    """
    Abstraction over git commands.

    Every call runs ``git -C <location> <args...>`` once, capturing
    stdout and stderr separately.

    Example:
        client = GitClient(timeout=10)
        result = client.current_branch("/path/to/repo")
        if not result.failed:
            print(result.text)
    """

    def __init__(self, timeout: Optional[float] = 30, git_binary: str = "git"):
        """
        Initialize GitClient.

        Args:
            timeout: Per-command timeout in seconds (None disables it)
            git_binary: Name or path of the git executable
        """
        self.timeout = timeout
        self.git_binary = git_binary
        self._lock = threading.Lock()
        self._processes: Set[subprocess.Popen] = set()
        self._killed: Set[subprocess.Popen] = set()
        self._cancelled = False

    def _command(self, location: str, arguments: Sequence[str]) -> List[str]:
        return [self.git_binary, "-C", str(location), *arguments]

    def run(self, location: str, arguments: Sequence[str]) -> InspectionResult:
        """
        Run a git command against a working copy.

        Args:
            location: Working copy path, passed with ``-C``
            arguments: Git subcommand and flags

        Returns:
            InspectionResult with captured output and failure flag
        """
        cmd = self._command(location, arguments)
        logger.debug(f"Running: {' '.join(cmd)}")

        with self._lock:
            if self._cancelled:
                return InspectionResult(failed=True, returncode=-1, message=CANCELLED_MESSAGE)
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
            except OSError as e:
                logger.debug(f"Git command could not start: {cmd} - {e}")
                return InspectionResult(
                    stderr=str(e).encode('utf-8'),
                    failed=True,
                    returncode=-1,
                    message=str(e),
                )
            self._processes.add(proc)

        try:
            try:
                stdout, stderr = proc.communicate(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                proc.kill()
                stdout, stderr = proc.communicate()
                logger.warning(f"Git command timed out: {' '.join(cmd)}")
                return InspectionResult(
                    stdout=stdout or b"",
                    stderr=stderr or b"",
                    failed=True,
                    returncode=-1,
                    message=f"timed out after {self.timeout}s",
                )
            except BaseException:
                proc.kill()
                proc.wait()
                raise
        finally:
            with self._lock:
                self._processes.discard(proc)
                killed = proc in self._killed
                self._killed.discard(proc)

        if killed and proc.returncode != 0:
            return InspectionResult(
                stdout=stdout, stderr=stderr, failed=True,
                returncode=proc.returncode, message=CANCELLED_MESSAGE,
            )

        if proc.returncode != 0:
            logger.debug(f"Git command failed ({proc.returncode}): {' '.join(cmd)}: {stderr!r}")
            return InspectionResult(
                stdout=stdout,
                stderr=stderr,
                failed=True,
                returncode=proc.returncode,
                message=f"exit status {proc.returncode}",
            )

        return InspectionResult(stdout=stdout, stderr=stderr, returncode=0)

    def terminate_all(self) -> int:
        """
        Kill every in-flight git process and refuse new ones.

        Returns:
            Number of processes that were signalled
        """
        with self._lock:
            self._cancelled = True
            processes = list(self._processes)

        killed = 0
        for proc in processes:
            if proc.poll() is None:
                try:
                    with self._lock:
                        self._killed.add(proc)
                    proc.kill()
                    killed += 1
                except OSError as e:
                    logger.debug(f"Could not kill git process {proc.pid}: {e}")
        if killed:
            logger.info(f"Terminated {killed} running git process(es)")
        return killed

    def reset(self) -> None:
        """Accept commands again after terminate_all()."""
        with self._lock:
            self._cancelled = False
            self._killed.clear()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def current_branch(self, location: str) -> InspectionResult:
        """Abbreviated name of the checked-out branch."""
        return self.run(location, BRANCH_ARGS)

    def exact_tag(self, location: str) -> InspectionResult:
        """Tag pointing exactly at HEAD, if any."""
        return self.run(location, EXACT_TAG_ARGS)

    def short_commit(self, location: str) -> InspectionResult:
        """Abbreviated id of HEAD."""
        return self.run(location, SHORT_COMMIT_ARGS)

    def porcelain_status(self, location: str) -> InspectionResult:
        """Machine-readable (porcelain v2) working tree status."""
        return self.run(location, PORCELAIN_STATUS_ARGS)

    def ref(self, location: str) -> InspectionResult:
        """
        Most specific reference for HEAD.

        Returns the exact tag lookup if it printed something, otherwise
        the short commit lookup.
        """
        tag = self.exact_tag(location)
        if not tag.failed and tag.text:
            return tag
        if tag.cancelled:
            return tag
        return self.short_commit(location)

