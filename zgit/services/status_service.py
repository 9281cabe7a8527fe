"""
Status aggregation service for zgit.

Collects branch, ref and working tree status for many repositories
concurrently and merges them into one ordered StatusReport.
Used by the `zgit status` and `zgit branch` commands.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Sequence, Tuple, Union

from ..config import load_config, get_int_setting, get_float_setting
from ..domain.repository import RepositoryDescriptor
from ..domain.status import ErrorEntry, InspectionResult, StatusReport, StatusRow
from ..domain.tag import TagSelector
from ..format_utils import truncate_middle, truncate_trailing
from ..infra.git_client import GitClient
from ..porcelain import summarize_status

logger = logging.getLogger(__name__)

NAME_WIDTH = 20
BRANCH_WIDTH = 25
REF_WIDTH = 10
LOCATION_WIDTH = 60

BRANCH = "branch"
REF = "ref"
STATUS = "status"
QUERY_KINDS = (BRANCH, REF, STATUS)


@dataclass
class StatusOptions:
    """Options for a status run."""
    max_workers: int = 8  # Upper bound on concurrent git processes
    stop_at_untracked: bool = False

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'StatusOptions':
        return cls(
            max_workers=get_int_setting(config, "general", "max_workers", cls.max_workers),
            stop_at_untracked=bool(config.get("status", {}).get("stop_at_first_untracked", False)),
        )


class ErrorLog:
    """
    Allocates error indices for one run.

    Indices start at 1 and increase by one per recorded failure. Only the
    merge step records into it, so numbering follows merge order.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._next_index = 1
        self.entries: List[ErrorEntry] = []

    def record(self, message: str, detail: str = "") -> ErrorEntry:
        with self._lock:
            entry = ErrorEntry(index=self._next_index, message=message, detail=detail)
            self._next_index += 1
            self.entries.append(entry)
        return entry

    def record_result(self, result: InspectionResult) -> ErrorEntry:
        return self.record(result.message or "command failed", result.error_text)

    def __len__(self) -> int:
        return len(self.entries)


class StatusService:
    """
    Service for status inspection across multiple repositories.

    Every (repository, query) pair is submitted to one bounded thread pool.
    Results are merged in repository order once they are all in, so rows
    and error numbering never depend on completion order.

    Example:
        service = StatusService(config)
        report = service.aggregate(repos, "api")
        render_status_report(report.rows, report.errors)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        options: Optional[StatusOptions] = None,
    ):
        """
        Initialize StatusService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
            options: Run options (derived from config if None)
        """
        self.config = config if config is not None else load_config()
        general = self.config.get("general", {})
        self.git = git_client or GitClient(
            timeout=get_float_setting(self.config, "general", "timeout_seconds", 30),
            git_binary=general.get("git_binary", "git"),
        )
        self.options = options or StatusOptions.from_config(self.config)
        self.last_report: Optional[StatusReport] = None
        self._cancel_event = threading.Event()

    @staticmethod
    def select(
        repositories: Sequence[RepositoryDescriptor],
        tag_filter: Union[TagSelector, str, None] = "",
    ) -> List[RepositoryDescriptor]:
        """Repositories selected by the tag filter, in list order."""
        return [repo for repo in repositories if repo.matches(tag_filter)]

    def cancel(self) -> None:
        """Stop the current run and kill its git processes."""
        if self._cancel_event.is_set():
            return
        logger.warning("Status run cancelled, terminating running git commands")
        self._cancel_event.set()
        self.git.terminate_all()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _begin_run(self) -> None:
        """Clear the cancellation left over from a previous run."""
        self._cancel_event.clear()
        self.git.reset()

    def _query(self, kind: str, location: str) -> InspectionResult:
        if kind == BRANCH:
            return self.git.current_branch(location)
        if kind == REF:
            return self.git.ref(location)
        return self.git.porcelain_status(location)

    def _result_of(self, future, kind: str, repo: RepositoryDescriptor) -> InspectionResult:
        try:
            return future.result()
        except Exception as e:
            logger.error(f"{kind} query failed for {repo.name}: {e}")
            return InspectionResult(
                stderr=repr(e).encode('utf-8'),
                failed=True,
                returncode=-1,
                message=f"{type(e).__name__}: {e}",
            )

    def _collect(
        self,
        repositories: List[RepositoryDescriptor],
    ) -> Dict[int, Dict[str, InspectionResult]]:
        """
        Run every query concurrently.

        Returns:
            Results keyed by list position, then by query kind. After a
            cancellation only queries that finished cleanly are present.
        """
        results: Dict[int, Dict[str, InspectionResult]] = {pos: {} for pos in range(len(repositories))}
        workers = max(1, min(self.options.max_workers, len(repositories) * len(QUERY_KINDS)))

        futures = {}
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="zgit-status")
        try:
            for pos, repo in enumerate(repositories):
                for kind in QUERY_KINDS:
                    if self.cancelled:
                        break
                    future = executor.submit(self._query, kind, repo.location)
                    futures[future] = (pos, kind)

            for future in as_completed(futures):
                if self.cancelled:
                    break
                pos, kind = futures[future]
                results[pos][kind] = self._result_of(future, kind, repositories[pos])
                logger.debug(f"Finished {kind} query for {repositories[pos].name}")
        except KeyboardInterrupt:
            self.cancel()
        finally:
            executor.shutdown(wait=True, cancel_futures=self.cancelled)

        if self.cancelled:
            # Keep whatever completed before the cancellation took effect.
            for future, (pos, kind) in futures.items():
                if kind in results[pos] or not future.done() or future.cancelled():
                    continue
                result = self._result_of(future, kind, repositories[pos])
                if not result.cancelled:
                    results[pos][kind] = result
            for repo_results in results.values():
                if any(r.cancelled for r in repo_results.values()):
                    repo_results.clear()

        return results

    def _build_row(
        self,
        repo: RepositoryDescriptor,
        results: Dict[str, InspectionResult],
        errors: ErrorLog,
    ) -> StatusRow:
        branch_result = results[BRANCH]
        if branch_result.failed:
            branch = errors.record_result(branch_result).placeholder
        else:
            branch = branch_result.text

        ref_result = results[REF]
        ref_label = "" if ref_result.failed else ref_result.text

        ref_label = truncate_trailing(ref_label, REF_WIDTH)
        branch = truncate_trailing(branch, BRANCH_WIDTH)

        status_result = results[STATUS]
        if status_result.failed:
            staged = unstaged = errors.record_result(status_result).placeholder
        else:
            staged, unstaged = summarize_status(
                status_result.stdout,
                stop_at_untracked=self.options.stop_at_untracked,
            )

        return StatusRow(
            name=truncate_middle(repo.name, NAME_WIDTH),
            branch=branch,
            ref_label=ref_label,
            staged=staged,
            unstaged=unstaged,
            location=truncate_middle(repo.location, LOCATION_WIDTH),
        )

    def aggregate(
        self,
        repositories: Sequence[RepositoryDescriptor],
        tag_filter: Union[TagSelector, str, None] = "",
    ) -> StatusReport:
        """
        Collect status for every selected repository.

        Failures never abort the batch: each one becomes an ErrorEntry and
        the affected cells show ``See Error: N``.

        If the run is cancelled, the report holds the rows of repositories
        whose queries had all completed, and ``cancelled`` is set.

        Args:
            repositories: Registered repositories, in display order
            tag_filter: Tag name or TagSelector; empty selects all

        Returns:
            StatusReport with rows in list order and errors in index order
        """
        self._begin_run()
        selected = self.select(repositories, tag_filter)
        report = StatusReport()
        self.last_report = report

        if not selected:
            logger.info("No repositories selected")
            return report

        logger.info(f"Inspecting {len(selected)} repositories with up to {self.options.max_workers} workers")
        results = self._collect(selected)

        errors = ErrorLog()
        for pos, repo in enumerate(selected):
            repo_results = results[pos]
            if len(repo_results) < len(QUERY_KINDS):
                continue
            report.rows.append(self._build_row(repo, repo_results, errors))

        report.errors = errors.entries
        report.cancelled = self.cancelled
        if report.cancelled:
            logger.warning(f"Partial report: {len(report.rows)} of {len(selected)} repositories")
        return report

    def branches(
        self,
        repositories: Sequence[RepositoryDescriptor],
        tag_filter: Union[TagSelector, str, None] = "",
    ) -> List[Tuple[RepositoryDescriptor, InspectionResult]]:
        """Current branch of each selected repository, in list order."""
        self._begin_run()
        selected = self.select(repositories, tag_filter)
        if not selected:
            return []

        workers = max(1, min(self.options.max_workers, len(selected)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="zgit-branch") as executor:
            results = list(executor.map(lambda r: self.git.current_branch(r.location), selected))
        return list(zip(selected, results))
