"""
Status domain objects for zgit.

These are the values produced and consumed during one status run:
- InspectionResult: outcome of a single git invocation
- ChangeCounts: new/modified/deleted counters for one partition
- StatusRow: display strings for one repository
- ErrorEntry: an indexed failure referenced from a StatusRow
- StatusReport: the rows and errors of a whole run

None of them outlive the run that created them.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List

ERROR_PLACEHOLDER = "See Error: {index}"
CANCELLED_MESSAGE = "cancelled"


@dataclass(frozen=True)
class InspectionResult:
    """Result of one git invocation. Never raised, always returned."""
    stdout: bytes = b""
    stderr: bytes = b""
    failed: bool = False
    returncode: int = 0
    message: str = ""

    @property
    def text(self) -> str:
        """Decoded, stripped standard output."""
        return self.stdout.decode('utf-8', errors='replace').strip()

    @property
    def error_text(self) -> str:
        """Decoded, stripped standard error."""
        return self.stderr.decode('utf-8', errors='replace').strip()

    @property
    def cancelled(self) -> bool:
        """True if the command was refused or killed by a cancellation."""
        return self.failed and self.message == CANCELLED_MESSAGE


@dataclass(frozen=True)
class ChangeCounts:
    """Counters for one side (staged or unstaged) of the working tree."""
    new: int = 0
    modified: int = 0
    deleted: int = 0

    def __post_init__(self):
        if self.new < 0 or self.modified < 0 or self.deleted < 0:
            raise ValueError(f"Change counts must be non-negative: {self!r}")

    @property
    def empty(self) -> bool:
        return self.new == 0 and self.modified == 0 and self.deleted == 0

    def format(self) -> str:
        """Render as ``+new ~modified -deleted``, or ``""`` when nothing changed."""
        if self.empty:
            return ""
        return f"+{self.new} ~{self.modified} -{self.deleted}"

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class StatusRow:
    """One line of the status table. All fields are display strings."""
    name: str
    branch: str
    ref_label: str
    staged: str
    unstaged: str
    location: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'branch': self.branch,
            'ref': self.ref_label,
            'staged': self.staged,
            'unstaged': self.unstaged,
            'location': self.location,
        }


@dataclass(frozen=True)
class ErrorEntry:
    """A failure that a StatusRow points at through its index."""
    index: int
    message: str
    detail: str = ""

    @property
    def placeholder(self) -> str:
        return ERROR_PLACEHOLDER.format(index=self.index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'message': self.message,
            'detail': self.detail,
        }


@dataclass
class StatusReport:
    """Rows and errors of one aggregation run."""
    rows: List[StatusRow] = field(default_factory=list)
    errors: List[ErrorEntry] = field(default_factory=list)
    cancelled: bool = False

    @property
    def success(self) -> bool:
        """True if no error entries were recorded."""
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rows': [row.to_dict() for row in self.rows],
            'errors': [error.to_dict() for error in self.errors],
            'cancelled': self.cancelled,
        }
