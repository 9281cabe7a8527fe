"""
Parser for ``git status --porcelain=v2`` output.

Reduces the change records of one repository to two ChangeCounts,
one for the index (staged) and one for the working tree (unstaged).

Recognised records:
    ? <path>                  untracked file -> unstaged new
    1 <XY> ...                ordinary changed entry
    2 <XY> ...                renamed or copied entry

XY code table:
    A.        staged new
    M.  R.    staged modified (renames count as modifications)
    D.        staged deleted
    .M  .R    unstaged modified
    .D        unstaged deleted

Every other code, header (``#``), ignored (``!``) and unmerged (``u``)
record is skipped, as is any line too short to carry a code.
"""

from typing import Tuple, Union
import logging

from .domain.status import ChangeCounts

logger = logging.getLogger(__name__)

UNTRACKED_MARKER = "?"
CHANGE_RECORDS = frozenset({"1", "2"})

# code -> (staged?, counter)
CODE_TABLE = {
    "A.": (True, "new"),
    "M.": (True, "modified"),
    "R.": (True, "modified"),
    "D.": (True, "deleted"),
    ".M": (False, "modified"),
    ".R": (False, "modified"),
    ".D": (False, "deleted"),
}


def _decode(raw: Union[bytes, str, None]) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode('utf-8', errors='replace')
    return raw


def parse_status(
    raw: Union[bytes, str, None],
    stop_at_untracked: bool = False,
) -> Tuple[ChangeCounts, ChangeCounts]:
    """
    Parse porcelain v2 status output.

    Args:
        raw: Output of ``git status --porcelain=v2``
        stop_at_untracked: Stop scanning at the first untracked entry,
            counting it once. Matches the counts of older zg releases,
            which undercount everything after that line.

    Returns:
        Tuple of (staged, unstaged) ChangeCounts
    """
    staged = {"new": 0, "modified": 0, "deleted": 0}
    unstaged = {"new": 0, "modified": 0, "deleted": 0}

    for line in _decode(raw).splitlines():
        if not line:
            continue

        fields = line.split(" ")
        marker = fields[0]

        if marker == UNTRACKED_MARKER:
            unstaged["new"] += 1
            if stop_at_untracked:
                break
            continue

        if marker not in CHANGE_RECORDS:
            continue

        if len(fields) < 2:
            logger.debug(f"Skipping truncated status line: {line!r}")
            continue

        entry = CODE_TABLE.get(fields[1])
        if entry is None:
            continue

        is_staged, counter = entry
        target = staged if is_staged else unstaged
        target[counter] += 1

    return ChangeCounts(**staged), ChangeCounts(**unstaged)


def summarize_status(
    raw: Union[bytes, str, None],
    stop_at_untracked: bool = False,
) -> Tuple[str, str]:
    """Parse status output straight to its (staged, unstaged) summary strings."""
    staged, unstaged = parse_status(raw, stop_at_untracked=stop_at_untracked)
    return staged.format(), unstaged.format()
