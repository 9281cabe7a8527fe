"""
Output format utilities for zgit CLI commands.

Provides:
- Label truncation for table columns (trailing and middle ellipsis)
- Formatting of report data as JSON, JSONL and YAML
"""

import json
from typing import Dict, List, Any, Iterable, Iterator

import yaml

ELLIPSIS = "..."

OUTPUT_FORMATS = ('table', 'json', 'jsonl', 'yaml')


def truncate_trailing(text: str, max_width: int) -> str:
    """
    Shorten ``text`` to ``max_width`` characters, keeping its end.

    The rightmost part of branch names and refs is the most informative,
    so the start is replaced with an ellipsis.

    Example:
        truncate_trailing("feature/very-long-branch-name", 10) -> "...ch-name"
    """
    if len(text) <= max_width:
        return text
    keep = max_width - len(ELLIPSIS)
    if keep <= 0:
        return ELLIPSIS[:max(max_width, 0)]
    return ELLIPSIS + text[-keep:]


def truncate_middle(text: str, max_width: int) -> str:
    """
    Shorten ``text`` to ``max_width`` characters, keeping both ends.

    Characters are removed symmetrically around the midpoint; when an odd
    number must go, the right side loses one more. Used for names and
    paths, where the start and the end both identify the repository.

    Operates on code points, not display width.
    """
    length = len(text)
    if length <= max_width:
        return text
    keep = max_width - len(ELLIPSIS)
    if keep <= 0:
        return ELLIPSIS[:max(max_width, 0)]

    middle = length // 2
    remove = length - keep
    num_left = remove // 2
    num_right = remove - num_left

    return text[:middle - num_left] + ELLIPSIS + text[middle + num_right:]


def format_output(data: Iterable[Dict[str, Any]], format: str) -> Iterator[str]:
    """
    Format data according to the specified format.

    Args:
        data: Iterable of dictionaries to format
        format: Output format (json, jsonl, yaml)

    Yields:
        Formatted strings for output
    """
    if format == "jsonl":
        yield from format_jsonl(data)
    elif format == "json":
        yield from format_json(data)
    elif format == "yaml":
        yield from format_yaml(data)
    else:
        raise ValueError(f"Unknown format: {format}")


def format_jsonl(data: Iterable[Dict[str, Any]]) -> Iterator[str]:
    """Format data as JSON Lines (one JSON object per line)."""
    for item in data:
        yield json.dumps(item, ensure_ascii=False)


def format_json(data: Iterable[Dict[str, Any]]) -> Iterator[str]:
    """Format data as a single JSON array."""
    all_data = list(data)
    yield json.dumps(all_data, ensure_ascii=False, indent=2)


def format_yaml(data: Iterable[Dict[str, Any]]) -> Iterator[str]:
    """Format data as YAML."""
    all_data = list(data)
    yield yaml.dump(all_data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def report_records(rows: List[Any], errors: List[Any]) -> Iterator[Dict[str, Any]]:
    """
    Flatten a status report into typed records for machine output.

    Rows come first, in table order, tagged ``type: status``; errors follow
    tagged ``type: error``.
    """
    for row in rows:
        yield {'type': 'status', **row.to_dict()}
    for error in errors:
        yield {'type': 'error', **error.to_dict()}
