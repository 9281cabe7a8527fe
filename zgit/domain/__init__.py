"""
Domain layer for zgit.

Contains pure domain objects with no I/O or side effects:
- RepositoryDescriptor: A registered working copy
- TagSelector: NoTag or Tag(name), parsed from ``@tag`` tokens
- InspectionResult, ChangeCounts, StatusRow, ErrorEntry, StatusReport:
  values produced by a status run

These objects are immutable where possible and provide
serialization methods for JSON output.
"""

from .repository import RepositoryDescriptor
from .tag import NoTag, Tag, TagSelector, parse_tag_prefix, is_tag_token
from .status import (
    InspectionResult,
    ChangeCounts,
    StatusRow,
    ErrorEntry,
    StatusReport,
    ERROR_PLACEHOLDER,
    CANCELLED_MESSAGE,
)

__all__ = [
    'RepositoryDescriptor',
    'NoTag',
    'Tag',
    'TagSelector',
    'parse_tag_prefix',
    'is_tag_token',
    'InspectionResult',
    'ChangeCounts',
    'StatusRow',
    'ErrorEntry',
    'StatusReport',
    'ERROR_PLACEHOLDER',
    'CANCELLED_MESSAGE',
]
