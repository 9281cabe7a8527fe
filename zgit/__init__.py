"""
zgit - run read-only git inspections across a registered set of repositories.

zgit keeps a registry of working copies (name, location, optional tag)
and reports their branch, tag/commit and change counts in one table.

Quick Start:
    from zgit import RepoStore, StatusService, render_status_report

    store = RepoStore("~/.config/zg-repos.json")
    service = StatusService()

    report = service.aggregate(store.load(), tag_filter="api")
    render_status_report(report.rows, report.errors)

Domain Objects:
    RepositoryDescriptor - A registered working copy
    ChangeCounts - +new ~modified -deleted counters
    StatusRow, ErrorEntry, StatusReport - Results of a status run

Services:
    StatusService - Concurrent status collection with indexed errors
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    RepositoryDescriptor,
    NoTag,
    Tag,
    parse_tag_prefix,
    InspectionResult,
    ChangeCounts,
    StatusRow,
    ErrorEntry,
    StatusReport,
)

# Infrastructure
from .infra import GitClient, RepoStore

# Services
from .services import StatusService, StatusOptions

# Parsing, truncation and rendering
from .porcelain import parse_status
from .format_utils import truncate_trailing, truncate_middle
from .render import render_status_report

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "RepositoryDescriptor",
    "NoTag",
    "Tag",
    "parse_tag_prefix",
    "InspectionResult",
    "ChangeCounts",
    "StatusRow",
    "ErrorEntry",
    "StatusReport",
    # Infrastructure
    "GitClient",
    "RepoStore",
    # Services
    "StatusService",
    "StatusOptions",
    # Functions
    "parse_status",
    "truncate_trailing",
    "truncate_middle",
    "render_status_report",
    # Configuration
    "load_config",
]
