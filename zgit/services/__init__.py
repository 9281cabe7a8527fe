"""
Service layer for zgit.

Contains business logic that orchestrates domain objects and infrastructure:
- StatusService: Concurrent status collection and error aggregation

Services are the primary API for commands to use.
"""

from .status_service import StatusService, StatusOptions, ErrorLog

__all__ = [
    'StatusService',
    'StatusOptions',
    'ErrorLog',
]
