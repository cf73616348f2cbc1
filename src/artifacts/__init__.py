"""Artifact acquisition package.

- fetcher.py: HTTP download with optional zip extraction, cache-aware
- models.py: FetchResult / BulkFetchSummary and the required-files predicate
"""

from .fetcher import ArtifactFetcher  # noqa: F401
from .models import BulkFetchSummary, FetchResult, has_required_files  # noqa: F401

__all__ = [
    "ArtifactFetcher",
    "BulkFetchSummary",
    "FetchResult",
    "has_required_files",
]
