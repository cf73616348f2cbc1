"""Reachability check for every registered mapping archive and library jar."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Tuple

from constants import Constants
from common.http_client import safe_head
from libraries.coordinates import LibraryCoordinate

logger = logging.getLogger(__name__)


@dataclass
class UrlReport:
    """Outcome of a validation run."""
    passed: int = 0
    failed: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.passed + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


def _is_reachable(url: str, context: str) -> bool:
    timeout = (Constants.VALIDATION_TIMEOUT, Constants.VALIDATION_TIMEOUT)
    status = safe_head(url, context=context, timeout=timeout, user_agent=Constants.VALIDATION_USER_AGENT)
    return 200 <= status < 400


def validate_urls(
    mapping_urls: Iterable[Tuple[str, str]],
    libraries: Mapping[str, LibraryCoordinate],
    repo_root: Optional[str] = None,
) -> UrlReport:
    """HEAD every mapping archive and library jar URL.

    Args:
        mapping_urls: (key, url) pairs.
        libraries: name -> coordinate.
        repo_root: Maven repository root for library URLs.

    Returns:
        UrlReport; failures are labelled ``mapping:<key>`` / ``library:<name>``.
    """
    report = UrlReport()
    for key, url in mapping_urls:
        ok = _is_reachable(url, "mappings")
        logger.info("  %-30s %s", key, "OK" if ok else "FAILED")
        if ok:
            report.passed += 1
        else:
            report.failed.append(f"mapping:{key}")

    for name, coordinate in libraries.items():
        ok = _is_reachable(coordinate.to_url(repo_root), "library")
        logger.info("  %-30s %s", name, "OK" if ok else "FAILED")
        if ok:
            report.passed += 1
        else:
            report.failed.append(f"library:{name}")

    logger.info("Results: %d/%d passed", report.passed, report.total)
    return report
