"""Result models for artifact acquisition."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from common.errors import ErrorKind


@dataclass
class FetchResult:
    """Outcome of a single fetch; truthy iff the artifact is on disk."""
    ok: bool
    message: str
    error_kind: Optional[ErrorKind] = None
    path: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str, path: Optional[str] = None) -> "FetchResult":
        return cls(ok=True, message=message, path=path)

    @classmethod
    def failure(cls, message: str, kind: ErrorKind, path: Optional[str] = None) -> "FetchResult":
        return cls(ok=False, message=message, error_kind=kind, path=path)


@dataclass
class BulkFetchSummary:
    """Aggregate counts for a sequential download-everything loop."""
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    failures: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed + self.skipped

    def record(self, name: str, result: FetchResult) -> None:
        if result.ok:
            self.succeeded += 1
        else:
            self.failed += 1
            self.failures.append(name)


def has_required_files(directory: str, required: Iterable[str]) -> bool:
    """True when every required file exists in ``directory`` and is non-empty."""
    if not directory or not os.path.isdir(directory):
        return False
    for name in required:
        path = os.path.join(directory, name)
        if not os.path.isfile(path) or os.path.getsize(path) == 0:
            return False
    return True
