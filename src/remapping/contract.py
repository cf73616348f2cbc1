"""Interface to the bytecode remapping engine.

The engine itself lives elsewhere; this package only guarantees that the
mapping entry it receives holds the required CSV files.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from common.errors import ErrorKind
from mappings.models import MappingEntry

logger = logging.getLogger(__name__)


class ErrorSink:
    """Receives non-fatal errors raised while remapping."""

    def error(self, message: str) -> None:
        logger.error("%s", message)


class ProgressSink:
    """Receives progress updates while remapping."""

    def start(self, total: int, label: str) -> None:
        logger.info("%s (%d items)", label, total)

    def progress(self, current: int) -> None:
        logger.debug("Progress: %d", current)


class RemapError(Exception):
    """The archive could not be remapped."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INTEGRITY_FAILURE):
        super().__init__(message)
        self.kind = kind


class Remapper(ABC):
    """Transforms an input archive into a remapped output archive."""

    @abstractmethod
    def remap(
        self,
        input_archive: str,
        output_archive: str,
        entry: MappingEntry,
        error_sink: ErrorSink,
        progress_sink: ProgressSink,
    ) -> str:
        """Write the remapped archive and return its path."""


def default_output_path(input_archive: str) -> str:
    """``mod.jar`` -> ``mod-deobf.jar``."""
    if input_archive.endswith(".jar"):
        return input_archive[: -len(".jar")] + "-deobf.jar"
    return input_archive + "-deobf"


def remap_archive(
    remapper: Remapper,
    input_archive: str,
    entry: MappingEntry,
    output_archive: Optional[str] = None,
    error_sink: Optional[ErrorSink] = None,
    progress_sink: Optional[ProgressSink] = None,
) -> str:
    """Validate the mapping entry, then delegate to the remapper.

    Raises:
        RemapError: When the entry's directory lacks the required files.
    """
    if not entry.is_valid():
        raise RemapError(f"Mapping directory is missing required files: {entry.directory}")
    output = output_archive or default_output_path(input_archive)
    logger.info("Input archive:  %s", input_archive)
    logger.info("Output archive: %s", output)
    logger.info("Mappings:       %s", entry)
    return remapper.remap(
        input_archive,
        output,
        entry,
        error_sink or ErrorSink(),
        progress_sink or ProgressSink(),
    )
