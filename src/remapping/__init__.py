"""Contract between mapping resolution and the remapping engine."""

from .contract import (  # noqa: F401
    ErrorSink,
    ProgressSink,
    RemapError,
    Remapper,
    default_output_path,
    remap_archive,
)

__all__ = [
    "ErrorSink",
    "ProgressSink",
    "RemapError",
    "Remapper",
    "default_output_path",
    "remap_archive",
]
