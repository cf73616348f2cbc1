"""Library jar resolution package."""

from .coordinates import LibraryCoordinate  # noqa: F401
from .resolver import BUILTIN_LIBS, LibraryResolver  # noqa: F401

__all__ = ["BUILTIN_LIBS", "LibraryCoordinate", "LibraryResolver"]
