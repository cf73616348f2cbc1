"""Mapping resolution package.

- specifier.py: parsing of user specifiers and registry keys, match rules
- registry.py: ordered key -> archive URL table
- catalog.py: MC version -> revision catalog with offline fallback
- resolver.py: custom / bundled / download precedence chain
"""

from .catalog import VersionCatalog  # noqa: F401
from .models import (  # noqa: F401
    MappingEntry,
    MappingKey,
    MappingKind,
    MappingResolution,
    MappingSource,
    VersionSpecifier,
)
from .registry import MAPPING_URLS, MappingRegistry  # noqa: F401
from .resolver import MappingResolver  # noqa: F401
from .specifier import parse_key, parse_specifier  # noqa: F401

__all__ = [
    "MAPPING_URLS",
    "MappingEntry",
    "MappingKey",
    "MappingKind",
    "MappingRegistry",
    "MappingResolution",
    "MappingResolver",
    "MappingSource",
    "VersionCatalog",
    "VersionSpecifier",
    "parse_key",
    "parse_specifier",
]
