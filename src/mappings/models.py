"""Data models for mapping specifiers, registry keys and resolved entries."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from constants import Constants
from common.errors import ErrorKind
from artifacts.models import has_required_files


class MappingKind(Enum):
    """Mapping channel published for a Minecraft version."""
    STABLE = "stable"
    SNAPSHOT = "snapshot"


class MappingSource(Enum):
    """Where a resolved mapping directory came from."""
    CUSTOM = "custom"
    BUNDLED = "bundled"
    DOWNLOADED = "downloaded"
    EXTERNAL_CACHE = "external_cache"


@dataclass(frozen=True)
class VersionSpecifier:
    """Structured form of a user-supplied mapping version string."""
    raw: str
    mc_version: Optional[str]
    kind: Optional[MappingKind]
    revision: Optional[str]

    @property
    def label(self) -> Optional[str]:
        """``kind_revision`` (e.g. ``stable_39``) when both are known."""
        if self.kind is None or self.revision is None:
            return None
        return f"{self.kind.value}_{self.revision}"


@dataclass(frozen=True)
class MappingKey:
    """Canonical registry key ``MCVER-(stable|snapshot)_REV``."""
    text: str
    mc_version: str
    label: str
    kind: Optional[MappingKind]
    revision: str

    @property
    def cache_dir_name(self) -> str:
        """Directory name used for the download cache (shared per MC version)."""
        return self.mc_version

    def __str__(self) -> str:
        return self.text


@dataclass
class MappingEntry:
    """A local directory of mapping CSVs tagged with its source."""
    key: str
    source: MappingSource
    directory: str
    required_files: Tuple[str, ...] = Constants.REQUIRED_MAPPING_FILES

    def is_valid(self) -> bool:
        return has_required_files(self.directory, self.required_files)

    def __str__(self) -> str:
        return f"{self.key} [{self.source.name}]"


@dataclass
class MappingResolution:
    """Resolution outcome; ``entry`` is set iff something usable was found."""
    specifier: str
    entry: Optional[MappingEntry] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.entry is not None

    @classmethod
    def not_found(cls, specifier: str, message: str,
                  kind: ErrorKind = ErrorKind.NOT_FOUND) -> "MappingResolution":
        return cls(specifier=specifier, error_kind=kind, error=message)
