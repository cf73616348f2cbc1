"""Registered MCP mapping archives, in lookup order.

Covers Minecraft 1.7.10 through 1.16.5, the versions that shipped MCP
mappings before Mojang's official mappings. Order matters: ambiguous
specifiers resolve to the first matching key.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .models import MappingKey, VersionSpecifier
from .specifier import matches_strongly, matches_weakly, parse_key, parse_specifier

_FORGE_MCP = "https://maven.minecraftforge.net/de/oceanlabs/mcp"


def _snapshot(date: str, mc: str) -> str:
    return f"{_FORGE_MCP}/mcp_snapshot/{date}-{mc}/mcp_snapshot-{date}-{mc}.zip"


def _stable(rev: str, mc: str) -> str:
    return f"{_FORGE_MCP}/mcp_stable/{rev}-{mc}/mcp_stable-{rev}-{mc}.zip"


MAPPING_URLS: Tuple[Tuple[str, str], ...] = (
    # 1.16.x, 1.15.x, 1.14.x, 1.13.x: snapshot only
    ("1.16.5-snapshot_20210309", _snapshot("20210309", "1.16.5")),
    ("1.16.3-snapshot_20201028", _snapshot("20201028", "1.16.3")),
    ("1.16.2-snapshot_20200916", _snapshot("20200916", "1.16.2")),
    ("1.16.1-snapshot_20200723", _snapshot("20200723", "1.16.1")),
    ("1.16-snapshot_20200514", _snapshot("20200514", "1.16")),
    ("1.15.1-snapshot_20200220", _snapshot("20200220", "1.15.1")),
    ("1.14.3-snapshot_20190719", _snapshot("20190719", "1.14.3")),
    ("1.14.2-snapshot_20190608", _snapshot("20190608", "1.14.2")),
    ("1.13-snapshot_20180921", _snapshot("20180921", "1.13")),
    ("1.13-snapshot_20180815", _snapshot("20180815", "1.13")),
    # 1.12.x: stable + snapshot
    ("1.12.2-stable_39", _stable("39", "1.12")),
    ("1.12.1-stable_39", _stable("39", "1.12")),
    ("1.12-stable_39", _stable("39", "1.12")),
    ("1.12-snapshot_20180814", _snapshot("20180814", "1.12")),
    ("1.12-snapshot_20171003", _snapshot("20171003", "1.12")),
    # 1.11.x - 1.7.10: stable
    ("1.11.2-stable_32", _stable("32", "1.11")),
    ("1.11-stable_32", _stable("32", "1.11")),
    ("1.10.2-stable_29", _stable("29", "1.10.2")),
    ("1.10-stable_29", _stable("29", "1.10.2")),
    ("1.9.4-stable_26", _stable("26", "1.9.4")),
    ("1.9-stable_24", _stable("24", "1.9")),
    ("1.8.9-stable_22", _stable("22", "1.8.9")),
    ("1.8.8-stable_20", _stable("20", "1.8.8")),
    ("1.8-stable_18", _stable("18", "1.8")),
    ("1.7.10-stable_12", _stable("12", "1.7.10")),
)


class MappingRegistry:
    """Ordered key -> archive URL table with first-match lookup."""

    def __init__(self, entries: Optional[Iterable[Tuple[str, str]]] = None):
        """Initialize the registry.

        Args:
            entries: (key, url) pairs in lookup order; defaults to MAPPING_URLS.

        Raises:
            ValueError: On a malformed or duplicate key.
        """
        self._urls: Dict[str, str] = {}
        self._keys: List[MappingKey] = []
        for text, url in (MAPPING_URLS if entries is None else entries):
            if text in self._urls:
                raise ValueError(f"Duplicate mapping key: {text}")
            self._keys.append(parse_key(text))
            self._urls[text] = url

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: str) -> bool:
        return key in self._urls

    def keys(self) -> List[MappingKey]:
        return list(self._keys)

    def key_names(self) -> List[str]:
        return [k.text for k in self._keys]

    def get(self, key: str) -> Optional[MappingKey]:
        for candidate in self._keys:
            if candidate.text == key:
                return candidate
        return None

    def url_for(self, key: str) -> Optional[str]:
        return self._urls.get(key)

    def find(self, specifier) -> Optional[MappingKey]:
        """Return the first registered key matching the specifier.

        Strong matches are tried across all keys before any weak match, and
        within a pass table order decides between equally valid keys.
        """
        parsed = specifier if isinstance(specifier, VersionSpecifier) else parse_specifier(specifier)
        if not parsed.raw:
            return None
        for key in self._keys:
            if matches_strongly(parsed, key):
                return key
        for key in self._keys:
            if matches_weakly(parsed, key):
                return key
        return None
