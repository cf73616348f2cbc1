"""Catalog of Minecraft versions and their valid MCP mapping revisions.

The catalog is owned by the caller: construct one, call ``refresh`` when the
data is first needed, and pass it to whatever needs version lookups. A failed
remote fetch substitutes an embedded snapshot of the historical data instead
of retrying.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, safe_url

from .specifier import normalize_revision

logger = logging.getLogger(__name__)

FALLBACK_JSON = (
    '{'
    '"1.12":{"snapshot":[20171003],"stable":[39]},'
    '"1.11.2":{"snapshot":[20161220],"stable":[32]},'
    '"1.11":{"snapshot":[20161115,20161111,20161104],"stable":[31,30]},'
    '"1.10.2":{"snapshot":[20160518],"stable":[29]},'
    '"1.9.4":{"snapshot":[20160501],"stable":[26]},'
    '"1.9":{"snapshot":[20160320,20160312,20160305,20160301,20160228,20160227,'
    '20160226,20160225,20160224],"stable":[24]},'
    '"1.8.9":{"snapshot":[20160301,20151216],"stable":[22]},'
    '"1.8.8":{"snapshot":[20150913],"stable":[20]},'
    '"1.8":{"snapshot":[20141130,20140925,20140903],"stable":[18]},'
    '"1.7.10":{"snapshot":[20140925],"stable":[12]}'
    '}'
)


@dataclass
class CatalogEntry:
    """Valid revisions for one Minecraft version."""
    snapshot: Set[str] = field(default_factory=set)
    stable: Set[str] = field(default_factory=set)

    def contains(self, revision: str) -> bool:
        return revision in self.snapshot or revision in self.stable


def parse_catalog(data: Any) -> Dict[str, CatalogEntry]:
    """Convert the JSON payload into ordered CatalogEntry values.

    Raises:
        ValueError: When the payload does not follow the catalog schema.
    """
    if not isinstance(data, dict):
        raise ValueError("catalog payload is not an object")
    entries: Dict[str, CatalogEntry] = {}
    for mc_version, channels in data.items():
        if not isinstance(channels, dict):
            raise ValueError(f"catalog entry for {mc_version} is not an object")
        entry = CatalogEntry()
        for name, target in (("snapshot", entry.snapshot), ("stable", entry.stable)):
            values = channels.get(name, [])
            if not isinstance(values, list):
                raise ValueError(f"{mc_version}.{name} is not a list")
            target.update(str(v) for v in values)
        entries[str(mc_version)] = entry
    return entries


class VersionCatalog:
    """Minecraft version -> mapping revision table with an offline fallback."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[tuple] = None):
        """Initialize an empty catalog.

        Args:
            url: Catalog endpoint; defaults to Constants.CATALOG_URL.
            timeout: (connect, read) seconds; defaults to the catalog timeouts.
        """
        self.url = url or Constants.CATALOG_URL
        self.timeout = timeout or (Constants.CATALOG_CONNECT_TIMEOUT, Constants.CATALOG_READ_TIMEOUT)
        self._entries: Optional[Dict[str, CatalogEntry]] = None
        self.used_fallback = False

    @property
    def is_loaded(self) -> bool:
        return self._entries is not None

    def refresh(self) -> None:
        """Replace the catalog contents from the endpoint, or the embedded fallback."""
        status, _, payload = get_json(self.url, context="catalog", timeout=self.timeout)
        entries = None
        if status == 200 and payload is not None:
            try:
                entries = parse_catalog(payload)
            except ValueError as exc:
                logger.warning("Catalog response rejected: %s", exc)

        if entries is None:
            logger.warning(
                "Could not load version catalog from %s, using offline fallback data",
                safe_url(self.url),
                extra=extra_context(
                    event="catalog_refresh",
                    component="catalog",
                    outcome="fallback",
                    status_code=status or None
                )
            )
            entries = parse_catalog(json.loads(FALLBACK_JSON))
            self.used_fallback = True
        else:
            logger.info("Loaded version catalog from %s", safe_url(self.url))
            self.used_fallback = False

        self._entries = entries

    def query(self, revision: str) -> Optional[str]:
        """Return the first MC version whose snapshot or stable set holds the revision.

        Accepts bare tokens (``39``) as well as ``stable_39`` and ``39-1.12``.
        Returns None before the first refresh.
        """
        if self._entries is None:
            return None
        token = normalize_revision(revision.strip())
        for mc_version, entry in self._entries.items():
            if entry.contains(token):
                return mc_version
        return None

    def versions(self) -> List[str]:
        return list(self._entries or {})

    def entry(self, mc_version: str) -> Optional[CatalogEntry]:
        return (self._entries or {}).get(mc_version)
