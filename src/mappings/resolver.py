"""Resolve mapping version specifiers to local directories.

Sources are tried in order: a caller-supplied custom directory, a local
folder named exactly like the specifier, then the registered download
archives (cached per MC version). The Gradle MCP cache is a secondary
source consulted only through ``lookup_external``.
"""
from __future__ import annotations

import logging
import os
from typing import Iterator, List, Optional

from constants import Constants, default_mappings_dir
from common.errors import ErrorKind
from common.logging_utils import extra_context
from artifacts.fetcher import ArtifactFetcher
from artifacts.models import BulkFetchSummary, FetchResult, has_required_files

from .catalog import VersionCatalog
from .models import MappingEntry, MappingKey, MappingResolution, MappingSource
from .registry import MappingRegistry
from .specifier import parse_specifier

logger = logging.getLogger(__name__)

CUSTOM_KEY = "custom"


class MappingResolver:
    """Finds or downloads the mapping directory for a version specifier."""

    def __init__(
        self,
        mappings_dir: Optional[str] = None,
        *,
        registry: Optional[MappingRegistry] = None,
        fetcher: Optional[ArtifactFetcher] = None,
        catalog: Optional[VersionCatalog] = None,
        external_cache_dir: Optional[str] = None,
    ):
        """Initialize the resolver.

        Args:
            mappings_dir: Local bundle/download directory; defaults to default_mappings_dir().
            registry: Downloadable keys; defaults to the built-in table.
            fetcher: Artifact fetcher used for downloads.
            catalog: Version catalog used by the external-cache lookup.
            external_cache_dir: Gradle MCP cache root; defaults to Constants.GRADLE_MCP_DIR.
        """
        self.mappings_dir = mappings_dir or default_mappings_dir()
        self.registry = registry if registry is not None else MappingRegistry()
        self.fetcher = fetcher or ArtifactFetcher()
        self.catalog = catalog
        self.external_cache_dir = external_cache_dir or Constants.GRADLE_MCP_DIR
        self.required_files = Constants.REQUIRED_MAPPING_FILES

    def resolve(self, specifier: str, custom_dir: Optional[str] = None) -> MappingResolution:
        """Resolve a specifier using custom, bundled and downloadable sources.

        Args:
            specifier: User version string such as ``stable_39`` or ``1.12.2``.
            custom_dir: Optional directory that takes precedence over everything.

        Returns:
            MappingResolution with an entry, or the reason nothing was found.
        """
        if custom_dir is not None:
            if self._is_valid(custom_dir):
                logger.info("Using custom mappings from: %s", custom_dir)
                return self._found(specifier, CUSTOM_KEY, MappingSource.CUSTOM, custom_dir)
            return MappingResolution.not_found(
                specifier, f"Custom mappings directory is invalid or missing files: {custom_dir}"
            )

        parsed = parse_specifier(specifier)
        if not parsed.raw:
            return MappingResolution.not_found(specifier, "Empty mapping specifier")

        bundled_dir = os.path.join(self.mappings_dir, parsed.raw)
        if self._is_valid(bundled_dir):
            logger.info("Using bundled mappings: %s", parsed.raw)
            return self._found(specifier, parsed.raw, MappingSource.BUNDLED, bundled_dir)

        key = self.registry.find(parsed)
        if key is None:
            logger.info(
                "No mappings registered for %s",
                parsed.raw,
                extra=extra_context(event="resolve", component="mappings", outcome="no_match")
            )
            return MappingResolution.not_found(specifier, f"No mappings match '{parsed.raw}'")

        target_dir = self.cache_dir_for(key)
        if self._is_valid(target_dir):
            logger.info("Using cached mappings: %s", key.text)
            return self._found(specifier, key.text, MappingSource.DOWNLOADED, target_dir)

        result = self._download_key(key, target_dir)
        if not result.ok:
            return MappingResolution.not_found(
                specifier,
                f"Could not download mappings {key.text}: {result.message}",
                result.error_kind or ErrorKind.NOT_FOUND,
            )
        return self._found(specifier, key.text, MappingSource.DOWNLOADED, target_dir)

    def resolve_with_fallback(self, specifier: str, custom_dir: Optional[str] = None) -> MappingResolution:
        """``resolve``, then the external-cache lookup when nothing was found.

        A custom directory that fails validation is final; no fallback is tried.
        """
        resolution = self.resolve(specifier, custom_dir)
        if resolution.found or custom_dir is not None:
            return resolution
        entry = self.lookup_external(specifier)
        if entry is not None:
            return MappingResolution(specifier=specifier, entry=entry)
        return resolution

    def lookup_external(self, specifier: str) -> Optional[MappingEntry]:
        """Search the Gradle MCP cache, naming folders via the version catalog.

        Each valid ``mcp_<type>/<rev>-<mc>`` folder is named
        ``<MCVER>-<type>_<rev>``; the first whose name contains the
        specifier wins.
        """
        candidates = list(self._iter_external())
        if not candidates:
            return None
        if self.catalog is None:
            self.catalog = VersionCatalog()
        if not self.catalog.is_loaded:
            self.catalog.refresh()

        for kind, folder, path in candidates:
            revision = folder.split("-", 1)[0]
            mc_version = self.catalog.query(folder)
            if mc_version is None:
                continue
            name = f"{mc_version}-{kind}_{revision}"
            if specifier in name:
                logger.info("Using Gradle cache mappings: %s", name)
                return MappingEntry(name, MappingSource.EXTERNAL_CACHE, path, self.required_files)
        return None

    def list_available(self) -> List[MappingEntry]:
        """Valid local directories, then Gradle cache entries, in listing order."""
        entries: List[MappingEntry] = []
        if os.path.isdir(self.mappings_dir):
            with os.scandir(self.mappings_dir) as it:
                for item in it:
                    if item.is_dir() and self._is_valid(item.path):
                        entries.append(
                            MappingEntry(item.name, MappingSource.BUNDLED, item.path, self.required_files)
                        )
        for kind, folder, path in self._iter_external():
            entries.append(
                MappingEntry(f"{kind}_{folder}", MappingSource.EXTERNAL_CACHE, path, self.required_files)
            )
        return entries

    def available_downloads(self) -> List[str]:
        return self.registry.key_names()

    def find_download_key(self, specifier: str) -> Optional[str]:
        key = self.registry.find(specifier)
        return key.text if key else None

    def cache_dir_for(self, key: MappingKey) -> str:
        """Download directory for a key: the part of the key before the first hyphen."""
        return os.path.join(self.mappings_dir, key.cache_dir_name)

    def download(self, key_name: str) -> FetchResult:
        """Download one registered key into its cache directory."""
        key = self.registry.get(key_name)
        if key is None:
            logger.error("No download URL for: %s", key_name)
            return FetchResult.failure(f"No download URL for: {key_name}", ErrorKind.NOT_FOUND)
        return self._download_key(key, self.cache_dir_for(key))

    def download_all(self) -> BulkFetchSummary:
        """Download every registered key one at a time, counting failures."""
        logger.info("Downloading all available mappings...")
        summary = BulkFetchSummary()
        for key in self.registry.keys():
            target_dir = self.cache_dir_for(key)
            if self._is_valid(target_dir):
                logger.info("Already have: %s", key.text)
                summary.skipped += 1
                continue
            summary.record(key.text, self._download_key(key, target_dir))
        logger.info(
            "Done downloading mappings: %d succeeded, %d failed, %d skipped",
            summary.succeeded, summary.failed, summary.skipped,
        )
        return summary

    def _download_key(self, key: MappingKey, target_dir: str) -> FetchResult:
        url = self.registry.url_for(key.text)
        logger.info("Downloading mappings: %s", key.text)
        return self.fetcher.fetch_and_extract(
            url, target_dir, Constants.MAPPING_ARCHIVE_ENTRIES, self.required_files
        )

    def _iter_external(self) -> Iterator[tuple]:
        """Yield (type, folder name, path) for valid Gradle MCP cache folders."""
        root = self.external_cache_dir
        if not root or not os.path.isdir(root):
            return
        with os.scandir(root) as types:
            for type_dir in types:
                if not type_dir.is_dir() or not type_dir.name.startswith("mcp_"):
                    continue
                kind = type_dir.name[len("mcp_"):]
                with os.scandir(type_dir.path) as versions:
                    for version_dir in versions:
                        if version_dir.is_dir() and self._is_valid(version_dir.path):
                            yield kind, version_dir.name, version_dir.path

    def _is_valid(self, directory: str) -> bool:
        return has_required_files(directory, self.required_files)

    def _found(self, specifier: str, key: str, source: MappingSource, directory: str) -> MappingResolution:
        entry = MappingEntry(key, source, directory, self.required_files)
        return MappingResolution(specifier=specifier, entry=entry)
