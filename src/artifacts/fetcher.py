"""Shared download routine for mapping archives and library jars.

Both paths are idempotent: an artifact already present on disk is never
requested again. Every failure is reported as a FetchResult rather than an
exception.
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
import zlib
from typing import Iterable, List, Optional

import requests

from constants import Constants
from common import http_client
from common.errors import ErrorKind, FetchError
from common.http_client import Timeout
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

from .models import FetchResult, has_required_files

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """Downloads artifacts over HTTP, optionally extracting zip entries."""

    def __init__(self, timeout: Optional[Timeout] = None, chunk_size: Optional[int] = None):
        """Initialize the fetcher.

        Args:
            timeout: (connect, read) seconds; defaults to Constants download timeouts.
            chunk_size: Streaming chunk size in bytes.
        """
        self.timeout = timeout or http_client.default_timeout()
        self.chunk_size = chunk_size or Constants.DOWNLOAD_CHUNK_SIZE

    def fetch_and_extract(
        self,
        url: str,
        target_dir: str,
        wanted_entries: Iterable[str],
        required_files: Iterable[str] = Constants.REQUIRED_MAPPING_FILES,
    ) -> FetchResult:
        """Download a zip archive and extract the named entries into target_dir.

        Args:
            url: Archive URL.
            target_dir: Directory receiving the extracted files.
            wanted_entries: Entry names to keep; matched exactly, others are discarded.
            required_files: Files that must be present afterwards for success.

        Returns:
            FetchResult describing the outcome.
        """
        required = tuple(required_files)
        wanted = set(wanted_entries)

        if has_required_files(target_dir, required):
            logger.info("Using cached artifact in %s", target_dir)
            return FetchResult.success("Already cached", path=target_dir)

        logger.info("Downloading %s", safe_url(url))
        extracted: List[str] = []
        try:
            with tempfile.SpooledTemporaryFile(max_size=Constants.SPOOL_MAX_BYTES) as spool:
                failure = self._download_into(url, spool, context="archive")
                if failure is not None:
                    return failure

                spool.seek(0)
                if not zipfile.is_zipfile(spool):
                    return self._fail(url, "Response is not a zip archive", ErrorKind.INTEGRITY_FAILURE)
                spool.seek(0)
                os.makedirs(target_dir, exist_ok=True)
                self._extract(spool, target_dir, wanted, extracted)
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as exc:
            self._discard_extracted(target_dir, extracted)
            return self._fail(url, f"Malformed archive: {exc}", ErrorKind.INTEGRITY_FAILURE)
        except OSError as exc:
            self._discard_extracted(target_dir, extracted)
            return self._fail(url, f"I/O error: {exc}", ErrorKind.NETWORK_FAILURE)

        if not has_required_files(target_dir, required):
            # Entries from a wrong archive must not mix with another key's files.
            self._discard_extracted(target_dir, extracted)
            missing = ", ".join(sorted(set(required) - set(extracted)))
            return self._fail(
                url,
                f"Archive is missing required files: {missing or ', '.join(required)}",
                ErrorKind.INTEGRITY_FAILURE,
            )

        logger.info("Extracted %s into %s", ", ".join(extracted), target_dir)
        return FetchResult.success(f"Extracted {len(extracted)} files", path=target_dir)

    def fetch_file(self, url: str, target_file: str) -> FetchResult:
        """Download a single-file artifact verbatim to target_file.

        Skips the request entirely when target_file already exists.
        """
        if os.path.exists(target_file):
            logger.info("Already downloaded: %s", os.path.basename(target_file))
            return FetchResult.success("Already downloaded", path=target_file)

        parent = os.path.dirname(target_file)
        logger.info("Downloading %s", safe_url(url))
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(target_file, "wb") as out:
                failure = self._download_into(url, out, context="file")
        except OSError as exc:
            failure = self._fail(url, f"I/O error: {exc}", ErrorKind.NETWORK_FAILURE)

        if failure is not None:
            self._discard(target_file)
            return failure

        size_kb = os.path.getsize(target_file) // 1024
        logger.info("Downloaded %s (%s KB)", os.path.basename(target_file), size_kb)
        return FetchResult.success("Downloaded", path=target_file)

    def _download_into(self, url: str, sink, *, context: str) -> Optional[FetchResult]:
        """Stream the body of a 200 response into sink; return a failure or None."""
        with Timer() as timer:
            try:
                res = http_client.safe_get(url, context=context, timeout=self.timeout, stream=True)
            except FetchError as exc:
                return self._fail(url, exc.message, exc.kind)

            try:
                if res.status_code != 200:
                    kind = ErrorKind.NOT_FOUND if res.status_code == 404 else ErrorKind.NETWORK_FAILURE
                    return self._fail(url, f"HTTP {res.status_code}", kind)
                for chunk in res.iter_content(chunk_size=self.chunk_size):
                    if chunk:
                        sink.write(chunk)
            except requests.RequestException as exc:
                return self._fail(url, f"Stream error: {exc}", ErrorKind.NETWORK_FAILURE)
            finally:
                res.close()

        if is_debug_enabled(logger):
            logger.debug(
                "Download complete",
                extra=extra_context(
                    event="download",
                    component="fetcher",
                    outcome="success",
                    duration_ms=timer.duration_ms(),
                    target=safe_url(url),
                    context=context
                )
            )
        return None

    @staticmethod
    def _extract(archive, target_dir: str, wanted: set, extracted: List[str]) -> None:
        """Write wanted entries into target_dir, recording each name before writing it."""
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if info.is_dir() or info.filename not in wanted:
                    continue
                out_path = os.path.join(target_dir, info.filename)
                extracted.append(info.filename)
                with zf.open(info) as src, open(out_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                logger.debug("Extracted: %s", info.filename)

    @classmethod
    def _discard_extracted(cls, target_dir: str, names: Iterable[str]) -> None:
        for name in names:
            cls._discard(os.path.join(target_dir, name))

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove partial file %s: %s", path, exc)

    @staticmethod
    def _fail(url: str, message: str, kind: ErrorKind) -> FetchResult:
        logger.warning(
            "Download failed: %s",
            message,
            extra=extra_context(
                event="download",
                component="fetcher",
                outcome=kind.value,
                target=safe_url(url)
            )
        )
        return FetchResult.failure(message, kind)
