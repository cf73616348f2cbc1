"""Library name -> Maven coordinate resolution and jar downloads.

The effective table is the built-in set overlaid with user entries from
``libs.txt`` in the libraries directory. When that file does not exist a
starter file is written listing the commonly used built-ins.
"""
from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from constants import Constants, default_libs_dir
from common.errors import ErrorKind, InvalidCoordinateError
from artifacts.fetcher import ArtifactFetcher
from artifacts.models import BulkFetchSummary, FetchResult

from .coordinates import LibraryCoordinate

logger = logging.getLogger(__name__)

BUILTIN_LIBS: Mapping[str, str] = MappingProxyType({
    # JSON
    "gson": "com.google.code.gson:gson:2.8.0",
    "json-simple": "com.googlecode.json-simple:json-simple:1.1.1",
    "jackson-core": "com.fasterxml.jackson.core:jackson-core:2.9.9",
    "jackson-databind": "com.fasterxml.jackson.core:jackson-databind:2.9.9",
    "jackson-annotations": "com.fasterxml.jackson.core:jackson-annotations:2.9.9",
    # Google
    "guava": "com.google.guava:guava:21.0",
    # Apache Commons
    "commons-io": "commons-io:commons-io:2.5",
    "commons-lang3": "org.apache.commons:commons-lang3:3.5",
    "commons-codec": "commons-codec:commons-codec:1.10",
    "commons-compress": "org.apache.commons:commons-compress:1.8.1",
    # Apache HTTP
    "httpclient": "org.apache.httpcomponents:httpclient:4.5.2",
    "httpcore": "org.apache.httpcomponents:httpcore:4.4.4",
    # Logging
    "log4j-api": "org.apache.logging.log4j:log4j-api:2.8.1",
    "log4j-core": "org.apache.logging.log4j:log4j-core:2.8.1",
    "slf4j-api": "org.slf4j:slf4j-api:1.7.25",
    # Networking
    "netty-all": "io.netty:netty-all:4.1.9.Final",
    # Annotations
    "jsr305": "com.google.code.findbugs:jsr305:3.0.1",
    "javax.annotation-api": "javax.annotation:javax.annotation-api:1.3.2",
    "jsr311-api": "javax.ws.rs:jsr311-api:1.1.1",
    # LWJGL and input
    "lwjgl": "org.lwjgl.lwjgl:lwjgl:2.9.3",
    "lwjgl_util": "org.lwjgl.lwjgl:lwjgl_util:2.9.3",
    "jinput": "net.java.jinput:jinput:2.0.5",
    "jutils": "net.java.jutils:jutils:1.0.0",
    # Collections
    "trove4j": "net.sf.trove4j:trove4j:3.0.3",
    "fastutil": "it.unimi.dsi:fastutil:7.1.0",
    # Math
    "vecmath": "javax.vecmath:vecmath:1.5.2",
    "joml": "org.joml:joml:1.9.25",
    # i18n
    "icu4j": "com.ibm.icu:icu4j:60.2",
    # Bytecode
    "asm": "org.ow2.asm:asm:5.2",
    "asm-commons": "org.ow2.asm:asm-commons:5.2",
    "asm-tree": "org.ow2.asm:asm-tree:5.2",
    "asm-analysis": "org.ow2.asm:asm-analysis:5.2",
    "asm-util": "org.ow2.asm:asm-util:5.2",
    # Compression
    "lzma": "com.github.jponge:lzma-java:1.3",
    # Native access and system info
    "jna": "net.java.dev.jna:jna:4.4.0",
    "jna-platform": "net.java.dev.jna:jna-platform:4.4.0",
    "oshi-core": "com.github.oshi:oshi-core:3.4.0",
    # Crypto
    "bcprov-jdk15on": "org.bouncycastle:bcprov-jdk15on:1.58",
    # CLI parsing
    "jopt-simple": "net.sf.jopt-simple:jopt-simple:5.0.3",
    # macOS bridge
    "java-objc-bridge": "ca.weblite:java-objc-bridge:1.0.0",
    # authlib, patchy and text-io are not on Maven Central; add them to libs.txt by hand.
})

# Starter libs.txt: grouped subset of BUILTIN_LIBS that users most often pin.
DEFAULT_CONFIG_SECTIONS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("JSON", ("gson", "json-simple")),
    ("Google", ("guava",)),
    ("Apache Commons", ("commons-io", "commons-lang3", "commons-codec")),
    ("Logging", ("log4j-api", "log4j-core", "slf4j-api")),
    ("Networking", ("netty-all",)),
    ("Annotations", ("jsr305",)),
    ("Collections", ("trove4j", "fastutil")),
    ("LWJGL", ("lwjgl", "lwjgl_util")),
    ("Math", ("vecmath",)),
    ("Bytecode", ("asm", "asm-commons", "asm-tree")),
)


def render_default_config() -> str:
    """Text of the generated libs.txt."""
    lines = [
        "# Library Configuration",
        "# Format: name=groupId:artifactId:version",
        "# Lines starting with # are comments",
        "# Add your own libraries below or modify versions",
        "",
        "# === Built-in Libraries ===",
        "",
    ]
    for title, names in DEFAULT_CONFIG_SECTIONS:
        lines.append(f"# {title}")
        lines.extend(f"{name}={BUILTIN_LIBS[name]}" for name in names)
        lines.append("")
    lines.extend([
        "# === Custom Libraries ===",
        "# Add your own libraries below:",
        "",
    ])
    return "\n".join(lines) + "\n"


def parse_override_lines(text: str) -> Dict[str, LibraryCoordinate]:
    """Parse ``name=group:artifact:version`` lines; comments and bad lines are skipped."""
    overrides: Dict[str, LibraryCoordinate] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        name, sep, value = line.partition("=")
        name = name.strip()
        if not sep or not name:
            logger.debug("Skipping malformed libs.txt line %d: %r", lineno, raw_line)
            continue
        try:
            overrides[name] = LibraryCoordinate.parse(value, name=name)
        except InvalidCoordinateError:
            logger.debug("Skipping malformed libs.txt line %d: %r", lineno, raw_line)
    return overrides


class LibraryResolver:
    """Resolves short library names and downloads their jars."""

    def __init__(
        self,
        libs_dir: Optional[str] = None,
        *,
        fetcher: Optional[ArtifactFetcher] = None,
        repo_root: Optional[str] = None,
        config_file: Optional[str] = None,
    ):
        """Initialize the resolver and load (or create) the override file.

        Args:
            libs_dir: Directory for jars and libs.txt; defaults to default_libs_dir().
            fetcher: Artifact fetcher used for downloads.
            repo_root: Maven repository root; defaults to Constants.MAVEN_REPO_ROOT.
            config_file: Override file path; defaults to <libs_dir>/libs.txt.
        """
        self.libs_dir = libs_dir or default_libs_dir()
        self.fetcher = fetcher or ArtifactFetcher()
        self.repo_root = repo_root or Constants.MAVEN_REPO_ROOT
        self.config_file = config_file or os.path.join(self.libs_dir, Constants.LIBS_CONFIG_FILE)
        self.overrides: Dict[str, LibraryCoordinate] = {}
        self._load_overrides()

    def _load_overrides(self) -> None:
        if not os.path.exists(self.config_file):
            self._write_default_config()
            return
        try:
            with open(self.config_file, "r", encoding="utf-8") as fh:
                self.overrides = parse_override_lines(fh.read())
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not load %s: %s", self.config_file, exc)

    def _write_default_config(self) -> None:
        try:
            parent = os.path.dirname(self.config_file)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as fh:
                fh.write(render_default_config())
            logger.info("Created default library config: %s", self.config_file)
        except OSError as exc:
            logger.warning("Could not save %s: %s", self.config_file, exc)

    def all_libraries(self) -> Dict[str, LibraryCoordinate]:
        """Built-in table overlaid with overrides; overrides win by name."""
        merged = {
            name: LibraryCoordinate.parse(coord, name=name) for name, coord in BUILTIN_LIBS.items()
        }
        merged.update(self.overrides)
        return merged

    def resolve_by_name(self, name: str) -> Optional[LibraryCoordinate]:
        override = self.overrides.get(name)
        if override is not None:
            return override
        coord = BUILTIN_LIBS.get(name)
        return LibraryCoordinate.parse(coord, name=name) if coord else None

    def jar_path(self, coordinate: LibraryCoordinate) -> str:
        return os.path.join(self.libs_dir, coordinate.jar_name)

    def is_downloaded(self, coordinate: LibraryCoordinate) -> bool:
        return os.path.exists(self.jar_path(coordinate))

    def fetch(self, coordinate: LibraryCoordinate) -> FetchResult:
        """Download the jar for a coordinate unless it is already present."""
        logger.info("Fetching library %s", coordinate.coordinate)
        return self.fetcher.fetch_file(coordinate.to_url(self.repo_root), self.jar_path(coordinate))

    def fetch_by_name(self, name: str) -> FetchResult:
        coordinate = self.resolve_by_name(name)
        if coordinate is None:
            logger.error("Unknown library: %s", name)
            return FetchResult.failure(f"Unknown library: {name}", ErrorKind.NOT_FOUND)
        return self.fetch(coordinate)

    def fetch_by_coordinate(self, text: str) -> FetchResult:
        try:
            coordinate = LibraryCoordinate.parse(text)
        except InvalidCoordinateError as exc:
            logger.error("%s", exc)
            return FetchResult.failure(str(exc), ErrorKind.CONFIG_PARSE_FAILURE)
        return self.fetch(coordinate)

    def fetch_all(self) -> BulkFetchSummary:
        """Fetch every library in the effective table sequentially."""
        logger.info("Downloading all libraries...")
        summary = BulkFetchSummary()
        for name, coordinate in self.all_libraries().items():
            summary.record(name, self.fetch(coordinate))
        logger.info(
            "Download complete: %d succeeded, %d failed; libraries saved to %s",
            summary.succeeded, summary.failed, self.libs_dir,
        )
        return summary

    def list_libraries(self) -> List[Tuple[str, LibraryCoordinate, bool]]:
        """(name, coordinate, downloaded) for every effective library."""
        return [
            (name, coordinate, self.is_downloaded(coordinate))
            for name, coordinate in self.all_libraries().items()
        ]
