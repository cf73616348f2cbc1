"""Parsing for mapping version specifiers and registry keys."""

import re
from typing import Optional, Tuple

from .models import MappingKey, MappingKind, VersionSpecifier

_MC_VERSION = re.compile(r"^\d+\.\d+(?:\.\d+)?$")
_LABEL = re.compile(r"^(stable|snapshot)_(\w+)$")


def split_label(label: str) -> Tuple[Optional[MappingKind], Optional[str]]:
    """Return (kind, revision) for ``stable_39`` style labels, else (None, None)."""
    match = _LABEL.match(label)
    if not match:
        return None, None
    return MappingKind(match.group(1)), match.group(2)


def parse_specifier(text: str) -> VersionSpecifier:
    """Parse a user specifier into its structured parts.

    Accepts ``stable_NN``, ``snapshot_YYYYMMDD``, ``MCVER-stable_NN``,
    ``MCVER-snapshot_DATE`` and bare ``MCVER``. Anything else keeps only
    ``raw`` and is matched purely by substring.
    """
    raw = text.strip()
    if _MC_VERSION.match(raw):
        return VersionSpecifier(raw=raw, mc_version=raw, kind=None, revision=None)

    head, sep, tail = raw.partition("-")
    if sep and _MC_VERSION.match(head):
        kind, revision = split_label(tail)
        if kind is not None:
            return VersionSpecifier(raw=raw, mc_version=head, kind=kind, revision=revision)

    kind, revision = split_label(raw)
    return VersionSpecifier(raw=raw, mc_version=None, kind=kind, revision=revision)


def parse_key(text: str) -> MappingKey:
    """Parse a registry key; raises ValueError when it has no ``-`` separator."""
    head, sep, label = text.partition("-")
    if not sep or not head or not label:
        raise ValueError(f"Invalid mapping key: {text!r}")
    kind, _ = split_label(label)
    # Revision is whatever follows the label's first underscore.
    _, _, revision = label.partition("_")
    return MappingKey(text=text, mc_version=head, label=label, kind=kind, revision=revision)


def matches_strongly(parsed: VersionSpecifier, key: MappingKey) -> bool:
    """First-pass match: substring of the key, or same label regardless of MC version."""
    if parsed.raw and parsed.raw in key.text:
        return True
    return parsed.label is not None and parsed.label == key.label


def matches_weakly(parsed: VersionSpecifier, key: MappingKey) -> bool:
    """Fallback match: label equals the specifier, or the specifier contains the revision."""
    if key.label == parsed.raw:
        return True
    return bool(key.revision) and key.revision in parsed.raw


def normalize_revision(token: str) -> str:
    """Reduce ``stable_39`` / ``39-1.12`` style tokens to the bare revision."""
    if "_" in token:
        return token.split("_", 1)[1]
    if "-" in token:
        return token.split("-", 1)[0]
    return token
