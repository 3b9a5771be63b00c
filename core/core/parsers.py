"""Parsers for the output of package manager query commands.

All functions here are pure: they take the captured text of a command and
return the items found in it. Tool output is not a contract uptodate
controls, so lines that do not have the expected shape are skipped rather
than treated as errors.

Supported formats:
    Orphan report (``pacman -Qtdq``, ``yay -Qtdq``)::

        libfoo
        python-bar

    Installed list (``cargo install --list``)::

        ripgrep v14.1.0:
            rg
        tm v0.3.0 (/home/user/src/tm):
            tm
"""

from __future__ import annotations

import re

from .models import PackageOrigin, ParsedEntry

_WINDOWS_PATH = re.compile(r"^[A-Za-z]:[\\/]")
_VERSION = re.compile(r"^v\d")


def parse_orphan_packages(text: str) -> list[str]:
    """Extract package identifiers from an orphan report.

    Each non-blank line is expected to hold one identifier. Lines that
    contain whitespace inside them or end with a colon are headers or
    footers, not identifiers, and are skipped.

    Args:
        text: Captured standard output of the orphan query.

    Returns:
        Identifiers in the order they appear, duplicates kept.
    """
    packages: list[str] = []
    for line in text.splitlines():
        candidate = line.strip()
        if not candidate:
            continue
        if len(candidate.split()) != 1 or candidate.endswith(":"):
            continue
        packages.append(candidate)
    return packages


def classify_origin(marker: str | None) -> PackageOrigin:
    """Classify the source marker that follows a package version.

    Args:
        marker: The parenthesised source marker, with or without the
            parentheses and trailing colon. None when the line had none.

    Returns:
        LOCAL_PATH for filesystem sources, REGISTRY for registry sources
        or a missing marker, UNKNOWN for anything else (e.g. git URLs).
    """
    if not marker:
        return PackageOrigin.REGISTRY

    source = marker.strip().rstrip(":").strip("()")
    if not source:
        return PackageOrigin.REGISTRY

    if source.startswith(("path+", "file://", "/")) or _WINDOWS_PATH.match(source):
        return PackageOrigin.LOCAL_PATH
    if source.startswith(("registry+", "sparse+")):
        return PackageOrigin.REGISTRY
    return PackageOrigin.UNKNOWN


def parse_installed_list(text: str) -> list[ParsedEntry]:
    """Parse the output of ``cargo install --list``.

    Top-level lines describe an installed crate as
    ``name [version] [(source)]``, optionally ending in a colon. Indented
    lines list the binaries the crate provides and are skipped.

    Args:
        text: Captured standard output of the list command.

    Returns:
        Parsed entries in the order they appear.
    """
    entries: list[ParsedEntry] = []
    for line in text.splitlines():
        if not line or line[0].isspace():
            continue

        tokens = line.split()
        if not tokens:
            continue

        name = tokens[0].rstrip(":")
        if not name:
            continue

        version: str | None = None
        marker_tokens = tokens[1:]
        if marker_tokens and not marker_tokens[0].startswith("("):
            version = _clean_version(marker_tokens[0])
            marker_tokens = marker_tokens[1:]

        marker = " ".join(marker_tokens) or None
        entries.append(ParsedEntry(name=name, version=version, origin=classify_origin(marker)))
    return entries


def _clean_version(token: str) -> str | None:
    version = token.rstrip(":")
    if _VERSION.match(version):
        version = version[1:]
    return version or None
