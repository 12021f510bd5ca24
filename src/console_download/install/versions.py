"""Semantic version parsing and ordering."""

from __future__ import annotations

import semver

from console_download.utils.errors import InvalidVersionError


def parse_version(value: str | None, source: str) -> semver.Version:
    """Parse a semantic version, accepting a leading ``v`` and short forms.

    ``"2"`` and ``"2.1"`` are read as ``2.0.0`` and ``2.1.0``. ``source``
    names where the value came from and ends up in the error message.
    """
    if value is None:
        raise InvalidVersionError(None, source)
    text = value.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except (ValueError, TypeError) as e:
        raise InvalidVersionError(value, source) from e


def is_older(current: semver.Version, stored: semver.Version) -> bool:
    """Check if the current version sorts strictly before the stored one."""
    return current.compare(stored) < 0
