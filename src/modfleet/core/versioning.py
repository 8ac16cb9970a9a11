"""Semantic version tag helpers."""

import re

_TAG_RE = re.compile(r"^(?P<prefix>v?)(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?:[-+].*)?$")

INITIAL_VERSION = "v0.0.1"


def is_version_tag(tag: str) -> bool:
    return _TAG_RE.match(tag) is not None


def next_patch_version(latest: str | None) -> str:
    """Increment the patch component of the latest tag.

    A pre-release tag (v1.2.3-rc1) is promoted to its release (v1.2.3);
    build metadata is dropped. An untagged repository starts at v0.0.1.

    Examples:
        >>> next_patch_version("v1.4.9")
        'v1.4.10'
        >>> next_patch_version(None)
        'v0.0.1'

    Raises:
        ValueError: If latest is not a semantic version tag
    """
    if latest is None:
        return INITIAL_VERSION

    match = _TAG_RE.match(latest)
    if match is None:
        msg = f"Cannot increment non-semantic tag: {latest!r}"
        raise ValueError(msg)

    prefix = match.group("prefix")
    major = int(match.group("major"))
    minor = int(match.group("minor"))
    patch = int(match.group("patch"))

    release = f"{prefix}{major}.{minor}.{patch}"
    if latest[len(release) :].startswith("-"):
        return release
    return f"{prefix}{major}.{minor}.{patch + 1}"
