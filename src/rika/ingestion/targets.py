"""Classify raw command-line arguments into processable targets and issues."""

from __future__ import annotations

from dataclasses import dataclass, field
import glob
import logging
import os
from typing import Sequence
from urllib.parse import urlsplit

from rika.ingestion.issues import IssueCategory, IssueLog

logger = logging.getLogger(__name__)

URL_MARKER = "://"
_ALLOWED_SCHEMES = frozenset({"http", "https"})


@dataclass(slots=True)
class TargetResolution:
    """Accepted targets in first-seen order plus everything that was rejected."""

    targets: list[str] = field(default_factory=list)
    issues: IssueLog = field(default_factory=IssueLog)


def looks_like_url(arg: str) -> bool:
    return URL_MARKER in arg


def classify_url(arg: str) -> IssueCategory | None:
    """Return the issue category for a URL-shaped argument, or None when usable."""

    if os.path.lexists(arg):
        return IssueCategory.FILE_WITH_URL_LIKE_NAME

    try:
        parts = urlsplit(arg)
        # Accessing port validates it; a malformed port raises ValueError.
        parts.port
    except ValueError:
        return IssueCategory.INVALID_URL

    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        return IssueCategory.BAD_URL_SCHEME
    if not parts.hostname or any(ch.isspace() for ch in arg):
        return IssueCategory.INVALID_URL
    return None


def classify_file(path: str) -> IssueCategory | None:
    """Return the issue category for a non-directory match, or None when usable."""

    if os.path.islink(path):
        return IssueCategory.IS_SYMLINK
    if os.path.getsize(path) == 0:
        return IssueCategory.EMPTY_FILE
    if not os.access(path, os.R_OK):
        return IssueCategory.IO_ERROR
    return None


def _expand_pattern(pattern: str) -> list[str]:
    if glob.has_magic(pattern):
        return sorted(glob.glob(pattern, recursive=True))
    return [pattern] if os.path.lexists(pattern) else []


def resolve_targets(args: Sequence[str]) -> TargetResolution:
    """Split *args* into validated file/URL targets and categorized issues.

    Malformed input never raises; it is recorded in the returned issue log.
    URLs are checked syntactically only, their reachability is verified at
    extraction time.
    """

    resolution = TargetResolution()

    for arg in args:
        if looks_like_url(arg):
            category = classify_url(arg)
            if category is None:
                resolution.targets.append(arg)
            else:
                logger.debug("Rejected URL %s: %s", arg, category.value)
                resolution.issues.add(category, arg)
            continue

        matches = _expand_pattern(arg)
        if not matches:
            logger.debug("No file matches %s", arg)
            resolution.issues.add(IssueCategory.NON_EXISTENT_FILE, arg)
            continue

        for match in matches:
            if not os.path.islink(match) and os.path.isdir(match):
                continue
            category = classify_file(match)
            if category is None:
                resolution.targets.append(match)
            else:
                logger.debug("Rejected file %s: %s", match, category.value)
                resolution.issues.add(category, match)

    return resolution
