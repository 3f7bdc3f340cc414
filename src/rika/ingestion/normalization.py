"""Text normalization helpers used by the format adapters."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def joined_length(length: int, block: str, separator: str = "\n") -> int:
    """Length of the joined text once *block* follows *length* characters."""

    return length + len(block) + (len(separator) if length else 0)


def exceeds_bound(length: int, max_chars: int) -> bool:
    """True once *length* runs past a non-negative *max_chars*."""

    return 0 <= max_chars < length


def join_blocks(blocks: list[str], max_chars: int = -1, *, separator: str = "\n") -> str:
    """Join text blocks, stopping once the text runs past *max_chars*.

    Early stopping only happens after the bound is exceeded, so a result no
    longer than *max_chars* is always the complete text. Callers truncate.
    A negative bound means no limit.
    """

    parts: list[str] = []
    length = 0
    for block in blocks:
        parts.append(block)
        length = joined_length(length, block, separator)
        if exceeds_bound(length, max_chars):
            break
    return separator.join(parts)
