"""Shared adapter contract for per-format extraction parsers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FormatAdapter(Protocol):
    """Protocol that every format adapter must implement."""

    def supports(self, media_type: str) -> bool:
        """Return True when this adapter can parse the given media type."""

    def extract_metadata(self, payload: bytes) -> dict[str, str]:
        """Return Tika-style metadata for the payload."""

    def extract_text(self, payload: bytes, max_chars: int = -1) -> str:
        """Return the document text; may stop early once it runs past *max_chars*."""
