"""Media type detection and format-adapter dispatch for raw payloads."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging
import mimetypes
from typing import Sequence
from zipfile import BadZipFile, ZipFile

from rika.ingestion.adapters import FormatAdapter, build_default_adapters
from rika.ingestion.models import CONTENT_TYPE_KEY, ExtractionOutcome

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"
TRUNCATED_KEY = "X-TIKA:content-truncated"

_SNIFF_BYTES = 4096
_ZIP_MAGIC = b"PK\x03\x04"
_EPUB_MIMETYPE_ENTRY = b"mimetypeapplication/epub+zip"
_MAGIC_PREFIXES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF-", "application/pdf"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"{\\rtf", "application/rtf"),
)
_BOMS = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")


@dataclass(slots=True, eq=False)
class DocumentParseError(Exception):
    """Raised when a payload cannot be parsed as its detected media type."""

    media_type: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (media_type={self.media_type})"


def _sniff_zip(payload: bytes) -> str:
    if payload[30:30 + len(_EPUB_MIMETYPE_ENTRY)] == _EPUB_MIMETYPE_ENTRY:
        return "application/epub+zip"
    try:
        with ZipFile(BytesIO(payload)) as archive:
            names = [name.lower() for name in archive.namelist()]
    except BadZipFile:
        return "application/zip"
    if "meta-inf/container.xml" in names and "mimetype" in names:
        return "application/epub+zip"
    if any(name.endswith(".fb2") for name in names):
        return "application/x-zip-compressed-fb2"
    return "application/zip"


def _sniff_markup(head: bytes) -> str | None:
    stripped = head
    for bom in _BOMS:
        if stripped.startswith(bom):
            stripped = stripped[len(bom):]
            break
    window = stripped.lstrip()[:1024].lower()
    if b"<fictionbook" in window:
        return "application/x-fictionbook+xml"
    if window.startswith((b"<!doctype html", b"<html")) or b"<html" in window[:256]:
        return "text/html"
    if window.startswith(b"<?xml"):
        return "application/xml"
    return None


def _base_type(declared: str | None) -> str | None:
    if not declared:
        return None
    base = declared.split(";", 1)[0].strip().lower()
    return base or None


def detect_media_type(payload: bytes, *, name: str | None = None, declared_type: str | None = None) -> str:
    """Best-effort media type: magic bytes, then declared type, then name, then heuristics."""

    head = payload[:_SNIFF_BYTES]
    for prefix, media_type in _MAGIC_PREFIXES:
        if head.startswith(prefix):
            return media_type
    if head.startswith(_ZIP_MAGIC):
        return _sniff_zip(payload)

    markup = _sniff_markup(head)
    if markup and markup != "application/xml":
        return markup

    declared = _base_type(declared_type)
    if declared and declared != OCTET_STREAM:
        return declared

    if name:
        guessed, _encoding = mimetypes.guess_type(name, strict=False)
        if guessed:
            return guessed

    if markup:
        return markup
    if not head or b"\x00" not in head:
        return "text/plain"
    return OCTET_STREAM


class ExtractionEngine:
    """Detect a payload's media type and run the matching format adapter."""

    def __init__(self, adapters: Sequence[FormatAdapter] | None = None) -> None:
        self._adapters = list(adapters) if adapters is not None else build_default_adapters()

    @property
    def adapters(self) -> list[FormatAdapter]:
        return list(self._adapters)

    def adapter_for(self, media_type: str) -> FormatAdapter | None:
        for adapter in self._adapters:
            if adapter.supports(media_type):
                return adapter
        return None

    def extract(
        self,
        payload: bytes,
        max_length: int = -1,
        *,
        name: str | None = None,
        declared_type: str | None = None,
    ) -> ExtractionOutcome:
        """Return media type, text bounded by *max_length* and metadata.

        ``max_length`` of -1 is unbounded and 0 skips text extraction.
        """

        media_type = detect_media_type(payload, name=name, declared_type=declared_type)
        metadata: dict[str, str] = {CONTENT_TYPE_KEY: media_type, "Content-Length": str(len(payload))}
        if name:
            metadata["resourceName"] = name

        adapter = self.adapter_for(media_type)
        if adapter is None:
            logger.info("No adapter for %s; returning metadata only", media_type)
            return ExtractionOutcome(media_type=media_type, content="", metadata=metadata)

        try:
            metadata.update(adapter.extract_metadata(payload))
            content = adapter.extract_text(payload, max_length) if max_length != 0 else ""
        except Exception as exc:
            raise DocumentParseError(media_type, f"Adapter extraction failed: {exc}") from exc

        # Adapters only stop early after passing the bound, so text within it is complete.
        if max_length >= 0 and len(content) > max_length:
            content = content[:max_length]
            metadata[TRUNCATED_KEY] = "true"

        metadata[CONTENT_TYPE_KEY] = media_type
        return ExtractionOutcome(media_type=media_type, content=content, metadata=metadata)
