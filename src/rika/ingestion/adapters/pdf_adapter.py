"""PDF adapter producing page-ordered text and document info metadata."""

from __future__ import annotations

import logging
import re

import pymupdf

from rika.ingestion.normalization import exceeds_bound, join_blocks, joined_length, normalize_whitespace

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

_PDF_DATE_RE = re.compile(r"^D:(\d{4})(\d{2})?(\d{2})?(\d{2})?(\d{2})?(\d{2})?")
_PDF_DATE_DEFAULTS = ("0000", "01", "01", "00", "00", "00")
_INFO_KEYS = {
    "title": "dc:title",
    "author": "dc:creator",
    "subject": "dc:subject",
    "keywords": "meta:keyword",
    "creator": "xmp:CreatorTool",
    "producer": "pdf:producer",
}


def _pdf_date_to_iso(raw: str) -> str | None:
    match = _PDF_DATE_RE.match(raw.strip())
    if not match:
        return None
    year, month, day, hour, minute, second = (
        part or default for part, default in zip(match.groups(), _PDF_DATE_DEFAULTS)
    )
    return f"{year}-{month}-{day}T{hour}:{minute}:{second}Z"


def _first_non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = normalize_whitespace(value)
    return cleaned or None


class PDFAdapter:
    """Extract text blocks from PDF pages in stable reading order."""

    def supports(self, media_type: str) -> bool:
        return media_type == PDF_MEDIA_TYPE

    def extract_metadata(self, payload: bytes) -> dict[str, str]:
        with pymupdf.open(stream=payload, filetype="pdf") as doc:
            if doc.page_count == 0:
                raise ValueError("PDF contains no pages")
            info = doc.metadata or {}
            metadata: dict[str, str] = {"xmpTPg:NPages": str(doc.page_count)}

            version = _first_non_empty(info.get("format"))
            if version:
                number = version.replace("PDF", "").strip()
                metadata["pdf:PDFVersion"] = number
                metadata["dc:format"] = f"{PDF_MEDIA_TYPE}; version={number}"

            for info_key, meta_key in _INFO_KEYS.items():
                value = _first_non_empty(info.get(info_key))
                if value:
                    metadata[meta_key] = value

            for info_key, meta_key in (("creationDate", "dcterms:created"), ("modDate", "dcterms:modified")):
                raw = info.get(info_key)
                converted = _pdf_date_to_iso(raw) if raw else None
                if converted:
                    metadata[meta_key] = converted

            metadata["pdf:encrypted"] = "true" if doc.is_encrypted else "false"
        return metadata

    def extract_text(self, payload: bytes, max_chars: int = -1) -> str:
        blocks: list[str] = []
        covered = 0

        with pymupdf.open(stream=payload, filetype="pdf") as doc:
            for page in doc:
                page_blocks = page.get_text("blocks")
                ordered = sorted(page_blocks, key=lambda row: (row[1], row[0], row[5]))
                for block in ordered:
                    text = block[4].strip()
                    if text:
                        blocks.append(text)
                        covered = joined_length(covered, text)
                if exceeds_bound(covered, max_chars):
                    logger.debug("Stopped PDF text extraction at page %d", page.number + 1)
                    break

        return join_blocks(blocks, max_chars)
