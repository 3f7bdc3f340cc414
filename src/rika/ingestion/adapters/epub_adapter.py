"""EPUB adapter reading spine-ordered documents and Dublin Core metadata."""

from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory

import ebooklib
from ebooklib import epub
from bs4 import BeautifulSoup

from rika.ingestion.normalization import exceeds_bound, join_blocks, joined_length, normalize_whitespace

EPUB_MEDIA_TYPE = "application/epub+zip"

_DC_FIELDS = ("title", "creator", "language", "identifier", "publisher", "subject", "date", "description")
_BLOCK_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "blockquote"]


def _first_non_empty(values: list[tuple[str, dict[str, str]]] | None) -> str | None:
    if not values:
        return None
    for value, _attrs in values:
        cleaned = normalize_whitespace(value or "")
        if cleaned:
            return cleaned
    return None


def _item_blocks(xhtml: bytes) -> list[str]:
    soup = BeautifulSoup(xhtml, "xml")
    body = soup.body or soup

    parts: list[str] = []
    for node in body.find_all(_BLOCK_TAGS):
        text = normalize_whitespace(node.get_text(" ", strip=True))
        if text:
            parts.append(text)

    if parts:
        return parts

    fallback = normalize_whitespace(body.get_text(" ", strip=True))
    return [fallback] if fallback else []


def _read_book(payload: bytes) -> epub.EpubBook:
    # EbookLib expects a filesystem path.
    with TemporaryDirectory() as tmp:
        path = Path(tmp) / "document.epub"
        path.write_bytes(payload)
        return epub.read_epub(str(path), options={"ignore_ncx": True})


class EPUBAdapter:
    """Extract text from EPUB document items in spine order."""

    def supports(self, media_type: str) -> bool:
        return media_type == EPUB_MEDIA_TYPE

    def extract_metadata(self, payload: bytes) -> dict[str, str]:
        book = _read_book(payload)
        metadata: dict[str, str] = {}
        for name in _DC_FIELDS:
            value = _first_non_empty(book.get_metadata("DC", name))
            if value:
                metadata[f"dc:{name}"] = value
        return metadata

    def extract_text(self, payload: bytes, max_chars: int = -1) -> str:
        book = _read_book(payload)
        blocks: list[str] = []
        covered = 0

        for spine_entry in book.spine:
            item_id = spine_entry[0] if isinstance(spine_entry, tuple) else spine_entry
            item = book.get_item_with_id(item_id)
            if item is None or item.get_type() != ebooklib.ITEM_DOCUMENT:
                continue
            if isinstance(item, epub.EpubNav):
                continue

            item_blocks = _item_blocks(item.get_content())
            for block in item_blocks:
                blocks.append(block)
                covered = joined_length(covered, block)
            if exceeds_bound(covered, max_chars):
                break

        return join_blocks(blocks, max_chars)
