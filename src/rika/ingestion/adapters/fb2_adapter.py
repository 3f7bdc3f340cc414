"""FB2 adapter with raw and zipped container support."""

from __future__ import annotations

from io import BytesIO
from zipfile import BadZipFile, ZipFile

from lxml import etree

from rika.ingestion.normalization import exceeds_bound, join_blocks, joined_length, normalize_whitespace

FB2_MEDIA_TYPE = "application/x-fictionbook+xml"
ZIPPED_FB2_MEDIA_TYPE = "application/x-zip-compressed-fb2"

_ZIP_MAGIC = b"PK\x03\x04"


def _local_name(node: etree._Element) -> str:
    return etree.QName(node).localname


def _child_text(parent: etree._Element | None, name: str) -> str | None:
    if parent is None:
        return None
    for child in parent:
        if isinstance(child.tag, str) and _local_name(child) == name:
            text = normalize_whitespace("".join(child.itertext()))
            if text:
                return text
    return None


def _find_first(root: etree._Element, name: str) -> etree._Element | None:
    for node in root.iter():
        if isinstance(node.tag, str) and _local_name(node) == name:
            return node
    return None


def unzip_fb2(raw: bytes) -> bytes:
    """Return the first ``.fb2`` member of a zip archive."""

    try:
        with ZipFile(BytesIO(raw)) as archive:
            members = [name for name in archive.namelist() if name.lower().endswith(".fb2")]
            if not members:
                raise ValueError("Zip archive does not contain an .fb2 document")
            return archive.read(members[0])
    except BadZipFile as exc:
        raise ValueError(f"Corrupt FB2 zip container: {exc}") from exc


class FB2Adapter:
    """Extract text and metadata from FictionBook sources."""

    def supports(self, media_type: str) -> bool:
        return media_type in {FB2_MEDIA_TYPE, ZIPPED_FB2_MEDIA_TYPE}

    def extract_metadata(self, payload: bytes) -> dict[str, str]:
        root = self._parse(payload)
        title_info = _find_first(root, "title-info")
        metadata: dict[str, str] = {}

        title = _child_text(title_info, "book-title")
        if title:
            metadata["dc:title"] = title

        author_node = None
        if title_info is not None:
            author_node = next(
                (child for child in title_info if isinstance(child.tag, str) and _local_name(child) == "author"),
                None,
            )
        if author_node is not None:
            names = [
                _child_text(author_node, part) for part in ("first-name", "middle-name", "last-name", "nickname")
            ]
            author = " ".join(name for name in names if name)
            if author:
                metadata["dc:creator"] = author

        for field_name, meta_key in (("lang", "dc:language"), ("genre", "dc:subject"), ("date", "dc:date")):
            value = _child_text(title_info, field_name)
            if value:
                metadata[meta_key] = value
        return metadata

    def extract_text(self, payload: bytes, max_chars: int = -1) -> str:
        root = self._parse(payload)
        blocks: list[str] = []
        covered = 0

        for body in (node for node in root if isinstance(node.tag, str) and _local_name(node) == "body"):
            # Footnote bodies are appended after the main text by FB2 convention.
            for node in body.iter():
                if not isinstance(node.tag, str) or _local_name(node) not in {"p", "v", "subtitle", "text-author"}:
                    continue
                text = normalize_whitespace("".join(node.itertext()))
                if not text:
                    continue
                blocks.append(text)
                covered = joined_length(covered, text)
                if exceeds_bound(covered, max_chars):
                    return join_blocks(blocks, max_chars)

        return join_blocks(blocks, max_chars)

    def _parse(self, payload: bytes) -> etree._Element:
        xml_bytes = unzip_fb2(payload) if payload.startswith(_ZIP_MAGIC) else payload
        parser = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)
        return etree.fromstring(xml_bytes, parser=parser)
