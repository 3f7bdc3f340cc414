"""HTML adapter: visible text plus title and <meta> metadata."""

from __future__ import annotations

from bs4 import BeautifulSoup

from rika.ingestion.normalization import join_blocks, normalize_whitespace

HTML_MEDIA_TYPES = frozenset({"text/html", "application/xhtml+xml"})

_INVISIBLE_TAGS = ["script", "style", "noscript", "template", "head"]


def _soup(payload: bytes) -> BeautifulSoup:
    return BeautifulSoup(payload, "lxml")


class HTMLAdapter:
    """Extract readable text from HTML pages."""

    def supports(self, media_type: str) -> bool:
        return media_type in HTML_MEDIA_TYPES

    def extract_metadata(self, payload: bytes) -> dict[str, str]:
        soup = _soup(payload)
        metadata: dict[str, str] = {}

        if soup.title and soup.title.string:
            title = normalize_whitespace(soup.title.string)
            if title:
                metadata["dc:title"] = title

        html = soup.find("html")
        if html is not None and html.get("lang"):
            metadata["Content-Language"] = str(html["lang"]).strip()

        for tag in soup.find_all("meta"):
            name = tag.get("name") or tag.get("property") or tag.get("http-equiv")
            content = tag.get("content")
            if not name or content is None:
                continue
            value = normalize_whitespace(str(content))
            if value:
                metadata[str(name).strip()] = value

        if soup.original_encoding:
            metadata["Content-Encoding"] = soup.original_encoding
        return metadata

    def extract_text(self, payload: bytes, max_chars: int = -1) -> str:
        soup = _soup(payload)
        for tag in soup.find_all(_INVISIBLE_TAGS):
            tag.decompose()

        root = soup.body or soup
        lines = (normalize_whitespace(line) for line in root.get_text("\n").splitlines())
        return join_blocks([line for line in lines if line], max_chars)
