"""Format adapter implementations and contracts."""

import logging

from .base import FormatAdapter

logger = logging.getLogger(__name__)

try:
    from .pdf_adapter import PDFAdapter
except ImportError:
    PDFAdapter = None
    logger.warning("PDF support unavailable: install 'pymupdf'")

try:
    from .epub_adapter import EPUBAdapter
except ImportError:
    EPUBAdapter = None
    logger.warning("EPUB support unavailable: install 'EbookLib' and 'beautifulsoup4'")

try:
    from .fb2_adapter import FB2Adapter
except ImportError:
    FB2Adapter = None
    logger.warning("FB2 support unavailable: install 'lxml'")

try:
    from .html_adapter import HTMLAdapter
except ImportError:
    HTMLAdapter = None
    logger.warning("HTML support unavailable: install 'beautifulsoup4' and 'lxml'")

try:
    from .txt_adapter import TXTAdapter
except ImportError:
    TXTAdapter = None
    logger.warning("TXT support unavailable: install 'charset-normalizer'")


def build_default_adapters() -> list[FormatAdapter]:
    """Return the default adapters in dispatch order; plain text goes last."""
    adapters: list[FormatAdapter] = []
    for adapter_cls in (PDFAdapter, EPUBAdapter, FB2Adapter, HTMLAdapter, TXTAdapter):
        if adapter_cls is not None:
            adapters.append(adapter_cls())
    return adapters


__all__ = [
    "FormatAdapter",
    "PDFAdapter",
    "EPUBAdapter",
    "FB2Adapter",
    "HTMLAdapter",
    "TXTAdapter",
    "build_default_adapters",
]
