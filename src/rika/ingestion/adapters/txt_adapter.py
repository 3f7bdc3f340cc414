"""TXT adapter with encoding detection."""

from __future__ import annotations

from charset_normalizer import from_bytes

TEXT_MEDIA_PREFIX = "text/"
_TEXTUAL_APPLICATION_TYPES = frozenset(
    {
        "application/json",
        "application/xml",
        "application/javascript",
        "application/x-sh",
        "application/x-yaml",
        "application/yaml",
        "application/x-python-code",
    }
)


def detect_encoding(raw: bytes) -> str:
    best = from_bytes(raw).best()
    if best and best.encoding:
        name = best.encoding.lower()
        if name in {"windows-1251", "cp1251"}:
            return "cp1251"
        return best.encoding

    for fallback in ("utf-8", "cp1251"):
        try:
            raw.decode(fallback)
            return fallback
        except UnicodeDecodeError:
            continue
    raise ValueError("Could not detect text encoding")


class TXTAdapter:
    """Decode plain-text resources with robust charset handling."""

    def supports(self, media_type: str) -> bool:
        return media_type.startswith(TEXT_MEDIA_PREFIX) or media_type in _TEXTUAL_APPLICATION_TYPES

    def extract_metadata(self, payload: bytes) -> dict[str, str]:
        encoding = detect_encoding(payload)
        return {"Content-Encoding": encoding}

    def extract_text(self, payload: bytes, max_chars: int = -1) -> str:
        encoding = detect_encoding(payload)
        text = payload.decode(encoding, errors="replace")
        if text.startswith("\ufeff"):
            text = text[1:]
        return text
