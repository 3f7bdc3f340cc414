"""Language detection for extracted document text."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol

_UNDETERMINED_LANGUAGE = ""
_DEFAULT_SAMPLE_CHARS = 10_000
_ADVISORY_CONFIDENCE = 0.5


class TextLanguageDetector(Protocol):
    def detect(self, text: str) -> str:
        """Return an ISO 639-1 code for *text*."""


def _build_backend() -> Any:
    from lingua import LanguageDetectorBuilder

    return LanguageDetectorBuilder.from_all_languages().build()


class LanguageDetector:
    """Lazy wrapper around a lingua detector.

    The lingua model is built on the first call and reused afterwards. A
    prebuilt *backend* (anything with ``detect_language_of`` and
    ``compute_language_confidence_values``) may be supplied instead.
    """

    def __init__(self, backend: Any | None = None, *, sample_chars: int = _DEFAULT_SAMPLE_CHARS) -> None:
        if sample_chars <= 0:
            raise ValueError("sample_chars must be positive")
        self._backend = backend
        self._sample_chars = sample_chars

    @property
    def backend(self) -> Any:
        if self._backend is None:
            self._backend = _build_backend()
        return self._backend

    def _sample(self, text: str) -> str:
        if not text:
            return ""
        return text[: self._sample_chars].strip()

    def detect(self, text: str) -> str:
        """Return the ISO 639-1 code of *text*, or ``""`` when inconclusive.

        Short inputs may produce a low-confidence guess; the result is not a
        certainty signal.
        """
        sample = self._sample(text)
        if not sample:
            return _UNDETERMINED_LANGUAGE

        result = self.backend.detect_language_of(sample)
        if result is None:
            return _UNDETERMINED_LANGUAGE
        return result.iso_code_639_1.name.lower()

    def is_reasonably_certain(self, text: str, *, threshold: float = _ADVISORY_CONFIDENCE) -> bool:
        """Advisory only: whether the top candidate clears *threshold*.

        Unreliable for short text; never use it to gate processing.
        """
        sample = self._sample(text)
        if not sample:
            return False
        values = self.backend.compute_language_confidence_values(sample)
        if not values:
            return False
        return values[0].value >= threshold


@lru_cache(maxsize=1)
def default_detector() -> LanguageDetector:
    """Process-wide detector; its model loads on first detection."""

    return LanguageDetector()


def detect_language(text: str) -> str:
    return default_detector().detect(text)
