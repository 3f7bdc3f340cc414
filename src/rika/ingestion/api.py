"""Convenience functions for using the extraction pipeline as a library."""

from __future__ import annotations

from rika.ingestion.assembler import assemble_result
from rika.ingestion.extractor import DocumentExtractor, ExtractionError, ExtractionFailure, input_type_of
from rika.ingestion.issues import IssueCategory
from rika.ingestion.language_detection import TextLanguageDetector, default_detector
from rika.ingestion.models import ExtractionResult
from rika.ingestion.targets import classify_url, looks_like_url


def parse(
    data_source: str,
    *,
    key_sort: bool = True,
    max_content_length: int = -1,
    detector: TextLanguageDetector | None = None,
    extractor: DocumentExtractor | None = None,
) -> ExtractionResult:
    """Extract a single file path or HTTP(S) URL.

    Raises :class:`ExtractionError` carrying the issue category when the
    source is invalid or cannot be read.
    """

    if looks_like_url(data_source):
        category = classify_url(data_source)
        if category is not None:
            raise ExtractionError(data_source, category, "Rejected URL")

    input_type = input_type_of(data_source)
    if input_type is None:
        category = IssueCategory.INVALID_INPUT if looks_like_url(data_source) else IssueCategory.NON_EXISTENT_FILE
        raise ExtractionError(data_source, category, "Input is not an available file or HTTP resource")

    if extractor is None:
        with DocumentExtractor() as owned:
            outcome = owned.extract(data_source, max_content_length)
    else:
        outcome = extractor.extract(data_source, max_content_length)

    if isinstance(outcome, ExtractionFailure):
        raise ExtractionError(outcome.target, outcome.category, outcome.message)

    return assemble_result(
        data_source,
        input_type,
        outcome,
        max_content_length,
        detector=detector or default_detector(),
        key_sort=key_sort,
    )


def language(text: str) -> str:
    """Return the ISO 639-1 code of *text* using the process-wide detector."""

    return default_detector().detect(text)
