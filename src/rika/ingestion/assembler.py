"""Build normalized extraction results from raw engine outcomes."""

from __future__ import annotations

from rika.ingestion.language_detection import TextLanguageDetector
from rika.ingestion.models import (
    CONTENT_TYPE_KEY,
    DATA_SOURCE_KEY,
    LANGUAGE_KEY,
    ExtractionOutcome,
    ExtractionResult,
    InputType,
)


def sort_metadata(metadata: dict[str, str]) -> dict[str, str]:
    """Order keys case-insensitively; ties keep their original order."""

    return dict(sorted(metadata.items(), key=lambda item: item[0].casefold()))


def assemble_result(
    target: str,
    input_type: InputType,
    outcome: ExtractionOutcome,
    max_content_length: int,
    *,
    detector: TextLanguageDetector,
    key_sort: bool = True,
) -> ExtractionResult:
    """Combine *outcome* with the detected language and provenance keys."""

    language = detector.detect(outcome.content)

    metadata = dict(outcome.metadata)
    metadata[LANGUAGE_KEY] = language
    metadata[DATA_SOURCE_KEY] = target
    if key_sort:
        metadata = sort_metadata(metadata)

    return ExtractionResult(
        content=outcome.content,
        metadata=metadata,
        content_type=metadata.get(CONTENT_TYPE_KEY),
        language=language,
        input_type=input_type,
        data_source=target,
        max_content_length=max_content_length,
    )
