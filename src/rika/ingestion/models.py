"""Canonical data structures shared by the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


LANGUAGE_KEY = "rika:language"
DATA_SOURCE_KEY = "rika:data-source"
CONTENT_TYPE_KEY = "Content-Type"


class InputType(str, Enum):
    FILE = "file"
    HTTP = "http"


@dataclass(slots=True)
class ExtractionOutcome:
    """Raw engine output for one resource, before normalization."""

    media_type: str
    content: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Normalized per-target record handed to the formatters."""

    content: str
    metadata: dict[str, str]
    content_type: str | None
    language: str
    input_type: InputType
    data_source: str
    max_content_length: int = -1

    @property
    def is_file(self) -> bool:
        return self.input_type is InputType.FILE

    @property
    def is_http(self) -> bool:
        return self.input_type is InputType.HTTP

    def content_and_metadata(self) -> dict[str, object]:
        return {"content": self.content, "metadata": self.metadata}

    def to_dict(self) -> dict[str, object]:
        return {
            "content": self.content,
            "metadata": self.metadata,
            "content_type": self.content_type,
            "language": self.language,
            "input_type": self.input_type.value,
            "data_source": self.data_source,
            "max_content_length": self.max_content_length,
        }
