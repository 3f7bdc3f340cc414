from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from rika.ingestion.api import parse
from rika.ingestion.extractor import DocumentExtractor, ExtractionError
from rika.ingestion.issues import IssueCategory
from rika.ingestion.models import DATA_SOURCE_KEY, LANGUAGE_KEY, InputType


class _FakeDetector:
    def detect(self, text: str) -> str:
        return "de" if text else ""


def test_parse_local_file_returns_full_result(tmp_path: Path) -> None:
    sample = tmp_path / "note.txt"
    sample.write_text("Guten Tag, das ist ein kurzer Text.", encoding="utf-8")

    result = parse(str(sample), detector=_FakeDetector())

    assert result.is_file and not result.is_http
    assert result.input_type is InputType.FILE
    assert result.content.startswith("Guten Tag")
    assert result.language == "de"
    assert result.metadata[LANGUAGE_KEY] == "de"
    assert result.metadata[DATA_SOURCE_KEY] == str(sample)
    assert result.content_and_metadata()["content"] == result.content
    assert list(result.metadata) == sorted(result.metadata, key=str.casefold)


def test_parse_url_uses_supplied_extractor() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"plain remote body", headers={"Content-Type": "text/plain"})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with DocumentExtractor(http_client=client) as extractor:
        result = parse(
            "https://example.com/doc.txt",
            max_content_length=5,
            detector=_FakeDetector(),
            extractor=extractor,
        )

    assert result.is_http
    assert result.content == "plain"
    assert result.max_content_length == 5
    assert result.content_type == "text/plain"


@pytest.mark.parametrize(
    ("source", "category"),
    [
        ("ftp://example.com/file.txt", IssueCategory.BAD_URL_SCHEME),
        ("https://", IssueCategory.INVALID_URL),
        ("definitely-missing-file.txt", IssueCategory.NON_EXISTENT_FILE),
    ],
)
def test_parse_rejects_unusable_sources(source: str, category: IssueCategory) -> None:
    with pytest.raises(ExtractionError) as excinfo:
        parse(source, detector=_FakeDetector())

    assert excinfo.value.category is category
    assert excinfo.value.target == source
