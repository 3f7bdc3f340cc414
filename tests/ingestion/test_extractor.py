from __future__ import annotations

from pathlib import Path
import socket

import httpx
import pytest

from rika.ingestion.engine import ExtractionEngine
from rika.ingestion.extractor import DocumentExtractor, ExtractionError, ExtractionFailure, categorize_http_error
from rika.ingestion.issues import IssueCategory
from rika.ingestion.models import ExtractionOutcome

_PAGE = b"<html><head><title>Remote</title></head><body><p>Remote page body.</p></body></html>"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_extracts_local_file(tmp_path: Path) -> None:
    sample = tmp_path / "a.txt"
    sample.write_text("Local file content for extraction.", encoding="utf-8")

    with DocumentExtractor() as extractor:
        outcome = extractor.extract(str(sample))

    assert isinstance(outcome, ExtractionOutcome)
    assert outcome.content == "Local file content for extraction."
    assert outcome.metadata["resourceName"] == "a.txt"


def test_extracts_http_resource_with_declared_content_type() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, content=_PAGE, headers={"Content-Type": "text/html; charset=utf-8"})

    with DocumentExtractor(http_client=_client(handler)) as extractor:
        outcome = extractor.extract("https://example.com/docs/page.html")

    assert seen == ["https://example.com/docs/page.html"]
    assert isinstance(outcome, ExtractionOutcome)
    assert outcome.media_type == "text/html"
    assert outcome.metadata["dc:title"] == "Remote"
    assert outcome.metadata["resourceName"] == "page.html"
    assert "Remote page body." in outcome.content


def test_non_success_status_is_io_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"not found")

    with DocumentExtractor(http_client=_client(handler)) as extractor:
        outcome = extractor.extract("https://example.com/missing.pdf")

    assert isinstance(outcome, ExtractionFailure)
    assert outcome.category is IssueCategory.IO_ERROR
    assert outcome.target == "https://example.com/missing.pdf"


def test_dns_failure_is_unknown_host() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        try:
            raise socket.gaierror(-2, "Name or service not known")
        except socket.gaierror as exc:
            raise httpx.ConnectError("[Errno -2] Name or service not known", request=request) from exc

    with DocumentExtractor(http_client=_client(handler)) as extractor:
        outcome = extractor.extract("http://no-such-host.invalid/")

    assert isinstance(outcome, ExtractionFailure)
    assert outcome.category is IssueCategory.UNKNOWN_HOST


def test_connection_refused_and_timeouts_are_io_errors() -> None:
    request = httpx.Request("GET", "http://example.com")

    assert categorize_http_error(httpx.ConnectError("Connection refused", request=request)) is IssueCategory.IO_ERROR
    assert categorize_http_error(httpx.ReadTimeout("timed out", request=request)) is IssueCategory.IO_ERROR
    assert categorize_http_error(httpx.UnsupportedProtocol("bad")) is IssueCategory.INVALID_INPUT
    assert categorize_http_error(httpx.InvalidURL("bad")) is IssueCategory.INVALID_INPUT


def test_unusable_target_is_invalid_input(tmp_path: Path) -> None:
    with DocumentExtractor() as extractor:
        missing = extractor.extract(str(tmp_path / "gone.txt"))
        ftp = extractor.extract("ftp://example.com/file")

    assert isinstance(missing, ExtractionFailure)
    assert missing.category is IssueCategory.INVALID_INPUT
    assert isinstance(ftp, ExtractionFailure)
    assert ftp.category is IssueCategory.INVALID_INPUT


def test_malformed_document_is_io_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"%PDF-1.7 truncated garbage")

    with DocumentExtractor() as extractor:
        outcome = extractor.extract(str(broken))

    assert isinstance(outcome, ExtractionFailure)
    assert outcome.category is IssueCategory.IO_ERROR


class _TrackingStream(httpx.SyncByteStream):
    def __init__(self, body: bytes) -> None:
        self.body = body
        self.closed = False

    def __iter__(self):
        yield self.body

    def close(self) -> None:
        self.closed = True


class _CountingAdapter:
    def __init__(self) -> None:
        self.text_calls = 0

    def supports(self, media_type: str) -> bool:
        return True

    def extract_metadata(self, payload: bytes) -> dict[str, str]:
        return {}

    def extract_text(self, payload: bytes, max_chars: int = -1) -> str:
        self.text_calls += 1
        return payload.decode("utf-8")


@pytest.mark.parametrize("status", [200, 500])
def test_http_stream_is_closed_on_every_path(status: int) -> None:
    streams: list[_TrackingStream] = []

    def handler(request: httpx.Request) -> httpx.Response:
        stream = _TrackingStream(b"body text")
        streams.append(stream)
        return httpx.Response(status, stream=stream)

    adapter = _CountingAdapter()
    with DocumentExtractor(ExtractionEngine([adapter]), http_client=_client(handler)) as extractor:
        outcome = extractor.extract("https://example.com/doc.txt", 0)

    assert streams and streams[0].closed
    assert adapter.text_calls == 0
    if status == 200:
        assert isinstance(outcome, ExtractionOutcome)
        assert outcome.content == ""
    else:
        assert isinstance(outcome, ExtractionFailure)


def test_supplied_client_is_not_closed_by_extractor() -> None:
    client = _client(lambda request: httpx.Response(200, content=b"ok"))

    with DocumentExtractor(http_client=client):
        pass

    assert not client.is_closed
    client.close()


def test_rejects_invalid_bounds_and_timeouts() -> None:
    with pytest.raises(ValueError):
        DocumentExtractor(timeout_seconds=0)
    with DocumentExtractor() as extractor:
        with pytest.raises(ValueError):
            extractor.extract("https://example.com", -5)


def test_extraction_errors_are_hashable() -> None:
    error = ExtractionError("missing.txt", IssueCategory.NON_EXISTENT_FILE, "not found")

    assert {error: "seen"}[error] == "seen"
    assert error != ExtractionError("missing.txt", IssueCategory.NON_EXISTENT_FILE, "not found")
