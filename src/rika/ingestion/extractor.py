"""Seam between validated targets and the extraction engine.

Opens the target (local file or HTTP resource), hands the payload to the
:class:`ExtractionEngine` and translates every failure into one of the
extraction-time issue categories. Expected failures are returned as
:class:`ExtractionFailure` values instead of being raised.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import socket
from urllib.parse import unquote, urlsplit

import httpx

from rika.ingestion.engine import DocumentParseError, ExtractionEngine
from rika.ingestion.issues import IssueCategory
from rika.ingestion.models import ExtractionOutcome, InputType
from rika.ingestion.targets import looks_like_url
from rika.version import VERSION

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = f"rika/{VERSION}"

_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


@dataclass(frozen=True, slots=True)
class ExtractionFailure:
    """A target that could not be extracted, tagged with its issue category."""

    target: str
    category: IssueCategory
    message: str


@dataclass(slots=True, eq=False)
class ExtractionError(Exception):
    """Raised by the library API when a target cannot be extracted."""

    target: str
    category: IssueCategory
    message: str

    def __str__(self) -> str:
        return f"{self.message} (target={self.target}, category={self.category.value})"


def input_type_of(target: str) -> InputType | None:
    """Return the input type of an already-resolved target, or None if unusable."""

    if looks_like_url(target):
        try:
            scheme = urlsplit(target).scheme.lower()
        except ValueError:
            return None
        return InputType.HTTP if scheme in {"http", "https"} else None
    if os.path.isfile(target):
        return InputType.FILE
    return None


def _is_dns_failure(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        if any(marker in str(current).lower() for marker in _DNS_FAILURE_MARKERS):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def categorize_http_error(exc: httpx.HTTPError | httpx.InvalidURL) -> IssueCategory:
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return IssueCategory.INVALID_INPUT
    if isinstance(exc, httpx.ConnectError) and _is_dns_failure(exc):
        return IssueCategory.UNKNOWN_HOST
    return IssueCategory.IO_ERROR


def _url_resource_name(url: str) -> str | None:
    path = urlsplit(url).path
    name = unquote(path.rsplit("/", 1)[-1])
    return name or None


class DocumentExtractor:
    """Read file and HTTP targets and run them through the extraction engine."""

    def __init__(
        self,
        engine: ExtractionEngine | None = None,
        *,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._engine = engine or ExtractionEngine()
        self._http_client = http_client
        self._owns_client = http_client is None
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent

    def __enter__(self) -> DocumentExtractor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    @property
    def http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(
                timeout=self._timeout_seconds,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
            )
        return self._http_client

    def extract(self, target: str, max_content_length: int = -1) -> ExtractionOutcome | ExtractionFailure:
        """Extract *target*, returning the engine outcome or a categorized failure."""

        if max_content_length < -1:
            raise ValueError("max_content_length must be -1, 0 or positive")

        input_type = input_type_of(target)
        if input_type is None:
            return self._failure(target, IssueCategory.INVALID_INPUT, "Target is neither a file nor an HTTP(S) URL")

        try:
            if input_type is InputType.FILE:
                payload = self._read_file(target)
                name, declared_type = os.path.basename(target), None
            else:
                payload, declared_type = self._fetch(target)
                name = _url_resource_name(target)
        except OSError as exc:
            return self._failure(target, IssueCategory.IO_ERROR, f"Failed to read source file: {exc}")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return self._failure(target, categorize_http_error(exc), f"HTTP request failed: {exc}")

        try:
            return self._engine.extract(payload, max_content_length, name=name, declared_type=declared_type)
        except DocumentParseError as exc:
            return self._failure(target, IssueCategory.IO_ERROR, str(exc))

    def _read_file(self, path: str) -> bytes:
        with open(path, "rb") as stream:
            return stream.read()

    def _fetch(self, url: str) -> tuple[bytes, str | None]:
        with self.http_client.stream("GET", url) as response:
            response.raise_for_status()
            payload = response.read()
            return payload, response.headers.get("content-type")

    def _failure(self, target: str, category: IssueCategory, message: str) -> ExtractionFailure:
        logger.info("Extraction failed for %s (%s): %s", target, category.value, message)
        return ExtractionFailure(target=target, category=category, message=message)
