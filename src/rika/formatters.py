"""Output formatters selected by single-character format codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
from typing import Any, Callable

from rich.pretty import pretty_repr
import yaml

RenderFn = Callable[[Any], str]

DEFAULT_FORMAT_SPEC = "at"


@dataclass(slots=True, eq=False)
class FormatError(ValueError):
    """Raised for an unknown or missing format code."""

    code: str

    def __str__(self) -> str:
        valid = ", ".join(fmt.value for fmt in OutputFormat)
        return f"Invalid format code: {self.code!r} (valid codes: {valid})"


def _awesome_print(obj: Any) -> str:
    return pretty_repr(obj, max_width=100, expand_all=True)


def _json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, default=str)


def _pretty_json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, default=str)


def _yaml(obj: Any) -> str:
    return yaml.safe_dump(
        obj,
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=False,
        explicit_start=True,
    ).rstrip("\n")


class OutputFormat(str, Enum):
    """Closed set of output formats, keyed by their command-line code."""

    AWESOME_PRINT = "a"
    INSPECT = "i"
    JSON = "j"
    PRETTY_JSON = "J"
    TO_S = "t"
    YAML = "y"

    @classmethod
    def from_code(cls, code: str) -> OutputFormat:
        for fmt in cls:
            if fmt.value == code:
                return fmt
        raise FormatError(code)

    @property
    def renders_records(self) -> bool:
        """Whether one rendering can carry a whole {metadata, text} record."""
        return self in {OutputFormat.JSON, OutputFormat.PRETTY_JSON, OutputFormat.YAML}

    def render(self, obj: Any) -> str:
        return _RENDERERS[self](obj)


_RENDERERS: dict[OutputFormat, RenderFn] = {
    OutputFormat.AWESOME_PRINT: _awesome_print,
    OutputFormat.INSPECT: repr,
    OutputFormat.JSON: _json,
    OutputFormat.PRETTY_JSON: _pretty_json,
    OutputFormat.TO_S: str,
    OutputFormat.YAML: _yaml,
}


def get_formatter(code: str) -> RenderFn:
    return OutputFormat.from_code(code).render


def parse_format_spec(spec: str) -> tuple[OutputFormat, OutputFormat]:
    """Return (metadata format, text format) for a one- or two-character spec.

    A single character covers both slots; characters past the second are ignored.
    """
    if not spec:
        raise FormatError(spec)
    if len(spec) == 1:
        spec = spec * 2
    return OutputFormat.from_code(spec[0]), OutputFormat.from_code(spec[1])
