from __future__ import annotations

import json

import pytest
import yaml

from rika.formatters import FormatError, OutputFormat, get_formatter, parse_format_spec

_SAMPLE = {"metadata": {"Content-Type": "text/plain", "dc:title": "Straße"}, "text": "Hello"}


def test_every_code_maps_to_a_renderer() -> None:
    for fmt in OutputFormat:
        assert isinstance(get_formatter(fmt.value)(_SAMPLE), str)


def test_json_formats_round_trip_and_keep_unicode() -> None:
    compact = get_formatter("j")(_SAMPLE)
    pretty = get_formatter("J")(_SAMPLE)

    assert "\n" not in compact
    assert "Straße" in compact
    assert pretty.count("\n") > 2
    assert json.loads(compact) == json.loads(pretty) == _SAMPLE


def test_yaml_format_is_loadable_document() -> None:
    rendered = get_formatter("y")(_SAMPLE)

    assert rendered.startswith("---")
    assert yaml.safe_load(rendered) == _SAMPLE


def test_plain_and_inspect_formats() -> None:
    assert get_formatter("t")("some text") == "some text"
    assert get_formatter("i")("some text") == "'some text'"
    assert "dc:title" in get_formatter("a")(_SAMPLE)


def test_unknown_code_raises_format_error() -> None:
    with pytest.raises(FormatError, match="'q'"):
        get_formatter("q")


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("j", (OutputFormat.JSON, OutputFormat.JSON)),
        ("at", (OutputFormat.AWESOME_PRINT, OutputFormat.TO_S)),
        ("yJx", (OutputFormat.YAML, OutputFormat.PRETTY_JSON)),
    ],
)
def test_format_spec_expansion(spec: str, expected: tuple[OutputFormat, OutputFormat]) -> None:
    assert parse_format_spec(spec) == expected


@pytest.mark.parametrize("spec", ["", "x", "ax", "xa"])
def test_invalid_format_specs(spec: str) -> None:
    with pytest.raises(FormatError):
        parse_format_spec(spec)


def test_record_capable_formats() -> None:
    assert {fmt for fmt in OutputFormat if fmt.renders_records} == {
        OutputFormat.JSON,
        OutputFormat.PRETTY_JSON,
        OutputFormat.YAML,
    }


def test_format_errors_are_hashable() -> None:
    assert len({FormatError("q"), FormatError("q")}) == 2
