from __future__ import annotations

import pytest

from rika.ingestion.normalization import exceeds_bound, join_blocks, joined_length, normalize_whitespace


def test_normalize_whitespace_collapses_runs() -> None:
    assert normalize_whitespace("  one\t two\n\nthree ") == "one two three"


def test_joined_length_counts_separator_between_blocks_only() -> None:
    length = joined_length(0, "abc")
    assert length == 3
    assert joined_length(length, "def") == len("abc\ndef")


@pytest.mark.parametrize(
    ("max_chars", "expected"),
    [
        (-1, "abc\ndef\nghi"),
        (0, "abc"),
        (3, "abc\ndef"),
        (4, "abc\ndef"),
        (7, "abc\ndef\nghi"),
        (11, "abc\ndef\nghi"),
    ],
)
def test_join_blocks_stops_only_after_passing_bound(max_chars: int, expected: str) -> None:
    joined = join_blocks(["abc", "def", "ghi"], max_chars)

    assert joined == expected
    full = "abc\ndef\nghi"
    assert joined[: max(max_chars, 0)] == full[: max(max_chars, 0)]
    if max_chars >= 0 and len(joined) <= max_chars:
        assert joined == full


def test_exceeds_bound_ignores_negative_limit() -> None:
    assert not exceeds_bound(10_000, -1)
    assert not exceeds_bound(5, 5)
    assert exceeds_bound(6, 5)
