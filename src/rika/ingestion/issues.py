"""Issue categories and the ordered per-run issue log."""

from __future__ import annotations

from enum import Enum
from typing import Iterator


class IssueCategory(str, Enum):
    """Why a target was rejected or could not be processed."""

    NON_EXISTENT_FILE = "non_existent_file"
    EMPTY_FILE = "empty_file"
    IS_SYMLINK = "is_symlink"
    BAD_URL_SCHEME = "bad_url_scheme"
    INVALID_URL = "invalid_url"
    FILE_WITH_URL_LIKE_NAME = "file_with_url_like_name"
    IO_ERROR = "io_error"
    UNKNOWN_HOST = "unknown_host"
    INVALID_INPUT = "invalid_input"


class IssueLog:
    """Mapping of issue category to the targets recorded under it, in order seen."""

    def __init__(self) -> None:
        self._entries: dict[IssueCategory, list[str]] = {category: [] for category in IssueCategory}

    def add(self, category: IssueCategory, target: str) -> None:
        self._entries[IssueCategory(category)].append(target)

    def merge(self, other: IssueLog) -> None:
        for category, targets in other.items():
            self._entries[category].extend(targets)

    def get(self, category: IssueCategory) -> list[str]:
        return list(self._entries[IssueCategory(category)])

    def items(self) -> Iterator[tuple[IssueCategory, list[str]]]:
        """Yield non-empty categories in declaration order."""

        for category, targets in self._entries.items():
            if targets:
                yield category, list(targets)

    def as_dict(self) -> dict[str, list[str]]:
        return {category.value: targets for category, targets in self.items()}

    @property
    def total(self) -> int:
        return sum(len(targets) for targets in self._entries.values())

    def __bool__(self) -> bool:
        return self.total > 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IssueLog):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"IssueLog({self.as_dict()!r})"
