"""Two-column scope diff shown when a token's scope path is wrong."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Sequence

_INDENT = "  "


class DiffKind(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


_PREFIX_BY_KIND: dict[DiffKind, str] = {
    DiffKind.ADDED: "+ ",
    DiffKind.REMOVED: "- ",
    DiffKind.UNCHANGED: "  ",
}


@dataclass(frozen=True)
class DiffEntry:
    scope: str
    kind: DiffKind

    def render(self) -> str:
        return _PREFIX_BY_KIND[self.kind] + self.scope

    def as_dict(self) -> dict[str, object]:
        return {"scope": self.scope, "kind": self.kind.value}


@dataclass(frozen=True)
class ScopeDiff:
    expected: tuple[DiffEntry, ...]
    actual: tuple[DiffEntry, ...]

    @property
    def added(self) -> tuple[str, ...]:
        return tuple(entry.scope for entry in self.actual if entry.kind is DiffKind.ADDED)

    @property
    def removed(self) -> tuple[str, ...]:
        return tuple(entry.scope for entry in self.expected if entry.kind is DiffKind.REMOVED)

    def as_dict(self) -> dict[str, object]:
        return {
            "expected": [entry.as_dict() for entry in self.expected],
            "actual": [entry.as_dict() for entry in self.actual],
        }


def classify_scope(scope: str, expected: Sequence[str], actual: Sequence[str]) -> DiffKind:
    in_expected = scope in expected
    in_actual = scope in actual
    if in_actual and not in_expected:
        return DiffKind.ADDED
    if in_expected and not in_actual:
        return DiffKind.REMOVED
    return DiffKind.UNCHANGED


def diff_scopes(expected: Sequence[str], actual: Sequence[str]) -> ScopeDiff:
    """Classify each scope of both paths; unchanged names appear in both columns."""
    return ScopeDiff(
        expected=tuple(DiffEntry(scope, classify_scope(scope, expected, actual)) for scope in expected),
        actual=tuple(DiffEntry(scope, classify_scope(scope, expected, actual)) for scope in actual),
    )


def render_scope_diff(diff: ScopeDiff) -> list[str]:
    lines = ["scopes in spec"]
    lines.extend(_INDENT + entry.render() for entry in diff.expected)
    lines.append("")
    lines.append("actual scopes")
    lines.extend(_INDENT + entry.render() for entry in diff.actual)
    return lines
