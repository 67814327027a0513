from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Callable, TypeAlias

from scopecheck.diff_report import ScopeDiff, render_scope_diff

EchoFn: TypeAlias = Callable[[str], None]

_INDENT = "  "


class DiagnosticKind(StrEnum):
    EXHAUSTED_SPECS = "exhausted_specs"
    CONTENT_MISMATCH = "content_mismatch"
    SCOPE_MISMATCH = "scope_mismatch"
    STACK_DISCIPLINE = "stack_discipline"
    UNCONSUMED_SPECS = "unconsumed_specs"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    token_text: str = ""
    expected: tuple[str, ...] = ()
    actual: tuple[str, ...] = ()
    diff: ScopeDiff | None = None
    line_number: int | None = None

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "kind": self.kind.value,
            "message": self.message,
            "token_text": self.token_text,
            "expected": list(self.expected),
            "actual": list(self.actual),
            "line_number": self.line_number,
        }
        if self.diff is not None:
            payload["diff"] = self.diff.as_dict()
        return payload


def render_diagnostic(diagnostic: Diagnostic) -> list[str]:
    head = diagnostic.message
    if diagnostic.line_number is not None:
        head = f"line {diagnostic.line_number}: {head}"
    lines = [head]
    if diagnostic.diff is not None:
        lines.append("")
        lines.extend(_INDENT + line if line else line for line in render_scope_diff(diagnostic.diff))
        lines.append("")
    return lines


class DiagnosticCollector:
    """Records diagnostics for one verification run.

    Rendered lines are forwarded to ``echo_fn`` as each diagnostic arrives, so
    a caller that prints sees output in the order problems were found.
    """

    def __init__(self, echo_fn: EchoFn | None = None) -> None:
        self._echo_fn = echo_fn
        self._diagnostics: list[Diagnostic] = []
        self.line_number: int | None = None

    def record(self, diagnostic: Diagnostic) -> Diagnostic:
        if diagnostic.line_number is None and self.line_number is not None:
            diagnostic = replace(diagnostic, line_number=self.line_number)
        self._diagnostics.append(diagnostic)
        if self._echo_fn is not None:
            for line in render_diagnostic(diagnostic):
                self._echo_fn(line)
        return diagnostic

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def has_errors(self, *, include_stack_errors: bool = True) -> bool:
        for diagnostic in self._diagnostics:
            if diagnostic.kind is DiagnosticKind.STACK_DISCIPLINE and not include_stack_errors:
                continue
            return True
        return False
