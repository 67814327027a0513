from __future__ import annotations

from typing import Callable, Iterable

from scopecheck.diagnostics import Diagnostic, DiagnosticKind
from scopecheck.scope_names import ROOT_SCOPE


class ScopeStack:
    """Nested scope context built from expected spans.

    Closing a name that is not on top is reported through ``report`` and the
    pop still happens, so later tokens in the same run are still checked.
    """

    def __init__(
        self,
        root: str = ROOT_SCOPE,
        *,
        report: Callable[[Diagnostic], object] | None = None,
    ) -> None:
        self._stack: list[str] = [root]
        self._report = report

    def apply_opens(self, names: Iterable[str]) -> None:
        for name in names:
            self._stack.append(name)

    def apply_closes(self, names: Iterable[str]) -> None:
        # Closes are declared in opening order; they leave in LIFO order.
        for name in reversed(tuple(names)):
            top = self.top
            if top != name:
                self._mismatch(name, top)
            if self._stack:
                self._stack.pop()

    def current_path(self) -> tuple[str, ...]:
        return tuple(self._stack)

    @property
    def top(self) -> str | None:
        return self._stack[-1] if self._stack else None

    def _mismatch(self, name: str, top: str | None) -> None:
        if self._report is None:
            return
        shown_top = top if top is not None else "<empty>"
        self._report(
            Diagnostic(
                kind=DiagnosticKind.STACK_DISCIPLINE,
                message=f"attempted to pop {name} off scope stack, top of stack is {shown_top}",
                expected=(name,),
                actual=(top,) if top is not None else (),
            )
        )
