from __future__ import annotations

from typing import Iterable

from scopecheck.scope_names import DEFAULT_DECORATION_SUFFIXES, strip_decorations
from scopecheck.scope_stack import ScopeStack
from scopecheck.spec_format import ExpectedSpan, normalize_spec_entries


class SpecCursor:
    """Front-to-back reader over the expected spans of one run.

    The raw entries are normalized once at construction. Spans are never
    removed from the underlying tuple; the cursor index only moves forward.
    """

    def __init__(
        self,
        entries: Iterable[object],
        stack: ScopeStack,
        *,
        decoration_suffixes: tuple[str, ...] = DEFAULT_DECORATION_SUFFIXES,
    ) -> None:
        self._spans = normalize_spec_entries(entries)
        self._index = 0
        self._stack = stack
        self._suffixes = decoration_suffixes

    @property
    def spans(self) -> tuple[ExpectedSpan, ...]:
        return self._spans

    @property
    def position(self) -> int:
        return self._index

    @property
    def remaining(self) -> tuple[ExpectedSpan, ...]:
        return self._spans[self._index:]

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._spans)

    def peek(self) -> ExpectedSpan | None:
        if self.exhausted:
            return None
        return self._spans[self._index]

    def pop(self) -> ExpectedSpan | None:
        span = self.peek()
        if span is not None:
            self._index += 1
        return span

    def next_non_empty(self) -> None:
        """Consume zero-width spans at the front, applying their scope changes."""
        while True:
            span = self.peek()
            if span is None or not span.is_zero_width:
                return
            self._index += 1
            self.scopes_for(span)

    def scopes_for(self, span: ExpectedSpan) -> tuple[str, ...]:
        """Return the span's full expected path and update the stack for it."""
        self._stack.apply_opens(span.scopes_opened)
        path = strip_decorations((*self._stack.current_path(), *span.scopes), self._suffixes)
        self._stack.apply_closes(span.scopes_closed)
        return path
