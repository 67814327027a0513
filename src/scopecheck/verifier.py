"""Token-by-token verification of tokenizer output against expected spans.

A ``TokenVerifier`` owns one scope stack and one spec cursor. Feed it the
tokens of each line in order; every call either accepts the token or records
a diagnostic and returns ``False``. Nothing is shared between verifiers.
"""

from __future__ import annotations

from typing import Iterable

from scopecheck.config import CheckerConfig
from scopecheck.diagnostics import Diagnostic, DiagnosticCollector, DiagnosticKind, EchoFn
from scopecheck.diff_report import diff_scopes
from scopecheck.scope_names import strip_decorations, without_root
from scopecheck.scope_stack import ScopeStack
from scopecheck.spec_cursor import SpecCursor
from scopecheck.tokens import ActualToken


class TokenVerifier:
    def __init__(
        self,
        entries: Iterable[object],
        *,
        config: CheckerConfig | None = None,
        echo_fn: EchoFn | None = None,
    ) -> None:
        self.config = config if config is not None else CheckerConfig()
        self.collector = DiagnosticCollector(echo_fn)
        self.stack = ScopeStack(self.config.root_scope, report=self.collector.record)
        self.cursor = SpecCursor(
            entries,
            self.stack,
            decoration_suffixes=self.config.decoration_suffixes,
        )
        self.tokens_checked = 0

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.collector.diagnostics

    @property
    def failed(self) -> bool:
        return self.collector.has_errors(include_stack_errors=self.config.fail_on_stack_error)

    def check(self, line_text: str, token: ActualToken) -> bool:
        self.cursor.next_non_empty()
        source = token.text(line_text)
        if source.strip() == "":
            return True
        self.tokens_checked += 1
        span = self.cursor.pop()
        if span is None:
            self.collector.record(
                Diagnostic(
                    kind=DiagnosticKind.EXHAUSTED_SPECS,
                    message="ran out of specs",
                    token_text=source,
                )
            )
            return False
        if span.source_text != source:
            self.collector.record(
                Diagnostic(
                    kind=DiagnosticKind.CONTENT_MISMATCH,
                    message=f"spec mismatch: next token is |{source}| but spec has |{span.source_text}|",
                    token_text=source,
                    expected=(span.source_text,),
                    actual=(source,),
                )
            )
            return False
        root = self.config.root_scope
        expected = without_root(self.cursor.scopes_for(span), root)
        actual = without_root(strip_decorations(token.scopes, self.config.decoration_suffixes), root)
        if expected == actual:
            return True
        self.collector.record(
            Diagnostic(
                kind=DiagnosticKind.SCOPE_MISMATCH,
                message=f"scope mismatch: token |{source}| has wrong scope",
                token_text=source,
                expected=expected,
                actual=actual,
                diff=diff_scopes(expected, actual),
            )
        )
        return False

    def check_line(
        self,
        line_text: str,
        tokens: Iterable[ActualToken],
        *,
        line_number: int | None = None,
        stop_at_first_failure: bool = True,
    ) -> bool:
        """Check the tokens of one line, stopping at the first failed token.

        With ``stop_at_first_failure=False`` a scope mismatch does not end the
        line: the token text matched, so the cursor is still aligned with the
        remaining tokens. Content mismatches and exhaustion always end it.
        Stack-discipline errors do not stop the loop; they still count toward
        ``failed`` unless the config says otherwise.
        """
        passed = True
        self.collector.line_number = line_number
        try:
            for token in tokens:
                if self.check(line_text, token):
                    continue
                passed = False
                if stop_at_first_failure:
                    break
                if self.diagnostics[-1].kind is not DiagnosticKind.SCOPE_MISMATCH:
                    break
        finally:
            self.collector.line_number = None
        return passed

    def finish(self) -> bool:
        """Flush trailing boundary spans and report any spans left unmatched."""
        self.cursor.next_non_empty()
        leftover = tuple(span for span in self.cursor.remaining if not span.is_zero_width)
        if not leftover:
            return True
        self.collector.record(
            Diagnostic(
                kind=DiagnosticKind.UNCONSUMED_SPECS,
                message=(
                    f"{len(leftover)} spec entries were not matched by any token; "
                    f"next is |{leftover[0].source_text}|"
                ),
                expected=tuple(span.source_text for span in leftover),
            )
        )
        return False
