from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from scopecheck.config import CheckerConfig
from scopecheck.diagnostics import Diagnostic, EchoFn
from scopecheck.exceptions import FixtureLoadError, SpecFormatError
from scopecheck.fixtures import FixtureCase, discover_fixture_paths, load_fixture_file
from scopecheck.verifier import TokenVerifier


@dataclass(frozen=True)
class CaseResult:
    name: str
    passed: bool
    tokens_checked: int
    diagnostics: tuple[Diagnostic, ...]
    source_path: Path | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "passed": self.passed,
            "tokens_checked": self.tokens_checked,
            "source_path": str(self.source_path) if self.source_path is not None else None,
            "diagnostics": [diagnostic.as_dict() for diagnostic in self.diagnostics],
        }


@dataclass(frozen=True)
class RunSummary:
    results: tuple[CaseResult, ...]
    load_errors: tuple[str, ...] = ()

    @property
    def passed_count(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed_count(self) -> int:
        return len(self.results) - self.passed_count

    @property
    def exit_code(self) -> int:
        if self.load_errors:
            return 2
        if self.failed_count:
            return 1
        return 0

    def as_dict(self) -> dict[str, object]:
        return {
            "summary": {
                "cases": len(self.results),
                "passed": self.passed_count,
                "failed": self.failed_count,
                "load_errors": len(self.load_errors),
            },
            "results": [result.as_dict() for result in self.results],
            "load_errors": list(self.load_errors),
            "exit_code": self.exit_code,
        }


def run_case(
    case: FixtureCase,
    *,
    config: CheckerConfig | None = None,
    echo_fn: EchoFn | None = None,
) -> CaseResult:
    """Check every line of a case against its spec with one verifier.

    With ``stop_on_mismatch`` the first failing line ends the case and the
    leftover-spec check is skipped, since the cursor no longer lines up with
    the tokens. Otherwise a scope mismatch does not end its line, so the
    remaining tokens keep consuming their own spans.
    """
    config = config if config is not None else CheckerConfig()
    verifier = TokenVerifier(case.spec, config=config, echo_fn=echo_fn)
    stopped = False
    for number, line in enumerate(case.lines, start=1):
        if verifier.check_line(
            line.text,
            line.tokens,
            line_number=number,
            stop_at_first_failure=config.stop_on_mismatch,
        ):
            continue
        if config.stop_on_mismatch:
            stopped = True
            break
    if not stopped:
        verifier.finish()
    return CaseResult(
        name=case.name,
        passed=not verifier.failed,
        tokens_checked=verifier.tokens_checked,
        diagnostics=verifier.diagnostics,
        source_path=case.source_path,
    )


def run_paths(
    paths: Iterable[Path],
    *,
    config: CheckerConfig | None = None,
    echo_fn: EchoFn | None = None,
    on_result: Callable[[CaseResult], None] | None = None,
) -> RunSummary:
    results: list[CaseResult] = []
    load_errors: list[str] = []
    for path in discover_fixture_paths(paths):
        try:
            cases = load_fixture_file(path)
        except FixtureLoadError as exc:
            load_errors.append(str(exc))
            continue
        for case in cases:
            try:
                result = run_case(case, config=config, echo_fn=echo_fn)
            except SpecFormatError as exc:
                load_errors.append(f"{path}: {case.name}: {exc}")
                continue
            results.append(result)
            if on_result is not None:
                on_result(result)
    return RunSummary(results=tuple(results), load_errors=tuple(load_errors))
