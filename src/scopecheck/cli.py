from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Optional
import sys

from click.core import ParameterSource
import typer

from scopecheck.config import TomlTable, resolve_checker_config
from scopecheck.exceptions import FixtureLoadError, NeverThrown, SpecFormatError
from scopecheck.fixtures import decode_document
from scopecheck.runner import CaseResult, RunSummary, run_paths
from scopecheck.runtime.json_io import dump_json_pretty
from scopecheck.spec_format import is_legacy_list, normalize_spec_entries

app = typer.Typer(add_completion=False)

_STDOUT_ALIAS = "-"


def _param_is_command_line(ctx: typer.Context, param: str) -> bool:
    return ctx.get_parameter_source(param) is ParameterSource.COMMANDLINE


def _write_output(target: Path, text: str) -> None:
    if not text.endswith("\n"):
        text += "\n"
    if str(target) == _STDOUT_ALIAS:
        typer.echo(text, nl=False)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")


def _echo_result(result: CaseResult) -> None:
    status = "PASS" if result.passed else "FAIL"
    typer.echo(f"{status} {result.name} ({result.tokens_checked} tokens)")


def _echo_summary(summary: RunSummary) -> None:
    for error in summary.load_errors:
        typer.echo(error, err=True)
    typer.echo(
        f"{len(summary.results)} case(s): {summary.passed_count} passed, "
        f"{summary.failed_count} failed, {len(summary.load_errors)} unreadable."
    )


@app.command("check")
def check(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., help="Fixture files or directories."),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    root_scope: Optional[str] = typer.Option(None, "--root-scope"),
    stop_on_mismatch: bool = typer.Option(
        True,
        "--stop-on-mismatch/--keep-going",
        help="Stop checking a case at its first failing line.",
    ),
    report: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Write a JSON report; use '-' for stdout.",
    ),
    quiet: bool = typer.Option(False, "--quiet", help="Only print the summary."),
) -> None:
    """Check tokenizer output in fixture files against their expected scopes."""
    overrides: TomlTable = {"root_scope": root_scope}
    if _param_is_command_line(ctx, "stop_on_mismatch"):
        overrides["stop_on_mismatch"] = stop_on_mismatch
    try:
        checker_config = resolve_checker_config(overrides, root=root, config_path=config)
    except NeverThrown as exc:
        raise typer.BadParameter(str(exc)) from exc
    summary = run_paths(
        paths,
        config=checker_config,
        echo_fn=None if quiet else typer.echo,
        on_result=None if quiet else _echo_result,
    )
    _echo_summary(summary)
    if report is not None:
        _write_output(report, dump_json_pretty(summary.as_dict()))
    raise typer.Exit(code=summary.exit_code)


@app.command("normalize")
def normalize(
    path: Path = typer.Argument(..., help="Spec list or fixture file; '-' reads JSON from stdin."),
    output: Path = typer.Option(Path(_STDOUT_ALIAS), "--output", "-o"),
) -> None:
    """Print the structured form of a spec list, converting legacy entries."""
    if str(path) == _STDOUT_ALIAS:
        source_path, text = Path("stdin.json"), sys.stdin.read()
    else:
        source_path = path
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise typer.BadParameter(f"cannot read {path}: {exc}") from exc
    try:
        payload = decode_document(source_path, text)
    except FixtureLoadError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    entries = payload.get("spec") if isinstance(payload, Mapping) else payload
    if not isinstance(entries, list):
        typer.echo(f"{path}: expected a spec list or a mapping with 'spec'", err=True)
        raise typer.Exit(code=2)
    try:
        spans = normalize_spec_entries(entries)
    except SpecFormatError as exc:
        typer.echo(f"{path}: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    if is_legacy_list(entries):
        typer.echo(
            f"converted {len(entries)} legacy entries into {len(spans)} spans",
            err=True,
        )
    _write_output(output, dump_json_pretty([span.as_dict() for span in spans]))


if __name__ == "__main__":
    app()
