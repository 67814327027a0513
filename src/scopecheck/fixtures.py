"""Loading fixture documents.

A fixture document holds tokenizer output for some lines of source text and
the spec those tokens are checked against. It is JSON or YAML, and either a
single case, a list of cases, or ``{"cases": [...]}``::

    {
      "name": "declaration",
      "lines": [
        {"text": "int x;", "tokens": [{"startIndex": 0, "endIndex": 3,
                                        "scopes": ["source.cpp", "storage.type.cpp"]}]}
      ],
      "spec": [{"source": "int", "scopes": ["storage.type"]}]
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

import yaml
from pydantic import ValidationError

from scopecheck.exceptions import FixtureLoadError, NeverThrown
from scopecheck.runtime.json_io import load_json_value_text
from scopecheck.schema import FixtureCaseDTO, FixtureDocumentDTO
from scopecheck.tokens import ActualToken

JSON_SUFFIXES = frozenset({".json"})
YAML_SUFFIXES = frozenset({".yaml", ".yml"})
FIXTURE_SUFFIXES = JSON_SUFFIXES | YAML_SUFFIXES


@dataclass(frozen=True)
class FixtureLine:
    text: str
    tokens: tuple[ActualToken, ...]


@dataclass(frozen=True)
class FixtureCase:
    name: str
    lines: tuple[FixtureLine, ...]
    spec: tuple[Mapping[str, object], ...]
    source_path: Path | None = None


def decode_document(path: Path, text: str) -> object:
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise FixtureLoadError(path, f"fixture malformed: {exc}") from exc
    payload, error = load_json_value_text(text)
    if error is not None:
        raise FixtureLoadError(path, f"fixture malformed: {error}")
    return payload


def _document_from_payload(path: Path, payload: object) -> FixtureDocumentDTO:
    if isinstance(payload, list):
        payload = {"cases": payload}
    elif isinstance(payload, Mapping) and "cases" not in payload:
        payload = {"cases": [payload]}
    if not isinstance(payload, Mapping):
        raise FixtureLoadError(path, "fixture must be a mapping or a list of cases")
    try:
        return FixtureDocumentDTO.model_validate(payload)
    except ValidationError as exc:
        raise FixtureLoadError(path, f"fixture invalid: {exc}") from exc


def _case_from_dto(dto: FixtureCaseDTO, *, default_name: str, path: Path | None) -> FixtureCase:
    lines = tuple(
        FixtureLine(
            text=line.text,
            tokens=tuple(
                ActualToken.from_dto(token) for token in line.tokens
            ),
        )
        for line in dto.lines
    )
    return FixtureCase(
        name=dto.name or default_name,
        lines=lines,
        spec=tuple(dto.spec),
        source_path=path,
    )


def cases_from_payload(payload: object, *, path: Path) -> list[FixtureCase]:
    document = _document_from_payload(path, payload)
    many = len(document.cases) > 1
    cases: list[FixtureCase] = []
    for index, dto in enumerate(document.cases):
        default_name = f"{path.stem}[{index}]" if many else path.stem
        try:
            cases.append(_case_from_dto(dto, default_name=default_name, path=path))
        except NeverThrown as exc:
            raise FixtureLoadError(path, f"case {index}: {exc}") from exc
    return cases


def load_fixture_file(path: Path) -> list[FixtureCase]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FixtureLoadError(path, "fixture missing") from exc
    except (OSError, UnicodeError) as exc:
        raise FixtureLoadError(path, f"fixture unreadable: {exc}") from exc
    return cases_from_payload(decode_document(path, text), path=path)


def discover_fixture_paths(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into the fixture files below them, in sorted order."""
    found: dict[Path, None] = {}
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.is_file() and candidate.suffix.lower() in FIXTURE_SUFFIXES:
                    found.setdefault(candidate, None)
        else:
            found.setdefault(path, None)
    return list(found)
