from __future__ import annotations

from pathlib import Path

import pytest

from scopecheck.exceptions import FixtureLoadError
from scopecheck.fixtures import discover_fixture_paths, load_fixture_file
from scopecheck.tokens import ActualToken
from tests.token_helpers import token_payload


def _case(name: str | None = None) -> dict[str, object]:
    payload: dict[str, object] = {
        "lines": [{"text": "int x;", "tokens": [token_payload(0, 3, "source.cpp", "storage.type.cpp")]}],
        "spec": [{"c": "int", "t": "source.cpp storage.type.cpp"}],
    }
    if name is not None:
        payload["name"] = name
    return payload


def test_single_case_document_uses_file_stem(tmp_path: Path, write_fixture) -> None:
    path = write_fixture(tmp_path / "declaration.json", _case())
    (case,) = load_fixture_file(path)
    assert case.name == "declaration"
    assert case.source_path == path
    assert case.lines[0].tokens == (ActualToken(0, 3, ("source.cpp", "storage.type.cpp")),)
    assert case.spec == ({"c": "int", "t": "source.cpp storage.type.cpp"},)


def test_case_list_documents_get_indexed_names(tmp_path: Path, write_fixture) -> None:
    path = write_fixture(tmp_path / "many.json", {"cases": [_case(), _case("named")]})
    assert [case.name for case in load_fixture_file(path)] == ["many[0]", "named"]


def test_bare_list_document(tmp_path: Path, write_fixture) -> None:
    path = write_fixture(tmp_path / "bare.json", [_case("one")])
    assert [case.name for case in load_fixture_file(path)] == ["one"]


def test_yaml_document(tmp_path: Path) -> None:
    path = tmp_path / "case.yaml"
    path.write_text(
        "\n".join(
            [
                "name: yaml-case",
                "lines:",
                "  - text: 'abc'",
                "    tokens:",
                "      - {start: 0, end: 3, scopes: [source, keyword]}",
                "spec:",
                "  - {source: abc, scopes: [keyword]}",
            ]
        ),
        encoding="utf-8",
    )
    (case,) = load_fixture_file(path)
    assert case.name == "yaml-case"
    assert case.lines[0].tokens[0] == ActualToken(0, 3, ("source", "keyword"))


def test_missing_fixture(tmp_path: Path) -> None:
    with pytest.raises(FixtureLoadError, match="fixture missing"):
        load_fixture_file(tmp_path / "absent.json")


def test_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("not-json", encoding="utf-8")
    with pytest.raises(FixtureLoadError, match="fixture malformed"):
        load_fixture_file(path)


def test_malformed_yaml(tmp_path: Path) -> None:
    path = tmp_path / "broken.yml"
    path.write_text("lines: [unterminated", encoding="utf-8")
    with pytest.raises(FixtureLoadError, match="fixture malformed"):
        load_fixture_file(path)


def test_shape_errors_are_reported(tmp_path: Path, write_fixture) -> None:
    path = write_fixture(tmp_path / "shape.json", {"lines": "nope", "spec": []})
    with pytest.raises(FixtureLoadError, match="fixture invalid"):
        load_fixture_file(path)
    scalar = write_fixture(tmp_path / "scalar.json", 3)
    with pytest.raises(FixtureLoadError, match="mapping or a list"):
        load_fixture_file(scalar)


def test_bad_token_offsets_become_load_errors(tmp_path: Path, write_fixture) -> None:
    payload = _case()
    payload["lines"] = [{"text": "abc", "tokens": [token_payload(2, 1, "source")]}]
    path = write_fixture(tmp_path / "offsets.json", payload)
    with pytest.raises(FixtureLoadError, match="case 0: token end offset precedes start"):
        load_fixture_file(path)


def test_token_keys_and_numeric_strings_load_like_direct_tokens(tmp_path: Path, write_fixture) -> None:
    payload = _case()
    payload["lines"] = [{"text": "int x;", "tokens": [{"start": "0", "end": 3, "scopes": ["source.cpp"]}]}]
    path = write_fixture(tmp_path / "plain_keys.json", payload)
    (case,) = load_fixture_file(path)
    assert case.lines[0].tokens == (ActualToken(0, 3, ("source.cpp",)),)


def test_discover_expands_directories_in_sorted_order(tmp_path: Path, write_fixture) -> None:
    write_fixture(tmp_path / "b" / "two.json", _case())
    write_fixture(tmp_path / "a" / "one.json", _case())
    (tmp_path / "a" / "notes.txt").write_text("ignored", encoding="utf-8")
    (tmp_path / "a" / "three.yml").write_text("[]", encoding="utf-8")
    explicit = tmp_path / "explicit.txt"
    found = discover_fixture_paths([tmp_path, explicit])
    assert found == [
        tmp_path / "a" / "one.json",
        tmp_path / "a" / "three.yml",
        tmp_path / "b" / "two.json",
        explicit,
    ]
