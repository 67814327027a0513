from __future__ import annotations

from scopecheck.diff_report import DiffKind, classify_scope, diff_scopes, render_scope_diff


def test_classify_scope_covers_all_outcomes() -> None:
    expected = ("meta.block", "keyword")
    actual = ("meta.block", "string")
    assert classify_scope("keyword", expected, actual) is DiffKind.REMOVED
    assert classify_scope("string", expected, actual) is DiffKind.ADDED
    assert classify_scope("meta.block", expected, actual) is DiffKind.UNCHANGED


def test_diff_lists_expected_column_then_actual_column() -> None:
    diff = diff_scopes(("meta.block", "keyword"), ("meta.block", "string"))
    assert [(entry.scope, entry.kind) for entry in diff.expected] == [
        ("meta.block", DiffKind.UNCHANGED),
        ("keyword", DiffKind.REMOVED),
    ]
    assert [(entry.scope, entry.kind) for entry in diff.actual] == [
        ("meta.block", DiffKind.UNCHANGED),
        ("string", DiffKind.ADDED),
    ]
    assert diff.removed == ("keyword",)
    assert diff.added == ("string",)


def test_reordered_paths_show_only_unchanged_entries() -> None:
    diff = diff_scopes(("a", "b"), ("b", "a"))
    assert diff.added == ()
    assert diff.removed == ()
    assert {entry.kind for entry in (*diff.expected, *diff.actual)} == {DiffKind.UNCHANGED}


def test_render_scope_diff_marks_each_kind() -> None:
    lines = render_scope_diff(diff_scopes(("meta.block", "keyword"), ("meta.block", "string")))
    assert lines == [
        "scopes in spec",
        "    meta.block",
        "  - keyword",
        "",
        "actual scopes",
        "    meta.block",
        "  + string",
    ]


def test_diff_as_dict_is_json_ready() -> None:
    payload = diff_scopes(("keyword",), ()).as_dict()
    assert payload == {
        "expected": [{"scope": "keyword", "kind": "removed"}],
        "actual": [],
    }
