from __future__ import annotations

import pytest

from scopecheck.exceptions import SpecFormatError
from scopecheck.spec_format import (
    ExpectedSpan,
    LegacyEntry,
    StructuredEntry,
    classify_entry,
    is_legacy_list,
    normalize_spec_entries,
    parse_tag_string,
)


def test_legacy_entry_drops_only_the_leading_root_tag() -> None:
    """Only the first tag is the root marker; the dotted tag after it is kept whole.

    ``root.scope`` is not cut down to its last segment ``scope``: the tag string
    is split on whitespace and only its head is discarded.
    """
    (span,) = normalize_spec_entries([{"c": "foo", "t": "source root.scope"}])
    assert span.source_text == "foo"
    assert span.scopes == ("root.scope",)
    assert span.scopes_opened == ()
    assert span.scopes_closed == ()


def test_legacy_tags_after_the_root_keep_their_dotted_names() -> None:
    (span,) = normalize_spec_entries([{"c": "x", "t": "source.cpp meta.block.cpp variable.other.cpp"}])
    assert span.scopes == ("meta.block.cpp", "variable.other.cpp")


def test_legacy_entry_keeps_original_fields() -> None:
    raw = {"c": "int", "t": "source.cpp storage.type.cpp", "r": {"dark_plus": "storage"}}
    (span,) = normalize_spec_entries([raw])
    assert span.scopes == ("storage.type.cpp",)
    assert span.extra["r"] == {"dark_plus": "storage"}


def test_legacy_placeholders_are_removed() -> None:
    spans = normalize_spec_entries(
        [
            {"c": "int", "t": "source storage.type"},
            {"c": "   ", "t": "source"},
            {"c": "", "t": "source"},
            {"c": "x", "t": "source variable"},
        ]
    )
    assert [span.source_text for span in spans] == ["int", "x"]


def test_tag_string_splits_on_any_whitespace() -> None:
    assert parse_tag_string("source  meta.block\tkeyword") == ("meta.block", "keyword")
    assert parse_tag_string("source") == ()
    assert parse_tag_string("") == ()


def test_structured_entries_pass_through() -> None:
    (span,) = normalize_spec_entries(
        [
            {
                "source": "{",
                "scopesBegin": ["meta.block"],
                "scopes": ["punctuation.section.block.begin"],
            }
        ]
    )
    assert span == ExpectedSpan(
        source_text="{",
        scopes_opened=("meta.block",),
        scopes=("punctuation.section.block.begin",),
    )


def test_structured_aliases_are_accepted() -> None:
    (span,) = normalize_spec_entries(
        [
            {
                "sourceText": "}",
                "scopesOpened": [],
                "scopes": ["punctuation"],
                "scopesClosed": ["meta.block"],
            }
        ]
    )
    assert span.source_text == "}"
    assert span.scopes_closed == ("meta.block",)


def test_zero_width_entry_has_no_text() -> None:
    (span,) = normalize_spec_entries([{"scopesBegin": ["meta.function"]}])
    assert span.is_zero_width
    assert span.scopes_opened == ("meta.function",)


def test_mixed_list_keeps_structured_entries_in_legacy_lists() -> None:
    entries = [
        {"c": "a", "t": "source keyword"},
        {"c": "b", "source": "b", "scopes": ["string"]},
    ]
    assert is_legacy_list(entries)
    spans = normalize_spec_entries(entries)
    assert [span.scopes for span in spans] == [("keyword",), ("string",)]


def test_structured_entry_without_source_falls_back_to_legacy_text() -> None:
    (span,) = normalize_spec_entries([{"c": "b", "scopes": ["string"]}])
    assert span.source_text == "b"


def test_existing_spans_are_not_renormalized() -> None:
    span = ExpectedSpan(source_text="x", scopes=("variable",))
    assert normalize_spec_entries([span]) == (span,)


def test_classify_entry_distinguishes_shapes() -> None:
    assert isinstance(classify_entry({"c": "a", "t": "source"}, index=0), LegacyEntry)
    assert isinstance(classify_entry({"source": "a"}, index=0), StructuredEntry)


def test_is_legacy_list_checks_first_entry() -> None:
    assert not is_legacy_list([])
    assert not is_legacy_list([{"source": "a"}, {"c": "b", "t": "source"}])


@pytest.mark.parametrize(
    "entry",
    [
        "not a mapping",
        {"unrelated": 1},
        {"source": 3},
        {"source": "a", "scopes": "keyword"},
        {"source": "a", "scopes": ["keyword", 7]},
        {"c": "a", "t": ["source"]},
    ],
)
def test_malformed_entries_raise_with_index(entry: object) -> None:
    with pytest.raises(SpecFormatError) as excinfo:
        normalize_spec_entries([{"source": "ok", "scopes": []}, entry])
    assert excinfo.value.index == 1
    assert str(excinfo.value).startswith("spec entry 1:")


def test_as_dict_uses_structured_keys() -> None:
    span = ExpectedSpan(
        source_text="(",
        scopes_opened=("meta.parens",),
        scopes=("punctuation",),
        scopes_closed=(),
    )
    assert span.as_dict() == {
        "source": "(",
        "scopesBegin": ["meta.parens"],
        "scopes": ["punctuation"],
    }
