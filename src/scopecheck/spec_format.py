"""Expected spans and the normalization of raw spec entries.

Two entry shapes are accepted:

- structured entries, ``{"source": "int", "scopesBegin": [...], "scopes": [...],
  "scopesEnd": [...]}`` (``sourceText``/``scopesOpened``/``scopesClosed`` are
  accepted as aliases), and
- legacy flat fixture entries, ``{"c": "int", "t": "source storage.type"}``,
  where the first tag of ``t`` is a redundant root marker.

Both are turned into ``ExpectedSpan`` once, before any token is checked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence, TypeAlias

from scopecheck.exceptions import SpecFormatError

_SOURCE_KEYS = ("source", "sourceText")
_OPENED_KEYS = ("scopesBegin", "scopesOpened")
_CLOSED_KEYS = ("scopesEnd", "scopesClosed")
_LEGACY_TEXT_KEY = "c"
_LEGACY_TAGS_KEY = "t"


@dataclass(frozen=True)
class ExpectedSpan:
    source_text: str = ""
    scopes_opened: tuple[str, ...] = ()
    scopes: tuple[str, ...] = ()
    scopes_closed: tuple[str, ...] = ()
    extra: Mapping[str, object] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_zero_width(self) -> bool:
        return self.source_text == ""

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"source": self.source_text}
        if self.scopes_opened:
            payload["scopesBegin"] = list(self.scopes_opened)
        payload["scopes"] = list(self.scopes)
        if self.scopes_closed:
            payload["scopesEnd"] = list(self.scopes_closed)
        return payload


@dataclass(frozen=True)
class LegacyEntry:
    literal: str
    tag_string: str
    raw: Mapping[str, object]


@dataclass(frozen=True)
class StructuredEntry:
    raw: Mapping[str, object]


RawEntry: TypeAlias = LegacyEntry | StructuredEntry


def parse_tag_string(tag_string: str) -> tuple[str, ...]:
    """Split a legacy tag string and drop its leading root marker."""
    return tuple(tag_string.split()[1:])


def is_legacy_list(entries: Sequence[object]) -> bool:
    if not entries:
        return False
    first = entries[0]
    return isinstance(first, Mapping) and _LEGACY_TEXT_KEY in first


def _first_present(raw: Mapping[str, object], keys: tuple[str, ...]) -> object:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _text_field(value: object, *, name: str, index: int) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SpecFormatError(f"{name} must be a string, got {type(value).__name__}", index=index)
    return value


def _scope_list(value: object, *, name: str, index: int) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise SpecFormatError(f"{name} must be a list of scope names", index=index)
    names: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise SpecFormatError(
                f"{name} entries must be strings, got {type(item).__name__}",
                index=index,
            )
        names.append(item)
    return tuple(names)


def classify_entry(raw: object, *, index: int) -> RawEntry:
    if not isinstance(raw, Mapping):
        raise SpecFormatError(f"expected a mapping, got {type(raw).__name__}", index=index)
    entry = {str(key): value for key, value in raw.items()}
    if "scopes" in entry or any(key in entry for key in (*_SOURCE_KEYS, *_OPENED_KEYS, *_CLOSED_KEYS)):
        return StructuredEntry(raw=entry)
    if _LEGACY_TEXT_KEY in entry:
        return LegacyEntry(
            literal=_text_field(entry.get(_LEGACY_TEXT_KEY), name="c", index=index),
            tag_string=_text_field(entry.get(_LEGACY_TAGS_KEY), name="t", index=index),
            raw=entry,
        )
    raise SpecFormatError("entry has neither structured nor legacy fields", index=index)


def _is_placeholder(entry: RawEntry) -> bool:
    # Legacy fixtures carry whitespace runs as their own entries; tokens for
    # them are never checked.
    literal = entry.literal if isinstance(entry, LegacyEntry) else entry.raw.get(_LEGACY_TEXT_KEY)
    return isinstance(literal, str) and literal.strip() == ""


def entry_to_span(entry: RawEntry, *, index: int) -> ExpectedSpan:
    if isinstance(entry, LegacyEntry):
        return ExpectedSpan(
            source_text=entry.literal,
            scopes=parse_tag_string(entry.tag_string),
            extra=entry.raw,
        )
    raw = entry.raw
    source = _first_present(raw, _SOURCE_KEYS)
    if source is None:
        source = raw.get(_LEGACY_TEXT_KEY)
    return ExpectedSpan(
        source_text=_text_field(source, name="source", index=index),
        scopes_opened=_scope_list(_first_present(raw, _OPENED_KEYS), name="scopesBegin", index=index),
        scopes=_scope_list(raw.get("scopes"), name="scopes", index=index),
        scopes_closed=_scope_list(_first_present(raw, _CLOSED_KEYS), name="scopesEnd", index=index),
        extra=raw,
    )


def normalize_spec_entries(entries: Iterable[object]) -> tuple[ExpectedSpan, ...]:
    """Normalize a raw spec list into expected spans, in order.

    ``ExpectedSpan`` instances pass through untouched. Legacy placeholder
    entries (blank ``c``) are removed.
    """
    spans: list[ExpectedSpan] = []
    for index, raw in enumerate(entries):
        if isinstance(raw, ExpectedSpan):
            spans.append(raw)
            continue
        entry = classify_entry(raw, index=index)
        if _is_placeholder(entry):
            continue
        spans.append(entry_to_span(entry, index=index))
    return tuple(spans)
