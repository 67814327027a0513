from __future__ import annotations

import json
from typing import Mapping


def canonicalize_json(value: object) -> object:
    if isinstance(value, Mapping):
        ordered_items = sorted(
            ((str(key), item_value) for key, item_value in value.items()),
            # Sort key is lexical mapping-key text for canonical JSON shape.
            key=lambda item: item[0],
        )
        return {key: canonicalize_json(item_value) for key, item_value in ordered_items}
    if isinstance(value, (list, tuple)):
        return [canonicalize_json(item) for item in value]
    return value


def load_json_value_text(text: str) -> tuple[object | None, str | None]:
    """Decode JSON text, returning ``(value, None)`` or ``(None, error)``."""
    try:
        return json.loads(text), None
    except json.JSONDecodeError as exc:
        return None, str(exc)


def dump_json_pretty(payload: object) -> str:
    return json.dumps(canonicalize_json(payload), indent=2, sort_keys=False)
