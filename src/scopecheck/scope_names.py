from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

ROOT_SCOPE = "source"
DEFAULT_DECORATION_SUFFIXES: tuple[str, ...] = ("c", "cpp", "objc", "objcpp")


@lru_cache(maxsize=None)
def decoration_pattern(suffixes: tuple[str, ...] = DEFAULT_DECORATION_SUFFIXES) -> re.Pattern[str]:
    # Longest alternatives first so "objcpp" is not cut short by "objc".
    ordered = sorted({suffix for suffix in suffixes if suffix}, key=lambda item: (-len(item), item))
    if not ordered:
        return re.compile(r"(?!x)x")
    alternatives = "|".join(re.escape(suffix) for suffix in ordered)
    return re.compile(rf"\.(?:{alternatives})$")


def strip_decoration(
    scope: str,
    suffixes: tuple[str, ...] = DEFAULT_DECORATION_SUFFIXES,
) -> str:
    """Drop a trailing grammar marker such as ``.cpp`` from a scope name."""
    return decoration_pattern(suffixes).sub("", scope)


def strip_decorations(
    scopes: Iterable[str],
    suffixes: tuple[str, ...] = DEFAULT_DECORATION_SUFFIXES,
) -> tuple[str, ...]:
    return tuple(strip_decoration(scope, suffixes) for scope in scopes)


def without_root(path: Iterable[str], root: str = ROOT_SCOPE) -> tuple[str, ...]:
    return tuple(scope for scope in path if scope != root)
