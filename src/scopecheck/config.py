from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from scopecheck.invariants import never
from scopecheck.scope_names import DEFAULT_DECORATION_SUFFIXES, ROOT_SCOPE

DEFAULT_CONFIG_NAME = "scopecheck.toml"
CONFIG_ENV_VAR = "SCOPECHECK_CONFIG"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        env_path = os.getenv(CONFIG_ENV_VAR, "").strip()
        if env_path:
            config_path = Path(env_path)
        else:
            base = root if root is not None else Path.cwd()
            config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def checker_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("checker", {})
    return section if isinstance(section, dict) else {}


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_bool(value: TomlValue, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return default


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


@dataclass(frozen=True)
class CheckerConfig:
    root_scope: str = ROOT_SCOPE
    decoration_suffixes: tuple[str, ...] = DEFAULT_DECORATION_SUFFIXES
    stop_on_mismatch: bool = True
    fail_on_stack_error: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.root_scope, str) or not self.root_scope.strip():
            never("root scope must be a non-empty string", root_scope=self.root_scope)
        object.__setattr__(self, "root_scope", self.root_scope.strip())
        object.__setattr__(self, "decoration_suffixes", tuple(self.decoration_suffixes))

    @classmethod
    def from_section(cls, section: TomlTable | None) -> "CheckerConfig":
        if not isinstance(section, dict):
            return cls()
        root_scope = section.get("root_scope")
        suffixes = section.get("decoration_suffixes")
        return cls(
            root_scope=root_scope if isinstance(root_scope, str) else ROOT_SCOPE,
            decoration_suffixes=(
                tuple(_normalize_name_list(suffixes))
                if suffixes is not None
                else DEFAULT_DECORATION_SUFFIXES
            ),
            stop_on_mismatch=_as_bool(section.get("stop_on_mismatch"), default=True),
            fail_on_stack_error=_as_bool(section.get("fail_on_stack_error"), default=True),
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "root_scope": self.root_scope,
            "decoration_suffixes": list(self.decoration_suffixes),
            "stop_on_mismatch": self.stop_on_mismatch,
            "fail_on_stack_error": self.fail_on_stack_error,
        }


def resolve_checker_config(
    overrides: TomlTable | None = None,
    *,
    root: Path | None = None,
    config_path: Path | None = None,
) -> CheckerConfig:
    section = checker_defaults(root=root, config_path=config_path)
    return CheckerConfig.from_section(merge_payload(overrides or {}, section))
