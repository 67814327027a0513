from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from tests.env_helpers import env_scope


@pytest.fixture(autouse=True)
def _isolated_config_env():
    with env_scope({"SCOPECHECK_CONFIG": None}):
        yield


@pytest.fixture
def write_fixture():
    def _write(path: Path, payload: object) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return path

    return _write
