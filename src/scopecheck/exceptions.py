"""Exception types raised by scopecheck."""

from __future__ import annotations

from pathlib import Path


class NeverThrown(RuntimeError):
    """Raised when a code path that must be unreachable is reached.

    The keyword payload given to ``never()`` is kept on ``env`` so callers can
    report what was observed.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})


class SpecFormatError(ValueError):
    """A spec entry could not be normalized into an expected span."""

    def __init__(self, message: str, *, index: int | None = None):
        prefix = f"spec entry {index}: " if index is not None else ""
        super().__init__(prefix + message)
        self.index = index


class FixtureLoadError(ValueError):
    """A fixture document is missing, unreadable, or has the wrong shape."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
