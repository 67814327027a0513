"""scopecheck package root."""

from scopecheck.exceptions import FixtureLoadError, NeverThrown, SpecFormatError
from scopecheck.invariants import never
from scopecheck.spec_format import ExpectedSpan, normalize_spec_entries
from scopecheck.tokens import ActualToken
from scopecheck.verifier import TokenVerifier

__all__ = [
    "__version__",
    "ActualToken",
    "ExpectedSpan",
    "FixtureLoadError",
    "NeverThrown",
    "SpecFormatError",
    "TokenVerifier",
    "never",
    "normalize_spec_entries",
]

__version__ = "0.1.0"
