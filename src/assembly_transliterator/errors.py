"""
Exception hierarchy for assembly-transliterator.

Everything raised on purpose by the pipeline derives from TransliterationError,
so the CLI can report it cleanly while genuine bugs still surface as tracebacks.
"""

from __future__ import annotations

from pathlib import Path


class TransliterationError(Exception):
    """Base class for all transliteration failures."""


class AssemblyLoadError(TransliterationError):
    """An assembly file is missing or cannot be read."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Unable to load assembly from {self.path}: {reason}")


class AssemblyParseError(AssemblyLoadError):
    """An assembly file does not contain a valid JSON object."""


class UnsupportedTypeKindError(TransliterationError):
    """A type definition uses a kind the walker does not know how to traverse."""

    def __init__(self, kind: object, fqn: str | None = None):
        self.kind = kind
        self.fqn = fqn
        where = f" (in {fqn})" if fqn else ""
        super().__init__(f"Unsupported type kind: {kind}{where}")


class FixtureError(TransliterationError):
    """A snippet references a fixture file that does not exist."""


class TabletError(TransliterationError):
    """A translation tablet is unreadable or has an unexpected shape."""


class StrictModeError(TransliterationError):
    """Strict mode is enabled and at least one example failed compilation."""

    def __init__(self, error_count: int):
        self.error_count = error_count
        super().__init__("Strict mode is enabled and some examples failed compilation!")
