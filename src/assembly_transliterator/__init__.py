"""
assembly-transliterator: per-language copies of API assemblies.

This package provides tools for:
- Loading language-neutral assembly documents
- Translating every documentation example into target languages
- Marking translated examples with a transliteration disclaimer
- Collecting compile diagnostics with an optional strict-mode failure
"""

__version__ = "0.1.0"

from assembly_transliterator.assembly import AssemblyLoader, TypeKind, load_assemblies
from assembly_transliterator.config import Settings, load_config
from assembly_transliterator.disclaimer import compose_disclaimer
from assembly_transliterator.engine import (
    Diagnostic,
    LiveTranslation,
    LiveTranslator,
    Severity,
    Translation,
    TranslationEngine,
)
from assembly_transliterator.errors import (
    AssemblyLoadError,
    AssemblyParseError,
    FixtureError,
    StrictModeError,
    TabletError,
    TransliterationError,
    UnsupportedTypeKindError,
)
from assembly_transliterator.languages import TargetLanguage
from assembly_transliterator.transliterate import (
    TransliterateOptions,
    Transliterator,
    transliterate_assembly,
)
from assembly_transliterator.walker import walk_type

__all__ = [
    # Config
    "Settings",
    "load_config",
    # Assembly
    "AssemblyLoader",
    "TypeKind",
    "load_assemblies",
    "walk_type",
    # Translation
    "TargetLanguage",
    "Translation",
    "TranslationEngine",
    "LiveTranslation",
    "LiveTranslator",
    "Diagnostic",
    "Severity",
    "compose_disclaimer",
    # Orchestration
    "TransliterateOptions",
    "Transliterator",
    "transliterate_assembly",
    # Errors
    "TransliterationError",
    "AssemblyLoadError",
    "AssemblyParseError",
    "UnsupportedTypeKindError",
    "FixtureError",
    "TabletError",
    "StrictModeError",
]
