"""
Translation memory ("tablet") for previously translated snippets.

A tablet file is JSON of the form::

    {
      "version": "2",
      "snippets": {
        "<snippet key>": {
          "translations": {"$": {"source": "..."}, "python": {"source": "..."}},
          "didCompile": true
        }
      }
    }

where ``$`` holds the original source-language snippet.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import aiofiles

from assembly_transliterator.errors import TabletError
from assembly_transliterator.logging import get_logger
from assembly_transliterator.snippet import TypeScriptSnippet, snippet_key

TABLET_SCHEMA_VERSION = "2"
ORIGINAL_SOURCE_KEY = "$"
DEFAULT_TABLET_SUFFIX = ".tabl.json"

logger = get_logger("tablet")


@dataclass
class TranslatedSnippet:
    """A snippet together with all the translations known for it."""

    key: str
    original_source: str
    translations: dict[str, str] = field(default_factory=dict)
    did_compile: bool | None = None

    def get(self, language: str) -> str | None:
        return self.translations.get(str(language))

    @classmethod
    def from_dict(cls, key: str, data: Any) -> TranslatedSnippet:
        if not isinstance(data, dict) or not isinstance(data.get("translations"), dict):
            raise ValueError(f"snippet {key} has no translations mapping")

        translations: dict[str, str] = {}
        original = ""
        for language, entry in data["translations"].items():
            if not isinstance(entry, dict) or not isinstance(entry.get("source"), str):
                raise ValueError(f"snippet {key} has a malformed {language} translation")
            if language == ORIGINAL_SOURCE_KEY:
                original = entry["source"]
            else:
                translations[language] = entry["source"]

        did_compile = data.get("didCompile")
        return cls(
            key=key,
            original_source=original,
            translations=translations,
            did_compile=did_compile if isinstance(did_compile, bool) else None,
        )

    @classmethod
    def from_snippet(cls, snippet: TypeScriptSnippet) -> TranslatedSnippet:
        return cls(key=snippet_key(snippet), original_source=snippet.visible_source)


class LanguageTablet:
    """In-memory collection of translated snippets, loadable from tablet files."""

    def __init__(self) -> None:
        self._snippets: dict[str, TranslatedSnippet] = {}

    @property
    def count(self) -> int:
        """Number of snippets held."""
        return len(self._snippets)

    async def load(self, path: Path | str) -> int:
        """
        Merge the snippets of a tablet file into this tablet.

        Entries already present are replaced by the file's version.

        Returns:
            Number of snippets read from the file.

        Raises:
            TabletError: If the file cannot be read or does not have the tablet schema.
        """
        path = Path(path)
        try:
            async with aiofiles.open(path, encoding="utf-8") as f:
                text = await f.read()
        except OSError as e:
            raise TabletError(f"Unable to read tablet {path}: {e.strerror or e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise TabletError(f"Tablet {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("snippets"), dict):
            raise TabletError(f"Tablet {path} has no 'snippets' mapping")
        version = data.get("version")
        if version is not None and str(version) != TABLET_SCHEMA_VERSION:
            raise TabletError(
                f"Tablet {path} uses schema version {version}, expected {TABLET_SCHEMA_VERSION}"
            )

        try:
            entries = [
                TranslatedSnippet.from_dict(key, value) for key, value in data["snippets"].items()
            ]
        except ValueError as e:
            raise TabletError(f"Tablet {path} is malformed: {e}") from e

        for entry in entries:
            self._snippets[entry.key] = entry
        logger.debug("Loaded %d snippets from %s", len(entries), path)
        return len(entries)

    def lookup(self, snippet: TypeScriptSnippet, language: str) -> TranslatedSnippet | None:
        """Return the tablet entry for a snippet if it has a translation for ``language``."""
        entry = self._snippets.get(snippet_key(snippet))
        if entry is None or entry.get(language) is None:
            return None
        return entry

    def add(self, entry: TranslatedSnippet) -> None:
        """Add or merge an entry; existing translations for other languages are kept."""
        existing = self._snippets.get(entry.key)
        if existing is None:
            self._snippets[entry.key] = entry
            return
        existing.translations.update(entry.translations)
        if entry.did_compile is not None:
            existing.did_compile = entry.did_compile


def default_tablet_path(directory: Path, assembly_file_name: str) -> Path:
    """Location of the tablet shipped next to an assembly."""
    return directory / f"{assembly_file_name}{DEFAULT_TABLET_SUFFIX}"
