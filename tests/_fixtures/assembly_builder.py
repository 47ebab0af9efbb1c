"""Helpers for writing throwaway assemblies and tablets in tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from assembly_transliterator.assembly import ASSEMBLY_FILE_NAME
from assembly_transliterator.engine import Diagnostic, LiveTranslation
from assembly_transliterator.snippet import TypeScriptSnippet, snippet_from_source, snippet_key


class AssemblyBuilder:
    """Writes assembly documents into per-package directories under a root."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "packages"
        self.root.mkdir()

    def write(
        self,
        name: str,
        types: dict[str, Any] | None = None,
        *,
        readme: str | None = None,
        version: str = "1.0.0",
    ) -> Path:
        """Write an assembly for package ``name`` and return its directory."""
        directory = self.root / name
        directory.mkdir(parents=True, exist_ok=True)
        document: dict[str, Any] = {"name": name, "version": version, "types": types or {}}
        if readme is not None:
            document["readme"] = {"markdown": readme}
        (directory / ASSEMBLY_FILE_NAME).write_text(json.dumps(document, indent=2), encoding="utf-8")
        return directory

    @staticmethod
    def read(path: Path) -> dict[str, Any]:
        return json.loads(path.read_text(encoding="utf-8"))


def interface_type(fqn: str, example: str | None = None, **extra: Any) -> dict[str, Any]:
    """Interface with one method whose docs carry ``example``."""
    docs = {"example": example} if example is not None else {}
    return {
        "fqn": fqn,
        "kind": "interface",
        "methods": [{"name": "doIt", "docs": docs, "parameters": []}],
        **extra,
    }


def write_tablet(path: Path, translations: dict[str, dict[str, str]], did_compile: bool = True) -> Path:
    """
    Write a tablet file.

    Args:
        path: Tablet location.
        translations: Mapping of original example text to ``{language: source}``.
        did_compile: didCompile flag for every entry.
    """
    snippets = {}
    for original, per_language in translations.items():
        snippet = snippet_from_source(original, "example")
        entry = {"$": {"source": snippet.visible_source}}
        entry.update({lang: {"source": source} for lang, source in per_language.items()})
        snippets[snippet_key(snippet)] = {"translations": entry, "didCompile": did_compile}
    path.write_text(json.dumps({"version": "2", "snippets": snippets}), encoding="utf-8")
    return path


@dataclass
class FakeLiveTranslator:
    """Live translator that tags the visible source with the target language."""

    did_compile: bool = True
    diagnostics: list[Diagnostic] = field(default_factory=list)
    untranslatable: set[str] = field(default_factory=set)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def translate(self, snippet: TypeScriptSnippet, language: str) -> LiveTranslation | None:
        self.calls.append((snippet.visible_source, language))
        if snippet.visible_source in self.untranslatable:
            return None
        return LiveTranslation(
            source=f"[{language}] {snippet.visible_source}",
            did_compile=self.did_compile,
            diagnostics=list(self.diagnostics),
        )


__all__ = ["AssemblyBuilder", "FakeLiveTranslator", "interface_type", "write_tablet"]
