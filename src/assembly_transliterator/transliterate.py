"""
Transliteration of assemblies into per-language copies.

For every (directory, language) pair the assembly is reloaded from disk, every
documentation example and README snippet is replaced by its translation with a
disclaimer prefixed, and the result is written next to the original as
``<assembly file>.<language>``. The original file is never modified.

Pairs are processed strictly one after another: the translation engine is shared
by all of them and its diagnostics must come out in a deterministic order.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TextIO

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape

from assembly_transliterator.assembly import (
    ASSEMBLY_FILE_NAME,
    Assembly,
    AssemblyLoader,
    Docs,
    TypeDef,
    load_assemblies,
    write_assembly,
)
from assembly_transliterator.disclaimer import compose_disclaimer
from assembly_transliterator.engine import TranslationEngine
from assembly_transliterator.errors import StrictModeError
from assembly_transliterator.fixtures import fixturize
from assembly_transliterator.languages import TargetLanguage
from assembly_transliterator.logging import get_logger
from assembly_transliterator.snippet import SnippetParameters, snippet_from_source
from assembly_transliterator.walker import walk_type

logger = get_logger("transliterate")


class TransliterateOptions(BaseModel):
    """Options for a transliteration run."""

    # Ignore missing fixture files or literate documents instead of failing
    loose: bool = Field(default=False)
    # Fail after the run if any example that needed live translation failed to compile
    strict: bool = Field(default=False)
    # Pre-built tablet; the default tablets beside each assembly are always used
    tablet: Path | None = Field(default=None)


class Transliterator:
    """
    Drives a transliteration run over directories and target languages.

    The engine is injected so that a single instance serves the whole run.
    """

    def __init__(
        self,
        engine: TranslationEngine,
        options: TransliterateOptions | None = None,
        *,
        console: Console | None = None,
        diagnostics_stream: TextIO | None = None,
        assembly_file_name: str = ASSEMBLY_FILE_NAME,
    ):
        """
        Initialize the transliterator.

        Args:
            engine: Translation engine shared by every (directory, language) pair.
            options: Run options.
            console: Rich console for progress output. If None, creates a new one.
            diagnostics_stream: Where diagnostics are printed at the end of the run.
                Defaults to stderr.
            assembly_file_name: Name of the assembly file inside each directory.
        """
        self.engine = engine
        self.options = options or TransliterateOptions()
        self.console = console or Console(stderr=True)
        self.diagnostics_stream = diagnostics_stream
        self.assembly_file_name = assembly_file_name

    async def run(
        self,
        directories: Iterable[Path | str],
        languages: Sequence[TargetLanguage | str],
    ) -> list[Path]:
        """
        Transliterate every assembly into every language.

        Args:
            directories: Assembly-containing directories.
            languages: Target languages, processed in the order given.

        Returns:
            Paths of the files written, in the order they were written.

        Raises:
            AssemblyLoadError: An assembly is missing or malformed.
            UnsupportedTypeKindError: A type has a kind the walker cannot traverse.
            StrictModeError: Strict mode is on and compile errors were recorded.
        """
        loaders = await load_assemblies(directories, self.engine, self.assembly_file_name)

        written: list[Path] = []
        for directory, loader in loaders.items():
            for language in languages:
                written.append(await self._transliterate_one(directory, loader, str(language)))

        self.engine.print_diagnostics(self.diagnostics_stream or sys.stderr)
        if self.options.strict and self.engine.has_errors:
            errors = sum(1 for d in self.engine.diagnostics if d.is_error)
            raise StrictModeError(errors)
        return written

    async def _transliterate_one(
        self, directory: Path, loader: AssemblyLoader, language: str
    ) -> Path:
        started = time.monotonic()
        # Translation rewrites the document in place, so each language gets its own copy
        assembly: Assembly = await loader()

        readme = assembly.get("readme")
        if readme and readme.get("markdown"):
            readme["markdown"] = self.engine.translate_snippets_in_markdown(
                readme["markdown"],
                language,
                True,
                compose_disclaimer,
                directory,
            )

        for type_def in (assembly.get("types") or {}).values():
            self._transliterate_type(type_def, language, directory)

        output = loader.output_path(language)
        await write_assembly(assembly, output)

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.debug(
            "Done transliterating %s@%s to %s after %d milliseconds",
            assembly.get("name"),
            assembly.get("version"),
            language,
            elapsed_ms,
        )
        self.console.print(f"[green]Wrote[/green] {escape(str(output))}")
        return output

    def _transliterate_type(self, type_def: TypeDef, language: str, directory: Path) -> None:
        def translate_docs(docs: Docs | None) -> None:
            self._transliterate_docs(docs, language, directory)

        translate_docs(type_def.get("docs"))
        walk_type(type_def, translate_docs)

    def _transliterate_docs(self, docs: Docs | None, language: str, directory: Path) -> None:
        if not docs or not docs.get("example"):
            return

        snippet = fixturize(
            snippet_from_source(
                docs["example"],
                "example",
                True,
                {SnippetParameters.PROJECT_DIRECTORY: str(directory)},
            ),
            self.options.loose,
        )
        translation = self.engine.translate_snippet(snippet, language)
        # No translation available: the example is left as it was
        if translation is not None:
            docs["example"] = compose_disclaimer(translation)


async def transliterate_assembly(
    directories: Iterable[Path | str],
    languages: Sequence[TargetLanguage | str],
    options: TransliterateOptions | None = None,
    *,
    console: Console | None = None,
    assembly_file_name: str = ASSEMBLY_FILE_NAME,
) -> list[Path]:
    """
    Prepare transliterated copies of the assemblies in the given directories.

    Builds one translation engine for the whole run, loads the pre-built tablet if
    one was given, then runs a Transliterator.

    Args:
        directories: Directories containing assemblies.
        languages: Languages to transliterate into.
        options: Run options.
        console: Rich console for progress output.
        assembly_file_name: Name of the assembly file inside each directory.

    Returns:
        Paths of the files written.
    """
    options = options or TransliterateOptions()
    engine = TranslationEngine(
        loose=options.loose,
        include_compiler_diagnostics=True,
        assembly_file_name=assembly_file_name,
    )
    if options.tablet:
        await engine.load_tablet_from_file(options.tablet)

    transliterator = Transliterator(
        engine,
        options,
        console=console,
        assembly_file_name=assembly_file_name,
    )
    return await transliterator.run(directories, languages)
