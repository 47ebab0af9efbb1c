"""
Translation engine shared by every stage of a transliteration run.

The engine owns the run's translation memory and the diagnostics produced while
translating. Translations come from loaded tablets first; snippets missing from the
tablets are handed to an optional live translator (a compiler-backed backend
supplied by the caller). Without one, untranslatable snippets are simply skipped.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, TextIO

import mistune
from rich.console import Console
from rich.markup import escape

from assembly_transliterator.assembly import ASSEMBLY_FILE_NAME
from assembly_transliterator.fixtures import fixturize
from assembly_transliterator.logging import get_logger
from assembly_transliterator.snippet import (
    SnippetParameters,
    TypeScriptSnippet,
    parse_key_value_list,
    snippet_from_source,
)
from assembly_transliterator.tablet import LanguageTablet, TranslatedSnippet, default_tablet_path

# Fenced code block info strings that mark source-language examples
SOURCE_LANGUAGE_TAGS = frozenset({"ts", "typescript"})

logger = get_logger("engine")


@dataclass(frozen=True)
class Translation:
    """A snippet rendered in one target language."""

    language: str
    source: str
    did_compile: bool = False


class Severity(str, Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A compiler message recorded while translating a snippet."""

    severity: Severity
    message: str
    location: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


@dataclass
class LiveTranslation:
    """Result of translating a snippet that was not found in any tablet."""

    source: str
    did_compile: bool
    diagnostics: list[Diagnostic] = field(default_factory=list)


class LiveTranslator(Protocol):
    """Backend that compiles and translates snippets on demand."""

    def translate(self, snippet: TypeScriptSnippet, language: str) -> LiveTranslation | None:
        """Translate a snippet, or return None if it cannot be translated."""
        ...


MarkdownFormatter = Callable[[Translation], str]


@dataclass
class _FencedBlock:
    marker: str
    info: str
    raw: str


@dataclass
class _BlockSpan:
    """Offsets of a fenced block; the body ends where the closing fence line starts."""

    prefix: str
    info_start: int
    info_end: int
    body_start: int
    body_end: int
    end: int


class TranslationEngine:
    """
    Translation memory plus diagnostics for one transliteration run.

    Create a single instance per run and pass it to every stage that translates.
    """

    def __init__(
        self,
        *,
        loose: bool = False,
        include_compiler_diagnostics: bool = True,
        live_translator: LiveTranslator | None = None,
        assembly_file_name: str = ASSEMBLY_FILE_NAME,
    ):
        """
        Initialize the engine.

        Args:
            loose: Tolerate missing fixtures when preparing markdown snippets.
            include_compiler_diagnostics: Record diagnostics reported by the live translator.
            live_translator: Backend for snippets missing from the tablets.
            assembly_file_name: Assembly file name, used to locate default tablets.
        """
        self.loose = loose
        self.include_compiler_diagnostics = include_compiler_diagnostics
        self.live_translator = live_translator
        self.assembly_file_name = assembly_file_name
        self.tablet = LanguageTablet()
        self.assemblies: dict[Path, str] = {}
        self._diagnostics: list[Diagnostic] = []

    # ------------------------------------------------------------------
    # Loading

    async def add_assembly(self, assembly: Mapping[str, Any], directory: Path | str) -> None:
        """
        Register an assembly and load the default tablet shipped beside it.

        Registering the same directory twice has no further effect.
        """
        directory = Path(directory)
        if directory in self.assemblies:
            return
        self.assemblies[directory] = str(assembly.get("name", directory.name))

        tablet_path = default_tablet_path(directory, self.assembly_file_name)
        if tablet_path.is_file():
            await self.tablet.load(tablet_path)

    async def load_tablet_from_file(self, path: Path | str) -> None:
        """Load a pre-built tablet; its entries take precedence over earlier ones."""
        count = await self.tablet.load(path)
        logger.info("Loaded %d translated snippets from %s", count, path)

    # ------------------------------------------------------------------
    # Translation

    def translate_snippet(self, snippet: TypeScriptSnippet, language: str) -> Translation | None:
        """
        Translate one snippet.

        Returns:
            Translation, or None if neither the tablet nor the live translator
            can provide one.
        """
        language = str(language)
        entry = self.tablet.lookup(snippet, language)
        if entry is not None:
            return Translation(
                language=language,
                source=entry.get(language) or "",
                did_compile=bool(entry.did_compile),
            )

        if self.live_translator is None:
            return None

        result = self.live_translator.translate(snippet, language)
        if result is None:
            return None

        if self.include_compiler_diagnostics:
            self._record(result.diagnostics, snippet)

        cached = TranslatedSnippet.from_snippet(snippet)
        cached.translations[language] = result.source
        cached.did_compile = result.did_compile
        self.tablet.add(cached)

        return Translation(language=language, source=result.source, did_compile=result.did_compile)

    def translate_snippets_in_markdown(
        self,
        markdown: str,
        language: str,
        strict: bool,
        formatter: MarkdownFormatter,
        working_directory: Path | str,
    ) -> str:
        """
        Translate every source-language fenced code block in a markdown document.

        Translated blocks get their body replaced by ``formatter(translation)`` and
        their info string replaced by the target language. Blocks that cannot be
        translated are left untouched.

        Args:
            markdown: Markdown text.
            language: Target language.
            strict: Whether compile failures of these snippets count as errors.
            formatter: Produces the final block body from a translation.
            working_directory: Project directory used to resolve fixtures.

        Returns:
            The rewritten markdown.
        """
        language = str(language)
        newline = "\r\n" if "\r\n" in markdown else "\n"
        pieces: list[str] = []
        cursor = 0
        search_from = 0

        for block in _fenced_blocks(markdown):
            # Advance past every fence, translated or not
            span = _locate_block(markdown, block, search_from)
            if span is None:
                logger.warning("Could not locate %r code block in markdown, skipping", block.info)
                continue
            search_from = span.end

            tag, _, params = block.info.partition(" ")
            if tag.lower() not in SOURCE_LANGUAGE_TAGS:
                continue
            line = markdown.count("\n", 0, span.info_start) + 1

            parameters = parse_key_value_list(params)
            parameters[SnippetParameters.PROJECT_DIRECTORY] = str(working_directory)
            snippet = fixturize(
                snippet_from_source(
                    block.raw,
                    f"{Path(working_directory) / 'README.md'}:{line}",
                    strict,
                    parameters,
                ),
                self.loose,
            )
            translation = self.translate_snippet(snippet, language)
            if translation is None:
                continue

            body = formatter(translation)
            prefix = span.prefix
            body_lines = [f"{prefix}{text}" if text else prefix.rstrip() for text in body.split("\n")]

            pieces.append(markdown[cursor : span.info_start])
            pieces.append(language)
            pieces.append(markdown[span.info_end : span.body_start])
            pieces.append(newline.join(body_lines) + newline)
            cursor = span.body_end

        pieces.append(markdown[cursor:])
        return "".join(pieces)

    # ------------------------------------------------------------------
    # Diagnostics

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Diagnostics recorded so far, in the order they occurred."""
        return list(self._diagnostics)

    @property
    def has_errors(self) -> bool:
        """True if any recorded diagnostic is an error."""
        return any(d.is_error for d in self._diagnostics)

    def print_diagnostics(self, stream: TextIO) -> None:
        """Print all recorded diagnostics to a text stream."""
        if not self._diagnostics:
            return
        console = Console(file=stream, highlight=False, emoji=False, soft_wrap=True)
        for diagnostic in self._diagnostics:
            style = "red" if diagnostic.is_error else "yellow"
            prefix = f"{escape(diagnostic.location)}: " if diagnostic.location else ""
            console.print(
                f"{prefix}[{style}]{diagnostic.severity.value}[/{style}] "
                f"{escape(diagnostic.message)}"
            )

    def _record(self, diagnostics: Iterable[Diagnostic], snippet: TypeScriptSnippet) -> None:
        for diagnostic in diagnostics:
            # Compile errors only fail the run for snippets marked strict
            if diagnostic.is_error and not snippet.strict:
                diagnostic = Diagnostic(Severity.WARNING, diagnostic.message, diagnostic.location)
            if not diagnostic.location:
                diagnostic = Diagnostic(diagnostic.severity, diagnostic.message, snippet.location)
            self._diagnostics.append(diagnostic)


def _fenced_blocks(markdown: str) -> list[_FencedBlock]:
    """Fenced code blocks of a markdown document, in document order."""
    parse = mistune.create_markdown(renderer=None)
    tokens = parse(markdown)
    return list(_iter_fenced(tokens))


def _iter_fenced(tokens: Iterable[dict[str, Any]]) -> Iterator[_FencedBlock]:
    for token in tokens:
        if token.get("type") == "block_code" and token.get("style") == "fenced":
            info = (token.get("attrs") or {}).get("info") or ""
            yield _FencedBlock(
                marker=token.get("marker") or "```",
                info=info.strip(),
                raw=token.get("raw", ""),
            )
        children = token.get("children")
        if isinstance(children, list):
            yield from _iter_fenced(children)


def _locate_block(markdown: str, block: _FencedBlock, start: int) -> _BlockSpan | None:
    """
    Find a fenced block in the source text at or after ``start``.

    The opening fence keeps its line prefix (indentation or blockquote markers).
    Both fences may end in CRLF.
    """
    char = block.marker[0]
    opening = re.compile(
        rf"^([ \t>]*){re.escape(block.marker)}[ \t]*({re.escape(block.info)})[ \t]*\r?$",
        re.MULTILINE,
    )
    match = opening.search(markdown, start)
    if match is None:
        return None

    body_start = min(match.end() + 1, len(markdown))
    closing = re.compile(
        rf"^[ \t>]*{re.escape(char)}{{{len(block.marker)},}}[ \t]*\r?$", re.MULTILINE
    )
    close = closing.search(markdown, body_start)
    if close is None:
        # Unclosed fences run to the end of the document
        return _BlockSpan(
            match.group(1), match.start(2), match.end(2), body_start, len(markdown), len(markdown)
        )
    return _BlockSpan(
        match.group(1), match.start(2), match.end(2), body_start, close.start(), close.end()
    )
