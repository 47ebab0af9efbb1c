"""
Fixture support: splicing a snippet into surrounding code so it compiles standalone.

Fixtures live in ``<project>/rosetta/<name>.ts-fixture`` and mark the insertion
point with a ``/// here`` line.
"""

from __future__ import annotations

from pathlib import Path

from assembly_transliterator.errors import FixtureError
from assembly_transliterator.logging import get_logger
from assembly_transliterator.snippet import SnippetParameters, TypeScriptSnippet

FIXTURE_DIRECTORY = "rosetta"
FIXTURE_SUFFIX = ".ts-fixture"
DEFAULT_FIXTURE = "default"
HERE_MARKER = "/// here"

logger = get_logger("fixtures")


def fixturize(snippet: TypeScriptSnippet, loose: bool = False) -> TypeScriptSnippet:
    """
    Return a copy of the snippet whose complete source is wrapped in its fixture.

    Args:
        snippet: Prepared snippet. Fixtures are resolved against its
            ``$PROJECT_DIRECTORY`` parameter (current directory if unset).
        loose: Return the snippet unchanged instead of failing when a named
            fixture is missing.

    Returns:
        The fixturized snippet, or the original one when no fixture applies.

    Raises:
        FixtureError: If a named fixture is missing (and ``loose`` is False) or a
            fixture lacks the insertion marker.
    """
    params = snippet.parameters
    if SnippetParameters.INFUSED in params:
        return snippet

    directory = Path(params.get(SnippetParameters.PROJECT_DIRECTORY, "."))
    fixture_name = params.get(SnippetParameters.FIXTURE)

    if fixture_name:
        fixture_path = fixture_file(directory, fixture_name)
        if not fixture_path.is_file():
            if loose:
                logger.debug("Fixture %s not found, leaving %s as-is", fixture_path, snippet.location)
                return snippet
            raise FixtureError(
                f"Sample uses fixture {fixture_name}, but not found: {fixture_path}"
            )
    else:
        fixture_path = fixture_file(directory, DEFAULT_FIXTURE)
        if not fixture_path.is_file():
            return snippet

    fixture = fixture_path.read_text(encoding="utf-8")
    return snippet.with_source(_splice(fixture, snippet.source, fixture_path))


def fixture_file(directory: Path, name: str) -> Path:
    """Path of a named fixture under a project directory."""
    return directory / FIXTURE_DIRECTORY / f"{name}{FIXTURE_SUFFIX}"


def _splice(fixture: str, source: str, fixture_path: Path) -> str:
    lines = fixture.splitlines()
    for index, line in enumerate(lines):
        if line.strip() == HERE_MARKER:
            return "\n".join([*lines[:index], source, *lines[index + 1 :]])
    raise FixtureError(f"Fixture {fixture_path} does not contain a '{HERE_MARKER}' marker")
