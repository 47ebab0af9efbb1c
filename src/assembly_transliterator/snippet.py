"""
Source-language snippets as they appear in documentation.

A snippet may hide setup lines from readers by wrapping them in ``/// !hide`` and
``/// !show`` markers; only the visible part is shown to readers, but the complete
source is what gets compiled and translated.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field, replace

HIDE_MARKER = "/// !hide"
SHOW_MARKER = "/// !show"

_KEY_VALUE_RE = re.compile(r"(\S+?)=(\"[^\"]*\"|\S+)|(\S+)")


class SnippetParameters:
    """Well-known snippet parameter names."""

    # Directory used to resolve fixtures and other relative references
    PROJECT_DIRECTORY = "$PROJECT_DIRECTORY"
    # Name of the fixture file (without extension) to splice the snippet into
    FIXTURE = "fixture"
    # The snippet was copied from a compiled source and should not be fixturized
    INFUSED = "infused"


@dataclass(frozen=True)
class TypeScriptSnippet:
    """A source-language example ready to be handed to the translation engine."""

    visible_source: str
    location: str
    strict: bool = False
    parameters: dict[str, str] = field(default_factory=dict)
    complete_source: str | None = None

    @property
    def source(self) -> str:
        """The code that should actually be compiled."""
        return self.complete_source if self.complete_source is not None else self.visible_source

    def with_source(self, complete_source: str) -> TypeScriptSnippet:
        """Copy of this snippet with a different complete source."""
        return replace(self, complete_source=complete_source)


def snippet_from_source(
    text: str,
    location: str,
    strict: bool = False,
    parameters: dict[str, str] | None = None,
) -> TypeScriptSnippet:
    """
    Build a snippet from documentation text.

    Args:
        text: Raw example text, possibly containing hide/show markers.
        location: Human-readable origin of the snippet, used in diagnostics.
        strict: Whether compile failures for this snippet count as errors.
        parameters: Snippet parameters such as the project directory.

    Returns:
        TypeScriptSnippet whose visible source has hidden regions removed.
    """
    return TypeScriptSnippet(
        visible_source=strip_hidden_regions(text).rstrip(),
        location=location,
        strict=strict,
        parameters=dict(parameters or {}),
        complete_source=remove_markers(text),
    )


def strip_hidden_regions(text: str) -> str:
    """Remove every line between a hide marker and the next show marker."""
    lines: list[str] = []
    hidden = False
    for line in text.splitlines():
        marker = line.strip()
        if marker == HIDE_MARKER:
            hidden = True
            continue
        if marker == SHOW_MARKER:
            hidden = False
            continue
        if not hidden:
            lines.append(line)
    return "\n".join(lines)


def remove_markers(text: str) -> str:
    """Return the complete source with only the marker lines taken out."""
    return "\n".join(
        line for line in text.splitlines() if line.strip() not in (HIDE_MARKER, SHOW_MARKER)
    )


def parse_key_value_list(info: str) -> dict[str, str]:
    """
    Parse the parameter part of a fenced code block info string.

    ``fixture=my-fixture infused`` becomes ``{"fixture": "my-fixture", "infused": ""}``.
    Quoted values have their quotes removed.
    """
    result: dict[str, str] = {}
    for match in _KEY_VALUE_RE.finditer(info):
        key, value, flag = match.groups()
        if flag is not None:
            result[flag] = ""
        else:
            result[key] = value.strip('"')
    return result


def snippet_key(snippet: TypeScriptSnippet) -> str:
    """Stable identifier for a snippet, used as its translation-memory key."""
    normalized = "\n".join(line.rstrip() for line in snippet.visible_source.strip().splitlines())
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
