"""
Target languages supported by the transliterator.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class TargetLanguage(str, Enum):
    """Languages an assembly can be transliterated into."""

    PYTHON = "python"
    CSHARP = "csharp"
    JAVA = "java"
    GO = "go"

    def __str__(self) -> str:
        return self.value


# Languages whose line comments start with '#'; everything else uses '//'
HASH_COMMENT_LANGUAGES = frozenset({"python", "ruby"})


def parse_languages(values: Iterable[str] | None) -> list[TargetLanguage]:
    """
    Resolve user-supplied language names into TargetLanguage members.

    Args:
        values: Language names (case-insensitive). None or empty selects every language.

    Returns:
        Languages in the order given, without duplicates.

    Raises:
        ValueError: If a name does not match any supported language.
    """
    names = [v for v in (values or []) if v and v.strip()]
    if not names:
        return list(TargetLanguage)

    result: list[TargetLanguage] = []
    for name in names:
        try:
            language = TargetLanguage(name.strip().lower())
        except ValueError:
            valid = [lang.value for lang in TargetLanguage]
            raise ValueError(
                f"Unsupported target language: {name}. Valid options: {valid}"
            ) from None
        if language not in result:
            result.append(language)
    return result
