"""
Disclaimer text prepended to every transliterated example.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from assembly_transliterator.languages import HASH_COMMENT_LANGUAGES

if TYPE_CHECKING:
    from assembly_transliterator.engine import Translation

COMPILED_DISCLAIMER = "This example was automatically transliterated."
UNCOMPILED_DISCLAIMER = (
    "This example was automatically transliterated with incomplete type information. "
    "It may not work as-is."
)
REFERENCE_LINE = "See https://github.com/aws/jsii/issues/826 for more information."


def comment_token(language: str) -> str:
    """Line-comment marker for a language; unknown languages get '//'."""
    return "#" if str(language) in HASH_COMMENT_LANGUAGES else "//"


def compose_disclaimer(translation: Translation) -> str:
    """
    Return the translated source prefixed with the transliteration disclaimer.

    The first comment line depends on whether the snippet was confirmed to compile;
    the reference line and the blank separator are always present.
    """
    comment = comment_token(translation.language)
    disclaimer = COMPILED_DISCLAIMER if translation.did_compile else UNCOMPILED_DISCLAIMER
    return "\n".join(
        [
            f"{comment} {disclaimer}",
            f"{comment} {REFERENCE_LINE}",
            "",
            translation.source,
        ]
    )
