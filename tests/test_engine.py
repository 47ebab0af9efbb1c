"""Tests for assembly_transliterator.engine."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from assembly_transliterator.disclaimer import compose_disclaimer
from assembly_transliterator.engine import Diagnostic, Severity, Translation, TranslationEngine
from assembly_transliterator.snippet import snippet_from_source
from tests._fixtures.assembly_builder import FakeLiveTranslator, write_tablet

REFERENCE = "See https://github.com/aws/jsii/issues/826 for more information."


@pytest.mark.asyncio
async def test_tablet_translation_wins_over_live_translation(
    tmp_path: Path, engine: TranslationEngine, live_translator: FakeLiveTranslator
) -> None:
    await engine.load_tablet_from_file(
        write_tablet(tmp_path / "t.json", {"new Foo();": {"python": "Foo()"}})
    )

    translation = engine.translate_snippet(snippet_from_source("new Foo();", "example"), "python")

    assert translation == Translation("python", "Foo()", did_compile=True)
    assert live_translator.calls == []


def test_live_translation_is_cached(
    engine: TranslationEngine, live_translator: FakeLiveTranslator
) -> None:
    snippet = snippet_from_source("new Foo();", "example")

    first = engine.translate_snippet(snippet, "java")
    second = engine.translate_snippet(snippet, "java")

    assert first == second == Translation("java", "[java] new Foo();", did_compile=True)
    assert live_translator.calls == [("new Foo();", "java")]


def test_no_translation_without_tablet_entry_or_live_translator() -> None:
    engine = TranslationEngine()

    assert engine.translate_snippet(snippet_from_source("new Foo();", "x"), "python") is None
    assert engine.diagnostics == []


def test_untranslatable_snippet_returns_none(
    engine: TranslationEngine, live_translator: FakeLiveTranslator
) -> None:
    live_translator.untranslatable.add("broken(")

    assert engine.translate_snippet(snippet_from_source("broken(", "x"), "python") is None


def test_errors_from_non_strict_snippets_become_warnings() -> None:
    live = FakeLiveTranslator(
        did_compile=False, diagnostics=[Diagnostic(Severity.ERROR, "Cannot find name 'Foo'.")]
    )
    engine = TranslationEngine(live_translator=live)

    engine.translate_snippet(snippet_from_source("new Foo();", "loose-example", strict=False), "python")

    assert engine.has_errors is False
    assert engine.diagnostics == [
        Diagnostic(Severity.WARNING, "Cannot find name 'Foo'.", "loose-example")
    ]

    engine.translate_snippet(snippet_from_source("new Bar();", "strict-example", strict=True), "python")

    assert engine.has_errors is True


def test_diagnostics_can_be_excluded() -> None:
    live = FakeLiveTranslator(diagnostics=[Diagnostic(Severity.ERROR, "boom")])
    engine = TranslationEngine(live_translator=live, include_compiler_diagnostics=False)

    engine.translate_snippet(snippet_from_source("x;", "example", strict=True), "python")

    assert engine.diagnostics == []
    assert engine.has_errors is False


def test_print_diagnostics_writes_every_entry() -> None:
    live = FakeLiveTranslator(
        diagnostics=[
            Diagnostic(Severity.ERROR, "Cannot find name 'Foo'.", "README.md:3"),
            Diagnostic(Severity.WARNING, "Unused [variable]"),
        ]
    )
    engine = TranslationEngine(live_translator=live)
    engine.translate_snippet(snippet_from_source("x;", "example", strict=True), "python")
    stream = io.StringIO()

    engine.print_diagnostics(stream)

    output = stream.getvalue()
    assert "README.md:3: error Cannot find name 'Foo'." in output
    assert "example: warning Unused [variable]" in output


def test_print_diagnostics_is_silent_without_diagnostics() -> None:
    stream = io.StringIO()

    TranslationEngine().print_diagnostics(stream)

    assert stream.getvalue() == ""


@pytest.mark.asyncio
async def test_add_assembly_loads_default_tablet_once(tmp_path: Path) -> None:
    write_tablet(tmp_path / ".jsii.tabl.json", {"new Foo();": {"python": "Foo()"}})
    engine = TranslationEngine()

    await engine.add_assembly({"name": "pkg"}, tmp_path)
    await engine.add_assembly({"name": "pkg"}, tmp_path)

    assert engine.assemblies == {tmp_path: "pkg"}
    assert engine.tablet.count == 1
    translation = engine.translate_snippet(snippet_from_source("new Foo();", "x"), "python")
    assert translation is not None
    assert translation.source == "Foo()"


README = """# Title

Some text.

```ts
const x = new Foo();
```

```sh
npm install pkg
```

- A list item:

  ```typescript
  x.doIt();
  ```
"""


def test_markdown_snippets_are_translated_and_retagged(
    tmp_path: Path, engine: TranslationEngine
) -> None:
    result = engine.translate_snippets_in_markdown(
        README, "python", True, compose_disclaimer, tmp_path
    )

    assert result == f"""# Title

Some text.

```python
# This example was automatically transliterated.
# {REFERENCE}

[python] const x = new Foo();
```

```sh
npm install pkg
```

- A list item:

  ```python
  # This example was automatically transliterated.
  # {REFERENCE}

  [python] x.doIt();
  ```
"""


def test_markdown_snippets_without_translation_are_untouched(tmp_path: Path) -> None:
    live = FakeLiveTranslator(untranslatable={"const x = new Foo();"})
    engine = TranslationEngine(live_translator=live)

    result = engine.translate_snippets_in_markdown(
        README, "java", True, compose_disclaimer, tmp_path
    )

    assert "```ts\nconst x = new Foo();\n```" in result
    assert "  ```java\n  // This example was automatically transliterated.\n" in result
    assert "  [java] x.doIt();\n  ```\n" in result


def test_markdown_snippets_are_marked_strict(tmp_path: Path) -> None:
    live = FakeLiveTranslator(did_compile=False, diagnostics=[Diagnostic(Severity.ERROR, "bad")])
    engine = TranslationEngine(live_translator=live)

    engine.translate_snippets_in_markdown(
        "```ts\nnew Foo();\n```\n", "python", True, compose_disclaimer, tmp_path
    )

    assert engine.has_errors is True
    assert engine.diagnostics[0].location == f"{tmp_path / 'README.md'}:1"


def test_ts_fence_quoted_inside_another_fence_is_left_alone(
    tmp_path: Path, engine: TranslationEngine
) -> None:
    markdown = "~~~md\n```ts\nshown();\n```\n~~~\n\n```ts\nreal();\n```\n"

    result = engine.translate_snippets_in_markdown(
        markdown, "python", True, compose_disclaimer, tmp_path
    )

    assert result == (
        "~~~md\n```ts\nshown();\n```\n~~~\n\n"
        "```python\n"
        "# This example was automatically transliterated.\n"
        f"# {REFERENCE}\n"
        "\n"
        "[python] real();\n"
        "```\n"
    )


def test_markdown_with_crlf_line_endings_is_translated(
    tmp_path: Path, engine: TranslationEngine
) -> None:
    markdown = "# pkg\r\n\r\n```ts\r\nconst foo = 1;\r\n```\r\n"

    result = engine.translate_snippets_in_markdown(
        markdown, "python", True, compose_disclaimer, tmp_path
    )

    assert result.startswith("# pkg\r\n\r\n```python\r\n# This example was automatically")
    assert result.endswith("\r\n[python] const foo = 1;\r\n```\r\n")
    assert "\n" not in result.replace("\r\n", "")
