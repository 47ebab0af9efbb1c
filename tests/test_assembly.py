"""Tests for assembly_transliterator.assembly."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from assembly_transliterator.assembly import (
    ASSEMBLY_FILE_NAME,
    AssemblyLoader,
    load_assemblies,
    write_assembly,
)
from assembly_transliterator.engine import TranslationEngine
from assembly_transliterator.errors import AssemblyLoadError, AssemblyParseError
from tests._fixtures.assembly_builder import AssemblyBuilder, interface_type


class RecordingEngine(TranslationEngine):
    """Engine that remembers every add_assembly call."""

    def __init__(self) -> None:
        super().__init__()
        self.added: list[tuple[str, Path]] = []

    async def add_assembly(self, assembly, directory) -> None:
        self.added.append((assembly["name"], Path(directory)))
        await super().add_assembly(assembly, directory)


@pytest.mark.asyncio
async def test_loader_returns_independent_copies(assembly_builder: AssemblyBuilder) -> None:
    directory = assembly_builder.write("pkg", {"pkg.IFoo": interface_type("pkg.IFoo", "foo();")})
    loader = AssemblyLoader(directory)

    first = await loader()
    second = await loader()
    first["types"]["pkg.IFoo"]["methods"][0]["docs"]["example"] = "changed"
    first["name"] = "renamed"

    assert first is not second
    assert second["name"] == "pkg"
    assert second["types"]["pkg.IFoo"]["methods"][0]["docs"]["example"] == "foo();"


@pytest.mark.asyncio
async def test_loader_missing_file_raises_load_error(tmp_path: Path) -> None:
    loader = AssemblyLoader(tmp_path / "nowhere")

    with pytest.raises(AssemblyLoadError) as exc_info:
        await loader()

    assert not isinstance(exc_info.value, AssemblyParseError)
    assert exc_info.value.path == tmp_path / "nowhere" / ASSEMBLY_FILE_NAME


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
async def test_loader_rejects_malformed_documents(tmp_path: Path, content: str) -> None:
    (tmp_path / ASSEMBLY_FILE_NAME).write_text(content, encoding="utf-8")

    with pytest.raises(AssemblyParseError):
        await AssemblyLoader(tmp_path)()


def test_output_path_suffixes_language(tmp_path: Path) -> None:
    loader = AssemblyLoader(tmp_path)

    assert loader.path == tmp_path / ".jsii"
    assert loader.output_path("python") == tmp_path / ".jsii.python"


@pytest.mark.asyncio
async def test_load_assemblies_registers_each_directory_once(
    assembly_builder: AssemblyBuilder,
) -> None:
    first = assembly_builder.write("first")
    second = assembly_builder.write("second")
    engine = RecordingEngine()

    loaders = await load_assemblies([first, second], engine)

    assert list(loaders) == [first, second]
    assert engine.added == [("first", first), ("second", second)]
    assert engine.assemblies == {first: "first", second: "second"}


@pytest.mark.asyncio
async def test_load_assemblies_fails_fast_on_missing_directory(
    assembly_builder: AssemblyBuilder, tmp_path: Path
) -> None:
    good = assembly_builder.write("good")
    engine = RecordingEngine()

    with pytest.raises(AssemblyLoadError):
        await load_assemblies([tmp_path / "missing", good], engine)

    assert engine.added == []


@pytest.mark.asyncio
async def test_write_assembly_pretty_prints(tmp_path: Path) -> None:
    target = tmp_path / "out.json"

    await write_assembly({"name": "pkg", "docs": {"example": "héllo"}}, target)

    text = target.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert '\n  "name": "pkg"' in text
    assert "héllo" in text
    assert json.loads(text) == {"name": "pkg", "docs": {"example": "héllo"}}
