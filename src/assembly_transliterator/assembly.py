"""
Assembly documents and their loaders.

An assembly is kept as the plain JSON mapping read from disk so that every field
the transliterator does not touch survives serialization unchanged. The TypedDict
shapes below only describe the parts the type walker reads and rewrites.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypedDict

import aiofiles

from assembly_transliterator.errors import AssemblyLoadError, AssemblyParseError
from assembly_transliterator.logging import get_logger

if TYPE_CHECKING:
    from assembly_transliterator.engine import TranslationEngine

ASSEMBLY_FILE_NAME = ".jsii"

logger = get_logger("assembly")


class TypeKind(str, Enum):
    """Kinds of type definitions the walker knows how to traverse."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"


class Docs(TypedDict, total=False):
    summary: str
    remarks: str
    example: str


class Parameter(TypedDict, total=False):
    name: str
    docs: Docs


class Method(TypedDict, total=False):
    name: str
    docs: Docs
    parameters: list[Parameter]


class Property(TypedDict, total=False):
    name: str
    docs: Docs


class Initializer(TypedDict, total=False):
    docs: Docs
    parameters: list[Parameter]


class EnumMember(TypedDict, total=False):
    name: str
    docs: Docs


class TypeDef(TypedDict, total=False):
    fqn: str
    kind: str
    docs: Docs
    initializer: Initializer
    methods: list[Method]
    properties: list[Property]
    members: list[EnumMember]


class Readme(TypedDict, total=False):
    markdown: str


class Assembly(TypedDict, total=False):
    name: str
    version: str
    types: dict[str, TypeDef]
    readme: Readme


class AssemblyLoader:
    """
    Deferred factory for one directory's assembly.

    Each call re-reads and re-parses the file, so every caller owns an
    independent, freely mutable document.
    """

    def __init__(self, directory: Path | str, file_name: str = ASSEMBLY_FILE_NAME):
        self.directory = Path(directory)
        self.file_name = file_name

    @property
    def path(self) -> Path:
        """Location of the assembly file."""
        return self.directory / self.file_name

    def output_path(self, language: str) -> Path:
        """Location of the transliterated copy for a language."""
        return self.directory / f"{self.file_name}.{language}"

    async def __call__(self) -> Assembly:
        path = self.path
        try:
            async with aiofiles.open(path, encoding="utf-8") as f:
                text = await f.read()
        except OSError as e:
            raise AssemblyLoadError(path, e.strerror or str(e)) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise AssemblyParseError(path, f"invalid JSON ({e})") from e

        if not isinstance(data, dict):
            raise AssemblyParseError(path, "root element must be a JSON object")
        return data

    def __repr__(self) -> str:
        return f"AssemblyLoader({str(self.path)!r})"


async def load_assemblies(
    directories: Iterable[Path | str],
    engine: TranslationEngine,
    file_name: str = ASSEMBLY_FILE_NAME,
) -> dict[Path, AssemblyLoader]:
    """
    Register every assembly with the engine and return a loader per directory.

    Each assembly is read once here for registration; the returned loaders re-read
    it from disk whenever a fresh copy is needed.

    Args:
        directories: Assembly-containing directories, in processing order.
        engine: Translation engine receiving the assemblies.
        file_name: Name of the assembly file inside each directory.

    Returns:
        Mapping of directory to loader, in the order given.
    """
    loaders: dict[Path, AssemblyLoader] = {}
    for directory in directories:
        loader = AssemblyLoader(directory, file_name)
        assembly = await loader()
        await engine.add_assembly(assembly, loader.directory)
        logger.debug("Registered %s from %s", assembly.get("name", "<unnamed>"), loader.path)
        loaders[loader.directory] = loader
    return loaders


async def write_assembly(assembly: Assembly | dict[str, Any], path: Path) -> None:
    """Write an assembly as pretty-printed JSON."""
    text = json.dumps(assembly, indent=2, ensure_ascii=False) + "\n"
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(text)
