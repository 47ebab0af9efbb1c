"""
Traversal of type definitions to every documentation block that can carry an example.

A class is an interface-shaped type plus an initializer, so class handling runs the
initializer step and then calls the interface handler directly.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from assembly_transliterator.assembly import Docs, TypeDef, TypeKind
from assembly_transliterator.errors import UnsupportedTypeKindError

DocsCallback = Callable[[Docs | None], None]


def walk_type(type_def: TypeDef, translate_docs: DocsCallback) -> None:
    """
    Apply ``translate_docs`` to every member-level Docs block of a type.

    Args:
        type_def: Type definition from an assembly's ``types`` mapping.
        translate_docs: Callback receiving each Docs block (or None where absent).

    Raises:
        UnsupportedTypeKindError: If the type's kind is not class, interface or enum.
            Raised before the callback runs for any part of the type.
    """
    kind = _kind_of(type_def)
    handler = _HANDLERS.get(kind) if kind is not None else None
    if handler is None:
        raise UnsupportedTypeKindError(type_def.get("kind"), type_def.get("fqn"))
    handler(type_def, translate_docs)


def _kind_of(type_def: TypeDef) -> TypeKind | None:
    try:
        return TypeKind(type_def.get("kind"))
    except ValueError:
        return None


def _walk_class(type_def: TypeDef, translate_docs: DocsCallback) -> None:
    initializer = type_def.get("initializer")
    translate_docs(initializer.get("docs") if initializer else None)
    _walk_interface(type_def, translate_docs)


def _walk_interface(type_def: TypeDef, translate_docs: DocsCallback) -> None:
    for method in type_def.get("methods") or []:
        translate_docs(method.get("docs"))
        for parameter in method.get("parameters") or []:
            translate_docs(parameter.get("docs"))
    for prop in type_def.get("properties") or []:
        translate_docs(prop.get("docs"))


def _walk_enum(type_def: TypeDef, translate_docs: DocsCallback) -> None:
    for member in type_def.get("members") or []:
        translate_docs(member.get("docs"))


_HANDLERS: dict[TypeKind, Callable[[Any, DocsCallback], None]] = {
    TypeKind.CLASS: _walk_class,
    TypeKind.INTERFACE: _walk_interface,
    TypeKind.ENUM: _walk_enum,
}
