"""Type tree produced by the annotation parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from typenote.source import Span

# Spans are positional metadata: excluded from equality so that two parses
# of the same text compare equal and fixtures need no positions.


@dataclass(frozen=True)
class AnyType:
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class EntityType:
    name: str
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NullableType:
    type: TypeNode
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class UnionType:
    types: tuple[TypeNode, ...]
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FunctionParameter:
    type: TypeNode
    name: str | None = None
    rest: bool = False
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FunctionType:
    parameters: tuple[FunctionParameter, ...]
    return_type: TypeNode | None = None  # None: no arrow in the source
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ArrayType:
    type: TypeNode
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ObjectMember:
    name: str
    type: TypeNode
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ObjectType:
    members: tuple[ObjectMember, ...]
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class StringLiteralType:
    value: str
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NumberLiteralType:
    value: str  # raw text, never converted
    span: Span | None = field(default=None, compare=False, repr=False)


TypeNode = Union[
    AnyType, EntityType, NullableType, UnionType, FunctionType,
    ArrayType, ObjectType, StringLiteralType, NumberLiteralType,
]

Node = Union[TypeNode, FunctionParameter, ObjectMember]


def node_kind(node: Node) -> str:
    """Short kind name of a node, e.g. ``"Entity"`` or ``"FunctionParameter"``."""
    return type(node).__name__.removesuffix("Type")


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node into plain dicts and lists, suitable for JSON.

    Optional fields that are absent in the source (``returnType``,
    ``name``, ``rest``) are left out rather than set to null.
    """
    out: dict[str, Any] = {"kind": node_kind(node)}
    match node:
        case AnyType():
            pass
        case EntityType(name=name):
            out["name"] = name
        case NullableType(type=inner) | ArrayType(type=inner):
            out["type"] = node_to_dict(inner)
        case UnionType(types=types):
            out["types"] = [node_to_dict(t) for t in types]
        case FunctionType(parameters=params, return_type=ret):
            out["parameters"] = [node_to_dict(p) for p in params]
            if ret is not None:
                out["returnType"] = node_to_dict(ret)
        case FunctionParameter(type=inner, name=name, rest=rest):
            if name is not None:
                out["name"] = name
            if rest:
                out["rest"] = True
            out["type"] = node_to_dict(inner)
        case ObjectType(members=members):
            out["members"] = [node_to_dict(m) for m in members]
        case ObjectMember(name=name, type=inner):
            out["name"] = name
            out["type"] = node_to_dict(inner)
        case StringLiteralType(value=value) | NumberLiteralType(value=value):
            out["value"] = value
        case _:
            raise TypeError(f"not a type node: {node!r}")
    return out
