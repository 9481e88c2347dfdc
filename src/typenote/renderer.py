"""Render a parsed type tree as TypeScript type syntax.

Walks the tree with the same per-node dispatch the parser uses to build it.
Entity names pass through a replacement table; names whose first segment
has a configured origin are collected so the caller can emit imports.
"""

from __future__ import annotations

import json

from typenote.type_nodes import (
    AnyType,
    ArrayType,
    EntityType,
    FunctionParameter,
    FunctionType,
    NullableType,
    NumberLiteralType,
    ObjectType,
    StringLiteralType,
    TypeNode,
    UnionType,
)

_NULL_SUFFIX = {
    "null": " | null",
    "undefined": " | undefined",
    "both": " | null | undefined",
}


class TypeRenderer:
    """Render type nodes to TypeScript, collecting needed imports."""

    def __init__(
        self,
        replacements: dict[str, str] | None = None,
        imports: dict[str, str] | None = None,
        *,
        nullable: str = "null",
    ) -> None:
        if nullable not in _NULL_SUFFIX:
            raise ValueError(f"unknown nullable style: {nullable!r}")
        self.replacements = dict(replacements or {})
        self.imports = dict(imports or {})
        self.nullable = nullable
        self._used: dict[str, set[str]] = {}

    @classmethod
    def from_config(cls, config) -> TypeRenderer:
        return cls(config.replace, config.imports, nullable=config.render.nullable)

    # ── Public API ─────────────────────────────────────────────

    def render(self, node: TypeNode) -> str:
        """Render a type node as a TypeScript type expression."""
        match node:
            case AnyType():
                return "any"
            case EntityType(name=name):
                return self._render_entity(name)
            case NullableType(type=inner):
                return self._wrap(inner, unions=False) + _NULL_SUFFIX[self.nullable]
            case UnionType(types=types):
                if not types:
                    return "never"
                return " | ".join(self._wrap(t, unions=False) for t in types)
            case FunctionType():
                params = self._render_parameters(node.parameters)
                return f"({params}) => {self._render_return(node)}"
            case ArrayType(type=element):
                return f"{self._wrap(element)}[]"
            case ObjectType(members=members):
                if not members:
                    return "{}"
                fields = "; ".join(f"{m.name}: {self.render(m.type)}" for m in members)
                return f"{{ {fields} }}"
            case StringLiteralType(value=value):
                return json.dumps(value, ensure_ascii=False)
            case NumberLiteralType(value=value):
                return value
            case _:
                raise TypeError(f"cannot render {node!r}")

    def render_declaration(self, name: str, node: TypeNode) -> str:
        """Render ``node`` as a named declaration.

        Call signatures become function declarations; everything else a
        type alias.
        """
        if isinstance(node, FunctionType):
            params = self._render_parameters(node.parameters)
            return f"function {name}({params}): {self._render_return(node)};"
        return f"type {name} = {self.render(node)};"

    def import_lines(self) -> list[str]:
        """Import statements for every imported name rendered so far."""
        lines = []
        for origin in sorted(self._used):
            names = ", ".join(sorted(self._used[origin]))
            lines.append(f'import {{ {names} }} from "{origin}";')
        return lines

    # ── Helpers ────────────────────────────────────────────────

    def _render_entity(self, name: str) -> str:
        rendered = self.replacements.get(name, name)
        root = rendered.split(".", 1)[0]
        origin = self.imports.get(root)
        if origin is not None:
            self._used.setdefault(origin, set()).add(root)
        return rendered

    def _render_parameters(self, parameters: tuple[FunctionParameter, ...]) -> str:
        taken = {p.name for p in parameters if p.name is not None}
        parts = []
        for i, param in enumerate(parameters):
            name = param.name
            if name is None:
                # Positional name, skipping any spelled out in the source
                n = i
                while f"p{n}" in taken:
                    n += 1
                name = f"p{n}"
                taken.add(name)
            if param.rest:
                parts.append(f"...{name}: {self._wrap(param.type)}[]")
            else:
                parts.append(f"{name}: {self.render(param.type)}")
        return ", ".join(parts)

    def _render_return(self, node: FunctionType) -> str:
        if node.return_type is None:
            return "void"
        return self.render(node.return_type)

    def _wrap(self, node: TypeNode, *, unions: bool = True) -> str:
        """Render ``node``, parenthesised if it would bind loosely."""
        if isinstance(node, UnionType) and len(node.types) == 1:
            return self._wrap(node.types[0], unions=unions)
        text = self.render(node)
        if isinstance(node, FunctionType):
            return f"({text})"
        if unions and isinstance(node, NullableType):
            return f"({text})"
        if unions and isinstance(node, UnionType) and len(node.types) > 1:
            return f"({text})"
        return text
