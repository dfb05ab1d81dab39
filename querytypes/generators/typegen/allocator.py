"""Per-file accumulator of the types referenced by generated interfaces."""
from typing import Dict, List, Union

from querytypes.core.errors import TypeConflictError
from querytypes.generators.typegen.mapping import TypeMapping
from querytypes.generators.typegen.types import TypeSpec


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def declare_string_union(name: str, values) -> str:
    union = " | ".join(_quote(v) for v in values) or "never"
    return f"export type {name} = {union};"


def declare_alias(name: str, definition: str) -> str:
    return f"export type {name} = {definition};"


def declare_import(module: str, symbols: List[str]) -> str:
    return f"import {{ {', '.join(symbols)} }} from '{module}';"


class TypeAllocator:
    """
    Collects imports and inline declarations needed by one output file.

    Create one instance per file. State only grows; render it with
    declaration() after every query in the file has been synthesized. A
    snapshot taken earlier is simply incomplete.
    """

    def __init__(self, mapping: TypeMapping):
        self.mapping = mapping
        self.used: Dict[str, TypeSpec] = {}
        self.imports: Dict[str, List[str]] = {}
        self.enums: List[str] = []
        self.aliases: List[str] = []

    def use(self, type_name: Union[str, TypeSpec]) -> str:
        """
        Register a type and return the name to reference it by.

        Backend type names go through the mapping; specs are used directly.
        Registering the same spec again is a no-op.
        """
        spec = self.mapping.get(type_name) if isinstance(type_name, str) else type_name

        if spec.is_array:
            return f"{self.use(spec.element)}[]"

        known = self.used.get(spec.name)
        if known is not None:
            if known != spec:
                raise TypeConflictError(
                    f"Type '{spec.name}' is declared twice with different definitions"
                )
            return spec.name

        self.used[spec.name] = spec
        if spec.is_import:
            self.imports.setdefault(spec.module, []).append(spec.name)
        elif spec.is_enum:
            self.enums.append(declare_string_union(spec.name, spec.enum_values))
        elif spec.is_alias:
            self.aliases.append(declare_alias(spec.name, spec.definition))
        return spec.name

    def declaration(self) -> str:
        """Render imports, then enum unions, then aliases, blank-line separated."""
        blocks = []
        if self.imports:
            blocks.append("\n".join(
                declare_import(module, symbols) for module, symbols in self.imports.items()
            ))
        blocks.extend(self.enums)
        blocks.extend(self.aliases)
        if not blocks:
            return ""
        return "\n\n".join(blocks) + "\n"
