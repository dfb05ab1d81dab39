"""Backend (PostgreSQL) type name to TypeScript type mapping."""
import logging
import re
from typing import Dict, Mapping, Optional

from querytypes.generators.typegen.types import TypeSpec, array_of

log = logging.getLogger(__name__)

STRING = TypeSpec("string")
NUMBER = TypeSpec("number")
BOOLEAN = TypeSpec("boolean")
DATE = TypeSpec("Date")
BYTES = TypeSpec("Buffer")
VOID = TypeSpec("undefined")
UNKNOWN = TypeSpec("unknown")

JSON = TypeSpec(
    "Json",
    definition="null | boolean | number | string | Json[] | { [key: string]: Json }",
)
POINT = TypeSpec("Point", definition="{ x: number; y: number }")

DEFAULT_TYPE_MAPPING: Dict[str, TypeSpec] = {
    # Integer types
    "int2": NUMBER,
    "int4": NUMBER,
    "int8": STRING,
    "smallint": NUMBER,
    "int": NUMBER,
    "integer": NUMBER,
    "bigint": STRING,
    # Precision types
    "real": NUMBER,
    "float4": NUMBER,
    "float": NUMBER,
    "float8": NUMBER,
    "double precision": NUMBER,
    "numeric": STRING,
    "decimal": STRING,
    "money": STRING,
    # Serial types
    "smallserial": NUMBER,
    "serial": NUMBER,
    "bigserial": STRING,
    # String types
    "uuid": STRING,
    "text": STRING,
    "varchar": STRING,
    "character varying": STRING,
    "char": STRING,
    "character": STRING,
    "bpchar": STRING,
    "citext": STRING,
    "name": STRING,
    "xml": STRING,
    "tsvector": STRING,
    "interval": STRING,
    # Bit and boolean types
    "bit": BOOLEAN,
    "bit varying": STRING,
    "bool": BOOLEAN,
    "boolean": BOOLEAN,
    # Dates and times
    "date": DATE,
    "time": DATE,
    "timetz": DATE,
    "timestamp": DATE,
    "timestamptz": DATE,
    # Network types
    "inet": STRING,
    "cidr": STRING,
    "macaddr": STRING,
    "macaddr8": STRING,
    # Structural types
    "json": JSON,
    "jsonb": JSON,
    "point": POINT,
    # Misc
    "bytea": BYTES,
    "void": VOID,
}

_MODIFIER = re.compile(r"\s*\([^)]*\)")


def normalize_type_name(backend_name: str) -> str:
    """Lower-case and drop type modifiers: ``character(3)`` -> ``character``."""
    return _MODIFIER.sub("", backend_name).strip().lower()


def parse_override(value: str) -> TypeSpec:
    """
    Parse a user override.

    ``"module#Symbol"`` imports Symbol from module, anything else is used as a
    built-in type name as-is.
    """
    if "#" in value:
        module, _, symbol = value.rpartition("#")
        return TypeSpec(name=symbol.strip(), module=module.strip())
    return TypeSpec(name=value.strip())


class TypeMapping:
    """Maps backend type names to TypeSpecs, never failing on unknown names."""

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self.mapping: Dict[str, TypeSpec] = dict(DEFAULT_TYPE_MAPPING)
        for backend_name, value in (overrides or {}).items():
            self.mapping[normalize_type_name(backend_name)] = parse_override(value)

    def lookup(self, backend_name: str) -> Optional[TypeSpec]:
        """Return the mapped spec, or None when the name is unmapped."""
        name = normalize_type_name(backend_name)
        if name in self.mapping:
            return self.mapping[name]
        if name.endswith("[]"):
            element = self.lookup(name[:-2])
            return array_of(element) if element else None
        # PostgreSQL spells array types with a leading underscore
        if name.startswith("_") and len(name) > 1:
            element = self.lookup(name[1:])
            return array_of(element) if element else None
        return None

    def get(self, backend_name: str) -> TypeSpec:
        spec = self.lookup(backend_name)
        if spec is None:
            log.warning("Type '%s' has no mapping, falling back to '%s'", backend_name, UNKNOWN.name)
            return UNKNOWN
        return spec

    def is_mapped(self, backend_name: str) -> bool:
        return self.lookup(backend_name) is not None


DefaultTypeMapping = TypeMapping()
