"""Dataclasses for query type generation."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from querytypes.core.errors import UpstreamResolutionError


@dataclass(frozen=True)
class TypeSpec:
    """
    A language-level type referenced by generated declarations.

    Identity is the name. At most one of enum_values, module, definition and
    element is set:
      - enum_values: string-literal union declared inline
      - module: symbol imported from another module
      - definition: structural alias declared inline
      - element: array of the element type (name is "<element>[]")
    A spec with none of them is a built-in type that needs no declaration.
    """
    name: str
    enum_values: Optional[Tuple[str, ...]] = None
    module: Optional[str] = None
    definition: Optional[str] = None
    element: Optional["TypeSpec"] = None

    @property
    def is_enum(self) -> bool:
        return self.enum_values is not None

    @property
    def is_import(self) -> bool:
        return self.module is not None

    @property
    def is_alias(self) -> bool:
        return self.definition is not None

    @property
    def is_array(self) -> bool:
        return self.element is not None


def array_of(element: TypeSpec) -> TypeSpec:
    return TypeSpec(name=f"{element.name}[]", element=element)


@dataclass(frozen=True)
class ReturnTypeRow:
    """One result column. A missing nullable flag means nullable."""
    return_name: str
    column_name: str
    type: Union[str, TypeSpec]
    nullable: Optional[bool] = None


class ParamTransform(str, Enum):
    SCALAR = "scalar"
    PICK = "pick"
    SPREAD = "spread"
    SCALAR_SPREAD = "scalar_spread"


@dataclass(frozen=True)
class ScalarParam:
    name: str
    assigned_index: int

    kind = ParamTransform.SCALAR


@dataclass(frozen=True)
class ScalarSpreadParam:
    """Array of scalars bound from one argument, e.g. ``:ids -> (...)``."""
    name: str
    assigned_index: int

    kind = ParamTransform.SCALAR_SPREAD


@dataclass(frozen=True)
class PickParam:
    """One object argument whose keys each bind a scalar parameter."""
    name: str
    dict: Mapping[str, ScalarParam]

    kind = ParamTransform.PICK


@dataclass(frozen=True)
class SpreadParam:
    """Array of objects, each shaped like a PickParam."""
    name: str
    dict: Mapping[str, ScalarParam]

    kind = ParamTransform.SPREAD


ParamTransformNode = Union[ScalarParam, ScalarSpreadParam, PickParam, SpreadParam]


@dataclass(frozen=True)
class ParamMetadata:
    params: Tuple[str, ...] = ()
    mapping: Tuple[ParamTransformNode, ...] = ()


@dataclass(frozen=True)
class QueryTypes:
    return_types: Tuple[ReturnTypeRow, ...] = ()
    param_metadata: ParamMetadata = field(default_factory=ParamMetadata)


def parse_type_spec(data: Any) -> Union[str, TypeSpec]:
    """Parse a return row type: a backend type name or a spec mapping."""
    if isinstance(data, str):
        return data
    if not isinstance(data, dict) or "name" not in data:
        raise UpstreamResolutionError(f"Invalid type descriptor: {data!r}")
    enum_values = data.get("enumValues")
    element = data.get("element")
    return TypeSpec(
        name=data["name"],
        enum_values=tuple(enum_values) if enum_values is not None else None,
        module=data.get("from"),
        definition=data.get("definition"),
        element=parse_type_spec(element) if isinstance(element, dict) else None,
    )


def _parse_scalar(name: str, data: Dict[str, Any]) -> ScalarParam:
    if "assignedIndex" not in data:
        raise UpstreamResolutionError(f"Parameter '{name}' has no assignedIndex")
    return ScalarParam(name=data.get("name", name), assigned_index=int(data["assignedIndex"]))


def parse_param_node(data: Dict[str, Any]) -> ParamTransformNode:
    """Parse one node of a param transform tree from its serialized form."""
    name = data.get("name")
    if not name:
        raise UpstreamResolutionError(f"Parameter transform without a name: {data!r}")
    try:
        kind = ParamTransform(str(data.get("type", "")).lower())
    except ValueError:
        raise UpstreamResolutionError(
            f"Unknown parameter transform '{data.get('type')}' for '{name}'"
        ) from None

    if kind is ParamTransform.SCALAR:
        return _parse_scalar(name, data)
    if kind is ParamTransform.SCALAR_SPREAD:
        scalar = _parse_scalar(name, data)
        return ScalarSpreadParam(name=scalar.name, assigned_index=scalar.assigned_index)

    children = data.get("dict")
    if not isinstance(children, dict):
        raise UpstreamResolutionError(f"Parameter '{name}' has no dict of fields")
    parsed = {key: _parse_scalar(key, value) for key, value in children.items()}
    if kind is ParamTransform.PICK:
        return PickParam(name=name, dict=parsed)
    return SpreadParam(name=name, dict=parsed)


def parse_query_types(data: Dict[str, Any]) -> QueryTypes:
    """Build QueryTypes from the camelCase descriptor produced upstream."""
    rows: List[ReturnTypeRow] = []
    for row in data.get("returnTypes", []):
        try:
            rows.append(ReturnTypeRow(
                return_name=row["returnName"],
                column_name=row.get("columnName", row["returnName"]),
                type=parse_type_spec(row["type"]),
                nullable=row.get("nullable"),
            ))
        except KeyError as e:
            raise UpstreamResolutionError(f"Return type is missing {e}: {row!r}") from None

    metadata = data.get("paramMetadata", {})
    return QueryTypes(
        return_types=tuple(rows),
        param_metadata=ParamMetadata(
            params=tuple(metadata.get("params", [])),
            mapping=tuple(parse_param_node(node) for node in metadata.get("mapping", [])),
        ),
    )


class ProcessingMode(str, Enum):
    SQL = "sql-file"
    TS = "query-file"


@dataclass(frozen=True)
class ParsedQuery:
    """
    A query found in a source file, as handed over by the parser.

    name is the declared name (``@name`` annotation in SQL files, the variable
    name in TS files). placeholders lists parameter occurrences in query order.
    """
    mode: ProcessingMode
    name: str
    file_path: str
    location: int = 0
    text: str = ""
    placeholders: Tuple[str, ...] = ()
