"""Rendering of the params/result/query interfaces for one query."""
from dataclasses import dataclass
from typing import List

from querytypes.generators.typegen.allocator import TypeAllocator
from querytypes.generators.typegen.params import resolve_params
from querytypes.generators.typegen.types import ParsedQuery, QueryTypes
from querytypes.generators.typegen.utils import to_camel_case, to_pascal_case


@dataclass(frozen=True)
class Field:
    field_name: str
    field_type: str


@dataclass(frozen=True)
class RenderOptions:
    camel_case_column_names: bool = False


def interface_gen(interface_name: str, contents: str) -> str:
    return f"export interface {interface_name} {{\n{contents}\n}}\n\n"


def generate_interface(interface_name: str, fields: List[Field]) -> str:
    """Render an exported interface with one field per line, in the given order."""
    contents = "\n".join(f"  {f.field_name}: {f.field_type};" for f in fields)
    return interface_gen(interface_name, contents)


def generate_type_alias(type_name: str, alias: str) -> str:
    return f"export type {type_name} = {alias};\n\n"


def _comment(query_name: str, what: str) -> str:
    return f"/** '{query_name}' {what} */\n"


def result_fields(query_types: QueryTypes, types: TypeAllocator, options: RenderOptions) -> List[Field]:
    fields = []
    for row in query_types.return_types:
        type_name = types.use(row.type)
        # unknown nullability is treated as nullable
        if row.nullable is None or row.nullable:
            type_name += " | null"
        field_name = to_camel_case(row.return_name) if options.camel_case_column_names else row.return_name
        fields.append(Field(field_name, type_name))
    return fields


def query_to_type_declarations(
    parsed_query: ParsedQuery,
    query_types: QueryTypes,
    types: TypeAllocator,
    options: RenderOptions,
) -> str:
    """
    Render the three interfaces for a query.

    Args:
        parsed_query: Query as parsed from its source file; its declared name
            is PascalCased for interface names
        query_types: Resolved return rows and parameter metadata
        types: Allocator for the file being generated; receives every type used
        options: Rendering switches

    Returns:
        Params, result and query declarations, each followed by a blank line
    """
    interface_name = to_pascal_case(parsed_query.name)

    returns = result_fields(query_types, types, options)
    params = [
        Field(p.field_name, p.field_type)
        for p in resolve_params(query_types.param_metadata, types)
    ]

    param_interface_name = f"I{interface_name}Params"
    result_interface_name = f"I{interface_name}Result"

    param_types = _comment(interface_name, "parameters type") + (
        generate_interface(param_interface_name, params)
        if params
        else generate_type_alias(param_interface_name, "void")
    )
    return_types = _comment(interface_name, "return type") + (
        generate_interface(result_interface_name, returns)
        if returns
        else generate_type_alias(result_interface_name, "void")
    )
    query_pair = _comment(interface_name, "query type") + generate_interface(
        f"I{interface_name}Query",
        [
            Field("params", param_interface_name),
            Field("result", result_interface_name),
        ],
    )
    return param_types + return_types + query_pair
