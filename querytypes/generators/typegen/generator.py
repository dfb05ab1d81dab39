"""Assembly of one generated declaration file from its queries."""
from pathlib import Path
from typing import Callable, List

from querytypes.generators.typegen.allocator import TypeAllocator
from querytypes.generators.typegen.mapping import TypeMapping
from querytypes.generators.typegen.render import RenderOptions, query_to_type_declarations
from querytypes.generators.typegen.types import ParsedQuery, QueryTypes
from querytypes.generators.typegen.utils import output_name


def header(relative_input_path: str) -> str:
    return f'/** Types generated for queries found in "{relative_input_path}" */\n'


def output_path(input_path: Path, template: str) -> Path:
    """Expand an emit template: ``{dir}/{name}.queries.ts``."""
    return Path(template.format(dir=input_path.parent.as_posix(), name=output_name(input_path.name)))


def generate_file_declarations(
    queries: List[ParsedQuery],
    get_types: Callable[[ParsedQuery], QueryTypes],
    mapping: TypeMapping,
    options: RenderOptions,
    relative_input_path: str,
) -> str:
    """
    Render a whole declaration file.

    A fresh TypeAllocator collects the types of every query; its declaration
    is rendered once, after the last query, above the query blocks.
    """
    types = TypeAllocator(mapping)
    blocks = [
        query_to_type_declarations(query, get_types(query), types, options)
        for query in queries
    ]
    declaration = types.declaration()

    content = header(relative_input_path)
    if declaration:
        content += declaration + "\n"
    content += "".join(blocks).rstrip("\n") + "\n"
    return content
