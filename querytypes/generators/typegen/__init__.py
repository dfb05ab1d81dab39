from querytypes.generators.typegen.allocator import TypeAllocator
from querytypes.generators.typegen.generator import generate_file_declarations, output_path
from querytypes.generators.typegen.mapping import DefaultTypeMapping, TypeMapping
from querytypes.generators.typegen.render import RenderOptions, generate_interface, query_to_type_declarations

__all__ = [
    "DefaultTypeMapping",
    "RenderOptions",
    "TypeAllocator",
    "TypeMapping",
    "generate_file_declarations",
    "generate_interface",
    "output_path",
    "query_to_type_declarations",
]
