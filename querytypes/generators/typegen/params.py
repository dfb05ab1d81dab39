"""Resolution of parameter transform trees into typed interface fields."""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Sequence

from querytypes.core.errors import AmbiguousTransformError, UpstreamResolutionError
from querytypes.generators.typegen.allocator import TypeAllocator
from querytypes.generators.typegen.types import (
    ParamMetadata,
    ParamTransformNode,
    PickParam,
    ScalarParam,
    ScalarSpreadParam,
    SpreadParam,
)


class Optionality(str, Enum):
    REQUIRED = "required"
    # present, explicitly null, or omitted: rendered as "T | null | void"
    NULLABLE_OMITTABLE = "nullable-omittable"


OPTIONAL_SUFFIX = " | null | void"


@dataclass(frozen=True)
class ParamField:
    field_name: str
    language_type: str
    optionality: Optionality

    @property
    def field_type(self) -> str:
        if self.optionality is Optionality.NULLABLE_OMITTABLE:
            return self.language_type + OPTIONAL_SUFFIX
        return self.language_type


class ParamResolver:
    """Walks mapping roots in order and emits one field per root."""

    def __init__(self, metadata: ParamMetadata, types: TypeAllocator):
        self.params: Sequence[str] = metadata.params
        self.mapping = metadata.mapping
        self.types = types
        self._visitors: Dict[type, Callable[[ParamTransformNode], ParamField]] = {
            ScalarParam: self._scalar,
            ScalarSpreadParam: self._scalar_spread,
            PickParam: self._pick,
            SpreadParam: self._spread,
        }

    def resolve(self) -> List[ParamField]:
        fields: List[ParamField] = []
        seen = set()
        for node in self.mapping:
            field = self.visit(node)
            if field.field_name in seen:
                raise AmbiguousTransformError(
                    f"Parameter '{field.field_name}' is bound by more than one transform"
                )
            seen.add(field.field_name)
            fields.append(field)
        return fields

    def visit(self, node: ParamTransformNode) -> ParamField:
        visitor = self._visitors.get(type(node))
        if visitor is None:
            raise UpstreamResolutionError(f"Unhandled parameter transform: {node!r}")
        return visitor(node)

    def _backend_type(self, name: str, assigned_index: int) -> str:
        if not 1 <= assigned_index <= len(self.params):
            raise UpstreamResolutionError(
                f"Parameter '{name}' refers to ${assigned_index} "
                f"but the query has {len(self.params)} parameters"
            )
        return self.params[assigned_index - 1]

    def _scalar(self, node: ScalarParam) -> ParamField:
        language_type = self.types.use(self._backend_type(node.name, node.assigned_index))
        return ParamField(node.name, language_type, Optionality.NULLABLE_OMITTABLE)

    def _scalar_spread(self, node: ScalarSpreadParam) -> ParamField:
        inner = self._scalar(ScalarParam(node.name, node.assigned_index))
        return ParamField(node.name, f"readonly ({inner.field_type})[]", Optionality.REQUIRED)

    def _shape(self, children: Mapping[str, ScalarParam]) -> str:
        lines = [
            f"    {key}: {self._scalar(child).field_type}"
            for key, child in children.items()
        ]
        return "{\n" + ",\n".join(lines) + "\n  }"

    def _pick(self, node: PickParam) -> ParamField:
        return ParamField(node.name, self._shape(node.dict), Optionality.REQUIRED)

    def _spread(self, node: SpreadParam) -> ParamField:
        return ParamField(node.name, f"readonly ({self._shape(node.dict)})[]", Optionality.REQUIRED)


def resolve_params(metadata: ParamMetadata, types: TypeAllocator) -> List[ParamField]:
    """Resolve a query's parameter metadata into ordered interface fields."""
    return ParamResolver(metadata, types).resolve()
