"""Seam between type generation and the query parser/type resolver."""
from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, List, Protocol

from querytypes.generators.typegen.types import ParsedQuery, ProcessingMode, QueryTypes

if TYPE_CHECKING:
    from querytypes.schemas.config import ParsedConfig, TransformConfig

__all__ = ["ParsedQuery", "ProcessingMode", "QuerySource", "load_source"]


class QuerySource(Protocol):
    """
    Parses queries out of a source file and resolves their types.

    One instance lives in each worker process, so anything it holds (a
    database connection, a cache) is private to that worker.
    """

    def parse(self, path: str, contents: str, transform: TransformConfig) -> List[ParsedQuery]:
        ...

    def get_types(self, query: ParsedQuery) -> QueryTypes:
        """Resolve one parsed query. Raises UpstreamResolutionError on failure."""
        ...

    def close(self) -> None:
        ...


def load_source(dotted_path: str, config: ParsedConfig) -> QuerySource:
    """Import ``module:attribute`` and call it with the config to build a source."""
    module_name, _, attribute = dotted_path.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Query source must look like 'module:attribute', got '{dotted_path}'")
    factory = getattr(importlib.import_module(module_name), attribute)
    return factory(config)
