"""Per-file work executed inside a worker process."""
from __future__ import annotations

import logging
import os
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from querytypes.core.errors import (
    AmbiguousTransformError,
    SourceFileError,
    TypeConflictError,
    UpstreamResolutionError,
)
from querytypes.core.workflow import FailureKind, WorkFailure, WorkOutcome, WorkResult
from querytypes.generators.typegen import RenderOptions, TypeMapping, generate_file_declarations, output_path
from querytypes.generators.typegen.writer import write_if_changed
from querytypes.schemas.config import ParsedConfig, TransformConfig
from querytypes.sources.base import QuerySource, load_source

log = logging.getLogger(__name__)

FAILURE_KINDS = (
    (AmbiguousTransformError, FailureKind.AMBIGUOUS_TRANSFORM),
    (TypeConflictError, FailureKind.TYPE_CONFLICT),
    (UpstreamResolutionError, FailureKind.UPSTREAM_RESOLUTION),
    (SourceFileError, FailureKind.IO),
)


@dataclass
class WorkerState:
    config: ParsedConfig
    mapping: TypeMapping
    source: QuerySource


_state: Optional[WorkerState] = None


def init_worker(config: ParsedConfig) -> None:
    """Build this worker's mapping and query source. Runs once per worker process."""
    global _state
    if _state is not None:
        _state.source.close()
    _state = WorkerState(
        config=config,
        mapping=TypeMapping(config.types_overrides),
        source=load_source(config.source, config),
    )


def ensure_worker(config: ParsedConfig) -> WorkerState:
    if _state is None or _state.config != config:
        init_worker(config)
    return _state


def get_state() -> WorkerState:
    if _state is None:
        raise RuntimeError("Worker used before init_worker()")
    return _state


def generate_for_file(path: str, transform: TransformConfig, state: WorkerState) -> WorkResult:
    input_path = Path(path)
    try:
        contents = input_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SourceFileError(path, e) from e

    out_path = output_path(input_path, transform.output_template)
    relative_output = os.path.relpath(out_path)

    queries = state.source.parse(path, contents, transform)
    if not queries:
        log.debug("No queries found", extra={"transform": transform.include, "file": path})
        return WorkResult(path, relative_output, 0, False)

    content = generate_file_declarations(
        queries,
        state.source.get_types,
        state.mapping,
        RenderOptions(camel_case_column_names=state.config.camel_case_for(transform)),
        os.path.relpath(input_path),
    )
    written = write_if_changed(out_path, content)
    return WorkResult(path, relative_output, len(queries), written)


def process_file(path: str, transform: TransformConfig) -> WorkOutcome:
    """
    Generate the declaration file for one input file.

    Never raises: every error becomes a WorkFailure so one bad file cannot
    take down the worker or its sibling jobs.
    """
    try:
        return generate_for_file(path, transform, get_state())
    except Exception as e:
        for error_type, kind in FAILURE_KINDS:
            if isinstance(e, error_type):
                return WorkFailure(path, kind, str(e))
        return WorkFailure(path, FailureKind.INTERNAL, f"{type(e).__name__}: {e}", traceback.format_exc())
