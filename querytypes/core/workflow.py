from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Tuple, Union

if TYPE_CHECKING:
    from querytypes.schemas.config import TransformConfig


class FileState(str, Enum):
    IDLE = "IDLE"
    QUEUED = "QUEUED"
    PROCESSING = "PROCESSING"


class FailureKind(str, Enum):
    AMBIGUOUS_TRANSFORM = "ambiguous-transform"
    TYPE_CONFLICT = "type-conflict"
    UPSTREAM_RESOLUTION = "upstream-resolution"
    IO = "io"
    INTERNAL = "internal"


@dataclass(frozen=True)
class TransformJob:
    files: Tuple[str, ...]
    transform: "TransformConfig"
    transform_index: int = 0


@dataclass(frozen=True)
class WorkResult:
    path: str
    relative_path: str
    type_declaration_count: int
    written: bool

    ok = True


@dataclass(frozen=True)
class WorkFailure:
    path: str
    kind: FailureKind
    message: str
    detail: str = ""

    ok = False


WorkOutcome = Union[WorkResult, WorkFailure]


def outcome_to_dict(outcome: WorkOutcome) -> Dict[str, object]:
    """Serialize an outcome for transports that only carry JSON."""
    if isinstance(outcome, WorkResult):
        return {
            "ok": True,
            "path": outcome.path,
            "relative_path": outcome.relative_path,
            "type_declaration_count": outcome.type_declaration_count,
            "written": outcome.written,
        }
    return {
        "ok": False,
        "path": outcome.path,
        "kind": outcome.kind.value,
        "message": outcome.message,
        "detail": outcome.detail,
    }


def outcome_from_dict(data: Dict[str, object]) -> WorkOutcome:
    if data["ok"]:
        return WorkResult(
            path=str(data["path"]),
            relative_path=str(data["relative_path"]),
            type_declaration_count=int(data["type_declaration_count"]),
            written=bool(data["written"]),
        )
    return WorkFailure(
        path=str(data["path"]),
        kind=FailureKind(data["kind"]),
        message=str(data["message"]),
        detail=str(data.get("detail", "")),
    )


@dataclass
class JobTracker:
    """Per (transform, path) lifecycle: idle -> queued -> processing -> idle."""
    states: Dict[Tuple[int, str], FileState] = field(default_factory=dict)
    outstanding: Counter = field(default_factory=Counter)

    def state(self, transform_index: int, path: str) -> FileState:
        return self.states.get((transform_index, path), FileState.IDLE)

    def queued(self, transform_index: int, path: str) -> None:
        key = (transform_index, path)
        self.outstanding[key] += 1
        if self.states.get(key) != FileState.PROCESSING:
            self.states[key] = FileState.QUEUED

    def processing(self, transform_index: int, path: str) -> None:
        self.states[(transform_index, path)] = FileState.PROCESSING

    def settled(self, transform_index: int, path: str) -> None:
        key = (transform_index, path)
        self.outstanding[key] -= 1
        if self.outstanding[key] <= 0:
            del self.outstanding[key]
            self.states[key] = FileState.IDLE
