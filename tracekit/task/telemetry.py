from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path as FSPath
from typing import Callable, List, Optional, Tuple
import logging

from .targets import Difficulty, Target

ExportCallback = Optional[Callable[[FSPath], None]]
_EXPORT_CALLBACK: ExportCallback = None

POINTER_KINDS = ("down", "move", "up", "leave")


def set_export_callback(cb: ExportCallback) -> None:
    """Register a callback invoked whenever an export document is saved."""
    global _EXPORT_CALLBACK
    _EXPORT_CALLBACK = cb
    logging.getLogger(__name__).info(
        "Export callback %s", "registered" if cb else "cleared"
    )


def get_export_callback() -> ExportCallback:
    return _EXPORT_CALLBACK


@dataclass(frozen=True)
class PointerEvent:
    """One pointer sample delivered by the host, in viewport-local pixels.

    Attributes:
        kind (str): One of "down", "move", "up", "leave".
        x (float): X coordinate.
        y (float): Y coordinate.
        t (float | None): Host timestamp in milliseconds; None means "use the
            consumer's own clock".
    """

    kind: str
    x: float
    y: float
    t: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind not in POINTER_KINDS:
            raise ValueError(f"Unknown pointer event kind {self.kind!r}")


@dataclass(frozen=True)
class SamplePoint:
    """A recorded pointer position, stamped relative to the run start (ms)."""

    x: float
    y: float
    timestamp: float
    target_index: int

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "timestamp": self.timestamp,
            "targetIndex": self.target_index,
        }


Stroke = List[SamplePoint]


@dataclass
class RunState:
    """Mutable state of one run. Replaced wholesale on reset, never repaired."""

    targets: List[Target]
    difficulty: Difficulty
    current_index: int = 0
    active_stroke: Stroke = field(default_factory=list)
    committed_strokes: List[Stroke] = field(default_factory=list)
    is_drawing: bool = False
    is_completed: bool = False
    start_time: Optional[float] = None  # host clock (ms) of the first accepted down


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only copy of a RunState handed to renderers, statistics and export."""

    targets: Tuple[Target, ...]
    difficulty: Difficulty
    radius: float
    current_index: int
    active_stroke: Tuple[SamplePoint, ...]
    committed_strokes: Tuple[Tuple[SamplePoint, ...], ...]
    is_drawing: bool
    is_completed: bool
    started: bool

    @property
    def reached_count(self) -> int:
        """Number of targets the pointer has reached so far in this run."""
        if not self.started:
            return 0
        return self.current_index + 1

    @classmethod
    def of(cls, state: RunState, radius: float) -> "RunSnapshot":
        return cls(
            targets=tuple(state.targets),
            difficulty=state.difficulty,
            radius=radius,
            current_index=state.current_index,
            active_stroke=tuple(state.active_stroke),
            committed_strokes=tuple(tuple(s) for s in state.committed_strokes),
            is_drawing=state.is_drawing,
            is_completed=state.is_completed,
            started=state.start_time is not None,
        )
