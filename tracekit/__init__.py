from __future__ import annotations
from .field import FieldAnimator
from .host import TaskHost
from .loop import AnimationLoop
from .surface import PillowSurface, RenderSurface
from .task import (
    TraceEngine,
    TargetSequencer,
    PointerEvent,
    compute_stats,
    save_export,
    set_export_callback,
)

__all__ = [
    "TraceEngine",
    "TargetSequencer",
    "FieldAnimator",
    "PointerEvent",
    "TaskHost",
    "AnimationLoop",
    "RenderSurface",
    "PillowSurface",
    "compute_stats",
    "save_export",
    "set_export_callback",
]
