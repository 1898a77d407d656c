from .analysis import SegmentStats, compute_stats, summarize_stats, data_preview
from .engine import TraceEngine
from .export import build_export, save_export, load_export
from .render import render_run, save_trajectory_image
from .targets import Difficulty, Target, TargetSequencer, label_for
from .telemetry import PointerEvent, SamplePoint, set_export_callback

__all__ = [
    "TraceEngine",
    "TargetSequencer",
    "Target",
    "Difficulty",
    "label_for",
    "PointerEvent",
    "SamplePoint",
    "SegmentStats",
    "compute_stats",
    "summarize_stats",
    "data_preview",
    "build_export",
    "save_export",
    "load_export",
    "render_run",
    "save_trajectory_image",
    "set_export_callback",
]
