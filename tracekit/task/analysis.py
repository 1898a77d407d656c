from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .telemetry import RunSnapshot, SamplePoint

END_LABEL = "End"


@dataclass(frozen=True)
class SegmentStats:
    """Summary of one committed stroke.

    Attributes:
        segment (str): "<from label> → <to label>", with "End" after the last target.
        points (int): Number of samples in the stroke.
        distance (float): Cumulative path length in pixels.
        duration (float): Last minus first timestamp, in milliseconds.
        avg_velocity (float): distance / seconds; NaN when duration is 0.
    """

    segment: str
    points: int
    distance: float
    duration: float
    avg_velocity: float

    def to_dict(self) -> dict:
        return {
            "segment": self.segment,
            "points": self.points,
            "distance": self.distance,
            "duration": self.duration,
            "avgVelocity": self.avg_velocity,
        }


def path_length(stroke: Sequence[SamplePoint]) -> float:
    """Sum of Euclidean distances between consecutive samples."""
    return sum(
        math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(stroke, stroke[1:])
    )


def average_velocity(distance_px: float, duration_ms: float) -> float:
    """Pixels per second; NaN instead of dividing by a zero duration."""
    if duration_ms <= 0:
        return math.nan
    return distance_px / (duration_ms / 1000.0)


def compute_stats(
    committed_strokes: Sequence[Sequence[SamplePoint]], targets: Sequence
) -> Optional[List[SegmentStats]]:
    """Per-segment statistics, or None when nothing has been committed."""
    if not committed_strokes:
        return None

    stats: List[SegmentStats] = []
    for idx, stroke in enumerate(committed_strokes):
        if not stroke:
            continue
        dist = path_length(stroke)
        duration = stroke[-1].timestamp - stroke[0].timestamp
        src = targets[idx].label if idx < len(targets) else "?"
        dst = targets[idx + 1].label if idx + 1 < len(targets) else END_LABEL
        stats.append(
            SegmentStats(
                segment=f"{src} → {dst}",
                points=len(stroke),
                distance=dist,
                duration=duration,
                avg_velocity=average_velocity(dist, duration),
            )
        )
    return stats


def summarize_stats(snapshot: RunSnapshot) -> str:
    """Text table of segment statistics for a run."""
    stats = compute_stats(snapshot.committed_strokes, snapshot.targets)
    if not stats:
        return "No trajectory data"
    lines = ["Segment | Points | Distance (px) | Duration (ms) | Avg Velocity (px/s)"]
    for s in stats:
        velocity = "n/a" if math.isnan(s.avg_velocity) else f"{s.avg_velocity:.2f}"
        lines.append(
            f"{s.segment} | {s.points} | {s.distance:.2f} | {s.duration:.0f} | {velocity}"
        )
    return "\n".join(lines)


def data_preview(snapshot: RunSnapshot) -> Dict[str, object]:
    """Compact overview of the recorded data (difficulty, counts, first sample)."""
    strokes = snapshot.committed_strokes
    first = strokes[0][0].to_dict() if strokes and strokes[0] else None
    return {
        "difficulty": snapshot.difficulty.value,
        "numSegments": len(strokes),
        "totalPoints": sum(len(s) for s in strokes),
        "samplePoint": first,
    }


def instantaneous_speeds(stroke: Sequence[SamplePoint]) -> List[float]:
    """Per-step speed in px/ms; steps with no elapsed time are skipped."""
    speeds: List[float] = []
    for a, b in zip(stroke, stroke[1:]):
        dt_ms = b.timestamp - a.timestamp
        if dt_ms <= 0:
            continue
        speeds.append(math.hypot(b.x - a.x, b.y - a.y) / dt_ms)
    return speeds


def quantiles_of(values: Sequence[float], fractions: Sequence[float]) -> Dict[float, float]:
    """Linearly interpolated quantiles of values, one sort for all fractions."""
    ordered = sorted(values)
    if not ordered:
        raise ValueError("no values")
    last = len(ordered) - 1
    result: Dict[float, float] = {}
    for q in fractions:
        if not 0.0 <= q <= 1.0:
            raise ValueError(f"quantile {q!r} outside [0, 1]")
        pos = q * last
        lo = int(pos)
        hi = min(lo + 1, last)
        result[q] = ordered[lo] + (ordered[hi] - ordered[lo]) * (pos - lo)
    return result


def speed_quantiles(
    snapshot: RunSnapshot, quantiles: Sequence[float] = (0.5, 0.95, 0.99)
) -> Optional[Dict[float, float]]:
    """Quantiles of instantaneous speed (px/ms) across all committed strokes."""
    speeds: List[float] = []
    for stroke in snapshot.committed_strokes:
        speeds.extend(instantaneous_speeds(stroke))
    if not speeds:
        return None
    return quantiles_of(speeds, quantiles)
