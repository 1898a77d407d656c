from __future__ import annotations
import math
import random
from typing import List, Optional, Sequence, Tuple

from .config import cfg
from .targets import Target
from .telemetry import PointerEvent


def windmouse(
    start: Tuple[float, float],
    target: Tuple[float, float],
    *,
    rng: Optional[random.Random] = None,
    wind: float = cfg.WIND,
    gravity: float = cfg.GRAVITY,
    min_step: float = cfg.MIN_STEP,
    max_step: float = cfg.MAX_STEP,
    target_area: float = cfg.TARGET_AREA,
    jitter: float = cfg.JITTER,
) -> List[Tuple[float, float]]:
    """WindMouse path from start to target; the last point is exactly target."""
    rng = rng or random.Random()
    sx, sy = float(start[0]), float(start[1])
    tx, ty = float(target[0]), float(target[1])

    vx = vy = 0.0
    wind_x = wind_y = 0.0
    path: List[Tuple[float, float]] = []
    last_dist = math.hypot(tx - sx, ty - sy)
    max_iters = 2000

    for i in range(max_iters):
        dist = math.hypot(tx - sx, ty - sy)
        if dist < 1.0:
            break
        if i > 25 and dist >= last_dist:
            break

        wind_mag = min(wind, dist)
        if dist >= target_area:
            wind_x = wind_x / math.sqrt(3) + (
                rng.random() * wind_mag * 2 - wind_mag
            ) / math.sqrt(5)
            wind_y = wind_y / math.sqrt(3) + (
                rng.random() * wind_mag * 2 - wind_mag
            ) / math.sqrt(5)
        else:
            wind_x /= math.sqrt(3)
            wind_y /= math.sqrt(3)

        vx += wind_x + gravity * (tx - sx) / max(dist, 1e-6)
        vy += wind_y + gravity * (ty - sy) / max(dist, 1e-6)

        speed = math.hypot(vx, vy)
        if speed > max_step:
            scale = max_step / speed
            vx *= scale
            vy *= scale
        elif speed < min_step and speed > 0:
            scale = min_step / speed
            vx *= scale
            vy *= scale

        sx += vx
        sy += vy
        path.append((sx + rng.uniform(-jitter, jitter), sy + rng.uniform(-jitter, jitter)))
        last_dist = dist

    if not path or path[-1] != (tx, ty):
        path.append((tx, ty))
    return path


def synthesize_trace(
    targets: Sequence[Target],
    *,
    rng: Optional[random.Random] = None,
    start_ms: float = 0.0,
    release: bool = True,
) -> List[PointerEvent]:
    """A human-looking drag through all targets as a down/move.../up event stream.

    Each segment gets its own average speed from AVG_SPEED_RANGE_PX_S;
    samples are spaced by travelled distance at that speed, capped at
    SAMPLE_INTERVAL_MS.
    """
    rng = rng or random.Random()
    if not targets:
        return []

    t = float(start_ms)
    first = targets[0]
    events = [PointerEvent("down", first.x, first.y, t)]
    x, y = first.x, first.y
    for target in targets[1:]:
        speed_px_ms = rng.uniform(*cfg.AVG_SPEED_RANGE_PX_S) / 1000.0
        for px, py in windmouse((x, y), (target.x, target.y), rng=rng):
            step = math.hypot(px - x, py - y)
            t += min(cfg.SAMPLE_INTERVAL_MS, max(1.0, step / speed_px_ms))
            events.append(PointerEvent("move", px, py, t))
            x, y = px, py
    if release:
        events.append(PointerEvent("up", x, y, t + cfg.SAMPLE_INTERVAL_MS))
    return events
