from __future__ import annotations
import logging
from pathlib import Path as FSPath
from typing import Tuple, Union

from PIL import Image, ImageDraw

from ..surface import RenderSurface
from ..utils import clamp
from .analysis import instantaneous_speeds, quantiles_of
from .config import cfg
from .telemetry import RunSnapshot

logger = logging.getLogger(__name__)


def render_run(
    surface: RenderSurface,
    snapshot: RunSnapshot,
    width: float = cfg.CANVAS_WIDTH,
    height: float = cfg.CANVAS_HEIGHT,
    padding: float = cfg.DOT_RADIUS + cfg.PADDING_MARGIN_PX,
) -> None:
    """Paint one frame of the task from a snapshot; reads nothing else."""
    surface.clear(width, height)

    if cfg.DRAW_BOUNDARY:
        surface.draw_dashed_rect(
            padding,
            padding,
            width - 2 * padding,
            height - 2 * padding,
            cfg.BOUNDARY_DASH,
            cfg.BOUNDARY_COLOR,
            cfg.BOUNDARY_WIDTH,
        )

    for stroke in snapshot.committed_strokes:
        if len(stroke) > 1:
            surface.draw_polyline(
                [(p.x, p.y) for p in stroke], cfg.STROKE_COLOR, cfg.STROKE_WIDTH
            )
    if len(snapshot.active_stroke) > 1:
        surface.draw_polyline(
            [(p.x, p.y) for p in snapshot.active_stroke],
            cfg.STROKE_COLOR,
            cfg.STROKE_WIDTH,
        )

    reached = snapshot.reached_count
    for target in snapshot.targets:
        done = target.index < reached
        surface.draw_disc(
            target.x,
            target.y,
            snapshot.radius,
            cfg.REACHED_FILL if done else cfg.TARGET_FILL,
            cfg.REACHED_OUTLINE if done else cfg.TARGET_OUTLINE,
            cfg.TARGET_OUTLINE_WIDTH,
        )
        surface.draw_label(
            target.label,
            target.x,
            target.y,
            cfg.LABEL_FONT,
            cfg.REACHED_LABEL_COLOR if done else cfg.LABEL_COLOR,
        )


def _speed_to_rgb(speed, v_min, v_max):
    """
    Map speed to RGB:
      - slow  => blue (0, 120, 255)
      - mid   => green (60, 205, 60)
      - fast  => red  (255, 60, 60)
    """
    if v_max <= v_min:
        t = 0.0
    else:
        t = (speed - v_min) / (v_max - v_min)
    t = max(0.0, min(1.0, t))

    if t <= 0.5:
        u = t / 0.5
        c0, c1 = (0, 120, 255), (60, 205, 60)
    else:
        u = (t - 0.5) / 0.5
        c0, c1 = (60, 205, 60), (255, 60, 60)
    return tuple(int(a + (b - a) * u) for a, b in zip(c0, c1))


def save_trajectory_image(
    snapshot: RunSnapshot,
    outfile: Union[str, FSPath] = "trajectory.jpg",
    *,
    width: int = cfg.CANVAS_WIDTH,
    height: int = cfg.CANVAS_HEIGHT,
    background_color: Tuple[int, int, int] = (12, 12, 14),
    point_radius: int = 3,
    annotate: bool = True,
) -> FSPath:
    """
    Render the committed strokes of a run, colouring each sample by its
    instantaneous speed (px/ms), with target outlines and a summary line.
    """
    image = Image.new("RGB", (int(width), int(height)), background_color)
    draw = ImageDraw.Draw(image)

    for target in snapshot.targets:
        r = snapshot.radius
        draw.ellipse(
            [target.x - r, target.y - r, target.x + r, target.y + r],
            outline=(120, 120, 130),
            width=2,
        )
        draw.text((target.x - 4, target.y - 6), target.label, fill=(200, 200, 200))

    v_min = cfg.MIN_SPEED_PX_PER_MS
    v_max = cfg.MAX_SPEED_PX_PER_MS
    all_speeds = []
    for stroke in snapshot.committed_strokes:
        speeds = instantaneous_speeds(stroke)
        all_speeds.extend(speeds)
        moving = [
            b for a, b in zip(stroke, stroke[1:]) if b.timestamp - a.timestamp > 0
        ]
        for p, speed in zip(moving, speeds):
            color = _speed_to_rgb(speed, v_min, v_max)
            px = clamp(p.x, 0.0, width - 1.0)
            py = clamp(p.y, 0.0, height - 1.0)
            draw.ellipse(
                [
                    px - point_radius,
                    py - point_radius,
                    px + point_radius,
                    py + point_radius,
                ],
                fill=color,
            )

    if annotate:
        if all_speeds:
            q = quantiles_of(all_speeds, (0.5, 0.95))
            summary = (
                f"Points: {len(all_speeds)} | Speed px/ms min {min(all_speeds):.3f} | "
                f"p50 {q[0.5]:.3f} | p95 {q[0.95]:.3f} | max {max(all_speeds):.3f}"
            )
        else:
            summary = "No trajectory data"
        draw.text((10, height - 20), summary, fill=(200, 200, 200))

    path = FSPath(outfile)
    if path.suffix.lower() in (".jpg", ".jpeg"):
        image.save(path, format="JPEG", quality=92, optimize=True)
    else:
        image.save(path)
    logger.debug("Trajectory image saved to %s", path)
    return path
