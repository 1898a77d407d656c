from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from ..surface import RenderSurface
from .config import fcfg

logger = logging.getLogger(__name__)


@dataclass
class GridPoint:
    """One dot of the background field.

    rest is the layout position, target is where the pointer currently pushes
    it, current is where it is drawn, and last_drawn is what was painted last.
    """

    rest_x: float
    rest_y: float
    target_x: float
    target_y: float
    current_x: float
    current_y: float
    last_drawn_x: float
    last_drawn_y: float
    active: bool = False

    @classmethod
    def at_rest(cls, x: float, y: float) -> "GridPoint":
        return cls(x, y, x, y, x, y, x, y)

    @property
    def at_home(self) -> bool:
        return self.target_x == self.rest_x and self.target_y == self.rest_y


def build_grid(width: float, height: float, spacing: float) -> List[GridPoint]:
    """Dots every `spacing` px, one extra row/column past each far edge."""
    if spacing <= 0:
        raise ValueError("spacing must be positive")
    cols = math.ceil(width / spacing) + 2
    rows = math.ceil(height / spacing) + 2
    return [
        GridPoint.at_rest(i * spacing, j * spacing)
        for i in range(cols)
        for j in range(rows)
    ]


class FieldAnimator:
    """Dots that shy away from the pointer and ease back home.

    Only dots in the active set are eased each tick, influence is only
    recomputed once the input has moved past MOVE_THRESHOLD_PX, and the
    whole field is repainted only when some dot moved visibly or is still
    settling.
    """

    def __init__(
        self,
        width: float = 0,
        height: float = 0,
        *,
        spacing: float = fcfg.DOT_SPACING,
        max_distance: float = fcfg.MAX_DISTANCE,
        strength: float = fcfg.STRENGTH,
        easing: float = fcfg.EASING,
        move_threshold: float = fcfg.MOVE_THRESHOLD_PX,
        redraw_threshold: float = fcfg.REDRAW_THRESHOLD_PX,
        epsilon: float = fcfg.SETTLE_EPSILON_PX,
        dot_radius: float = fcfg.DOT_RADIUS,
        dot_color: str = fcfg.DOT_COLOR,
        points: Optional[Iterable[GridPoint]] = None,
    ):
        if max_distance <= 0:
            raise ValueError("max_distance must be positive")
        if not 0 < easing <= 1:
            raise ValueError("easing must be in (0, 1]")
        if min(move_threshold, redraw_threshold) < 0 or epsilon <= 0:
            raise ValueError("thresholds must be >= 0 and epsilon > 0")
        self.width = width
        self.height = height
        self.spacing = spacing
        self.max_distance = float(max_distance)
        self.strength = float(strength)
        self.easing = float(easing)
        self.move_threshold = float(move_threshold)
        self.redraw_threshold = float(redraw_threshold)
        self.epsilon = float(epsilon)
        self.dot_radius = dot_radius
        self.dot_color = dot_color

        self.input: Tuple[float, float] = fcfg.OFFSCREEN
        self.ticks = 0
        self.paints = 0
        self._load(list(points) if points is not None else build_grid(width, height, spacing))

    @classmethod
    def from_positions(
        cls, positions: Iterable[Tuple[float, float]], width: float, height: float, **kwargs
    ) -> "FieldAnimator":
        """Animator over explicit rest positions instead of a regular grid."""
        points = [GridPoint.at_rest(float(x), float(y)) for x, y in positions]
        return cls(width, height, points=points, **kwargs)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _load(self, points: List[GridPoint]) -> None:
        self.points = points
        self._active: Set[int] = set()
        self._influence_origin: Optional[Tuple[float, float]] = None
        self._painted = False
        self._buckets: Dict[Tuple[int, int], List[int]] = {}
        for idx, p in enumerate(points):
            self._buckets.setdefault(self._cell(p.rest_x, p.rest_y), []).append(idx)

    def _cell(self, x: float, y: float) -> Tuple[int, int]:
        return (
            int(math.floor(x / self.max_distance)),
            int(math.floor(y / self.max_distance)),
        )

    def _nearby(self, x: float, y: float) -> Iterator[int]:
        cx, cy = self._cell(x, y)
        for bx in range(cx - 1, cx + 2):
            for by in range(cy - 1, cy + 2):
                yield from self._buckets.get((bx, by), ())

    def resize(self, width: float, height: float) -> None:
        """Rebuild the grid for a new viewport; the next tick always paints."""
        self.width = width
        self.height = height
        self._load(build_grid(width, height, self.spacing))
        logger.debug(
            "Field resized to %gx%g (%d dots)", width, height, len(self.points)
        )

    def destroy(self) -> None:
        self._load([])
        self.input = fcfg.OFFSCREEN

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def pointer_move(self, x: float, y: float) -> None:
        self.input = (float(x), float(y))

    def pointer_leave(self) -> None:
        self.input = fcfg.OFFSCREEN

    def handle(self, event) -> None:
        """Follow a PointerEvent: down/move track the pointer, leave parks it."""
        if event.kind in ("down", "move"):
            self.pointer_move(event.x, event.y)
        elif event.kind == "leave":
            self.pointer_leave()

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    @property
    def active_count(self) -> int:
        return len(self._active)

    def is_active(self, idx: int) -> bool:
        return idx in self._active

    def _input_moved(self) -> bool:
        if self._influence_origin is None:
            return True
        ox, oy = self._influence_origin
        ix, iy = self.input
        return math.hypot(ix - ox, iy - oy) > self.move_threshold

    def _recompute_influence(self) -> None:
        ix, iy = self.input
        influenced: Set[int] = set()
        for idx in self._nearby(ix, iy):
            p = self.points[idx]
            dx = ix - p.rest_x
            dy = iy - p.rest_y
            dist = math.hypot(dx, dy)
            if dist >= self.max_distance:
                continue
            force = (self.max_distance - dist) / self.max_distance
            angle = math.atan2(dy, dx) + math.pi  # away from the pointer
            p.target_x = p.rest_x + math.cos(angle) * force * self.strength
            p.target_y = p.rest_y + math.sin(angle) * force * self.strength
            p.active = True
            influenced.add(idx)

        for idx in self._active - influenced:
            p = self.points[idx]
            p.target_x = p.rest_x
            p.target_y = p.rest_y
        self._active |= influenced
        self._influence_origin = (ix, iy)

    def tick(self, surface: RenderSurface) -> bool:
        """Advance one frame; returns whether the field was repainted."""
        self.ticks += 1
        if self._input_moved():
            self._recompute_influence()

        dirty = False
        settling = False
        for idx in list(self._active):
            p = self.points[idx]
            p.current_x += (p.target_x - p.current_x) * self.easing
            p.current_y += (p.target_y - p.current_y) * self.easing
            if (
                math.hypot(p.current_x - p.last_drawn_x, p.current_y - p.last_drawn_y)
                > self.redraw_threshold
            ):
                dirty = True
            if math.hypot(p.target_x - p.current_x, p.target_y - p.current_y) > self.epsilon:
                settling = True
            elif p.at_home:
                p.active = False
                self._active.discard(idx)

        if self._painted and not dirty and not settling:
            return False
        self._paint(surface)
        return True

    def _paint(self, surface: RenderSurface) -> None:
        surface.clear(self.width, self.height)
        for p in self.points:
            surface.draw_disc(
                p.current_x, p.current_y, self.dot_radius, self.dot_color, self.dot_color, 0
            )
            p.last_drawn_x = p.current_x
            p.last_drawn_y = p.current_y
        self._painted = True
        self.paints += 1
