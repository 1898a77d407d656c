from __future__ import annotations
import logging
from typing import Optional

from .field.animator import FieldAnimator
from .field.config import fcfg
from .loop import AnimationLoop
from .surface import RenderSurface
from .task.engine import TraceEngine
from .task.render import render_run
from .task.telemetry import PointerEvent

logger = logging.getLogger(__name__)


class TaskHost:
    """Wires pointer input, the two components and their surfaces together.

    Each frame pulls a fresh snapshot from the engine and ticks the field;
    the task canvas is repainted only when the snapshot changed.
    """

    def __init__(
        self,
        engine: TraceEngine,
        surface: RenderSurface,
        *,
        field: Optional[FieldAnimator] = None,
        field_surface: Optional[RenderSurface] = None,
        fps: float = fcfg.FPS,
    ):
        if field is not None and field_surface is None:
            raise ValueError("field requires a field_surface")
        self.engine = engine
        self.surface = surface
        self.field = field
        self.field_surface = field_surface
        self.loop = AnimationLoop(self.frame, fps)
        self._last_snapshot = None

    def dispatch(self, event: PointerEvent) -> None:
        """Deliver one pointer event to both components, synchronously."""
        self.engine.handle(event)
        if self.field is not None:
            self.field.handle(event)

    def frame(self) -> bool:
        """Paint one frame; returns whether the task canvas was repainted."""
        if self.field is not None:
            self.field.tick(self.field_surface)
        snapshot = self.engine.snapshot()
        if snapshot == self._last_snapshot:
            return False
        render_run(
            self.surface,
            snapshot,
            self.engine.canvas_width,
            self.engine.canvas_height,
            self.engine.padding,
        )
        self._last_snapshot = snapshot
        return True

    def start(self):
        return self.loop.start()

    async def stop(self) -> None:
        try:
            await self.loop.stop()
        finally:
            if self.field is not None:
                self.field.destroy()
