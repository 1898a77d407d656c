from __future__ import annotations
import logging
import time
from typing import Callable, Optional, Tuple, Union

from ..utils import distance
from .config import cfg
from .targets import Difficulty, Target, TargetSequencer
from .telemetry import PointerEvent, RunSnapshot, RunState, SamplePoint

logger = logging.getLogger(__name__)


def _perf_ms() -> float:
    return time.perf_counter() * 1000.0


class TraceEngine:
    """Connect-the-dots trajectory capture.

    The pointer is pressed on the target at ``current_index`` and dragged,
    without releasing, through every following target in order. A stroke
    collects the samples recorded on the way from one target to the next and
    is committed the moment the pointer freshly enters its destination
    (``current_index + 1``). Releasing (or leaving the canvas) before the last
    target is reached throws the whole run away and starts a new layout.

    All transitions are synchronous; the engine is the only writer of its
    RunState.
    """

    def __init__(
        self,
        difficulty: Union[str, Difficulty] = cfg.DEFAULT_DIFFICULTY,
        *,
        sequencer: Optional[TargetSequencer] = None,
        count: int = cfg.NUM_TARGETS,
        canvas_width: float = cfg.CANVAS_WIDTH,
        canvas_height: float = cfg.CANVAS_HEIGHT,
        radius: float = cfg.DOT_RADIUS,
        padding: Optional[float] = None,
        min_point_distance: float = cfg.MIN_POINT_DISTANCE_PX,
        clock: Callable[[], float] = _perf_ms,
    ):
        if min_point_distance < 0:
            raise ValueError("min_point_distance must be >= 0")
        self.difficulty = Difficulty.coerce(difficulty)
        self.sequencer = sequencer if sequencer is not None else TargetSequencer()
        self.count = count
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.radius = radius
        self.padding = padding if padding is not None else radius + cfg.PADDING_MARGIN_PX
        self.min_point_distance = float(min_point_distance)
        self.clock = clock
        self.state = self._fresh_state()

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------
    def _fresh_state(self) -> RunState:
        targets = self.sequencer.generate(
            self.difficulty,
            self.count,
            self.canvas_width,
            self.canvas_height,
            self.radius,
            self.padding,
        )
        return RunState(targets=list(targets), difficulty=self.difficulty)

    def reset(self) -> None:
        """Discard the run and start over with a new target layout."""
        self.state = self._fresh_state()
        logger.debug("Run reset (%s, %d targets)", self.difficulty.value, self.count)

    def set_difficulty(self, difficulty: Union[str, Difficulty]) -> bool:
        """Switch label scheme and reset.

        Unlike reset(), this is refused while a drag is in progress or a run
        is part-way done, the way the task UI greys out its difficulty
        selector mid-run. Returns whether the switch happened.
        """
        mode = Difficulty.coerce(difficulty)
        st = self.state
        if st.is_drawing or (st.current_index > 0 and not st.is_completed):
            logger.warning(
                "Difficulty change to %s refused mid-run (target %d)",
                mode.value,
                st.current_index,
            )
            return False
        self.difficulty = mode
        self.reset()
        return True

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def targets(self) -> Tuple[Target, ...]:
        return tuple(self.state.targets)

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def is_drawing(self) -> bool:
        return self.state.is_drawing

    @property
    def is_completed(self) -> bool:
        return self.state.is_completed

    @property
    def destination(self) -> Optional[Target]:
        """Target the active stroke is heading for, or None once none is left."""
        nxt = self.state.current_index + 1
        if nxt < len(self.state.targets):
            return self.state.targets[nxt]
        return None

    def progress(self) -> Tuple[int, int]:
        """(targets reached, total targets)."""
        return self.snapshot().reached_count, len(self.state.targets)

    def snapshot(self) -> RunSnapshot:
        return RunSnapshot.of(self.state, self.radius)

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    def handle(self, event: PointerEvent) -> None:
        """Route one host event to the matching transition."""
        if event.kind == "down":
            self.pointer_down(event.x, event.y, event.t)
        elif event.kind == "move":
            self.pointer_move(event.x, event.y, event.t)
        else:
            self.pointer_up(event.x, event.y, event.t)

    def _now(self, t: Optional[float]) -> float:
        return self.clock() if t is None else float(t)

    def _inside(self, target: Target, x: float, y: float) -> bool:
        return target.contains(x, y, self.radius)

    def pointer_down(self, x: float, y: float, t: Optional[float] = None) -> None:
        st = self.state
        if st.is_completed or st.is_drawing or not st.targets:
            return
        anchor = st.targets[st.current_index]
        if not self._inside(anchor, x, y):
            return
        now = self._now(t)
        if st.start_time is None:
            st.start_time = now
        st.is_drawing = True
        st.active_stroke = [SamplePoint(x, y, now - st.start_time, st.current_index)]
        logger.debug("Armed on target %s at (%.1f, %.1f)", anchor.label, x, y)
        if len(st.targets) == 1:
            # nothing to connect; the press alone finishes the run
            st.active_stroke = []
            st.is_drawing = False
            st.is_completed = True

    def pointer_move(self, x: float, y: float, t: Optional[float] = None) -> None:
        st = self.state
        if not st.is_drawing:
            return
        dest = self.destination
        if dest is None:
            return

        previous = st.active_stroke[-1] if st.active_stroke else None
        fresh_entry = self._inside(dest, x, y) and (
            previous is None or not self._inside(dest, previous.x, previous.y)
        )
        if (
            not fresh_entry
            and previous is not None
            and self.min_point_distance > 0
            and distance(previous.x, previous.y, x, y) < self.min_point_distance
        ):
            return

        stamp = self._now(t) - st.start_time
        if previous is not None and stamp < previous.timestamp:
            stamp = previous.timestamp
        elif previous is None and st.committed_strokes:
            stamp = max(stamp, st.committed_strokes[-1][-1].timestamp)
        st.active_stroke.append(SamplePoint(x, y, stamp, st.current_index))

        if fresh_entry:
            self._commit(dest)

    def _commit(self, reached: Target) -> None:
        st = self.state
        st.committed_strokes.append(st.active_stroke)
        st.active_stroke = []
        st.current_index += 1
        logger.debug(
            "Committed stroke %d -> %s (%d samples)",
            len(st.committed_strokes),
            reached.label,
            len(st.committed_strokes[-1]),
        )
        if st.current_index == len(st.targets) - 1:
            st.is_completed = True
            st.is_drawing = False
            logger.info(
                "Run completed: %d targets in %.0f ms",
                len(st.targets),
                st.committed_strokes[-1][-1].timestamp,
            )

    def pointer_up(self, x: float = 0.0, y: float = 0.0, t: Optional[float] = None) -> None:
        """Release or leave. Ending a drag before the last target fails the run."""
        st = self.state
        if not st.is_drawing:
            return
        if not st.is_completed:
            logger.info(
                "Pointer released before target %d of %d; resetting run",
                st.current_index + 2,
                len(st.targets),
            )
            self.reset()
        self.state.is_drawing = False

    pointer_leave = pointer_up
