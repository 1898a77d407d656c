from __future__ import annotations
import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class AnimationLoop:
    """Fixed-rate frame loop on the running asyncio event loop.

    The next frame is scheduled only after the current one returns. The
    owner must call stop() on teardown; nothing cancels the loop implicitly.
    A frame that raises is logged, kept in last_error, and ends the loop.
    """

    def __init__(self, frame: Callable[[], object], fps: float = 60):
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.frame = frame
        self.interval = 1.0 / fps
        self.frames = 0
        self._task: Optional[asyncio.Task] = None
        self._stop_requested = False
        self.last_error: Optional[BaseException] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._stop_requested = False
        self.last_error = None
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Animation loop started at %.1f fps", 1.0 / self.interval)
        return self._task

    async def stop(self) -> None:
        """Stop scheduling frames and wait for the loop task to finish."""
        self._stop_requested = True
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Animation loop stopped after %d frames", self.frames)

    async def _run(self) -> None:
        while not self._stop_requested:
            start = time.perf_counter()
            try:
                self.frame()
            except Exception as exc:
                # a broken frame stops the loop; the owner still calls stop()
                logger.exception("Frame %d failed; animation loop stopped", self.frames + 1)
                self.last_error = exc
                self._stop_requested = True
                break
            self.frames += 1
            elapsed = time.perf_counter() - start
            await asyncio.sleep(max(0.0, self.interval - elapsed))
