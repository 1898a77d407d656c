from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from ..utils import distance, random_uniform
from .config import cfg


class Difficulty(str, Enum):
    """Label scheme for a run."""

    NUMBERS = "numbers"  # 1, 2, 3, ...
    ALTERNATING = "alternating"  # 1, A, 2, B, 3, C, ...

    @classmethod
    def coerce(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        """Accept an enum member or its string value; raise ValueError otherwise."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown difficulty {value!r}; expected one of "
                f"{', '.join(d.value for d in cls)}"
            ) from None


@dataclass(frozen=True)
class Target:
    """A circular region the pointer must reach, in index order."""

    x: float
    y: float
    label: str
    index: int

    def contains(self, x: float, y: float, radius: float) -> bool:
        """Hit test: True when (x, y) lies within radius of the center (inclusive)."""
        return distance(self.x, self.y, x, y) <= radius

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "label": self.label, "index": self.index}


def label_for(difficulty: Union[str, Difficulty], index: int) -> str:
    """Label of the target at 0-based position index."""
    mode = Difficulty.coerce(difficulty)
    if mode is Difficulty.NUMBERS:
        return str(index + 1)
    if index % 2 == 0:
        return str(index // 2 + 1)
    return chr(ord("A") + index // 2)


class TargetSequencer:
    """Places non-overlapping, labelled targets for one run.

    Candidates are drawn uniformly from [padding, dim - padding] on both axes
    and rejected while closer than MIN_SEPARATION_RADII * radius to any target
    already placed. There is no retry cap: callers must pick count, padding
    and radius so that a packing exists, otherwise generate() never returns.
    """

    def __init__(self, rng: Optional[random.Random] = None, *, seed: Optional[int] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def generate(
        self,
        difficulty: Union[str, Difficulty] = cfg.DEFAULT_DIFFICULTY,
        count: int = cfg.NUM_TARGETS,
        canvas_width: float = cfg.CANVAS_WIDTH,
        canvas_height: float = cfg.CANVAS_HEIGHT,
        radius: float = cfg.DOT_RADIUS,
        padding: Optional[float] = None,
    ) -> List[Target]:
        mode = Difficulty.coerce(difficulty)
        if padding is None:
            padding = radius + cfg.PADDING_MARGIN_PX
        if count < 0:
            raise ValueError("count must be >= 0")
        if radius <= 0:
            raise ValueError("radius must be positive")
        if padding < radius:
            raise ValueError(f"padding ({padding}) must be >= radius ({radius})")
        if canvas_width < 2 * padding or canvas_height < 2 * padding:
            raise ValueError(
                f"canvas {canvas_width}x{canvas_height} too small for padding {padding}"
            )

        min_separation = cfg.MIN_SEPARATION_RADII * radius
        targets: List[Target] = []
        rejected = 0
        for i in range(count):
            while True:
                x = random_uniform(padding, canvas_width - padding, self.rng)
                y = random_uniform(padding, canvas_height - padding, self.rng)
                if all(distance(t.x, t.y, x, y) >= min_separation for t in targets):
                    break
                rejected += 1
            targets.append(Target(x, y, label_for(mode, i), i))

        logging.getLogger(__name__).debug(
            "Placed %d %s targets on %gx%g (%d candidates rejected)",
            count,
            mode.value,
            canvas_width,
            canvas_height,
            rejected,
        )
        return targets
