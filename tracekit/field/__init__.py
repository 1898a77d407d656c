from .animator import FieldAnimator, GridPoint, build_grid
from .config import fcfg

__all__ = ["FieldAnimator", "GridPoint", "build_grid", "fcfg"]
