from __future__ import annotations


class fcfg:
    """Reactive dot-grid tuning."""

    DOT_SPACING = 10  # px between dot centers
    DOT_RADIUS = 2
    DOT_COLOR = "#9ca3af"

    MAX_DISTANCE = 120.0  # influence radius of the pointer
    STRENGTH = 15.0  # max deflection in px (at distance 0)
    EASING = 0.15  # fraction of the remaining gap closed per tick

    MOVE_THRESHOLD_PX = 2.0  # input must move this far before influence is recomputed
    REDRAW_THRESHOLD_PX = 0.1  # drawn position change that marks a dot dirty
    SETTLE_EPSILON_PX = 0.01  # closer than this to target counts as settled

    OFFSCREEN = (-1000.0, -1000.0)  # input position while the pointer is away

    FPS = 60
