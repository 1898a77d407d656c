from __future__ import annotations


class cfg:
    """Connect-the-dots task tuning."""

    # --- Canvas / layout ---
    CANVAS_WIDTH = 800
    CANVAS_HEIGHT = 600
    DOT_RADIUS = 25
    NUM_TARGETS = 12
    PADDING_MARGIN_PX = 20  # padding = radius + margin
    MIN_SEPARATION_RADII = 3.0  # centers at least 3 radii apart

    DEFAULT_DIFFICULTY = "numbers"

    # --- Sampling ---
    MIN_POINT_DISTANCE_PX = 0.0  # 0 -> append every move unconditionally

    # -------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------
    BACKGROUND = "#f8f9fa"
    STROKE_COLOR = "#3b82f6"
    STROKE_WIDTH = 3

    TARGET_FILL = "#e5e7eb"
    TARGET_OUTLINE = "#9ca3af"
    REACHED_FILL = "#10b981"
    REACHED_OUTLINE = "#059669"
    TARGET_OUTLINE_WIDTH = 3

    LABEL_FONT = "bold 18px sans-serif"
    LABEL_COLOR = "#1f2937"
    REACHED_LABEL_COLOR = "#ffffff"

    DRAW_BOUNDARY = True  # dashed outline of the placement area
    BOUNDARY_COLOR = "#cbd5e1"
    BOUNDARY_DASH = (6, 4)
    BOUNDARY_WIDTH = 1

    # --- Speed-coloured trajectory images (px/ms) ---
    MIN_SPEED_PX_PER_MS = 0.05
    MAX_SPEED_PX_PER_MS = 2.0

    # --- Synthetic drags (WindMouse) ---
    GRAVITY = 9.0
    WIND = 3.0
    MIN_STEP = 2.0
    MAX_STEP = 10.0
    TARGET_AREA = 8.0
    JITTER = 0.6
    AVG_SPEED_RANGE_PX_S = (350, 900)
    SAMPLE_INTERVAL_MS = 16.0  # cap on the gap between synthesized samples
