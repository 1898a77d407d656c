from __future__ import annotations
import re
from pathlib import Path as FSPath
from typing import Protocol, Sequence, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

Point = Tuple[float, float]

_FONT_PX = re.compile(r"(\d+(?:\.\d+)?)px")
_H_ANCHOR = {"left": 0.0, "start": 0.0, "center": 0.5, "right": 1.0, "end": 1.0}
_V_ANCHOR = {"top": 0.0, "middle": 0.5, "bottom": 1.0, "alphabetic": 1.0}


class RenderSurface(Protocol):
    """Drawing capability the task and field renderers paint through."""

    def clear(self, width: float, height: float) -> None: ...

    def draw_polyline(
        self, points: Sequence[Point], stroke_style: str, line_width: float
    ) -> None: ...

    def draw_disc(
        self,
        x: float,
        y: float,
        radius: float,
        fill_style: str,
        stroke_style: str,
        line_width: float,
    ) -> None: ...

    def draw_label(
        self,
        text: str,
        x: float,
        y: float,
        font: str,
        color: str,
        align: str = "center",
        baseline: str = "middle",
    ) -> None: ...

    def draw_dashed_rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        dash: Sequence[float],
        stroke_style: str,
        line_width: float,
    ) -> None: ...


def _font_size(font: str, default: int = 14) -> int:
    match = _FONT_PX.search(font or "")
    return int(float(match.group(1))) if match else default


class PillowSurface:
    """RenderSurface backed by a Pillow RGB image."""

    def __init__(self, width: int, height: int, background: str = "#ffffff"):
        self.background = background
        self.image = Image.new("RGB", (int(width), int(height)), background)
        self.draw = ImageDraw.Draw(self.image)
        self._fonts = {}

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def clear(self, width: float, height: float) -> None:
        if (int(width), int(height)) != self.image.size:
            self.image = Image.new("RGB", (int(width), int(height)), self.background)
            self.draw = ImageDraw.Draw(self.image)
            return
        self.draw.rectangle([0, 0, width, height], fill=self.background)

    def draw_polyline(
        self, points: Sequence[Point], stroke_style: str, line_width: float
    ) -> None:
        if len(points) < 2:
            return
        self.draw.line(
            [(float(x), float(y)) for x, y in points],
            fill=stroke_style,
            width=max(1, int(round(line_width))),
            joint="curve",
        )

    def draw_disc(
        self,
        x: float,
        y: float,
        radius: float,
        fill_style: str,
        stroke_style: str,
        line_width: float,
    ) -> None:
        self.draw.ellipse(
            [x - radius, y - radius, x + radius, y + radius],
            fill=fill_style,
            outline=stroke_style if line_width > 0 else None,
            width=max(0, int(round(line_width))),
        )

    def _font(self, font: str):
        size = _font_size(font)
        if size not in self._fonts:
            self._fonts[size] = ImageFont.load_default(size=size)
        return self._fonts[size]

    def draw_label(
        self,
        text: str,
        x: float,
        y: float,
        font: str,
        color: str,
        align: str = "center",
        baseline: str = "middle",
    ) -> None:
        face = self._font(font)
        left, top, right, bottom = self.draw.textbbox((0, 0), text, font=face)
        ox = left + (right - left) * _H_ANCHOR.get(align, 0.5)
        oy = top + (bottom - top) * _V_ANCHOR.get(baseline, 0.5)
        self.draw.text((x - ox, y - oy), text, fill=color, font=face)

    def draw_dashed_rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        dash: Sequence[float],
        stroke_style: str,
        line_width: float,
    ) -> None:
        corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h), (x, y)]
        pattern = [float(d) for d in dash if d > 0] or [1.0]
        width = max(1, int(round(line_width)))
        for (x0, y0), (x1, y1) in zip(corners, corners[1:]):
            self._dashed_line(x0, y0, x1, y1, pattern, stroke_style, width)

    def _dashed_line(self, x0, y0, x1, y1, pattern, fill, width):
        length = ((x1 - x0) ** 2 + (y1 - y0) ** 2) ** 0.5
        if length == 0:
            return
        ux, uy = (x1 - x0) / length, (y1 - y0) / length
        pos = 0.0
        i = 0
        while pos < length:
            seg = min(pattern[i % len(pattern)], length - pos)
            if i % 2 == 0:
                self.draw.line(
                    [
                        (x0 + ux * pos, y0 + uy * pos),
                        (x0 + ux * (pos + seg), y0 + uy * (pos + seg)),
                    ],
                    fill=fill,
                    width=width,
                )
            pos += seg
            i += 1

    def save(self, outfile: Union[str, FSPath], **kwargs) -> FSPath:
        """Save the image; the format follows the file suffix."""
        path = FSPath(outfile)
        if path.suffix.lower() in (".jpg", ".jpeg"):
            kwargs.setdefault("quality", 92)
            kwargs.setdefault("optimize", True)
        self.image.save(path, **kwargs)
        return path
