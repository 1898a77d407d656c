import pytest

from tracekit.task import TargetSequencer, TraceEngine
from tracekit.task.targets import Target, label_for


class RecordingSurface:
    """RenderSurface that keeps a list of the calls made on it."""

    def __init__(self):
        self.calls = []

    def clear(self, width, height):
        self.calls.append(("clear", width, height))

    def draw_polyline(self, points, stroke_style, line_width):
        self.calls.append(("polyline", list(points), stroke_style, line_width))

    def draw_disc(self, x, y, radius, fill_style, stroke_style, line_width):
        self.calls.append(("disc", x, y, radius, fill_style, stroke_style, line_width))

    def draw_label(self, text, x, y, font, color, align="center", baseline="middle"):
        self.calls.append(("label", text, x, y, font, color))

    def draw_dashed_rect(self, x, y, w, h, dash, stroke_style, line_width):
        self.calls.append(("dashed_rect", x, y, w, h))

    def of_kind(self, kind):
        return [c for c in self.calls if c[0] == kind]


class FixedSequencer(TargetSequencer):
    """Always lays targets out at the given positions; counts layouts served."""

    def __init__(self, positions):
        super().__init__(seed=0)
        self.positions = list(positions)
        self.generated = 0

    def generate(self, difficulty="numbers", count=0, canvas_width=0,
                 canvas_height=0, radius=25, padding=None):
        self.generated += 1
        return [
            Target(float(x), float(y), label_for(difficulty, i), i)
            for i, (x, y) in enumerate(self.positions)
        ]


SCENARIO_POSITIONS = [(100, 100), (300, 100), (300, 300)]


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def fixed_sequencer():
    return FixedSequencer(SCENARIO_POSITIONS)


@pytest.fixture
def engine(fixed_sequencer):
    ticks = iter(range(0, 100000, 10))
    return TraceEngine(
        sequencer=fixed_sequencer,
        count=len(SCENARIO_POSITIONS),
        radius=25,
        clock=lambda: float(next(ticks)),
    )
