"""
Test suite for TraceEngine.

Tests cover:
- Arming on the anchor target
- Commit on fresh entry, completion on the last target
- Failure reset on early release / leave
- Enter detection with overlapping targets
- Timestamp ordering and the minimum point distance filter
- Difficulty switching and explicit reset
"""

import random

import pytest

from tracekit.task import PointerEvent, TraceEngine
from tracekit.task.synth import synthesize_trace

from conftest import FixedSequencer


def assert_commit_count(engine):
    st = engine.state
    assert len(st.committed_strokes) == st.current_index
    if st.is_drawing:
        assert not st.is_completed
    if not st.is_drawing:
        assert st.active_stroke == []


class TestArming:
    def test_down_on_anchor_starts_stroke(self, engine):
        engine.pointer_down(100, 100)

        assert engine.is_drawing
        assert engine.current_index == 0
        assert len(engine.state.active_stroke) == 1
        first = engine.state.active_stroke[0]
        assert (first.x, first.y, first.target_index) == (100, 100, 0)
        assert first.timestamp == 0

    def test_down_outside_anchor_is_ignored(self, engine):
        engine.pointer_down(300, 100)  # target 1, not the anchor

        assert not engine.is_drawing
        assert engine.state.active_stroke == []
        assert engine.state.start_time is None

    def test_down_on_rim_counts_as_hit(self, engine):
        engine.pointer_down(125, 100)
        assert engine.is_drawing

    def test_move_without_down_records_nothing(self, engine):
        engine.pointer_move(300, 100)
        assert engine.state.active_stroke == []
        assert engine.state.committed_strokes == []

    def test_up_without_down_does_not_reset(self, engine, fixed_sequencer):
        engine.pointer_up(10, 10)
        assert fixed_sequencer.generated == 1


class TestScenarioA:
    def test_full_run_completes(self, engine):
        engine.pointer_down(100, 100)
        assert engine.is_drawing

        engine.pointer_move(300, 100)
        assert engine.current_index == 1
        assert len(engine.state.committed_strokes) == 1
        assert all(p.target_index == 0 for p in engine.state.committed_strokes[0])
        assert engine.state.active_stroke == []
        assert engine.is_drawing

        engine.pointer_move(300, 300)
        assert engine.current_index == 2
        assert len(engine.state.committed_strokes) == 2
        assert engine.is_completed
        assert not engine.is_drawing

    def test_up_after_completion_keeps_data(self, engine, fixed_sequencer):
        for ev in [("down", 100, 100), ("move", 300, 100), ("move", 300, 300)]:
            engine.handle(PointerEvent(*ev))
        engine.pointer_up(300, 300)

        assert engine.is_completed
        assert len(engine.state.committed_strokes) == 2
        assert fixed_sequencer.generated == 1

    def test_events_after_completion_are_ignored(self, engine):
        for ev in [("down", 100, 100), ("move", 300, 100), ("move", 300, 300)]:
            engine.handle(PointerEvent(*ev))
        engine.pointer_down(100, 100)
        engine.pointer_move(200, 200)

        assert not engine.is_drawing
        assert len(engine.state.committed_strokes) == 2
        assert engine.state.active_stroke == []

    def test_progress(self, engine):
        assert engine.progress() == (0, 3)
        engine.pointer_down(100, 100)
        assert engine.progress() == (1, 3)
        engine.pointer_move(300, 100)
        assert engine.progress() == (2, 3)
        engine.pointer_move(300, 300)
        assert engine.progress() == (3, 3)


class TestScenarioB:
    def test_early_release_resets(self, engine, fixed_sequencer):
        engine.pointer_down(100, 100)
        engine.pointer_move(150, 150)
        engine.pointer_up(150, 150)

        assert fixed_sequencer.generated == 2
        assert engine.current_index == 0
        assert engine.state.committed_strokes == []
        assert engine.state.active_stroke == []
        assert not engine.is_drawing
        assert engine.state.start_time is None

    def test_release_after_partial_progress_discards_commits(self, engine):
        engine.pointer_down(100, 100)
        engine.pointer_move(300, 100)
        engine.pointer_move(300, 200)
        engine.pointer_up(300, 200)

        assert engine.current_index == 0
        assert engine.state.committed_strokes == []

    def test_leave_behaves_like_release(self, engine, fixed_sequencer):
        engine.pointer_down(100, 100)
        engine.handle(PointerEvent("leave", -5, 40))

        assert fixed_sequencer.generated == 2
        assert not engine.is_drawing


class TestFreshEntry:
    def test_entry_requires_previous_point_outside(self):
        # targets 0 and 1 overlap so a press can start inside both
        seq = FixedSequencer([(100, 100), (130, 100), (400, 400)])
        engine = TraceEngine(sequencer=seq, count=3, radius=25, clock=lambda: 0.0)

        engine.pointer_down(110, 100)
        engine.pointer_move(120, 100)
        assert engine.current_index == 0
        assert len(engine.state.active_stroke) == 2

        engine.pointer_move(200, 100)
        engine.pointer_move(130, 100)
        assert engine.current_index == 1
        assert len(engine.state.committed_strokes[0]) == 4

    def test_first_sample_after_commit_can_enter(self, engine):
        engine.pointer_down(100, 100)
        engine.pointer_move(300, 100)
        engine.pointer_move(300, 290)  # previous sample is gone with the commit
        assert engine.is_completed
        assert len(engine.state.committed_strokes[1]) == 1


class TestTimestamps:
    def test_host_timestamps_are_relative_to_first_down(self, engine):
        engine.pointer_down(100, 100, t=1000.0)
        engine.pointer_move(200, 100, t=1040.0)
        engine.pointer_move(300, 100, t=1075.0)

        stroke = engine.state.committed_strokes[0]
        assert [p.timestamp for p in stroke] == [0.0, 40.0, 75.0]

    def test_backwards_timestamps_are_clamped(self, engine):
        engine.pointer_down(100, 100, t=100.0)
        engine.pointer_move(150, 100, t=150.0)
        engine.pointer_move(200, 100, t=120.0)

        stamps = [p.timestamp for p in engine.state.active_stroke]
        assert stamps == [0.0, 50.0, 50.0]

    def test_backwards_clock_after_commit_keeps_order_across_strokes(self, engine):
        engine.pointer_down(100, 100, t=100.0)
        engine.pointer_move(300, 100, t=200.0)
        engine.pointer_move(300, 200, t=150.0)
        engine.pointer_move(300, 300, t=160.0)

        first, second = engine.state.committed_strokes
        assert second[0].timestamp >= first[-1].timestamp
        assert [p.timestamp for p in second] == [100.0, 100.0]

    def test_clock_is_used_without_host_timestamp(self, engine):
        engine.pointer_down(100, 100)
        engine.pointer_move(200, 100)
        engine.pointer_move(300, 100)

        stamps = [p.timestamp for p in engine.state.committed_strokes[0]]
        assert stamps == [0.0, 10.0, 20.0]

    def test_synthesized_run_is_monotonic(self):
        engine = TraceEngine(count=6, clock=lambda: 0.0)
        engine.sequencer.rng.seed(3)
        engine.reset()
        for event in synthesize_trace(engine.targets, rng=random.Random(3)):
            engine.handle(event)
            assert_commit_count(engine)

        assert engine.is_completed
        assert len(engine.state.committed_strokes) == 5
        for stroke in engine.state.committed_strokes:
            stamps = [p.timestamp for p in stroke]
            assert stamps == sorted(stamps)


class TestMinPointDistance:
    def test_negative_distance_rejected(self, fixed_sequencer):
        with pytest.raises(ValueError):
            TraceEngine(sequencer=fixed_sequencer, count=3, min_point_distance=-1)

    def test_close_samples_are_dropped(self, fixed_sequencer):
        engine = TraceEngine(
            sequencer=fixed_sequencer, count=3, radius=25, min_point_distance=5
        )
        engine.pointer_down(100, 100, t=0)
        engine.pointer_move(102, 100, t=5)
        engine.pointer_move(110, 100, t=10)

        assert [p.x for p in engine.state.active_stroke] == [100, 110]

    def test_entering_sample_is_never_dropped(self, fixed_sequencer):
        engine = TraceEngine(
            sequencer=fixed_sequencer, count=3, radius=25, min_point_distance=5
        )
        engine.pointer_down(100, 100, t=0)
        engine.pointer_move(274, 100, t=10)
        engine.pointer_move(276, 100, t=12)

        assert engine.current_index == 1
        assert engine.state.committed_strokes[0][-1].x == 276


class TestResetAndDifficulty:
    def test_reset_from_any_state_is_fresh(self, engine, fixed_sequencer):
        engine.pointer_down(100, 100)
        engine.pointer_move(300, 100)
        engine.reset()

        st = engine.state
        assert st.current_index == 0
        assert st.committed_strokes == []
        assert st.active_stroke == []
        assert not st.is_drawing
        assert not st.is_completed
        assert st.start_time is None
        assert fixed_sequencer.generated == 2

    def test_reset_after_completion(self, engine):
        engine.pointer_down(100, 100)
        engine.pointer_move(300, 100)
        engine.pointer_move(300, 300)
        engine.reset()
        assert not engine.is_completed
        assert engine.progress() == (0, 3)

    def test_difficulty_switch_relabels(self, engine):
        assert engine.set_difficulty("alternating") is True
        assert [t.label for t in engine.targets] == ["1", "A", "2"]

    def test_difficulty_switch_refused_mid_run(self, engine):
        engine.pointer_down(100, 100)
        assert engine.set_difficulty("alternating") is False
        assert engine.difficulty.value == "numbers"
        assert engine.is_drawing

    def test_difficulty_switch_allowed_after_completion(self, engine):
        engine.pointer_down(100, 100)
        engine.pointer_move(300, 100)
        engine.pointer_move(300, 300)
        assert engine.set_difficulty("alternating") is True
        assert not engine.is_completed

    def test_unknown_difficulty(self, engine):
        with pytest.raises(ValueError):
            engine.set_difficulty("letters")


class TestEdgeRuns:
    def test_single_target_completes_on_press(self):
        engine = TraceEngine(sequencer=FixedSequencer([(100, 100)]), count=1)
        engine.pointer_down(100, 100)
        assert engine.is_completed
        assert engine.state.committed_strokes == []

    def test_unknown_event_kind(self):
        with pytest.raises(ValueError):
            PointerEvent("wheel", 0, 0)
