"""Tests for the scene engine and its systems."""

from __future__ import annotations

import logging
import math

import pytest

from parachute_drop.engine import SceneEngine, map_key, map_keys, split_keys
from parachute_drop.engine.state import SceneStateManager
from parachute_drop.engine.systems import ParachutistSimulator, PlaneSequencer, SceneryAnimator
from parachute_drop.engine.systems.parachutist import LANDING_ALTITUDE
from parachute_drop.types import (
    FEET_OFFSET,
    FRAME_TIME,
    INITIAL_ALTITUDE,
    MIN_COLLAPSE_SCALE,
    Butterfly,
    ParachutistPhase,
    PlanePhase,
    SceneCommand,
    SceneEvent,
    SceneEventType,
)


def collect_events(engine: SceneEngine) -> list[SceneEvent]:
    """Subscribe a list to the engine's events."""
    events: list[SceneEvent] = []
    engine.subscribe(events.append)
    return events


class TestKeyMapping:
    """Tests for key to command mapping."""

    @pytest.mark.parametrize(
        "key, command",
        [
            ("r", SceneCommand.RESET),
            ("R", SceneCommand.RESET),
            ("+", SceneCommand.INCREASE_WIND),
            ("=", SceneCommand.INCREASE_WIND),
            ("-", SceneCommand.DECREASE_WIND),
            ("_", SceneCommand.DECREASE_WIND),
            ("q", SceneCommand.QUIT),
            ("\x1b", SceneCommand.QUIT),
        ],
    )
    def test_known_keys(self, key, command):
        """Test bound keys map to their commands."""
        assert map_key(key) == command

    def test_unknown_key(self):
        """Test unbound keys map to nothing."""
        assert map_key("x") is None
        assert map_key(" ") is None

    def test_map_keys_drops_unknown(self):
        """Test buffered input keeps only known keys, in order."""
        assert map_keys("+x-r") == [
            SceneCommand.INCREASE_WIND,
            SceneCommand.DECREASE_WIND,
            SceneCommand.RESET,
        ]

    @pytest.mark.parametrize(
        "data, keys",
        [
            ("+-", ["+", "-"]),
            ("\x1b", ["\x1b"]),
            ("\x1b[A", ["\x1b[A"]),
            ("\x1b[1;5C", ["\x1b[1;5C"]),
            ("\x1bOP", ["\x1bOP"]),
            ("q\x1b[Br", ["q", "\x1b[B", "r"]),
        ],
    )
    def test_split_keys(self, data, keys):
        """Test escape sequences stay whole when splitting input."""
        assert split_keys(data) == keys

    def test_arrow_keys_are_not_quit(self):
        """Test arrow keys map to nothing instead of ESC."""
        assert map_keys("\x1b[A\x1b[B\x1b[C\x1b[D") == []
        assert map_keys("\x1b[A+") == [SceneCommand.INCREASE_WIND]


class TestSceneStateManager:
    """Tests for scene state management."""

    def test_get_state_returns_copy(self, scene_state):
        """Test callers can't mutate the live state through get_state."""
        manager = SceneStateManager(scene_state)
        copy = manager.get_state()
        copy.wind.increase()
        assert manager.live.wind.get() == 1.0

    def test_flush_notifies_listeners(self, scene_state):
        """Test pending events reach every listener and are cleared."""
        manager = SceneStateManager(scene_state)
        received = []
        manager.subscribe(received.append)
        scene_state.emit(SceneEvent(type=SceneEventType.JUMPED))

        flushed = manager.flush_events()

        assert [e.type for e in flushed] == [SceneEventType.JUMPED]
        assert received == flushed
        assert manager.live.events == []

    def test_flushed_events_logged(self, scene_state, caplog):
        """Test each drained event is logged in its dict form."""
        manager = SceneStateManager(scene_state)
        scene_state.emit(SceneEvent(type=SceneEventType.LANDED, frame=7))
        with caplog.at_level(logging.DEBUG, logger="parachute_drop"):
            manager.flush_events()
        messages = [r.getMessage() for r in caplog.records]
        assert "Scene event: {'type': 'LANDED', 'frame': 7, 'data': {}}" in messages

    def test_unsubscribe(self, scene_state):
        """Test unsubscribed listeners stop receiving events."""
        manager = SceneStateManager(scene_state)
        received = []
        unsubscribe = manager.subscribe(received.append)
        unsubscribe()
        scene_state.emit(SceneEvent(type=SceneEventType.JUMPED))
        manager.flush_events()
        assert received == []


class TestSceneryAnimator:
    """Tests for clouds and butterflies."""

    def test_clouds_move_with_wind(self, scene_state):
        """Test clouds advance by base speed times wind."""
        scene_state.wind.increase()  # 1.5
        cloud = scene_state.clouds[0]
        start = cloud.x
        SceneryAnimator().update(scene_state, FRAME_TIME)
        assert cloud.x == pytest.approx(start + cloud.base_speed * 1.5)

    def test_clouds_still_without_wind(self, scene_state):
        """Test zero wind freezes the clouds."""
        scene_state.wind.strength = 0.0
        before = [c.x for c in scene_state.clouds]
        SceneryAnimator().update(scene_state, FRAME_TIME)
        assert [c.x for c in scene_state.clouds] == before

    def test_cloud_wraps_to_left_edge(self, scene_state):
        """Test a cloud leaving the right edge reappears on the left."""
        scene_state.wind.strength = 5.0
        cloud = scene_state.clouds[0]
        cloud.x = 2.299
        SceneryAnimator().update(scene_state, FRAME_TIME)
        assert cloud.x == pytest.approx(-2.3)

    def test_butterflies_follow_origin(self, scene_state):
        """Test butterflies stay within their amplitude of the origin."""
        animator = SceneryAnimator()
        for i in range(200):
            scene_state.elapsed = i * 0.37
            animator.update(scene_state, FRAME_TIME)
            for b in scene_state.butterflies:
                assert abs(b.x - b.origin_x) <= b.amplitude_x + 1e-9
                assert abs(b.y - b.origin_y) <= b.amplitude_y + 1e-9
                assert abs(b.x) <= 2.1
                assert abs(b.y) <= 2.1
                assert -45.0 <= b.wing_angle <= 45.0

    @pytest.mark.parametrize(
        "phase, origin, expected",
        [
            (math.pi / 2, (2.09, 0.0), ("x", -2.1)),      # right edge
            (-math.pi / 2, (-2.09, 0.0), ("x", 2.1)),     # left edge
            (0.0, (0.0, 2.09), ("y", -2.1)),              # top edge
            (2 * math.pi / 3, (0.0, -2.09), ("y", 2.1)),  # bottom edge
        ],
    )
    def test_butterfly_wraps_at_edges(self, scene_state, phase, origin, expected):
        """Test a butterfly pushed past an edge reappears on the opposite one."""
        butterfly = Butterfly(
            x=origin[0], y=origin[1],
            origin_x=origin[0], origin_y=origin[1],
            phase_offset=phase,
            speed_x=1.0, speed_y=1.0,
            amplitude_x=0.07, amplitude_y=0.07,
        )
        scene_state.butterflies = [butterfly]
        scene_state.elapsed = 0.0

        SceneryAnimator().update(scene_state, FRAME_TIME)

        axis, value = expected
        assert getattr(butterfly, axis) == pytest.approx(value)
        other = butterfly.y if axis == "x" else butterfly.x
        assert abs(other) < 2.1

    def test_butterfly_inside_bounds_not_wrapped(self, scene_state):
        """Test a butterfly close to the edge but inside it stays put."""
        butterfly = Butterfly(
            x=2.0, y=0.0, origin_x=2.0, origin_y=0.0,
            phase_offset=math.pi / 2, speed_x=1.0, speed_y=1.0,
            amplitude_x=0.05, amplitude_y=0.05,
        )
        scene_state.butterflies = [butterfly]
        scene_state.elapsed = 0.0

        SceneryAnimator().update(scene_state, FRAME_TIME)

        assert butterfly.x == pytest.approx(2.05)


class TestPlaneSequencer:
    """Tests for the plane."""

    def test_approaches_at_fixed_speed(self, scene_state):
        """Test the plane moves right by 0.005 per frame."""
        PlaneSequencer().update(scene_state, FRAME_TIME)
        assert scene_state.plane.x == pytest.approx(-2.495)

    def test_stops_at_drop_point(self, scene_state):
        """Test the plane snaps to x=0 and raises the ready signal."""
        scene_state.plane.x = -0.003
        PlaneSequencer().update(scene_state, FRAME_TIME)
        assert scene_state.plane.x == 0.0
        assert scene_state.plane.phase == PlanePhase.STOPPED
        assert scene_state.plane.ready
        assert [e.type for e in scene_state.events] == [SceneEventType.PLANE_STOPPED]

    def test_waits_for_jump(self, scene_state):
        """Test a stopped plane doesn't leave before the jump."""
        scene_state.plane.x = 0.0
        scene_state.plane.phase = PlanePhase.STOPPED
        PlaneSequencer().update(scene_state, FRAME_TIME)
        assert scene_state.plane.x == 0.0

    def test_departs_after_jump(self, scene_state):
        """Test the plane leaves once the parachutist has jumped."""
        scene_state.plane.x = 0.0
        scene_state.plane.phase = PlanePhase.STOPPED
        scene_state.parachutist.phase = ParachutistPhase.FALLING
        PlaneSequencer().update(scene_state, FRAME_TIME)
        assert scene_state.plane.phase == PlanePhase.DEPARTING
        assert scene_state.plane.x == pytest.approx(0.005)

    def test_parks_off_screen(self, scene_state):
        """Test the departed plane stops moving past the right edge."""
        scene_state.plane.x = 2.5
        scene_state.plane.phase = PlanePhase.DEPARTING
        sequencer = PlaneSequencer()
        for _ in range(10):
            sequencer.update(scene_state, FRAME_TIME)
        assert scene_state.plane.x == pytest.approx(2.505)


class TestParachutistSimulator:
    """Tests for the parachutist state machine in isolation."""

    def test_idle_without_signal(self, scene_state):
        """Test nothing happens while the plane is approaching."""
        ParachutistSimulator().update(scene_state, FRAME_TIME)
        assert scene_state.parachutist.phase == ParachutistPhase.IDLE
        assert scene_state.parachutist.vertical_position == INITIAL_ALTITUDE

    def test_jump_consumes_signal(self, scene_state):
        """Test the ready signal is consumed exactly once."""
        scene_state.plane.x = 0.0
        scene_state.plane.phase = PlanePhase.STOPPED
        scene_state.plane.ready = True
        ParachutistSimulator().update(scene_state, FRAME_TIME)

        p = scene_state.parachutist
        assert p.phase == ParachutistPhase.FALLING
        assert p.vertical_position == 1.45
        assert p.vertical_velocity == -0.0005
        assert not scene_state.plane.ready

    def test_running_wraps_around(self, scene_state):
        """Test the runner re-enters from the left edge."""
        p = scene_state.parachutist
        p.phase = ParachutistPhase.RUNNING
        p.horizontal_drift = 2.195
        ParachutistSimulator().update(scene_state, FRAME_TIME)
        assert p.horizontal_drift == pytest.approx(-2.2)
        assert p.run_phase == pytest.approx(0.3)

    def test_drift_clamped(self, scene_state):
        """Test strong wind can't push the parachutist past the margin."""
        p = scene_state.parachutist
        p.phase = ParachutistPhase.FALLING
        p.vertical_velocity = -0.002
        scene_state.wind.strength = 5.0
        simulator = ParachutistSimulator()
        for _ in range(500):
            simulator.update(scene_state, FRAME_TIME)
            assert -1.8 <= p.horizontal_drift <= 1.8


class TestSceneEngine:
    """Tests for the scene engine."""

    def test_engine_creates_scene(self, engine):
        """Test the engine builds a default meadow."""
        state = engine.get_state()
        assert len(state.butterflies) == 5
        assert state.wind.get() == 1.0
        assert state.parachutist.phase == ParachutistPhase.IDLE

    def test_step_advances_clock(self, engine):
        """Test each step counts a frame and adds dt."""
        engine.step(FRAME_TIME)
        engine.step(FRAME_TIME)
        state = engine.get_state()
        assert state.frame == 2
        assert state.elapsed == pytest.approx(0.032)

    @pytest.mark.parametrize("dt", [-0.016, float("nan"), float("inf")])
    def test_step_rejects_bad_dt(self, engine, dt):
        """Test invalid dt raises instead of corrupting the state."""
        with pytest.raises(ValueError):
            engine.step(dt)

    def test_zero_dt_is_noop_for_motion(self, engine):
        """Test a zero-length step moves nothing."""
        before = engine.get_state()
        engine.step(0.0)
        after = engine.get_state()
        assert after.plane.x == before.plane.x
        assert [c.x for c in after.clouds] == [c.x for c in before.clouds]

    def test_update_alias(self, engine):
        """Test update is the same as step."""
        engine.update(FRAME_TIME)
        assert engine.get_state().frame == 1

    def test_get_state_is_a_copy(self, engine):
        """Test mutating the returned state doesn't affect the engine."""
        state = engine.get_state()
        state.plane.x = 1.0
        assert engine.get_state().plane.x == -2.5

    def test_larger_dt_matches_smaller_steps(self):
        """Test motion scales with dt rather than with the frame count."""
        coarse = SceneEngine(config={"seed": 1})
        fine = SceneEngine(config={"seed": 1})
        for _ in range(100):
            coarse.step(2 * FRAME_TIME)
        for _ in range(200):
            fine.step(FRAME_TIME)

        a, b = coarse.get_state(), fine.get_state()
        assert a.elapsed == pytest.approx(b.elapsed)
        assert a.plane.x == pytest.approx(b.plane.x)
        for ca, cb in zip(a.clouds, b.clouds):
            assert ca.x == pytest.approx(cb.x)
        for ba, bb in zip(a.butterflies, b.butterflies):
            assert ba.x == pytest.approx(bb.x)

    def test_wind_commands(self, engine):
        """Test wind commands change strength and emit events."""
        events = collect_events(engine)
        assert engine.increase_wind() == 1.5
        assert engine.decrease_wind() == 1.0
        assert [e.type for e in events] == [SceneEventType.WIND_CHANGED] * 2
        assert events[0].data["strength"] == 1.5

    def test_handle_key(self, engine):
        """Test key presses are applied before the next tick."""
        assert engine.handle_key("+") == SceneCommand.INCREASE_WIND
        assert engine.get_state().wind.get() == 1.5
        assert engine.handle_key("-") == SceneCommand.DECREASE_WIND
        assert engine.get_state().wind.get() == 1.0

    def test_unknown_key_is_noop(self, engine):
        """Test unbound keys change nothing."""
        before = engine.get_state()
        assert engine.handle_key("x") is None
        after = engine.get_state()
        assert after.wind.get() == before.wind.get()
        assert after.frame == before.frame

    def test_handle_keys_burst(self, engine):
        """Test a burst of input applies each key and skips escape sequences."""
        events = collect_events(engine)
        commands = engine.handle_keys("+\x1b[A+-")
        assert commands == [
            SceneCommand.INCREASE_WIND,
            SceneCommand.INCREASE_WIND,
            SceneCommand.DECREASE_WIND,
        ]
        assert engine.get_state().wind.get() == 1.5
        assert [e.type for e in events] == [SceneEventType.WIND_CHANGED] * 3

    def test_quit_is_left_to_caller(self, engine):
        """Test the engine ignores QUIT but reports it."""
        assert engine.handle_key("q") == SceneCommand.QUIT
        assert engine.get_state().frame == 0

    def test_render_state(self, engine):
        """Test the engine produces a snapshot of the current frame."""
        engine.step(FRAME_TIME)
        snapshot = engine.get_render_state()
        assert snapshot.frame == 1
        assert snapshot.plane_x == pytest.approx(-2.495)
        assert len(snapshot.butterflies) == 5


class TestAnimationSequence:
    """End-to-end tests for the jump, descent, landing and run-off."""

    def test_plane_stops_then_parachutist_jumps_next_tick(self, engine, run_until_plane_stopped):
        """Test the jump happens on the tick after the plane stops."""
        events = collect_events(engine)
        ticks = run_until_plane_stopped(engine)

        assert 499 <= ticks <= 501
        state = engine.get_state()
        assert state.plane.x == 0.0
        assert state.plane.ready
        assert state.parachutist.phase == ParachutistPhase.IDLE
        assert [e.type for e in events] == [SceneEventType.PLANE_STOPPED]

        step_events = engine.step(FRAME_TIME)

        state = engine.get_state()
        p = state.parachutist
        assert p.phase == ParachutistPhase.FALLING
        assert p.vertical_position == 1.45
        assert p.vertical_velocity == -0.0005
        assert p.horizontal_drift == 0.0
        assert not state.plane.ready
        assert state.plane.phase == PlanePhase.DEPARTING
        assert [e.type for e in step_events] == [SceneEventType.JUMPED]

    def test_calm_landing(self, calm_engine, run_until_landed):
        """Test a windless descent lands exactly once, straight down."""
        events = collect_events(calm_engine)
        run_until_landed(calm_engine)
        for _ in range(50):
            calm_engine.step(FRAME_TIME)

        landings = [e for e in events if e.type == SceneEventType.LANDED]
        assert len(landings) == 1

        p = calm_engine.get_state().parachutist
        assert p.landed
        assert p.vertical_velocity == 0.0
        assert p.horizontal_drift == 0.0
        assert p.landing_count == 1
        assert p.vertical_position + FEET_OFFSET == pytest.approx(LANDING_ALTITUDE)

    def test_windy_landing(self, engine, run_until_landed):
        """Test the parachutist still lands in the default wind."""
        run_until_landed(engine)
        p = engine.get_state().parachutist
        assert p.landed
        assert -1.8 <= p.horizontal_drift <= 1.8

    def test_descent_is_monotonic(self, engine, run_until_plane_stopped):
        """Test velocity and altitude never increase during the fall."""
        run_until_plane_stopped(engine)
        engine.step(FRAME_TIME)

        last_v = 0.0
        last_y = math.inf
        for _ in range(5000):
            engine.step(FRAME_TIME)
            p = engine.get_state().parachutist
            if p.phase != ParachutistPhase.FALLING:
                break
            assert p.vertical_velocity <= last_v
            assert p.vertical_velocity <= 0.0
            assert p.vertical_velocity >= -0.002
            assert p.vertical_position <= last_y
            last_v = p.vertical_velocity
            last_y = p.vertical_position
        else:
            pytest.fail("parachutist never landed")

    def test_sway_lasts_two_seconds(self, engine, run_until_landed):
        """Test the canopy detaches exactly 125 nominal frames after landing."""
        run_until_landed(engine)

        for _ in range(124):
            engine.step(FRAME_TIME)
        p = engine.get_state().parachutist
        assert p.phase == ParachutistPhase.LANDED_SWAYING
        assert p.post_land_sway_timer > 0.0

        events = engine.step(FRAME_TIME)
        p = engine.get_state().parachutist
        assert p.phase == ParachutistPhase.LANDED_DETACHING
        assert p.parachute_detaching
        assert p.post_land_sway_timer == 0.0
        assert p.sway_amplitude == 0.0
        assert p.collapse_scale == pytest.approx(1.0 - 0.0025 * 125)
        assert [e.type for e in events] == [SceneEventType.PARACHUTE_DETACHED]

    def test_detach_then_run(self, engine, run_until_landed):
        """Test the released canopy drops and the parachutist runs off."""
        events = collect_events(engine)
        run_until_landed(engine)
        for _ in range(126):
            engine.step(FRAME_TIME)

        p = engine.get_state().parachutist
        assert p.phase == ParachutistPhase.RUNNING
        assert events[-1].type == SceneEventType.RUNNING

        start = p.horizontal_drift
        engine.step(FRAME_TIME)
        moved = engine.get_state().parachutist.horizontal_drift - start
        assert moved == pytest.approx(0.008)

    def test_collapse_is_monotonic(self, engine, run_until_landed):
        """Test the canopy only ever deflates, down to its floor."""
        run_until_landed(engine)
        last = 1.0
        for _ in range(1000):
            engine.step(FRAME_TIME)
            scale = engine.get_state().parachutist.collapse_scale
            assert scale <= last
            assert scale >= MIN_COLLAPSE_SCALE
            last = scale

    def test_plane_leaves_after_jump(self, engine, run_until_landed):
        """Test the plane flies off and parks past the right edge."""
        run_until_landed(engine)
        x = engine.get_state().plane.x
        assert 2.5 < x <= 2.5 + 0.005 + 1e-9

    def test_event_order(self, calm_engine, run_until_landed):
        """Test events arrive in animation order."""
        events = collect_events(calm_engine)
        run_until_landed(calm_engine)
        for _ in range(130):
            calm_engine.step(FRAME_TIME)
        assert [e.type for e in events] == [
            SceneEventType.PLANE_STOPPED,
            SceneEventType.JUMPED,
            SceneEventType.LANDED,
            SceneEventType.PARACHUTE_DETACHED,
            SceneEventType.RUNNING,
        ]


class TestReset:
    """Tests for resetting the animation."""

    def test_reset_mid_flight(self, engine, run_until_plane_stopped):
        """Test reset restores the starting scene."""
        run_until_plane_stopped(engine)
        for _ in range(100):
            engine.step(FRAME_TIME)
        engine.increase_wind()
        assert engine.get_state().parachutist.jumped

        engine.reset()

        state = engine.get_state()
        p = state.parachutist
        assert p.vertical_position == 2.0
        assert not p.jumped
        assert not p.landed
        assert state.wind.get() == 1.0
        assert len(state.butterflies) == 5
        assert state.plane.x == -2.5
        assert not state.plane.stopped

    def test_reset_reseeds_butterflies(self, engine):
        """Test reset spawns a new set of butterflies."""
        before = [b.origin_x for b in engine.get_state().butterflies]
        engine.reset()
        after = [b.origin_x for b in engine.get_state().butterflies]
        assert before != after

    def test_reset_emits_event(self, engine):
        """Test subscribers hear about the reset."""
        events = collect_events(engine)
        engine.handle_key("r")
        assert [e.type for e in events] == [SceneEventType.RESET]

    def test_animation_replays_after_reset(self, calm_engine, run_until_landed):
        """Test a reset scene lands again from scratch."""
        run_until_landed(calm_engine)
        calm_engine.reset()
        run_until_landed(calm_engine)
        assert calm_engine.get_state().parachutist.landing_count == 1
