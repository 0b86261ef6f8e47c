"""Unit tests for the viewport controller."""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from careergalaxy.core.types import PositionedNode, ViewportWindow
from careergalaxy.core.viewport import ViewportConfig, ViewportController, cubic_bezier

DEFAULT = ViewportWindow(x=-1000, y=-600, width=2000, height=1200)


def node_at(x, y, level=2, node_id="n"):
    return PositionedNode(
        id=node_id, name=node_id, level=level,
        x=x, y=y, angle=0.0, wedge_start=0.0, wedge_end=0.0,
    )


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def vp(clock):
    return ViewportController(clock=clock)


class TestEasing:
    def test_endpoints(self):
        ease = cubic_bezier(0.25, 0.1, 0.25, 1.0)
        assert ease(0) == 0.0
        assert ease(1) == 1.0
        assert ease(-1) == 0.0
        assert ease(2) == 1.0

    def test_linear_curve(self):
        linear = cubic_bezier(0.0, 0.0, 1.0, 1.0)
        for t in (0.1, 0.25, 0.5, 0.9):
            assert linear(t) == pytest.approx(t, abs=1e-5)

    def test_css_ease_is_monotonic_and_front_loaded(self):
        ease = cubic_bezier(0.25, 0.1, 0.25, 1.0)
        samples = [ease(i / 20) for i in range(21)]
        assert samples == sorted(samples)
        # CSS "ease" has covered most of the distance by the halfway point
        assert ease(0.5) == pytest.approx(0.8024, abs=1e-3)


class TestConfig:
    def test_rejects_inverted_zoom_range(self):
        with pytest.raises(ValidationError):
            ViewportConfig(min_zoom=5, max_zoom=1)

    def test_level_zoom(self):
        cfg = ViewportConfig()
        assert cfg.zoom_for_level(0) == 0.9
        assert cfg.zoom_for_level(4) == 2.2
        assert cfg.zoom_for_level(9) == 1.5


class TestImmediateOperations:
    def test_initial_window(self, vp):
        assert vp.window == DEFAULT
        assert vp.zoom == 1.0
        assert not vp.is_animating

    def test_pan_moves_against_drag(self, vp):
        # 1000px wide screen over a 2000 unit window: 1px == 2 units
        w = vp.pan_by(100, 50, screen_width=1000, screen_height=600)
        assert (w.x, w.y) == (-1200, -700)
        assert (w.width, w.height) == (2000, 1200)

    def test_pan_without_height_uses_width_scale(self, vp):
        w = vp.pan_by(0, 10, screen_width=1000)
        assert w.y == -620

    def test_pan_on_zero_width_screen(self, vp):
        assert vp.pan_by(10, 10, screen_width=0) == DEFAULT

    def test_zoom_about_center(self, vp):
        w = vp.zoom_by(2)
        assert vp.zoom == 2
        assert (w.width, w.height) == (1000, 600)
        assert w.center == (0, 0)

    def test_zoom_keeps_focal_point(self, vp):
        before = vp.window
        focal = (500.0, 300.0)
        rel = ((focal[0] - before.x) / before.width, (focal[1] - before.y) / before.height)
        after = vp.zoom_by(2, focal)
        assert (focal[0] - after.x) / after.width == pytest.approx(rel[0])
        assert (focal[1] - after.y) / after.height == pytest.approx(rel[1])

    def test_zoom_clamped(self, vp):
        vp.zoom_by(100)
        assert vp.zoom == 4.0
        assert vp.window.width == 500
        vp.zoom_by(0.0001)
        assert vp.zoom == 0.3

    def test_nonpositive_factor_clamps_to_min(self, vp):
        vp.zoom_by(0)
        assert vp.zoom == 0.3

    def test_large_wheel_fling_zooms_fully_out(self, vp):
        cfg = vp.config
        window = vp.wheel(600)
        assert vp.zoom == cfg.min_zoom
        assert window.width == pytest.approx(cfg.base_width / cfg.min_zoom)
        assert window.height == pytest.approx(cfg.base_height / cfg.min_zoom)
        assert window.center == pytest.approx(DEFAULT.center)

    def test_wheel(self, vp):
        vp.wheel(-100)
        assert vp.zoom == pytest.approx(1.2)
        vp.wheel(100)
        assert vp.zoom == pytest.approx(0.96)

    def test_zoom_buttons(self, vp):
        vp.zoom_in()
        assert vp.zoom == pytest.approx(1.3)
        vp.zoom_out()
        assert vp.zoom == pytest.approx(1.0)

    def test_reset(self, vp):
        vp.zoom_by(3)
        vp.pan_by(10, 10, 100)
        assert vp.reset() == DEFAULT
        assert vp.zoom == 1.0

    def test_screen_to_plane(self, vp):
        assert vp.screen_to_plane(500, 300, 1000, 600) == (0, 0)

    def test_on_change(self, clock):
        on_change = MagicMock()
        vp = ViewportController(on_change=on_change, clock=clock)
        vp.reset()
        on_change.assert_not_called()
        vp.zoom_by(2)
        on_change.assert_called_once_with(vp.window)


class TestCenterOn:
    def test_transition_is_eased(self, vp, clock):
        target = node_at(1000, 500, level=2)
        transition = vp.center_on(target)
        assert vp.is_animating
        assert vp.zoom == 1.5
        assert transition.duration == 0.5
        assert vp.window == DEFAULT

        clock.now = 0.25
        mid = vp.tick()
        assert DEFAULT.x < mid.x < transition.end.x
        assert vp.is_animating

        clock.now = 0.5
        end = vp.tick()
        assert end.center == pytest.approx((1000, 500))
        assert end.width == pytest.approx(2000 / 1.5)
        assert not vp.is_animating

    def test_level_zoom_default(self, vp):
        assert vp.center_on(node_at(0, 0, level=4)).end.width == pytest.approx(2000 / 2.2)
        assert vp.center_on(node_at(0, 0, level=0)).end.width == pytest.approx(2000 / 0.9)

    def test_explicit_zoom_is_clamped(self, vp):
        assert vp.center_on(node_at(0, 0), zoom=50).end.width == 500

    def test_zero_duration_is_immediate(self, vp):
        assert vp.center_on(node_at(100, 100), duration=0) is None
        assert vp.window.center == pytest.approx((100, 100))
        assert not vp.is_animating

    def test_new_request_replaces_pending(self, vp, clock):
        vp.center_on(node_at(1000, 0))
        clock.now = 0.1
        vp.tick()
        second = vp.center_on(node_at(-1000, 0))
        assert vp.transition is second
        assert second.start == vp.window
        clock.now = 1.0
        assert vp.tick().center == pytest.approx((-1000, 0))

    @pytest.mark.parametrize("interrupt", [
        lambda vp: vp.pan_by(10, 0, 100),
        lambda vp: vp.zoom_by(1.1),
        lambda vp: vp.wheel(10),
        lambda vp: vp.begin_drag(),
        lambda vp: vp.reset(),
    ])
    def test_direct_manipulation_cancels(self, vp, clock, interrupt):
        vp.center_on(node_at(1000, 0))
        interrupt(vp)
        assert not vp.is_animating
        settled = vp.window
        clock.now = 5.0
        assert vp.tick() == settled

    def test_tick_when_idle(self, vp):
        assert vp.tick(10.0) == DEFAULT
