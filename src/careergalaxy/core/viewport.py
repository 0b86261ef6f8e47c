"""
Viewport (pan/zoom) controller.

Two layers of state:

- The current window, written synchronously by every pan, wheel and zoom
  event so the view tracks the pointer 1:1.
- An optional requested transition, used only by ``center_on``. An external
  scheduler (animation-frame loop, timer) drives it through ``tick``.

Any direct manipulation cancels a pending transition first, so the two
layers never compete for the same frame.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from ..config import (
    BASE_VIEW_HEIGHT,
    BASE_VIEW_WIDTH,
    DEFAULT_WINDOW,
    FALLBACK_ZOOM,
    LEVEL_ZOOM,
    MAX_ZOOM,
    MIN_ZOOM,
    TRANSITION_EASING,
    TRANSITION_SECONDS,
    WHEEL_SENSITIVITY,
    ZOOM_STEP,
)
from .types import PositionedNode, ViewportWindow

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Easing = Callable[[float], float]


class ViewportConfig(BaseModel):
    """Viewport limits and defaults."""
    base_width: float = BASE_VIEW_WIDTH
    base_height: float = BASE_VIEW_HEIGHT
    default_window: Tuple[float, float, float, float] = DEFAULT_WINDOW
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    wheel_sensitivity: float = WHEEL_SENSITIVITY
    zoom_step: float = ZOOM_STEP
    level_zoom: Dict[int, float] = LEVEL_ZOOM
    fallback_zoom: float = FALLBACK_ZOOM
    transition_duration: float = TRANSITION_SECONDS
    easing: Tuple[float, float, float, float] = TRANSITION_EASING

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_ranges(self) -> "ViewportConfig":
        if self.base_width <= 0 or self.base_height <= 0:
            raise ValueError("base_width and base_height must be positive")
        if not 0 < self.min_zoom <= self.max_zoom:
            raise ValueError("zoom range must satisfy 0 < min_zoom <= max_zoom")
        if self.zoom_step <= 1:
            raise ValueError("zoom_step must be greater than 1")
        return self

    @property
    def default(self) -> ViewportWindow:
        x, y, width, height = self.default_window
        return ViewportWindow(x=x, y=y, width=width, height=height)

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def zoom_for_level(self, level: int) -> float:
        return self.level_zoom.get(level, self.fallback_zoom)


def cubic_bezier(p1x: float, p1y: float, p2x: float, p2y: float) -> Easing:
    """
    Timing function equivalent to CSS ``cubic-bezier(p1x, p1y, p2x, p2y)``.

    Solves x(t) = progress by Newton iteration, falling back to bisection.
    """

    def curve(a1: float, a2: float, t: float) -> float:
        return ((1 - 3 * a2 + 3 * a1) * t + (3 * a2 - 6 * a1)) * t * t + 3 * a1 * t

    def slope(a1: float, a2: float, t: float) -> float:
        return 3 * (1 - 3 * a2 + 3 * a1) * t * t + 2 * (3 * a2 - 6 * a1) * t + 3 * a1

    def solve(x: float) -> float:
        t = x
        for _ in range(8):
            error = curve(p1x, p2x, t) - x
            if abs(error) < 1e-7:
                return t
            d = slope(p1x, p2x, t)
            if abs(d) < 1e-7:
                break
            t -= error / d

        lo, hi = 0.0, 1.0
        t = x
        for _ in range(50):
            value = curve(p1x, p2x, t)
            if abs(value - x) < 1e-7:
                break
            if value < x:
                lo = t
            else:
                hi = t
            t = (lo + hi) / 2
        return t

    def ease(progress: float) -> float:
        if progress <= 0:
            return 0.0
        if progress >= 1:
            return 1.0
        return curve(p1y, p2y, solve(progress))

    return ease


@dataclass(frozen=True)
class ViewportTransition:
    """A time-boxed, eased move from ``start`` to ``end``."""
    start: ViewportWindow
    end: ViewportWindow
    started_at: float
    duration: float
    easing: Easing

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.started_at) / self.duration))

    def finished(self, now: float) -> bool:
        return self.progress(now) >= 1.0

    def window_at(self, now: float) -> ViewportWindow:
        p = self.progress(now)
        if p >= 1.0:
            return self.end
        return self.start.interpolate(self.end, self.easing(p))


class ViewportController:
    """
    Owns the visible coordinate window.

    Args:
        config: Limits and defaults.
        on_change: Called with the new window whenever it changes.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        config: Optional[ViewportConfig] = None,
        on_change: Optional[Callable[[ViewportWindow], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or ViewportConfig()
        self._on_change = on_change
        self._clock = clock
        self._easing = cubic_bezier(*self.config.easing)
        self._window = self.config.default
        self._zoom = self.config.base_width / self._window.width
        self._transition: Optional[ViewportTransition] = None

    @property
    def window(self) -> ViewportWindow:
        return self._window

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def transition(self) -> Optional[ViewportTransition]:
        return self._transition

    @property
    def is_animating(self) -> bool:
        return self._transition is not None

    # =========================================================================
    # Immediate operations
    # =========================================================================

    def set_window(self, window: ViewportWindow) -> None:
        """Jump to ``window`` immediately, dropping any pending transition."""
        self.cancel_transition()
        self._apply(window)

    def cancel_transition(self) -> None:
        if self._transition is not None:
            logger.debug("Cancelled viewport transition")
        self._transition = None

    def begin_drag(self) -> None:
        """Pointer-down on the canvas: stop animating so the drag owns the view."""
        self.cancel_transition()

    def pan_by(
        self,
        dx: float,
        dy: float,
        screen_width: float,
        screen_height: Optional[float] = None,
    ) -> ViewportWindow:
        """
        Move the view by a pointer delta given in screen pixels.

        Dragging right reveals what lies to the left, so the window moves
        against the drag.
        """
        self.cancel_transition()
        if screen_width <= 0:
            return self._window

        w = self._window
        scale_x = w.width / screen_width
        scale_y = w.height / screen_height if screen_height and screen_height > 0 else scale_x
        self._apply(w.model_copy(update={"x": w.x - dx * scale_x, "y": w.y - dy * scale_y}))
        return self._window

    def zoom_by(self, factor: float, focal: Optional[Point] = None) -> ViewportWindow:
        """
        Multiply the zoom by ``factor`` (clamped), keeping ``focal`` fixed.

        ``focal`` is a plane coordinate; it defaults to the window center.
        A non-positive product clamps to ``min_zoom``.
        """
        self.cancel_transition()
        self._zoom = self.config.clamp_zoom(self._zoom * factor)
        w = self._window
        width = self.config.base_width / self._zoom
        height = self.config.base_height / self._zoom

        fx, fy = focal if focal is not None else w.center
        rel_x = (fx - w.x) / w.width if w.width else 0.5
        rel_y = (fy - w.y) / w.height if w.height else 0.5
        self._apply(ViewportWindow(
            x=fx - rel_x * width,
            y=fy - rel_y * height,
            width=width,
            height=height,
        ))
        return self._window

    def wheel(self, delta_y: float, focal: Optional[Point] = None) -> ViewportWindow:
        """Scroll-wheel zoom; negative ``delta_y`` (scroll up) zooms in."""
        return self.zoom_by(1 - delta_y * self.config.wheel_sensitivity, focal)

    def zoom_in(self) -> ViewportWindow:
        return self.zoom_by(self.config.zoom_step)

    def zoom_out(self) -> ViewportWindow:
        return self.zoom_by(1 / self.config.zoom_step)

    def reset(self) -> ViewportWindow:
        """Restore the default window."""
        self.cancel_transition()
        default = self.config.default
        self._zoom = self.config.base_width / default.width
        self._apply(default)
        return self._window

    def screen_to_plane(
        self, sx: float, sy: float, screen_width: float, screen_height: float
    ) -> Point:
        """Map a screen pixel to the plane coordinate under it."""
        w = self._window
        return (w.x + sx / screen_width * w.width, w.y + sy / screen_height * w.height)

    # =========================================================================
    # Smoothed operations
    # =========================================================================

    def center_on(
        self,
        node: PositionedNode,
        zoom: Optional[float] = None,
        duration: Optional[float] = None,
        now: Optional[float] = None,
    ) -> Optional[ViewportTransition]:
        """
        Request an eased move that centers ``node``.

        Without an explicit ``zoom`` the level default applies: broad levels
        get a wide view, job titles a close one. A pending transition is
        replaced. Returns None when the move was applied instantly
        (``duration`` of zero).
        """
        target_zoom = self.config.clamp_zoom(zoom if zoom is not None else self.config.zoom_for_level(node.level))
        self._zoom = target_zoom
        target = ViewportWindow.centered_on(
            node.x,
            node.y,
            self.config.base_width / target_zoom,
            self.config.base_height / target_zoom,
        )

        duration = self.config.transition_duration if duration is None else duration
        if duration <= 0:
            self.set_window(target)
            return None

        self._transition = ViewportTransition(
            start=self._window,
            end=target,
            started_at=self._clock() if now is None else now,
            duration=duration,
            easing=self._easing,
        )
        logger.debug(f"Centering on {node.id} at zoom {target_zoom:.2f}")
        return self._transition

    def tick(self, now: Optional[float] = None) -> ViewportWindow:
        """Advance a pending transition to ``now``; a no-op when idle."""
        if self._transition is None:
            return self._window
        now = self._clock() if now is None else now
        transition = self._transition
        self._apply(transition.window_at(now))
        if transition.finished(now):
            self._transition = None
        return self._window

    def _apply(self, window: ViewportWindow) -> None:
        if window == self._window:
            return
        self._window = window
        if self._on_change is not None:
            self._on_change(window)
