"""Gesture disambiguation: turns raw input events into game commands."""

from __future__ import annotations

import enum
import math
from typing import Callable, Protocol

from backend.engine.input.events import (
    BUTTON_LEFT,
    BUTTON_MIDDLE,
    InputEvent,
    KeyPress,
    PointerDown,
    PointerMove,
    PointerUp,
    TouchEnd,
    TouchMove,
    TouchStart,
    Wheel,
)
from backend.models.camera import Point
from backend.utils.logger import get_logger

LOGGER = get_logger(__name__)

DRAG_THRESHOLD = 4.0  # px a press may wander before it becomes a drag
WHEEL_STEP = 0.25
KEY_ZOOM_STEP = 1.0

_NUDGE_KEYS: dict[str, tuple[int, int]] = {
    "ArrowLeft": (-1, 0),
    "ArrowRight": (1, 0),
    "ArrowUp": (0, -1),
    "ArrowDown": (0, 1),
}
_ZOOM_KEYS: dict[str, float] = {
    "+": KEY_ZOOM_STEP,
    "=": KEY_ZOOM_STEP,
    "-": -KEY_ZOOM_STEP,
}
_CLEAR_KEYS = frozenset({"0", "Backspace", "Delete"})
_PAN_BUTTONS = frozenset({BUTTON_LEFT, BUTTON_MIDDLE})


class InputState(enum.Enum):
    IDLE = "idle"
    PRESSED_MAYBE_DRAG = "pressed"
    DRAGGING = "dragging"
    PINCH_ZOOMING = "pinch"


class InputTarget(Protocol):
    """Commands the state machine dispatches (implemented by GameSession)."""

    def pan(self, dx: float, dy: float) -> None: ...

    def zoom_at(self, delta: float, x: float, y: float) -> None: ...

    def select_at(self, x: float, y: float) -> None: ...

    def clear_selection(self) -> None: ...

    def nudge(self, dx: int, dy: int) -> None: ...

    def enter_digit(self, value: int) -> bool: ...


def _distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _midpoint(touches: tuple[Point, ...]) -> Point:
    cx = sum(t[0] for t in touches) / len(touches)
    cy = sum(t[1] for t in touches) / len(touches)
    return (cx, cy)


class InputStateMachine:
    """Tap-vs-drag and pinch disambiguation for mouse, touch and keys.

    A press only becomes a selection if it is released before moving more
    than ``DRAG_THRESHOLD`` pixels; once a drag starts the press is
    consumed by panning.  Whenever the source reports no active contacts
    the machine falls back to ``IDLE``, which covers lost "up" events.
    """

    def __init__(self, target: InputTarget) -> None:
        self.target = target
        self.state = InputState.IDLE
        self.pointer: Point = (0.0, 0.0)  # last pointer position / touch midpoint
        self._press: Point = (0.0, 0.0)
        self._pinch_distance = 0.0
        self._handlers: dict[type, Callable] = {
            PointerDown: self._on_pointer_down,
            PointerMove: self._on_pointer_move,
            PointerUp: self._on_pointer_up,
            Wheel: self._on_wheel,
            TouchStart: self._on_touch_start,
            TouchMove: self._on_touch_move,
            TouchEnd: self._on_touch_end,
            KeyPress: self._on_key,
        }

    def handle(self, event: InputEvent) -> None:
        self._handlers[type(event)](event)

    def reset(self) -> None:
        self._set_state(InputState.IDLE)

    # -- pointer --------------------------------------------------------------

    def _on_pointer_down(self, ev: PointerDown) -> None:
        self.pointer = (ev.x, ev.y)
        if ev.button in _PAN_BUTTONS:
            self._press = self.pointer
            self._set_state(InputState.PRESSED_MAYBE_DRAG)

    def _on_pointer_move(self, ev: PointerMove) -> None:
        last = self.pointer
        self.pointer = (ev.x, ev.y)
        if ev.buttons == 0 and self.state in (
            InputState.PRESSED_MAYBE_DRAG,
            InputState.DRAGGING,
        ):
            self._set_state(InputState.IDLE)
            return

        if self.state is InputState.PRESSED_MAYBE_DRAG:
            self._maybe_start_drag()
        elif self.state is InputState.DRAGGING:
            self.target.pan(ev.x - last[0], ev.y - last[1])

    def _on_pointer_up(self, ev: PointerUp) -> None:
        self.pointer = (ev.x, ev.y)
        if self.state is InputState.PRESSED_MAYBE_DRAG:
            self.target.select_at(ev.x, ev.y)
        if self.state in (InputState.PRESSED_MAYBE_DRAG, InputState.DRAGGING):
            self._set_state(InputState.IDLE)

    def _on_wheel(self, ev: Wheel) -> None:
        self.pointer = (ev.x, ev.y)
        if ev.delta_y > 0:
            self.target.zoom_at(-WHEEL_STEP, ev.x, ev.y)
        elif ev.delta_y < 0:
            self.target.zoom_at(WHEEL_STEP, ev.x, ev.y)

    # -- touch ----------------------------------------------------------------

    def _on_touch_start(self, ev: TouchStart) -> None:
        if not ev.touches:
            self._set_state(InputState.IDLE)
            return
        self.pointer = _midpoint(ev.touches)
        if len(ev.touches) >= 2:
            self._pinch_distance = _distance(ev.touches[0], ev.touches[1])
            self._set_state(InputState.PINCH_ZOOMING)
        elif self.state is InputState.IDLE:
            self._press = self.pointer
            self._set_state(InputState.PRESSED_MAYBE_DRAG)

    def _on_touch_move(self, ev: TouchMove) -> None:
        if not ev.touches:
            self._set_state(InputState.IDLE)
            return
        last = self.pointer
        self.pointer = _midpoint(ev.touches)

        if self.state is InputState.PRESSED_MAYBE_DRAG:
            self._maybe_start_drag()
            return
        if self.state in (InputState.DRAGGING, InputState.PINCH_ZOOMING):
            self.target.pan(self.pointer[0] - last[0], self.pointer[1] - last[1])
        if self.state is InputState.PINCH_ZOOMING and len(ev.touches) >= 2:
            distance = _distance(ev.touches[0], ev.touches[1])
            if self._pinch_distance > 0:
                delta = (distance - self._pinch_distance) / self._pinch_distance
                self.target.zoom_at(delta, *self.pointer)
            self._pinch_distance = distance

    def _on_touch_end(self, ev: TouchEnd) -> None:
        if not ev.touches:
            if self.state is InputState.PRESSED_MAYBE_DRAG:
                self.target.select_at(*self.pointer)
            self._set_state(InputState.IDLE)
            return

        self.pointer = _midpoint(ev.touches)
        if len(ev.touches) >= 2:
            self._pinch_distance = _distance(ev.touches[0], ev.touches[1])
        elif self.state is InputState.PINCH_ZOOMING:
            # the remaining finger keeps panning; it never turns into a tap
            self._set_state(InputState.DRAGGING)

    # -- keyboard -------------------------------------------------------------

    def _on_key(self, ev: KeyPress) -> None:
        key = ev.key
        if key in _NUDGE_KEYS:
            self.target.nudge(*_NUDGE_KEYS[key])
        elif key in _ZOOM_KEYS:
            self.target.zoom_at(_ZOOM_KEYS[key], *self.pointer)
        elif key in _CLEAR_KEYS:
            self.target.enter_digit(0)
        elif len(key) == 1 and key in "123456789":
            self.target.enter_digit(int(key))
        elif key == "Escape":
            self.target.clear_selection()

    # -- helpers --------------------------------------------------------------

    def _maybe_start_drag(self) -> None:
        if _distance(self._press, self.pointer) <= DRAG_THRESHOLD:
            return
        self._set_state(InputState.DRAGGING)
        self.target.pan(self.pointer[0] - self._press[0], self.pointer[1] - self._press[1])

    def _set_state(self, state: InputState) -> None:
        if state is not self.state:
            LOGGER.debug("Input %s -> %s", self.state.value, state.value)
            self.state = state
