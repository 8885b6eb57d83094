"""Frontend-neutral input events.  All coordinates are screen pixels."""

from __future__ import annotations

from dataclasses import dataclass, field

from backend.models.camera import Point

BUTTON_LEFT = 1
BUTTON_MIDDLE = 2
BUTTON_RIGHT = 3


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float
    button: int = BUTTON_LEFT


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float
    buttons: int = 0  # number of buttons currently held


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float
    button: int = BUTTON_LEFT


@dataclass(frozen=True)
class Wheel:
    """Scroll notch; ``delta_y > 0`` scrolls away from the user (zoom out)."""

    x: float
    y: float
    delta_y: float


@dataclass(frozen=True)
class TouchStart:
    touches: tuple[Point, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TouchMove:
    touches: tuple[Point, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TouchEnd:
    """Carries the contacts that are *still* down after the release."""

    touches: tuple[Point, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class KeyPress:
    key: str  # "ArrowLeft", "+", "5", "Escape", ...


InputEvent = PointerDown | PointerMove | PointerUp | Wheel | TouchStart | TouchMove | TouchEnd | KeyPress
