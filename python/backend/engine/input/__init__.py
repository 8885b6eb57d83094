from backend.engine.input.events import (
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
from backend.engine.input.machine import InputState, InputStateMachine

__all__ = [
    "InputEvent",
    "InputState",
    "InputStateMachine",
    "KeyPress",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "TouchEnd",
    "TouchMove",
    "TouchStart",
    "Wheel",
]
