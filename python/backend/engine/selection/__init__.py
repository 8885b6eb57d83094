from backend.engine.selection.selection import NO_SELECTION, SelectionController

__all__ = ["NO_SELECTION", "SelectionController"]
