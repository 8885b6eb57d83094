from backend.engine.gamestate.state import PuzzleStateStore

__all__ = ["PuzzleStateStore"]
