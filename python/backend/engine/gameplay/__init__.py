from backend.engine.gameplay.game import AppMode, GameSession

__all__ = ["AppMode", "GameSession"]
