from backend.engine.gamevalidator.validator import is_solved, mark_errors

__all__ = ["is_solved", "mark_errors"]
