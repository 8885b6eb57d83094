from backend.engine.tiling.layout import GridLayout, cell_index
from backend.engine.tiling.mapper import BlockCoord, resolve, resolve_index

__all__ = ["BlockCoord", "GridLayout", "cell_index", "resolve", "resolve_index"]
