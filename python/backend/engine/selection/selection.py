"""Selection cursor anchored in world space."""

from __future__ import annotations

import math

from backend.engine.tiling.mapper import BlockCoord, resolve, resolve_index
from backend.models.camera import CameraModel, Point, Viewport

NO_SELECTION: Point = (math.inf, math.inf)


class SelectionController:
    """Stores the selected world point and resolves it to a cell on demand.

    The point lives in world space, so panning keeps the same cell
    selected.  ``NO_SELECTION`` is what the render surface receives when
    nothing is selected.
    """

    def __init__(self) -> None:
        self.point: Point = NO_SELECTION

    @property
    def active(self) -> bool:
        return math.isfinite(self.point[0]) and math.isfinite(self.point[1])

    def select(self, point_screen: Point, camera: CameraModel, viewport: Viewport) -> None:
        self.point = camera.screen_to_world(point_screen, viewport)

    def clear(self) -> None:
        self.point = NO_SELECTION

    def nudge(self, dx: float, dy: float) -> None:
        """Shift the selected world point; ignored when nothing is selected."""
        if self.active:
            self.point = (self.point[0] + dx, self.point[1] + dy)

    def current_coord(self, n: int, m: int) -> BlockCoord | None:
        if not self.active:
            return None
        return resolve(self.point, n, m)

    def current_index(self, n: int, m: int) -> int | None:
        if not self.active:
            return None
        return resolve_index(self.point, n, m)
