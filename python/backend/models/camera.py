"""Camera model: pan translation plus a bounded zoom level."""

from __future__ import annotations

from dataclasses import dataclass, field

from backend.utils.logger import get_logger

LOGGER = get_logger(__name__)

ZOOM_MIN = -2.0
ZOOM_MAX = 7.0
DEFAULT_ZOOM = 1.0
SCALE_K = 3 / 256  # world units per screen pixel at zoom level 0
KEY_PAN_PIXELS = 0.333 * 128

Point = tuple[float, float]


def inv_scale_for(zoom_level: float) -> float:
    return 2**zoom_level * SCALE_K


@dataclass(frozen=True)
class Viewport:
    """Screen size in pixels. Read-only input to the transforms."""

    width: float
    height: float

    def center(self) -> Point:
        return (0.5 * self.width, 0.5 * self.height)


@dataclass
class CameraModel:
    """World-space pan offset and zoom.

    Screen y grows downwards while ``translate[1]`` grows upwards, hence
    the sign flip on every y term.  ``inv_scale`` is stored rather than
    derived: a zoom request that leaves ``[ZOOM_MIN, ZOOM_MAX]`` clamps the
    level but must leave the scale untouched.
    """

    translate: list[float] = field(default_factory=lambda: [0.0, 0.0])
    zoom_level: float = DEFAULT_ZOOM
    inv_scale: float = field(init=False)

    def __post_init__(self) -> None:
        if not ZOOM_MIN <= self.zoom_level <= ZOOM_MAX:
            raise ValueError(
                f"zoom level {self.zoom_level} outside [{ZOOM_MIN}, {ZOOM_MAX}]"
            )
        self.translate = [float(self.translate[0]), float(self.translate[1])]
        self.inv_scale = inv_scale_for(self.zoom_level)

    # -- transforms -----------------------------------------------------------

    def screen_to_world(self, point: Point, viewport: Viewport) -> Point:
        cx, cy = viewport.center()
        return (
            (point[0] - cx) * self.inv_scale + self.translate[0],
            (point[1] - cy) * self.inv_scale - self.translate[1],
        )

    def world_to_screen(self, point: Point, viewport: Viewport) -> Point:
        cx, cy = viewport.center()
        return (
            (point[0] - self.translate[0]) / self.inv_scale + cx,
            (point[1] + self.translate[1]) / self.inv_scale + cy,
        )

    def key_step(self) -> float:
        """World distance covered by one keyboard pan step."""
        return KEY_PAN_PIXELS * self.inv_scale

    # -- mutation -------------------------------------------------------------

    def pan(self, dx: float, dy: float) -> None:
        """Drag the view by a screen-pixel delta."""
        self.translate[0] -= dx * self.inv_scale
        self.translate[1] += dy * self.inv_scale

    def shift(self, dx: float, dy: float) -> None:
        """Move the view so the world point under the screen moves by (dx, dy)."""
        self.translate[0] += dx
        self.translate[1] -= dy

    def zoom(self, delta: float, anchor: Point, center: Point) -> bool:
        """Zoom by ``delta`` levels keeping the world point under ``anchor``.

        Positive deltas zoom in.  Returns False when the request was a
        no-op or was rejected at a bound.
        """
        if delta == 0:
            return False

        self.zoom_level -= delta
        if self.zoom_level < ZOOM_MIN:
            self.zoom_level = ZOOM_MIN
            LOGGER.debug("Zoom rejected at lower bound")
            return False
        if self.zoom_level > ZOOM_MAX:
            self.zoom_level = ZOOM_MAX
            LOGGER.debug("Zoom rejected at upper bound")
            return False

        old_inv_scale = self.inv_scale
        self.inv_scale = inv_scale_for(self.zoom_level)
        ratio = (self.inv_scale - old_inv_scale) / old_inv_scale

        dx = (anchor[0] - center[0]) * old_inv_scale
        dy = (anchor[1] - center[1]) * old_inv_scale
        self.translate[0] -= ratio * dx
        self.translate[1] += ratio * dy
        return True
