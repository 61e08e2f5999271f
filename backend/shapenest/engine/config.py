"""Editor configuration: canvas size and geometric tolerances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shapenest.config import Settings


@dataclass
class EditorConfig:
    """Controls how shapes are built and validated."""

    # Root canvas, centred at (width / 2, height / 2)
    canvas_width: float = 640.0
    canvas_height: float = 480.0

    # Circles are polygons with a fixed number of samples, independent of radius
    circle_points: int = 100

    # Report overlap for parallel edges that lie on the same line
    detect_collinear_overlap: bool = True

    def __post_init__(self) -> None:
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"Canvas must have positive size, got {self.canvas_width}x{self.canvas_height}"
            )
        if self.circle_points < 3:
            raise ValueError(f"circle_points must be at least 3, got {self.circle_points}")

    @classmethod
    def from_settings(cls, settings: Settings) -> EditorConfig:
        return cls(
            canvas_width=settings.canvas_width,
            canvas_height=settings.canvas_height,
            circle_points=settings.circle_points,
            detect_collinear_overlap=settings.detect_collinear_overlap,
        )
