"""Point and Transform value types."""

from __future__ import annotations

from dataclasses import dataclass, field

from shapenest.utils.geometry import rotate_about


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0

    def rotate_around(self, center: Point, angle: float) -> None:
        """Rotate this point in place about ``center`` by ``angle`` degrees."""
        self.x, self.y = rotate_about(self.x, self.y, (center.x, center.y), angle)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Transform:
    """Placement relative to the parent's local frame.

    ``rotation`` is in degrees and never normalised; ``scale`` is
    per-axis.
    """

    position: Point = field(default_factory=Point)
    rotation: float = 0.0
    scale: Point = field(default_factory=lambda: Point(1.0, 1.0))

    @classmethod
    def default(cls) -> Transform:
        return cls(Point(0.0, 0.0), 0.0, Point(1.0, 1.0))

    @classmethod
    def zero(cls) -> Transform:
        return cls(Point(0.0, 0.0), 0.0, Point(0.0, 0.0))

    def add(self, other: Transform) -> Transform:
        """Sum positions and rotations, multiply scales component-wise."""
        return Transform(
            Point(self.position.x + other.position.x, self.position.y + other.position.y),
            self.rotation + other.rotation,
            Point(self.scale.x * other.scale.x, self.scale.y * other.scale.y),
        )
