"""Vector, rotator and sphere helpers for branch geometry."""

from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, degrees, isclose, pi, radians, sin, sqrt
from typing import Tuple

Vector3 = Tuple[float, float, float]

ZERO: Vector3 = (0.0, 0.0, 0.0)
UP: Vector3 = (0.0, 0.0, 1.0)
DOWN: Vector3 = (0.0, 0.0, -1.0)


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(vector: Vector3, weight: float) -> Vector3:
    return (vector[0] * weight, vector[1] * weight, vector[2] * weight)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def length(vector: Vector3) -> float:
    return sqrt(dot(vector, vector))


def distance(a: Vector3, b: Vector3) -> float:
    return length(sub(a, b))


def distance_squared(a: Vector3, b: Vector3) -> float:
    delta = sub(a, b)
    return dot(delta, delta)


def normalize(vector: Vector3, fallback: Vector3 = ZERO, tolerance: float = 1e-8) -> Vector3:
    """Unit vector along ``vector``, or ``fallback`` when it is too short."""

    size = length(vector)
    if size <= tolerance:
        return fallback
    return scale(vector, 1.0 / size)


def mean(points: list[Vector3]) -> Vector3:
    if not points:
        return ZERO
    count = float(len(points))
    return (
        sum(point[0] for point in points) / count,
        sum(point[1] for point in points) / count,
        sum(point[2] for point in points) / count,
    )


def smoothstep(x: float) -> float:
    """Cubic Hermite ramp S(x) = 3x^2 - 2x^3."""

    return 3.0 * x * x - 2.0 * x * x * x


@dataclass(frozen=True)
class Rotator:
    """Euler rotation in degrees (pitch about Y, yaw about Z, roll about X)."""

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0

    def __sub__(self, other: "Rotator") -> "Rotator":
        return Rotator(self.pitch - other.pitch, self.yaw - other.yaw, self.roll - other.roll)

    def __mul__(self, factor: float) -> "Rotator":
        return Rotator(self.pitch * factor, self.yaw * factor, self.roll * factor)

    def rotate_vector(self, vector: Vector3) -> Vector3:
        sp, cp = sin(radians(self.pitch)), cos(radians(self.pitch))
        sy, cy = sin(radians(self.yaw)), cos(radians(self.yaw))
        sr, cr = sin(radians(self.roll)), cos(radians(self.roll))

        x_axis = (cp * cy, cp * sy, sp)
        y_axis = (sr * sp * cy - cr * sy, sr * sp * sy + cr * cy, -sr * cp)
        z_axis = (-(cr * sp * cy + sr * sy), cy * sr - cr * sp * sy, cr * cp)

        return add(
            add(scale(x_axis, vector[0]), scale(y_axis, vector[1])),
            scale(z_axis, vector[2]),
        )

    @classmethod
    def from_direction(cls, vector: Vector3) -> "Rotator":
        """Rotator that turns the X axis onto ``vector`` (no roll)."""

        yaw = degrees(atan2(vector[1], vector[0]))
        pitch = degrees(atan2(vector[2], sqrt(vector[0] ** 2 + vector[1] ** 2)))
        return cls(pitch=pitch, yaw=yaw, roll=0.0)

    @classmethod
    def from_up_to(cls, vector: Vector3) -> "Rotator":
        """Rotator that turns the up vector onto ``vector``."""

        return cls.from_direction(vector) - cls.from_direction(UP)


@dataclass(frozen=True)
class Sphere:
    center: Vector3
    radius: float

    @property
    def volume(self) -> float:
        return 4.0 / 3.0 * pi * self.radius**3

    def intersects(self, other: "Sphere") -> bool:
        reach = self.radius + other.radius
        return distance_squared(self.center, other.center) <= reach * reach


def sphere_intersection_volume(sphere: Sphere, other: Sphere) -> float:
    """Volume of the lens shared by two intersecting spheres.

    Raises:
        ValueError: The spheres do not touch.
    """

    d = distance(sphere.center, other.center)
    big_r = sphere.radius
    r = other.radius
    if d > big_r + r and not isclose(d, big_r + r):
        raise ValueError(f"Spheres do not intersect (d={d}, R={big_r}, r={r})")

    # One sphere inside the other, including concentric spheres.
    if d + min(big_r, r) <= max(big_r, r):
        smaller = min(big_r, r)
        return 4.0 / 3.0 * pi * smaller**3

    return (
        pi
        * (big_r + r - d) ** 2
        * (d * d + 2.0 * d * r - 3.0 * r * r + 2.0 * d * big_r + 6.0 * r * big_r - 3.0 * big_r * big_r)
        / (12.0 * d)
    )
