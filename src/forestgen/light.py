"""Light competition between module bounding spheres."""

from __future__ import annotations

import logging
from math import exp, sqrt
from typing import Iterable, Sequence

from .geometry import Rotator, Sphere, Vector3, distance_squared, mean, sphere_intersection_volume

logger = logging.getLogger(__name__)

# Squared radius used when every node of a module sits on one point.
DEGENERATE_RADIUS_SQUARED = 10.0


def bounding_sphere(positions: Sequence[Vector3]) -> Sphere:
    """Sphere around the mean of ``positions`` reaching the farthest one."""

    center = mean(list(positions))
    radius_squared = max((distance_squared(center, position) for position in positions), default=0.0)
    if radius_squared <= 0.0:
        radius_squared = DEGENERATE_RADIUS_SQUARED
    return Sphere(center=center, radius=sqrt(radius_squared))


def collision_volume(sphere: Sphere, neighbors: Iterable[Sphere]) -> float:
    collisions = 0.0
    for neighbor in neighbors:
        collisions += sphere_intersection_volume(sphere, neighbor)
    return collisions


def collision_score(sphere: Sphere, neighbors: Iterable[Sphere]) -> float:
    """Shared volume relative to the sphere's own volume; may exceed 1."""

    return collision_volume(sphere, neighbors) / sphere.volume


def exposure_from_collisions(score: float) -> float:
    return max(0.0, min(1.0, exp(-score)))


def light_exposure(sphere: Sphere, neighbors: Iterable[Sphere]) -> float:
    score = collision_score(sphere, neighbors)
    exposure = exposure_from_collisions(score)
    logger.debug("Collision score %f gives light exposure %f", score, exposure)
    return exposure


def orientate(neighbors: Sequence[Sphere], initial_orientation: Rotator) -> Rotator:
    """Orientation of a freshly attached module.

    Extension point for optimising the orientation against collisions and
    tropism; the initial orientation is kept as is.
    """

    return initial_orientation
