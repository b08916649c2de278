"""Per-tick module development: aging, unfolding, elongation and tropism."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from math import sqrt
from typing import TYPE_CHECKING, Optional

from .geometry import DOWN, UP, ZERO, Rotator, Vector3, add, distance, normalize, scale, smoothstep, sub
from .lifecycle import ModuleSpawner, spawn_child_modules
from .models import BranchGraph, BranchNode, BranchSegment
from .settings import PlantSettings

if TYPE_CHECKING:
    from .module import BranchModule

logger = logging.getLogger(__name__)

MAX_TILT_DEGREES = 10.0
MIN_TROPISM_AGE = 2.0
MIN_TROPISM_HEIGHT = 0.1

PAIR_OFFSETS: tuple[Vector3, ...] = ((0.0, 1.0, 1.0), (0.0, -1.0, 1.0))
QUAD_OFFSETS: tuple[Vector3, ...] = ((1.0, 0.0, 1.0), (-1.0, 0.0, 1.0)) + PAIR_OFFSETS


@dataclass(frozen=True)
class GrowthContext:
    """Everything a module needs from its plant to develop for one tick."""

    settings: PlantSettings
    apical_control: float
    determinacy: float
    spawner: Optional[ModuleSpawner] = None
    gravity: Vector3 = DOWN


def _place(graph: BranchGraph, child: BranchNode, parent: BranchNode, offset: Vector3) -> None:
    target = add(parent.position, offset)
    graph.translate(child.id, sub(target, child.position))
    graph.recalculate_direction(child.id)


def lay_out_children(graph: BranchGraph, parent_index: int, straightness: float, rng: random.Random) -> None:
    """Place every child of a node around the node's own direction.

    With an odd number of children the first one grows straight up, tilted
    by up to ten degrees scaled by ``1 - straightness``. The others come in
    opposite pairs sharing one random yaw, so each call fans out differently.
    """

    parent = graph.nodes[parent_index]
    pending = graph.child_nodes(parent_index)
    if not pending:
        return
    parent_rotation = Rotator.from_up_to(parent.direction)

    if len(pending) % 2 == 1:
        tilt = Rotator(
            pitch=rng.uniform(-MAX_TILT_DEGREES, MAX_TILT_DEGREES),
            yaw=0.0,
            roll=rng.uniform(-MAX_TILT_DEGREES, MAX_TILT_DEGREES),
        ) * (1.0 - straightness)
        _place(graph, pending.pop(0), parent, parent_rotation.rotate_vector(tilt.rotate_vector(UP)))

    if not pending:
        return

    spin = Rotator(yaw=rng.uniform(0.0, 360.0))
    layout = QUAD_OFFSETS if len(pending) == 4 else PAIR_OFFSETS
    for child, offset in zip(pending, layout):
        _place(graph, child, parent, parent_rotation.rotate_vector(spin.rotate_vector(offset)))


def growth_rate(vigor: float, settings: PlantSettings) -> float:
    span = settings.vigor_max - settings.vigor_min
    ratio = (vigor - settings.vigor_min) / span if span > 0.0 else 0.0
    return smoothstep(max(0.0, min(1.0, ratio))) * settings.growth_potential


def unfold(module: "BranchModule", straightness: float) -> list[int]:
    """Make latent segments available once the module is old enough.

    Returns the indices of the segments that unfolded.
    """

    graph = module.graph
    unfolded: list[int] = []
    new_parents: list[int] = []
    for index, segment in enumerate(graph.segments):
        if segment.available or segment.is_connecting:
            continue
        if segment.depth <= int(module.age):
            graph.make_available(index)
            graph.increase_age(segment.destination, module.age - segment.depth)
            unfolded.append(index)
            if segment.source not in new_parents:
                new_parents.append(segment.source)

    for parent_index in new_parents:
        lay_out_children(graph, parent_index, straightness, module.rng)

    if unfolded:
        logger.debug("Branch module %d: unfolded segments %s", module.id, unfolded)
    return unfolded


def increase_age(module: "BranchModule", delta_age: float, straightness: float) -> None:
    module.age += delta_age
    module.graph.increase_age(0, delta_age)
    logger.debug("Branch module %d: aging by %f, age now %f", module.id, delta_age, module.age)
    unfold(module, straightness)


def tropism_offset(position: Vector3, branch_age: float, settings: PlantSettings, gravity: Vector3 = DOWN) -> Vector3:
    """Decaying tropism displacement for a node of the given age."""

    if branch_age < MIN_TROPISM_AGE:
        return ZERO
    denominator = branch_age + settings.tropism_decay
    if denominator == 0.0:
        return ZERO
    strength = settings.tropism_angle * -1.0 * settings.tropism_strength
    offset = scale(gravity, settings.tropism_decay * strength / denominator)
    if position[2] + offset[2] < 0.0:
        offset = (offset[0], offset[1], MIN_TROPISM_HEIGHT - position[2])
    return offset


def grow_segment(graph: BranchGraph, segment: BranchSegment, settings: PlantSettings, gravity: Vector3 = DOWN) -> None:
    """Thicken, elongate and bend one available segment."""

    if segment.child_module is not None:
        node_graph = segment.child_module.graph
        node_index = 0
        anchor = graph.nodes[segment.source].position
    else:
        node_graph = graph
        node_index = segment.destination
        anchor = graph.parent_position(node_index) or graph.nodes[segment.source].position
    node = node_graph.nodes[node_index]
    branch_age = node.age

    child_segments = node_graph.available_child_segments(node_index)
    if child_segments:
        segment.diameter = sqrt(sum(child.diameter**2 for child in child_segments))
    else:
        segment.diameter = settings.default_thickness

    target_length = min(settings.max_branch_length, settings.length_scale * branch_age)
    change = target_length - distance(anchor, node.position)
    node_graph.translate(node_index, scale(node.direction, change))

    node_graph.translate(node_index, tropism_offset(node.position, branch_age, settings, gravity))
    node.direction = normalize(sub(node.position, anchor), fallback=node.direction)


def grow_module(module: "BranchModule", context: GrowthContext, time_step: float) -> None:
    """Develop a module and, first, its child modules.

    A module below the minimum vigor does not develop, and neither does
    anything attached to it.
    """

    settings = context.settings
    if module.vigor < settings.vigor_min:
        logger.debug("Branch module %d: vigor too low (%f)", module.id, module.vigor)
        return

    for child in list(module.children):
        if child.shed:
            module.detach_child(child)
            continue
        grow_module(child, context, time_step)

    module.vigor = min(module.vigor, settings.vigor_max)
    delta_age = growth_rate(module.vigor, settings) * time_step
    increase_age(module, delta_age, settings.straightness)

    if module.is_mature:
        spawn_child_modules(module, context)

    graph = module.graph
    for index in reversed(list(graph.available)):
        grow_segment(graph, graph.segments[index], settings, context.gravity)

    module.calculate_bounding_sphere()
