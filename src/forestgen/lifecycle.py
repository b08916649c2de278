"""Module spawning and shedding policies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from .geometry import Rotator, Sphere, Vector3
from .light import orientate
from .models import BranchNode
from .settings import PlantSettings

if TYPE_CHECKING:
    from .growth import GrowthContext
    from .module import BranchModule

logger = logging.getLogger(__name__)

SHED_MIN_AGE = 2.0


class ModuleSpawner(Protocol):
    """What the lifecycle needs from the live-module registry."""

    @property
    def spawn_permitted(self) -> bool: ...

    def generate_module(self, position: Vector3, orientation: Rotator) -> "BranchModule": ...

    def neighbor_spheres(self, module: "BranchModule") -> list[Sphere]: ...

    def remove_module(self, module: "BranchModule") -> bool: ...


def attach_new_module(module: "BranchModule", node: BranchNode, context: "GrowthContext") -> Optional["BranchModule"]:
    spawner = context.spawner
    if spawner is None:
        return None
    initial_orientation = Rotator.from_up_to(node.direction)
    child = spawner.generate_module(node.position, initial_orientation)
    child.orientation = orientate(spawner.neighbor_spheres(child), initial_orientation)
    child.vigor = module.vigor * context.determinacy / context.settings.vigor_max
    if not module.attach_child(node, child):
        spawner.remove_module(child)
        return None
    logger.info("Branch module %d: spawned module %d at node %d", module.id, child.id, node.id)
    return child


def spawn_child_modules(module: "BranchModule", context: "GrowthContext") -> list["BranchModule"]:
    """Grow new modules from the vigorous, upper terminal nodes of a mature module."""

    spawner = context.spawner
    if spawner is None or not spawner.spawn_permitted:
        return []

    terminal_nodes = module.terminal_nodes()
    if not terminal_nodes:
        return []

    share = module.light_exposure / len(terminal_nodes)
    for node in module.graph.nodes:
        node.light_exposure = 0.0
    for node in terminal_nodes:
        node.light_exposure = share
    module.allocate_node_vigor(context.apical_control)

    settings = context.settings
    center_height = module.bounding_sphere.center[2]
    spawned: list["BranchModule"] = []
    for node in terminal_nodes:
        logger.debug("Branch module %d: terminal node %d vigor %f", module.id, node.id, node.vigor)
        if node.vigor <= settings.vigor_min or node.position[2] <= center_height:
            continue
        if not spawner.spawn_permitted:
            break
        child = attach_new_module(module, node, context)
        if child is not None:
            spawned.append(child)
    return spawned


def should_shed(module: "BranchModule", settings: PlantSettings) -> bool:
    return module.age > SHED_MIN_AGE and module.vigor < settings.vigor_min


def shed_module(module: "BranchModule", parent: Optional["BranchModule"], spawner: ModuleSpawner) -> bool:
    """Detach a module with its subtree; returns False if it was already shed."""

    if module.shed:
        return False
    for member in module.iter_subtree():
        if not member.shed:
            member.shed = True
            spawner.remove_module(member)
    if parent is not None:
        parent.detach_child(module)
    logger.info("Branch module %d shed (age %f, vigor %f)", module.id, module.age, module.vigor)
    return True
