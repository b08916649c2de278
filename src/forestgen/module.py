"""Branch modules: one growth unit with a fixed internal topology."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from .geometry import Rotator, Sphere, Vector3
from .growth import lay_out_children
from .light import bounding_sphere, light_exposure
from .models import Branch, BranchGraph, BranchNode, SortMark
from .prototypes import GraphPrototype
from .vigor import VigorAllocator, topological_sort

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class BranchModule:
    """Live instance of a graph prototype inside a plant's module tree."""

    id: int
    prototype: GraphPrototype
    graph: BranchGraph
    rng: random.Random
    maturity_age: float
    age: float = 0.0
    vigor: float = 0.0
    light_exposure: float = 0.0
    children: list["BranchModule"] = field(default_factory=list)
    shed: bool = False
    bounding_sphere: Sphere = field(default_factory=lambda: Sphere(center=(0.0, 0.0, 0.0), radius=1.0))
    orientation: Rotator = field(default_factory=Rotator)
    sort_mark: SortMark = SortMark.NONE

    @classmethod
    def create(
        cls,
        module_id: int,
        prototype: GraphPrototype,
        position: Vector3,
        orientation: Rotator,
        rng: random.Random,
    ) -> "BranchModule":
        graph = BranchGraph.from_prototype(prototype)
        module = cls(
            id=module_id,
            prototype=prototype,
            graph=graph,
            rng=rng,
            maturity_age=prototype.maturity_age,
            orientation=orientation,
        )
        graph.translate(0, position)
        graph.root.direction = orientation.rotate_vector(graph.root.direction)
        lay_out_children(graph, 0, straightness=1.0, rng=rng)
        module.calculate_bounding_sphere()
        logger.debug("Branch module %d created from prototype %r at %s", module_id, prototype.name, position)
        return module

    @property
    def is_mature(self) -> bool:
        return self.age > self.maturity_age

    def available_nodes(self) -> list[BranchNode]:
        return self.graph.available_nodes()

    def sort_nodes(self) -> list[BranchNode]:
        return topological_sort(self.graph.root, self._node_children)

    def terminal_nodes(self) -> list[BranchNode]:
        """Available terminal nodes in topological order."""

        return [
            node
            for node in self.sort_nodes()
            if node.is_terminal and self.graph.is_available(node)
        ]

    def _node_children(self, node: BranchNode) -> list[BranchNode]:
        return self.graph.available_children(node.id)

    def allocate_node_vigor(self, apical_control: float) -> list[BranchNode]:
        """Distribute the exposure held by terminal nodes over the module graph."""

        allocator = VigorAllocator(apical_control, self._node_children)
        return allocator.allocate(self.graph.root)

    def calculate_bounding_sphere(self) -> Sphere:
        self.bounding_sphere = bounding_sphere([node.position for node in self.available_nodes()])
        return self.bounding_sphere

    def calculate_light_exposure(self, neighbors: Iterable[Sphere]) -> float:
        self.light_exposure = light_exposure(self.bounding_sphere, neighbors)
        logger.debug("Branch module %d: light exposure %f", self.id, self.light_exposure)
        return self.light_exposure

    def attach_child(self, node: BranchNode, child: "BranchModule") -> bool:
        if self.graph.attach_child_module(node.id, child) is None:
            return False
        self.children.append(child)
        return True

    def detach_child(self, child: "BranchModule") -> Optional[int]:
        if child not in self.children:
            return None
        self.children.remove(child)
        return self.graph.detach_child_module(child)

    def iter_subtree(self) -> Iterator["BranchModule"]:
        yield self
        for child in self.children:
            yield from child.iter_subtree()

    def branches(self) -> list[Branch]:
        return list(self.graph.iter_branches(0))
