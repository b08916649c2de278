"""Core structural primitives: branch nodes, segments and the module graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional

from .geometry import UP, ZERO, Vector3, add, normalize, sub
from .prototypes import GraphPrototype

if TYPE_CHECKING:
    from .module import BranchModule

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    ROOT = "Root"
    NORMAL = "Normal"
    CONNECTING = "Connecting"
    TERMINAL = "Terminal"


class SortMark(str, Enum):
    NONE = "None"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


@dataclass
class BranchNode:
    """Point of a module graph; ``id`` is its index in the graph arena."""

    id: int
    position: Vector3 = ZERO
    direction: Vector3 = UP
    age: float = 0.0
    vigor: float = 0.0
    light_exposure: float = 0.0
    type: NodeType = NodeType.TERMINAL
    parent_segment: Optional[int] = None
    child_segments: list[int] = field(default_factory=list)
    sort_mark: SortMark = SortMark.NONE

    @property
    def is_root(self) -> bool:
        return self.type == NodeType.ROOT

    @property
    def is_terminal(self) -> bool:
        return self.type == NodeType.TERMINAL


@dataclass
class BranchSegment:
    """Directed branch piece between two nodes.

    A connecting segment links a node of this graph to the root node of
    ``child_module``; its ``destination`` indexes that module's graph.
    """

    source: int
    destination: int
    depth: int = 0
    diameter: float = 0.0
    available: bool = False
    child_module: Optional["BranchModule"] = None

    @property
    def is_connecting(self) -> bool:
        return self.child_module is not None


@dataclass(frozen=True)
class Branch:
    """Render-facing description of one available segment."""

    start: Vector3
    end: Vector3
    diameter: float


@dataclass
class BranchGraph:
    """Arena of nodes and segments belonging to one branch module."""

    nodes: list[BranchNode] = field(default_factory=list)
    segments: list[BranchSegment] = field(default_factory=list)
    available: list[int] = field(default_factory=list)

    @classmethod
    def from_prototype(cls, prototype: GraphPrototype) -> "BranchGraph":
        graph = cls(nodes=[BranchNode(id=index) for index in range(prototype.node_count)])
        graph.root.type = NodeType.ROOT
        for (source, destination), depth in zip(prototype.edges, prototype.depths):
            index = len(graph.segments)
            graph.segments.append(BranchSegment(source=source, destination=destination, depth=depth))
            graph._add_child_segment(source, index)
            graph.nodes[destination].parent_segment = index
        for index in list(graph.root.child_segments):
            graph.make_available(index)
        return graph

    @property
    def root(self) -> BranchNode:
        return self.nodes[0]

    def _add_child_segment(self, node_index: int, segment_index: int) -> None:
        node = self.nodes[node_index]
        node.child_segments.append(segment_index)
        if node.type != NodeType.ROOT:
            node.type = NodeType.NORMAL

    def destination(self, segment: BranchSegment) -> BranchNode:
        if segment.child_module is not None:
            return segment.child_module.graph.root
        return self.nodes[segment.destination]

    def make_available(self, segment_index: int) -> None:
        segment = self.segments[segment_index]
        if segment.available:
            return
        segment.available = True
        self.available.append(segment_index)

    def available_child_segments(self, node_index: int) -> list[BranchSegment]:
        """Available outgoing segments, a connecting segment included."""

        return [
            self.segments[index]
            for index in self.nodes[node_index].child_segments
            if self.segments[index].available
        ]

    def available_children(self, node_index: int) -> list[BranchNode]:
        """Available child nodes inside this module."""

        return [
            self.nodes[segment.destination]
            for segment in self.available_child_segments(node_index)
            if not segment.is_connecting
        ]

    def child_nodes(self, node_index: int) -> list[BranchNode]:
        """Every child node inside this module, available or latent."""

        return [
            self.nodes[self.segments[index].destination]
            for index in self.nodes[node_index].child_segments
            if not self.segments[index].is_connecting
        ]

    def is_available(self, node: BranchNode) -> bool:
        if node.is_root:
            return True
        if node.parent_segment is None:
            return False
        return self.segments[node.parent_segment].available

    def available_nodes(self) -> list[BranchNode]:
        return [node for node in self.nodes if self.is_available(node)]

    def parent_position(self, node_index: int) -> Optional[Vector3]:
        parent = self.nodes[node_index].parent_segment
        if parent is None:
            return None
        return self.nodes[self.segments[parent].source].position

    def increase_age(self, node_index: int, delta_age: float) -> None:
        node = self.nodes[node_index]
        node.age += delta_age
        for child in self.available_children(node_index):
            self.increase_age(child.id, delta_age)

    def translate(self, node_index: int, translation: Vector3) -> None:
        """Move a node with its available subtree, attached modules included."""

        if translation == ZERO:
            return
        node = self.nodes[node_index]
        node.position = add(node.position, translation)
        for segment in self.available_child_segments(node_index):
            if segment.child_module is not None:
                segment.child_module.graph.translate(0, translation)
            else:
                self.translate(segment.destination, translation)

    def recalculate_direction(self, node_index: int) -> None:
        parent_position = self.parent_position(node_index)
        if parent_position is None:
            return
        node = self.nodes[node_index]
        node.direction = normalize(sub(node.position, parent_position), fallback=node.direction)

    def attach_child_module(self, node_index: int, child: "BranchModule") -> Optional[int]:
        """Hang ``child`` off a terminal node; returns the connecting segment index."""

        node = self.nodes[node_index]
        if not node.is_terminal:
            logger.warning("Branch node %d is %s, cannot attach module %d", node_index, node.type.value, child.id)
            return None
        index = len(self.segments)
        self.segments.append(
            BranchSegment(source=node_index, destination=0, available=True, child_module=child)
        )
        self.available.append(index)
        node.child_segments.append(index)
        node.type = NodeType.CONNECTING
        return index

    def detach_child_module(self, child: "BranchModule") -> Optional[int]:
        """Drop the connecting segment to ``child`` and reset its node to terminal."""

        for index in self.available:
            segment = self.segments[index]
            if segment.child_module is child:
                self.available.remove(index)
                node = self.nodes[segment.source]
                node.child_segments.clear()
                node.type = NodeType.TERMINAL
                return segment.source
        return None

    def iter_branches(self, node_index: int = 0) -> Iterator[Branch]:
        """Depth-first walk of available segments, crossing into child modules."""

        node = self.nodes[node_index]
        for segment in self.available_child_segments(node_index):
            child = self.destination(segment)
            yield Branch(start=node.position, end=child.position, diameter=segment.diameter)
            if segment.child_module is not None:
                yield from segment.child_module.graph.iter_branches(0)
            else:
                yield from self.iter_branches(segment.destination)
