"""Branch module graph prototypes and their validation."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from .exceptions import InvalidTopologyError

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]

MAX_CHILDREN = 5

DEFAULT_PROTOTYPES: dict[str, list[Edge]] = {
    "path": [(0, 1), (1, 2)],
    "fork": [(0, 1), (1, 2), (1, 3)],
    "whorl": [(0, 1), (1, 2), (1, 3), (1, 4)],
    "spray": [(0, 1), (1, 2), (1, 3), (1, 4), (2, 5), (3, 6), (4, 7)],
}


@dataclass(frozen=True)
class GraphPrototype:
    """Validated module topology.

    Node ids are dense (``0..node_count - 1``) in first-seen order and node 0
    is the root. ``depths[i]`` is the unfolding depth of ``edges[i]``.
    """

    name: str
    edges: Tuple[Edge, ...]
    depths: Tuple[int, ...]
    node_count: int
    max_depth: int

    @property
    def maturity_age(self) -> float:
        return float(self.max_depth - 1)


def _check_acyclic(name: str, node_count: int, children: Sequence[Sequence[int]]) -> None:
    unvisited, in_progress, done = 0, 1, 2
    marks = [unvisited] * node_count

    def visit(node: int) -> None:
        if marks[node] == done:
            return
        if marks[node] == in_progress:
            raise InvalidTopologyError(f"Prototype {name!r}: graph contains a cycle through node {node}")
        marks[node] = in_progress
        for child in children[node]:
            visit(child)
        marks[node] = done

    for node in range(node_count):
        visit(node)


def validate_prototype(name: str, edges: Iterable[Sequence[int]]) -> GraphPrototype:
    """Check an edge list and renumber it into a :class:`GraphPrototype`.

    Raises:
        InvalidTopologyError: The edge list is empty, has a self-loop or a
            duplicate edge, gives a node more than five children, contains a
            cycle, or leaves nodes unreachable from the root.
    """

    raw_edges = [(int(edge[0]), int(edge[1])) for edge in edges]
    if not raw_edges:
        raise InvalidTopologyError(f"Prototype {name!r}: graph must have at least 1 edge")

    ids: dict[int, int] = {}
    seen: set[Edge] = set()
    for source, destination in raw_edges:
        if source == destination:
            raise InvalidTopologyError(f"Prototype {name!r}: self-loop on node {source}")
        if (source, destination) in seen:
            raise InvalidTopologyError(f"Prototype {name!r}: duplicate edge ({source}, {destination})")
        seen.add((source, destination))
        ids.setdefault(source, len(ids))
        ids.setdefault(destination, len(ids))

    renumbered = tuple((ids[source], ids[destination]) for source, destination in raw_edges)
    node_count = len(ids)

    child_edges: list[list[int]] = [[] for _ in range(node_count)]
    for index, (source, _) in enumerate(renumbered):
        child_edges[source].append(index)
    for node, outgoing in enumerate(child_edges):
        if len(outgoing) > MAX_CHILDREN:
            raise InvalidTopologyError(
                f"Prototype {name!r}: node {node} has {len(outgoing)} children (max {MAX_CHILDREN})"
            )

    _check_acyclic(
        name,
        node_count,
        [[renumbered[index][1] for index in outgoing] for outgoing in child_edges],
    )

    # Level-synchronised BFS; None marks the end of a level.
    depths = [0] * len(renumbered)
    discovered = {0}
    queue: deque[int | None] = deque([0, None])
    level = 0
    while queue:
        node = queue.popleft()
        if node is None:
            if not queue:
                break
            queue.append(None)
            level += 1
            continue
        for index in child_edges[node]:
            depths[index] = level
            destination = renumbered[index][1]
            if destination not in discovered:
                discovered.add(destination)
                queue.append(destination)

    if len(discovered) != node_count:
        raise InvalidTopologyError(f"Prototype {name!r}: the graph is not connected")

    prototype = GraphPrototype(
        name=name,
        edges=renumbered,
        depths=tuple(depths),
        node_count=node_count,
        max_depth=level,
    )
    logger.debug("Prototype %r validated: %d nodes, max depth %d", name, node_count, level)
    return prototype
