"""Two-pass vigor allocation shared by node and module hierarchies.

Light exposure is gathered basipetally (leaves to root) and the resulting
vigor is handed back acropetally (root to leaves), biased towards the main
child by the apical control factor.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, Sequence, TypeVar

from .exceptions import InvalidTopologyError
from .models import SortMark

logger = logging.getLogger(__name__)


class VigorEntity(Protocol):
    id: int
    light_exposure: float
    vigor: float
    sort_mark: SortMark


T = TypeVar("T", bound=VigorEntity)
ChildrenOf = Callable[[T], Sequence[T]]


def topological_sort(root: T, children: ChildrenOf) -> list[T]:
    """Depth-first postorder from ``root``: children always precede parents.

    Raises:
        InvalidTopologyError: A child leads back to an entity still being visited.
    """

    sorted_entities: list[T] = []
    touched: list[T] = []

    def visit(entity: T) -> None:
        if entity.sort_mark == SortMark.DONE:
            return
        if entity.sort_mark == SortMark.IN_PROGRESS:
            raise InvalidTopologyError(f"Graph is not a DAG: entity {entity.id} reached twice on one path")
        entity.sort_mark = SortMark.IN_PROGRESS
        touched.append(entity)
        for child in children(entity):
            visit(child)
        entity.sort_mark = SortMark.DONE
        sorted_entities.append(entity)

    try:
        visit(root)
    finally:
        for entity in touched:
            entity.sort_mark = SortMark.NONE
    return sorted_entities


def split_vigor(vigor: float, main_exposure: float, total_exposure: float, apical_control: float) -> tuple[float, float]:
    """Return ``(main, lateral)`` vigor for a parent with several children."""

    lateral_exposure = total_exposure - main_exposure
    main_weight = apical_control * main_exposure
    denominator = main_weight + (1.0 - apical_control) * lateral_exposure
    if main_exposure == 0.0 or denominator == 0.0:
        main_vigor = 0.0
    else:
        main_vigor = vigor * main_weight / denominator
    return main_vigor, vigor - main_vigor


class VigorAllocator:
    """Redistributes light exposure as vigor over a tree of entities."""

    def __init__(self, apical_control: float, children: ChildrenOf):
        self.apical_control = apical_control
        self.children = children

    def accumulate_exposure(self, sorted_entities: Sequence[T]) -> None:
        for entity in sorted_entities:
            entity.light_exposure += sum(child.light_exposure for child in self.children(entity))

    def distribute(self, sorted_entities: Sequence[T], root_vigor: float) -> None:
        root = sorted_entities[-1]
        root.vigor = root_vigor
        for entity in reversed(sorted_entities):
            entity_children = list(self.children(entity))
            if len(entity_children) == 1:
                entity_children[0].vigor = entity.vigor
            elif len(entity_children) > 1:
                main_child = min(entity_children, key=lambda child: child.id)
                main_vigor, lateral_vigor = split_vigor(
                    entity.vigor,
                    main_child.light_exposure,
                    entity.light_exposure,
                    self.apical_control,
                )
                for child in entity_children:
                    child.vigor = main_vigor if child is main_child else lateral_vigor

    def allocate(self, root: T, root_vigor_cap: Optional[float] = None) -> list[T]:
        """Run both passes from ``root``; returns the topological order used."""

        sorted_entities = topological_sort(root, self.children)
        self.accumulate_exposure(sorted_entities)
        total_exposure = root.light_exposure
        root_vigor = total_exposure if root_vigor_cap is None else min(total_exposure, root_vigor_cap)
        logger.debug("Allocating vigor %f from total exposure %f", root_vigor, total_exposure)
        self.distribute(sorted_entities, root_vigor)
        return sorted_entities
