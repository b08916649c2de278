"""A plant: one tree of branch modules and its vigor budget."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from .geometry import ZERO, Vector3
from .growth import GrowthContext, grow_module
from .lifecycle import shed_module, should_shed
from .models import Branch
from .module import BranchModule
from .registry import ModuleRegistry
from .settings import PlantSettings
from .vigor import VigorAllocator

logger = logging.getLogger(__name__)


class PlantState(str, Enum):
    YOUNG = "Young"
    MATURE = "Mature"
    DEAD = "Dead"


def _module_children(module: BranchModule) -> list[BranchModule]:
    return module.children


@dataclass(eq=False)
class Plant:
    """Container for a module tree and its plant-level parameters."""

    registry: ModuleRegistry = field(repr=False)
    position: Vector3 = ZERO
    settings: PlantSettings = field(default_factory=PlantSettings)
    age: float = 0.0
    state: PlantState = PlantState.YOUNG
    root: Optional[BranchModule] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.settings = self.settings.clamped()
        self.root = self.registry.generate_module(self.position)

    @property
    def is_alive(self) -> bool:
        return self.state != PlantState.DEAD

    @property
    def apical_control(self) -> float:
        if self.state == PlantState.MATURE:
            return self.settings.apical_control_mature
        return self.settings.apical_control

    @property
    def determinacy(self) -> float:
        if self.state == PlantState.MATURE:
            return self.settings.determinacy_mature
        return self.settings.determinacy

    def root_vigor_cap(self) -> float:
        """Vigor the root may hold; falls linearly to zero after the max age."""

        cap = self.settings.max_root_vigor
        max_age = self.settings.max_age
        if self.age < max_age:
            return cap
        if max_age <= 0:
            return 0.0
        remaining = 1.0 - (self.age - max_age) / max_age
        return cap * max(0.0, min(1.0, remaining))

    def iter_modules(self) -> Iterable[BranchModule]:
        if self.root is None:
            return iter(())
        return self.root.iter_subtree()

    def calculate_vigor(self) -> list[BranchModule]:
        """Allocate vigor over the module tree, then shed starving modules.

        Module light exposures must be up to date before this is called.
        Returns the modules shed in this pass.
        """

        if self.root is None:
            return []
        allocator = VigorAllocator(self.apical_control, _module_children)
        sorted_modules = allocator.allocate(self.root, root_vigor_cap=self.root_vigor_cap())
        logger.debug("Plant: total exposure %f, root vigor %f", self.root.light_exposure, self.root.vigor)
        return self.shed_modules(sorted_modules)

    def shed_modules(self, modules: Sequence[BranchModule]) -> list[BranchModule]:
        parents = {child.id: module for module in modules for child in module.children}
        shed: list[BranchModule] = []
        for module in modules:
            if module.shed or not should_shed(module, self.settings):
                continue
            shed_module(module, parents.get(module.id), self.registry)
            shed.append(module)
            if module is self.root:
                self.root = None
                self.state = PlantState.DEAD
                logger.info(f"Plant at {self.position} died at age {self.age:.2f}")
        return shed

    def grow(self, time_step: float) -> None:
        if self.root is None:
            return
        context = GrowthContext(
            settings=self.settings,
            apical_control=self.apical_control,
            determinacy=self.determinacy,
            spawner=self.registry,
        )
        grow_module(self.root, context, time_step)

    def simulate(self, time_step: float = 1.0) -> None:
        """Advance one tick: vigor and shedding, then growth."""

        if not self.is_alive:
            logger.warning("Plant at %s is dead, nothing to simulate", self.position)
            return
        self.calculate_vigor()
        self.grow(time_step)
        self.age += time_step
        if self.state == PlantState.YOUNG and self.age >= self.settings.flowering_age:
            self.state = PlantState.MATURE
            logger.info(f"Plant at {self.position} matured at age {self.age:.2f}")

    def branches(self) -> list[Branch]:
        if self.root is None:
            return []
        return self.root.branches()
