"""Registry of graph prototypes and live branch modules."""

from __future__ import annotations

import logging
import random
from typing import Mapping, Optional, Sequence

from .exceptions import ConfigurationError
from .geometry import Rotator, Sphere, Vector3
from .module import BranchModule
from .prototypes import DEFAULT_PROTOTYPES, GraphPrototype, validate_prototype
from .settings import DEFAULT_MAX_MODULES

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """Tracks every live module of a run and answers neighbour queries.

    Once the live population reaches ``max_modules`` spawning is disabled for
    the rest of the run, even if modules are shed later.
    """

    def __init__(
        self,
        prototypes: Optional[Mapping[str, Sequence[Sequence[int]]]] = None,
        max_modules: int = DEFAULT_MAX_MODULES,
        seed: int = 0,
    ):
        self.max_modules = max_modules
        self.seed = seed
        self.modules: list[BranchModule] = []
        self._prototypes: dict[str, GraphPrototype] = {}
        self._next_id = 0
        self._spawning_enabled = True
        if prototypes is None:
            prototypes = DEFAULT_PROTOTYPES
        for name, edges in prototypes.items():
            self.register_prototype(name, edges)

    @property
    def created(self) -> int:
        """Number of modules generated so far, shed ones included."""

        return self._next_id

    def __len__(self) -> int:
        return len(self.modules)

    def __contains__(self, module: object) -> bool:
        return module in self.modules

    @property
    def prototypes(self) -> dict[str, GraphPrototype]:
        return dict(self._prototypes)

    def register_prototype(self, name: str, edges: Sequence[Sequence[int]]) -> GraphPrototype:
        prototype = validate_prototype(name, edges)
        self._prototypes[name] = prototype
        logger.info(f"Registered module prototype {name!r} ({prototype.node_count} nodes)")
        return prototype

    def select_prototype(self) -> GraphPrototype:
        """Prototype for the next module; always the first one registered."""

        if not self._prototypes:
            raise ConfigurationError("No module prototypes registered")
        return next(iter(self._prototypes.values()))

    @property
    def spawn_permitted(self) -> bool:
        return self._spawning_enabled

    def generate_module(self, position: Vector3, orientation: Rotator = Rotator()) -> BranchModule:
        module_id = self._next_id
        self._next_id += 1
        module = BranchModule.create(
            module_id,
            self.select_prototype(),
            position,
            orientation,
            random.Random(self.seed * 1_000_003 + module_id),
        )
        self.modules.append(module)
        if self._spawning_enabled and len(self.modules) >= self.max_modules:
            self._spawning_enabled = False
            logger.info(f"Module cap of {self.max_modules} reached, spawning disabled")
        return module

    def remove_module(self, module: BranchModule) -> bool:
        if module not in self.modules:
            return False
        self.modules.remove(module)
        return True

    def neighbor_spheres(self, module: BranchModule) -> list[Sphere]:
        sphere = module.bounding_sphere
        neighbors = [
            other.bounding_sphere
            for other in self.modules
            if other is not module and other.bounding_sphere.intersects(sphere)
        ]
        logger.debug("Branch module %d: %d neighbours", module.id, len(neighbors))
        return neighbors

    def calculate_light_exposures(self) -> None:
        for module in self.modules:
            module.calculate_light_exposure(self.neighbor_spheres(module))
