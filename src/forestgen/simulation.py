"""Tick loop over a population of plants sharing one module registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .exceptions import ConfigurationError
from .models import Branch
from .plant import Plant
from .registry import ModuleRegistry
from .settings import PlantSettings, SimulationConfig, clamp_time_step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationStepResult:
    tick: int
    time_step: float
    living_plants: int
    live_modules: int
    spawned_modules: int
    shed_modules: int


class ForestSimulation:
    """Runs every plant of a forest in lockstep.

    Each tick first refreshes the light exposure of every live module, then
    lets each living plant allocate vigor, shed and grow. Plants that died
    stay in :attr:`plants` but are skipped.
    """

    def __init__(
        self,
        config: SimulationConfig = SimulationConfig(),
        settings: Optional[PlantSettings] = None,
        prototypes: Optional[Mapping[str, Sequence[Sequence[int]]]] = None,
    ):
        self.config = config.clamped()
        if self.config.number_of_plants > self.config.max_modules:
            raise ConfigurationError(
                f"Cannot seed {self.config.number_of_plants} plants under a module cap of {self.config.max_modules}"
            )
        self.settings = (settings or PlantSettings()).clamped()
        self.registry = ModuleRegistry(prototypes, max_modules=self.config.max_modules, seed=self.config.seed)
        spacing = self.config.plant_spacing
        self.plants = [
            Plant(self.registry, position=(index * spacing, index * spacing, 0.0), settings=self.settings)
            for index in range(self.config.number_of_plants)
        ]
        self.tick = 0
        self.history: list[SimulationStepResult] = []

    @property
    def living_plants(self) -> list[Plant]:
        return [plant for plant in self.plants if plant.is_alive]

    def step(self, time_step: Optional[float] = None) -> SimulationStepResult:
        dt = clamp_time_step(self.config.time_step if time_step is None else time_step)
        created_before = self.registry.created
        live_before = len(self.registry)

        self.registry.calculate_light_exposures()
        for plant in self.living_plants:
            plant.simulate(dt)

        spawned = self.registry.created - created_before
        self.tick += 1
        result = SimulationStepResult(
            tick=self.tick,
            time_step=dt,
            living_plants=len(self.living_plants),
            live_modules=len(self.registry),
            spawned_modules=spawned,
            shed_modules=live_before + spawned - len(self.registry),
        )
        self.history.append(result)
        logger.debug("Tick %d: %s", self.tick, result)
        return result

    def run(self, ticks: Optional[int] = None, time_step: Optional[float] = None) -> list[SimulationStepResult]:
        """Step until the tick budget is spent or every plant is dead."""

        budget = self.config.ticks if ticks is None else max(int(ticks), 0)
        results: list[SimulationStepResult] = []
        for _ in range(budget):
            if not self.living_plants:
                break
            results.append(self.step(time_step))
        logger.info(
            f"Ran {len(results)} ticks: {len(self.living_plants)} living plants, "
            f"{len(self.registry)} live modules"
        )
        return results

    def branches(self) -> list[list[Branch]]:
        return [plant.branches() for plant in self.plants]
