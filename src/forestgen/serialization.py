"""Serialization helpers for API and rendering clients."""

from __future__ import annotations

from dataclasses import asdict

from .models import Branch
from .module import BranchModule
from .plant import Plant
from .simulation import ForestSimulation, SimulationStepResult


def branch_to_dict(branch: Branch) -> dict[str, object]:
    return {
        "start": list(branch.start),
        "end": list(branch.end),
        "diameter": branch.diameter,
    }


def module_to_dict(module: BranchModule) -> dict[str, object]:
    return {
        "id": module.id,
        "prototype": module.prototype.name,
        "age": module.age,
        "maturity_age": module.maturity_age,
        "vigor": module.vigor,
        "light_exposure": module.light_exposure,
        "shed": module.shed,
        "children": [child.id for child in module.children],
        "bounding_sphere": {
            "center": list(module.bounding_sphere.center),
            "radius": module.bounding_sphere.radius,
        },
    }


def plant_to_dict(plant: Plant) -> dict[str, object]:
    return {
        "position": list(plant.position),
        "age": plant.age,
        "state": plant.state.value,
        "root": plant.root.id if plant.root is not None else None,
        "modules": [module_to_dict(module) for module in plant.iter_modules()],
        "branches": [branch_to_dict(branch) for branch in plant.branches()],
    }


def step_result_to_dict(result: SimulationStepResult) -> dict[str, object]:
    return asdict(result)


def simulation_to_dict(simulation: ForestSimulation) -> dict[str, object]:
    return {
        "tick": simulation.tick,
        "live_modules": len(simulation.registry),
        "settings": asdict(simulation.settings),
        "prototypes": {
            name: [list(edge) for edge in prototype.edges]
            for name, prototype in simulation.registry.prototypes.items()
        },
        "plants": [plant_to_dict(plant) for plant in simulation.plants],
    }
