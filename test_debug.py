from __future__ import annotations

import logging

from forestgen import ForestSimulation, PlantSettings, SimulationConfig


def build_test_simulation() -> ForestSimulation:
    settings = PlantSettings(
        growth_potential=0.6,
        apical_control=0.6,
        straightness=0.5,
    )
    config = SimulationConfig(number_of_plants=1, ticks=40, time_step=1.0, seed=7)
    return ForestSimulation(config=config, settings=settings, prototypes={"path": [(0, 1), (1, 2)]})


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    simulation = build_test_simulation()
    plant = simulation.plants[0]

    print(f"Tick 0: Modules={len(simulation.registry)}, Branches={len(plant.branches())}")

    for _ in range(simulation.config.ticks):
        result = simulation.step()
        print(
            f"Tick {result.tick}: Modules={result.live_modules}, "
            f"Spawned={result.spawned_modules}, Shed={result.shed_modules}, "
            f"State={plant.state.value}"
        )
        for module in plant.iter_modules():
            print(
                "  "
                f"Module ID={module.id}, "
                f"Age={module.age:.2f}, "
                f"Vigor={module.vigor:.2f}, "
                f"Light={module.light_exposure:.2f}"
            )
        if not plant.is_alive:
            print("Plant died.")
            break


if __name__ == "__main__":
    main()
