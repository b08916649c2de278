from math import isfinite

import pytest

from forestgen import ConfigurationError, ForestSimulation, PlantSettings, PlantState, SimulationConfig
from forestgen.serialization import simulation_to_dict

PATH = {"path": [(0, 1), (1, 2)]}


def _fast_simulation(**overrides):
    config = SimulationConfig(ticks=60, seed=3, max_modules=20)
    settings = PlantSettings(growth_potential=1.0, **overrides)
    return ForestSimulation(config=config, settings=settings, prototypes=PATH)


def test_run_grows_a_bounded_finite_tree():
    simulation = _fast_simulation()

    results = simulation.run()

    assert results
    assert sum(result.spawned_modules for result in results) >= 1
    assert all(result.live_modules <= 20 for result in results)
    for branch in simulation.branches()[0]:
        assert all(isfinite(value) for value in branch.start + branch.end)
        assert isfinite(branch.diameter)


def test_identical_runs_are_identical():
    first = _fast_simulation()
    second = _fast_simulation()

    first.run(30)
    second.run(30)

    assert simulation_to_dict(first) == simulation_to_dict(second)


def test_step_reports_progress():
    simulation = ForestSimulation(SimulationConfig(time_step=0.5), prototypes=PATH)

    result = simulation.step()

    assert result.tick == 1
    assert result.time_step == 0.5
    assert result.living_plants == 1
    assert simulation.history == [result]
    assert simulation.plants[0].age == 0.5


def test_plants_share_one_registry():
    simulation = ForestSimulation(SimulationConfig(number_of_plants=3, plant_spacing=10.0), prototypes=PATH)

    simulation.step()

    assert [plant.position for plant in simulation.plants] == [
        (0.0, 0.0, 0.0),
        (10.0, 10.0, 0.0),
        (20.0, 20.0, 0.0),
    ]
    assert len(simulation.registry) >= 3
    assert len(simulation.living_plants) == 3


def test_old_plant_dies_and_run_stops():
    config = SimulationConfig(ticks=50, seed=1, max_modules=3)
    settings = PlantSettings(growth_potential=1.0, max_age=10)
    simulation = ForestSimulation(config=config, settings=settings, prototypes=PATH)
    root = simulation.plants[0].root

    results = simulation.run()

    assert simulation.plants[0].state == PlantState.DEAD
    assert len(results) < 50
    assert root.shed
    assert root.age > 2.0
    assert len(simulation.registry) == 0
    assert simulation.branches() == [[]]


def test_plants_must_fit_under_the_module_cap():
    with pytest.raises(ConfigurationError):
        ForestSimulation(SimulationConfig(number_of_plants=5, max_modules=2), prototypes=PATH)


def test_run_uses_the_given_time_step():
    simulation = ForestSimulation(SimulationConfig(time_step=1.0), prototypes=PATH)

    results = simulation.run(3, time_step=0.5)

    assert [result.time_step for result in results] == [0.5, 0.5, 0.5]
    assert simulation.plants[0].age == pytest.approx(1.5)
