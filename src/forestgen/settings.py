"""Plant parameter bundles and simulation configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .exceptions import ConfigurationError

MAX_TIME_STEP = 10000.0
MIN_TIME_STEP = 1e-3
DEFAULT_MAX_MODULES = 100


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class PlantSettings:
    """Growth parameters of a plant type.

    Attributes:
        max_age: Plant age after which the root vigor cap falls linearly to zero.
        max_root_vigor: Upper bound of the vigor stored at the plant root.
        growth_potential: Scales the physiological aging rate of modules.
        apical_control: Bias of vigor towards the main child (lambda).
        apical_control_mature: Apical control once the plant is mature.
        determinacy: Share of a module's vigor handed to a spawned child.
        determinacy_mature: Determinacy once the plant is mature.
        flowering_age: Plant age at which the plant becomes mature.
        tropism_angle: -1 (gravitropism) .. 1 (phototropism).
        orientation_weight: Tropism weight of new module orientation.
        tropism_decay: How fast the tropism offset decays with branch age (G1).
        default_thickness: Diameter of branches without children (phi).
        length_scale: Branch length per unit of age (beta).
        vigor_min: Vigor below which modules stop growing and are shed.
        vigor_max: Vigor at which growth rate saturates.
        max_branch_length: Upper bound of a single branch length.
        tropism_strength: Overall strength of the tropism offset.
        straightness: 1 keeps unfolding branches on their nominal layout.
    """

    max_age: int = 950
    max_root_vigor: float = 900.0
    growth_potential: float = 0.12
    apical_control: float = 0.87
    apical_control_mature: float = 0.34
    determinacy: float = 0.93
    determinacy_mature: float = 0.55
    flowering_age: int = 57
    tropism_angle: float = 0.66
    orientation_weight: float = 0.14
    tropism_decay: float = 0.2
    default_thickness: float = 1.41
    length_scale: float = 1.29
    vigor_min: float = 0.5
    vigor_max: float = 2.0
    max_branch_length: float = 50.0
    tropism_strength: float = 1.0
    straightness: float = 1.0

    def clamped(self) -> "PlantSettings":
        """Return a copy with every field forced into its valid range."""

        vigor_min = max(self.vigor_min, 0.0)
        vigor_max = max(self.vigor_max, 0.0)
        if vigor_max <= vigor_min:
            vigor_max = vigor_min + 0.1
        return replace(
            self,
            max_age=max(int(self.max_age), 0),
            max_root_vigor=max(self.max_root_vigor, 0.0),
            growth_potential=max(self.growth_potential, 0.0),
            apical_control=_clamp(self.apical_control, 0.0, 1.0),
            apical_control_mature=_clamp(self.apical_control_mature, 0.0, 1.0),
            determinacy=_clamp(self.determinacy, 0.0, 1.0),
            determinacy_mature=_clamp(self.determinacy_mature, 0.0, 1.0),
            flowering_age=max(int(self.flowering_age), 0),
            tropism_angle=_clamp(self.tropism_angle, -1.0, 1.0),
            orientation_weight=_clamp(self.orientation_weight, 0.0, 1.0),
            tropism_decay=_clamp(self.tropism_decay, -5.0, 5.0),
            default_thickness=max(self.default_thickness, 0.0),
            length_scale=max(self.length_scale, 0.0),
            vigor_min=vigor_min,
            vigor_max=vigor_max,
            max_branch_length=max(self.max_branch_length, 0.0),
            tropism_strength=max(self.tropism_strength, 0.0),
            straightness=_clamp(self.straightness, 0.0, 1.0),
        )


PLANT_PRESETS: dict[str, PlantSettings] = {
    "testing": PlantSettings(),
    "shrub": PlantSettings(
        max_age=400,
        max_root_vigor=300.0,
        growth_potential=0.2,
        apical_control=0.45,
        apical_control_mature=0.3,
        determinacy=0.8,
        determinacy_mature=0.5,
        flowering_age=30,
        tropism_angle=0.4,
        length_scale=0.8,
        max_branch_length=12.0,
        straightness=0.6,
    ),
    "conifer": PlantSettings(
        max_age=1500,
        growth_potential=0.1,
        apical_control=0.95,
        apical_control_mature=0.8,
        determinacy=0.97,
        determinacy_mature=0.7,
        flowering_age=90,
        tropism_angle=0.9,
        length_scale=1.6,
        straightness=0.9,
    ),
}


def preset(name: str) -> PlantSettings:
    try:
        return PLANT_PRESETS[name].clamped()
    except KeyError:
        raise ConfigurationError(f"Unknown plant preset: {name!r}") from None


@dataclass(frozen=True)
class SimulationConfig:
    """Population run configuration.

    Attributes:
        number_of_plants: Plants seeded at the start of the run.
        ticks: Tick budget of a full run.
        time_step: Simulated time per tick.
        max_modules: Live module cap that disables further spawning.
        seed: Seed of all unfolding randomness.
        plant_spacing: Distance between neighbouring seed positions.
    """

    number_of_plants: int = 1
    ticks: int = 100
    time_step: float = 1.0
    max_modules: int = DEFAULT_MAX_MODULES
    seed: int = 0
    plant_spacing: float = 40.0

    def clamped(self) -> "SimulationConfig":
        return replace(
            self,
            number_of_plants=int(_clamp(self.number_of_plants, 1, 100)),
            ticks=int(_clamp(self.ticks, 1, 10000)),
            time_step=clamp_time_step(self.time_step),
            max_modules=max(int(self.max_modules), 1),
        )


def clamp_time_step(time_step: float) -> float:
    return _clamp(time_step, MIN_TIME_STEP, MAX_TIME_STEP)
