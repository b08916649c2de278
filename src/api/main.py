"""FastAPI app exposing the forest growth simulation."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from forestgen import (
    ConfigurationError,
    ForestSimulation,
    InvalidTopologyError,
    PlantSettings,
    SimulationConfig,
    preset,
)
from forestgen.serialization import simulation_to_dict, step_result_to_dict

app = FastAPI(title="Forest Generator API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PlantSettingsPayload(BaseModel):
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


class ResetRequest(BaseModel):
    preset: str | None = Field(default=None, description="Name of a built-in plant preset.")
    settings: PlantSettingsPayload | None = None
    prototypes: dict[str, list[tuple[int, int]]] | None = Field(
        default=None,
        description="Module graph prototypes; the first one is used for every module.",
    )
    number_of_plants: int = Field(default=1, ge=1, le=100)
    max_modules: int = Field(default=100, ge=1)
    seed: int = 0
    plant_spacing: float = 40.0


class StepRequest(BaseModel):
    time_step: float = Field(default=1.0, gt=0.0)


class RunRequest(BaseModel):
    ticks: int = Field(default=100, ge=1, le=10000)
    time_step: float = Field(default=1.0, gt=0.0)


def _build_simulation(request: ResetRequest | None) -> ForestSimulation:
    request = request or ResetRequest()
    if request.settings is not None:
        settings = PlantSettings(**request.settings.model_dump())
    elif request.preset is not None:
        settings = preset(request.preset)
    else:
        settings = PlantSettings()
    config = SimulationConfig(
        number_of_plants=request.number_of_plants,
        max_modules=request.max_modules,
        seed=request.seed,
        plant_spacing=request.plant_spacing,
    )
    return ForestSimulation(config=config, settings=settings, prototypes=request.prototypes)


CURRENT_SIMULATION = _build_simulation(None)


@app.get("/state")
def get_state() -> dict[str, object]:
    return {"simulation": simulation_to_dict(CURRENT_SIMULATION)}


@app.post("/reset")
def reset_simulation(request: ResetRequest | None = None) -> dict[str, object]:
    global CURRENT_SIMULATION
    try:
        CURRENT_SIMULATION = _build_simulation(request)
    except (InvalidTopologyError, ConfigurationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"simulation": simulation_to_dict(CURRENT_SIMULATION)}


@app.post("/step")
def step_simulation(request: StepRequest) -> dict[str, object]:
    result = CURRENT_SIMULATION.step(request.time_step)
    return {
        "result": step_result_to_dict(result),
        "simulation": simulation_to_dict(CURRENT_SIMULATION),
    }


@app.post("/run")
def run_simulation(request: RunRequest) -> dict[str, object]:
    results = CURRENT_SIMULATION.run(request.ticks, time_step=request.time_step)
    return {
        "result": {
            "ticks": len(results),
            "spawned_modules": sum(result.spawned_modules for result in results),
            "shed_modules": sum(result.shed_modules for result in results),
        },
        "simulation": simulation_to_dict(CURRENT_SIMULATION),
    }
