"""Modular procedural plant growth simulation."""

from .exceptions import ConfigurationError, ForestGenError, InvalidTopologyError
from .geometry import Rotator, Sphere, sphere_intersection_volume
from .growth import GrowthContext, grow_module, lay_out_children, tropism_offset
from .light import bounding_sphere, collision_score, exposure_from_collisions, light_exposure, orientate
from .lifecycle import shed_module, should_shed, spawn_child_modules
from .models import Branch, BranchGraph, BranchNode, BranchSegment, NodeType, SortMark
from .module import BranchModule
from .plant import Plant, PlantState
from .prototypes import DEFAULT_PROTOTYPES, GraphPrototype, validate_prototype
from .registry import ModuleRegistry
from .serialization import branch_to_dict, plant_to_dict, simulation_to_dict
from .settings import PLANT_PRESETS, PlantSettings, SimulationConfig, preset
from .simulation import ForestSimulation, SimulationStepResult
from .vigor import VigorAllocator, split_vigor, topological_sort

__all__ = [
    "Branch",
    "BranchGraph",
    "BranchModule",
    "BranchNode",
    "BranchSegment",
    "ConfigurationError",
    "DEFAULT_PROTOTYPES",
    "ForestGenError",
    "ForestSimulation",
    "GraphPrototype",
    "GrowthContext",
    "InvalidTopologyError",
    "ModuleRegistry",
    "NodeType",
    "PLANT_PRESETS",
    "Plant",
    "PlantSettings",
    "PlantState",
    "Rotator",
    "SimulationConfig",
    "SimulationStepResult",
    "SortMark",
    "Sphere",
    "VigorAllocator",
    "bounding_sphere",
    "branch_to_dict",
    "collision_score",
    "exposure_from_collisions",
    "grow_module",
    "lay_out_children",
    "light_exposure",
    "orientate",
    "plant_to_dict",
    "preset",
    "shed_module",
    "should_shed",
    "simulation_to_dict",
    "spawn_child_modules",
    "sphere_intersection_volume",
    "split_vigor",
    "topological_sort",
    "tropism_offset",
    "validate_prototype",
]
