# algorithm/components/__init__.py
"""
Building blocks of the component-based MOEA/D.

- weight_vectors: decomposition generators (sld, msld, uniform)
- neighborhood: neighborhood tables and mating scope
- aggregation: scalarization functions
- scaling: objective normalisation before aggregation
- constraint_handling: trial-versus-incumbent comparison under constraints
- update: replacement rules
- archive: unbounded non-dominated archive
- termination: stop criteria
- variation: ordered variation stack (subpackage)
- registry: resolution of a whole configuration mapping
"""
from compmoead.engine.algorithm.components.aggregation import AGGREGATION_PARAMS, build_aggregator, resolve_aggregation
from compmoead.engine.algorithm.components.archive import UnboundedArchive
from compmoead.engine.algorithm.components.base import ComponentSpec, normalize_spec, resolve_component
from compmoead.engine.algorithm.components.constraint_handling import (
    CONSTRAINT_PARAMS,
    build_constraint_handler,
    constraint_dominance,
    resolve_constraint_handling,
)
from compmoead.engine.algorithm.components.neighborhood import (
    NEIGHBORHOOD_PARAMS,
    NeighborhoodBuilder,
    compute_neighbors,
    resolve_neighborhood,
)
from compmoead.engine.algorithm.components.registry import CONFIG_KEYS, ResolvedComponents, resolve_components
from compmoead.engine.algorithm.components.scaling import SCALING_PARAMS, ObjectiveScaler, resolve_scaling
from compmoead.engine.algorithm.components.termination import STOP_PARAMS, HVTracker, StopCriteria, resolve_stop_criterion
from compmoead.engine.algorithm.components.update import UPDATE_PARAMS, build_update_rule, resolve_update
from compmoead.engine.algorithm.components.variation import STAGE_PARAMS, VariationPipeline, resolve_stages
from compmoead.engine.algorithm.components.weight_vectors import (
    DECOMPOSITION_PARAMS,
    count_weight_vectors,
    generate_weight_vectors,
    resolve_decomposition,
)

__all__ = [
    # registries
    "AGGREGATION_PARAMS",
    "CONFIG_KEYS",
    "CONSTRAINT_PARAMS",
    "DECOMPOSITION_PARAMS",
    "NEIGHBORHOOD_PARAMS",
    "SCALING_PARAMS",
    "STAGE_PARAMS",
    "STOP_PARAMS",
    "UPDATE_PARAMS",
    # resolution
    "ComponentSpec",
    "ResolvedComponents",
    "normalize_spec",
    "resolve_aggregation",
    "resolve_component",
    "resolve_components",
    "resolve_constraint_handling",
    "resolve_decomposition",
    "resolve_neighborhood",
    "resolve_scaling",
    "resolve_stages",
    "resolve_stop_criterion",
    "resolve_update",
    # builders
    "HVTracker",
    "NeighborhoodBuilder",
    "ObjectiveScaler",
    "StopCriteria",
    "UnboundedArchive",
    "VariationPipeline",
    "build_aggregator",
    "build_constraint_handler",
    "build_update_rule",
    "compute_neighbors",
    "constraint_dominance",
    "count_weight_vectors",
    "generate_weight_vectors",
]
