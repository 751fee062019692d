"""Evolution module exports."""

from .compatibility import (
    CachedMetric,
    CompatibilityMetric,
    EuclideanMetric,
    FunctionMetric,
    ManhattanMetric,
    get_metric,
    list_metrics,
    register_metric,
)
from .context import RunContext
from .engine import EvolutionConfig, EvolutionEngine
from .fitness import OBJECTIVES, ScoreFunction
from .genome import Genome
from .population import Population
from .ranking import AdjustedScoreComparator, MemberOrdering, ScoreComparator, SpeciesComparator
from .speciation import SpeciationConfig, SpeciationEngine, SpeciationReport
from .species import Species, SpeciesState

__all__ = [
    "AdjustedScoreComparator",
    "CachedMetric",
    "CompatibilityMetric",
    "EuclideanMetric",
    "EvolutionConfig",
    "EvolutionEngine",
    "FunctionMetric",
    "Genome",
    "ManhattanMetric",
    "MemberOrdering",
    "OBJECTIVES",
    "Population",
    "RunContext",
    "ScoreComparator",
    "ScoreFunction",
    "SpeciationConfig",
    "SpeciationEngine",
    "SpeciationReport",
    "Species",
    "SpeciesComparator",
    "SpeciesState",
    "get_metric",
    "list_metrics",
    "register_metric",
]
