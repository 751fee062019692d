"""Shared fixtures for the EvoNiche test-suite."""

from typing import Callable, Optional, Tuple

import pytest

from evoniche.evolution import (
    EuclideanMetric,
    Genome,
    Population,
    RunContext,
    ScoreFunction,
    SpeciationConfig,
    SpeciationEngine,
)
from evoniche.evolution.fitness import sphere


@pytest.fixture
def make_genome() -> Callable[..., Genome]:
    """Build a one dimensional genome positioned at ``x`` with the given score."""

    def factory(x: float, score: float = 0.0, birth_generation: int = 0) -> Genome:
        genome = Genome(values=[x], birth_generation=birth_generation)
        genome.score = score
        genome.adjusted_score = score
        return genome

    return factory


@pytest.fixture
def make_engine() -> Callable[..., Tuple[SpeciationEngine, RunContext]]:
    """Build an initialised speciation engine over an empty population."""

    def factory(
        population_size: int = 100,
        should_minimize: bool = False,
        config: Optional[SpeciationConfig] = None,
        validation_mode: bool = False,
    ) -> Tuple[SpeciationEngine, RunContext]:
        context = RunContext(
            population=Population(population_size=population_size),
            score_function=ScoreFunction(objective=sphere, should_minimize=should_minimize),
            validation_mode=validation_mode,
        )
        engine = SpeciationEngine(EuclideanMetric(), config or SpeciationConfig())
        engine.initialize(context)
        return engine, context

    return factory
