"""
Reference evolutionary loop driving the speciation engine.

Each generation scores the genomes, speciates them, and refills the population
from the per-species offspring budgets.  Species leaders are carried into the
next generation unchanged so lineages survive; the remaining budget of a
species is spent on gaussian mutants and uniform crossovers of its most
desirable members.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from evoniche.exceptions import EvoNicheRuntimeError
from evoniche.utils.logger import ExperimentLogger

from .context import RunContext
from .fitness import ScoreFunction
from .genome import Genome
from .population import Population
from .speciation import SpeciationEngine, SpeciationReport


@dataclass
class EvolutionConfig:
    """Hyperparameters of the reference loop."""

    dimensions: int = 5
    bounds: float = 5.0
    mutation_sigma: float = 0.3
    crossover_rate: float = 0.3
    selection_fraction: float = 0.5
    seed: Optional[int] = 42


class EvolutionEngine:
    """Generational loop coordinating scoring, speciation and reproduction."""

    def __init__(
        self,
        population: Population,
        speciation: SpeciationEngine,
        score_function: ScoreFunction,
        logger: ExperimentLogger,
        config: Optional[EvolutionConfig] = None,
        validation_mode: bool = False,
    ) -> None:
        """Create a new evolutionary loop.

        Parameters
        ----------
        population : Population
            Population whose genomes and species roster are evolved in place.
        speciation : SpeciationEngine
            Engine partitioning genomes and allocating offspring.
        score_function : ScoreFunction
            Objective and optimisation direction.
        logger : ExperimentLogger
            Logging utility for metrics and MLflow integration.
        config : EvolutionConfig, optional
            Mutation, crossover and seeding parameters.
        validation_mode : bool, default False
            Enable strict membership checks during speciation.
        """
        self.population = population
        self.speciation = speciation
        self.score_function = score_function
        self.logger = logger
        self.config = config or EvolutionConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.context = RunContext(
            population=population,
            score_function=score_function,
            validation_mode=validation_mode,
        )
        self.speciation.initialize(self.context)
        self.best_ever: Optional[Genome] = None
        self.reports: List[SpeciationReport] = []

    def seed(self) -> None:
        """Draw the initial genomes when the population is empty."""
        if not self.population.genomes:
            self.population.seed(self.rng, self.config.dimensions, self.config.bounds)

    def evaluate_generation(self, generation_idx: int) -> List[Genome]:
        """Score every genome and record the generation's best genome in the run context."""

        genomes = self.population.genomes
        for genome in genomes:
            self.score_function.score(genome)

        comparator = self.context.best_comparator
        best = comparator.best(genomes)
        self.context.best_genome = best
        if self.best_ever is None or comparator.is_better(best, self.best_ever):
            self.best_ever = best
        self.logger.log_metrics({"best_score": float(best.score)}, step=generation_idx)
        return genomes

    def speciate(self) -> SpeciationReport:
        if not self.population.species:
            self.speciation.seed_roster(self.population.genomes)
        report = self.speciation.perform_speciation(self.population.genomes)
        self.reports.append(report)
        return report

    def _select_parent(self, members: List[Genome]) -> Genome:
        # members arrive sorted best first
        cutoff = max(1, int(math.ceil(len(members) * self.config.selection_fraction)))
        return members[int(self.rng.integers(cutoff))]

    def _spawn(self, members: List[Genome], generation: int) -> Genome:
        parent = self._select_parent(members)
        if len(members) > 1 and self.rng.random() < self.config.crossover_rate:
            mate = self._select_parent(members)
            child = Genome.crossover(parent, mate, self.rng, generation)
            return child.mutate(self.rng, self.config.mutation_sigma, generation)
        return parent.mutate(self.rng, self.config.mutation_sigma, generation)

    def reproduce(self, generation_idx: int) -> List[Genome]:
        """Build the next generation from the species offspring budgets."""

        allocated = self.population.offspring_total()
        if allocated != self.population.population_size:
            raise EvoNicheRuntimeError(
                "Offspring budgets do not match the population size.",
                context={
                    "generation": generation_idx,
                    "expected": self.population.population_size,
                    "allocated": allocated,
                },
            )

        next_generation: List[Genome] = []
        for species in self.population.species:
            budget = species.offspring_count
            if budget <= 0:
                continue
            next_generation.append(species.leader)
            for _ in range(budget - 1):
                next_generation.append(self._spawn(species.members, generation_idx + 1))

        self.population.genomes = next_generation
        return next_generation

    def run_generation(self, generation_idx: int) -> Tuple[Dict[str, float], Genome, SpeciationReport]:
        """Full generation: evaluation, speciation and reproduction."""

        self.evaluate_generation(generation_idx)
        best_genome = self.context.best_genome
        report = self.speciate()
        self.reproduce(generation_idx)

        summary = {
            "generation": generation_idx,
            "best_score": float(best_genome.score),
            "species_count": report.species_count,
            "compatibility_threshold": report.compatibility_threshold,
        }
        self.logger.log_metrics(
            {
                "species_count": float(report.species_count),
                "compatibility_threshold": report.compatibility_threshold,
            },
            step=generation_idx,
        )
        return summary, best_genome, report
