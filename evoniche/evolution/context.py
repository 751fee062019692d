"""
Run context binding the speciation engine to an evolutionary run.

The context exposes what speciation needs from the surrounding loop: the
population and its target size, the current best genome, the comparators used
to rank genomes and the optimisation direction of the score function.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .fitness import ScoreFunction
from .genome import Genome
from .population import Population
from .ranking import AdjustedScoreComparator, GenomeComparator, ScoreComparator


@dataclass
class RunContext:
    population: Population
    score_function: ScoreFunction
    best_genome: Optional[Genome] = None
    validation_mode: bool = False
    selection_comparator: GenomeComparator = field(init=False)
    best_comparator: GenomeComparator = field(init=False)

    def __post_init__(self) -> None:
        minimize = self.score_function.should_minimize
        self.selection_comparator = AdjustedScoreComparator(minimize)
        self.best_comparator = ScoreComparator(minimize)

    @property
    def population_size(self) -> int:
        return self.population.population_size

    @property
    def should_minimize(self) -> bool:
        return self.score_function.should_minimize
