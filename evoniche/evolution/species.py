"""
Species bookkeeping for EvoNiche.

A species is a cluster of mutually compatible genomes around a leader.  It
tracks the best score reached by its leader lineage, how long it has gone
without improving, and the offspring share/count computed every generation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .genome import Genome


class SpeciesState(str, Enum):
    FORMING = "forming"
    ACTIVE = "active"
    STAGNANT = "stagnant"
    REMOVED = "removed"


@dataclass(eq=False)
class Species:
    """Group of genomes sharing a leader."""

    species_id: int
    leader: Genome
    members: List[Genome] = field(default_factory=list)
    best_score: float = math.nan
    gens_no_improvement: int = 0
    age: int = 0
    offspring_share: float = 0.0
    offspring_count: int = 0
    removed: bool = False

    def __post_init__(self) -> None:
        self.best_score = self.leader.adjusted_score
        self.leader.species_id = self.species_id
        if not self.members:
            self.members.append(self.leader)

    def add(self, genome: Genome) -> None:
        self.members.append(genome)
        genome.species_id = self.species_id

    def promote(self, genome: Genome) -> None:
        """Install ``genome`` as the new leader and restart the improvement clock."""
        self.leader = genome
        self.best_score = genome.adjusted_score
        self.gens_no_improvement = 0

    def purge(self) -> None:
        """
        Prepare for a new generation.

        Members are detached (only the leader is kept), the species ages by one
        generation and the offspring allocation is cleared.
        """

        self.members.clear()
        self.members.append(self.leader)
        self.age += 1
        self.gens_no_improvement += 1
        self.offspring_count = 0
        self.offspring_share = 0.0

    def calculate_share(self, should_minimize: bool, max_score: float) -> float:
        """
        Compute the normalized fitness share of this species.

        The share is the mean over members with a finite adjusted score of the
        score itself when maximizing, or of ``max_score - score`` when
        minimizing.  Negative means are clamped to zero.
        """

        total = 0.0
        count = 0
        for genome in self.members:
            if not math.isfinite(genome.adjusted_score):
                continue
            total += (max_score - genome.adjusted_score) if should_minimize else genome.adjusted_score
            count += 1
        self.offspring_share = max(0.0, total / count) if count else 0.0
        return self.offspring_share

    def state(self, max_stagnant_generations: int) -> SpeciesState:
        if self.removed:
            return SpeciesState.REMOVED
        if self.gens_no_improvement > max_stagnant_generations:
            return SpeciesState.STAGNANT
        if self.age == 0:
            return SpeciesState.FORMING
        return SpeciesState.ACTIVE

    def __contains__(self, genome: object) -> bool:
        return any(member is genome for member in self.members)

    def __repr__(self) -> str:
        return (
            f"Species(id={self.species_id}, leader={self.leader.genome_id}, "
            f"members={len(self.members)}, offspring={self.offspring_count})"
        )
