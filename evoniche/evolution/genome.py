"""
Representation of EvoNiche genomes.

Genomes are real valued vectors.  Besides the genes they carry the bookkeeping
the speciation engine relies on: a raw score, an adjusted score used for
ranking inside species, the birth generation and a back-reference to the
species they were last assigned to.  The back-reference is a plain species
identifier; species never own genomes.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

_genome_id = itertools.count()


@dataclass(eq=False)
class Genome:
    """Candidate solution compared by identity."""

    values: np.ndarray
    score: float = math.nan
    adjusted_score: float = math.nan
    species_id: Optional[int] = None
    birth_generation: int = 0
    parent_ids: List[int] = field(default_factory=list)
    genome_id: int = field(default_factory=lambda: next(_genome_id))

    def __post_init__(self) -> None:
        self.values = np.asarray(self.values, dtype=float)

    @property
    def is_scored(self) -> bool:
        return math.isfinite(self.adjusted_score)

    def clone(self, generation: Optional[int] = None) -> "Genome":
        """Create an unscored copy with fresh identity."""
        return Genome(
            values=self.values.copy(),
            birth_generation=self.birth_generation if generation is None else generation,
            parent_ids=[self.genome_id],
        )

    def mutate(self, rng: np.random.Generator, sigma: float, generation: int) -> "Genome":
        """
        Apply gaussian perturbation to every gene.

        Each gene receives an independent draw from a normal distribution centred
        on zero with standard deviation ``sigma``.
        """

        perturbed = self.values + rng.normal(0.0, sigma, size=self.values.shape)
        parents = list(self.parent_ids) if self.parent_ids else [self.genome_id]
        return Genome(values=perturbed, birth_generation=generation, parent_ids=parents)

    @staticmethod
    def crossover(parent_a: "Genome", parent_b: "Genome", rng: np.random.Generator, generation: int) -> "Genome":
        """Uniform crossover: every gene is drawn from either parent with equal odds."""

        mask = rng.random(parent_a.values.shape) < 0.5
        child_values = np.where(mask, parent_a.values, parent_b.values)
        return Genome(
            values=child_values,
            birth_generation=generation,
            parent_ids=[parent_a.genome_id, parent_b.genome_id],
        )

    def __repr__(self) -> str:
        return (
            f"Genome(id={self.genome_id}, score={self.score:.4g}, "
            f"adjusted={self.adjusted_score:.4g}, species={self.species_id})"
        )
