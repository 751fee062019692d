"""
Population container shared between the evolutionary loop and the speciation
engine.

The population owns the genome list of the current generation and the ordered
species roster.  The roster order matters: speciation assigns genomes to the
first compatible species, so species are kept in insertion order until the
engine re-sorts them during leveling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import numpy as np

from .genome import Genome
from .species import Species


@dataclass
class Population:
    """Container around the genomes and species of one run."""

    population_size: int
    genomes: List[Genome] = field(default_factory=list)
    species: List[Species] = field(default_factory=list)

    def seed(self, rng: np.random.Generator, dimensions: int, bounds: float = 5.0) -> None:
        """Populate with genomes drawn uniformly from ``[-bounds, bounds]``."""
        self.genomes = [
            Genome(values=rng.uniform(-bounds, bounds, size=dimensions), birth_generation=0)
            for _ in range(self.population_size)
        ]

    def find_species(self, species_id: Optional[int]) -> Optional[Species]:
        if species_id is None:
            return None
        for species in self.species:
            if species.species_id == species_id:
                return species
        return None

    def species_of(self, genome: Genome) -> Optional[Species]:
        return self.find_species(genome.species_id)

    def iter_members(self) -> Iterator[Genome]:
        for species in self.species:
            yield from species.members

    def offspring_total(self) -> int:
        return sum(species.offspring_count for species in self.species)

    def __len__(self) -> int:
        return len(self.genomes)
