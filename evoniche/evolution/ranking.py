"""
Comparators used to rank genomes and species.

All comparators follow the conventional sign semantics of ``compare(a, b)``:
negative when ``a`` is better, positive when ``b`` is better, zero on a tie.
Non-finite scores (NaN or infinity) mean "unscored" and always rank last.
"""

from __future__ import annotations

import math
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Callable, List

if TYPE_CHECKING:
    from .genome import Genome
    from .species import Species


def _rank_value(score: float, should_minimize: bool) -> float:
    """Map a score onto a scale where lower is always better."""
    if not math.isfinite(score):
        return math.inf
    return score if should_minimize else -score


def _sign(a: float, b: float) -> int:
    return (a > b) - (a < b)


class GenomeComparator:
    """Base class for direction aware genome comparators."""

    attribute = "score"

    def __init__(self, should_minimize: bool) -> None:
        self.should_minimize = should_minimize

    def compare(self, genome_a: "Genome", genome_b: "Genome") -> int:
        return _sign(
            _rank_value(getattr(genome_a, self.attribute), self.should_minimize),
            _rank_value(getattr(genome_b, self.attribute), self.should_minimize),
        )

    def is_better(self, genome_a: "Genome", genome_b: "Genome") -> bool:
        return self.compare(genome_a, genome_b) < 0

    def best(self, genomes: List["Genome"]) -> "Genome":
        """Return the best genome, the earliest one winning ties."""
        return min(genomes, key=self.key())

    def key(self) -> Callable[[Any], Any]:
        return cmp_to_key(self.compare)

    def __call__(self, genome_a: "Genome", genome_b: "Genome") -> int:
        return self.compare(genome_a, genome_b)


class AdjustedScoreComparator(GenomeComparator):
    """Selection comparator: ranks genomes by adjusted score."""

    attribute = "adjusted_score"


class ScoreComparator(GenomeComparator):
    """Best comparator: ranks genomes by raw score."""

    attribute = "score"


class SpeciesComparator:
    """Rank species by the quality of their leaders."""

    def __init__(self, genome_comparator: GenomeComparator) -> None:
        self.genome_comparator = genome_comparator

    def compare(self, species_a: "Species", species_b: "Species") -> int:
        return self.genome_comparator.compare(species_a.leader, species_b.leader)

    def key(self) -> Callable[[Any], Any]:
        return cmp_to_key(self.compare)


class MemberOrdering:
    """
    Desirability order over the members of a species.

    Members are ordered by the selection comparator.  On a tie the younger
    genome (later birth generation) comes first.
    """

    def __init__(self, selection_comparator: GenomeComparator) -> None:
        self.selection_comparator = selection_comparator

    def compare(self, genome_a: "Genome", genome_b: "Genome") -> int:
        result = self.selection_comparator.compare(genome_a, genome_b)
        if result != 0:
            return result
        return genome_b.birth_generation - genome_a.birth_generation

    def sort(self, genomes: List["Genome"]) -> None:
        genomes.sort(key=cmp_to_key(self.compare))


__all__ = [
    "GenomeComparator",
    "AdjustedScoreComparator",
    "ScoreComparator",
    "SpeciesComparator",
    "MemberOrdering",
]
