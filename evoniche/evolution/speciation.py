"""
Threshold based speciation engine.

Every generation the engine partitions the incoming genomes into species by
comparing them with species leaders, then converts each species' share of the
total fitness into an integer offspring budget.  The budgets always add up to
the population size exactly: rounding errors are corrected by a leveling pass
that favours the best species and starves the worst ones first.

The compatibility threshold tunes itself.  When there are more species than
``max_species`` it grows by a fixed increment each generation, and when fewer
than two species remain it shrinks by the same increment.
"""

from __future__ import annotations

import itertools
import math
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Set

from loguru import logger

from evoniche.exceptions import SpeciationError

from .compatibility import CompatibilityMetric
from .context import RunContext
from .genome import Genome
from .population import Population
from .ranking import MemberOrdering, SpeciesComparator
from .species import Species

SCORE_EPSILON = 1e-7


@dataclass
class SpeciationConfig:
    """Tunable knobs of the speciation engine."""

    compatibility_threshold: float = 1.0
    max_species: int = 40
    max_stagnant_generations: int = 15
    threshold_increment: float = 0.01
    min_compatibility_threshold: Optional[float] = 0.0


@dataclass
class SpeciationReport:
    """Outcome of one ``perform_speciation`` call."""

    generation: int
    compatibility_threshold: float
    allocation: str = "proportional"
    total_share: float = 0.0
    max_score: float = 0.0
    level_adjustment: int = 0
    offspring: Dict[int, int] = field(default_factory=dict)
    created: List[int] = field(default_factory=list)
    removed: Dict[int, str] = field(default_factory=dict)
    orphaned: List[int] = field(default_factory=list)
    states: Dict[str, int] = field(default_factory=dict)

    @property
    def species_count(self) -> int:
        return len(self.offspring)

    @property
    def total_offspring(self) -> int:
        return sum(self.offspring.values())

    def as_dict(self) -> Dict[str, object]:
        return {
            "generation": self.generation,
            "compatibility_threshold": self.compatibility_threshold,
            "allocation": self.allocation,
            "total_share": self.total_share,
            "max_score": self.max_score,
            "level_adjustment": self.level_adjustment,
            "species_count": self.species_count,
            "offspring": dict(self.offspring),
            "created": list(self.created),
            "removed": dict(self.removed),
            "orphaned": list(self.orphaned),
            "states": dict(self.states),
        }


class SpeciationEngine:
    """Speciate genomes whose distance to a species leader is within a threshold."""

    def __init__(self, metric: CompatibilityMetric, config: Optional[SpeciationConfig] = None) -> None:
        """Create a speciation engine.

        Parameters
        ----------
        metric : CompatibilityMetric
            Distance strategy; lower means more compatible.
        config : SpeciationConfig, optional
            Initial threshold, species target and stagnation limit.  The engine
            keeps its own copy, so setters never touch the caller's object.
        """
        self.metric = metric
        self.config = replace(config) if config is not None else SpeciationConfig()
        self._threshold = self.config.compatibility_threshold
        self.context: Optional[RunContext] = None
        self.member_ordering: Optional[MemberOrdering] = None
        self.species_comparator: Optional[SpeciesComparator] = None
        self.generation = 0
        self.last_report: Optional[SpeciationReport] = None
        self._species_ids = itertools.count(1)
        self._present_ids: Optional[Set[int]] = None
        self._report: Optional[SpeciationReport] = None

    @property
    def compatibility_threshold(self) -> float:
        """Maximum leader distance for a genome to join a species."""
        return self._threshold

    @compatibility_threshold.setter
    def compatibility_threshold(self, value: float) -> None:
        self.config.compatibility_threshold = float(value)
        self._threshold = float(value)

    @property
    def max_species(self) -> int:
        """Target species ceiling; values below 1 disable threshold adjustment."""
        return self.config.max_species

    @max_species.setter
    def max_species(self, value: int) -> None:
        self.config.max_species = int(value)

    @property
    def max_stagnant_generations(self) -> int:
        """Generations without improvement after which a species may be removed."""
        return self.config.max_stagnant_generations

    @max_stagnant_generations.setter
    def max_stagnant_generations(self, value: int) -> None:
        self.config.max_stagnant_generations = int(value)

    def initialize(self, context: RunContext) -> None:
        """Bind the engine to a run, discarding any accumulated threshold drift."""

        if context.population_size < 1:
            raise SpeciationError(
                "Population size must be at least 1.",
                context={"population_size": context.population_size},
            )
        self.context = context
        self.member_ordering = MemberOrdering(context.selection_comparator)
        self.species_comparator = SpeciesComparator(context.best_comparator)
        self._threshold = self.config.compatibility_threshold
        self._species_ids = itertools.count(1)
        self._present_ids = None
        self.generation = 0
        self.last_report = None

    def _require_context(self) -> RunContext:
        if self.context is None:
            raise SpeciationError("Speciation engine used before initialize() was called.")
        return self.context

    @property
    def _population(self) -> Population:
        return self._require_context().population

    def seed_roster(self, genomes: Iterable[Genome]) -> Species:
        """Create the default species holding every genome when the roster is empty."""

        population = self._population
        if population.species:
            return population.species[0]
        genomes = list(genomes)
        if not genomes:
            raise SpeciationError("Can't seed species from an empty genome list.")
        species = Species(species_id=next(self._species_ids), leader=genomes[0])
        for genome in genomes[1:]:
            species.add(genome)
        population.species.append(species)
        logger.debug("Seeded default species {} with {} genomes", species.species_id, len(genomes))
        return species

    def add_species_member(self, species: Species, genome: Genome) -> None:
        """Add ``genome`` to ``species``, promoting it to leader if it out-ranks the current one."""

        context = self._require_context()
        if context.validation_mode and genome in species:
            raise SpeciationError(
                f"Species already contains genome: {genome!r}",
                context={"species_id": species.species_id, "genome_id": genome.genome_id},
            )
        if context.selection_comparator.compare(genome, species.leader) < 0:
            species.promote(genome)
        species.add(genome)

    def find_best_species(self) -> Optional[Species]:
        """
        Return the species that must never be removed.

        This is the species of the run's best genome when that genome takes part
        in the current generation.  Otherwise it is the species whose leader
        ranks best.
        """

        population = self._population
        if not population.species:
            return None
        best = self._require_context().best_genome
        if best is not None and (self._present_ids is None or best.genome_id in self._present_ids):
            species = population.find_species(best.species_id)
            if species is not None:
                return species
        return min(population.species, key=self.species_comparator.key())

    def remove_species(self, species: Species, reason: str = "removed") -> bool:
        """Remove ``species`` unless it is the best or the only species. Returns True if removed."""

        roster = self._population.species
        if species is self.find_best_species():
            return False
        if len(roster) <= 1:
            return False
        roster.remove(species)
        self._retire(species, reason)
        return True

    def _retire(self, species: Species, reason: str) -> None:
        species.removed = True
        species.offspring_count = 0
        for genome in species.members:
            if genome.species_id == species.species_id:
                genome.species_id = None
        if self._report is not None:
            self._report.removed[species.species_id] = reason
        logger.info("Removed species {} ({}, {} members)", species.species_id, reason, len(species.members))

    def perform_speciation(self, genomes: Iterable[Genome]) -> SpeciationReport:
        """Speciate a new generation and compute offspring counts for every species.

        Parameters
        ----------
        genomes : iterable of Genome
            The full genome list of the new generation.

        Returns
        -------
        SpeciationReport
            Allocation summary; offspring counts add up to the population size.
        """

        self._require_context()
        genomes = list(genomes)
        if not genomes:
            raise SpeciationError(
                "Can't speciate, the genome list is empty.",
                context={"generation": self.generation},
            )
        self.metric.reset()
        self._report = SpeciationReport(generation=self.generation, compatibility_threshold=self._threshold)
        try:
            pool = self._reset_species(genomes)
            self._speciate_and_allocate(pool)
            report = self._finish_report(genomes)
        finally:
            self._report = None
        self.last_report = report
        self.generation += 1
        logger.info(
            "Generation {}: {} species, threshold={:.3f}, allocation={}, leveled by {}",
            report.generation,
            report.species_count,
            report.compatibility_threshold,
            report.allocation,
            report.level_adjustment,
        )
        return report

    def _reset_species(self, genomes: List[Genome]) -> List[Genome]:
        """
        Purge species, evict dead or stagnant ones and return the genomes still to assign.

        The leader of an evicted species is not a leader any more, so it goes
        back into the pool with the other genomes.  It usually founds a new
        species with a fresh stagnation counter: stagnation eviction ends a
        species, not the lineage of its leader.
        """

        population = self._population
        self._present_ids = {genome.genome_id for genome in genomes}

        for species in list(population.species):
            species.purge()
            # the lineage died; disband the species but keep its genomes
            if species.leader.genome_id not in self._present_ids:
                self.remove_species(species, "leader_lost")
            elif species.gens_no_improvement > self.max_stagnant_generations:
                self.remove_species(species, "stagnant")

        if not population.species:
            raise SpeciationError(
                "Can't speciate, the population has no species.",
                context={"generation": self.generation},
            )

        leaders = {species.leader.genome_id for species in population.species}
        return [genome for genome in genomes if genome.genome_id not in leaders]

    def _speciate_and_allocate(self, genomes: List[Genome]) -> None:
        context = self._require_context()
        roster = self._population.species
        if not roster:
            raise SpeciationError(
                "Can't speciate, there are no species.",
                context={"generation": self.generation},
            )

        self._adjust_compatibility_threshold()

        max_score = 0.0
        for genome in genomes:
            if math.isfinite(genome.adjusted_score):
                max_score = max(max_score, genome.adjusted_score)

            target = None
            for species in roster:
                if self.metric.distance(genome, species.leader) <= self._threshold:
                    target = species
                    break

            if target is not None:
                self.add_species_member(target, genome)
            else:
                self._create_species(genome)

        total_species_score = 0.0
        for species in roster:
            total_species_score += species.calculate_share(context.should_minimize, max_score)
        self._report.total_share = total_species_score
        self._report.max_score = max_score

        if total_species_score < SCORE_EPSILON:
            # every species scored zero, so they are all equally bad
            self._divide_even(roster)
        else:
            self._divide_by_fittest(roster, total_species_score)

        self._report.level_adjustment = self._level_off()

        for species in self._population.species:
            self.member_ordering.sort(species.members)

    def _create_species(self, genome: Genome) -> Species:
        species = Species(species_id=next(self._species_ids), leader=genome)
        self._population.species.append(species)
        self._report.created.append(species.species_id)
        logger.debug("Created species {} led by genome {}", species.species_id, genome.genome_id)
        return species

    def _adjust_compatibility_threshold(self) -> None:
        """Nudge the threshold towards a species count between 2 and ``max_species``."""

        if self.max_species < 1:
            return

        count = len(self._population.species)
        increment = self.config.threshold_increment
        if count > self.max_species:
            self._threshold += increment
        elif count < 2:
            previous = self._threshold
            self._threshold -= increment
            floor = self.config.min_compatibility_threshold
            if floor is not None and self._threshold < floor:
                self._threshold = floor
                if previous > floor:
                    logger.warning("Compatibility threshold reached its floor of {}", floor)

    def _divide_even(self, roster: List[Species]) -> None:
        share = int(round(self._require_context().population_size / len(roster)))
        for species in roster:
            species.offspring_count = share
        self._report.allocation = "even"

    def _divide_by_fittest(self, roster: List[Species], total_species_score: float) -> None:
        """Give each species offspring in proportion to its share of the total score."""

        population_size = self._require_context().population_size
        best_species = self.find_best_species()

        for species in list(roster):
            share = int(round(population_size * species.offspring_share / total_species_score))

            if species is best_species and share <= 0:
                share = 1

            if not species.members or share <= 0:
                self.remove_species(species, "no_share")
            elif species.gens_no_improvement > self.max_stagnant_generations and species is not best_species:
                self.remove_species(species, "stagnant")
            else:
                species.offspring_count = share
        self._report.allocation = "proportional"

    def _level_off(self) -> int:
        """Correct rounding so offspring counts add up to the population size; returns the correction."""

        population_size = self._require_context().population_size
        roster = self._population.species
        if not roster:
            raise SpeciationError(
                "Can't speciate, next generation contains no species.",
                context={"generation": self.generation},
            )

        roster.sort(key=self.species_comparator.key())
        best_species = self.find_best_species()

        if roster[0].offspring_count == 0:
            roster[0].offspring_count = 1
        if best_species is not None and best_species.offspring_count == 0:
            best_species.offspring_count = 1

        diff = population_size - sum(species.offspring_count for species in roster)
        adjustment = diff

        if diff < 0:
            index = len(roster) - 1
            while diff != 0 and index > 0:
                species = roster[index]
                floor = 1 if species is best_species else 0
                taken = min(species.offspring_count - floor, -diff)
                if taken > 0:
                    species.offspring_count -= taken
                    diff += taken
                if species.offspring_count == 0:
                    del roster[index]
                    self._retire(species, "leveled_out")
                index -= 1
            if diff < 0:
                head = roster[0]
                head.offspring_count += diff
                if head.offspring_count == 0 and head is not best_species:
                    del roster[0]
                    self._retire(head, "leveled_out")
        elif diff > 0:
            roster[0].offspring_count += diff
        return adjustment

    def _finish_report(self, genomes: List[Genome]) -> SpeciationReport:
        report = self._report
        roster = self._population.species
        live = {species.species_id for species in roster}
        report.compatibility_threshold = self._threshold
        report.offspring = {species.species_id: species.offspring_count for species in roster}
        report.orphaned = [genome.genome_id for genome in genomes if genome.species_id not in live]
        report.states = dict(
            Counter(species.state(self.max_stagnant_generations).value for species in roster)
        )
        if report.orphaned:
            logger.debug("{} genomes lost reproduction rights with their species", len(report.orphaned))
        return report


__all__ = ["SCORE_EPSILON", "SpeciationConfig", "SpeciationEngine", "SpeciationReport"]
