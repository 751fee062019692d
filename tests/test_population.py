"""
Tests for population and genome management utilities.
"""

import numpy as np

from evoniche.evolution import Genome, Population, Species


def test_population_seed_initialises_the_requested_size() -> None:
    """Seeding a population should create the requested number of genomes."""
    population = Population(population_size=5)
    population.seed(np.random.default_rng(0), dimensions=3, bounds=2.0)
    assert len(population) == 5
    assert all(genome.values.shape == (3,) for genome in population.genomes)
    assert all(np.all(np.abs(genome.values) <= 2.0) for genome in population.genomes)


def test_species_lookup_follows_genome_back_reference() -> None:
    population = Population(population_size=2)
    genome = Genome(values=[0.0])
    species = Species(species_id=3, leader=genome)
    population.species.append(species)

    assert population.species_of(genome) is species
    assert population.find_species(None) is None
    assert population.find_species(99) is None
    assert list(population.iter_members()) == [genome]


def test_genomes_compare_by_identity() -> None:
    a = Genome(values=[1.0, 2.0])
    b = Genome(values=[1.0, 2.0])
    assert a != b
    assert a.genome_id != b.genome_id
    assert not a.is_scored


def test_mutation_produces_fresh_unscored_child() -> None:
    parent = Genome(values=[0.0, 0.0], score=1.0, adjusted_score=1.0)
    child = parent.mutate(np.random.default_rng(1), sigma=0.5, generation=4)
    assert child is not parent
    assert child.birth_generation == 4
    assert child.parent_ids == [parent.genome_id]
    assert not child.is_scored
    assert not np.array_equal(child.values, parent.values)


def test_crossover_draws_each_gene_from_a_parent() -> None:
    a = Genome(values=np.zeros(8))
    b = Genome(values=np.ones(8))
    child = Genome.crossover(a, b, np.random.default_rng(3), generation=1)
    assert set(np.unique(child.values)) <= {0.0, 1.0}
    assert child.parent_ids == [a.genome_id, b.genome_id]


def test_clone_keeps_values_but_not_identity() -> None:
    genome = Genome(values=[1.5], score=2.0, adjusted_score=2.0, birth_generation=2)
    copy = genome.clone()
    assert copy.genome_id != genome.genome_id
    assert copy.values.tolist() == [1.5]
    assert copy.birth_generation == 2
    assert not copy.is_scored


def test_offspring_total_sums_species_budgets() -> None:
    population = Population(population_size=10)
    first = Species(species_id=1, leader=Genome(values=[0.0]), offspring_count=7)
    second = Species(species_id=2, leader=Genome(values=[5.0]), offspring_count=3)
    population.species.extend([first, second])
    assert population.offspring_total() == 10
    second.offspring_count = 0
    assert population.offspring_total() == 7
