import math

from evoniche.evolution import AdjustedScoreComparator, MemberOrdering, ScoreComparator, SpeciesComparator
from evoniche.evolution.species import Species


def test_minimising_comparator_prefers_lower_scores(make_genome) -> None:
    comparator = ScoreComparator(should_minimize=True)
    low, high = make_genome(0.0, 1.0), make_genome(0.0, 2.0)
    assert comparator.compare(low, high) < 0
    assert comparator.compare(high, low) > 0
    assert comparator.is_better(low, high)
    assert comparator.best([high, low]) is low


def test_maximising_comparator_prefers_higher_scores(make_genome) -> None:
    comparator = ScoreComparator(should_minimize=False)
    low, high = make_genome(0.0, 1.0), make_genome(0.0, 2.0)
    assert comparator.best([low, high]) is high


def test_non_finite_scores_rank_last(make_genome) -> None:
    for minimize in (True, False):
        comparator = ScoreComparator(should_minimize=minimize)
        scored = make_genome(0.0, 100.0)
        assert comparator.best([make_genome(0.0, math.nan), scored, make_genome(0.0, math.inf)]) is scored


def test_ties_keep_the_earliest_genome(make_genome) -> None:
    comparator = ScoreComparator(should_minimize=True)
    first, second = make_genome(0.0, 1.0), make_genome(0.0, 1.0)
    assert comparator.compare(first, second) == 0
    assert comparator.best([first, second]) is first


def test_selection_comparator_reads_adjusted_score(make_genome) -> None:
    genome_a = make_genome(0.0, 1.0)
    genome_b = make_genome(0.0, 1.0)
    genome_b.adjusted_score = 0.5
    assert AdjustedScoreComparator(should_minimize=True).compare(genome_b, genome_a) < 0
    assert ScoreComparator(should_minimize=True).compare(genome_b, genome_a) == 0


def test_member_ordering_breaks_ties_by_youth(make_genome) -> None:
    ordering = MemberOrdering(AdjustedScoreComparator(should_minimize=True))
    old = make_genome(0.0, 1.0, birth_generation=1)
    young = make_genome(0.0, 1.0, birth_generation=5)
    best = make_genome(0.0, 0.5, birth_generation=0)
    members = [old, young, best]
    ordering.sort(members)
    assert members == [best, young, old]


def test_species_comparator_ranks_by_leader(make_genome) -> None:
    comparator = SpeciesComparator(ScoreComparator(should_minimize=False))
    weak = Species(species_id=1, leader=make_genome(0.0, 1.0))
    strong = Species(species_id=2, leader=make_genome(5.0, 9.0))
    assert sorted([weak, strong], key=comparator.key()) == [strong, weak]
