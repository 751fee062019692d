"""Tests for compatibility metrics and the metric registry."""

import pytest

from evoniche.evolution import (
    CachedMetric,
    CompatibilityMetric,
    EuclideanMetric,
    FunctionMetric,
    Genome,
    ManhattanMetric,
    get_metric,
    list_metrics,
    register_metric,
)


class CountingMetric(CompatibilityMetric):
    def __init__(self) -> None:
        self.calls = 0

    def distance(self, genome_a: Genome, genome_b: Genome) -> float:
        self.calls += 1
        return abs(float(genome_a.values[0] - genome_b.values[0]))


def test_euclidean_and_manhattan_distances() -> None:
    a = Genome(values=[0.0, 0.0])
    b = Genome(values=[3.0, 4.0])
    assert EuclideanMetric().distance(a, b) == pytest.approx(5.0)
    assert ManhattanMetric()(a, b) == pytest.approx(7.0)
    assert ManhattanMetric(normalise=True)(a, b) == pytest.approx(3.5)


def test_function_metric_wraps_callables() -> None:
    metric = FunctionMetric(lambda a, b: len(a.values) + len(b.values))
    assert metric(Genome(values=[1.0]), Genome(values=[1.0, 2.0])) == 3.0


def test_cached_metric_is_symmetric_and_resets() -> None:
    inner = CountingMetric()
    metric = CachedMetric(inner)
    a, b = Genome(values=[0.0]), Genome(values=[2.0])

    assert metric.distance(a, b) == 2.0
    assert metric.distance(b, a) == 2.0
    assert inner.calls == 1
    assert len(metric) == 2

    metric.reset()
    assert len(metric) == 0
    metric.distance(a, b)
    assert inner.calls == 2


def test_registry_lookup() -> None:
    assert {"euclidean", "manhattan"} <= set(list_metrics())
    assert isinstance(get_metric("Euclidean"), EuclideanMetric)
    cached = get_metric("manhattan", cached=True)
    assert isinstance(cached, CachedMetric)
    assert isinstance(cached.inner, ManhattanMetric)


def test_registry_rejects_unknown_metric() -> None:
    with pytest.raises(KeyError):
        get_metric("hamming")


def test_register_metric_decorator() -> None:
    @register_metric("first-gene")
    class FirstGeneMetric(CountingMetric):
        pass

    assert isinstance(get_metric("first-gene"), FirstGeneMetric)


def test_speciation_clears_the_cache_each_generation(make_engine, make_genome) -> None:
    from evoniche.evolution import SpeciationEngine

    engine, context = make_engine()
    metric = CachedMetric(EuclideanMetric())
    engine = SpeciationEngine(metric, engine.config)
    engine.initialize(context)
    genomes = [make_genome(0.0, 1.0), make_genome(0.5, 1.0), make_genome(5.0, 1.0)]
    engine.seed_roster(genomes)

    engine.perform_speciation(genomes)
    first = len(metric)
    engine.perform_speciation(genomes)

    assert first > 0
    assert len(metric) <= first
