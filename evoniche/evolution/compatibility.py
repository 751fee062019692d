"""
Compatibility metrics deciding whether two genomes belong to the same species.

A metric is a strategy object injected into the speciation engine.  Lower
distances mean more compatible genomes.  Symmetry is not required but keeps
species assignment stable across generations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Tuple, Type

import numpy as np

from .genome import Genome


class CompatibilityMetric(ABC):
    """Interface for pluggable compatibility distances."""

    @abstractmethod
    def distance(self, genome_a: Genome, genome_b: Genome) -> float:
        """Return a non-negative distance between two genomes."""

    def reset(self) -> None:
        """Hook invoked once per generation before any distance is requested."""

    def __call__(self, genome_a: Genome, genome_b: Genome) -> float:
        return self.distance(genome_a, genome_b)


class FunctionMetric(CompatibilityMetric):
    """Adapt a plain ``fn(genome_a, genome_b) -> float`` callable."""

    def __init__(self, fn: Callable[[Genome, Genome], float]) -> None:
        self.fn = fn

    def distance(self, genome_a: Genome, genome_b: Genome) -> float:
        return float(self.fn(genome_a, genome_b))


class EuclideanMetric(CompatibilityMetric):
    """L2 distance between gene vectors."""

    def distance(self, genome_a: Genome, genome_b: Genome) -> float:
        return float(np.linalg.norm(genome_a.values - genome_b.values))


class ManhattanMetric(CompatibilityMetric):
    """L1 distance between gene vectors, optionally averaged per gene."""

    def __init__(self, normalise: bool = False) -> None:
        self.normalise = normalise

    def distance(self, genome_a: Genome, genome_b: Genome) -> float:
        diff = np.abs(genome_a.values - genome_b.values)
        if self.normalise and diff.size:
            return float(diff.mean())
        return float(diff.sum())


class CachedMetric(CompatibilityMetric):
    """
    Memoise another metric by genome identifiers.

    The cache assumes the wrapped metric is symmetric and is cleared by
    :meth:`reset` at the start of every generation.
    """

    def __init__(self, inner: CompatibilityMetric) -> None:
        self.inner = inner
        self._distances: Dict[Tuple[int, int], float] = {}

    def distance(self, genome_a: Genome, genome_b: Genome) -> float:
        key = (genome_a.genome_id, genome_b.genome_id)
        cached = self._distances.get(key)
        if cached is None:
            cached = self.inner.distance(genome_a, genome_b)
            self._distances[key] = cached
            self._distances[(key[1], key[0])] = cached
        return cached

    def reset(self) -> None:
        self._distances.clear()
        self.inner.reset()

    def __len__(self) -> int:
        return len(self._distances)


class MetricRegistry:
    """Light-weight registry storing metric classes by name."""

    def __init__(self) -> None:
        self._registry: Dict[str, Type[CompatibilityMetric]] = {}

    def register(self, name: str, metric_cls: Type[CompatibilityMetric]) -> None:
        key = name.strip().lower()
        if not key:
            raise ValueError("Metric name cannot be empty.")
        self._registry[key] = metric_cls

    def get(self, name: str) -> Type[CompatibilityMetric]:
        key = name.strip().lower()
        if key not in self._registry:
            raise KeyError(f"Metric '{name}' is not registered. Available metrics: {sorted(self._registry)}")
        return self._registry[key]

    def available(self) -> Dict[str, Type[CompatibilityMetric]]:
        return dict(self._registry)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.strip().lower() in self._registry

    def __iter__(self) -> Iterable[str]:
        return iter(sorted(self._registry))


metric_registry = MetricRegistry()


def register_metric(name: str):
    """Decorator registering metrics in the global registry."""

    def decorator(cls: Type[CompatibilityMetric]) -> Type[CompatibilityMetric]:
        metric_registry.register(name, cls)
        return cls

    return decorator


def get_metric(name: str, *, cached: bool = False) -> CompatibilityMetric:
    """Instantiate a registered metric, optionally wrapped in a per-generation cache."""

    metric = metric_registry.get(name)()
    return CachedMetric(metric) if cached else metric


def list_metrics() -> Dict[str, Type[CompatibilityMetric]]:
    return metric_registry.available()


register_metric("euclidean")(EuclideanMetric)
register_metric("manhattan")(ManhattanMetric)


__all__ = [
    "CompatibilityMetric",
    "FunctionMetric",
    "EuclideanMetric",
    "ManhattanMetric",
    "CachedMetric",
    "MetricRegistry",
    "metric_registry",
    "register_metric",
    "get_metric",
    "list_metrics",
]
