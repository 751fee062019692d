"""
Objective functions and score descriptors for EvoNiche runs.

The speciation core never computes fitness; it only needs to know whether the
score function should be minimized.  The objectives here drive the reference
evolutionary loop and the CLI demo runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np

from .genome import Genome


def sphere(values: np.ndarray) -> float:
    return float(np.sum(values**2))


def rastrigin(values: np.ndarray) -> float:
    return float(10.0 * values.size + np.sum(values**2 - 10.0 * np.cos(2.0 * np.pi * values)))


def rosenbrock(values: np.ndarray) -> float:
    if values.size < 2:
        return 0.0
    return float(np.sum(100.0 * (values[1:] - values[:-1] ** 2) ** 2 + (1.0 - values[:-1]) ** 2))


OBJECTIVES: Dict[str, Callable[[np.ndarray], float]] = {
    "sphere": sphere,
    "rastrigin": rastrigin,
    "rosenbrock": rosenbrock,
}


@dataclass
class ScoreFunction:
    """Score a genome and describe the optimisation direction."""

    objective: Callable[[np.ndarray], float]
    should_minimize: bool = True
    name: str = "custom"

    @classmethod
    def from_name(cls, name: str, should_minimize: bool = True) -> "ScoreFunction":
        key = name.strip().lower()
        if key not in OBJECTIVES:
            raise KeyError(f"Unknown objective '{name}'. Available objectives: {sorted(OBJECTIVES)}")
        return cls(objective=OBJECTIVES[key], should_minimize=should_minimize, name=key)

    def score(self, genome: Genome) -> float:
        """Score ``genome`` in place; the adjusted score mirrors the raw score."""

        value = self.objective(genome.values)
        genome.score = value
        genome.adjusted_score = value
        return value
