"""
Environment and installation diagnostics for EvoNiche (``evoniche doctor``).

Besides import checks for the runtime stack, the doctor validates the shipped
configuration schema and profiles and runs one tiny speciation generation to
confirm that offspring budgets add up on this installation.
"""

from __future__ import annotations

import importlib
import platform
import sys
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional

MIN_PYTHON = (3, 9)
RUNTIME_MODULES = ("numpy", "omegaconf", "yaml", "loguru")
TRACKING_MODULES = ("mlflow",)


@dataclass
class CheckResult:
    check: str
    status: str
    details: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        payload = asdict(self)
        if payload["details"] is None:
            payload.pop("details")
        return payload


def _interpreter() -> CheckResult:
    version = sys.version_info
    details = f"Detected Python {version.major}.{version.minor}.{version.micro} on {platform.system()} {platform.machine()}"
    if version < MIN_PYTHON:
        return CheckResult("Python runtime", "fail", f"{details} (requires >= {MIN_PYTHON[0]}.{MIN_PYTHON[1]})")
    return CheckResult("Python runtime", "pass", details)


def _module(name: str, *, optional: bool = False) -> CheckResult:
    check = f"Python package '{name}' import"
    try:
        module = importlib.import_module(name)
    except ImportError as exc:
        return CheckResult(check, "warn" if optional else "fail", f"{exc.__class__.__name__}: {exc}")
    return CheckResult(check, "pass", str(getattr(module, "__version__", "unknown")))


def _schema() -> CheckResult:
    from evoniche.utils.config_reference import CONFIG_SCHEMA, SCHEMA_PATH

    keys = sum(len(fields) for fields in CONFIG_SCHEMA.values())
    return CheckResult("Default config schema", "pass", f"{SCHEMA_PATH} ({keys} keys)")


def _profiles() -> CheckResult:
    from evoniche.utils import ConfigLoader
    from evoniche.utils.profiles import get_profile, list_profiles

    loader = ConfigLoader()
    names = sorted(list_profiles())
    for name in names:
        loader.load(overrides=get_profile(name))
    return CheckResult("Configuration profiles", "pass", ", ".join(names))


def _metrics() -> CheckResult:
    from evoniche.evolution import list_metrics

    names = sorted(list_metrics())
    return CheckResult("Compatibility metrics", "pass" if names else "fail", ", ".join(names) or None)


def _speciation_smoke() -> CheckResult:
    import numpy as np

    from evoniche.evolution import (
        EuclideanMetric,
        Genome,
        Population,
        RunContext,
        ScoreFunction,
        SpeciationEngine,
    )

    population = Population(population_size=12)
    context = RunContext(population=population, score_function=ScoreFunction.from_name("sphere"))
    engine = SpeciationEngine(EuclideanMetric())
    engine.initialize(context)
    genomes = [Genome(values=np.array([2.0 * idx])) for idx in range(12)]
    for genome in genomes:
        context.score_function.score(genome)
    engine.seed_roster(genomes)
    report = engine.perform_speciation(genomes)
    ok = report.total_offspring == population.population_size
    return CheckResult(
        "Speciation smoke run",
        "pass" if ok else "fail",
        f"{report.species_count} species, {report.total_offspring}/{population.population_size} offspring",
    )


def _guarded(check: str, run_check: Callable[[], CheckResult]) -> CheckResult:
    try:
        return run_check()
    except Exception as exc:  # noqa: BLE001
        return CheckResult(check, "fail", f"{exc.__class__.__name__}: {exc}")


def run_doctor() -> List[Dict[str, Optional[str]]]:
    """
    Execute the diagnostics.

    Returns
    -------
    list of dict
        One entry per check with ``check``, ``status`` (``pass``, ``warn`` or
        ``fail``) and optional ``details``.
    """

    results = [_interpreter()]
    results.extend(_module(name) for name in RUNTIME_MODULES)
    results.extend(_module(name, optional=True) for name in TRACKING_MODULES)
    results.append(_guarded("Default config schema", _schema))
    results.append(_guarded("Configuration profiles", _profiles))
    results.append(_guarded("Compatibility metrics", _metrics))
    results.append(_guarded("Speciation smoke run", _speciation_smoke))
    return [result.as_dict() for result in results]
