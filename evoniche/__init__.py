"""Top-level package exposing EvoNiche SDK entrypoints."""

from .evolution import SpeciationConfig, SpeciationEngine, SpeciationReport
from .exceptions import EvoNicheError, SpeciationError
from .pipelines import EvoNiche, EvoNicheResult

__version__ = "0.1.0"

__all__ = [
    "EvoNiche",
    "EvoNicheResult",
    "EvoNicheError",
    "SpeciationConfig",
    "SpeciationEngine",
    "SpeciationError",
    "SpeciationReport",
]
