"""
Predefined configuration profiles for EvoNiche.

Profiles provide convenient shortcuts for common experimentation modes
such as quick smoke tests or long searches with many species. They are
merged on top of global defaults before user overrides are applied.
"""

from __future__ import annotations

from typing import Dict

from omegaconf import OmegaConf


PROFILES: Dict[str, Dict[str, object]] = {
    "fast": {
        "engine": {
            "generations": 3,
            "population": 30,
            "dimensions": 2,
        },
        "speciation": {
            "max_species": 6,
        },
    },
    "balanced": {
        "engine": {
            "generations": 20,
            "population": 100,
        },
        "speciation": {
            "max_species": 15,
            "cache_distances": True,
        },
    },
    "exhaustive": {
        "engine": {
            "generations": 100,
            "population": 300,
            "dimensions": 10,
            "objective": "rastrigin",
        },
        "speciation": {
            "max_species": 40,
            "max_stagnant_generations": 20,
            "cache_distances": True,
        },
    },
}


def list_profiles() -> Dict[str, Dict[str, object]]:
    """Return a copy of the registered profiles."""

    return {name: OmegaConf.to_container(OmegaConf.create(conf), resolve=True) for name, conf in PROFILES.items()}


def get_profile(name: str) -> Dict[str, object]:
    """Return a profile configuration by name."""

    if name not in PROFILES:
        raise KeyError(f"Unknown profile '{name}'. Available profiles: {list(PROFILES)}")
    return OmegaConf.to_container(OmegaConf.create(PROFILES[name]), resolve=True)
