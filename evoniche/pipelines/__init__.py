"""Pipeline exports."""

from .runner import EvoNiche, EvoNicheResult

__all__ = ["EvoNiche", "EvoNicheResult"]
