"""
Centralised exception hierarchy for EvoNiche.

Fatal conditions raise typed exceptions instead of generic ``ValueError`` or
``RuntimeError`` instances so the CLI and SDK layers can report the failing
generation, species or genome through the attached ``context`` mapping.
"""

from __future__ import annotations

from typing import Any


class EvoNicheError(Exception):
    """Base class for all EvoNiche specific exceptions."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class EvoNicheConfigError(EvoNicheError):
    """Raised for configuration or profile related issues."""


class EvoNicheRuntimeError(EvoNicheError):
    """Raised for runtime orchestration issues."""


class SpeciationError(EvoNicheRuntimeError):
    """Raised when a generation cannot be speciated; the generation is aborted."""


__all__ = [
    "EvoNicheError",
    "EvoNicheConfigError",
    "EvoNicheRuntimeError",
    "SpeciationError",
]
