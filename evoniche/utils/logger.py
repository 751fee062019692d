"""
Unified logging utilities that wrap Loguru and MLflow.

The `ExperimentLogger` offers a small convenience layer that the rest of the
framework can use without worrying about tracking URIs or missing optional
dependencies.  Metrics and parameters are forwarded to MLflow when available
and enabled, while Loguru handles console output.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Dict, Iterator, Mapping, Optional

from loguru import logger

try:
    import mlflow
except ImportError:  # pragma: no cover - fallback path is best effort only.
    mlflow = None  # type: ignore[assignment]


def configure_console(level: str = "INFO") -> int:
    """Route Loguru output to stderr at ``level``; returns the sink id."""
    logger.remove()
    return logger.add(sys.stderr, level=level.upper())


class ExperimentLogger:
    """Thin convenience wrapper around Loguru and MLflow."""

    def __init__(
        self,
        experiment_name: str,
        tracking_uri: Optional[str] = None,
        enabled: bool = True,
    ) -> None:
        self.experiment_name = experiment_name
        self.tracking_uri = tracking_uri
        self.enabled = enabled
        self.history: list[Dict[str, float]] = []
        self.params: Dict[str, object] = {}

    @property
    def tracking(self) -> bool:
        return bool(self.enabled and mlflow is not None)

    def _ensure_mlflow(self) -> None:
        """Configure the MLflow tracking URI and experiment if MLflow is available."""
        if not self.tracking:
            return
        if self.tracking_uri:
            mlflow.set_tracking_uri(self.tracking_uri)
        mlflow.set_experiment(self.experiment_name)

    @contextmanager
    def start_run(self, run_name: str, params: Optional[Mapping[str, object]] = None) -> Iterator[None]:
        """
        Context manager that opens and closes an MLflow run while emitting log messages.

        When MLflow is not available or disabled the context still works, so
        upstream code can rely on the same interface without extra guards.
        """

        logger.info("Starting EvoNiche run: {}", run_name)
        if self.tracking:
            self._ensure_mlflow()
            with mlflow.start_run(run_name=run_name):
                if params:
                    self.log_params(params)
                yield
        else:
            if params:
                self.log_params(params)
            yield
        logger.info("Completed EvoNiche run: {}", run_name)

    def log_params(self, params: Mapping[str, object]) -> None:
        logger.debug("Params: {}", dict(params))
        self.params.update(params)
        if self.tracking:
            mlflow.log_params(dict(params))

    def log_metrics(self, metrics: Dict[str, float], step: Optional[int] = None) -> None:
        """Emit metrics to the console, the local history and MLflow if enabled."""
        logger.debug("Metrics@{}: {}", step if step is not None else "-", metrics)
        self.history.append({"step": -1 if step is None else step, **metrics})
        if self.tracking:
            mlflow.log_metrics(metrics, step=step)
