"""
SDK entry point exposing the `EvoNiche` orchestration class.

The runner resolves configuration (schema defaults, profiles, user overrides),
builds the population, the compatibility metric and the speciation engine,
then drives the reference evolutionary loop for the configured number of
generations. It serves as the backbone for the CLI.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from omegaconf import OmegaConf

from evoniche.evolution import (
    EvolutionConfig,
    EvolutionEngine,
    Genome,
    Population,
    ScoreFunction,
    SpeciationConfig,
    SpeciationEngine,
    SpeciationReport,
    get_metric,
)
from evoniche.exceptions import EvoNicheConfigError, EvoNicheRuntimeError
from evoniche.utils import ConfigLoader, ExperimentLogger
from evoniche.utils.config_reference import (
    as_dict as _config_schema_dict,
    find_field,
    to_console as _config_schema_console,
    to_markdown as _config_schema_markdown,
    write_markdown as _config_write_markdown,
)
from evoniche.utils.profiles import get_profile, list_profiles


def _slugify_name(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "run"


@dataclass
class EvoNicheResult:
    """Return payload exposed by the SDK."""

    run_id: str
    best_genome: Genome
    history: List[Dict[str, Any]]
    reports: List[SpeciationReport]
    engine: EvolutionEngine
    profile: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def best_score(self) -> float:
        return float(self.best_genome.score)

    def species_history(self) -> List[Dict[str, object]]:
        """Per-generation speciation summaries as plain dictionaries."""
        return [report.as_dict() for report in self.reports]


class EvoNiche:
    """Primary interface coordinating configuration, speciation and evolution.

    Use :meth:`describe_config` for interactive documentation of all tunable
    parameters.
    """

    @classmethod
    def describe_config(
        cls,
        section: Optional[str] = None,
        *,
        as_markdown: bool = False,
        to_console: bool = False,
    ) -> Union[str, Dict[str, Dict[str, Dict[str, object]]]]:
        """Return metadata describing EvoNiche configuration keys.

        Parameters
        ----------
        section : str, optional
            When provided, only return information for a single section
            (for example ``"speciation"``). If omitted, all sections are returned.
        as_markdown : bool, default False
            When True, the result is formatted as Markdown text suitable for
            documentation. Otherwise a nested dictionary is returned.
        to_console : bool, default False
            When True, pretty-print the configuration table to stdout. The
            return value is still provided for programmatic use.

        Returns
        -------
        dict or str
            Nested configuration metadata or a markdown string when
            ``as_markdown`` is set.
        """

        if as_markdown:
            markdown = _config_schema_markdown(section=section)
            if to_console:
                print(markdown)
            return markdown

        if to_console:
            print(_config_schema_console(section=section))
        return _config_schema_dict(section)

    @classmethod
    def explain(cls, key: str) -> str:
        """Return a human readable description for a configuration key."""

        field_meta = find_field(key)
        if field_meta is not None:
            return field_meta.explain()
        raise EvoNicheConfigError(
            f"Unknown configuration key '{key}'.",
            context={"key": key},
        )

    @classmethod
    def generate_config_docs(cls, path: Union[str, Path] = Path("CONFIG.md")) -> Path:
        """Render the configuration reference to a markdown file."""

        return _config_write_markdown(Path(path))

    @classmethod
    def available_profiles(cls) -> Dict[str, Dict[str, object]]:
        """Return a mapping of available configuration profiles."""

        return list_profiles()

    def __init__(
        self,
        profile: Optional[str] = None,
        config: Optional[Union[str, Path, Dict[str, Any]]] = None,
        global_config: Optional[Union[str, Path, Dict[str, Any]]] = None,
        run_name: Optional[str] = None,
    ) -> None:
        """Create a new EvoNiche orchestrator.

        Parameters
        ----------
        profile : str, optional
            Optional configuration profile (``"fast"``, ``"balanced"``,
            ``"exhaustive"``) merged before overrides.
        config : str | Path | dict, optional
            Configuration overrides supplied as a YAML/JSON file or a mapping.
        global_config : str | Path | dict, optional
            Base configuration merged on top of the schema defaults before ``config``.
        run_name : str, optional
            Optional slug used to name the run. Defaults to the objective name.
        """

        self.profile = profile

        profile_overrides: Dict[str, Any] = {}
        if profile:
            try:
                profile_overrides = get_profile(profile)
            except KeyError as exc:
                raise EvoNicheConfigError(str(exc), context={"profile": profile}) from exc

        overrides = None
        if isinstance(config, dict):
            merged_overrides = OmegaConf.merge(
                OmegaConf.create(profile_overrides),
                OmegaConf.create(dict(config)),
            )
            overrides = OmegaConf.to_container(merged_overrides, resolve=True)  # type: ignore[assignment]
            config = None
        elif profile_overrides:
            overrides = profile_overrides

        try:
            self.config_loader = ConfigLoader(global_config)
            loaded = self.config_loader.load(config=config, overrides=overrides)
        except (ValueError, TypeError, FileNotFoundError) as exc:
            raise EvoNicheConfigError(str(exc), context={"profile": profile}) from exc
        self.config = loaded.to_dict()

        tracking_cfg = self.config["tracking"]
        self.logger = ExperimentLogger(
            experiment_name=tracking_cfg["experiment_name"],
            tracking_uri=tracking_cfg.get("tracking_uri"),
            enabled=bool(tracking_cfg.get("enable_mlflow", False)),
        )
        base_slug = _slugify_name(run_name or self.config["engine"]["objective"])
        self.run_id = f"{base_slug}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    def _build_speciation(self) -> SpeciationEngine:
        spec_cfg = self.config["speciation"]
        try:
            metric = get_metric(str(spec_cfg["metric"]), cached=bool(spec_cfg["cache_distances"]))
        except KeyError as exc:
            raise EvoNicheConfigError(str(exc), context={"metric": spec_cfg["metric"]}) from exc
        floor = spec_cfg.get("min_compatibility_threshold")
        return SpeciationEngine(
            metric,
            SpeciationConfig(
                compatibility_threshold=float(spec_cfg["compatibility_threshold"]),
                max_species=int(spec_cfg["max_species"]),
                max_stagnant_generations=int(spec_cfg["max_stagnant_generations"]),
                threshold_increment=float(spec_cfg["threshold_increment"]),
                min_compatibility_threshold=None if floor is None else float(floor),
            ),
        )

    def _build_engine(self) -> EvolutionEngine:
        engine_cfg = self.config["engine"]
        try:
            score_function = ScoreFunction.from_name(
                str(engine_cfg["objective"]),
                should_minimize=bool(engine_cfg["should_minimize"]),
            )
        except KeyError as exc:
            raise EvoNicheConfigError(str(exc), context={"objective": engine_cfg["objective"]}) from exc

        population_size = int(engine_cfg["population"])
        if population_size < 1:
            raise EvoNicheConfigError(
                "engine.population must be at least 1.",
                context={"population": population_size},
            )
        seed = engine_cfg.get("seed")
        engine = EvolutionEngine(
            population=Population(population_size=population_size),
            speciation=self._build_speciation(),
            score_function=score_function,
            logger=self.logger,
            config=EvolutionConfig(
                dimensions=int(engine_cfg["dimensions"]),
                bounds=float(engine_cfg["bounds"]),
                mutation_sigma=float(engine_cfg["mutation_sigma"]),
                crossover_rate=float(engine_cfg["crossover_rate"]),
                selection_fraction=float(engine_cfg["selection_fraction"]),
                seed=None if seed is None else int(seed),
            ),
            validation_mode=bool(self.config["speciation"]["validation_mode"]),
        )
        engine.seed()
        return engine

    def run(self) -> EvoNicheResult:
        """Evolve for the configured number of generations.

        Returns
        -------
        EvoNicheResult
            Best genome found, per-generation summaries and speciation reports.
        """

        engine = self._build_engine()
        generations = int(self.config["engine"]["generations"])
        history: List[Dict[str, Any]] = []

        params = {f"{section}.{key}": value for section in ("engine", "speciation") for key, value in self.config[section].items()}
        with self.logger.start_run(run_name=self.run_id, params=params):
            for generation in range(generations):
                summary, _, _ = engine.run_generation(generation)
                history.append(summary)

        if engine.best_ever is None:
            raise EvoNicheRuntimeError(
                "Evolution did not produce any genomes. Check engine.generations.",
                context={"generations": generations},
            )

        return EvoNicheResult(
            run_id=self.run_id,
            best_genome=engine.best_ever,
            history=history,
            reports=list(engine.reports),
            engine=engine,
            profile=self.profile,
            config=self.config,
        )
