"""
Unified configuration loader for EvoNiche.

This module normalises configuration handling across the CLI and SDK layers.
Configurations can be provided as dictionaries, JSON/YAML files, or YAML
strings and are merged on top of the schema defaults.  Keys that the schema
does not know about are rejected so typos surface immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Union

import yaml
from omegaconf import DictConfig, OmegaConf

from .config_reference import CONFIG_SCHEMA, defaults

ConfigLike = Union[str, Path, Mapping[str, Any], DictConfig]


@dataclass
class LoadedConfig:
    """Container that exposes both OmegaConf and plain-dict views."""

    data: DictConfig

    def to_dict(self) -> Dict[str, Any]:
        return OmegaConf.to_container(self.data, resolve=True)  # type: ignore[return-value]

    def section(self, name: str) -> Dict[str, Any]:
        return dict(self.to_dict().get(name, {}))

    def __getitem__(self, item: str) -> Any:
        return self.data[item]


def _validate(conf: DictConfig) -> None:
    """Reject sections and keys missing from the configuration schema."""

    for section, entries in conf.items():
        if section not in CONFIG_SCHEMA:
            raise ValueError(
                f"Unknown configuration section '{section}'. Options: {sorted(CONFIG_SCHEMA)}"
            )
        if not isinstance(entries, DictConfig):
            raise ValueError(f"Configuration section '{section}' must be a mapping.")
        for key in entries.keys():
            if key not in CONFIG_SCHEMA[section]:
                raise ValueError(
                    f"Unknown configuration key '{section}.{key}'. "
                    f"Options: {sorted(CONFIG_SCHEMA[section])}"
                )


class ConfigLoader:
    """
    Load and merge EvoNiche configuration sources.

    Parameters
    ----------
    global_config : Optional[ConfigLike]
        Optional path or mapping merged on top of the schema defaults.
    """

    def __init__(self, global_config: Optional[ConfigLike] = None) -> None:
        self._global_conf = OmegaConf.create(defaults())
        if global_config is not None:
            self._global_conf = self._merge(self._global_conf, self._coerce(global_config))

    def _coerce(self, source: ConfigLike) -> DictConfig:
        """Convert arbitrary config-like inputs into an OmegaConf instance."""
        if isinstance(source, DictConfig):
            return source
        if isinstance(source, Mapping):
            return OmegaConf.create(dict(source))
        if isinstance(source, Path):
            return self._load_path(source)
        if isinstance(source, str):
            potential_path = Path(source)
            if potential_path.suffix and potential_path.exists():
                return self._load_path(potential_path)
            try:
                parsed = yaml.safe_load(source)
            except yaml.YAMLError as exc:
                raise ValueError(f"Failed to parse configuration string: {exc}") from exc
            if not isinstance(parsed, MutableMapping):
                raise ValueError("Configuration string must evaluate to a mapping.")
            return OmegaConf.create(dict(parsed))
        raise TypeError(f"Unsupported configuration source: {type(source)!r}")

    def _load_path(self, path: Path) -> DictConfig:
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        suffix = path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            loaded = OmegaConf.load(path)
        elif suffix == ".json":
            loaded = OmegaConf.create(yaml.safe_load(path.read_text(encoding="utf-8")))
        else:
            raise ValueError(f"Unsupported configuration file format: '{suffix}'. Expected YAML or JSON.")
        if not isinstance(loaded, DictConfig):
            raise ValueError(f"Configuration file must contain a mapping: {path}")
        return loaded

    @staticmethod
    def _merge(base: DictConfig, extra: DictConfig) -> DictConfig:
        _validate(extra)
        return OmegaConf.merge(base, extra)  # type: ignore[return-value]

    def load(
        self,
        config: Optional[ConfigLike] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> LoadedConfig:
        """Merge global defaults with optional additional configuration and overrides."""

        merged = self._global_conf.copy()

        if config is not None:
            merged = self._merge(merged, self._coerce(config))

        if overrides:
            merged = self._merge(merged, OmegaConf.create(dict(overrides)))

        return LoadedConfig(merged)
