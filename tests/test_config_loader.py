"""Tests covering the EvoNiche configuration loader behaviour."""

from pathlib import Path

import pytest

from evoniche.utils import ConfigLoader
from evoniche.utils.profiles import get_profile, list_profiles


def test_config_loader_starts_from_schema_defaults() -> None:
    config = ConfigLoader().load().to_dict()
    assert config["speciation"]["compatibility_threshold"] == 1.0
    assert config["speciation"]["max_stagnant_generations"] == 15
    assert config["engine"]["objective"] == "sphere"


def test_config_loader_merges_file_overrides(tmp_path: Path) -> None:
    """File configuration should override global defaults."""
    path = tmp_path / "run.yaml"
    path.write_text("speciation:\n  max_species: 7\nengine:\n  population: 12\n", encoding="utf-8")
    config = ConfigLoader({"engine": {"generations": 4}}).load(path).to_dict()
    assert config["speciation"]["max_species"] == 7
    assert config["engine"]["population"] == 12
    assert config["engine"]["generations"] == 4


def test_config_loader_accepts_dict_overrides() -> None:
    loader = ConfigLoader({"engine": {"generations": 2}})
    config = loader.load(overrides={"engine": {"population": 5}}).to_dict()
    assert config["engine"]["generations"] == 2
    assert config["engine"]["population"] == 5


def test_config_loader_accepts_yaml_strings() -> None:
    config = ConfigLoader().load("speciation: {metric: manhattan}").to_dict()
    assert config["speciation"]["metric"] == "manhattan"


def test_config_loader_unknown_section_raises() -> None:
    loader = ConfigLoader()
    with pytest.raises(ValueError) as err:
        loader.load(overrides={"unknown_section": {"foo": 1}})
    assert "unknown_section" in str(err.value)


def test_config_loader_unknown_key_raises() -> None:
    loader = ConfigLoader()
    with pytest.raises(ValueError) as err:
        loader.load(overrides={"speciation": {"invalid_key": 1}})
    assert "speciation.invalid_key" in str(err.value)


def test_config_loader_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader().load(tmp_path / "missing.yaml")


def test_profiles_only_use_known_keys() -> None:
    loader = ConfigLoader()
    for name in list_profiles():
        loader.load(overrides=get_profile(name))


def test_unknown_profile_raises() -> None:
    with pytest.raises(KeyError):
        get_profile("turbo")
