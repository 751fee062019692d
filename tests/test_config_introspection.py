from pathlib import Path

import pytest

from evoniche import EvoNiche
from evoniche.exceptions import EvoNicheConfigError


def test_describe_config_dict_output() -> None:
    data = EvoNiche.describe_config(section="speciation")
    assert "speciation" in data
    assert "compatibility_threshold" in data["speciation"]
    assert data["speciation"]["max_species"]["default"] == 40


def test_describe_config_markdown_console(capsys) -> None:
    EvoNiche.describe_config(section="engine", as_markdown=True, to_console=True)
    captured = capsys.readouterr().out
    assert "EvoNiche Configuration Reference" in captured
    assert "## Engine" in captured


def test_explain_config_key() -> None:
    text = EvoNiche.explain("compatibility-threshold")
    assert "section=speciation" in text
    assert "leader distance" in text


def test_explain_unknown_key_raises() -> None:
    with pytest.raises(EvoNicheConfigError) as err:
        EvoNiche.explain("not_a_key")
    assert err.value.context["key"] == "not_a_key"


def test_generate_config_docs(tmp_path: Path) -> None:
    output = tmp_path / "CONFIG.md"
    EvoNiche.generate_config_docs(output)
    assert output.exists()
    content = output.read_text(encoding="utf-8")
    assert "Configuration Reference" in content
    assert "`max_stagnant_generations`" in content
