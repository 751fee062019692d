import json

from cli import main


def test_run_command_prints_summary(capsys) -> None:
    main(["run", "--profile", "fast", "--generations", "2", "--log-level", "WARNING"])
    payload = json.loads(capsys.readouterr().out)
    assert payload["generations"] == 2
    assert payload["final_species"] >= 1
    assert payload["final_threshold"] > 0


def test_bare_options_default_to_run(capsys) -> None:
    main(["--profile", "fast", "--generations", "1", "--log-level", "ERROR"])
    assert json.loads(capsys.readouterr().out)["generations"] == 1


def test_list_profiles(capsys) -> None:
    main(["list-profiles"])
    assert set(json.loads(capsys.readouterr().out)) == {"fast", "balanced", "exhaustive"}


def test_describe_single_key(capsys) -> None:
    main(["describe-config", "--key", "max_species"])
    assert "section=speciation" in capsys.readouterr().out


def test_generate_config_docs(tmp_path, capsys) -> None:
    output = tmp_path / "CONFIG.md"
    main(["generate-config-docs", "--output", str(output)])
    assert output.exists()
    assert "generated" in capsys.readouterr().out


def test_doctor_command(capsys) -> None:
    main(["doctor"])
    out = capsys.readouterr().out
    assert "[PASS] Python package 'numpy' import" in out
