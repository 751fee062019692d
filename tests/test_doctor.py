from evoniche.diagnostics.doctor import run_doctor


def test_doctor_reports_core_dependencies() -> None:
    results = run_doctor()
    checks = {item["check"]: item["status"] for item in results}
    for module in ("numpy", "omegaconf", "yaml", "loguru"):
        assert checks[f"Python package '{module}' import"] == "pass"
    assert checks["Python package 'mlflow' import"] in {"pass", "warn"}


def test_doctor_validates_installation() -> None:
    results = {item["check"]: item for item in run_doctor()}
    for check in ("Default config schema", "Configuration profiles", "Compatibility metrics", "Speciation smoke run"):
        assert results[check]["status"] == "pass", results[check]
    assert "12/12 offspring" in results["Speciation smoke run"]["details"]
