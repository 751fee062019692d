from evoniche.utils import ExperimentLogger


def test_start_run_records_params_without_tracking() -> None:
    experiment = ExperimentLogger("tests", enabled=False)
    assert not experiment.tracking
    with experiment.start_run(run_name="demo", params={"speciation.max_species": 4}):
        experiment.log_metrics({"best_score": 1.5}, step=0)
    assert experiment.params == {"speciation.max_species": 4}
    assert experiment.history == [{"step": 0, "best_score": 1.5}]


def test_log_params_accumulates() -> None:
    experiment = ExperimentLogger("tests", enabled=False)
    experiment.log_params({"engine.seed": 1})
    experiment.log_params({"engine.population": 30})
    assert experiment.params == {"engine.seed": 1, "engine.population": 30}
