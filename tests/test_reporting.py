import csv
import json

import pytest

from optimizer.pso import NDPSO, PSOConfig
from optimizer.sweep import search_parameters
from utils.recorder import SUMMARY_FIELDS, append_summary, create_run_dir, save_convergence_csv
from utils.reporting import CompositeListener, ConsoleReporter, CsvReporter


def _read_rows(path):
    with open(path, newline="") as f:
        return list(csv.DictReader(f))


def test_csv_reporter_writes_one_row_per_run(tmp_path, line_problem):
    summary = tmp_path / "summary.csv"
    pso = NDPSO(PSOConfig(swarm_size=2, max_iterations=3), listener=CsvReporter(summary))
    search_parameters(pso, line_problem, grid=(0.1, 0.5), trials=2)

    rows = _read_rows(summary)
    assert len(rows) == 16
    assert list(rows[0].keys()) == SUMMARY_FIELDS
    assert rows[0]["problem"] == "line6"
    assert rows[0]["objective"] == "minimize"
    assert {r["trial"] for r in rows} == {"0", "1"}
    assert {float(r["social"]) for r in rows} == {0.1, 0.5}
    for r in rows:
        position = json.loads(r["best_position"])
        assert len(position) == 2
        assert float(r["best_fitness"]) >= 4.0


def test_csv_reporter_saves_run_directories(tmp_path, line_problem):
    reporter = CsvReporter(tmp_path / "summary.csv", save_runs=True, mode="single", root=tmp_path)
    pso = NDPSO(PSOConfig(swarm_size=3, max_iterations=4), listener=reporter, seed=2)
    results = pso.optimize(line_problem)

    assert len(reporter.run_dirs) == 1
    run_dir = reporter.run_dirs[0]
    assert run_dir.parent == tmp_path / "single" / "line6"

    conv = _read_rows(run_dir / "convergence.csv")
    assert [int(r["iter"]) for r in conv] == [1, 2, 3, 4]
    assert float(conv[-1]["f_best"]) == results.fitness

    meta = json.loads((run_dir / "metadata.json").read_text())
    assert meta["parameters"]["swarm_size"] == 3
    assert meta["results"]["fitness"] == results.fitness
    assert meta["results"]["assignments"] == list(results.assignments)


def test_console_reporter_prints_every_n_iterations(capsys, line_problem):
    pso = NDPSO(PSOConfig(swarm_size=2, max_iterations=4), listener=ConsoleReporter(log_every=2))
    pso.optimize(line_problem)
    out = capsys.readouterr().out
    assert out.count("[Iter ") == 2
    assert "[Iter 4/4]" in out
    assert "Done: best=" in out
    assert "line6 (pmedian, minimize)" in out


def test_composite_listener_fans_out(line_problem, listener, second_listener):
    other = second_listener
    pso = NDPSO(PSOConfig(swarm_size=2, max_iterations=3), listener=CompositeListener(listener, other))
    pso.optimize(line_problem)
    for l in (listener, other):
        assert len(l.configured) == 1
        assert [i for _, i in l.progress] == [1, 2, 3]
        assert len(l.completed) == 1


def test_create_run_dir_is_unique(tmp_path):
    a = create_run_dir("p", mode="sweep", root=tmp_path)
    b = create_run_dir("p", mode="sweep", root=tmp_path)
    assert a != b and a.is_dir() and b.is_dir()
    with pytest.raises(ValueError):
        create_run_dir("p", mode="batch", root=tmp_path)


def test_convergence_csv_and_summary_append(tmp_path):
    path = save_convergence_csv(tmp_path, [5.0, 4.0, 4.0])
    assert [r["iter"] for r in _read_rows(path)] == ["0", "1", "2"]

    summary = tmp_path / "nested" / "s.csv"
    append_summary(summary, [{"a": 1, "b": 2}], fieldnames=["a", "b"])
    append_summary(summary, [{"a": 3, "b": 4}], fieldnames=["a", "b"])
    append_summary(summary, [], fieldnames=["a", "b"])
    assert _read_rows(summary) == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]
