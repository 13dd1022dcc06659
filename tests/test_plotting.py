import os

from experiments.plotting import plot_convergence, plot_final_boxplot, plot_sensitivity, read_summary
from optimizer.pso import NDPSO, PSOConfig
from optimizer.sweep import search_parameters
from utils.recorder import save_convergence_csv
from utils.reporting import CsvReporter


def test_sweep_figures(tmp_path, line_problem):
    summary = tmp_path / "summary.csv"
    pso = NDPSO(PSOConfig(swarm_size=2, max_iterations=2), listener=CsvReporter(summary))
    search_parameters(pso, line_problem, grid=(0.1, 0.5), trials=2)

    df = read_summary(str(summary))
    assert len(df) == 16
    assert sorted(df["inertia"].unique()) == [0.1, 0.5]

    heat = plot_sensitivity(str(summary), outpath=str(tmp_path / "figs" / "heat.png"))
    box = plot_final_boxplot(str(summary), outpath=str(tmp_path / "figs" / "box.png"))
    assert os.path.getsize(heat) > 0
    assert os.path.getsize(box) > 0


def test_convergence_plot_lands_next_to_csv(tmp_path):
    csv_path = save_convergence_csv(tmp_path, [9.0, 7.0, 7.0, 5.0])
    out = plot_convergence(str(csv_path))
    assert out == os.path.join(str(tmp_path), "convergence.png")
    assert os.path.exists(out)
