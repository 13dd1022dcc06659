import argparse
import os
import time
from datetime import datetime

from experiments.run_opt import add_problem_args, problem_from_args
from optimizer.pso import NDPSO, PSOConfig
from optimizer.sweep import SWEEP_GRID, TRIALS_PER_POINT, search_parameters
from utils.recorder import RESULTS_ROOT
from utils.reporting import CsvReporter, format_time


def main():
    parser = argparse.ArgumentParser(
        description="Sweep inertia/cognitive/social over {0.1,...,0.9}^3 with repeated trials")
    add_problem_args(parser)
    parser.add_argument("--trials", type=int, default=TRIALS_PER_POINT, help="Trials per weight triple")
    parser.add_argument("--swarm", type=int, default=PSOConfig.swarm_size)
    parser.add_argument("--iters", type=int, default=PSOConfig.max_iterations)
    parser.add_argument("--discount", type=float, default=PSOConfig.inertial_discount)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--save_runs", action="store_true", help="Also keep convergence.csv/metadata.json per run")
    parser.add_argument("--out", type=str, default=None, help="Results root (default data/results)")
    parser.add_argument("--plot", action="store_true", help="Plot sensitivity heatmaps when done")
    parser.add_argument("--test", action="store_true", help="Run shortened smoke test")
    args = parser.parse_args()

    data = problem_from_args(args)
    root = args.out or str(RESULTS_ROOT)

    trials = 1 if args.test else args.trials
    iters = 5 if args.test else args.iters

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    summary_path = os.path.join(root, "sweep", data.name, f"summary_{stamp}.csv")
    reporter = CsvReporter(summary_path, save_runs=args.save_runs, mode="sweep", root=root)

    base = PSOConfig(inertial_discount=args.discount, swarm_size=args.swarm, max_iterations=iters)
    pso = NDPSO(base, listener=reporter, seed=args.seed)

    total = len(SWEEP_GRID) ** 3 * trials
    print(f"Starting parameter study on {data.name}: {total} runs")
    print(f"Results will be saved to: {summary_path}")

    start_time = time.time()
    search_parameters(pso, data, base_config=base, trials=trials, verbose=True)
    print(f"\nStudy complete in {format_time(time.time() - start_time)}. Summary saved to {summary_path}")

    if args.plot:
        from experiments.plotting import plot_final_boxplot, plot_sensitivity
        fig_dir = os.path.join(os.path.dirname(summary_path), "figures")
        print("Saved:", plot_sensitivity(summary_path, outpath=os.path.join(fig_dir, f"sensitivity_{stamp}.png")))
        print("Saved:", plot_final_boxplot(summary_path, outpath=os.path.join(fig_dir, f"boxplot_{stamp}.png")))


if __name__ == "__main__":
    main()
