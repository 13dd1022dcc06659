# experiments/run_opt.py
import argparse
import os
import shutil

from optimizer.pso import NDPSO, PSOConfig
from utils.problem_io import load_cost_matrix, load_orlib_pmed, random_euclidean_problem
from utils.recorder import RESULTS_ROOT, create_run_dir, save_convergence_csv, save_run_metadata
from utils.reporting import ConsoleReporter


def add_problem_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--problem", type=str, default=None,
                        help="OR-Library pmed file, or a cost matrix (.txt/.csv) when --p is given")
    parser.add_argument("--p", type=int, default=None, help="Facilities to open (cost-matrix / random problems)")
    parser.add_argument("--n", type=int, default=50, help="Customers for a random Euclidean problem")
    parser.add_argument("--problem_seed", type=int, default=0, help="Seed for the random Euclidean problem")
    parser.add_argument("--type", type=str, default="pmedian", choices=["pmedian", "pcenter", "pmaxian"])
    parser.add_argument("--objective", type=str, default=None, choices=["minimize", "maximize"],
                        help="Defaults to the natural direction of --type")


def problem_from_args(args):
    if args.problem is None:
        p = args.p if args.p is not None else 5
        return random_euclidean_problem(args.n, p, seed=args.problem_seed,
                                        problem_type=args.type, objective=args.objective)
    if args.p is not None:
        return load_cost_matrix(args.problem, args.p, problem_type=args.type, objective=args.objective)
    return load_orlib_pmed(args.problem, problem_type=args.type, objective=args.objective)


def add_pso_args(parser: argparse.ArgumentParser) -> None:
    defaults = PSOConfig()
    parser.add_argument("--swarm", type=int, default=defaults.swarm_size)
    parser.add_argument("--iters", type=int, default=defaults.max_iterations)
    parser.add_argument("--w", type=float, default=defaults.inertia, help="Initial inertia")
    parser.add_argument("--c1", type=float, default=defaults.cognitive, help="Cognitive weight")
    parser.add_argument("--c2", type=float, default=defaults.social, help="Social weight")
    parser.add_argument("--discount", type=float, default=defaults.inertial_discount, help="Inertia decay per iteration")
    parser.add_argument("--seed", type=int, default=42)


def config_from_args(args) -> PSOConfig:
    return PSOConfig(social=args.c2, cognitive=args.c1, inertia=args.w,
                     inertial_discount=args.discount, swarm_size=args.swarm,
                     max_iterations=args.iters)


def main():
    parser = argparse.ArgumentParser(description="Run discrete PSO once on a facility-location problem")
    add_problem_args(parser)
    add_pso_args(parser)
    parser.add_argument("--log_every", type=int, default=10)
    parser.add_argument("--out", type=str, default=None, help="Results root (default data/results)")
    parser.add_argument("--clean", action="store_true", help="Delete existing single-run results for this problem first")
    parser.add_argument("--plot", action="store_true", help="Save a convergence plot next to the CSV")
    args = parser.parse_args()

    data = problem_from_args(args)
    root = args.out or str(RESULTS_ROOT)

    if args.clean:
        target_clean = os.path.join(root, "single", data.name)
        print(f"Cleaning {target_clean}...")
        if os.path.exists(target_clean):
            shutil.rmtree(target_clean)

    pso = NDPSO(config_from_args(args), listener=ConsoleReporter(log_every=args.log_every), seed=args.seed)
    results = pso.optimize(data)

    run_dir = create_run_dir(data.name, mode="single", root=root)
    log_path = save_convergence_csv(run_dir, pso.history)
    save_run_metadata(run_dir, pso.parameters(), results.as_dict(),
                      extra={"problem": data.describe(), "seed": args.seed})
    print("Saved run:", run_dir)

    if args.plot:
        from experiments.plotting import plot_convergence
        conv_png = plot_convergence(str(log_path), title=f"Convergence ({data.name}, {data.problem_type.value})")
        print("Saved convergence plot:", conv_png)


if __name__ == "__main__":
    main()
