import os
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

BASE_FIG_DIR = os.path.join("data", "figures")


def _ensure_dir(path: str):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)


def read_log(csv_path: str) -> pd.DataFrame:
    """Read a convergence.csv written by utils/recorder.py."""
    df = pd.read_csv(csv_path)
    df["f_best"] = pd.to_numeric(df["f_best"], errors="coerce")
    return df


def read_summary(csv_path: str) -> pd.DataFrame:
    """Read a sweep summary.csv and coerce the numeric columns."""
    df = pd.read_csv(csv_path)
    for c in ["inertia", "cognitive", "social", "best_fitness", "elapsed_sec"]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    # user-supplied grids may carry float noise (0.1 + 0.2); round so points group
    for c in ["inertia", "cognitive", "social"]:
        df[c] = df[c].round(3)
    return df


def plot_convergence(csv_path: str, outpath: str = None, title: str = None):
    """
    Universal-best curve for a single run.
    """
    df = read_log(csv_path)
    fig = plt.figure()
    ax = plt.gca()
    ax.step(df["iter"], df["f_best"], where="post")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Best objective value")
    ax.grid(True, linestyle=":")
    ax.set_title(title or "Convergence (universal best)")

    if outpath is None:
        outpath = os.path.join(os.path.dirname(csv_path) or ".", "convergence.png")
    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=300, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_sensitivity(summary_csv: str, outpath: str = None, key: str = "best_fitness"):
    """
    One heatmap per inertia value: mean of `key` over trials, cognitive on the
    y axis and social on the x axis.
    """
    df = read_summary(summary_csv)
    inertias: List[float] = sorted(df["inertia"].unique())
    n = len(inertias)

    fig, axes = plt.subplots(1, n, figsize=(3.2 * n, 3.2), squeeze=False)
    vmin, vmax = df[key].min(), df[key].max()
    im = None
    for ax, w in zip(axes[0], inertias):
        table = df[df["inertia"] == w].pivot_table(index="cognitive", columns="social",
                                                   values=key, aggfunc="mean")
        im = ax.imshow(table.to_numpy(), origin="lower", cmap="viridis", vmin=vmin, vmax=vmax)
        ax.set_xticks(np.arange(len(table.columns)))
        ax.set_xticklabels([f"{v:g}" for v in table.columns])
        ax.set_yticks(np.arange(len(table.index)))
        ax.set_yticklabels([f"{v:g}" for v in table.index])
        ax.set_xlabel("social")
        ax.set_title(f"inertia = {w:g}")
    axes[0][0].set_ylabel("cognitive")
    if im is not None:
        fig.colorbar(im, ax=axes[0].tolist(), shrink=0.8, label=f"mean {key}")

    if outpath is None:
        outpath = os.path.join(BASE_FIG_DIR, "sweep", "sensitivity.png")
    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=300, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_final_boxplot(summary_csv: str, outpath: str = None, key: str = "best_fitness"):
    """
    Boxplot of final best objective per inertia value, pooled over the other weights.
    """
    df = read_summary(summary_csv)
    groups = [(w, g[key].to_numpy(dtype=float)) for w, g in df.groupby("inertia")]

    fig = plt.figure()
    ax = plt.gca()
    ax.boxplot([g for _, g in groups], showmeans=True)
    ax.set_xticks(np.arange(1, len(groups) + 1))
    ax.set_xticklabels([f"{w:g}" for w, _ in groups])
    ax.set_xlabel("inertia")
    ax.set_ylabel("Final best objective")
    ax.set_title("Distribution of final best objective")
    ax.grid(True, axis="y", linestyle=":")

    if outpath is None:
        outpath = os.path.join(BASE_FIG_DIR, "sweep", "final_boxplot.png")
    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=300, bbox_inches="tight")
    plt.close(fig)
    return outpath
