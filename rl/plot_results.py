"""
Plot training curves from the MetricsCallback CSVs.
One 2x3 figure per algorithm (reward, length, kills, score, level, survival)
plus a side-by-side reward plot when several algorithms were trained.
"""

import os
import argparse
from typing import Dict, Optional

import numpy as np
import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

PANELS = [
    ("reward", "Episode Reward"),
    ("length", "Episode Length"),
    ("kills", "Enemies Killed"),
    ("score", "Final Score"),
    ("level", "Level Reached"),
    ("survived", "Survival Rate"),
]

COLORS = {"dqn": "#2ecc71", "ppo": "#3498db"}


def load_metrics(log_dir: str, algo: str) -> Optional[pd.DataFrame]:
    """Load metrics CSV for an algorithm from <log_dir>/<algo>/ or <log_dir>/"""
    for path in (os.path.join(log_dir, algo, f"{algo}_metrics.csv"),
                 os.path.join(log_dir, f"{algo}_metrics.csv")):
        if os.path.exists(path):
            return pd.read_csv(path)
    return None


def smooth(values: np.ndarray, window: int = 10) -> np.ndarray:
    """Rolling mean; short series are returned unchanged"""
    if len(values) < window:
        return values
    kernel = np.ones(window) / window
    return np.convolve(values, kernel, mode="valid")


def plot_learning_curve(df: pd.DataFrame, algo: str, output_dir: str, window: int = 50) -> str:
    fig, axes = plt.subplots(2, 3, figsize=(18, 9))
    fig.suptitle(f"{algo.upper()} on Survivor", fontsize=16, fontweight="bold")

    for ax, (column, title) in zip(axes.flat, PANELS):
        if column not in df.columns:
            ax.axis("off")
            continue
        ys = smooth(df[column].values.astype(float), window)
        xs = df["timestep"].values[:len(ys)]
        ax.plot(xs, ys, linewidth=2, color=COLORS.get(algo))
        ax.set_xlabel("Timesteps")
        ax.set_title(title)
        ax.grid(True, alpha=0.3)
        if column == "survived":
            ax.set_ylim(0, 1.05)

    plt.tight_layout()
    os.makedirs(output_dir, exist_ok=True)
    save_path = os.path.join(output_dir, f"{algo}_learning_curve.png")
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved {algo} learning curve to {save_path}")
    return save_path


def plot_comparison(data: Dict[str, pd.DataFrame], output_dir: str, window: int = 50) -> str:
    fig, ax = plt.subplots(figsize=(10, 6))
    for algo, df in data.items():
        ys = smooth(df["reward"].values, window)
        ax.plot(df["timestep"].values[:len(ys)], ys, linewidth=2, label=algo.upper(), color=COLORS.get(algo))
    ax.set_xlabel("Timesteps")
    ax.set_ylabel("Episode Reward")
    ax.set_title("Episode Reward Comparison")
    ax.legend()
    ax.grid(True, alpha=0.3)

    os.makedirs(output_dir, exist_ok=True)
    save_path = os.path.join(output_dir, "algorithm_comparison.png")
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved comparison plot to {save_path}")
    return save_path


def summarize(data: Dict[str, pd.DataFrame], tail: int = 100) -> pd.DataFrame:
    """Mean of each metric over the last `tail` episodes, one row per algorithm"""
    rows = {}
    for algo, df in data.items():
        final = df.tail(tail)
        rows[algo] = {column: final[column].mean() for column, _ in PANELS if column in final.columns}
        rows[algo]["episodes"] = len(df)
    return pd.DataFrame.from_dict(rows, orient="index")


def main():
    parser = argparse.ArgumentParser(description="Plot survivor training results")
    parser.add_argument("--log-dir", type=str, default="./logs", help="Directory containing log files")
    parser.add_argument("--output-dir", type=str, default="./plots", help="Directory to save plots")
    parser.add_argument("--window", type=int, default=50, help="Smoothing window size (default: 50)")
    parser.add_argument("--algos", nargs="+", default=["dqn", "ppo"], help="Algorithms to plot")
    args = parser.parse_args()

    data = {}
    for algo in args.algos:
        df = load_metrics(args.log_dir, algo)
        if df is None:
            print(f"  No data found for {algo}")
            continue
        print(f"  Loaded {algo}: {len(df)} episodes")
        data[algo] = df

    if not data:
        print("\nNo data found! Make sure training has generated metrics files.")
        return

    for algo, df in data.items():
        plot_learning_curve(df, algo, args.output_dir, args.window)
    if len(data) > 1:
        plot_comparison(data, args.output_dir, args.window)

    summary = summarize(data)
    print("\n" + summary.to_string(float_format=lambda v: f"{v:.2f}"))
    summary.to_csv(os.path.join(args.output_dir, "summary.csv"))


if __name__ == "__main__":
    main()
