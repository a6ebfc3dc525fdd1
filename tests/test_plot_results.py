import pandas as pd

from rl.plot_results import load_metrics, plot_learning_curve, smooth, summarize


def make_metrics(n=30):
    return pd.DataFrame({
        "timestep": range(0, n * 100, 100),
        "episode": range(1, n + 1),
        "reward": [float(i) for i in range(n)],
        "length": [100] * n,
        "kills": [i % 4 for i in range(n)],
        "score": [i % 4 for i in range(n)],
        "level": [1 + i // 10 for i in range(n)],
        "damage": [5] * n,
        "survived": [0.0] * n,
    })


def test_smooth_keeps_short_series():
    assert list(smooth(pd.Series([1.0, 2.0]).values, window=5)) == [1.0, 2.0]
    assert list(smooth(pd.Series([1.0, 2.0, 3.0]).values, window=3)) == [2.0]


def test_load_and_plot(tmp_path):
    log_dir = tmp_path / "logs" / "ppo"
    log_dir.mkdir(parents=True)
    make_metrics().to_csv(log_dir / "ppo_metrics.csv", index=False)

    df = load_metrics(str(tmp_path / "logs"), "ppo")
    assert len(df) == 30
    assert load_metrics(str(tmp_path / "logs"), "dqn") is None

    out = plot_learning_curve(df, "ppo", str(tmp_path / "plots"), window=5)
    assert (tmp_path / "plots" / "ppo_learning_curve.png").exists()
    assert out.endswith("ppo_learning_curve.png")


def test_summary_uses_the_last_episodes():
    summary = summarize({"ppo": make_metrics(30)}, tail=10)
    assert summary.loc["ppo", "reward"] == 24.5
    assert summary.loc["ppo", "episodes"] == 30
