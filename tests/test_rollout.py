"""Tests for headless rollouts and logging."""

import jax
import numpy as np
import pytest

from deerdash.env import DeerDashEnv
from deerdash.logging import ConsoleLogger, SessionLogger
from deerdash.rollout import simulate, summarize


class TestSimulate:

    def test_metrics_shape(self):
        _, metrics = simulate(DeerDashEnv(), jax.random.PRNGKey(0), 50, show_progress=False)

        for key in ("score", "best", "reward", "terminated", "truncated"):
            assert metrics[key].shape == (50,)
        assert float(np.asarray(metrics["reward"]).min()) >= 0.0

    def test_episodes_reset(self):
        env = DeerDashEnv(max_num_steps_per_episodes=10)
        _, metrics = simulate(env, jax.random.PRNGKey(1), 35, show_progress=True)

        summary = summarize(metrics)
        assert summary["steps"] == 35
        assert summary["episodes"] >= 3


class TestSummarize:

    def test_summary(self):
        metrics = {
            "score": np.array([1.0, 2.0, 3.0, 1.0, 5.0, 0.5]),
            "reward": np.array([1.0, 1.0, 1.0, 1.0, 4.0, 0.5]),
            "terminated": np.array([False, False, True, False, False, False]),
            "truncated": np.array([False, False, False, False, True, False]),
        }
        summary = summarize(metrics)

        assert summary["steps"] == 6
        assert summary["episodes"] == 2
        assert summary["crashes"] == 1
        assert summary["mean_score"] == pytest.approx(4.0)
        assert summary["max_score"] == pytest.approx(5.0)
        assert summary["total_reward"] == pytest.approx(8.5)
        assert summary["best"] == 0.0

    def test_no_finished_episode(self):
        metrics = {
            "score": np.array([1.0]),
            "reward": np.array([1.0]),
            "terminated": np.array([False]),
            "truncated": np.array([False]),
        }
        assert summarize(metrics)["mean_score"] == 0.0


class TestLogging:

    def test_level_filter(self, capsys):
        logger = ConsoleLogger("Test", log_level="WARNING", show_timestamps=False)
        logger.info("hidden")
        logger.warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out
        assert "[Test]" in out

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            ConsoleLogger(log_level="LOUD")

    def test_game_over_new_best(self, capsys):
        logger = SessionLogger(show_timestamps=False)
        logger.log_run_start()
        logger.log_game_over(42.7, 42.7, 10.0)
        logger.log_run_start()
        logger.log_game_over(5.0, 42.7, 42.7)

        lines = capsys.readouterr().out.strip().splitlines()
        assert "new best" in lines[0]
        assert "score=42" in lines[0]
        assert "new best" not in lines[1]
        assert len(logger.history) == 2
