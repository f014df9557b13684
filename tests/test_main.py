import json

import cv2
import numpy as np
import pytest

from grid_nav.main import main


@pytest.fixture
def cli_files(tmp_path):
    cv2.imwrite(str(tmp_path / "map.png"), np.full((10, 10), 254, dtype=np.uint8))
    (tmp_path / "map.yaml").write_text(
        "image: map.png\nresolution: 1.0\norigin: [0.0, 0.0, 0.0]\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text(
        "planner:\n  planning_rate: 50.0\nlogging:\n  log_dir: logs\n", encoding="utf-8"
    )
    return tmp_path


def _args(tmp_path, command, goal):
    return [
        command,
        "--map", str(tmp_path / "map.yaml"),
        "--start", "0.5", "0.5",
        "--goal", *goal,
        "--config", str(tmp_path / "config.yaml"),
    ]


def test_plan_ok(cli_files, capsys):
    assert main(_args(cli_files, "plan", ["8.5", "8.5"])) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["status"] == "OK"
    assert out["simplified_path"] == [[0.0, 0.0], [8.0, 8.0]]
    assert (cli_files / "logs").is_dir()


def test_plan_invalid_goal(cli_files, capsys):
    assert main(_args(cli_files, "plan", ["20", "20"])) == 1
    assert json.loads(capsys.readouterr().out)["status"] == "INVALID_GOAL"


def test_run_with_snapshots(cli_files, capsys):
    argv = _args(cli_files, "run", ["3.5", "0.5"]) + ["--cycles", "2", "--snapshot-dir", str(cli_files / "snaps")]
    assert main(argv) == 0
    assert json.loads(capsys.readouterr().out)["status"] == "OK"
    assert (cli_files / "snaps" / "cycle_000002.json").exists()


def test_bad_config(cli_files):
    (cli_files / "config.yaml").write_text("planner:\n  planning_rate: -1\n", encoding="utf-8")
    assert main(_args(cli_files, "plan", ["1", "1"])) == 2


def test_bad_map(cli_files):
    (cli_files / "map.yaml").write_text("resolution: 1.0\n", encoding="utf-8")
    assert main(_args(cli_files, "plan", ["1", "1"])) == 2
