"""Smoke tests for the local-search command line entry point."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPT = ROOT / "scripts" / "run_local_search.py"


def _write_instance(path: Path) -> Path:
    payload = {
        "name": "cli-toy",
        "capacity": 10,
        "depot": {"id": 0, "x": 0, "y": 0},
        "customers": [
            {"id": 1, "x": 10, "y": 0, "demand": 3},
            {"id": 2, "x": 10, "y": 1, "demand": 3},
            {"id": 3, "x": -10, "y": 0, "demand": 3},
            {"id": 4, "x": -10, "y": 1, "demand": 3},
        ],
    }
    path.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")
    return path


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        check=True,
        capture_output=True,
        text=True,
    )


def test_help_lists_options():
    output = _run("--help").stdout
    for option in ("--initial", "--two-opt", "--relocate", "--shuffle", "--max-cycles", "--output-json"):
        assert option in output


def test_run_writes_json_report(tmp_path):
    instance = _write_instance(tmp_path / "toy.json")
    report_path = tmp_path / "report.json"

    result = _run(
        str(instance),
        "--two-opt", "first",
        "--relocate", "best",
        "--output-json", str(report_path),
        "--log-level", "WARNING",
    )

    assert "OPTIONS (twoOpt, relocate) = FIRST_IMPROVEMENT,BEST_IMPROVEMENT" in result.stdout
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["instance"] == "cli-toy"
    assert report["final_cost"] < report["initial_cost"]
    assert report["num_vehicles"] == len(report["routes"])
    served = sorted(node for route in report["routes"] for node in route if node != 0)
    assert served == [1, 2, 3, 4]
    assert all(load <= 10 for load in report["loads"])
