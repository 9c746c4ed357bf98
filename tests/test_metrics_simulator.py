import csv

import pytest

from grid_pathfinder import metrics_simulator
from grid_pathfinder.metrics_simulator import aggregate_results, run_single, write_csv


def test_run_single_is_reproducible():
    a = run_single(11, 11, "DFS", seed=42)
    b = run_single(11, 11, "DFS", seed=42)
    a.pop("elapsed_sec")
    b.pop("elapsed_sec")
    assert a == b
    assert a["found"] is True
    assert a["algorithm"] == "DFS"


def test_shortest_algorithms_report_the_same_length():
    lengths = {algo: run_single(13, 9, algo, seed=7)["path_length"] for algo in ("BFS", "Dijkstra", "A*", "DFS")}
    # Generated mazes are perfect, so every algorithm finds the one path
    assert len(set(lengths.values())) == 1


def test_log_events_count_visits_and_path_tiles():
    row = run_single(9, 9, "BFS", seed=3)
    assert row["log_events"] == row["visited"] + max(row["path_length"] - 1, 0)


def test_aggregate_results():
    rows = [
        {"algorithm": "BFS", "found": True, "elapsed_sec": 1.0, "visited": 10, "path_length": 4, "log_events": 13},
        {"algorithm": "BFS", "found": False, "elapsed_sec": 3.0, "visited": 20, "path_length": 0, "log_events": 20},
        {"algorithm": "A*", "found": True, "elapsed_sec": 2.0, "visited": 5, "path_length": 4, "log_events": 8},
    ]
    summary = {row["algorithm"]: row for row in aggregate_results(rows)}
    assert summary["BFS"]["count"] == 2
    assert summary["BFS"]["visited_avg"] == 15
    assert summary["BFS"]["visited_min"] == 10
    assert summary["BFS"]["visited_max"] == 20
    assert summary["BFS"]["visited_stdev"] == 5
    assert summary["BFS"]["found_rate"] == 0.5
    assert summary["A*"]["path_length_stdev"] == 0


def test_write_csv(tmp_path):
    path = tmp_path / "out" / "rows.csv"
    write_csv(str(path), [{"a": 1, "b": 2}, {"a": 3, "b": 4}])
    with open(path, newline="", encoding="utf-8") as f:
        assert list(csv.DictReader(f)) == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


def test_write_csv_skips_empty_rows(tmp_path):
    path = tmp_path / "rows.csv"
    write_csv(str(path), [])
    assert not path.exists()


def test_main_writes_results(tmp_path, capsys):
    out_dir = tmp_path / "metrics"
    code = metrics_simulator.main([
        "--runs", "2", "--width", "7", "--height", "7", "--seed", "1",
        "--algorithms", "BFS", "A*", "--out_dir", str(out_dir),
    ])
    assert code == 0
    assert (out_dir / "raw_results.csv").exists()
    assert (out_dir / "summary.csv").exists()
    assert (out_dir / "visited_avg.png").exists()
    assert "Wrote results to" in capsys.readouterr().out

    with open(out_dir / "raw_results.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [row["algorithm"] for row in rows] == ["BFS", "BFS", "A*", "A*"]


def test_main_without_plots(tmp_path):
    out_dir = tmp_path / "metrics"
    metrics_simulator.main(["--runs", "1", "--seed", "5", "--no-plots", "--out_dir", str(out_dir)])
    assert (out_dir / "summary.csv").exists()
    assert not list(out_dir.glob("*.png"))


def test_main_rejects_unknown_algorithm(tmp_path):
    with pytest.raises(SystemExit):
        metrics_simulator.main(["--algorithms", "Greedy", "--out_dir", str(tmp_path)])


def test_backend_only_switched_when_plotting(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(metrics_simulator.matplotlib, "use", calls.append)

    metrics_simulator.main(["--runs", "1", "--width", "5", "--height", "5", "--seed", "2",
                            "--no-plots", "--out_dir", str(tmp_path / "csv_only")])
    assert calls == []

    metrics_simulator.main(["--runs", "1", "--width", "5", "--height", "5", "--seed", "2",
                            "--algorithms", "BFS", "--out_dir", str(tmp_path / "charts")])
    assert calls == ["Agg"]


def test_run_single_works_for_every_registered_algorithm(monkeypatch):
    seen = []

    def recording_search(grid, rng=None):
        seen.append(rng)
        return metrics_simulator.ALGORITHMS["BFS"](grid, rng)

    monkeypatch.setitem(metrics_simulator.ALGORITHMS, "Recorded", recording_search)
    row = run_single(7, 7, "Recorded", seed=4)
    assert row["found"] is True
    assert len(seen) == 1 and seen[0] is not None
