import argparse
import csv
import logging
import os
import random
import statistics
import time

import matplotlib
import matplotlib.pyplot as plt

from .grid import Grid
from .search import ALGORITHMS

logger = logging.getLogger(__name__)

# --- Configuration ---
MAZE_WIDTH = 25
MAZE_HEIGHT = 25
DEFAULT_RUNS = 10

DEFAULT_ALGOS = list(ALGORITHMS)

METRICS = [
    "elapsed_sec",
    "visited",
    "path_length",
    "log_events",
]


def run_single(width, height, algorithm, seed=None):
    """Generates one maze and solves it with the named algorithm.

    The same seed always produces the same maze, and for DFS the same route.
    """
    rng = random.Random(seed)
    grid = Grid(width, height)
    grid.generate_maze(rng)

    search = ALGORITHMS[algorithm]
    t0 = time.perf_counter()
    result = search(grid, rng)
    elapsed = time.perf_counter() - t0

    return {
        "algorithm": algorithm,
        "width": width,
        "height": height,
        "seed": seed,
        "found": result.found,
        # moves between source and destination
        "path_length": max(len(result.path) - 1, 0),
        "visited": result.visited_count,
        "log_events": len(grid.visitor_log()),
        "elapsed_sec": elapsed,
    }


def aggregate_results(rows, group_by=("algorithm",)):
    # Aggregate by group-by keys
    grouped = {}
    for r in rows:
        key = tuple(r[k] for k in group_by)
        grouped.setdefault(key, []).append(r)

    def agg_stat(values):
        if not values:
            return {"avg": 0, "min": 0, "max": 0, "stdev": 0}
        return {
            "avg": statistics.mean(values),
            "min": min(values),
            "max": max(values),
            "stdev": statistics.pstdev(values) if len(values) > 1 else 0,
        }

    summary = []
    for key, items in grouped.items():
        entry = dict(zip(group_by, key))
        entry["count"] = len(items)
        for m in METRICS:
            stats = agg_stat([it[m] for it in items])
            for stat_name, value in stats.items():
                entry[f"{m}_{stat_name}"] = value
        entry["found_rate"] = sum(1 for it in items if it["found"]) / len(items)
        summary.append(entry)
    return summary


def write_csv(path, rows):
    if not rows:
        return
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        for r in rows:
            writer.writerow(r)


def plot_metric(summary, metric_key, out_path):
    labels = [row["algorithm"] for row in summary]
    values = [row.get(metric_key, 0) for row in summary]
    fig = plt.figure(figsize=(max(6, len(labels) * 1.2), 4))
    plt.bar(range(len(values)), values)
    plt.xticks(range(len(values)), labels)
    plt.ylabel(metric_key)
    plt.tight_layout()
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    fig.savefig(out_path)
    plt.close(fig)


def build_parser():
    parser = argparse.ArgumentParser(description="Run repeated maze searches and plot metrics.")
    parser.add_argument("--runs", type=int, default=DEFAULT_RUNS, help="Runs per algorithm")
    parser.add_argument("--width", type=int, default=MAZE_WIDTH)
    parser.add_argument("--height", type=int, default=MAZE_HEIGHT)
    parser.add_argument("--algorithms", nargs="*", default=DEFAULT_ALGOS, choices=DEFAULT_ALGOS)
    parser.add_argument("--seed", type=int, default=None, help="Base seed (default: current time)")
    parser.add_argument("--out_dir", default="metrics_output")
    parser.add_argument("--no-plots", action="store_true", help="Only write the CSV files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every search")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if not args.no_plots:
        # headless runs, charts only go to files
        matplotlib.use("Agg")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    seed_base = args.seed if args.seed is not None else int(time.time())
    logger.info("Running %d runs of %s on %dx%d mazes (seed base %d)",
                args.runs, ", ".join(args.algorithms), args.width, args.height, seed_base)

    all_rows = []
    for algo in args.algorithms:
        for i in range(args.runs):
            # Same seed per run index, so every algorithm solves the same mazes
            all_rows.append(run_single(args.width, args.height, algo, seed=seed_base + i))

    os.makedirs(args.out_dir, exist_ok=True)
    write_csv(os.path.join(args.out_dir, "raw_results.csv"), all_rows)

    summary = aggregate_results(all_rows)
    write_csv(os.path.join(args.out_dir, "summary.csv"), summary)

    if not args.no_plots:
        for metric in ["elapsed_sec_avg", "visited_avg", "path_length_avg", "log_events_avg"]:
            plot_metric(summary, metric, os.path.join(args.out_dir, f"{metric}.png"))

    print(f"Wrote results to {args.out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
