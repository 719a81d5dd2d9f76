"""Generate Matplotlib plots for the latest city metrics export."""
from __future__ import annotations

import argparse
import csv
import shutil
from collections import defaultdict
from collections.abc import Callable, Iterable
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

REPO_ROOT = Path(__file__).resolve().parents[1]
METRICS_DIR = REPO_ROOT / "output" / "metrics"
PLOTS_DIR = REPO_ROOT / "output" / "plots"

PlotFunc = Callable[[list[dict[str, object]]], tuple[plt.Figure, str]]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render plots for the most recent city metrics export using Matplotlib."
    )
    parser.add_argument(
        "--run-id",
        help="Timestamp suffix of the metrics files (e.g. 20250101_120000)."
        " Uses the newest export automatically when omitted.",
    )
    parser.add_argument(
        "--metrics-dir",
        default=str(METRICS_DIR),
        help="Directory containing the metrics CSV exports (default: output/metrics).",
    )
    parser.add_argument(
        "--plots-dir",
        default=str(PLOTS_DIR),
        help="Directory where rendered plots will be written (default: output/plots).",
    )
    return parser.parse_args(argv)


def detect_latest_run_id(metrics_dir: Path) -> str:
    candidates = sorted(metrics_dir.glob("global_metrics_*.csv"))
    if not candidates:
        raise FileNotFoundError(f"No global_metrics_*.csv files were found in {metrics_dir}.")
    latest = max(candidates, key=lambda path: path.stat().st_mtime)
    suffix = latest.stem.split("global_metrics_")[-1]
    if not suffix:
        raise ValueError(f"Unable to parse run identifier from file name: {latest.name}.")
    return suffix


def load_csv_rows(path: Path, skip_fields: Iterable[str] | None = None) -> list[dict[str, object]]:
    skip_fields = set(skip_fields or [])
    rows: list[dict[str, object]] = []
    if not path.exists():
        return rows
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for raw in reader:
            parsed: dict[str, object] = {}
            for key, value in raw.items():
                if key == "day":
                    parsed[key] = int(value)
                elif key in skip_fields:
                    parsed[key] = value
                else:
                    parsed[key] = try_float(value)
            rows.append(parsed)
    return rows


def try_float(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    if value in {"True", "False"}:
        return 1.0 if value == "True" else 0.0
    try:
        return float(value)
    except ValueError:
        return None


def extract_series(
    rows: list[dict[str, object]], *columns: str
) -> tuple[list[int], dict[str, list[float]]]:
    ordered = sorted(rows, key=lambda row: int(row["day"]))
    days = [int(row["day"]) for row in ordered]
    series: dict[str, list[float]] = {}
    for column in columns:
        series[column] = [float(row.get(column) or 0.0) for row in ordered]
    return days, series


def count_abandoned_per_day(rows: list[dict[str, object]]) -> tuple[list[int], list[int]]:
    counts: defaultdict[int, int] = defaultdict(int)
    for row in rows:
        day = int(row["day"])
        counts[day] += 1 if row.get("abandoned") else 0
    days = sorted(counts)
    return days, [counts[day] for day in days]


def plot_treasury(global_rows: list[dict[str, object]]) -> tuple[plt.Figure, str]:
    days, data = extract_series(
        global_rows, "treasury", "service_cost", "commercial_income"
    )
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(days, data["treasury"], label="Treasury")
    ax.plot(days, data["service_cost"], label="Service Upkeep")
    ax.plot(days, data["commercial_income"], label="Commercial Income")
    ax.set_title("City Finances")
    ax.set_xlabel("Day")
    ax.set_ylabel("Money")
    ax.grid(True, alpha=0.3)
    ax.legend()
    return fig, "treasury.png"


def plot_population(global_rows: list[dict[str, object]]) -> tuple[plt.Figure, str]:
    days, data = extract_series(global_rows, "population", "average_happiness")
    fig, ax_pop = plt.subplots(figsize=(10, 6))
    ax_pop.plot(days, data["population"], label="Population")
    ax_pop.set_xlabel("Day")
    ax_pop.set_ylabel("Residents")

    ax_happy = ax_pop.twinx()
    ax_happy.plot(days, data["average_happiness"], color="tab:orange", label="Avg Happiness")
    ax_happy.set_ylabel("Happiness")
    ax_happy.set_ylim(0, 100)

    ax_pop.set_title("Population & Happiness")
    ax_pop.grid(True, alpha=0.3)
    lines = ax_pop.get_lines() + ax_happy.get_lines()
    ax_pop.legend(lines, [line.get_label() for line in lines])
    return fig, "population.png"


def plot_abandonment(house_rows: list[dict[str, object]]) -> tuple[plt.Figure, str]:
    days, counts = count_abandoned_per_day(house_rows)
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.step(days, counts, where="post")
    ax.set_title("Abandoned Houses")
    ax.set_xlabel("Day")
    ax.set_ylabel("Houses")
    ax.set_ylim(bottom=0)
    ax.grid(True, alpha=0.3)
    return fig, "abandonment.png"


PLOT_SPECS: list[tuple[str, PlotFunc]] = [
    ("global", plot_treasury),
    ("global", plot_population),
    ("house", plot_abandonment),
]


def save_figure(fig: plt.Figure, filename: str, run_dir: Path, latest_dir: Path) -> None:
    target = run_dir / filename
    fig.savefig(target, dpi=150, bbox_inches="tight")
    shutil.copy2(target, latest_dir / filename)
    plt.close(fig)


def main(argv: list[str] | None = None) -> list[Path]:
    args = parse_args(argv)
    metrics_dir = Path(args.metrics_dir)
    plots_dir = Path(args.plots_dir)

    run_id = args.run_id or detect_latest_run_id(metrics_dir)
    run_dir = plots_dir / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    latest_dir = plots_dir / "latest"
    latest_dir.mkdir(parents=True, exist_ok=True)

    data_by_scope = {
        "global": load_csv_rows(metrics_dir / f"global_metrics_{run_id}.csv"),
        "house": load_csv_rows(
            metrics_dir / f"house_metrics_{run_id}.csv", skip_fields={"building_id"}
        ),
    }

    written: list[Path] = []
    for scope, plot_func in PLOT_SPECS:
        fig, filename = plot_func(data_by_scope[scope])
        save_figure(fig, filename, run_dir, latest_dir)
        written.append(run_dir / filename)
    return written


if __name__ == "__main__":
    main()
