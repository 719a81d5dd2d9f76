"""Tests for scripts/plot_metrics.py."""

import csv
import os
from pathlib import Path

import pytest

from scripts.plot_metrics import (
    count_abandoned_per_day,
    detect_latest_run_id,
    extract_series,
    load_csv_rows,
    main,
    parse_args,
    plot_abandonment,
    plot_population,
    plot_treasury,
    try_float,
)


def _write_csv(path: Path, rows: list[dict]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def global_rows() -> list[dict]:
    return [
        {"day": 1, "treasury": 6950.0, "service_cost": 50.0, "commercial_income": 0.0,
         "population": 10.0, "average_happiness": 55.0},
        {"day": 2, "treasury": 7100.0, "service_cost": 50.0, "commercial_income": 200.0,
         "population": 20.0, "average_happiness": 60.0},
    ]


@pytest.fixture
def house_rows() -> list[dict]:
    return [
        {"day": 1, "building_id": "building_1", "abandoned": 0.0},
        {"day": 1, "building_id": "building_2", "abandoned": 1.0},
        {"day": 2, "building_id": "building_1", "abandoned": 1.0},
        {"day": 2, "building_id": "building_2", "abandoned": 1.0},
    ]


def test_try_float_values() -> None:
    assert try_float("100.5") == 100.5
    assert try_float("-3") == -3.0
    assert try_float("True") == 1.0
    assert try_float("False") == 0.0
    assert try_float("") is None
    assert try_float(None) is None
    assert try_float("abc") is None


def test_load_csv_rows_parses_day_and_skips_fields(tmp_path) -> None:
    path = _write_csv(
        tmp_path / "house.csv",
        [{"day": "2", "building_id": "building_7", "happiness": "41.5", "abandoned": "False"}],
    )

    rows = load_csv_rows(path, skip_fields={"building_id"})

    assert rows == [
        {"day": 2, "building_id": "building_7", "happiness": 41.5, "abandoned": 0.0}
    ]


def test_load_csv_rows_missing_file(tmp_path) -> None:
    assert load_csv_rows(tmp_path / "missing.csv") == []


def test_extract_series_sorts_by_day(global_rows) -> None:
    days, series = extract_series(list(reversed(global_rows)), "treasury")

    assert days == [1, 2]
    assert series["treasury"] == [6950.0, 7100.0]


def test_count_abandoned_per_day(house_rows) -> None:
    assert count_abandoned_per_day(house_rows) == ([1, 2], [1, 2])


def test_plot_functions_return_figures(global_rows, house_rows) -> None:
    fig, name = plot_treasury(global_rows)
    assert name == "treasury.png"
    assert fig.axes[0].get_title() == "City Finances"

    fig, name = plot_population(global_rows)
    assert name == "population.png"
    assert len(fig.axes) == 2

    fig, name = plot_abandonment(house_rows)
    assert name == "abandonment.png"
    assert fig.axes[0].get_ylabel() == "Houses"


def test_detect_latest_run_id(tmp_path) -> None:
    for index, run_id in enumerate(["20250101_120000", "20250102_090000"]):
        path = tmp_path / f"global_metrics_{run_id}.csv"
        path.touch()
        os.utime(path, (index * 1000, index * 1000))

    assert detect_latest_run_id(tmp_path) == "20250102_090000"


def test_detect_latest_run_id_no_files(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        detect_latest_run_id(tmp_path)


def test_parse_args_custom() -> None:
    args = parse_args(["--run-id", "20250101_120000", "--metrics-dir", "/m", "--plots-dir", "/p"])

    assert args.run_id == "20250101_120000"
    assert args.metrics_dir == "/m"
    assert args.plots_dir == "/p"


def test_main_renders_every_plot(tmp_path, global_rows, house_rows) -> None:
    metrics_dir = tmp_path / "metrics"
    metrics_dir.mkdir()
    _write_csv(metrics_dir / "global_metrics_run1.csv", global_rows)
    _write_csv(metrics_dir / "house_metrics_run1.csv", house_rows)

    written = main(["--metrics-dir", str(metrics_dir), "--plots-dir", str(tmp_path / "plots")])

    assert sorted(path.name for path in written) == [
        "abandonment.png",
        "population.png",
        "treasury.png",
    ]
    assert all(path.exists() for path in written)
    assert (tmp_path / "plots" / "latest" / "treasury.png").exists()
