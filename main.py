# main.py
import argparse
import json
import os
from pathlib import Path
from typing import Any

from config import (
    CONFIG_MODEL,
    SimulationConfig,
    load_simulation_config_from_yaml,
)
from logger import log, setup_logger
from simulation.engine import SimulationEngine

DEFAULT_CONFIG_FILE = "config.yaml"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the city economy simulation headless.")
    parser.add_argument(
        "--config",
        help="YAML config file (overrides SIM_CONFIG and ./config.yaml).",
    )
    parser.add_argument(
        "--days",
        type=int,
        help="Number of simulated days (overrides simulation_days from the config).",
    )
    return parser.parse_args(argv)


def _resolve_config_from_args_or_env(argv: list[str] | None = None) -> SimulationConfig:
    """Pick the config source: --config, then $SIM_CONFIG, then ./config.yaml, then defaults."""
    args = _parse_args(argv)

    path: str | None = args.config or os.getenv("SIM_CONFIG") or None
    if path is None and Path(DEFAULT_CONFIG_FILE).is_file():
        path = DEFAULT_CONFIG_FILE

    config = load_simulation_config_from_yaml(path) if path else CONFIG_MODEL.model_copy(deep=True)
    if args.days is not None:
        config = SimulationConfig.model_validate(
            {**config.model_dump(), "simulation_days": args.days}
        )
    return config


def summarize_simulation(summary: dict[str, Any], config: SimulationConfig) -> Path:
    """Save the run summary to a JSON file."""
    summary_path = Path(config.summary_file)
    summary_path.parent.mkdir(parents=True, exist_ok=True)
    with summary_path.open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=config.json_indent)

    log(f"Simulation summary stored in {summary_path}", level="INFO")
    return summary_path


def run_simulation(config: SimulationConfig) -> dict[str, Any]:
    engine = SimulationEngine(config)
    return engine.run()


def main() -> None:
    """Main simulation execution function."""
    config = _resolve_config_from_args_or_env()
    setup_logger(config.logging_level, config.log_file, config.log_format)
    log("Starting city simulation...", level="INFO")

    summary = run_simulation(config)

    log("Simulation complete.", level="INFO")
    summarize_simulation(summary, config)


if __name__ == "__main__":
    main()
