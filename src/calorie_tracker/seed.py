"""Command line entrypoint for replacing the food catalog from a JSON file."""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import build_container

_logger = logging.getLogger(__name__)


def load_seed_records(path: Path) -> list[dict[str, object]]:
    """Read a JSON list of food records."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("foods", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of foods in {path}")
    return [record for record in data if isinstance(record, dict)]


def main(argv: list[str] | None = None) -> int:
    """Replace the food catalog with the records of a seed file."""
    parser = argparse.ArgumentParser(
        description="Replace the food catalog with records from a JSON file."
    )
    parser.add_argument("path", type=Path, help="Path to foods.json")
    args = parser.parse_args(argv)

    configure_logging()
    records = load_seed_records(args.path)
    container = build_container()
    try:
        count = container.food_catalog_service.replace_catalog(records)
    finally:
        asyncio.run(container.close_resources())
    _logger.info("Imported %s foods from %s", count, args.path)
    print(f"Imported {count} foods from {args.path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
