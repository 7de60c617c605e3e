"""splatcad - command line entry point.

Loads configuration, syncs local files and cloud metadata once, selects a
project and prints the merged current project as JSON::

    python -m splatcad.client.main --inventory inventory.json \\
        --cloud-snapshot projects.json --select 1
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from splatcad.client.state import Store
from splatcad.shared.core.configuration import ConfigManager, SystemConfig, ValidationLevel
from splatcad.shared.core.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="splatcad", description="Show the merged state of a project")
    parser.add_argument("--config-dir", type=Path, default=None, help="Directory holding defaults/user/project YAML")
    parser.add_argument("--inventory", help="Local inventory JSON file")
    parser.add_argument("--provider-command", nargs="+", help="Helper command printing the local inventory")
    parser.add_argument("--cloud-snapshot", help="Exported cloud metadata JSON file")
    parser.add_argument("--select", help="Project id to select")
    parser.add_argument("--list", action="store_true", help="List known project ids instead")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> SystemConfig:
    """Merge file/env configuration with command line overrides."""
    config = ConfigManager(args.config_dir).get_config(ValidationLevel.LENIENT)

    overrides: Dict[str, Dict[str, Any]] = {}
    if args.inventory:
        overrides.setdefault("local_provider", {})["inventory_path"] = args.inventory
    if args.provider_command:
        overrides.setdefault("local_provider", {})["command"] = args.provider_command
    if args.cloud_snapshot:
        overrides.setdefault("cloud", {})["snapshot_path"] = args.cloud_snapshot
    if not overrides:
        return config

    merged = config.model_dump()
    for section, values in overrides.items():
        merged[section].update(values)
    return SystemConfig(**merged)


def coerce_project_id(raw: str) -> int | str:
    return int(raw) if raw.isdigit() else raw


async def run(args: argparse.Namespace, config: SystemConfig) -> Dict[str, Any]:
    async with Store.create(config) as store:
        projects = store.projects
        if args.list:
            return {
                "projects": projects.known_project_ids(),
                "status": projects.status_text.value,
            }

        if args.select is not None:
            projects.select(coerce_project_id(args.select))
        result = projects.current.value.as_dict()
        result["status"] = projects.status_text.value
        return result


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)

    try:
        config = load_config(args)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    configure_logging(config.logging)
    logger.info("Starting splatcad sync")

    try:
        result = asyncio.run(run(args, config))
    except ValueError as exc:
        logger.error(str(exc))
        print(str(exc), file=sys.stderr)
        return 2

    print(json.dumps(result, indent=2, default=str))
    return 0 if result.get("available", True) else 1


if __name__ == "__main__":
    sys.exit(main())
