from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from tfrun.api import run_from_yaml
from tfrun.contracts import ActionResult


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive a Terraform Cloud run from YAML config.")
    parser.add_argument("config_yaml", type=Path, help="Path to action config YAML")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every poll attempt",
    )
    return parser.parse_args()


def render(result: ActionResult) -> str:
    payload: dict[str, object] = {"run_id": result.run_id}
    if result.outputs is not None:
        payload["outputs"] = {
            name: "***" if name in result.outputs.sensitive_names else value
            for name, value in result.outputs.values.items()
        }
    return json.dumps(payload, indent=2, sort_keys=True)


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    result = run_from_yaml(args.config_yaml)
    print(render(result))


if __name__ == "__main__":
    main()
