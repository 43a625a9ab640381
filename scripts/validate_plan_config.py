from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from journey_rails import build_plan, load_plan_config  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a journey plan config with OmegaConf + Pydantic")
    parser.add_argument(
        "--base",
        type=Path,
        default=ROOT / "config/journey/eligibility.yaml",
        help="Base plan YAML path",
    )
    parser.add_argument(
        "--override",
        type=Path,
        action="append",
        default=[],
        help="Override YAML path; can be provided multiple times",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()
    config = load_plan_config(args.base, args.override)
    plan = build_plan(config)
    print(
        "validated",
        f"plan={config.meta.plan_id}",
        f"version={config.meta.plan_version}",
        f"waypoints={len(plan.waypoints())}",
        f"origins={len(plan.origins())}",
    )


if __name__ == "__main__":
    main()
