from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from journey_rails.demo_plans import build_eligibility_plan, eligibility_field_specs  # noqa: E402
from journey_rails.runtime import JourneyRuntime  # noqa: E402
from journey_rails.stores import InMemoryContextStore  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Walk the demo eligibility journey")
    parser.add_argument("--age", type=int, default=16, help="Age submitted on the start waypoint")
    parser.add_argument("--verbose", action="store_true", help="Log runtime decisions")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    store = InMemoryContextStore()
    runtime = JourneyRuntime(
        plan=build_eligibility_plan(),
        store=store,
        fields=eligibility_field_specs(),
        mount_url="/apply/",
    )

    tampered = runtime.view("demo", "main", "summary")
    first = runtime.submit("demo", "main", "start", {"age": args.age})
    if first.waypoint_id == "adult-form":
        second = runtime.submit("demo", "main", "adult-form", {"full_name": "Sam Doe"})
    else:
        second = runtime.submit(
            "demo",
            "main",
            "guardian-form",
            {"guardian_name": "Alex Doe", "relationship": "parent"},
        )
    back = runtime.back("demo", "main", "summary")

    payload = {
        "tampered_summary_request": runtime.url_for(tampered),
        "after_start": runtime.url_for(first),
        "after_form": runtime.url_for(second),
        "back_from_summary": runtime.url_for(back),
        "events": [
            {"from": event.from_waypoint, "to": event.to_waypoint, "reason": event.reason}
            for event in runtime.events
        ],
        "context": store.load("demo"),
    }
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
