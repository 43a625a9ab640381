from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from journey_rails import guards  # noqa: E402
from journey_rails.context import JourneyContext  # noqa: E402
from journey_rails.demo_plans import build_eligibility_plan, build_skippable_plan  # noqa: E402
from journey_rails.errors import DeadEndError, GraphIntegrityError  # noqa: E402
from journey_rails.plan import Plan  # noqa: E402
from journey_rails.traversal import (  # noqa: E402
    furthest_waypoint,
    is_reachable,
    reachable_waypoints,
    resolve_next,
    resolve_previous,
    traverse,
)
from journey_rails.types import FieldError  # noqa: E402


def _context(data: dict) -> JourneyContext:
    context = JourneyContext()
    for waypoint_id, payload in data.items():
        context.set_data_for_waypoint(waypoint_id, payload)
    return context


class ResolveNextTests(unittest.TestCase):
    def setUp(self) -> None:
        self.plan = build_eligibility_plan()

    def test_age_branching(self) -> None:
        context = _context({"start": {"age": 16}})
        self.assertEqual(resolve_next(self.plan, context, "start"), "guardian-form")

        context.set_data_for_waypoint("start", {"age": 20})
        self.assertEqual(resolve_next(self.plan, context, "start"), "adult-form")

    def test_resolution_is_deterministic(self) -> None:
        context = _context({"start": {"age": 30}})

        first = resolve_next(self.plan, context, "start")
        second = resolve_next(self.plan, context, "start")

        self.assertEqual(first, second)

    def test_terminal_waypoint_has_no_next(self) -> None:
        context = _context({"summary": {}})
        self.assertIsNone(resolve_next(self.plan, context, "summary"))

    def test_sole_false_guard_is_a_dead_end(self) -> None:
        plan = Plan().add_waypoints("a", "b")
        plan.add_edge("a", "b", guards.when(lambda ctx: False, "never"))
        plan.add_origin("main", "a")
        plan.freeze()

        with self.assertRaises(DeadEndError) as caught:
            resolve_next(plan, _context({"a": {}}), "a")
        self.assertEqual(caught.exception.waypoint_id, "a")

    def test_field_with_validation_errors_is_invisible_to_guards(self) -> None:
        context = _context({"start": {"age": 40}})
        context.set_validation_errors("start", [FieldError("age", "invalid")])

        self.assertEqual(resolve_next(self.plan, context, "start"), "guardian-form")

    def test_skipped_source_passes_data_guards(self) -> None:
        context = _context({"start": {"__skipped__": True}})

        self.assertEqual(resolve_next(self.plan, context, "start"), "adult-form")

    def test_skip_aware_guard_is_still_evaluated(self) -> None:
        plan = build_skippable_plan()

        skipped = _context({"step-one": {"answer": "a"}, "step-two": {"__skipped__": True}})
        answered = _context({"step-one": {"answer": "a"}, "step-two": {"answer": "b"}})

        self.assertEqual(resolve_next(plan, skipped, "step-two"), "step-four")
        self.assertEqual(resolve_next(plan, answered, "step-two"), "step-three")


class UnfrozenPlanTests(unittest.TestCase):
    def test_traversal_requires_frozen_plan(self) -> None:
        plan = Plan().add_sequence("a", "b")
        plan.add_origin("main", "a")
        context = _context({"a": {}})

        with self.assertRaises(GraphIntegrityError):
            resolve_next(plan, context, "a")
        with self.assertRaises(GraphIntegrityError):
            traverse(plan, context, "main")
        with self.assertRaises(GraphIntegrityError):
            is_reachable(plan, context, "main", "b")

        plan.freeze()
        self.assertEqual(resolve_next(plan, context, "a"), "b")


class SkippedFieldPolicyTests(unittest.TestCase):
    def _plan(self, policy: str) -> Plan:
        plan = Plan(skipped_fields=policy)  # type: ignore[arg-type]
        plan.add_waypoints("contact", "consent", "marketing", "done")
        plan.add_edge("contact", "consent")
        plan.add_edge("consent", "marketing", guards.field_guard("contact", "email", "truthy"))
        plan.add_edge("consent", "done")
        plan.add_origin("main", "contact")
        return plan.freeze()

    def test_absent_policy_fails_downstream_field_guards(self) -> None:
        context = _context({"contact": {"__skipped__": True}, "consent": {}})

        self.assertEqual(resolve_next(self._plan("absent"), context, "consent"), "done")

    def test_inapplicable_policy_passes_downstream_field_guards(self) -> None:
        context = _context({"contact": {"__skipped__": True}, "consent": {}})

        self.assertEqual(resolve_next(self._plan("inapplicable"), context, "consent"), "marketing")


class RailsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.plan = build_eligibility_plan()

    def test_empty_context_only_reaches_entry(self) -> None:
        context = JourneyContext()

        self.assertEqual(traverse(self.plan, context, "main"), ["start"])
        self.assertTrue(is_reachable(self.plan, context, "main", "start"))
        self.assertFalse(is_reachable(self.plan, context, "main", "summary"))
        self.assertFalse(is_reachable(self.plan, context, "main", "not-a-waypoint"))

    def test_route_follows_data(self) -> None:
        context = _context({"start": {"age": 20}, "adult-form": {"full_name": "Sam"}})

        self.assertEqual(traverse(self.plan, context, "main"), ["start", "adult-form", "summary"])
        self.assertFalse(is_reachable(self.plan, context, "main", "guardian-form"))
        self.assertEqual(furthest_waypoint(self.plan, context, "main"), "summary")

    def test_walk_stops_at_waypoint_with_errors(self) -> None:
        context = _context({"start": {"age": 20}, "adult-form": {"full_name": ""}})
        context.set_validation_errors("adult-form", [FieldError("full_name", "required")])

        self.assertEqual(traverse(self.plan, context, "main"), ["start", "adult-form"])
        self.assertFalse(is_reachable(self.plan, context, "main", "summary"))

    def test_dead_end_fails_closed(self) -> None:
        plan = Plan().add_waypoints("a", "b", "c")
        plan.add_edge("a", "b")
        plan.add_edge("b", "c", guards.field_guard("b", "ok", "eq", True))
        plan.add_origin("main", "a")
        plan.freeze()
        context = _context({"a": {}, "b": {"ok": False}})

        self.assertTrue(is_reachable(plan, context, "main", "b"))
        self.assertFalse(is_reachable(plan, context, "main", "c"))
        self.assertEqual(reachable_waypoints(plan, context, "main"), ["a", "b"])
        with self.assertRaises(DeadEndError):
            traverse(plan, context, "main")

    def test_loops_terminate(self) -> None:
        plan = Plan().add_waypoints("a", "b")
        plan.add_edge("a", "b")
        plan.add_edge("b", "a")
        plan.add_origin("main", "a")
        plan.freeze()

        context = _context({"a": {}, "b": {}})

        self.assertEqual(traverse(plan, context, "main"), ["a", "b"])

    def test_origin_guards(self) -> None:
        plan = build_skippable_plan(extras_enabled=False)
        context = JourneyContext()

        self.assertEqual(traverse(plan, context, "review"), [])
        self.assertFalse(is_reachable(plan, context, "extras", "step-three"))

        context.set_data_for_waypoint("step-one", {"answer": "a"})
        self.assertTrue(is_reachable(plan, context, "review", "step-four"))

        enabled = build_skippable_plan(extras_enabled=True)
        self.assertTrue(is_reachable(enabled, context, "extras", "step-three"))

    def test_skip_opens_path_to_target(self) -> None:
        plan = build_skippable_plan()
        context = _context({"step-one": {"answer": "a"}})
        self.assertFalse(is_reachable(plan, context, "main", "step-four"))

        context.set_data_for_waypoint("step-two", {"__skipped__": True})

        self.assertEqual(traverse(plan, context, "main"), ["step-one", "step-two", "step-four"])


class EditInvalidationTests(unittest.TestCase):
    def test_editing_earlier_answer_invalidates_branch(self) -> None:
        plan = build_eligibility_plan()
        context = _context(
            {
                "start": {"age": 20},
                "adult-form": {"full_name": "Sam"},
                "summary": {},
            }
        )
        self.assertTrue(is_reachable(plan, context, "main", "adult-form"))
        self.assertEqual(resolve_previous(plan, context, "main", "summary"), "adult-form")

        context.set_data_for_waypoint("start", {"age": 16})

        self.assertFalse(is_reachable(plan, context, "main", "adult-form"))
        self.assertFalse(is_reachable(plan, context, "main", "summary"))
        self.assertEqual(resolve_previous(plan, context, "main", "summary"), "start")
        self.assertNotEqual(resolve_previous(plan, context, "main", "guardian-form"), "adult-form")


class ResolvePreviousTests(unittest.TestCase):
    def setUp(self) -> None:
        self.plan = build_eligibility_plan()

    def test_previous_uses_visit_history(self) -> None:
        context = _context({"start": {"age": 16}, "guardian-form": {"guardian_name": "A"}})

        self.assertEqual(resolve_previous(self.plan, context, "main", "guardian-form"), "start")
        self.assertEqual(resolve_previous(self.plan, context, "main", "summary"), "guardian-form")
        self.assertIsNone(resolve_previous(self.plan, context, "main", "start"))

    def test_previous_on_empty_context(self) -> None:
        self.assertIsNone(resolve_previous(self.plan, JourneyContext(), "main", "start"))


if __name__ == "__main__":
    unittest.main()
