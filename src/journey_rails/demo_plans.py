"""Example plans and field specs used by tests and local demo runs."""

from __future__ import annotations

from typing import Any, Mapping

from . import guards
from .plan import Plan
from .validation import FieldSpec, FieldValidator


def _present(value: Any, payload: Mapping[str, Any]) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _whole_number(value: Any, payload: Mapping[str, Any]) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and value.strip().isdigit()


REQUIRED = FieldValidator("required", _present, message="validation:rule.required")
WHOLE_NUMBER = FieldValidator("wholeNumber", _whole_number, message="validation:rule.wholeNumber")


def build_eligibility_plan(skipped_fields: guards.SkippedFieldPolicy = "absent") -> Plan:
    """Age-branching journey: adults and minors fill in different forms.

    start -(age >= 18)-> adult-form -> summary
    start -(otherwise)-> guardian-form -> summary
    """

    plan = Plan(skipped_fields=skipped_fields)
    plan.add_waypoints("start", "adult-form", "guardian-form", "summary")
    plan.add_edge("start", "adult-form", guards.field_guard("start", "age", "ge", 18))
    plan.add_edge("start", "guardian-form")
    plan.add_edge("adult-form", "summary")
    plan.add_edge("guardian-form", "summary")
    plan.add_origin("main", "start")
    return plan.freeze()


def eligibility_field_specs() -> dict[str, tuple[FieldSpec, ...]]:
    return {
        "start": (FieldSpec("age", (REQUIRED, WHOLE_NUMBER)),),
        "adult-form": (FieldSpec("full_name", (REQUIRED,)),),
        "guardian-form": (
            FieldSpec("guardian_name", (REQUIRED,)),
            FieldSpec("relationship", (REQUIRED,)),
        ),
        "summary": (),
    }


def build_skippable_plan(extras_enabled: bool = False) -> Plan:
    """Four step journey where step-two may be skipped straight to step-four.

    The ``review`` origin re-enters the shared tail once step-one is done and
    the ``extras`` origin sits behind a feature flag.
    """

    plan = Plan()
    plan.add_waypoints("step-one", "step-two", "step-three", "step-four")
    plan.add_edge("step-one", "step-two")
    plan.add_edge("step-two", "step-four", guards.skipped("step-two"))
    plan.add_edge("step-two", "step-three")
    plan.add_edge("step-three", "step-four")
    plan.add_origin("main", "step-one")
    plan.add_origin("review", "step-four", guards.visited("step-one"))
    plan.add_origin("extras", "step-three", guards.flag(extras_enabled, name="extras"))
    return plan.freeze()


def skippable_field_specs() -> dict[str, tuple[FieldSpec, ...]]:
    return {
        "step-one": (FieldSpec("answer", (REQUIRED,)),),
        "step-two": (FieldSpec("answer", (REQUIRED,)),),
        "step-three": (
            FieldSpec("has_details", (REQUIRED,)),
            FieldSpec(
                "details",
                (REQUIRED,),
                condition=lambda payload: payload.get("has_details") == "yes",
            ),
        ),
        "step-four": (FieldSpec("confirm", (REQUIRED,)),),
    }
