"""
Boundary validation for steps and scenarios coming from outside the engine.

Raw dictionaries from the generator or from hand-written plan files are turned
into typed ``TestStep`` values, or quarantined as ``RejectedStep`` records.
"""

from typing import Any, List, Mapping, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from testpilot.core.types import RejectedStep, Scenario, SupportedAction, TestStep
from testpilot.error_handling.exceptions import StepValidationError
from testpilot.monitoring.logger import get_logger

logger = get_logger(__name__)

StepInput = Union[TestStep, RejectedStep, Mapping[str, Any]]


def unsupported_action_message(action: str) -> str:
    return f'Action type "{action}" is not currently supported by the Playwright executor.'


def parse_step(raw: Mapping[str, Any]) -> TestStep:
    """
    Convert a raw step mapping into a TestStep.

    Raises:
        StepValidationError: If the action is outside the supported set or
            another field does not match the step schema.
    """
    if not isinstance(raw, Mapping):
        raise StepValidationError(f"Step must be an object, got {type(raw).__name__}")

    raw_action = raw.get("action")
    if SupportedAction.from_name(raw_action) is None:
        raise StepValidationError(
            unsupported_action_message(str(raw_action)),
            raw_action=str(raw_action),
            failed_fields=["action"],
        )

    try:
        return TestStep.model_validate(dict(raw))
    except PydanticValidationError as exc:
        failed = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        raise StepValidationError(
            f"Invalid step: {', '.join(failed)}",
            raw_action=str(raw_action),
            failed_fields=failed,
            cause=exc,
        ) from exc


def validate_step(raw: StepInput) -> Union[TestStep, RejectedStep]:
    """Return a typed step, or a RejectedStep carrying the rejection reason."""
    if isinstance(raw, (TestStep, RejectedStep)):
        return raw

    try:
        return parse_step(raw)
    except StepValidationError as exc:
        source = raw if isinstance(raw, Mapping) else {}
        return RejectedStep(
            action=_as_text(source.get("action")),
            target=_as_text(source.get("target")),
            description=_as_text(source.get("description")),
            confidence=_as_confidence(source.get("confidence")),
            reason=exc.message,
        )


def validate_scenarios(
    payload: Any,
) -> Tuple[List[Scenario], List[RejectedStep]]:
    """
    Validate a generator payload of the form ``{"scenarios": [...]}``.

    Scenarios without a name or a ``testSteps`` list are dropped. Steps with an
    unsupported action are quarantined and returned separately.

    Returns:
        Tuple of (accepted scenarios, quarantined steps)
    """
    raw_scenarios = payload.get("scenarios") if isinstance(payload, Mapping) else payload
    if not isinstance(raw_scenarios, list):
        raise StepValidationError("Generator output does not contain a scenario list")

    scenarios: List[Scenario] = []
    quarantined: List[RejectedStep] = []

    for index, raw_scenario in enumerate(raw_scenarios):
        if not isinstance(raw_scenario, Mapping):
            logger.warning("Dropping non-object scenario", extra={"index": index})
            continue

        name = raw_scenario.get("name")
        raw_steps = raw_scenario.get("testSteps", raw_scenario.get("test_steps"))
        if not isinstance(name, str) or not name.strip() or not isinstance(raw_steps, list):
            logger.warning(
                "Dropping scenario without name or step list",
                extra={"index": index, "scenario_name": name},
            )
            continue

        steps: List[TestStep] = []
        for raw_step in raw_steps:
            checked = validate_step(raw_step)
            if isinstance(checked, RejectedStep):
                quarantined.append(checked)
                logger.warning(
                    "Quarantined generated step",
                    extra={"scenario_name": name, "reason": checked.reason},
                )
            else:
                steps.append(checked)

        scenario_fields = {
            "name": name.strip(),
            "description": raw_scenario.get("description") or None,
            "test_steps": steps,
        }
        if isinstance(raw_scenario.get("id"), str) and raw_scenario["id"]:
            scenario_fields["id"] = raw_scenario["id"]
        scenarios.append(Scenario(**scenario_fields))

    return scenarios, quarantined


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_confidence(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return min(max(number, 0.0), 1.0)
