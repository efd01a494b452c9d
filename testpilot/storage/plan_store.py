"""
JSON file storage for the working test plan.

The plan is kept as a single camelCase JSON snapshot. Every save replaces the
previous snapshot; there is no history.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from testpilot.config.settings import get_settings
from testpilot.core.interfaces import PlanStorage
from testpilot.core.plan import TestPlan
from testpilot.error_handling.exceptions import PlanStorageError
from testpilot.monitoring.logger import get_logger

logger = get_logger(__name__)

REQUIRED_SCENARIO_FIELDS = ("id", "name", "testSteps")


class JsonFilePlanStorage(PlanStorage):
    """Stores one test plan snapshot in a JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else get_settings().plan_file

    def save(self, plan: TestPlan) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(plan.to_payload(), f, indent=2)
        tmp_path.replace(self.path)

        logger.info(
            "Test plan saved",
            extra={"path": str(self.path), "scenario_count": len(plan.scenarios)},
        )

    def load(self) -> Optional[TestPlan]:
        if not self.path.exists():
            logger.debug("No saved test plan", extra={"path": str(self.path)})
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PlanStorageError(
                f"Could not read saved test plan: {e}", path=str(self.path), cause=e
            ) from e

        self._check_shape(data)

        try:
            plan = TestPlan.model_validate(data)
        except PydanticValidationError as e:
            raise PlanStorageError(
                f"Saved test plan is malformed: {e.error_count()} invalid field(s)",
                path=str(self.path),
                cause=e,
            ) from e

        if not 0 <= plan.active_scenario_index < max(len(plan.scenarios), 1):
            logger.warning(
                "Active scenario index out of range, resetting",
                extra={"index": plan.active_scenario_index},
            )
            plan.active_scenario_index = 0

        logger.info(
            "Test plan loaded",
            extra={"path": str(self.path), "scenario_count": len(plan.scenarios)},
        )
        return plan

    def _check_shape(self, data: Any) -> None:
        if not isinstance(data, dict) or not isinstance(data.get("scenarios"), list):
            raise PlanStorageError(
                "Saved test plan must be an object with a scenarios list.",
                path=str(self.path),
            )

        for index, scenario in enumerate(data["scenarios"]):
            missing = self._missing_fields(scenario)
            if missing:
                raise PlanStorageError(
                    f"Saved scenario {index} is missing required fields: {', '.join(missing)}",
                    path=str(self.path),
                )

    @staticmethod
    def _missing_fields(scenario: Any) -> List[str]:
        if not isinstance(scenario, dict):
            return list(REQUIRED_SCENARIO_FIELDS)
        return [name for name in REQUIRED_SCENARIO_FIELDS if name not in scenario]


def load_steps_file(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read a hand-written JSON list of raw steps.

    The steps are returned unvalidated; the executor quarantines unsupported
    actions itself.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PlanStorageError(f"Could not read steps file: {e}", path=str(path), cause=e) from e

    if isinstance(data, dict):
        data = data.get("testSteps", data.get("test_steps"))
    if not isinstance(data, list):
        raise PlanStorageError("Steps file must contain a JSON list of steps.", path=str(path))
    return data
