"""
Editable test plan: the working set of scenarios for one URL.
"""

from typing import List, Optional

from pydantic import Field

from testpilot.core.types import CamelModel, Scenario, TestStep


class TestPlan(CamelModel):
    """Scenarios generated or authored for a URL, plus the active selection."""

    url: str = ""
    scenarios: List[Scenario] = Field(default_factory=list)
    active_scenario_index: int = 0

    @property
    def active_scenario(self) -> Optional[Scenario]:
        if 0 <= self.active_scenario_index < len(self.scenarios):
            return self.scenarios[self.active_scenario_index]
        return None

    def select(self, index: int) -> Scenario:
        """Make the scenario at index the active one."""
        scenario = self.scenarios[self._check_index(index, len(self.scenarios), "scenario")]
        self.active_scenario_index = index
        return scenario

    def get_scenario(self, scenario_id: str) -> Scenario:
        for scenario in self.scenarios:
            if scenario.id == scenario_id:
                return scenario
        raise KeyError(f"Unknown scenario: {scenario_id}")

    def add_scenario(self, name: str, description: Optional[str] = None) -> Scenario:
        """Append an empty scenario and make it active."""
        scenario = Scenario(name=name, description=description)
        self.scenarios.append(scenario)
        self.active_scenario_index = len(self.scenarios) - 1
        return scenario

    def rename_scenario(
        self, scenario_id: str, name: str, description: Optional[str] = None
    ) -> Scenario:
        if not name.strip():
            raise ValueError("Scenario name is required.")
        scenario = self.get_scenario(scenario_id)
        scenario.name = name.strip()
        if description is not None:
            scenario.description = description or None
        return scenario

    def remove_scenario(self, scenario_id: str) -> Scenario:
        """Delete a scenario and keep the active index pointing at a valid entry."""
        scenario = self.get_scenario(scenario_id)
        index = self.scenarios.index(scenario)
        del self.scenarios[index]

        if not self.scenarios:
            self.active_scenario_index = 0
        elif self.active_scenario_index > index or self.active_scenario_index >= len(self.scenarios):
            self.active_scenario_index = max(0, self.active_scenario_index - 1)
        return scenario

    def add_step(
        self, scenario_id: str, step: TestStep, position: Optional[int] = None
    ) -> TestStep:
        steps = self.get_scenario(scenario_id).test_steps
        if position is None:
            steps.append(step)
        else:
            steps.insert(self._check_index(position, len(steps) + 1, "step"), step)
        return step

    def update_step(self, scenario_id: str, index: int, step: TestStep) -> TestStep:
        steps = self.get_scenario(scenario_id).test_steps
        steps[self._check_index(index, len(steps), "step")] = step
        return step

    def remove_step(self, scenario_id: str, index: int) -> TestStep:
        steps = self.get_scenario(scenario_id).test_steps
        return steps.pop(self._check_index(index, len(steps), "step"))

    def move_step(self, scenario_id: str, index: int, new_index: int) -> None:
        """Reorder a step within its scenario."""
        steps = self.get_scenario(scenario_id).test_steps
        self._check_index(index, len(steps), "step")
        self._check_index(new_index, len(steps), "step")
        steps.insert(new_index, steps.pop(index))

    @staticmethod
    def _check_index(index: int, size: int, kind: str) -> int:
        if not 0 <= index < size:
            raise IndexError(f"{kind} index {index} out of range")
        return index
