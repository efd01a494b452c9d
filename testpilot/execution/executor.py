"""
Step executor: runs an ordered list of steps against one browser session.

A run owns exactly one session. Step failures are recorded and the run moves
on; only the loss of the session aborts the remaining steps, which are then
reported as failed so the result list always lines up with the input.
"""

import time
from typing import Callable, List, Mapping, Optional, Sequence, Union
from uuid import uuid4

from testpilot.browser.driver import PlaywrightDriver
from testpilot.config.settings import Settings, get_settings
from testpilot.core.interfaces import BrowserSession
from testpilot.core.types import (
    ExecutionReport,
    ExecutionResult,
    ExecutionStatus,
    RejectedStep,
    TestStep,
)
from testpilot.core.validation import StepInput, validate_step
from testpilot.error_handling.exceptions import (
    InvalidRunRequestError,
    SessionError,
    SessionInitializationError,
    SessionLostError,
)
from testpilot.execution.dispatcher import ActionDispatcher, StepOutcome
from testpilot.execution.evidence import Evidence, EvidenceCollector
from testpilot.execution.parsing import redact_quoted_text
from testpilot.monitoring.logger import get_logger, log_performance_metric, log_test_event

logger = get_logger(__name__)

SessionFactory = Callable[[], BrowserSession]

ABORTED_MESSAGE = "Execution aborted due to a critical error."
SETUP_ERROR_DESCRIPTION = "Failed to initialize or run the Playwright test execution environment."

CheckedStep = Union[TestStep, RejectedStep]


def error_message(error: BaseException) -> str:
    """Human-readable message of an exception, preferring its ``message`` attribute."""
    message = getattr(error, "message", None)
    return str(message) if message else str(error)


def submitted_action(step: StepInput) -> str:
    """The action name exactly as the caller submitted it."""
    if isinstance(step, TestStep):
        return step.action.value
    if isinstance(step, RejectedStep):
        return step.action
    if isinstance(step, Mapping):
        raw = step.get("action")
        return "" if raw is None else str(raw)
    return ""


def synthesize_failures(
    steps: Sequence[CheckedStep],
    completed: int,
    message: str,
    placeholder: Evidence,
    actions: Optional[Sequence[str]] = None,
) -> List[ExecutionResult]:
    """
    Failed results for every step a fatal error prevented from running.

    The first synthesized record carries the fatal error, the rest a generic
    abort message. With no steps at all a single setup-error record is
    returned instead. ``actions`` holds the submitted action names to echo.
    """
    if not steps:
        return [
            ExecutionResult(
                id="execution-setup-error",
                step_description=SETUP_ERROR_DESCRIPTION,
                action="system",
                target="N/A",
                confidence=0.0,
                status=ExecutionStatus.FAIL,
                details=message,
                screenshot_data_url=placeholder.data_url,
                snapshot_width=placeholder.width,
                snapshot_height=placeholder.height,
                snapshot_ai_hint=placeholder.ai_hint,
            )
        ]

    results = []
    for index in range(completed, len(steps)):
        step = steps[index]
        results.append(
            _build_result(
                index,
                step,
                StepOutcome.failed(message if index == completed else ABORTED_MESSAGE),
                placeholder,
                actions[index] if actions is not None else None,
            )
        )
    return results


class StepExecutor:
    """Executes test steps sequentially, one fresh browser session per run."""

    def __init__(
        self,
        session_factory: Optional[SessionFactory] = None,
        settings: Optional[Settings] = None,
        headless: Optional[bool] = None,
    ) -> None:
        """
        Initialize the executor.

        Args:
            session_factory: Creates a new, unstarted session for each run
            settings: Settings instance (defaults to cached settings)
            headless: Headless override for the default Playwright session
        """
        self.settings = settings or get_settings()
        self.session_factory = session_factory or (lambda: PlaywrightDriver(headless=headless))

    async def execute(self, url: str, steps: Sequence[StepInput]) -> ExecutionReport:
        """
        Execute steps against a page.

        Args:
            url: Start URL loaded before the first step
            steps: Ordered steps (typed, rejected or raw mappings)

        Returns:
            Report with one result per submitted step and an optional
            run-level error

        Raises:
            InvalidRunRequestError: If the URL or the step list is missing
        """
        if not url or not steps:
            raise InvalidRunRequestError("URL and test steps are required to execute tests.")

        checked: List[CheckedStep] = [validate_step(step) for step in steps]
        actions = [submitted_action(step) for step in steps]
        run_id = uuid4().hex[:12]
        results: List[ExecutionResult] = []

        logger.info(
            "Starting test execution",
            extra={"run_id": run_id, "url": url, "total_steps": len(checked)},
        )

        session: Optional[BrowserSession] = None
        try:
            session = self._create_session()
            evidence = EvidenceCollector(session, self.settings)
            await self._open_session(session, url)
            dispatcher = ActionDispatcher(session, self.settings)

            for index, step in enumerate(checked):
                results.append(
                    await self._run_step(
                        run_id, index, step, actions[index], session, dispatcher, evidence
                    )
                )
        except Exception as e:
            message = error_message(e)
            if isinstance(e, SessionError):
                logger.error(
                    "Critical error during test execution",
                    extra={"run_id": run_id, "error": message, "completed_steps": len(results)},
                )
            else:
                logger.exception(
                    "Unexpected error during test execution",
                    extra={"run_id": run_id, "completed_steps": len(results)},
                )
            placeholder = EvidenceCollector(session, self.settings).placeholder()
            results.extend(
                synthesize_failures(checked, len(results), message, placeholder, actions)
            )
            return ExecutionReport(results=results, error=message)
        finally:
            if session is not None:
                await self._release_session(session)

        logger.info(
            "All test steps processed",
            extra={
                "run_id": run_id,
                "passed": sum(r.status == ExecutionStatus.PASS for r in results),
                "failed": sum(r.status == ExecutionStatus.FAIL for r in results),
            },
        )
        return ExecutionReport(results=results)

    def _create_session(self) -> BrowserSession:
        try:
            return self.session_factory()
        except Exception as e:
            raise SessionInitializationError(
                f"Failed to create browser session: {error_message(e)}",
                action="create_session",
                cause=e,
            ) from e

    async def _open_session(self, session: BrowserSession, url: str) -> None:
        """Launch the session and load the start URL; any failure is fatal."""
        try:
            await session.start()
            await session.navigate(url, timeout_ms=self.settings.initial_navigation_timeout_ms)
        except SessionError:
            raise
        except Exception as e:
            raise SessionInitializationError(
                f"Failed to open start URL {url}: {error_message(e)}",
                url=url,
                action="navigate",
                cause=e,
            ) from e

    async def _run_step(
        self,
        run_id: str,
        index: int,
        step: CheckedStep,
        action: str,
        session: BrowserSession,
        dispatcher: ActionDispatcher,
        evidence: EvidenceCollector,
    ) -> ExecutionResult:
        step_id = f"step-{index}"
        start_time = time.perf_counter()

        if isinstance(step, RejectedStep):
            outcome = StepOutcome(ExecutionStatus.SKIPPED, step.reason)
            logger.info(step.reason, extra={"step_id": step_id})
        else:
            logger.info(
                f"Executing step {index + 1}: {redact_quoted_text(step.description)}",
                extra={"step_id": step_id, "action": step.action.value, "target": step.target},
            )
            try:
                outcome = await dispatcher.dispatch(step.action, step.target, step.description)
            except Exception as e:
                message = error_message(e)
                if not session.is_alive():
                    raise SessionLostError(
                        f"Browser session lost during step {index + 1}: {message}",
                        step_index=index,
                        action=step.action.value,
                        selector=step.target,
                        cause=e,
                    ) from e
                logger.warning(
                    f"Step {index + 1} failed: {message}",
                    extra={"step_id": step_id, "action": step.action.value},
                )
                outcome = StepOutcome.failed(message)

        screenshot = await evidence.capture()

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        log_performance_metric("step_duration", elapsed_ms, context={"step_id": step_id})
        log_test_event(
            "step_completed",
            run_id,
            step_id=step_id,
            data={"status": outcome.status.value},
        )
        return _build_result(index, step, outcome, screenshot, action)

    async def _release_session(self, session: BrowserSession) -> None:
        try:
            await session.stop()
        except Exception as e:
            logger.warning("Failed to release browser session", extra={"error": str(e)})


def _build_result(
    index: int,
    step: CheckedStep,
    outcome: StepOutcome,
    evidence: Evidence,
    action: Optional[str] = None,
) -> ExecutionResult:
    if action is None:
        action = step.action.value if isinstance(step, TestStep) else step.action
    return ExecutionResult(
        id=f"step-{index}",
        step_description=step.description,
        action=action,
        target=step.target,
        confidence=step.confidence,
        status=outcome.status,
        details=outcome.details,
        screenshot_data_url=evidence.data_url,
        snapshot_width=evidence.width,
        snapshot_height=evidence.height,
        snapshot_ai_hint=evidence.ai_hint,
        snapshot_error=evidence.error,
    )
