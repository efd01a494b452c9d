"""Tests for main.py CLI interface."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from testpilot import __version__
from testpilot.config.settings import Settings
from testpilot.core.plan import TestPlan
from testpilot.core.types import (
    ExecutionReport,
    ExecutionResult,
    ExecutionStatus,
    Scenario,
    SupportedAction,
    TestStep,
)
from testpilot.error_handling import GenerationError
from testpilot.main import async_main, create_parser, main, show_version
from testpilot.storage.plan_store import JsonFilePlanStorage

URL = "https://example.com"


@pytest.fixture
def cli_settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="test-key",
        data_dir=tmp_path / "data",
        plan_file=tmp_path / "data" / "test_plan.json",
        reports_dir=tmp_path / "reports",
    )


@pytest.fixture
def patched_cli(cli_settings):
    with patch("testpilot.main.get_settings", return_value=cli_settings), patch(
        "testpilot.main.setup_logging"
    ) as mock_logging:
        yield mock_logging


def _report(status: ExecutionStatus, error=None) -> ExecutionReport:
    return ExecutionReport(
        results=[
            ExecutionResult(
                id="step-0",
                step_description="Reload",
                action="reload",
                target="",
                confidence=1.0,
                status=status,
                screenshot_data_url="data:image/png;base64,AAAA",
            )
        ],
        error=error,
    )


def _save_plan(settings: Settings) -> None:
    JsonFilePlanStorage(settings.plan_file).save(
        TestPlan(
            url=URL,
            scenarios=[
                Scenario(
                    id="first",
                    name="First",
                    test_steps=[TestStep(action=SupportedAction.RELOAD, description="Reload")],
                ),
                Scenario(
                    id="second",
                    name="Second",
                    test_steps=[TestStep(action=SupportedAction.GO_BACK, description="Back")],
                ),
            ],
        )
    )


class TestCLIParser:
    """Test command line parser."""

    def test_parser_arguments(self):
        parser = create_parser()
        actions = {action.dest for action in parser._actions}

        assert {"generate", "run", "version", "scenario", "steps", "url", "output"} <= actions
        assert {"headed", "debug", "verbose"} <= actions

    def test_commands_are_mutually_exclusive(self):
        parser = create_parser()
        parser.parse_args(["--generate", URL])
        parser.parse_args(["--run"])

        with pytest.raises(SystemExit):
            parser.parse_args(["--run", "--generate", URL])

    def test_show_version(self):
        assert show_version() == 0
        assert __version__ == "0.1.0"


class TestGenerate:
    """Tests for --generate."""

    @pytest.mark.asyncio
    async def test_generate_saves_plan(self, patched_cli, cli_settings):
        scenarios = [Scenario(name="Login", test_steps=[TestStep(action=SupportedAction.RELOAD)])]
        with patch("testpilot.main.PageScenarioGenerator") as mock_generator:
            mock_generator.return_value.generate = AsyncMock(return_value=scenarios)
            exit_code = await async_main(["--generate", URL])

        assert exit_code == 0
        plan = JsonFilePlanStorage(cli_settings.plan_file).load()
        assert plan.url == URL
        assert [s.name for s in plan.scenarios] == ["Login"]
        patched_cli.assert_called_once()

    @pytest.mark.asyncio
    async def test_generate_failure(self, patched_cli, cli_settings):
        with patch("testpilot.main.PageScenarioGenerator") as mock_generator:
            mock_generator.return_value.generate = AsyncMock(
                side_effect=GenerationError("Invalid URL format.")
            )
            exit_code = await async_main(["--generate", "nope"])

        assert exit_code == 1
        assert not cli_settings.plan_file.exists()


class TestRun:
    """Tests for --run."""

    @pytest.mark.asyncio
    async def test_run_active_scenario(self, patched_cli, cli_settings, tmp_path):
        _save_plan(cli_settings)
        output = tmp_path / "report.json"

        with patch("testpilot.main.StepExecutor") as mock_executor:
            mock_executor.return_value.execute = AsyncMock(
                return_value=_report(ExecutionStatus.PASS)
            )
            exit_code = await async_main(["--run", "--output", str(output)])

        assert exit_code == 0
        url, steps = mock_executor.return_value.execute.await_args.args
        assert url == URL
        assert [s.action for s in steps] == [SupportedAction.RELOAD]
        assert json.loads(output.read_text())["results"][0]["status"] == "pass"

    @pytest.mark.asyncio
    async def test_run_selected_scenario_with_failure(self, patched_cli, cli_settings):
        _save_plan(cli_settings)

        with patch("testpilot.main.StepExecutor") as mock_executor:
            mock_executor.return_value.execute = AsyncMock(
                return_value=_report(ExecutionStatus.FAIL)
            )
            exit_code = await async_main(["--run", "--scenario", "2"])

        assert exit_code == 1
        _, steps = mock_executor.return_value.execute.await_args.args
        assert [s.action for s in steps] == [SupportedAction.GO_BACK]

    @pytest.mark.asyncio
    async def test_run_error_sets_exit_code(self, patched_cli, cli_settings):
        _save_plan(cli_settings)

        with patch("testpilot.main.StepExecutor") as mock_executor:
            mock_executor.return_value.execute = AsyncMock(
                return_value=_report(ExecutionStatus.PASS, error="lost")
            )
            assert await async_main(["--run"]) == 1

    @pytest.mark.asyncio
    async def test_run_unknown_scenario(self, patched_cli, cli_settings):
        _save_plan(cli_settings)
        with patch("testpilot.main.StepExecutor") as mock_executor:
            assert await async_main(["--run", "--scenario", "5"]) == 1
        mock_executor.assert_not_called()

    @pytest.mark.asyncio
    async def test_run_without_plan(self, patched_cli):
        assert await async_main(["--run"]) == 1

    @pytest.mark.asyncio
    async def test_run_steps_file(self, patched_cli, tmp_path):
        steps_file = tmp_path / "steps.json"
        steps_file.write_text(json.dumps([{"action": "reload"}, {"action": "hover"}]))

        with patch("testpilot.main.StepExecutor") as mock_executor:
            mock_executor.return_value.execute = AsyncMock(
                return_value=_report(ExecutionStatus.PASS)
            )
            exit_code = await async_main(["--run", "--steps", str(steps_file), "--url", URL])

        assert exit_code == 0
        url, steps = mock_executor.return_value.execute.await_args.args
        assert url == URL
        assert steps == [{"action": "reload"}, {"action": "hover"}]

    @pytest.mark.asyncio
    async def test_steps_file_requires_url(self, patched_cli, tmp_path):
        steps_file = tmp_path / "steps.json"
        steps_file.write_text("[]")
        assert await async_main(["--run", "--steps", str(steps_file)]) == 1

    @pytest.mark.asyncio
    async def test_headed_and_debug_flags(self, patched_cli, cli_settings):
        _save_plan(cli_settings)
        with patch("testpilot.main.StepExecutor") as mock_executor:
            mock_executor.return_value.execute = AsyncMock(
                return_value=_report(ExecutionStatus.PASS)
            )
            await async_main(["--run", "--headed", "--debug", "--verbose"])

        assert cli_settings.browser_headless is False
        assert cli_settings.log_level == "DEBUG"
        mock_executor.assert_called_once_with(settings=cli_settings, headless=False)
        patched_cli.assert_called_once_with(
            log_level="DEBUG", log_format="json", log_file=cli_settings.log_file
        )


def test_no_command_prints_help(patched_cli):
    assert main([]) == 1


def test_main_reports_fatal_errors():
    with patch("testpilot.main.async_main", MagicMock(side_effect=RuntimeError("boom"))):
        assert main(["--run"]) == 1
