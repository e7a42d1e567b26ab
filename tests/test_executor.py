"""
Tests for the execution engine — single commands and fail-fast workflows.

Most tests use MockRunner; TestSubprocessRunner spawns real ``sh``
processes and is skipped where there is no POSIX shell.
"""

import shutil
import sys
from pathlib import Path

import pytest

from src.adapters.shell.command import SubprocessRunner
from src.core.engine.executor import execute, run_workflow
from src.core.errors import EmptyWorkflow, NonZeroExit, SpawnError
from src.core.models.command import CommandPlan
from src.core.models.workflow import ScriptEntry


def _plan(*argv: str) -> CommandPlan:
    return CommandPlan(executable=argv[0], arguments=argv[1:])


# ── execute ─────────────────────────────────────────────────────


class TestExecute:
    def test_success(self, mock_runner):
        result = execute(_plan("apt-get", "install", "jq"), runner=mock_runner)
        assert result.ok
        assert result.steps_run == 1
        assert mock_runner.rendered_calls == ["apt-get install jq"]

    def test_non_zero_exit(self, mock_runner):
        mock_runner.set_status("apt-get", 100)
        with pytest.raises(NonZeroExit) as excinfo:
            execute(_plan("apt-get", "install", "jq"), runner=mock_runner)
        assert excinfo.value.code == 100
        assert excinfo.value.exit_code == 100
        assert excinfo.value.command == "apt-get install jq"

    def test_spawn_error_propagates(self, mock_runner):
        mock_runner.set_spawn_error("winget")
        with pytest.raises(SpawnError) as excinfo:
            execute(_plan("winget", "install", "x"), runner=mock_runner)
        assert excinfo.value.exit_code == 7

    def test_dry_run_never_spawns(self, mock_runner):
        result = execute(_plan("apt-get", "install", "postgresql=15"), dry_run=True, runner=mock_runner)
        assert result.ok
        assert result.dry_run
        assert result.planned == ["apt-get install postgresql=15"]
        assert mock_runner.call_count == 0

    @pytest.mark.parametrize("status,code", [(1, 1), (42, 42), (-9, 137), (300, 1)])
    def test_exit_code_mapping(self, status, code):
        assert NonZeroExit("x", status).exit_code == code


# ── run_workflow ────────────────────────────────────────────────


class TestRunWorkflow:
    def test_all_steps_in_order(self, mock_runner, tmp_path):
        entry = ScriptEntry(["echo one", "echo two", "echo three"])
        result = run_workflow(entry, name="ci", working_directory=tmp_path, runner=mock_runner)
        assert result.ok
        assert result.steps_run == 3
        assert result.step_index is None
        assert [p.arguments[1] for p in mock_runner.call_log] == [
            "echo one",
            "echo two",
            "echo three",
        ]
        assert all(p.working_directory == tmp_path for p in mock_runner.call_log)

    def test_single_string_script(self, mock_runner):
        result = run_workflow(ScriptEntry("npm run dev"), runner=mock_runner)
        assert result.ok
        assert mock_runner.call_log[0].argv == ["sh", "-c", "npm run dev"]

    def test_fail_fast(self, mock_runner):
        mock_runner.set_status("false", 2)
        entry = ScriptEntry(["true", "false", "echo never"])
        result = run_workflow(entry, runner=mock_runner)

        assert not result.ok
        assert result.exit_status == 2
        assert result.step_index == 1
        assert result.step_number == 2
        assert result.command == "false"
        assert result.steps_run == 2
        assert mock_runner.call_count == 2

    def test_first_step_fails(self, mock_runner):
        mock_runner.set_status("lint", 1)
        result = run_workflow(ScriptEntry(["lint", "test"]), runner=mock_runner)
        assert result.step_index == 0
        assert mock_runner.call_count == 1

    def test_dry_run_lists_every_step(self, mock_runner):
        entry = ScriptEntry(["npm install", "npm run dev"])
        result = run_workflow(entry, dry_run=True, runner=mock_runner)
        assert result.ok
        assert result.dry_run
        assert result.planned == ['sh -c "npm install"', 'sh -c "npm run dev"']
        assert mock_runner.call_count == 0

    def test_dry_run_shows_what_live_run_spawns(self, mock_runner):
        entry = ScriptEntry(["lint", "npm test"])
        dry = run_workflow(entry, dry_run=True, platform="win32", runner=mock_runner)
        live = run_workflow(entry, platform="win32", runner=mock_runner)
        assert dry.planned == ["cmd /C lint", 'cmd /C "npm test"']
        assert dry.planned == live.planned == mock_runner.rendered_calls

    def test_empty_workflow(self, mock_runner):
        with pytest.raises(EmptyWorkflow) as excinfo:
            run_workflow(ScriptEntry([]), name="ci", runner=mock_runner)
        assert excinfo.value.exit_code == 8
        assert "ci" in str(excinfo.value)
        assert mock_runner.call_count == 0

    def test_empty_workflow_in_dry_run(self, mock_runner):
        with pytest.raises(EmptyWorkflow):
            run_workflow(ScriptEntry([]), dry_run=True, runner=mock_runner)

    def test_spawn_error_carries_step(self, mock_runner):
        mock_runner.set_spawn_error("sh", "No such file or directory")
        with pytest.raises(SpawnError) as excinfo:
            run_workflow(ScriptEntry(["make"]), runner=mock_runner)
        assert excinfo.value.step_index == 0
        assert excinfo.value.command == "make"

    def test_windows_shell(self, mock_runner):
        run_workflow(ScriptEntry("dir"), platform="win32", runner=mock_runner)
        assert mock_runner.call_log[0].argv == ["cmd", "/C", "dir"]

    def test_on_step_called_before_each_spawn(self, mock_runner):
        seen = []

        def on_step(index, total, command):
            seen.append((index, total, command, mock_runner.call_count))

        mock_runner.set_status("b", 1)
        run_workflow(ScriptEntry(["a", "b", "c"]), runner=mock_runner, on_step=on_step)
        assert seen == [(0, 3, "a", 0), (1, 3, "b", 1)]


# ── Real processes ──────────────────────────────────────────────


posix_only = pytest.mark.skipif(
    sys.platform.startswith("win") or shutil.which("sh") is None,
    reason="needs a POSIX shell",
)


@posix_only
class TestSubprocessRunner:
    def test_exit_status_returned(self, tmp_path):
        runner = SubprocessRunner()
        plan = CommandPlan(executable="sh", arguments=("-c", "exit 3"), working_directory=tmp_path)
        assert runner.run(plan) == 3

    def test_runs_in_working_directory(self, tmp_path):
        plan = CommandPlan(
            executable="sh",
            arguments=("-c", "pwd > where.txt"),
            working_directory=tmp_path,
        )
        assert SubprocessRunner().run(plan) == 0
        assert Path((tmp_path / "where.txt").read_text().strip()).resolve() == tmp_path.resolve()

    def test_missing_executable(self, tmp_path):
        plan = CommandPlan(executable="qbit-no-such-binary", working_directory=tmp_path)
        with pytest.raises(SpawnError, match="qbit-no-such-binary"):
            SubprocessRunner().run(plan)

    def test_workflow_stops_at_failure(self, tmp_path):
        entry = ScriptEntry(["touch one", "exit 5", "touch three"])
        result = run_workflow(entry, working_directory=tmp_path)
        assert result.exit_status == 5
        assert result.step_index == 1
        assert (tmp_path / "one").exists()
        assert not (tmp_path / "three").exists()
