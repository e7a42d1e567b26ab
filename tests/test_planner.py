"""
Tests for install and script-step command planning.
"""

from pathlib import Path

import pytest

from src.core.errors import PlanError
from src.core.models.command import CommandPlan, quote_for_display
from src.core.models.package_manager import PackageManagerKind as PM
from src.core.models.target import ResolvedInstall
from src.core.services.package_install.planner import plan_install, plan_script_step

CWD = Path("/srv/project")


def _resolved(identifier: str, manager: PM, version: str | None = None) -> ResolvedInstall:
    return ResolvedInstall(
        name="pkg",
        identifier=identifier,
        version=version,
        manager=manager,
        identifier_source="manager",
        version_source="inline" if version else None,
    )


def _plan(identifier: str, manager: PM, version: str | None = None, **kw) -> CommandPlan:
    return plan_install(
        _resolved(identifier, manager, version), manager, working_directory=CWD, **kw
    )


class TestPinnedInstall:
    @pytest.mark.parametrize(
        "manager,identifier,expected",
        [
            (PM.APT, "postgresql", ["apt-get", "install", "postgresql=15"]),
            (PM.ZYPPER, "postgresql", ["zypper", "install", "postgresql=15"]),
            (PM.DNF, "postgresql", ["dnf", "install", "postgresql-15"]),
            (PM.BREW, "postgresql", ["brew", "install", "postgresql@15"]),
            (PM.CHOCO, "postgresql", ["choco", "install", "postgresql", "--version", "15"]),
        ],
    )
    def test_pin_styles(self, manager, identifier, expected):
        assert _plan(identifier, manager, "15").argv == expected

    def test_winget_flags_then_version(self):
        plan = _plan("Google.Chrome", PM.WINGET, "127.0.0.0")
        assert plan.argv == [
            "winget",
            "install",
            "--id",
            "Google.Chrome",
            "--exact",
            "--accept-source-agreements",
            "--accept-package-agreements",
            "--version",
            "127.0.0.0",
        ]

    def test_working_directory_carried(self):
        assert _plan("jq", PM.APT).working_directory == CWD


class TestUnpinnedInstall:
    @pytest.mark.parametrize(
        "manager,expected",
        [
            (PM.APT, ["apt-get", "install", "jq"]),
            (PM.DNF, ["dnf", "install", "jq"]),
            (PM.PACMAN, ["pacman", "-S", "jq"]),
            (PM.ZYPPER, ["zypper", "install", "jq"]),
            (PM.BREW, ["brew", "install", "jq"]),
            (PM.CHOCO, ["choco", "install", "jq"]),
            (PM.SCOOP, ["scoop", "install", "jq"]),
        ],
    )
    def test_plain_install(self, manager, expected):
        assert _plan("jq", manager).argv == expected

    def test_every_manager_plans(self):
        for manager in PM:
            plan = _plan("jq", manager)
            assert "jq" in plan.arguments


class TestVersionRejections:
    @pytest.mark.parametrize("manager", [PM.PACMAN, PM.SCOOP])
    def test_no_pinning_support(self, manager):
        with pytest.raises(PlanError, match="cannot pin") as excinfo:
            _plan("python", manager, "3.12")
        assert excinfo.value.exit_code == 6
        assert excinfo.value.manager == manager.value

    def test_whitespace_in_version(self):
        with pytest.raises(PlanError, match="whitespace"):
            _plan("python", PM.APT, "3 12")

    def test_blank_version(self):
        with pytest.raises(PlanError, match="empty"):
            _plan("python", PM.APT, "   ")

    def test_blank_identifier(self):
        with pytest.raises(PlanError, match="identifier"):
            _plan("  ", PM.APT)


class TestHomebrewVersions:
    def test_matching_version_kept(self):
        assert _plan("python@3.12", PM.BREW, "3.12").argv == ["brew", "install", "python@3.12"]

    def test_conflicting_version(self):
        with pytest.raises(PlanError, match="already includes version `3.11`"):
            _plan("python@3.11", PM.BREW, "3.12")

    def test_tap_path_cannot_be_versioned(self):
        with pytest.raises(PlanError, match="Cannot derive"):
            _plan("homebrew/core/", PM.BREW, "1.0")

    @pytest.mark.parametrize("identifier", ["my formula", "python @3.12", "jq\tx"])
    def test_whitespace_identifier_cannot_be_versioned(self, identifier):
        with pytest.raises(PlanError, match="whitespace") as excinfo:
            _plan(identifier, PM.BREW, "3.12")
        assert excinfo.value.manager == "brew"

    def test_versioned_identifier_unpinned(self):
        assert _plan("python@3.11", PM.BREW).argv == ["brew", "install", "python@3.11"]


class TestYesAndSudo:
    def test_yes_flag_after_subcommand(self):
        plan = _plan("postgresql", PM.APT, "15", assume_yes=True)
        assert plan.argv == ["apt-get", "install", "-y", "postgresql=15"]

    def test_pacman_noconfirm(self):
        assert _plan("jq", PM.PACMAN, assume_yes=True).argv == [
            "pacman",
            "-S",
            "--noconfirm",
            "jq",
        ]

    def test_winget_silent(self):
        plan = _plan("jqlang.jq", PM.WINGET, assume_yes=True)
        assert plan.arguments[:2] == ("install", "--silent")

    def test_no_yes_flag_for_brew(self):
        assert _plan("jq", PM.BREW, assume_yes=True).argv == ["brew", "install", "jq"]

    def test_sudo_wraps_privileged(self):
        plan = _plan("postgresql", PM.APT, "15", use_sudo=True, assume_yes=True)
        assert plan.executable == "sudo"
        assert plan.argv == ["sudo", "apt-get", "install", "-y", "postgresql=15"]

    def test_sudo_ignored_for_brew(self):
        assert _plan("jq", PM.BREW, use_sudo=True).executable == "brew"


class TestPlanScriptStep:
    def test_posix_shell(self):
        plan = plan_script_step("npm run dev", working_directory=CWD, platform="linux")
        assert plan.argv == ["sh", "-c", "npm run dev"]
        assert plan.working_directory == CWD

    def test_windows_shell(self):
        plan = plan_script_step("npm run dev", working_directory=CWD, platform="win32")
        assert plan.argv == ["cmd", "/C", "npm run dev"]

    def test_command_passed_as_one_argument(self):
        plan = plan_script_step("echo 'a b' && ls", working_directory=CWD, platform="darwin")
        assert plan.arguments == ("-c", "echo 'a b' && ls")


class TestRendering:
    def test_render_plain(self):
        assert _plan("postgresql", PM.APT, "15").render() == "apt-get install postgresql=15"

    def test_render_quotes_spaces(self):
        plan = plan_script_step("npm run dev", working_directory=CWD, platform="linux")
        assert plan.render() == 'sh -c "npm run dev"'

    @pytest.mark.parametrize(
        "arg,expected",
        [
            ("", '""'),
            ("plain-arg_1.2", "plain-arg_1.2"),
            ("pkg@1.0", "pkg@1.0"),
            ("a b", '"a b"'),
            ('say "hi"', '"say \\"hi\\""'),
        ],
    )
    def test_quote_for_display(self, arg, expected):
        assert quote_for_display(arg) == expected

    def test_plan_is_immutable(self):
        plan = _plan("jq", PM.APT)
        with pytest.raises(Exception):
            plan.executable = "rm"  # type: ignore[misc]


class TestParseResolvePlan:
    def test_postgres_on_apt(self):
        from src.core.models.workflow import WorkflowConfig
        from src.core.services.package_install import parse_target_spec, resolve_install

        config = WorkflowConfig.model_validate(
            {"install": {"postgres": {"identifiers": {"apt": "postgresql", "default": "postgresql"}}}}
        )
        resolved = resolve_install(parse_target_spec("postgres:15"), config, PM.APT)
        plan = plan_install(resolved, PM.APT)
        assert plan.argv == ["apt-get", "install", "postgresql=15"]
        assert plan.working_directory == Path(".")
