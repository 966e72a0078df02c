import unittest

from fakes import FakeHost

from wintune.context import RunContext
from wintune.errors import ApplyError
from wintune.models import ServiceStatus
from wintune.plan import (
    BALANCED_SCHEME_ID,
    HIGH_PERFORMANCE_SCHEME_ID,
    REVERSIBLE_TYPES,
    Feature,
    PowerPlanAction,
    PowerTier,
    PreviousService,
    Profile,
    ReportAction,
    ReportKind,
    RunState,
    ServiceMissingAction,
    ServiceStateAction,
    SnapshotAction,
    SnapshotStage,
    StartMode,
    build_plan,
)
from wintune.engine import Executor, Reverter

DSH = r"HKLM\SOFTWARE\Policies\Microsoft\Dsh"
DESKTOP = r"HKCU\Control Panel\Desktop"


def _ctx(**kwargs) -> RunContext:
    return RunContext(profile=Profile.GAMING, features=(), **kwargs)


def _apply_then_revert(host: FakeHost, *features: Feature):
    plan = build_plan(host, RunContext(profile=Profile.GAMING, features=features))
    Executor(host, _ctx()).execute(plan)
    return plan, Reverter(host, _ctx()).revert(plan)


class TestRevertRegistry(unittest.TestCase):
    def test_absent_value_is_removed_not_zeroed(self) -> None:
        host = FakeHost()
        _, results = _apply_then_revert(host, Feature.WIDGETS)
        self.assertEqual([r.status for r in results], ["OK"])
        self.assertNotIn((DSH, "AllowNewsAndInterests"), host.registry)
        self.assertEqual(host.calls[-1], ("remove", DSH, "AllowNewsAndInterests"))

    def test_present_value_restored_with_type(self) -> None:
        host = FakeHost()
        host.registry[(DESKTOP, "MenuShowDelay")] = ("String", "400")
        host.registry[(DSH, "AllowNewsAndInterests")] = ("Int", 1)

        _apply_then_revert(host, Feature.MENU_SHOW_DELAY, Feature.WIDGETS)

        self.assertEqual(host.registry[(DESKTOP, "MenuShowDelay")], ("String", "400"))
        self.assertEqual(host.registry[(DSH, "AllowNewsAndInterests")], ("Int", 1))


class TestRevertServices(unittest.TestCase):
    def test_search_indexing_restored(self) -> None:
        host = FakeHost()
        host.services["WSearch"] = ServiceStatus(start_mode="Auto", run_state="Running")

        plan, results = _apply_then_revert(host, Feature.SEARCH_INDEXING)

        self.assertEqual(host.calls[0], ("service", "WSearch", "Disabled", "Stopped"))
        self.assertEqual(host.calls[-1], ("service", "WSearch", "Auto", "Running"))
        self.assertEqual(host.services["WSearch"], ServiceStatus(start_mode="Auto", run_state="Running"))
        self.assertEqual(results[0].status, "OK")

    def test_previous_state_not_captured_fails(self) -> None:
        action = ServiceStateAction(
            feature="SysMain",
            name="SysMain",
            desired_start_mode=StartMode.DISABLED,
            desired_run_state=RunState.STOPPED,
            previous=PreviousService(exists=True),
        )
        (result,) = Reverter(FakeHost(), _ctx()).revert([action])
        self.assertEqual(result.status, "FAILED")
        self.assertEqual(result.error_type, "RevertError")


class TestRevertPowerPlan(unittest.TestCase):
    def test_fallback_still_restores_previous_scheme(self) -> None:
        host = FakeHost()
        host.template_fails = True

        plan, results = _apply_then_revert(host, Feature.POWER_PLAN)

        self.assertEqual(plan[0].resolved_id, HIGH_PERFORMANCE_SCHEME_ID)
        self.assertEqual(host.active_scheme, BALANCED_SCHEME_ID)
        self.assertEqual(results[0].status, "OK")

    def test_unknown_previous_scheme_is_skipped(self) -> None:
        host = FakeHost()
        host.active_scheme = HIGH_PERFORMANCE_SCHEME_ID
        action = PowerPlanAction(feature="PowerPlan", desired_tier=PowerTier.BALANCED, previous_active_id=None)

        (result,) = Reverter(host, _ctx()).revert([action])

        self.assertEqual(result.status, "SKIPPED")
        self.assertEqual(host.calls, [])
        self.assertEqual(host.active_scheme, HIGH_PERFORMANCE_SCHEME_ID)


class TestReverter(unittest.TestCase):
    def test_non_reversible_actions_are_skipped(self) -> None:
        host = FakeHost()
        plan = [
            SnapshotAction(feature="Snapshot", stage=SnapshotStage.BEFORE),
            ServiceMissingAction(feature="XboxServices", name="XblGameSave"),
            ReportAction(feature="StartupReport", kind=ReportKind.STARTUP_ENTRIES),
        ]
        self.assertFalse(REVERSIBLE_TYPES & {a.action_type for a in plan})
        results = Reverter(host, _ctx()).revert(plan)
        self.assertEqual([r.status for r in results], ["SKIPPED"] * 3)
        self.assertTrue(all(r.detail for r in results))
        self.assertEqual(host.calls, [])

    def test_failure_does_not_stop_later_actions(self) -> None:
        class Host(FakeHost):
            def remove_config_value(self, path, name):
                if name == "SoftLandingEnabled":
                    raise ApplyError("locked")
                super().remove_config_value(path, name)

        host = Host()
        plan = build_plan(host, RunContext(profile=Profile.OFFICE, features=(Feature.TIPS,)))
        Executor(host, _ctx()).execute(plan)

        results = Reverter(host, _ctx()).revert(plan)

        self.assertEqual([r.status for r in results], ["OK", "OK", "FAILED"])
        self.assertEqual(results[2].error_type, "ApplyError")
        self.assertEqual(len(host.registry), 1)

    def test_forward_order(self) -> None:
        host = FakeHost()
        plan = build_plan(host, RunContext(profile=Profile.OFFICE, features=(Feature.COPILOT, Feature.WIDGETS)))
        Executor(host, _ctx()).execute(plan)
        host.calls.clear()

        Reverter(host, _ctx()).revert(plan)

        self.assertEqual([c[2] for c in host.calls], ["TurnOffWindowsCopilot", "AllowNewsAndInterests"])

    def test_dry_run_performs_no_writes(self) -> None:
        host = FakeHost()
        plan = build_plan(host, RunContext(profile=Profile.OFFICE, features=(Feature.WIDGETS, Feature.POWER_PLAN)))

        results = Reverter(host, _ctx(dry_run=True)).revert(plan)

        self.assertEqual([r.status for r in results], ["SKIPPED", "SKIPPED"])
        self.assertEqual(results[0].detail, f"remove {DSH}\\AllowNewsAndInterests")
        self.assertEqual(host.calls, [])


if __name__ == "__main__":
    unittest.main()
