import typing
import unittest

from wintune.plan import (
    REVERSIBLE_TYPES,
    Action,
    ActionType,
    PowerPlanAction,
    PowerTier,
    RunState,
    StartMode,
)


class TestStartMode(unittest.TestCase):
    def test_from_accessor_aliases(self) -> None:
        self.assertIs(StartMode.from_accessor("Auto"), StartMode.AUTOMATIC)
        self.assertIs(StartMode.from_accessor("AUTO_START"), StartMode.AUTOMATIC)
        self.assertIs(StartMode.from_accessor("Automatic"), StartMode.AUTOMATIC)
        self.assertIs(StartMode.from_accessor("demand"), StartMode.MANUAL)
        self.assertIs(StartMode.from_accessor("Manual"), StartMode.MANUAL)
        self.assertIs(StartMode.from_accessor(" Disabled "), StartMode.DISABLED)

    def test_unknown_mode_raises(self) -> None:
        with self.assertRaises(ValueError):
            StartMode.from_accessor("Boot")

    def test_accessor_round_trip(self) -> None:
        for mode in StartMode:
            self.assertIs(StartMode.from_accessor(mode.to_accessor()), mode)
        self.assertEqual(StartMode.AUTOMATIC.to_accessor(), "Auto")


class TestRunState(unittest.TestCase):
    def test_from_accessor(self) -> None:
        self.assertIs(RunState.from_accessor("Running"), RunState.RUNNING)
        self.assertIs(RunState.from_accessor("StartPending"), RunState.RUNNING)
        self.assertIs(RunState.from_accessor("Stopped"), RunState.STOPPED)
        self.assertIs(RunState.from_accessor("StopPending"), RunState.STOPPED)
        self.assertIs(RunState.from_accessor("Paused"), RunState.STOPPED)


class TestActionTypes(unittest.TestCase):
    def test_every_class_has_a_distinct_type(self) -> None:
        types = [cls.action_type for cls in typing.get_args(Action)]
        self.assertEqual(len(types), len(set(types)))
        self.assertEqual(set(types), set(ActionType))

    def test_reversible_types(self) -> None:
        self.assertEqual(
            REVERSIBLE_TYPES,
            {ActionType.REGISTRY_VALUE, ActionType.SERVICE_STATE, ActionType.POWER_PLAN},
        )

    def test_power_plan_resolved_id_is_mutable(self) -> None:
        action = PowerPlanAction(feature="PowerPlan", desired_tier=PowerTier.BALANCED, previous_active_id=None)
        self.assertIsNone(action.resolved_id)
        action.resolved_id = "abc"
        self.assertEqual(action.resolved_id, "abc")


if __name__ == "__main__":
    unittest.main()
