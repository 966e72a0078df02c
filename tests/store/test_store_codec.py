import unittest

from wintune.errors import ManifestCorruptError
from wintune.models import ActionResult
from wintune.plan import (
    PowerPlanAction,
    PowerTier,
    PreviousService,
    PreviousValue,
    RegistryValueAction,
    RunState,
    ServiceMissingAction,
    ServiceStateAction,
    StartMode,
    ValueType,
)
from wintune.store import action_from_dict, action_to_dict, result_from_dict, result_to_dict


class TestCodec(unittest.TestCase):
    def test_registry_wire_shape(self) -> None:
        action = RegistryValueAction(
            feature="Widgets",
            path=r"HKLM\SOFTWARE\Policies\Microsoft\Dsh",
            name="AllowNewsAndInterests",
            value_type=ValueType.INT,
            desired=0,
            previous=PreviousValue(exists=False),
        )
        data = action_to_dict(action)
        self.assertEqual(data["type"], "RegistryValue")
        self.assertEqual(data["previous"], {"exists": False, "value": None, "value_type": None})
        self.assertEqual(action_from_dict(data), action)

    def test_service_and_power(self) -> None:
        service = ServiceStateAction(
            feature="SysMain",
            name="SysMain",
            desired_start_mode=StartMode.DISABLED,
            desired_run_state=RunState.STOPPED,
            previous=PreviousService(exists=True, start_mode=StartMode.AUTOMATIC, run_state=RunState.RUNNING),
        )
        power = PowerPlanAction(feature="PowerPlan", desired_tier=PowerTier.BALANCED, previous_active_id=None)
        missing = ServiceMissingAction(feature="XboxServices", name="XblGameSave")

        self.assertEqual(action_to_dict(service)["previous"]["start_mode"], "Automatic")
        self.assertIsNone(action_to_dict(power)["previous_active_id"])
        for action in (service, power, missing):
            self.assertEqual(action_from_dict(action_to_dict(action)), action)

    def test_bad_records(self) -> None:
        for record in (
            {"type": "Nope", "feature": "X"},
            {"type": "RegistryValue", "feature": "X"},
            {"type": "ServiceState", "feature": "X", "name": "S", "desired_start_mode": "Boot",
             "desired_run_state": "Running", "previous": {"exists": True}},
            {"feature": "X"},
        ):
            with self.assertRaises(ManifestCorruptError):
                action_from_dict(record)

    def test_result(self) -> None:
        result = ActionResult(
            seq=1,
            feature="Widgets",
            action_type="RegistryValue",
            status="FAILED",
            error_type="PermissionDeniedError",
            error_message="denied",
        )
        data = result_to_dict(result)
        self.assertEqual(data["status"], "FAILED")
        self.assertIsNone(data["detail"])
        self.assertEqual(result_from_dict(data), result)


if __name__ == "__main__":
    unittest.main()
