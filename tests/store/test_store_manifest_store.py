import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from wintune.errors import InvalidStateError, ManifestCorruptError, ManifestMissingError
from wintune.models import ActionResult
from wintune.plan import PowerPlanAction, PowerTier, ReportAction, ReportKind
from wintune.store import ManifestStore, RunManifest

CREATED = datetime(2026, 1, 30, 15, 30, 12, tzinfo=timezone.utc)


def _manifest(run_id: str = "2026-01-30_153012") -> RunManifest:
    return RunManifest(
        run_id=run_id,
        created_at=CREATED,
        host="PC1",
        user="alice",
        profile="Office",
        features=["PowerPlan", "StartupReport"],
        actions=[
            PowerPlanAction(feature="PowerPlan", desired_tier=PowerTier.BALANCED, previous_active_id="abc"),
            ReportAction(feature="StartupReport", kind=ReportKind.STARTUP_ENTRIES),
        ],
    )


class TestManifestStore(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name) / "backups"
        self.store = ManifestStore(self.root)

    def tearDown(self) -> None:
        self._td.cleanup()

    def test_create_run_uses_timestamp_name(self) -> None:
        run_dir = self.store.create_run(CREATED)
        self.assertEqual(run_dir.name, "2026-01-30_153012")
        self.assertTrue(run_dir.is_dir())

    def test_create_run_refuses_existing_directory(self) -> None:
        self.store.create_run(CREATED)
        with self.assertRaises(InvalidStateError):
            self.store.create_run(CREATED)

    def test_latest_run_is_lexicographically_greatest(self) -> None:
        for name in ("2026-01-30_090000", "2026-01-30_153012", "notes"):
            (self.root / name).mkdir(parents=True)
        (self.root / "2027-01-01_000000.txt").write_text("x", encoding="utf-8")

        self.assertEqual(self.store.latest_run_dir().name, "2026-01-30_153012")
        self.assertEqual([p.name for p in self.store.list_runs()], ["2026-01-30_090000", "2026-01-30_153012"])

    def test_latest_run_without_runs(self) -> None:
        with self.assertRaises(ManifestMissingError):
            self.store.latest_run_dir()

    def test_resolve_explicit(self) -> None:
        explicit = Path(self._td.name) / "elsewhere"
        self.assertEqual(self.store.resolve_run_dir(explicit), explicit)

    def test_manifest_round_trip(self) -> None:
        run_dir = self.store.create_run(CREATED)
        self.store.save_manifest(run_dir, _manifest())

        loaded = self.store.load_manifest(run_dir)

        self.assertEqual(loaded.run_id, "2026-01-30_153012")
        self.assertEqual(loaded.created_at, CREATED)
        self.assertEqual(loaded.actions, _manifest().actions)
        self.assertFalse((run_dir / "manifest.json.tmp").exists())

        with open(run_dir / "manifest.json", encoding="utf-8") as fh:
            data = json.load(fh)
        self.assertEqual(data["schema_version"], 1)
        self.assertEqual(data["actions"][0]["type"], "PowerPlan")

    def test_missing_manifest(self) -> None:
        run_dir = self.store.create_run(CREATED)
        with self.assertRaises(ManifestMissingError):
            self.store.load_manifest(run_dir)

    def test_corrupt_manifest(self) -> None:
        run_dir = self.store.create_run(CREATED)
        path = run_dir / "manifest.json"

        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ManifestCorruptError):
            self.store.load_manifest(run_dir)

        path.write_text(json.dumps({"schema_version": 1, "run_id": "x"}), encoding="utf-8")
        with self.assertRaises(ManifestCorruptError):
            self.store.load_manifest(run_dir)

        data = _manifest().to_dict()
        data["schema_version"] = 99
        path.write_text(json.dumps(data), encoding="utf-8")
        with self.assertRaises(ManifestCorruptError):
            self.store.load_manifest(run_dir)

        path.write_text("[]", encoding="utf-8")
        with self.assertRaises(ManifestCorruptError):
            self.store.load_manifest(run_dir)

    def test_unknown_profile_or_feature_is_corrupt(self) -> None:
        run_dir = self.store.create_run(CREATED)
        path = run_dir / "manifest.json"

        data = _manifest().to_dict()
        data["profile"] = "Bogus"
        path.write_text(json.dumps(data), encoding="utf-8")
        with self.assertRaises(ManifestCorruptError) as cm:
            self.store.load_manifest(run_dir)
        self.assertEqual(cm.exception.details, {"profile": "Bogus"})

        data = _manifest().to_dict()
        data["features"] = ["PowerPlan", "Bogus"]
        path.write_text(json.dumps(data), encoding="utf-8")
        with self.assertRaises(ManifestCorruptError) as cm:
            self.store.load_manifest(run_dir)
        self.assertEqual(cm.exception.details, {"feature": "Bogus"})

    def test_profile_and_features_are_canonicalized(self) -> None:
        run_dir = self.store.create_run(CREATED)
        data = _manifest().to_dict()
        data["profile"] = "office"
        data["features"] = ["powerplan", "StartupReport"]
        (run_dir / "manifest.json").write_text(json.dumps(data), encoding="utf-8")

        loaded = self.store.load_manifest(run_dir)

        self.assertEqual(loaded.profile, "Office")
        self.assertEqual(loaded.features, ["PowerPlan", "StartupReport"])

    def test_results(self) -> None:
        run_dir = self.store.create_run(CREATED)
        results = [
            ActionResult(seq=0, feature="PowerPlan", action_type="PowerPlan", status="OK", detail="resolved abc"),
            ActionResult(seq=1, feature="StartupReport", action_type="Report", status="SKIPPED", detail="no-op"),
        ]

        self.store.save_results(run_dir, run_dir.name, results)
        self.store.save_revert_results(run_dir, run_dir.name, results)

        self.assertEqual(self.store.load_results(run_dir), results)
        self.assertEqual(self.store.load_results(run_dir, revert=True), results)
        with open(run_dir / "revert-results.json", encoding="utf-8") as fh:
            data = json.load(fh)
        self.assertEqual(data["mode"], "revert")
        self.assertEqual(data["run_id"], "2026-01-30_153012")
        self.assertEqual([r["status"] for r in data["results"]], ["OK", "SKIPPED"])


if __name__ == "__main__":
    unittest.main()
