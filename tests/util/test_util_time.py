import unittest
from datetime import datetime, timedelta, timezone

from wintune.util.time import is_run_id, new_run_id, now_local, parse_iso, to_iso


class TestTimeUtil(unittest.TestCase):
    def test_new_run_id_format(self) -> None:
        dt = datetime(2026, 1, 30, 15, 30, 12, tzinfo=timezone.utc)
        self.assertEqual(new_run_id(dt), "2026-01-30_153012")
        self.assertTrue(is_run_id(new_run_id()))

    def test_run_ids_sort_chronologically(self) -> None:
        early = new_run_id(datetime(2026, 1, 30, 9, 0, 0, tzinfo=timezone.utc))
        late = new_run_id(datetime(2026, 1, 30, 15, 30, 12, tzinfo=timezone.utc))
        self.assertLess(early, late)

    def test_is_run_id_rejects_other_names(self) -> None:
        self.assertFalse(is_run_id("notes"))
        self.assertFalse(is_run_id("2026-01-30"))
        self.assertFalse(is_run_id("2026-01-30_15301"))

    def test_iso_round_trip_keeps_offset(self) -> None:
        dt = datetime(2026, 1, 30, 15, 30, 12, 999, tzinfo=timezone(timedelta(hours=9)))
        s = to_iso(dt)
        self.assertEqual(s, "2026-01-30T15:30:12+09:00")
        self.assertEqual(parse_iso(s), dt.replace(microsecond=0))

    def test_parse_iso_accepts_z(self) -> None:
        self.assertEqual(parse_iso("2026-01-30T00:00:00Z").tzinfo, timezone.utc)

    def test_naive_rejected(self) -> None:
        with self.assertRaises(ValueError):
            to_iso(datetime(2026, 1, 1))
        with self.assertRaises(ValueError):
            parse_iso("2026-01-30T00:00:00")
        with self.assertRaises(ValueError):
            parse_iso("")

    def test_now_local_is_aware(self) -> None:
        self.assertIsNotNone(now_local().tzinfo)


if __name__ == "__main__":
    unittest.main()
