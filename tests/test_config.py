import logging
import unittest
from pathlib import Path

from wintune.config import ENV_BACKUP_ROOT, ENV_LOG_LEVEL, Settings, load_settings


class TestSettings(unittest.TestCase):
    def test_explicit_root_wins(self) -> None:
        s = load_settings({ENV_BACKUP_ROOT: "/env/root"}, backup_root=Path("/cli/root"))
        self.assertEqual(s.backup_root, Path("/cli/root"))

    def test_env_root(self) -> None:
        s = load_settings({ENV_BACKUP_ROOT: " /env/root "})
        self.assertEqual(s.backup_root, Path("/env/root"))

    def test_program_data_default(self) -> None:
        s = load_settings({"ProgramData": "/pd"})
        self.assertEqual(s.backup_root, Path("/pd") / "wintune" / "backups")

    def test_home_fallback(self) -> None:
        s = load_settings({})
        self.assertEqual(s.backup_root, Path.home() / ".wintune" / "backups")

    def test_log_level(self) -> None:
        self.assertEqual(load_settings({}).log_level, "INFO")
        s = load_settings({ENV_LOG_LEVEL: "debug"})
        self.assertEqual(s.log_level, "DEBUG")
        self.assertEqual(s.log_level_number, logging.DEBUG)

    def test_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            load_settings({ENV_LOG_LEVEL: "LOUD"})
        with self.assertRaises(TypeError):
            Settings(backup_root="not-a-path")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
