import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from srch import config

_ENV_KEYS = ["SRCH_CONFIG", "SRCH_IGNORE_DIRS", "SRCH_POOL_SIZE", "SRCH_FLUSH_INTERVAL_MS"]


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.config_path = Path(self.tmpdir.name) / "config.json"
        # Keep a developer's own .env out of the picture.
        patcher = patch.object(config.dotenv, "load_dotenv", return_value=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        env = patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        for key in _ENV_KEYS:
            os.environ.pop(key, None)

    def _write_config(self, data):
        self.config_path.write_text(json.dumps(data))

    def test_defaults_without_file(self):
        loaded = config.load_config(self.config_path)
        self.assertEqual(loaded.ignore_dirs, [])
        self.assertEqual(loaded.pool_size, 10)
        self.assertAlmostEqual(loaded.flush_interval, 0.1)

    def test_ignore_dir_from_file(self):
        self._write_config({"ignore-dir": ["vendor", "node_modules"]})
        self.assertEqual(config.load_config(self.config_path).ignore_dirs, ["vendor", "node_modules"])

    def test_ignore_dirs_alias(self):
        self._write_config({"ignore-dirs": ["build"]})
        self.assertEqual(config.load_config(self.config_path).ignore_dirs, ["build"])

    def test_ignore_dir_of_wrong_type_falls_back(self):
        for value in (5, {"a": 1}, True):
            self._write_config({"ignore-dir": value})
            with self.assertLogs("srch.config", level="WARNING"):
                loaded = config.load_config(self.config_path)
            self.assertEqual(loaded.ignore_dirs, [], value)

    def test_invalid_json_falls_back(self):
        self.config_path.write_text("{not json")
        with self.assertLogs("srch.config", level="WARNING"):
            loaded = config.load_config(self.config_path)
        self.assertEqual(loaded.ignore_dirs, [])

    def test_environment_overrides(self):
        self._write_config({"ignore-dir": ["vendor"]})
        os.environ["SRCH_IGNORE_DIRS"] = "dist, tmp"
        os.environ["SRCH_POOL_SIZE"] = "4"
        os.environ["SRCH_FLUSH_INTERVAL_MS"] = "250"
        loaded = config.load_config(self.config_path)
        self.assertEqual(loaded.ignore_dirs, ["vendor", "dist", "tmp"])
        self.assertEqual(loaded.pool_size, 4)
        self.assertAlmostEqual(loaded.flush_interval, 0.25)

    def test_bad_pool_size_ignored(self):
        os.environ["SRCH_POOL_SIZE"] = "zero"
        with self.assertLogs("srch.config", level="WARNING"):
            self.assertEqual(config.load_config(self.config_path).pool_size, 10)

    def test_config_path_from_environment(self):
        self._write_config({"ignore-dir": ["from-env"]})
        os.environ["SRCH_CONFIG"] = str(self.config_path)
        self.assertEqual(config.load_config().ignore_dirs, ["from-env"])


if __name__ == '__main__':
    unittest.main()
