import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime
from unittest import mock

from logsift.analyzer import LogAnalyzer
from logsift.config.loader import default_config, load_config
from logsift.errors import ConfigError
from logsift.main import LogsiftApp, main, run_demo
from logsift.workspace import Workspace

LOG_CONTENT = """2024-01-01 09:00:00 [INFO] boot
2024-01-01 09:05:00 [ERROR] disk full
2024-01-01 09:10:00 [ERROR] retry failed
"""


def write(path, content):
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


class TestConfigLoader(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "logsift.ini")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_defaults(self):
        config = default_config()
        self.assertEqual(config["analyzer"], {"recent_window_minutes": 60, "on_error": "strict"})
        self.assertEqual(config["export"], {"rules": None, "level": "ERROR"})
        self.assertFalse(config["output_file"]["enabled"])
        self.assertFalse(config["output_http"]["enabled"])
        self.assertEqual(config["logging"]["level"], "INFO")

    def test_load_config(self):
        write(self.path, """
[logging]
level = DEBUG
format = %%(levelname)s %%(message)s

[analyzer]
recent_window_minutes = 10
on_error = collect

[input.file]
path = /var/log/app.log

[output.file]
enabled = true
path = out.log

[output.http]
enabled = true
url = http://collector.local/ingest
batch_size = 50
verify_ssl = false
""")
        config = load_config(self.path)

        self.assertEqual(config["logging"]["level"], "DEBUG")
        self.assertEqual(config["logging"]["format"], "%(levelname)s %(message)s")
        self.assertEqual(config["analyzer"]["recent_window_minutes"], 10)
        self.assertEqual(config["analyzer"]["on_error"], "collect")
        self.assertEqual(config["input"]["path"], "/var/log/app.log")
        self.assertEqual(config["output_file"], {"enabled": True, "path": "out.log"})
        self.assertTrue(config["output_http"]["enabled"])
        self.assertEqual(config["output_http"]["batch_size"], 50)
        self.assertFalse(config["output_http"]["verify_ssl"])
        self.assertIsNone(config["output_http"]["token"])

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config(os.path.join(self.tmpdir.name, "missing.ini"))

    def test_invalid_values(self):
        for content in [
            "[analyzer]\nrecent_window_minutes = soon\n",
            "[analyzer]\nrecent_window_minutes = 0\n",
            "[analyzer]\non_error = ignore\n",
            "[output.http]\nenabled = true\n",
            "[output.http]\nbatch_size = -1\n",
            "[logging]\nformat = %(message)s\n",
        ]:
            with self.subTest(content=content):
                write(self.path, content)
                with self.assertRaises(ConfigError):
                    load_config(self.path)


class TestApplication(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.log_path = os.path.join(self.tmpdir.name, "application.log")
        self.export_path = os.path.join(self.tmpdir.name, "errors-only.log")
        write(self.log_path, LOG_CONTENT)

    def tearDown(self):
        self.tmpdir.cleanup()

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        code = 0
        with mock.patch("sys.argv", ["logsift", *argv]), redirect_stdout(stdout), redirect_stderr(stderr):
            try:
                main()
            except SystemExit as e:
                code = e.code
        return code, stdout.getvalue(), stderr.getvalue()

    def test_app_run_exports_errors(self):
        config = default_config()
        config["output_file"] = {"enabled": True, "path": self.export_path}

        summary = LogsiftApp(config).run(self.log_path, now=datetime(2024, 1, 1, 9, 11, 0))

        self.assertEqual(summary["by_level"], {"INFO": 1, "ERROR": 2})
        self.assertEqual(summary["exported"], 2)
        with open(self.export_path, encoding="utf-8") as f:
            self.assertEqual(f.read().splitlines(), LOG_CONTENT.splitlines()[1:])

    def test_cli_json_summary(self):
        code, out, _ = self.run_main(
            "--log-file", self.log_path, "--now", "2024-01-01 09:11:00",
            "--window-minutes", "3", "--export", self.export_path, "--json",
        )
        self.assertEqual(code, 0)

        summary = json.loads(out)
        self.assertEqual(summary["total"], 3)
        self.assertEqual(summary["recent_errors"], ["2024-01-01 09:10:00 [ERROR] retry failed"])
        self.assertTrue(os.path.exists(self.export_path))

    def test_cli_strict_failure_reports_line(self):
        write(self.log_path, LOG_CONTENT + "garbage\n")

        code, _, err = self.run_main("--log-file", self.log_path)
        self.assertEqual(code, 1)
        self.assertIn("line 4", err)

    def test_cli_collect_lists_failures(self):
        write(self.log_path, LOG_CONTENT + "garbage\n")

        code, out, _ = self.run_main("--log-file", self.log_path, "--on-error", "collect", "--json")
        self.assertEqual(code, 0)
        failures = json.loads(out)["failures"]
        self.assertEqual(failures[0]["line_number"], 4)
        self.assertEqual(failures[0]["line"], "garbage")

    def test_cli_requires_log_file(self):
        code, _, _ = self.run_main()
        self.assertEqual(code, 2)

    def test_demo_run(self):
        now = datetime(2024, 1, 1, 12, 0, 0)
        with redirect_stdout(io.StringIO()):
            with Workspace() as workspace:
                summary = run_demo(LogAnalyzer(), workspace, now=now)
                with open(workspace.path("errors-only.log"), encoding="utf-8") as f:
                    exported = f.read().splitlines()
                root = workspace.root

        self.assertFalse(os.path.exists(root))
        self.assertEqual(summary["total"], 8)
        self.assertEqual(summary["by_level"], {"INFO": 3, "DEBUG": 2, "WARN": 1, "ERROR": 2})
        self.assertEqual(exported, [
            "2024-01-01 11:30:00 [ERROR] Database connection failed",
            "2024-01-01 11:30:00 [ERROR] Null pointer exception in module X",
        ])
        self.assertEqual(summary["recent_errors"], exported)


if __name__ == "__main__":
    unittest.main()
