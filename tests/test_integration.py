"""End-to-end: config file -> polling passes -> routed output files."""

import json
import logging
import os
import shutil
import tempfile
import unittest

from log_router.applog import AppendOnlyFileHandler
from log_router.config import load_config
from log_router.main import Router
from log_router.models import Record, decode_record
from log_router.source import SourceLog


class TestEndToEnd(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self._cwd = os.getcwd()
        os.chdir(self.tmpdir)

        self.source_path = os.path.join(self.tmpdir, "player.log")
        with open(self.source_path, "w", encoding="utf-8") as f:
            f.write(
                '2024-05-01T12:00:00Z INFO wx-analytics record '
                '{"timeMs": 1714564800000, "streamId": "stream-1", "eventType": "play", '
                '"totalByteReceived": 2048, "byteTransferred": 1024, "durationMs": 500, '
                '"width": 1280, "height": 720, "codec": "vp9"}\n'
            )
        config_path = os.path.join(self.tmpdir, "config.json")
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump({
                "logFilePath": self.source_path,
                "outputFiles": {"playback": "out/playback.log"},
                "eventFilters": {"playback": "play"},
                "batchInterval": "1m",
                "monitorPeriod": "5m",
            }, f)

        self.app_log = os.path.join(self.tmpdir, "applicationlogs.log")
        self.handler = AppendOnlyFileHandler(self.app_log)
        self.logger = logging.getLogger("log_router")
        self._level = self.logger.level
        self.logger.setLevel(logging.INFO)
        self.logger.addHandler(self.handler)

        self.router = Router(SourceLog(self.source_path), load_config(config_path))

    def tearDown(self):
        self.router.source.close()
        self.logger.removeHandler(self.handler)
        self.logger.setLevel(self._level)
        os.chdir(self._cwd)
        shutil.rmtree(self.tmpdir)

    def _output_lines(self) -> list[str]:
        with open(os.path.join(self.tmpdir, "out", "playback.log"), encoding="utf-8") as f:
            return f.read().splitlines()

    def _app_log_lines(self) -> list[str]:
        with open(self.app_log, encoding="utf-8") as f:
            return f.read().splitlines()

    def test_single_tick_routes_record(self):
        self.router.tick()
        lines = self._output_lines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(decode_record(lines[0]), Record(
            time_ms=1714564800000, stream_id="stream-1", event_type="play",
            total_byte_received=2048, byte_transferred=1024, duration_ms=500,
            width=1280, height=720,
        ))

    def test_second_tick_without_change_only_skips(self):
        self.router.tick()
        logged_before = len(self._app_log_lines())
        self.router.tick()

        self.assertEqual(len(self._output_lines()), 1)
        new_entries = self._app_log_lines()[logged_before:]
        self.assertEqual(len(new_entries), 1)
        self.assertIn("skipping processing", new_entries[0])

    def test_appended_lines_routed_on_next_tick(self):
        self.router.tick()
        with open(self.source_path, "a", encoding="utf-8") as f:
            f.write('noise line without payload\n')
            f.write('INFO {"timeMs": 1714564801000, "streamId": "stream-1", "eventType": "play"}\n')
            f.write('INFO {"timeMs": 1714564802000, "streamId": "stream-1", "eventType": "pause"}\n')
        self.router.tick()
        times = [json.loads(l)["timeMs"] for l in self._output_lines()]
        self.assertEqual(times, [1714564800000, 1714564801000])


if __name__ == "__main__":
    unittest.main()
