#!/usr/bin/env python3
"""
test_integration.py - Integration tests for mediadedup

Builds real scan trees and runs full scenarios, both through main() and as a
command-line subprocess, to verify the tool works end-to-end.
"""

import json
import logging
import shutil
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import dedup

SCRIPT = Path(__file__).parent / "dedup.py"

SCAN_DATA = b"\x12\x34 entropy coded scan data \x56\x78" * 20
PNG_DATA = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR pixels" * 50


def _jpeg(metadata: bytes) -> bytes:
    return b"\xff\xd8\xff\xe1" + metadata + b"\xff\xda" + SCAN_DATA + b"\xff\xd9"


class ScanTreeMixin:
    """Creates the scan root and helpers shared by the integration cases."""

    def setUp(self):
        self.test_root = Path(tempfile.mkdtemp(prefix="mediadedup_test_"))
        self.addCleanup(shutil.rmtree, self.test_root)
        self.root = self.test_root / "data"
        self.root.mkdir()

    def create_file(self, relative: str, content: bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    def build_example_tree(self):
        self.x = self.create_file("a/x.jpg", _jpeg(b"Exif\x00\x00Camera Model A"))
        self.y = self.create_file("a/y.jpg", _jpeg(b"Exif\x00\x00Edited by a photo tool, new thumbnail"))
        self.w = self.create_file("a/w.png", PNG_DATA)
        self.z = self.create_file("b/z.png", PNG_DATA)

    def quarantine_dirs(self):
        return [p for p in self.test_root.iterdir() if p.is_dir() and p.name.isdigit()]


class TestEndToEnd(ScanTreeMixin, unittest.TestCase):
    """Run main() in-process on realistic trees."""

    def test_example_tree(self):
        self.build_example_tree()

        with patch("sys.stdout"):
            quarantine = dedup.main([str(self.root)])

        self.assertEqual(self.quarantine_dirs(), [quarantine])
        self.assertEqual(quarantine.parent, self.test_root)

        log = json.loads((quarantine / "log.json").read_text(encoding="utf-8"))
        self.assertEqual(log["counts"]["jpeg"], {"total": 2, "duplicates": 1})
        self.assertEqual(log["counts"]["png"], {"total": 2, "duplicates": 1})
        self.assertEqual(
            log["duplicates"],
            {
                "a": [{"original": {"subdir": "a", "file": "x.jpg"},
                       "duplicate": {"subdir": "a", "file": "y.jpg"}}],
                "b": [{"original": {"subdir": "a", "file": "w.png"},
                       "duplicate": {"subdir": "b", "file": "z.png"}}],
            },
        )

        # Duplicates moved with their bytes intact, originals left in place
        self.assertEqual((quarantine / "a" / "y.jpg").read_bytes(), _jpeg(b"Exif\x00\x00Edited by a photo tool, new thumbnail"))
        self.assertEqual((quarantine / "b" / "z.png").read_bytes(), PNG_DATA)
        self.assertFalse(self.y.exists())
        self.assertFalse(self.z.exists())
        self.assertTrue(self.x.exists())
        self.assertTrue(self.w.exists())

    def test_equal_size_webm_files_are_duplicates(self):
        """Known weak policy: WEBM files of equal size are duplicates by default."""
        first = self.create_file("clips/first.webm", b"\x1a\x45\xdf\xa3" + b"A" * 500)
        second = self.create_file("clips/second.webm", b"\x1a\x45\xdf\xa3" + b"B" * 500)

        with patch("sys.stdout"):
            quarantine = dedup.main([str(self.root)])

        self.assertTrue(first.exists())
        self.assertFalse(second.exists())
        self.assertTrue((quarantine / "clips" / "second.webm").exists())

    def test_sample_webm_key_keeps_different_files(self):
        self.create_file("clips/first.webm", b"\x1a\x45\xdf\xa3" + b"A" * 500)
        second = self.create_file("clips/second.webm", b"\x1a\x45\xdf\xa3" + b"B" * 500)

        with patch("sys.stdout"):
            quarantine = dedup.main(["-w", "sample", str(self.root)])

        self.assertTrue(second.exists())
        log = json.loads((quarantine / "log.json").read_text(encoding="utf-8"))
        self.assertEqual(log["duplicates"], {})

    def test_dry_run_moves_nothing(self):
        self.build_example_tree()

        with patch("sys.stdout"):
            result = dedup.main(["-d", str(self.root)])

        self.assertIsNone(result)
        self.assertEqual(self.quarantine_dirs(), [])
        self.assertTrue(self.y.exists())
        self.assertTrue(self.z.exists())

    def test_malformed_jpeg_logged_and_skipped(self):
        self.build_example_tree()
        self.create_file("b/broken.jpg", b"\xff\xd8\xff\xe0 truncated before scan")

        with patch("sys.stdout"):
            quarantine = dedup.main([str(self.root)])

        log = json.loads((quarantine / "log.json").read_text(encoding="utf-8"))
        self.assertEqual(log["counts"]["jpeg"], {"total": 3, "duplicates": 1})
        self.assertTrue((self.root / "b" / "broken.jpg").exists())

    def test_malformed_jpeg_strict_exits(self):
        self.create_file("b/broken.jpg", b"\xff\xd8\xff\xe0 truncated before scan")

        with patch("sys.stdout"):
            with self.assertRaises(SystemExit) as ctx:
                dedup.main(["-s", str(self.root)])

        self.assertEqual(ctx.exception.code, 1)
        self.assertEqual(self.quarantine_dirs(), [])

    def test_unreadable_header_aborts_run(self):
        self.build_example_tree()
        real_read_header = dedup.read_header

        def failing_read_header(file_path, *args, **kwargs):
            if file_path.name == "y.jpg":
                raise dedup.UnreadableHeader("Cannot read header (Input/output error)", file_path)
            return real_read_header(file_path, *args, **kwargs)

        with patch("sys.stdout"):
            with patch("dedup.read_header", side_effect=failing_read_header):
                with self.assertRaises(SystemExit) as ctx:
                    dedup.main([str(self.root)])

        self.assertEqual(ctx.exception.code, 1)
        self.assertEqual(self.quarantine_dirs(), [])
        self.assertTrue(self.y.exists())
        self.assertTrue(self.z.exists())

    def test_failed_directory_listing_aborts_run(self):
        self.build_example_tree()
        listing_error = OSError(13, "Permission denied")

        with patch("pathlib.Path.iterdir", side_effect=listing_error):
            with self.assertRaises(dedup.IOFailure) as raised:
                dedup.scan_tree(self.root, logging.getLogger("test.listing"))
            with patch("sys.stdout"):
                with self.assertRaises(SystemExit) as ctx:
                    dedup.main([str(self.root)])

        self.assertIs(raised.exception.__cause__, listing_error)
        self.assertEqual(ctx.exception.code, 1)
        self.assertEqual(self.quarantine_dirs(), [])
        self.assertTrue(self.y.exists())
        self.assertTrue(self.z.exists())

    def test_missing_root_exits(self):
        with patch("sys.stdout"):
            with self.assertRaises(SystemExit) as ctx:
                dedup.main([str(self.test_root / "nope")])
        self.assertEqual(ctx.exception.code, 1)

    def test_prompt_exit(self):
        with patch("sys.stdout"):
            with patch("builtins.input", return_value="q"):
                with self.assertRaises(SystemExit) as ctx:
                    dedup.main([])
        self.assertEqual(ctx.exception.code, 0)

    def test_prompt_absolute_path(self):
        self.build_example_tree()

        with patch("sys.stdout"):
            with patch("builtins.input", side_effect=["", str(self.root)]):
                quarantine = dedup.main([])

        self.assertTrue((quarantine / "a" / "y.jpg").exists())

    def test_log_file_written(self):
        self.build_example_tree()
        log_file = self.test_root / "logs" / "run.log"

        with patch("sys.stdout"):
            dedup.main(["-l", str(log_file), str(self.root)])

        text = log_file.read_text(encoding="utf-8")
        self.assertIn("Session Started", text)
        self.assertIn("duplicate of a/x.jpg", text)


class TestCommandLine(ScanTreeMixin, unittest.TestCase):
    """Run dedup.py as a subprocess."""

    def run_dedup(self, args, input_text=None):
        return subprocess.run(
            [sys.executable, str(SCRIPT)] + args,
            capture_output=True,
            text=True,
            input=input_text,
            timeout=60,
        )

    def test_cli_example_tree(self):
        self.build_example_tree()

        result = self.run_dedup(["-v", str(self.root)])

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertIn("Duplicates found: 2", result.stdout)
        quarantines = self.quarantine_dirs()
        self.assertEqual(len(quarantines), 1)
        self.assertTrue((quarantines[0] / "b" / "z.png").exists())

    def test_cli_unknown_format_warning(self):
        self.create_file("misc/readme.txt", b"hello world")

        result = self.run_dedup(["-d", str(self.root)])

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertIn("unknown format, header bytes: 68 65 6c", result.stdout)

    def test_cli_prompt_quit(self):
        result = self.run_dedup([], input_text="q\n")
        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertIn("Exiting", result.stdout)

    def test_cli_missing_root(self):
        result = self.run_dedup([str(self.test_root / "missing")])
        self.assertEqual(result.returncode, 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
