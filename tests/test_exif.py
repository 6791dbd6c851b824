from __future__ import annotations

import contextlib
import io
import subprocess
import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

from schoolphotos.errors import ExifError
from schoolphotos.utils import exif


def _completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestEnsureCapturedDate(unittest.TestCase):
    def setUp(self) -> None:
        which = mock.patch.object(exif.shutil, "which", return_value="/usr/bin/exiftool")
        which.start()
        self.addCleanup(which.stop)
        quiet = contextlib.redirect_stdout(io.StringIO())
        quiet.__enter__()
        self.addCleanup(quiet.__exit__, None, None, None)

    def test_keeps_existing_date(self) -> None:
        with mock.patch.object(exif.subprocess, "run", return_value=_completed("2023:06:01 10:00:00\n")) as run:
            changed = exif.ensure_captured_date("a.jpg", datetime(2024, 1, 1, tzinfo=timezone.utc))

        self.assertFalse(changed)
        self.assertEqual(run.call_count, 1)

    def test_writes_both_tags_when_missing(self) -> None:
        date = datetime(2024, 3, 5, 9, 7, 1, tzinfo=timezone(timedelta(hours=1)))
        with mock.patch.object(exif.subprocess, "run", side_effect=[_completed(""), _completed("1 image files updated")]) as run:
            changed = exif.ensure_captured_date("clip.mp4", date)

        self.assertTrue(changed)
        write_args = run.call_args_list[1].args[0]
        self.assertIn("-overwrite_original", write_args)
        self.assertIn("-DateTimeOriginal=2024:03:05 08:07:01", write_args)
        self.assertIn("-CreateDate=2024:03:05 08:07:01", write_args)
        self.assertEqual(write_args[-1], "clip.mp4")

    def test_zero_video_dates_count_as_missing(self) -> None:
        with mock.patch.object(exif.subprocess, "run", return_value=_completed("0000:00:00 00:00:00\n")):
            self.assertEqual(exif.read_captured_date("clip.mov"), "")

    def test_exiftool_failures_raise(self) -> None:
        with mock.patch.object(exif.subprocess, "run", return_value=_completed(returncode=1, stderr="Error: bad file")):
            with self.assertRaisesRegex(ExifError, "bad file"):
                exif.read_captured_date("broken.jpg")

        with mock.patch.object(exif.shutil, "which", return_value=None):
            with self.assertRaises(ExifError):
                exif.read_captured_date("a.jpg")


if __name__ == "__main__":
    unittest.main()
