import shutil
import subprocess
from datetime import datetime, timezone
from pathlib import Path

from schoolphotos.errors import ExifError

EXIFTOOL = "exiftool"
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def _exiftool(*args: str) -> str:
    if shutil.which(EXIFTOOL) is None:
        raise ExifError("exiftool not found on PATH")
    result = subprocess.run(
        [EXIFTOOL, *args],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise ExifError(result.stderr.strip() or f"exiftool exited with {result.returncode}")
    return result.stdout


def read_captured_date(path) -> str:
    """DateTimeOriginal or CreateDate as exiftool prints it, "" when neither is set."""
    out = _exiftool("-s3", "-DateTimeOriginal", "-CreateDate", str(path))
    for line in out.splitlines():
        value = line.strip()
        # Videos without a date report all zeros.
        if value and not value.startswith("0000:00:00"):
            return value
    return ""


def format_exif_date(date: datetime) -> str:
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    return date.strftime(EXIF_DATE_FORMAT)


def ensure_captured_date(path, date: datetime) -> bool:
    """
    Write DateTimeOriginal/CreateDate unless the file already carries one.

    Returns True when the file was modified.
    """
    p = Path(path)
    existing = read_captured_date(p)
    if existing:
        print(f"  [EXIF] File already has a date: {existing}")
        return False

    formatted = format_exif_date(date)
    _exiftool(
        "-overwrite_original",
        f"-DateTimeOriginal={formatted}",
        f"-CreateDate={formatted}",
        str(p),
    )
    print(f"  [EXIF] Added date {formatted}")
    return True
