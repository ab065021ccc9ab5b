"""Image scanning and metadata extraction."""

import os
import re
from pathlib import Path
from typing import Iterator, Optional

from PIL import Image, ExifTags

from .errors import EnrichmentError, FileAccessError
from .models import ImageRecord
from ..api.enrichment_api import EnrichmentAPI, EnrichmentAPIError
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Only headers and EXIF are read here, pixel data is never decoded
Image.MAX_IMAGE_PIXELS = None

# EXIF stores timestamps as "YYYY:MM:DD HH:MM:SS"
_EXIF_DATETIME = re.compile(r"^(\d{4}):(\d{2}):(\d{2}) (\d{2}:\d{2}:\d{2})$")


def display_path(path: str | Path) -> str:
    """Return a path as valid UTF-8 text, replacing undecodable bytes."""
    return os.fsencode(path).decode("utf-8", errors="replace")


def format_exif_datetime(value) -> Optional[str]:
    """Return the display form of an EXIF date/time value.

    Standard values become "YYYY-MM-DD HH:MM:SS"; anything else is
    returned as stored, minus NUL padding and surrounding whitespace.
    """
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    text = str(value).strip("\x00 \t\r\n")
    if not text:
        return None
    match = _EXIF_DATETIME.match(text)
    if match:
        year, month, day, clock = match.groups()
        return f"{year}-{month}-{day} {clock}"
    return text


class ImageScanner:
    """Extracts catalog metadata from image files."""

    def __init__(self, enrichment_api: Optional[EnrichmentAPI] = None):
        """Initialize the scanner.

        Args:
            enrichment_api: Client used to describe each image. When None,
                records are built without description and keywords.
        """
        self.enrichment_api = enrichment_api

    @staticmethod
    def iter_files(path: str | Path) -> Iterator[Path]:
        """Yield every regular file below a directory, recursively and in sorted order."""
        for filepath in sorted(Path(path).rglob("*")):
            if filepath.is_file():
                yield filepath

    @staticmethod
    def read_dimensions(filepath: str | Path) -> Optional[tuple[int, int]]:
        """Return (width, height) of an image, or None if it cannot be decoded."""
        try:
            with Image.open(filepath) as img:
                width, height = img.size
        except Exception as e:
            logger.debug("Could not decode dimensions of %s: %s", filepath, e)
            return None
        if width <= 0 or height <= 0:
            return None
        return width, height

    @staticmethod
    def sniff_format(filepath: str | Path) -> Optional[str]:
        """Return the container format detected from file content (e.g. "PNG")."""
        try:
            with Image.open(filepath) as img:
                return img.format
        except Exception as e:
            logger.debug("Could not detect format of %s: %s", filepath, e)
            return None

    @staticmethod
    def read_capture_date(filepath: str | Path) -> Optional[str]:
        """Return the EXIF DateTimeOriginal of an image, if it has one."""
        try:
            with Image.open(filepath) as img:
                exif = img.getexif()
                value = exif.get_ifd(ExifTags.IFD.Exif).get(ExifTags.Base.DateTimeOriginal)
                if value is None:
                    value = exif.get(ExifTags.Base.DateTimeOriginal)
        except Exception as e:
            logger.debug("Could not parse EXIF of %s: %s", filepath, e)
            return None
        if value is None:
            return None
        return format_exif_datetime(value)

    def describe(self, filepath: Path) -> tuple[str, str]:
        """Run the enrichment API on the full contents of a file."""
        try:
            image_bytes = filepath.read_bytes()
        except OSError as e:
            raise FileAccessError(filepath, f"Could not read file: {e}") from e
        try:
            return self.enrichment_api.analyze(image_bytes)
        except EnrichmentAPIError as e:
            raise EnrichmentError(filepath, f"Enrichment failed: {e}") from e

    def extract_metadata(self, filepath: str | Path) -> ImageRecord:
        """Extract all metadata from an image file.

        Decoding and EXIF problems only leave the matching fields empty.

        Raises:
            FileAccessError: If the file cannot be stat'ed or read
            EnrichmentError: If enrichment is enabled and the API call fails
        """
        filepath = Path(filepath)

        try:
            file_size = filepath.stat().st_size
        except OSError as e:
            raise FileAccessError(filepath, f"Could not stat file: {e}") from e

        record = ImageRecord(
            path=display_path(filepath),
            file_name=display_path(filepath.name),
            file_size=file_size,
            dimensions=self.read_dimensions(filepath),
            format=self.sniff_format(filepath),
            creation_date=self.read_capture_date(filepath),
        )

        if self.enrichment_api is not None:
            record.description, record.keywords = self.describe(filepath)

        return record
