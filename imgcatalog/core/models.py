"""Data models for image records and scan results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass
class ImageRecord:
    """Represents the cataloged metadata of one image file."""

    path: str
    file_name: str
    file_size: int  # bytes
    dimensions: Optional[tuple[int, int]] = None  # (width, height)
    format: Optional[str] = None  # sniffed from content, e.g. "JPEG"
    creation_date: Optional[str] = None  # EXIF DateTimeOriginal
    keywords: Optional[str] = None
    description: Optional[str] = None

    @property
    def width(self) -> Optional[int]:
        return self.dimensions[0] if self.dimensions else None

    @property
    def height(self) -> Optional[int]:
        return self.dimensions[1] if self.dimensions else None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "width": self.width,
            "height": self.height,
            "format": self.format,
            "creation_date": self.creation_date,
            "keywords": self.keywords,
            "description": self.description,
        }


class FileState(Enum):
    """Terminal state of a single file after it went through the pipeline."""

    REJECTED = "rejected"
    EXTRACTION_FAILED = "extraction_failed"
    PERSISTED = "persisted"
    PERSIST_FAILED = "persist_failed"
    SKIPPED = "skipped"
    FAILED = "failed"  # unexpected error outside the pipeline stages


@dataclass
class ScanReport:
    """Counters collected while scanning a directory."""

    seen: int = 0
    rejected: int = 0
    persisted: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)  # "path: message"

    def record(self, state: FileState) -> None:
        self.seen += 1
        if state is FileState.REJECTED:
            self.rejected += 1
        elif state is FileState.PERSISTED:
            self.persisted += 1
        elif state is FileState.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1

    @property
    def candidates(self) -> int:
        """Number of files that passed the extension filter."""
        return self.seen - self.rejected

    def __str__(self) -> str:
        lines = [f"Files seen: {self.seen}", f"Candidate images: {self.candidates}"]
        if self.skipped:
            lines.append(f"Skipped (undecodable): {self.skipped}")
        if self.failed:
            lines.append(f"Errors: {self.failed}")
        return "\n".join(lines)
