"""Core business logic - data models, metadata extraction and cataloging."""

from .models import ImageRecord, FileState, ScanReport
from .filters import ExtensionFilter
from .scanner import ImageScanner
from .cataloger import ImageCataloger

__all__ = ["ImageRecord", "FileState", "ScanReport", "ExtensionFilter", "ImageScanner", "ImageCataloger"]
