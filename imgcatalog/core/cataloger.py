"""Directory cataloging: filter, extract and persist every image under a root."""

from pathlib import Path

from tqdm import tqdm

from .errors import ExtractionError, PersistenceError
from .filters import ExtensionFilter
from .models import FileState, ScanReport
from .scanner import ImageScanner
from ..storage.database import CatalogDatabase
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ImageCataloger:
    """Walks a directory and appends one catalog row per image file.

    Files are handled one at a time. A failure while extracting or storing
    one file is logged and counted, and the scan moves on to the next file.
    """

    def __init__(
        self,
        db: CatalogDatabase,
        scanner: ImageScanner,
        extension_filter: ExtensionFilter | None = None,
        skip_undecodable: bool = False,
        progress: bool = True,
    ):
        """Initialize the cataloger.

        Args:
            db: Store the records are appended to
            scanner: Metadata extractor (optionally with enrichment)
            extension_filter: Selects candidate files; defaults to the standard image extensions
            skip_undecodable: Do not store records whose dimensions could not be decoded
            progress: Show a progress bar while scanning
        """
        self.db = db
        self.scanner = scanner
        self.extension_filter = extension_filter or ExtensionFilter()
        self.skip_undecodable = skip_undecodable
        self.progress = progress

    def process_file(self, filepath: Path, report: ScanReport | None = None) -> FileState:
        """Run one file through filter, extraction and persistence.

        Returns:
            The terminal state reached by the file
        """
        if not self.extension_filter.accepts(filepath):
            return FileState.REJECTED

        try:
            record = self.scanner.extract_metadata(filepath)
        except ExtractionError as e:
            self._report_error(filepath, e, report)
            return FileState.EXTRACTION_FAILED

        if self.skip_undecodable and record.dimensions is None:
            logger.info("Skipped (undecodable): %s", filepath)
            return FileState.SKIPPED

        try:
            self.db.append(record)
        except PersistenceError as e:
            self._report_error(filepath, e, report)
            return FileState.PERSIST_FAILED

        logger.debug("Added: %s", filepath)
        return FileState.PERSISTED

    def scan(self, path: str | Path) -> ScanReport:
        """Catalog every candidate image below a directory.

        Args:
            path: Root directory to scan recursively

        Returns:
            ScanReport with per-state counters; report.persisted is the number
            of images successfully cataloged
        """
        report = ScanReport()
        files = list(self.scanner.iter_files(path))
        for filepath in tqdm(files, desc="Cataloging", unit="file", disable=not self.progress):
            try:
                state = self.process_file(filepath, report)
            except Exception as e:
                self._report_error(filepath, e, report)
                state = FileState.FAILED
            report.record(state)
        return report

    @staticmethod
    def _report_error(filepath: Path, error: Exception, report: ScanReport | None) -> None:
        logger.warning("Error processing %s: %s", filepath, error)
        if report is not None:
            report.errors.append(f"{filepath}: {error}")
