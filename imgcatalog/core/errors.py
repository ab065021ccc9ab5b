"""Exception hierarchy for the cataloging pipeline."""


class CatalogError(Exception):
    """Base class for all imgcatalog errors."""
    pass


class ConfigError(CatalogError):
    """Raised when configuration is missing or invalid."""
    pass


class ExtractionError(CatalogError):
    """Raised when a single file cannot be turned into a record."""

    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(message)


class FileAccessError(ExtractionError):
    """The file could not be stat'ed, opened or read."""
    pass


class EnrichmentError(ExtractionError):
    """The enrichment service failed for this file."""
    pass


class PersistenceError(CatalogError):
    """Raised when the catalog store cannot be opened or written."""
    pass
