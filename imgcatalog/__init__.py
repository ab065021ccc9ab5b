"""Image Catalog - Record image file metadata in a SQLite database.

Package structure:
    imgcatalog/
    ├── cli.py              # Command-line interface
    ├── config.py           # Variant presets, YAML and environment settings
    ├── core/               # Core business logic
    │   ├── models.py       # Data models (ImageRecord, ScanReport)
    │   ├── filters.py      # Extension-based file selection
    │   ├── scanner.py      # Metadata extraction
    │   └── cataloger.py    # Directory scan -> extract -> store
    ├── storage/            # Data persistence
    │   └── database.py     # SQLite catalog
    └── api/                # External integrations
        └── enrichment_api.py # Vision model client (description + keywords)
"""

from .core.models import ImageRecord, FileState, ScanReport
from .core.errors import (
    CatalogError,
    ConfigError,
    ExtractionError,
    FileAccessError,
    EnrichmentError,
    PersistenceError,
)
from .core.filters import ExtensionFilter, DEFAULT_EXTENSIONS
from .core.scanner import ImageScanner
from .core.cataloger import ImageCataloger
from .storage.database import CatalogDatabase
from .api.enrichment_api import (
    EnrichmentAPI,
    EnrichmentAPIError,
    MockEnrichmentAPI,
    parse_model_output,
)
from .config import CatalogConfig, load_config

__all__ = [
    # Core
    "ImageRecord",
    "FileState",
    "ScanReport",
    "ExtensionFilter",
    "DEFAULT_EXTENSIONS",
    "ImageScanner",
    "ImageCataloger",
    # Errors
    "CatalogError",
    "ConfigError",
    "ExtractionError",
    "FileAccessError",
    "EnrichmentError",
    "PersistenceError",
    # Storage
    "CatalogDatabase",
    # API
    "EnrichmentAPI",
    "EnrichmentAPIError",
    "MockEnrichmentAPI",
    "parse_model_output",
    # Config
    "CatalogConfig",
    "load_config",
]
