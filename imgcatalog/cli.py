"""Command-line interface for the image catalog.

Environment variables:
    IMGCATALOG_DATABASE: Path to the SQLite catalog
    ENRICHMENT_API_URL: Base URL of the generation API (extended variant)
    ENRICHMENT_MODEL: Vision model name (default: "llava")
    ENRICHMENT_TIMEOUT: Request timeout in seconds
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv
from tqdm.contrib.logging import logging_redirect_tqdm

from .api.enrichment_api import EnrichmentAPI
from .config import VARIANTS, CatalogConfig, load_config, parse_timeout
from .core.cataloger import ImageCataloger
from .core.errors import ConfigError, PersistenceError
from .core.filters import ExtensionFilter
from .core.scanner import ImageScanner
from .storage.database import CatalogDatabase
from .utils.logging import setup_logging


def resolve_directory(config: CatalogConfig) -> Path:
    """Return the directory to scan, creating it when the configuration allows.

    Raises:
        OSError: If the directory cannot be created
        NotADirectoryError: If the path is missing or not a directory
    """
    path = Path(config.directory)
    if config.create_directory:
        path.mkdir(parents=True, exist_ok=True)
    if not path.is_dir():
        raise NotADirectoryError(f"{path} is not a directory")
    return path.resolve()


def build_cataloger(config: CatalogConfig, db: CatalogDatabase, progress: bool = True) -> ImageCataloger:
    """Wire scanner, filter and store together from a configuration."""
    api = None
    if config.enrich:
        api = EnrichmentAPI(
            base_url=config.api_url,
            model=config.model,
            prompt=config.prompt,
            timeout=config.timeout,
        )
    return ImageCataloger(
        db=db,
        scanner=ImageScanner(enrichment_api=api),
        extension_filter=ExtensionFilter(config.extensions),
        skip_undecodable=config.skip_undecodable,
        progress=progress,
    )


def catalog(args) -> int:
    """Scan a directory and append every image found to the catalog."""
    try:
        config = load_config(
            args.variant,
            args.config,
            directory=args.directory,
            database=args.database,
            api_url=args.api_url,
            model=args.model,
        )
        if args.timeout is not None:
            config = replace(config, timeout=parse_timeout(args.timeout))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.keep_undecodable:
        config = replace(config, skip_undecodable=False)

    try:
        root = resolve_directory(config)
    except OSError as e:
        print(f"Error: Could not access scan directory: {e}", file=sys.stderr)
        return 1

    try:
        db = CatalogDatabase(config.database, extended=config.enrich)
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with db:
        try:
            db.ensure_schema()
        except PersistenceError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        print(f"Scanning directory: {root}")
        if config.enrich:
            print(f"Enrichment: {config.model} at {config.api_url}")

        cataloger = build_cataloger(config, db, progress=not args.no_progress)
        with logging_redirect_tqdm(loggers=[logging.getLogger("imgcatalog")]):
            report = cataloger.scan(root)

    print(f"\nSuccessfully processed {report.persisted} images")
    print(report)
    return 0


def main(argv=None):
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="Image Catalog - record image metadata in a SQLite database",
        epilog="Environment variables: IMGCATALOG_DATABASE, ENRICHMENT_API_URL, "
               "ENRICHMENT_MODEL, ENRICHMENT_TIMEOUT",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Directory to scan (default: ./images for basic, current directory for extended)",
    )
    parser.add_argument(
        "--variant", "-v",
        choices=sorted(VARIANTS),
        default="basic",
        help="basic: metadata only; extended: add AI description and keywords (default: basic)",
    )
    parser.add_argument(
        "--database", "-d",
        default=None,
        help="Path to SQLite catalog (default: image_catalog.db or photo_catalog.db)",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument("--api-url", default=None, help="Base URL of the enrichment API")
    parser.add_argument("--model", "-m", default=None, help="Vision model used for enrichment")
    parser.add_argument(
        "--timeout", "-t",
        default=None,
        help="Enrichment request timeout in seconds, 'none' to wait indefinitely",
    )
    parser.add_argument(
        "--keep-undecodable",
        action="store_true",
        help="Store files whose dimensions could not be decoded",
    )
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for diagnostics on stderr (default: WARNING)",
    )

    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    sys.exit(catalog(args))


if __name__ == "__main__":
    main()
