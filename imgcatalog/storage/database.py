"""SQLite catalog store for image records."""

import sqlite3
from pathlib import Path

from ..core.errors import PersistenceError
from ..core.models import ImageRecord
from ..utils.logging import get_logger

logger = get_logger(__name__)

BASE_COLUMNS = (
    "path",
    "file_name",
    "file_size",
    "width",
    "height",
    "format",
    "creation_date",
)
EXTENDED_COLUMNS = ("keywords", "description")


class CatalogDatabase:
    """Append-only image catalog stored in SQLite.

    A single connection is opened for the lifetime of the object and every
    append is committed on its own.
    """

    def __init__(self, db_path: str | Path = "image_catalog.db", extended: bool = True):
        """Open (or create) the catalog database.

        Args:
            db_path: Path of the SQLite file
            extended: Whether the schema carries the keywords and description columns

        Raises:
            PersistenceError: If the database cannot be opened
        """
        self.db_path = Path(db_path)
        self.extended = extended
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Could not open database {self.db_path}: {e}") from e

    @property
    def insert_columns(self) -> tuple[str, ...]:
        if self.extended:
            return BASE_COLUMNS + EXTENDED_COLUMNS
        return BASE_COLUMNS

    def ensure_schema(self) -> None:
        """Create the images table if it doesn't exist.

        Safe to call on every start. An existing table is never redefined;
        the extended columns are added to it when they are missing.
        """
        try:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS images (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    path TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    file_size INTEGER NOT NULL,
                    width INTEGER,
                    height INTEGER,
                    format TEXT,
                    creation_date TEXT
                )
            """)
            if self.extended:
                existing = set(self.columns())
                for column in EXTENDED_COLUMNS:
                    if column not in existing:
                        logger.debug("Adding column %s to images table", column)
                        self._conn.execute(f"ALTER TABLE images ADD COLUMN {column} TEXT")
            self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not initialize schema: {e}") from e

    def columns(self) -> list[str]:
        """Return the column names of the images table, in table order."""
        cursor = self._conn.execute("PRAGMA table_info(images)")
        return [row[1] for row in cursor.fetchall()]

    def append(self, record: ImageRecord) -> None:
        """Insert one image record. Duplicate paths are stored again."""
        values = [
            record.path,
            record.file_name,
            record.file_size,
            record.width,
            record.height,
            record.format,
            record.creation_date,
        ]
        if self.extended:
            values += [record.keywords, record.description]

        columns = self.insert_columns
        placeholders = ", ".join("?" for _ in columns)
        try:
            self._conn.execute(
                f"INSERT INTO images ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
            self._conn.commit()
        except (sqlite3.Error, UnicodeError) as e:
            raise PersistenceError(f"Could not insert {record.path}: {e}") from e

    def _row_to_record(self, row) -> ImageRecord:
        """Convert a database row to an ImageRecord."""
        width, height = row[3], row[4]
        return ImageRecord(
            path=row[0],
            file_name=row[1],
            file_size=row[2],
            dimensions=(width, height) if width is not None and height is not None else None,
            format=row[5],
            creation_date=row[6],
            keywords=row[7] if len(row) > 7 else None,
            description=row[8] if len(row) > 8 else None,
        )

    def list_all(self) -> list[ImageRecord]:
        """List all image records in insertion order."""
        cursor = self._conn.execute(
            f"SELECT {', '.join(self.insert_columns)} FROM images ORDER BY id"
        )
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def count(self) -> int:
        """Return the number of records in the database."""
        cursor = self._conn.execute("SELECT COUNT(*) FROM images")
        return cursor.fetchone()[0]

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "CatalogDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
