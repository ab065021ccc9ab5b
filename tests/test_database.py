"""Tests for the SQLite catalog store."""

import sqlite3

import pytest

from imgcatalog.core.errors import PersistenceError
from imgcatalog.core.models import ImageRecord
from imgcatalog.storage.database import CatalogDatabase

BASE_SCHEMA = ["id", "path", "file_name", "file_size", "width", "height", "format", "creation_date"]
EXTENDED_SCHEMA = BASE_SCHEMA + ["keywords", "description"]


@pytest.fixture
def catalog(temp_dir):
    db = CatalogDatabase(temp_dir / "catalog.db")
    db.ensure_schema()
    yield db
    db.close()


def make_record(**overrides) -> ImageRecord:
    values = dict(
        path="/photos/cat.jpg",
        file_name="cat.jpg",
        file_size=2048,
        dimensions=(640, 480),
        format="JPEG",
        creation_date="2021-06-01 10:20:30",
    )
    values.update(overrides)
    return ImageRecord(**values)


def table_names(db_path):
    with sqlite3.connect(db_path) as conn:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'images'")
        return [row[0] for row in rows]


def test_schema_idempotent(temp_dir):
    db_path = temp_dir / "catalog.db"
    with CatalogDatabase(db_path) as db:
        db.ensure_schema()
        db.append(make_record())
        db.ensure_schema()
        assert db.columns() == EXTENDED_SCHEMA
        assert db.count() == 1

    with CatalogDatabase(db_path) as db:
        db.ensure_schema()
        assert db.columns() == EXTENDED_SCHEMA
        assert db.count() == 1

    assert table_names(db_path) == ["images"]


def test_basic_schema(temp_dir):
    with CatalogDatabase(temp_dir / "basic.db", extended=False) as db:
        db.ensure_schema()
        db.ensure_schema()
        assert db.columns() == BASE_SCHEMA


def test_basic_store_is_upgraded_additively(temp_dir):
    db_path = temp_dir / "catalog.db"
    with CatalogDatabase(db_path, extended=False) as db:
        db.ensure_schema()
        db.append(make_record())

    with CatalogDatabase(db_path, extended=True) as db:
        db.ensure_schema()
        assert db.columns() == EXTENDED_SCHEMA
        records = db.list_all()

    assert len(records) == 1
    assert records[0].file_name == "cat.jpg"
    assert records[0].keywords is None


def test_append_round_trip(catalog):
    record = make_record(keywords="cat, sofa", description="A cat on a sofa.")
    catalog.append(record)

    assert catalog.list_all() == [record]


def test_append_optional_fields_absent(catalog):
    record = make_record(dimensions=None, format=None, creation_date=None)
    catalog.append(record)

    stored = catalog.list_all()[0]
    assert stored.dimensions is None
    assert stored.format is None
    assert stored.creation_date is None


def test_duplicates_are_not_merged(catalog):
    catalog.append(make_record())
    catalog.append(make_record())

    assert catalog.count() == 2


def test_basic_store_ignores_enrichment_fields(temp_dir):
    with CatalogDatabase(temp_dir / "basic.db", extended=False) as db:
        db.ensure_schema()
        db.append(make_record(keywords="ignored", description="ignored"))
        stored = db.list_all()[0]
    assert stored.keywords is None
    assert stored.description is None


def test_append_before_schema_raises(temp_dir):
    with CatalogDatabase(temp_dir / "empty.db") as db:
        with pytest.raises(PersistenceError):
            db.append(make_record())


def test_unopenable_database(temp_dir):
    with pytest.raises(PersistenceError):
        db = CatalogDatabase(temp_dir)
        db.ensure_schema()


def test_unencodable_path_raises_persistence_error(catalog):
    with pytest.raises(PersistenceError):
        catalog.append(make_record(path="/photos/caf\udce9.png", file_name="caf\udce9.png"))
    assert catalog.count() == 0
