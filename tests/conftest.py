"""Shared pytest fixtures for weakassoc tests."""

import pytest
from typing import Dict, Any, List

from weakassoc.database.models import (
    Column,
    ColumnReference,
    Database,
    ForeignKey,
    Index,
    Schema,
    Table,
)


def make_table(name: str, columns: List[tuple], schema: str = "PUBLIC", indexes: List[Index] = None) -> Table:
    """Build a table from (name, data_type[, is_primary_key]) tuples."""
    return Table(
        name=name,
        schema=schema,
        columns=[
            Column(name=entry[0], data_type=entry[1], is_primary_key=len(entry) > 2 and entry[2])
            for entry in columns
        ],
        indexes=indexes or [],
    )


def declare_foreign_key(name: str, pk_column: Column, fk_column: Column) -> ForeignKey:
    """Declare a single-column foreign key on the child column's table."""
    foreign_key = ForeignKey(name=name, column_references=[ColumnReference(pk_column, fk_column)])
    fk_column.table.foreign_keys.append(foreign_key)
    return foreign_key


@pytest.fixture
def authors():
    """AUTHORS(ID pk, NAME)."""
    return make_table("AUTHORS", [
        ("ID", "INTEGER", True),
        ("NAME", "VARCHAR(100)"),
    ])


@pytest.fixture
def books():
    """BOOKS(ID pk, TITLE, AUTHORID)."""
    return make_table("BOOKS", [
        ("ID", "INTEGER", True),
        ("TITLE", "VARCHAR(200)"),
        ("AUTHORID", "INTEGER"),
    ])


@pytest.fixture
def articles():
    """ARTICLES(ID pk, AUTHORID)."""
    return make_table("ARTICLES", [
        ("ID", "INTEGER", True),
        ("AUTHORID", "INTEGER"),
    ])


@pytest.fixture
def library_database(authors, books):
    """A database holding the AUTHORS and BOOKS tables."""
    return Database(
        name="library",
        schemas=[Schema(name="PUBLIC", tables=[authors, books])],
    )


@pytest.fixture
def library_document() -> Dict[str, Any]:
    """JSON schema document for a small library database."""
    return {
        "name": "library",
        "schemas": [
            {
                "name": "PUBLIC",
                "tables": [
                    {
                        "name": "AUTHORS",
                        "columns": [
                            {"name": "ID", "data_type": "INTEGER", "nullable": False, "primary_key": True},
                            {"name": "NAME", "data_type": "VARCHAR(100)"},
                        ],
                    },
                    {
                        "name": "BOOKS",
                        "columns": [
                            {"name": "ID", "data_type": "INTEGER", "nullable": False},
                            {"name": "TITLE", "data_type": "VARCHAR(200)"},
                            {"name": "AUTHORID", "type": "INTEGER"},
                            {"name": "ISBN", "data_type": "VARCHAR(13)"},
                        ],
                        "primary_key": ["ID"],
                        "indexes": [
                            {"name": "UQ_BOOKS_ISBN", "columns": ["ISBN"], "unique": True},
                        ],
                    },
                ],
            },
        ],
    }
