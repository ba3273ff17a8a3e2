"""Schema model and schema sources for weakassoc.

This module provides the schema object model analyzed for weak
associations, plus ways to build it: from a JSON document or by
introspecting a DuckDB database.
"""

from .models import (
    Column,
    ColumnReference,
    Database,
    ForeignKey,
    ForeignKeyDefinition,
    Index,
    Schema,
    Table,
)
from .base import DatabaseIntrospector
from .type_mappers import TypeMapper, GenericTypeMapper, DuckDBTypeMapper
from .duckdb import DuckDBIntrospector
from .json_loader import load_schema_json, parse_schema_document

__all__ = [
    # Data models
    "Column",
    "ColumnReference",
    "Database",
    "ForeignKey",
    "ForeignKeyDefinition",
    "Index",
    "Schema",
    "Table",
    # Base classes
    "DatabaseIntrospector",
    # Type mappers
    "TypeMapper",
    "GenericTypeMapper",
    "DuckDBTypeMapper",
    # Schema sources
    "DuckDBIntrospector",
    "load_schema_json",
    "parse_schema_document",
]
