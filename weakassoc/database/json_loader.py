"""Schema model loading from JSON documents.

Supports two layouts:
- Nested: {"name": "...", "schemas": [{"name": "...", "tables": [...]}]}
- Flat: {"name": "...", "tables": [{"name": "...", "schema": "...", ...}]}

Each table entry looks like:

    {
      "name": "BOOKS",
      "columns": [
        {"name": "ID", "data_type": "INTEGER", "nullable": false, "primary_key": true},
        {"name": "AUTHORID", "data_type": "INTEGER"}
      ],
      "primary_key": ["ID"],
      "foreign_keys": [
        {"name": "FK_BOOKS_AUTHORS", "columns": ["AUTHORID"],
         "references": {"table": "AUTHORS", "columns": ["ID"]}}
      ],
      "indexes": [{"name": "UQ_BOOKS_ISBN", "columns": ["ISBN"], "unique": true}]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..errors import SchemaLoadError
from .models import DEFAULT_TYPE_MAPPER, Column, Database, ForeignKeyDefinition, Index, Schema, Table
from .type_mappers import DuckDBTypeMapper, TypeMapper

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "PUBLIC"

TYPE_MAPPERS: Dict[str, TypeMapper] = {
    "generic": DEFAULT_TYPE_MAPPER,
    "duckdb": DuckDBTypeMapper(),
}


class ColumnDocument(BaseModel):
    name: str
    data_type: str = Field(default="VARCHAR", alias="type")
    nullable: bool = True
    primary_key: bool = False

    model_config = {"populate_by_name": True}


class ReferenceDocument(BaseModel):
    table: str
    columns: List[str]
    schema_name: Optional[str] = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class ForeignKeyDocument(BaseModel):
    name: Optional[str] = None
    columns: List[str]
    references: ReferenceDocument

    @model_validator(mode="after")
    def _check_column_counts(self) -> "ForeignKeyDocument":
        if len(self.columns) != len(self.references.columns):
            raise ValueError(
                f"{len(self.columns)} columns cannot reference "
                f"{len(self.references.columns)} columns"
            )
        return self


class IndexDocument(BaseModel):
    name: str
    columns: List[str]
    unique: bool = False


class TableDocument(BaseModel):
    name: str
    schema_name: Optional[str] = Field(default=None, alias="schema")
    columns: List[ColumnDocument] = Field(default_factory=list)
    primary_key: List[str] = Field(default_factory=list)
    foreign_keys: List[ForeignKeyDocument] = Field(default_factory=list)
    indexes: List[IndexDocument] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class SchemaDocument(BaseModel):
    name: str = DEFAULT_SCHEMA
    tables: List[TableDocument] = Field(default_factory=list)


class DatabaseDocument(BaseModel):
    name: str = "database"
    type_system: str = "generic"
    schemas: List[SchemaDocument] = Field(default_factory=list)
    tables: List[TableDocument] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_type_system(self) -> "DatabaseDocument":
        if self.type_system not in TYPE_MAPPERS:
            raise ValueError(
                f"Unknown type_system '{self.type_system}', "
                f"expected one of: {', '.join(sorted(TYPE_MAPPERS))}"
            )
        return self


def parse_schema_document(data: Any, source: Optional[str] = None) -> Database:
    """Build a Database model from an already-decoded JSON document.

    Args:
        data: Decoded JSON document
        source: Where the document came from, for error messages

    Returns:
        Database with declared foreign keys resolved

    Raises:
        SchemaLoadError: If the document does not describe a schema
    """
    try:
        document = DatabaseDocument.model_validate(data)
    except ValidationError as e:
        raise SchemaLoadError(
            f"Invalid schema document{f' {source}' if source else ''}",
            source=source,
            errors=[
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in e.errors()
            ],
        ) from e

    type_mapper = TYPE_MAPPERS[document.type_system]
    db = Database(name=document.name)
    definitions: List[ForeignKeyDefinition] = []

    schema_documents = list(document.schemas)
    if document.tables:
        # Flat layout: group tables by their own schema name
        grouped: Dict[str, SchemaDocument] = {}
        for table_doc in document.tables:
            schema_name = table_doc.schema_name or DEFAULT_SCHEMA
            grouped.setdefault(schema_name, SchemaDocument(name=schema_name)).tables.append(table_doc)
        schema_documents.extend(grouped.values())

    for schema_doc in schema_documents:
        schema = Schema(name=schema_doc.name)
        for table_doc in schema_doc.tables:
            table = _build_table(table_doc, schema_doc.name, type_mapper)
            schema.tables.append(table)
            definitions.extend(_build_foreign_keys(table_doc, schema_doc.name))
        db.schemas.append(schema)

    for definition in definitions:
        db.add_foreign_key(definition)

    logger.info(
        "Loaded %d tables from %s", len(db.get_all_tables()), source or "document"
    )
    return db


def load_schema_json(path: Union[str, Path]) -> Database:
    """Load a Database model from a JSON file.

    Raises:
        SchemaLoadError: If the file cannot be read, is not valid JSON, or
            does not describe a schema
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SchemaLoadError(f"Cannot read schema file {path}: {e}", source=str(path)) from e
    except json.JSONDecodeError as e:
        raise SchemaLoadError(
            f"Schema file {path} is not valid JSON",
            source=str(path),
            errors=[{"loc": [f"line {e.lineno}", f"column {e.colno}"], "msg": e.msg}],
        ) from e

    return parse_schema_document(data, source=str(path))


def _build_table(table_doc: TableDocument, schema_name: str, type_mapper: TypeMapper) -> Table:
    columns = [
        Column(
            name=col.name,
            data_type=col.data_type,
            is_nullable=col.nullable,
            is_primary_key=col.primary_key,
            ordinal_position=position,
            _type_mapper=type_mapper,
        )
        for position, col in enumerate(table_doc.columns, start=1)
    ]
    indexes = [
        Index(name=index.name, columns=list(index.columns), is_unique=index.unique)
        for index in table_doc.indexes
    ]
    return Table(
        name=table_doc.name,
        schema=schema_name,
        columns=columns,
        primary_key_columns=list(table_doc.primary_key),
        indexes=indexes,
    )


def _build_foreign_keys(table_doc: TableDocument, schema_name: str) -> List[ForeignKeyDefinition]:
    return [
        ForeignKeyDefinition(
            name=fk.name,
            table=table_doc.name,
            schema=schema_name,
            columns=list(fk.columns),
            referenced_schema=fk.references.schema_name,
            referenced_table=fk.references.table,
            referenced_columns=list(fk.references.columns),
        )
        for fk in table_doc.foreign_keys
    ]
