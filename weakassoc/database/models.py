"""Database data models for schema introspection."""

import logging
from typing import Optional, List, TYPE_CHECKING
from dataclasses import dataclass, field

from .type_mappers import GenericTypeMapper, TypeMapper

if TYPE_CHECKING:
    from ..analysis.models import WeakAssociationForeignKey

logger = logging.getLogger(__name__)

# Used by columns whose source did not name a type system
DEFAULT_TYPE_MAPPER = GenericTypeMapper()


@dataclass(eq=False)
class Column:
    """Represents a database column.

    Columns compare and hash by identity, so two tables may each own a
    column called ``ID`` without the two colliding in sets or mappings.
    """
    name: str
    data_type: str
    is_nullable: bool = True
    is_primary_key: bool = False
    ordinal_position: int = 0
    table: Optional['Table'] = field(default=None, repr=False)
    _type_mapper: Optional['TypeMapper'] = field(default=None, repr=False)

    @property
    def full_name(self) -> str:
        """Qualified column name, ``schema.table.column``."""
        if self.table is None:
            return self.name
        return f"{self.table.full_name}.{self.name}"

    @property
    def standard_type_name(self) -> str:
        """Vendor-neutral type name used to compare column types."""
        mapper = self._type_mapper or DEFAULT_TYPE_MAPPER
        return mapper.to_standard_type(self.data_type)

    @property
    def is_part_of_unique_index(self) -> bool:
        """Check if the column belongs to any unique index of its table."""
        if self.table is None:
            return False
        return any(
            index.is_unique and self.name in index.columns
            for index in self.table.indexes
        )


@dataclass
class Index:
    """Represents an index (or unique constraint) on a table."""
    name: str
    columns: List[str] = field(default_factory=list)
    is_unique: bool = False


@dataclass(frozen=True)
class ColumnReference:
    """A single (primary key column, foreign key column) pair."""
    primary_key_column: Column
    foreign_key_column: Column

    def __str__(self) -> str:
        return f"{self.foreign_key_column.full_name} --> {self.primary_key_column.full_name}"


@dataclass
class ForeignKey:
    """A foreign key constraint declared in the database."""
    name: str
    column_references: List[ColumnReference] = field(default_factory=list)


@dataclass
class ForeignKeyDefinition:
    """An unresolved foreign key, as reported by a schema source.

    Everything is referenced by name; ``Database.add_foreign_key`` turns a
    definition into a ``ForeignKey`` once all tables have been loaded.
    """
    table: str
    schema: str
    columns: List[str]
    referenced_table: str
    referenced_columns: List[str]
    referenced_schema: Optional[str] = None
    name: Optional[str] = None


@dataclass(eq=False)
class Table:
    """Represents a database table."""
    name: str
    schema: str
    columns: List[Column] = field(default_factory=list)
    primary_key_columns: List[str] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)
    weak_associations: List['WeakAssociationForeignKey'] = field(default_factory=list, repr=False)

    def __post_init__(self):
        columns = self.columns
        self.columns = []
        for column in columns:
            self.add_column(column)
        if not self.primary_key_columns:
            self.primary_key_columns = [c.name for c in self.columns if c.is_primary_key]

    @property
    def full_name(self) -> str:
        """Qualified table name, ``schema.table``."""
        if self.schema:
            return f"{self.schema}.{self.name}"
        return self.name

    def add_column(self, column: Column) -> Column:
        """Bind a column to this table and append it."""
        column.table = self
        if not column.ordinal_position:
            column.ordinal_position = len(self.columns) + 1
        if column.name in self.primary_key_columns:
            column.is_primary_key = True
        self.columns.append(column)
        return column

    def get_column(self, column_name: str) -> Optional[Column]:
        """Find a column by name, falling back to a case-insensitive match."""
        for column in self.columns:
            if column.name == column_name:
                return column
        for column in self.columns:
            if column.name.upper() == column_name.upper():
                return column
        return None

    def get_primary_key_columns(self) -> List[Column]:
        """Primary key columns in primary-key position order."""
        pk_columns = []
        for column_name in self.primary_key_columns:
            column = self.get_column(column_name)
            if column is not None:
                pk_columns.append(column)
        return pk_columns

    def add_weak_association(self, weak_fk: 'WeakAssociationForeignKey') -> None:
        """Attach a weak association to this table.

        Attaching the same object twice is a no-op. An entry with the same
        name left over from an earlier analysis run is replaced.
        """
        for i, existing in enumerate(self.weak_associations):
            if existing is weak_fk:
                return
            if existing.name == weak_fk.name:
                self.weak_associations[i] = weak_fk
                return
        self.weak_associations.append(weak_fk)


@dataclass
class Schema:
    """Represents a database schema."""
    name: str
    tables: List[Table] = field(default_factory=list)


@dataclass
class Database:
    """Represents a database."""
    name: str
    schemas: List[Schema] = field(default_factory=list)
    weak_associations: List['WeakAssociationForeignKey'] = field(default_factory=list, repr=False)

    def get_all_tables(self) -> List[Table]:
        """Get all tables across all schemas."""
        tables = []
        for schema in self.schemas:
            tables.extend(schema.tables)
        return tables

    def get_table_by_name(self, table_name: str, schema_name: Optional[str] = None) -> Optional[Table]:
        """Find a table by name, optionally restricted to one schema."""
        for schema in self.schemas:
            if schema_name is not None and schema.name != schema_name:
                continue
            for table in schema.tables:
                if table.name == table_name:
                    return table
        return None

    def add_foreign_key(self, definition: ForeignKeyDefinition) -> Optional[ForeignKey]:
        """Resolve a foreign key definition and attach it to its child table.

        Returns None, after logging a warning, when either table or any of
        the columns cannot be found.
        """
        fk_table = self.get_table_by_name(definition.table, definition.schema)
        pk_table = self.get_table_by_name(
            definition.referenced_table,
            definition.referenced_schema or definition.schema,
        )
        if pk_table is None and definition.referenced_schema is None:
            pk_table = self.get_table_by_name(definition.referenced_table)

        if fk_table is None or pk_table is None:
            logger.warning(
                "Skipping foreign key %s: table %s.%s or %s not found",
                definition.name, definition.schema, definition.table,
                definition.referenced_table,
            )
            return None

        if len(definition.columns) != len(definition.referenced_columns):
            logger.warning(
                "Skipping foreign key %s on %s: %d columns reference %d columns",
                definition.name, fk_table.full_name,
                len(definition.columns), len(definition.referenced_columns),
            )
            return None

        references = []
        for fk_column_name, pk_column_name in zip(definition.columns, definition.referenced_columns):
            fk_column = fk_table.get_column(fk_column_name)
            pk_column = pk_table.get_column(pk_column_name)
            if fk_column is None or pk_column is None:
                logger.warning(
                    "Skipping foreign key %s: column %s.%s or %s.%s not found",
                    definition.name, fk_table.full_name, fk_column_name,
                    pk_table.full_name, pk_column_name,
                )
                return None
            references.append(ColumnReference(pk_column, fk_column))

        name = definition.name or f"FK_{fk_table.name}_{pk_table.name}"
        foreign_key = ForeignKey(name=name, column_references=references)
        fk_table.foreign_keys.append(foreign_key)
        return foreign_key
