"""Schema introspection for DuckDB database files."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, TYPE_CHECKING

from ..errors import ConnectionError, IntrospectionError
from .base import DatabaseIntrospector
from .models import Column, Database, ForeignKeyDefinition, Index
from .type_mappers import DuckDBTypeMapper

if TYPE_CHECKING:
    from ..analysis.weak_associations import AnalysisOptions

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"

# e.g. FOREIGN KEY (author_id) REFERENCES authors(id)
_FOREIGN_KEY_TEXT = re.compile(
    r'FOREIGN\s+KEY\s*\((?P<columns>[^)]*)\)\s*REFERENCES\s+(?P<table>[^(]+?)\s*\((?P<ref_columns>[^)]*)\)',
    re.IGNORECASE,
)


def _split_identifiers(text: str, separator: str = ",") -> List[str]:
    """Split a list of possibly quoted identifiers."""
    return [part.strip().strip('"') for part in text.split(separator) if part.strip()]


def _as_list(value) -> List[str]:
    return list(value) if isinstance(value, (list, tuple)) else [value]


class DuckDBIntrospector(DatabaseIntrospector):
    """Reads tables, keys and unique constraints from a DuckDB database.

    Example usage:
        with DuckDBIntrospector("library.duckdb") as introspector:
            db = introspector.introspect_database()
    """

    EXCLUDED_SCHEMAS = {'information_schema', 'pg_catalog'}

    def __init__(self, database_path: str = MEMORY_DATABASE, read_only: bool = True):
        """
        Args:
            database_path: Path to a .duckdb file, or ``:memory:``
            read_only: Open the file read-only; ignored for in-memory databases
        """
        self.database_path = database_path
        self.read_only = read_only and database_path != MEMORY_DATABASE
        self._connection = None
        self._type_mapper = DuckDBTypeMapper()

    def get_database_name(self) -> str:
        """Model name for the database: the file name without extension."""
        if self.database_path == MEMORY_DATABASE:
            return 'memory'
        return Path(self.database_path).stem

    def connect(self, database: str = None):
        """Open the database file, once.

        Raises:
            ImportError: If the duckdb package is not installed
            ConnectionError: If the file cannot be opened
        """
        if self._connection is not None:
            return self._connection

        try:
            import duckdb
        except ImportError:
            raise ImportError("Reading DuckDB files requires duckdb: pip install duckdb")

        try:
            self._connection = duckdb.connect(self.database_path, read_only=self.read_only)
        except duckdb.Error as e:
            raise ConnectionError(
                f"Cannot open DuckDB database {self.database_path}: {e}",
                details={"path": self.database_path, "read_only": self.read_only},
            ) from e

        logger.debug("Opened DuckDB database %s", self.database_path)
        return self._connection

    def close(self):
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def _execute_query(self, sql: str, parameters: Optional[Sequence] = None) -> List:
        """Run a query with ``?`` placeholders and fetch every row."""
        import duckdb

        connection = self.connect()
        try:
            return connection.execute(sql, parameters or []).fetchall()
        except duckdb.Error as e:
            raise IntrospectionError(
                f"DuckDB query failed: {e}",
                details={"sql": " ".join(sql.split())},
            ) from e

    def get_schemas(self, database: str = None) -> List[str]:
        rows = self._execute_query("""
            SELECT schema_name FROM information_schema.schemata
            WHERE catalog_name = current_database()
            ORDER BY schema_name
        """)
        return [row[0] for row in rows if row[0].lower() not in self.EXCLUDED_SCHEMAS]

    def get_tables(self, database: str, schema: str, include_views: bool = True) -> List[str]:
        table_types = ['BASE TABLE', 'VIEW'] if include_views else ['BASE TABLE']
        placeholders = ", ".join("?" for _ in table_types)
        rows = self._execute_query(f"""
            SELECT table_name FROM information_schema.tables
            WHERE table_catalog = current_database()
              AND table_schema = ?
              AND table_type IN ({placeholders})
            ORDER BY table_name
        """, [schema, *table_types])
        return [row[0] for row in rows]

    def get_columns(self, database: str, schema: str, table: str) -> List[Column]:
        rows = self._execute_query("""
            SELECT column_name, data_type, is_nullable, ordinal_position
            FROM information_schema.columns
            WHERE table_catalog = current_database()
              AND table_schema = ?
              AND table_name = ?
            ORDER BY ordinal_position
        """, [schema, table])
        return [
            Column(
                name=name,
                data_type=data_type,
                is_nullable=nullable == 'YES',
                ordinal_position=position,
                _type_mapper=self._type_mapper,
            )
            for name, data_type, nullable, position in rows
        ]

    def _get_constraints(self, schema: str, table: str, constraint_type: str) -> List:
        """Rows of (constraint_index, column names, constraint text)."""
        return self._execute_query("""
            SELECT constraint_index, constraint_column_names, constraint_text
            FROM duckdb_constraints()
            WHERE database_name = current_database()
              AND schema_name = ?
              AND table_name = ?
              AND constraint_type = ?
            ORDER BY constraint_index
        """, [schema, table, constraint_type])

    def get_primary_keys(self, database: str, schema: str, table: str) -> List[str]:
        rows = self._get_constraints(schema, table, 'PRIMARY KEY')
        return _as_list(rows[0][1]) if rows else []

    def get_indexes(self, database: str, schema: str, table: str) -> List[Index]:
        """UNIQUE constraints, reported as unique indexes."""
        return [
            Index(name=f"{table}_UNIQUE_{constraint_index}", columns=_as_list(column_names), is_unique=True)
            for constraint_index, column_names, _ in self._get_constraints(schema, table, 'UNIQUE')
        ]

    def get_foreign_keys(self, database: str, schema: str, table: str) -> List[ForeignKeyDefinition]:
        """Declared foreign keys, parsed from the constraint text."""
        definitions = []
        for constraint_index, _, constraint_text in self._get_constraints(schema, table, 'FOREIGN KEY'):
            match = _FOREIGN_KEY_TEXT.search(constraint_text or "")
            if not match:
                logger.warning(
                    "Cannot parse foreign key on %s.%s: %s", schema, table, constraint_text
                )
                continue

            table_parts = _split_identifiers(match.group('table'), separator='.')
            definitions.append(ForeignKeyDefinition(
                name=f"{table}_FK_{constraint_index}",
                table=table,
                schema=schema,
                columns=_split_identifiers(match.group('columns')),
                referenced_schema=table_parts[-2] if len(table_parts) > 1 else None,
                referenced_table=table_parts[-1],
                referenced_columns=_split_identifiers(match.group('ref_columns')),
            ))
        return definitions

    def introspect_database(
        self,
        database: str = None,
        schema_filter: Optional[str] = None,
        detect_weak_associations: bool = True,
        options: Optional['AnalysisOptions'] = None,
    ) -> Database:
        """Load every user schema of the file into a Database model.

        Args:
            database: Model name, defaults to the file name
            schema_filter: Only load this schema
            detect_weak_associations: Run weak association analysis on the result
            options: Weak association analysis options
        """
        db = Database(name=database or self.get_database_name())

        schemas = self.get_schemas()
        if schema_filter:
            schemas = [s for s in schemas if s == schema_filter]
        elif not schemas:
            schemas = ['main']

        self._load_schemas(db, db.name, schemas)
        self._finish_introspection(db, detect_weak_associations, options)
        return db
