"""Common interface for schema sources that read a live database."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

from .models import Column, Database, ForeignKeyDefinition, Index, Schema, Table

if TYPE_CHECKING:
    from ..analysis.weak_associations import AnalysisOptions

logger = logging.getLogger(__name__)


class DatabaseIntrospector(ABC):
    """Builds a ``Database`` model from catalog queries.

    Subclasses answer one catalog question per method; ``introspect_database``
    assembles the answers, resolves declared foreign keys once every table
    is known, and optionally runs weak association analysis on the result.
    Introspectors are context managers that close their connection on exit.
    """

    # System schemas never loaded, override per source
    EXCLUDED_SCHEMAS: set = {'INFORMATION_SCHEMA'}

    @abstractmethod
    def connect(self, database: str):
        pass

    @abstractmethod
    def close(self):
        pass

    @abstractmethod
    def get_schemas(self, database: str) -> List[str]:
        """User schema names, without ``EXCLUDED_SCHEMAS``."""
        pass

    @abstractmethod
    def get_tables(self, database: str, schema: str, include_views: bool = True) -> List[str]:
        pass

    @abstractmethod
    def get_columns(self, database: str, schema: str, table: str) -> List[Column]:
        """Unbound columns of a table, in ordinal order."""
        pass

    @abstractmethod
    def get_primary_keys(self, database: str, schema: str, table: str) -> List[str]:
        """Primary key column names, in key position order."""
        pass

    @abstractmethod
    def get_foreign_keys(self, database: str, schema: str, table: str) -> List[ForeignKeyDefinition]:
        """Declared foreign keys whose child side is ``table``, by name only."""
        pass

    def get_indexes(self, database: str, schema: str, table: str) -> List[Index]:
        """Indexes and unique constraints; none for sources without them."""
        return []

    def introspect_database(
        self,
        database: str,
        schema_filter: Optional[str] = None,
        detect_weak_associations: bool = True,
        options: Optional['AnalysisOptions'] = None,
    ) -> Database:
        """Load a database, or a single schema of it.

        Args:
            database: Database name
            schema_filter: Only load this schema
            detect_weak_associations: Run weak association analysis on the result
            options: Weak association analysis options

        Returns:
            Database with declared foreign keys resolved, and
            ``weak_associations`` set when analysis ran
        """
        schemas = self.get_schemas(database)
        if schema_filter:
            schemas = [s for s in schemas if s == schema_filter]

        db = Database(name=database)
        self._load_schemas(db, database, schemas)
        self._finish_introspection(db, detect_weak_associations, options)
        return db

    def _load_schemas(self, db: Database, database: str, schemas: List[str]) -> None:
        # Foreign keys may point into any schema, so resolve them last
        pending: List[ForeignKeyDefinition] = []

        for schema_name in schemas:
            schema = Schema(name=schema_name)
            for table_name in self.get_tables(database, schema_name):
                schema.tables.append(Table(
                    name=table_name,
                    schema=schema_name,
                    columns=self.get_columns(database, schema_name, table_name),
                    primary_key_columns=self.get_primary_keys(database, schema_name, table_name),
                    indexes=self.get_indexes(database, schema_name, table_name),
                ))
                pending.extend(self.get_foreign_keys(database, schema_name, table_name))

            if schema.tables:
                db.schemas.append(schema)

        resolved = sum(1 for definition in pending if db.add_foreign_key(definition))
        logger.info(
            "Introspected %d tables and %d of %d foreign keys from %s",
            len(db.get_all_tables()), resolved, len(pending), db.name,
        )

    def _finish_introspection(
        self,
        db: Database,
        detect_weak_associations: bool,
        options: Optional['AnalysisOptions'],
    ) -> None:
        if detect_weak_associations:
            from ..analysis.weak_associations import analyze_weak_associations
            analyze_weak_associations(db, options)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
