"""Weak association analysis.

Finds column pairs that look like undeclared foreign keys, based on naming
conventions alone. For every candidate parent column (primary keys, and
single-column unique indexes), the analyzer collects the match keys of the
column and of its table, looks up every column sharing one of those keys,
and keeps the pairs that pass validation. The results are grouped into
``WeakAssociationForeignKey`` entries and attached to both endpoint tables,
so reports can list them from either side.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Union

from weakassoc.analysis.candidate_keys import CandidateKeySelector
from weakassoc.analysis.match_keys import ColumnMatchIndex, MatchKeyDeriver, TableMatchIndex
from weakassoc.analysis.models import (
    WeakAssociation,
    WeakAssociationForeignKey,
    construct_foreign_key_name,
)
from weakassoc.analysis.validation import AssociationValidator, DeclaredForeignKeySet
from weakassoc.database.models import Column, Database, Table

logger = logging.getLogger(__name__)

NameBuilder = Callable[[Column, Column], str]


@dataclass
class AnalysisOptions:
    """Configuration options for weak association analysis."""

    # Treat single-column unique indexes as candidate parent keys
    include_unique_indexes: bool = True

    # Only pair columns with the same standard data type
    check_data_types: bool = True

    # Prefix for synthesized names, ignored when name_builder is set
    foreign_key_name_prefix: str = "WEAKFK"

    # Number of common table name prefixes stripped before matching
    max_table_prefixes: int = 5

    # Override for name synthesis; pairs with equal names are grouped
    name_builder: Optional[NameBuilder] = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings=None) -> "AnalysisOptions":
        """Build options from application settings."""
        if settings is None:
            from weakassoc.config import settings
        return cls(
            include_unique_indexes=settings.include_unique_indexes,
            check_data_types=settings.check_data_types,
            foreign_key_name_prefix=settings.foreign_key_name_prefix,
            max_table_prefixes=settings.max_table_prefixes,
        )

    def build_name(self, primary_key_column: Column, foreign_key_column: Column) -> str:
        if self.name_builder is not None:
            return self.name_builder(primary_key_column, foreign_key_column)
        return construct_foreign_key_name(
            primary_key_column, foreign_key_column, self.foreign_key_name_prefix
        )


class WeakAssociationAnalyzer:
    """Infers weak associations between the columns of a set of tables.

    Example usage:
        analyzer = WeakAssociationAnalyzer(database.get_all_tables())
        for weak_fk in analyzer.analyze():
            print(weak_fk)

    Runs over tables that share ``Table`` objects must not overlap, since
    each run appends to the tables' ``weak_associations``.
    """

    def __init__(self, tables: Sequence[Table], options: Optional[AnalysisOptions] = None):
        """Initialize the analyzer.

        Args:
            tables: Fully loaded tables to analyze
            options: Analysis configuration options

        Raises:
            ValueError: If no table sequence is provided
        """
        if tables is None:
            raise ValueError("No tables provided")
        self.tables = list(tables)
        self.options = options or AnalysisOptions()
        self._weak_associations: Dict[str, WeakAssociationForeignKey] = {}

    def analyze(self) -> List[WeakAssociationForeignKey]:
        """Find weak associations across all tables.

        Returns:
            Weak associations in canonical order (by name, then pairs)
        """
        self._weak_associations = {}
        if len(self.tables) < 2:
            return []

        logger.info("Finding weak associations in %d tables", len(self.tables))
        start = time.perf_counter()

        self._find_weak_associations()

        results = list(self._weak_associations.values())
        for weak_fk in results:
            weak_fk.sort_references()
        results.sort(key=WeakAssociationForeignKey.sort_key)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Found %d weak associations in %.1f ms", len(results), elapsed_ms
        )
        return results

    def _find_weak_associations(self) -> None:
        deriver = MatchKeyDeriver()
        declared_foreign_keys = DeclaredForeignKeySet(self.tables)
        column_index = ColumnMatchIndex(self.tables, deriver)
        table_index = TableMatchIndex(self.tables, deriver, self.options.max_table_prefixes)
        selector = CandidateKeySelector(self.options.include_unique_indexes)
        validator = AssociationValidator(declared_foreign_keys, self.options.check_data_types)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Column match keys %r", column_index)
            logger.debug("Table match keys %r", table_index)

        for table in self.tables:
            candidates = selector.select(table)
            logger.debug(
                "Table candidate keys for %s: %s",
                table.full_name, [c.name for c in candidates],
            )

            for pk_column in candidates:
                match_keys = set()
                if pk_column.is_primary_key:
                    match_keys |= table_index.table_match_keys(table)
                match_keys |= column_index.keys_for(pk_column)

                # Ordered, de-duplicated union of all matching columns
                fk_columns: Dict[int, Column] = {}
                for match_key in sorted(match_keys):
                    for column in column_index.columns_matching(match_key):
                        fk_columns.setdefault(id(column), column)

                for fk_column in fk_columns.values():
                    if fk_column is pk_column:
                        continue
                    if validator.is_valid(pk_column, fk_column):
                        self._add_weak_association(WeakAssociation(pk_column, fk_column))

    def _add_weak_association(self, association: WeakAssociation) -> None:
        pk_column = association.primary_key_column
        fk_column = association.foreign_key_column
        name = self.options.build_name(pk_column, fk_column)

        weak_fk = self._weak_associations.get(name)
        if weak_fk is None:
            weak_fk = WeakAssociationForeignKey(name=name)
            self._weak_associations[name] = weak_fk
        if weak_fk.add(association):
            logger.debug("Found weak association %s (%s)", association, name)

        pk_column.table.add_weak_association(weak_fk)
        fk_column.table.add_weak_association(weak_fk)


def analyze_weak_associations(
    source: Union[Database, Sequence[Table]],
    options: Optional[AnalysisOptions] = None,
) -> List[WeakAssociationForeignKey]:
    """Convenience function to find weak associations.

    Args:
        source: A database model, or a sequence of tables
        options: Analysis configuration options

    Returns:
        Weak associations in canonical order. When a database is given,
        they are also stored on ``database.weak_associations``.
    """
    if isinstance(source, Database):
        analyzer = WeakAssociationAnalyzer(source.get_all_tables(), options)
        source.weak_associations = analyzer.analyze()
        return source.weak_associations

    return WeakAssociationAnalyzer(source, options).analyze()
