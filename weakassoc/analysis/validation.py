"""Validation of proposed weak associations."""

import logging
from typing import Iterator, Sequence, Set

from weakassoc.database.models import Column, ColumnReference, Table

logger = logging.getLogger(__name__)


class DeclaredForeignKeySet:
    """Column pairs already connected by a declared foreign key."""

    def __init__(self, tables: Sequence[Table]):
        self._references: Set[ColumnReference] = set()
        for table in tables:
            for foreign_key in table.foreign_keys:
                self._references.update(foreign_key.column_references)

    def contains(self, primary_key_column: Column, foreign_key_column: Column) -> bool:
        """Check if a declared foreign key connects the two columns, either way round."""
        return (
            ColumnReference(primary_key_column, foreign_key_column) in self._references
            or ColumnReference(foreign_key_column, primary_key_column) in self._references
        )

    def __contains__(self, reference: ColumnReference) -> bool:
        return reference in self._references

    def __iter__(self) -> Iterator[ColumnReference]:
        return iter(self._references)

    def __len__(self) -> int:
        return len(self._references)


class AssociationValidator:
    """Decides whether a (parent column, child column) pair is a weak association.

    Rejection is a normal outcome, not an error: ``is_valid`` only ever
    returns a boolean.
    """

    def __init__(self, declared_foreign_keys: DeclaredForeignKeySet, check_data_types: bool = True):
        self.declared_foreign_keys = declared_foreign_keys
        self.check_data_types = check_data_types

    def is_valid(self, primary_key_column: Column, foreign_key_column: Column) -> bool:
        """Check a proposed pair against every rule."""
        if primary_key_column is foreign_key_column:
            return False

        if self.declared_foreign_keys.contains(primary_key_column, foreign_key_column):
            logger.debug(
                "Skipping %s -> %s, already a declared foreign key",
                foreign_key_column.full_name, primary_key_column.full_name,
            )
            return False

        # A key column cannot reference another key column of its own table
        if primary_key_column.table is foreign_key_column.table and (
            foreign_key_column.is_primary_key or foreign_key_column.is_part_of_unique_index
        ):
            return False

        if self.check_data_types:
            pk_type = primary_key_column.standard_type_name
            fk_type = foreign_key_column.standard_type_name
            if pk_type != fk_type:
                logger.debug(
                    "Skipping %s -> %s, types %s and %s differ",
                    foreign_key_column.full_name, primary_key_column.full_name,
                    fk_type, pk_type,
                )
                return False

        return True
