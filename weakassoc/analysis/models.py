"""Data models for weak association analysis."""

import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from weakassoc.database.models import Column, Table


def _short_hash(value: str) -> str:
    return hashlib.sha1(value.encode("utf-8")).hexdigest()[:8]


def construct_foreign_key_name(
    primary_key_column: Column,
    foreign_key_column: Column,
    prefix: str = "WEAKFK",
) -> str:
    """Synthesize a stable foreign key name for a column pair.

    The name is built from hashes of both qualified column names, so the
    same pair is named the same way on every run, e.g.
    ``WEAKFK_1f0e3dad_9b2c6a11``.
    """
    return (
        f"{prefix}_{_short_hash(primary_key_column.full_name)}"
        f"_{_short_hash(foreign_key_column.full_name)}"
    )


@dataclass(frozen=True)
class WeakAssociation:
    """A single inferred (parent column, child column) pair."""

    primary_key_column: Column
    foreign_key_column: Column

    def key(self) -> Tuple[str, str]:
        """Qualified names of the pair, used for ordering."""
        return (self.primary_key_column.full_name, self.foreign_key_column.full_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_key_table": self.primary_key_column.table.full_name if self.primary_key_column.table else None,
            "primary_key_column": self.primary_key_column.name,
            "foreign_key_table": self.foreign_key_column.table.full_name if self.foreign_key_column.table else None,
            "foreign_key_column": self.foreign_key_column.name,
        }

    def __str__(self) -> str:
        return f"{self.foreign_key_column.full_name} --> {self.primary_key_column.full_name}"


@dataclass(eq=False)
class WeakAssociationForeignKey:
    """A named group of weak associations, shaped like a foreign key.

    Pairs whose synthesized names coincide are grouped into one entry, the
    way the columns of a composite foreign key share one constraint name.
    """

    name: str
    column_references: List[WeakAssociation] = field(default_factory=list)

    def add(self, association: WeakAssociation) -> bool:
        """Add a pair, returning False if it is already present."""
        if association in self.column_references:
            return False
        self.column_references.append(association)
        return True

    def sort_references(self) -> None:
        """Put the pairs in canonical order."""
        self.column_references.sort(key=WeakAssociation.key)

    def sort_key(self) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
        """Canonical ordering key: name, then the constituent pairs."""
        return (self.name, tuple(sorted(ref.key() for ref in self.column_references)))

    @property
    def primary_key_tables(self) -> List[Table]:
        """Distinct parent-side tables, in pair order."""
        return self._distinct_tables(ref.primary_key_column for ref in self.column_references)

    @property
    def foreign_key_tables(self) -> List[Table]:
        """Distinct child-side tables, in pair order."""
        return self._distinct_tables(ref.foreign_key_column for ref in self.column_references)

    @staticmethod
    def _distinct_tables(columns) -> List[Table]:
        tables: List[Table] = []
        for column in columns:
            if column.table is not None and column.table not in tables:
                tables.append(column.table)
        return tables

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "column_references": [ref.to_dict() for ref in self.column_references],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeakAssociationForeignKey):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other: "WeakAssociationForeignKey") -> bool:
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.name)

    def __iter__(self) -> Iterator[WeakAssociation]:
        return iter(self.column_references)

    def __len__(self) -> int:
        return len(self.column_references)

    def __str__(self) -> str:
        return f"{self.name}: " + ", ".join(str(ref) for ref in self.column_references)
