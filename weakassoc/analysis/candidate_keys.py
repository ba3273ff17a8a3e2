"""Selection of the columns that may be the parent side of a weak association."""

import logging
from typing import List

from weakassoc.database.models import Column, Table

logger = logging.getLogger(__name__)


class CandidateKeySelector:
    """Enumerates the candidate parent columns of a table.

    Primary key columns always qualify, in primary key position order.
    Columns that on their own form a unique index are natural keys and
    qualify too, unless ``include_unique_indexes`` is turned off.
    """

    def __init__(self, include_unique_indexes: bool = True):
        self.include_unique_indexes = include_unique_indexes

    def select(self, table: Table) -> List[Column]:
        """Return the candidate parent columns for a table."""
        candidates = table.get_primary_key_columns()

        if self.include_unique_indexes:
            for index in table.indexes:
                if not index.is_unique or len(index.columns) != 1:
                    continue
                column = table.get_column(index.columns[0])
                if column is None:
                    logger.debug(
                        "Unique index %s on %s names unknown column %s",
                        index.name, table.full_name, index.columns[0],
                    )
                    continue
                if column not in candidates:
                    candidates.append(column)

        return candidates
