"""Match keys for naming-convention based column matching.

A match key is a normalized form of an identifier. Two identifiers are
considered to follow the same naming convention when the sets of match keys
derived from them intersect. For example, the column ``BOOKS.AUTHORID``, the
column ``ORDERS.author_id`` and the table ``AUTHORS`` all derive the key
``author``.
"""

import logging
import os
import re
from collections import Counter
from itertools import combinations
from typing import Dict, Iterable, List, Sequence, Set

from weakassoc.database.models import Column, Table

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s_\-.]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

_IRREGULAR_PLURALS = {
    "people": "person",
    "children": "child",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
    "geese": "goose",
}

# Suffixes where the plural adds "es" rather than "s"
_ES_PLURAL_SUFFIXES = ("sses", "shes", "ches", "xes", "zes")

# Singular words that happen to end in "s"
_SINGULAR_S_SUFFIXES = ("ss", "us", "is")

_ID_SUFFIX = "id"


def split_identifier(identifier: str) -> List[str]:
    """Split an identifier into case-folded word tokens.

    Splits on underscores, hyphens, dots and whitespace, and on camel-case
    boundaries (``authorId`` -> ``author``, ``id``). All upper-case
    identifiers such as ``AUTHORID`` stay a single token.
    """
    spaced = _CAMEL_BOUNDARY.sub("_", (identifier or "").strip())
    return [token.casefold() for token in _SEPARATORS.split(spaced) if token]


def singularize(word: str) -> str:
    """Most likely singular of a case-folded English word."""
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith(_ES_PLURAL_SUFFIXES):
        return word[:-2]
    if word.endswith(_SINGULAR_S_SUFFIXES):
        return word
    if word.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def singular_forms(word: str) -> Set[str]:
    """Every plausible singular of a case-folded English word.

    Plural spelling alone is ambiguous (``movies`` and ``categories``,
    ``statuses`` and ``houses``), so all candidate stems are returned along
    with ``singularize(word)``.
    """
    if word in _IRREGULAR_PLURALS:
        return {_IRREGULAR_PLURALS[word]}

    forms = {singularize(word)}
    if word.endswith("ies") and len(word) > 3:
        forms.add(word[:-3] + "y")
        forms.add(word[:-1])
    if word.endswith("es") and len(word) > 2:
        forms.add(word[:-2])
    if word.endswith("s") and not word.endswith(_SINGULAR_S_SUFFIXES) and len(word) > 1:
        forms.add(word[:-1])
    return forms


def find_table_name_prefixes(table_names: Iterable[str], max_prefixes: int = 5) -> List[str]:
    """Find prefixes shared by table names, such as ``tbl_`` or ``app_``.

    Every pair of table names contributes the longest common prefix ending
    in an underscore, and each shorter underscore-delimited prefix of it.
    Prefixes are ranked by how often they occur. The most common
    ``max_prefixes``, plus any occurring in more than half of the ranked
    prefixes, are kept. The empty prefix is always last.
    """
    names = sorted({name.casefold() for name in table_names})
    counts: Counter = Counter()

    for first, second in combinations(names, 2):
        common = os.path.commonprefix([first, second])
        cut = common.rfind("_")
        if cut <= 0:
            continue
        common = common[:cut + 1]

        parts = common.split("_")[:-1]
        for i in range(1, len(parts) + 1):
            counts["_".join(parts[:i]) + "_"] += 1

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    prefixes = [
        prefix
        for i, (prefix, count) in enumerate(ranked)
        if i < max_prefixes or count > len(ranked) * 0.5
    ]
    prefixes.append("")
    return prefixes


class MatchKeyDeriver:
    """Derives match keys from column and table names."""

    def column_keys(self, column_name: str, table_name: str = None) -> Set[str]:
        """Derive match keys for a column.

        A trailing ``id`` is stripped, whether it is a separate word
        (``author_id``, ``authorId``) or not (``AUTHORID``). A bare ``id``
        derives no keys. When the owning table's name prefixes an id column
        (``BOOK_AUTHOR_ID`` in ``BOOKS``), the rest of the name is also a key.
        """
        tokens = split_identifier(column_name)
        if not tokens:
            return set()

        stripped_id = False
        if tokens[-1] == _ID_SUFFIX:
            tokens = tokens[:-1]
            stripped_id = True
        elif tokens[-1].endswith(_ID_SUFFIX):
            tokens = tokens[:-1] + [tokens[-1][:-len(_ID_SUFFIX)]]
            stripped_id = True

        if not tokens:
            return set()

        keys = self._word_forms("".join(tokens))

        if stripped_id and table_name and len(tokens) > 1:
            table_forms = self._word_forms("".join(split_identifier(table_name)))
            for i in range(1, len(tokens)):
                if "".join(tokens[:i]) in table_forms:
                    keys |= self._word_forms("".join(tokens[i:]))

        return keys

    def table_keys(self, table_name: str, prefixes: Sequence[str] = ("",)) -> Set[str]:
        """Derive match keys for a table, once for each prefix it starts with."""
        keys: Set[str] = set()
        folded_name = table_name.casefold()
        for prefix in prefixes:
            if not folded_name.startswith(prefix):
                continue
            base = "".join(split_identifier(folded_name[len(prefix):]))
            keys |= self._word_forms(base)
        return keys

    @staticmethod
    def _word_forms(word: str) -> Set[str]:
        if not word:
            return set()
        return {word} | singular_forms(word)


class ColumnMatchIndex:
    """Maps match keys to the columns, across all tables, that derive them."""

    def __init__(self, tables: Sequence[Table], deriver: MatchKeyDeriver = None):
        self.deriver = deriver or MatchKeyDeriver()
        self._columns_for_key: Dict[str, List[Column]] = {}
        self._keys_for_column: Dict[Column, Set[str]] = {}

        for table in tables:
            for column in table.columns:
                keys = self.deriver.column_keys(column.name, table.name)
                self._keys_for_column[column] = keys
                for key in sorted(keys):
                    self._columns_for_key.setdefault(key, []).append(column)

    def columns_matching(self, key: str) -> List[Column]:
        """Columns whose match keys include ``key``, in table/column order."""
        return list(self._columns_for_key.get(key, []))

    def keys_for(self, column: Column) -> Set[str]:
        """Match keys derived for a column, empty for unknown columns."""
        return set(self._keys_for_column.get(column, set()))

    def __contains__(self, key: str) -> bool:
        return key in self._columns_for_key

    def __len__(self) -> int:
        return len(self._columns_for_key)

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{key}: [{', '.join(c.full_name for c in columns)}]"
            for key, columns in sorted(self._columns_for_key.items())
        )
        return f"ColumnMatchIndex({{{entries}}})"


class TableMatchIndex:
    """Maps each table to the match keys derived from its own name."""

    def __init__(self, tables: Sequence[Table], deriver: MatchKeyDeriver = None, max_prefixes: int = 5):
        self.deriver = deriver or MatchKeyDeriver()
        self.prefixes = find_table_name_prefixes([t.name for t in tables], max_prefixes)
        self._keys_for_table: Dict[Table, Set[str]] = {
            table: self.deriver.table_keys(table.name, self.prefixes)
            for table in tables
        }

    def table_match_keys(self, table: Table) -> Set[str]:
        """Match keys for a table, empty for tables not in the index."""
        return set(self._keys_for_table.get(table, set()))

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{table.full_name}: {sorted(keys)}"
            for table, keys in self._keys_for_table.items()
        )
        return f"TableMatchIndex(prefixes={self.prefixes}, {{{entries}}})"
