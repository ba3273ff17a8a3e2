"""Tests for match key derivation and the match key indexes."""

import pytest

from weakassoc.analysis.match_keys import (
    ColumnMatchIndex,
    MatchKeyDeriver,
    TableMatchIndex,
    find_table_name_prefixes,
    singular_forms,
    singularize,
    split_identifier,
)
from tests.conftest import make_table


class TestSplitIdentifier:
    """Tests for identifier tokenization."""

    @pytest.mark.parametrize("identifier,expected", [
        ("author_id", ["author", "id"]),
        ("authorId", ["author", "id"]),
        ("AuthorID", ["author", "id"]),
        ("AUTHORID", ["authorid"]),
        ("order-line.item", ["order", "line", "item"]),
        ("  Order Line ", ["order", "line"]),
        ("", []),
        ("Straße_ID", ["strasse", "id"]),
    ])
    def test_split(self, identifier, expected):
        assert split_identifier(identifier) == expected


class TestSingularize:
    """Tests for best-effort singularization."""

    @pytest.mark.parametrize("word,expected", [
        ("books", "book"),
        ("categories", "category"),
        ("addresses", "address"),
        ("boxes", "box"),
        ("branches", "branch"),
        ("people", "person"),
        ("status", "status"),
        ("class", "class"),
        ("analysis", "analysis"),
        ("author", "author"),
        ("s", "s"),
    ])
    def test_singularize(self, word, expected):
        assert singularize(word) == expected

    @pytest.mark.parametrize("word,expected", [
        ("movies", "movie"),
        ("categories", "category"),
        ("statuses", "status"),
        ("buses", "bus"),
        ("aliases", "alias"),
        ("houses", "house"),
        ("boxes", "box"),
        ("books", "book"),
        ("people", "person"),
    ])
    def test_singular_forms_include_the_singular(self, word, expected):
        assert expected in singular_forms(word)

    @pytest.mark.parametrize("word", ["status", "class", "analysis", "author"])
    def test_singular_words_keep_their_form(self, word):
        assert word in singular_forms(word)


class TestColumnKeys:
    """Tests for column match keys."""

    def setup_method(self):
        self.deriver = MatchKeyDeriver()

    @pytest.mark.parametrize("column_name,expected", [
        ("AUTHORID", {"author"}),
        ("author_id", {"author"}),
        ("AuthorId", {"author"}),
        ("AUTHORS_ID", {"authors", "author"}),
        ("CATEGORY_ID", {"category"}),
        ("NAME", {"name"}),
        ("ISO_CODE", {"isocode"}),
    ])
    def test_column_keys(self, column_name, expected):
        assert self.deriver.column_keys(column_name) == expected

    @pytest.mark.parametrize("column_name", ["ID", "id", "Id", "_id_"])
    def test_bare_id_has_no_keys(self, column_name):
        assert self.deriver.column_keys(column_name) == set()

    def test_owning_table_prefix_is_stripped(self):
        """BOOKS.BOOK_AUTHOR_ID also matches as AUTHOR."""
        keys = self.deriver.column_keys("BOOK_AUTHOR_ID", "BOOKS")
        assert keys == {"bookauthor", "author"}

    def test_owning_table_prefix_only_for_id_columns(self):
        keys = self.deriver.column_keys("AUTHOR_NAME", "AUTHORS")
        assert keys == {"authorname"}

    @pytest.mark.parametrize("column_name,table_name", [
        ("MOVIE_ID", "MOVIES"),
        ("STATUS_ID", "STATUSES"),
        ("BUS_ID", "BUSES"),
        ("ALIAS_ID", "ALIASES"),
        ("CATEGORY_ID", "CATEGORIES"),
        ("PersonId", "PEOPLE"),
        ("Straße_ID", "STRASSES"),
    ])
    def test_id_column_matches_plural_table(self, column_name, table_name):
        column_keys = self.deriver.column_keys(column_name)
        assert column_keys & self.deriver.table_keys(table_name)

    def test_column_and_table_keys_intersect(self):
        column_keys = self.deriver.column_keys("AUTHORID")
        table_keys = self.deriver.table_keys("AUTHORS")
        assert column_keys & table_keys == {"author"}


class TestTableKeys:
    """Tests for table match keys and table name prefixes."""

    def test_plain_table_name(self):
        keys = MatchKeyDeriver().table_keys("CATEGORIES")
        assert {"categories", "category"} <= keys

    def test_prefixed_table_name(self):
        keys = MatchKeyDeriver().table_keys("TBL_AUTHORS", ["tbl_", ""])
        assert {"authors", "author", "tblauthors", "tblauthor"} == keys

    def test_prefix_not_applied_when_absent(self):
        keys = MatchKeyDeriver().table_keys("BOOKS", ["tbl_", ""])
        assert keys == {"books", "book"}

    def test_no_common_prefix(self):
        assert find_table_name_prefixes(["AUTHORS", "BOOKS"]) == [""]

    def test_common_prefix(self):
        assert find_table_name_prefixes(["TBL_AUTHORS", "TBL_BOOKS", "OTHER"]) == ["tbl_", ""]

    def test_nested_prefixes_ranked_by_frequency(self):
        prefixes = find_table_name_prefixes(
            ["app_tbl_users", "app_tbl_orders", "app_log_events"]
        )
        assert prefixes == ["app_", "app_tbl_", ""]

    def test_prefix_limit(self):
        names = [f"p{i}_a" for i in range(4)] + [f"p{i}_b" for i in range(4)]
        prefixes = find_table_name_prefixes(names, max_prefixes=2)
        assert prefixes == ["p0_", "p1_", ""]


class TestColumnMatchIndex:
    """Tests for the key -> columns index."""

    def test_columns_matching(self, authors, books, articles):
        index = ColumnMatchIndex([authors, books, articles])

        matching = index.columns_matching("author")
        assert matching == [books.get_column("AUTHORID"), articles.get_column("AUTHORID")]

    def test_unknown_key(self, authors, books):
        index = ColumnMatchIndex([authors, books])
        assert index.columns_matching("publisher") == []
        assert "publisher" not in index

    def test_keys_for_column(self, authors, books):
        index = ColumnMatchIndex([authors, books])
        assert index.keys_for(books.get_column("AUTHORID")) == {"author"}
        assert index.keys_for(authors.get_column("ID")) == set()

    def test_keys_for_unknown_column(self, authors, books):
        index = ColumnMatchIndex([authors])
        assert index.keys_for(books.get_column("AUTHORID")) == set()

    def test_returned_lists_are_copies(self, authors, books):
        index = ColumnMatchIndex([authors, books])
        index.columns_matching("author").clear()
        assert len(index.columns_matching("author")) == 1


class TestTableMatchIndex:
    """Tests for the table -> keys index."""

    def test_table_match_keys(self, authors, books):
        index = TableMatchIndex([authors, books])
        assert index.table_match_keys(authors) == {"authors", "author"}
        assert index.prefixes == [""]

    def test_unknown_table(self, authors, books):
        index = TableMatchIndex([authors])
        assert index.table_match_keys(books) == set()

    def test_prefixes_detected_from_tables(self):
        tables = [
            make_table("TBL_AUTHORS", [("ID", "INTEGER", True)]),
            make_table("TBL_BOOKS", [("ID", "INTEGER", True)]),
        ]
        index = TableMatchIndex(tables)
        assert index.prefixes == ["tbl_", ""]
        assert "author" in index.table_match_keys(tables[0])
