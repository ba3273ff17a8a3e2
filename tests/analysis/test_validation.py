"""Tests for declared foreign key exclusion and pair validation."""

import pytest

from weakassoc.analysis.validation import AssociationValidator, DeclaredForeignKeySet
from weakassoc.database.models import ColumnReference, Index
from tests.conftest import declare_foreign_key, make_table


@pytest.fixture
def no_declared_keys(authors, books):
    return DeclaredForeignKeySet([authors, books])


class TestDeclaredForeignKeySet:
    """Tests for DeclaredForeignKeySet."""

    def test_empty(self, no_declared_keys):
        assert len(no_declared_keys) == 0

    def test_contains_declared_pair(self, authors, books):
        pk_column = authors.get_column("ID")
        fk_column = books.get_column("AUTHORID")
        declare_foreign_key("FK_BOOKS_AUTHORS", pk_column, fk_column)

        declared = DeclaredForeignKeySet([authors, books])

        assert declared.contains(pk_column, fk_column)
        assert ColumnReference(pk_column, fk_column) in declared
        assert ColumnReference(fk_column, pk_column) not in declared
        assert not declared.contains(books.get_column("ID"), fk_column)

    def test_contains_reversed_pair(self, authors, books):
        pk_column = authors.get_column("ID")
        fk_column = books.get_column("AUTHORID")
        declare_foreign_key("FK_BOOKS_AUTHORS", pk_column, fk_column)

        declared = DeclaredForeignKeySet([authors, books])

        assert declared.contains(fk_column, pk_column)

    def test_collects_every_column_of_composite_keys(self):
        orders = make_table("ORDERS", [("ID", "INTEGER", True), ("REGION", "VARCHAR", True)])
        lines = make_table("LINES", [("ORDER_ID", "INTEGER"), ("ORDER_REGION", "VARCHAR")])
        foreign_key = declare_foreign_key(
            "FK_LINES_ORDERS", orders.get_column("ID"), lines.get_column("ORDER_ID")
        )
        foreign_key.column_references.append(
            ColumnReference(orders.get_column("REGION"), lines.get_column("ORDER_REGION"))
        )

        declared = DeclaredForeignKeySet([orders, lines])

        assert len(declared) == 2


class TestAssociationValidator:
    """Tests for AssociationValidator."""

    def test_accepts_matching_pair(self, authors, books, no_declared_keys):
        validator = AssociationValidator(no_declared_keys)
        assert validator.is_valid(authors.get_column("ID"), books.get_column("AUTHORID"))

    def test_rejects_identity(self, authors, no_declared_keys):
        validator = AssociationValidator(no_declared_keys)
        column = authors.get_column("ID")
        assert not validator.is_valid(column, column)

    def test_rejects_declared_pair(self, authors, books):
        pk_column = authors.get_column("ID")
        fk_column = books.get_column("AUTHORID")
        declare_foreign_key("FK_BOOKS_AUTHORS", pk_column, fk_column)

        validator = AssociationValidator(DeclaredForeignKeySet([authors, books]))

        assert not validator.is_valid(pk_column, fk_column)

    def test_rejects_reverse_of_declared_pair(self):
        users = make_table("USERS", [("USER_ID", "INTEGER", True)])
        profiles = make_table("PROFILES", [("USER_ID", "INTEGER", True)])
        declare_foreign_key(
            "FK_PROFILES_USERS", users.get_column("USER_ID"), profiles.get_column("USER_ID")
        )

        validator = AssociationValidator(DeclaredForeignKeySet([users, profiles]))

        assert not validator.is_valid(profiles.get_column("USER_ID"), users.get_column("USER_ID"))

    def test_rejects_type_mismatch(self, authors):
        books = make_table("BOOKS", [("ID", "INTEGER", True), ("AUTHORID", "VARCHAR(10)")])
        validator = AssociationValidator(DeclaredForeignKeySet([authors, books]))

        assert not validator.is_valid(authors.get_column("ID"), books.get_column("AUTHORID"))

    def test_type_check_can_be_disabled(self, authors):
        books = make_table("BOOKS", [("ID", "INTEGER", True), ("AUTHORID", "VARCHAR(10)")])
        validator = AssociationValidator(
            DeclaredForeignKeySet([authors, books]), check_data_types=False
        )

        assert validator.is_valid(authors.get_column("ID"), books.get_column("AUTHORID"))

    def test_equivalent_type_spellings(self, authors):
        books = make_table("BOOKS", [("ID", "INTEGER", True), ("AUTHORID", "int")])
        validator = AssociationValidator(DeclaredForeignKeySet([authors, books]))

        assert validator.is_valid(authors.get_column("ID"), books.get_column("AUTHORID"))

    def test_rejects_key_column_of_same_table(self):
        nodes = make_table(
            "NODES",
            [("ID", "INTEGER", True), ("NODE_ID", "INTEGER")],
            indexes=[Index(name="UQ_NODE_ID", columns=["NODE_ID"], is_unique=True)],
        )
        validator = AssociationValidator(DeclaredForeignKeySet([nodes]))

        assert not validator.is_valid(nodes.get_column("ID"), nodes.get_column("NODE_ID"))

    def test_accepts_non_key_column_of_same_table(self):
        nodes = make_table("NODES", [("ID", "INTEGER", True), ("NODE_ID", "INTEGER")])
        validator = AssociationValidator(DeclaredForeignKeySet([nodes]))

        assert validator.is_valid(nodes.get_column("ID"), nodes.get_column("NODE_ID"))
