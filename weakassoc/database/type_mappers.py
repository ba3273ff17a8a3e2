"""Database-specific type mapping strategies."""

import re
from abc import ABC, abstractmethod

_TYPE_PARAMETERS = re.compile(r"\(.*\)")

# Whole-word spellings of a 4-byte integer, e.g. "INT UNSIGNED", "MEDIUMINT"
_INTEGER_NAMES = {"INT", "INTEGER", "INT4", "MEDIUMINT", "SERIAL", "SERIAL4"}


class TypeMapper(ABC):
    """Abstract base class for database type mapping."""

    @abstractmethod
    def to_standard_type(self, db_type: str) -> str:
        """Convert a database type to a vendor-neutral standard type name.

        Two columns are only considered for a weak association when their
        standard type names are equal.
        """
        pass

    @staticmethod
    def _base_type(db_type: str) -> str:
        """Upper-case type name without length/precision parameters."""
        return _TYPE_PARAMETERS.sub("", db_type or "").strip().upper()


class GenericTypeMapper(TypeMapper):
    """Type mapper for ANSI-style type names, used when no vendor is known."""

    def to_standard_type(self, db_type: str) -> str:
        """Convert an ANSI-style type name to a standard type name."""
        type_upper = self._base_type(db_type)

        if any(t in type_upper for t in ["VARCHAR", "TEXT", "STRING", "CHAR", "CLOB"]):
            return "VARCHAR"
        elif "INTERVAL" in type_upper:
            return "INTERVAL"
        elif "BIGINT" in type_upper or type_upper == "INT8":
            return "BIGINT"
        elif "SMALLINT" in type_upper or "TINYINT" in type_upper or type_upper == "INT2":
            return "SMALLINT"
        elif any(word in _INTEGER_NAMES for word in type_upper.split()):
            return "INTEGER"
        elif "NUMBER" in type_upper or "NUMERIC" in type_upper or "DECIMAL" in type_upper:
            return "DECIMAL"
        elif "DOUBLE" in type_upper or type_upper == "FLOAT8":
            return "DOUBLE"
        elif "FLOAT" in type_upper or "REAL" in type_upper:
            return "FLOAT"
        elif "BOOL" in type_upper or type_upper == "BIT":
            return "BOOLEAN"
        elif "DATE" in type_upper and "TIME" not in type_upper:
            return "DATE"
        elif "TIMESTAMP" in type_upper or "DATETIME" in type_upper:
            return "TIMESTAMP"
        elif "TIME" in type_upper:
            return "TIME"
        elif "BLOB" in type_upper or "BINARY" in type_upper or "BYTEA" in type_upper:
            return "VARBINARY"
        elif not type_upper:
            return "OTHER"
        return type_upper


class DuckDBTypeMapper(TypeMapper):
    """Type mapper for DuckDB database types."""

    def to_standard_type(self, db_type: str) -> str:
        """Convert DuckDB type to a standard type name."""
        type_upper = self._base_type(db_type)

        # String types
        if any(t in type_upper for t in ["VARCHAR", "TEXT", "STRING", "CHAR", "BPCHAR"]):
            return "VARCHAR"
        elif type_upper == "UUID":
            return "UUID"

        # Integer types
        elif any(t in type_upper for t in ["BIGINT", "HUGEINT", "UBIGINT", "INT8", "LONG"]):
            return "BIGINT"
        elif any(t in type_upper for t in ["INTEGER", "INT4", "UINTEGER"]) or type_upper == "INT":
            return "INTEGER"
        elif any(t in type_upper for t in ["SMALLINT", "INT2", "TINYINT", "UTINYINT", "USMALLINT"]):
            return "SMALLINT"

        # Floating point types
        elif "NUMERIC" in type_upper or "DECIMAL" in type_upper:
            return "DECIMAL"
        elif "DOUBLE" in type_upper or type_upper == "FLOAT8":
            return "DOUBLE"
        elif any(t in type_upper for t in ["FLOAT", "FLOAT4", "REAL"]):
            return "FLOAT"

        # Boolean
        elif any(t in type_upper for t in ["BOOLEAN", "BOOL"]):
            return "BOOLEAN"

        # Date/Time types
        elif type_upper == "DATE":
            return "DATE"
        elif "TIMESTAMP" in type_upper:
            return "TIMESTAMP"
        elif type_upper == "TIME":
            return "TIME"
        elif "INTERVAL" in type_upper:
            return "INTERVAL"

        # Binary types
        elif "BLOB" in type_upper or "BYTEA" in type_upper:
            return "VARBINARY"

        elif "JSON" in type_upper:
            return "JSON"

        return type_upper or "OTHER"
