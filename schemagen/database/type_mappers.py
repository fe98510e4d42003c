"""Database-specific type mapping strategies."""

from abc import ABC, abstractmethod


class TypeMapper(ABC):
    """Abstract base class for database type mapping.

    Maps native database types to the Python type vocabulary used by
    generated code. Mappings are total: anything unrecognised becomes
    ``str``.
    """

    @abstractmethod
    def to_python_type(self, db_type: str) -> str:
        """Convert database type to a Python type name."""
        pass

    def translate(self, db_type: str, nullable: bool = False) -> str:
        """Convert database type, wrapping nullable columns in Optional."""
        python_type = self.to_python_type(db_type)
        if nullable:
            return f"Optional[{python_type}]"
        return python_type


class PostgresTypeMapper(TypeMapper):
    """Type mapper for PostgreSQL types (information_schema names)."""

    def to_python_type(self, db_type: str) -> str:
        """Convert PostgreSQL type to Python type."""
        type_lower = db_type.lower()

        # Arrays come back as ARRAY or with a leading underscore from udt_name
        if type_lower == "array" or type_lower.startswith("_") or type_lower.endswith("[]"):
            return "list"

        if type_lower in ("bigint", "integer", "smallint", "int8", "int4", "int2",
                          "bigserial", "serial", "smallserial"):
            return "int"
        elif type_lower in ("real", "double precision", "float4", "float8"):
            return "float"
        elif type_lower in ("numeric", "decimal", "money"):
            return "decimal.Decimal"
        elif type_lower in ("boolean", "bool"):
            return "bool"
        elif type_lower == "date":
            return "datetime.date"
        elif type_lower.startswith("timestamp"):
            return "datetime.datetime"
        elif type_lower.startswith("time"):
            return "datetime.time"
        elif type_lower == "interval":
            return "datetime.timedelta"
        elif type_lower == "bytea":
            return "bytes"
        elif type_lower in ("json", "jsonb"):
            return "dict"
        elif type_lower == "uuid":
            return "uuid.UUID"
        # character varying, text, citext, inet, enums and user-defined types
        return "str"


class DuckDBTypeMapper(TypeMapper):
    """Type mapper for DuckDB database types."""

    def to_python_type(self, db_type: str) -> str:
        """Convert DuckDB type to Python type."""
        type_upper = db_type.upper()

        # Nested types
        if type_upper.endswith("[]") or type_upper.startswith("LIST"):
            return "list"
        elif type_upper.startswith(("STRUCT", "MAP")):
            return "dict"

        # String types
        elif any(t in type_upper for t in ["VARCHAR", "TEXT", "STRING", "CHAR"]):
            return "str"
        elif type_upper == "UUID":
            return "uuid.UUID"
        elif "JSON" in type_upper:
            return "dict"

        # Integer types
        elif any(t in type_upper for t in ["BIGINT", "HUGEINT", "INTEGER", "SMALLINT", "TINYINT"]) or type_upper == "INT":
            return "int"

        # Fixed and floating point types
        elif any(t in type_upper for t in ["NUMERIC", "DECIMAL"]):
            return "decimal.Decimal"
        elif any(t in type_upper for t in ["DOUBLE", "FLOAT", "REAL"]):
            return "float"

        elif type_upper in ("BOOLEAN", "BOOL"):
            return "bool"

        # Date/Time types
        elif type_upper == "DATE":
            return "datetime.date"
        elif "TIMESTAMP" in type_upper or type_upper == "DATETIME":
            return "datetime.datetime"
        elif type_upper.startswith("TIME"):
            return "datetime.time"
        elif "INTERVAL" in type_upper:
            return "datetime.timedelta"

        # Binary types
        elif "BLOB" in type_upper or "BYTEA" in type_upper:
            return "bytes"

        return "str"


class SnowflakeTypeMapper(TypeMapper):
    """Type mapper for Snowflake database types."""

    def to_python_type(self, db_type: str) -> str:
        """Convert Snowflake type to Python type."""
        type_upper = db_type.upper()

        if any(t in type_upper for t in ["VARCHAR", "TEXT", "STRING", "CHAR"]):
            return "str"
        elif "NUMBER" in type_upper or "NUMERIC" in type_upper or "DECIMAL" in type_upper:
            # NUMBER(38,0) is an integer, NUMBER(10,2) is not
            if "," in type_upper and not type_upper.replace(" ", "").endswith(",0)"):
                return "decimal.Decimal"
            return "int"
        elif "INT" in type_upper:
            return "int"
        elif any(t in type_upper for t in ["FLOAT", "DOUBLE", "REAL"]):
            return "float"
        elif "BOOL" in type_upper:
            return "bool"
        elif "TIMESTAMP" in type_upper or "DATETIME" in type_upper:
            return "datetime.datetime"
        elif "DATE" in type_upper:
            return "datetime.date"
        elif "TIME" in type_upper:
            return "datetime.time"
        elif "BINARY" in type_upper:
            return "bytes"
        elif type_upper in ("VARIANT", "OBJECT"):
            return "dict"
        elif type_upper == "ARRAY":
            return "list"
        return "str"
