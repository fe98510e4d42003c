"""Snowflake schema accessor.

Snowflake does not enforce key constraints, but it records declared
primary, unique and foreign keys and reports them through SHOW commands.
"""

import os
from typing import Optional, List, Dict

from .base import SchemaAccessor
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import SnowflakeTypeMapper


class SnowflakeAccessor(SchemaAccessor):
    """Client for reading Snowflake schema metadata."""

    DRIVER = "snowflake"

    def __init__(
        self,
        database: Optional[str] = None,
        schema: Optional[str] = None,
        account: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        warehouse: Optional[str] = None,
        role: Optional[str] = None,
    ):
        self.database = database or os.environ.get("SNOWFLAKE_DATABASE")
        self.schema = schema or os.environ.get("SNOWFLAKE_SCHEMA", "PUBLIC")
        self.account = account or os.environ.get("SNOWFLAKE_ACCOUNT")
        self.user = user or os.environ.get("SNOWFLAKE_USER")
        self.password = password or os.environ.get("SNOWFLAKE_PASSWORD")
        self.warehouse = warehouse or os.environ.get("SNOWFLAKE_WAREHOUSE")
        self.role = role or os.environ.get("SNOWFLAKE_ROLE")
        self._connection = None
        self.type_mapper = SnowflakeTypeMapper()

    @property
    def qualified_schema(self) -> str:
        return f"{self.database}.{self.schema}"

    def open(self):
        """Connect to Snowflake."""
        if self._connection is not None:
            return self._connection

        try:
            import snowflake.connector
        except ImportError:
            raise ImportError(
                "snowflake-connector-python is required. "
                "Install it with: pip install snowflake-connector-python"
            )

        self._connection = snowflake.connector.connect(
            account=self.account,
            user=self.user,
            password=self.password,
            warehouse=self.warehouse,
            database=self.database,
            schema=self.schema,
            role=self.role,
        )
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _show(self, sql: str) -> List[Dict]:
        """Run a SHOW/DESCRIBE command, returning rows keyed by column name."""
        from snowflake.connector import DictCursor

        conn = self.open()
        cursor = conn.cursor(DictCursor)
        try:
            cursor.execute(sql)
            return cursor.fetchall()
        finally:
            cursor.close()

    def table_names(self) -> List[str]:
        """Get all tables in the schema."""
        rows = self._show(f"SHOW TABLES IN SCHEMA {self.qualified_schema}")
        return sorted(row["name"] for row in rows)

    def columns(self, table_name: str) -> List[Column]:
        """Get all columns in a table."""
        unique_columns = {
            row["column_name"]
            for row in self._show(f"SHOW UNIQUE KEYS IN TABLE {self.qualified_schema}.{table_name}")
        }

        columns = []
        for row in self._show(f"DESCRIBE TABLE {self.qualified_schema}.{table_name}"):
            columns.append(Column(
                name=row["name"],
                type=row["type"],
                db_type=row["type"],
                default=row.get("default"),
                nullable=row.get("null?", "Y") == "Y",
                unique=row["name"] in unique_columns,
            ))
        return columns

    def primary_key_info(self, table_name: str) -> Optional[PrimaryKey]:
        """Get the declared primary key for a table."""
        rows = self._show(f"SHOW PRIMARY KEYS IN TABLE {self.qualified_schema}.{table_name}")
        if not rows:
            return None

        rows = sorted(rows, key=lambda r: r["key_sequence"])
        return PrimaryKey(
            name=rows[0]["constraint_name"],
            columns=[row["column_name"] for row in rows],
        )

    def foreign_key_info(self, table_name: str) -> List[ForeignKey]:
        """Get the declared foreign keys for a table, in creation order."""
        rows = self._show(f"SHOW IMPORTED KEYS IN TABLE {self.qualified_schema}.{table_name}")
        rows = sorted(rows, key=lambda r: (r["created_on"], r["fk_name"], r["key_sequence"]))
        return [
            ForeignKey(
                name=row["fk_name"],
                column=row["fk_column_name"],
                foreign_table=row["pk_table_name"],
                foreign_column=row["pk_column_name"],
            )
            for row in rows
        ]
