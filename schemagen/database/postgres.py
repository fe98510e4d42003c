"""PostgreSQL schema accessor."""

import os
from typing import Optional, List

from .base import SchemaAccessor
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import PostgresTypeMapper


class PostgresAccessor(SchemaAccessor):
    """Client for reading PostgreSQL schema metadata."""

    DRIVER = "postgres"

    def __init__(
        self,
        dbname: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        sslmode: Optional[str] = None,
        schema: str = "public",
    ):
        """Initialize PostgreSQL accessor.

        Unset connection arguments fall back to the standard PG*
        environment variables.

        Args:
            dbname: Database name
            host: Server host
            port: Server port
            user: User name
            password: Password
            sslmode: libpq sslmode (e.g. disable, require)
            schema: Schema to read tables from
        """
        self.dbname = dbname or os.environ.get("PGDATABASE")
        self.host = host or os.environ.get("PGHOST", "localhost")
        self.port = port or int(os.environ.get("PGPORT", 5432))
        self.user = user or os.environ.get("PGUSER")
        self.password = password or os.environ.get("PGPASSWORD")
        self.sslmode = sslmode or os.environ.get("PGSSLMODE", "prefer")
        self.schema = schema
        self._connection = None
        self.type_mapper = PostgresTypeMapper()

    def open(self):
        """Connect to PostgreSQL."""
        if self._connection is not None:
            return self._connection

        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL. "
                "Install it with: pip install psycopg2-binary"
            )

        self._connection = psycopg2.connect(
            dbname=self.dbname,
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            sslmode=self.sslmode,
        )
        # Metadata reads only; avoid holding a transaction open
        self._connection.autocommit = True
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _execute_query(self, sql: str, params: tuple = ()) -> List:
        conn = self.open()
        cursor = conn.cursor()
        try:
            cursor.execute(sql, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def table_names(self) -> List[str]:
        """Get all base tables in the schema."""
        result = self._execute_query("""
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
        """, (self.schema,))
        return [row[0] for row in result]

    def columns(self, table_name: str) -> List[Column]:
        """Get all columns for a table.

        A column is unique when it takes part in any UNIQUE constraint.
        Arrays and user-defined types report their udt_name as type.
        """
        result = self._execute_query("""
            SELECT
                c.column_name,
                CASE WHEN c.data_type IN ('ARRAY', 'USER-DEFINED') THEN c.udt_name ELSE c.data_type END,
                c.column_default,
                c.is_nullable = 'YES',
                EXISTS (
                    SELECT 1
                    FROM information_schema.table_constraints tc
                    JOIN information_schema.constraint_column_usage ccu
                      ON tc.constraint_name = ccu.constraint_name
                      AND tc.table_schema = ccu.table_schema
                    WHERE tc.table_schema = c.table_schema
                      AND tc.table_name = c.table_name
                      AND tc.constraint_type = 'UNIQUE'
                      AND ccu.column_name = c.column_name
                )
            FROM information_schema.columns c
            WHERE c.table_schema = %s
              AND c.table_name = %s
            ORDER BY c.ordinal_position
        """, (self.schema, table_name))

        return [
            Column(
                name=row[0],
                type=row[1],
                db_type=row[1],
                default=row[2],
                nullable=bool(row[3]),
                unique=bool(row[4]),
            )
            for row in result
        ]

    def primary_key_info(self, table_name: str) -> Optional[PrimaryKey]:
        """Get the primary key constraint for a table."""
        result = self._execute_query("""
            SELECT tc.constraint_name, kcu.column_name
            FROM information_schema.table_constraints tc
            JOIN information_schema.key_column_usage kcu
              ON tc.constraint_name = kcu.constraint_name
              AND tc.table_schema = kcu.table_schema
              AND tc.table_name = kcu.table_name
            WHERE tc.table_schema = %s
              AND tc.table_name = %s
              AND tc.constraint_type = 'PRIMARY KEY'
            ORDER BY kcu.ordinal_position
        """, (self.schema, table_name))

        if not result:
            return None
        return PrimaryKey(name=result[0][0], columns=[row[1] for row in result])

    def foreign_key_info(self, table_name: str) -> List[ForeignKey]:
        """Get foreign keys for a table.

        Uses pg_catalog so composite keys pair each local column with its
        referenced column; one ForeignKey is returned per column pair, in
        constraint creation order.
        """
        result = self._execute_query("""
            SELECT con.conname, a.attname, ft.relname, fa.attname
            FROM pg_constraint con
            JOIN pg_class t ON t.oid = con.conrelid
            JOIN pg_namespace n ON n.oid = t.relnamespace
            JOIN pg_class ft ON ft.oid = con.confrelid
            CROSS JOIN LATERAL unnest(con.conkey, con.confkey)
                WITH ORDINALITY AS k(attnum, fattnum, ord)
            JOIN pg_attribute a ON a.attrelid = con.conrelid AND a.attnum = k.attnum
            JOIN pg_attribute fa ON fa.attrelid = con.confrelid AND fa.attnum = k.fattnum
            WHERE con.contype = 'f'
              AND n.nspname = %s
              AND t.relname = %s
            ORDER BY con.oid, k.ord
        """, (self.schema, table_name))

        return [
            ForeignKey(name=row[0], column=row[1], foreign_table=row[2], foreign_column=row[3])
            for row in result
        ]
