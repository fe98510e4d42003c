"""DuckDB schema accessor."""

from typing import Optional, List

from .base import SchemaAccessor
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import DuckDBTypeMapper


class DuckDBAccessor(SchemaAccessor):
    """Client for reading DuckDB schema metadata."""

    DRIVER = "duckdb"

    def __init__(
        self,
        database_path: Optional[str] = None,
        connection_string: Optional[str] = None,
        read_only: bool = True,
        schema: str = "main",
        connection=None,
    ):
        """Initialize DuckDB accessor.

        Args:
            database_path: Path to .duckdb file (can be :memory: for in-memory)
            connection_string: Alternative connection string format
                               (e.g., duckdb:///path/to/db.duckdb)
            read_only: Open database in read-only mode
            schema: Schema to read tables from
            connection: An already open duckdb connection to use instead;
                        it is left open by close()
        """
        self.database_path = database_path
        self.connection_string = connection_string
        self.read_only = read_only
        self.schema = schema
        self._connection = connection
        self._owns_connection = connection is None
        self.type_mapper = DuckDBTypeMapper()

    def open(self):
        """Connect to the DuckDB database."""
        if self._connection is not None:
            return self._connection

        try:
            import duckdb
        except ImportError:
            raise ImportError(
                "duckdb is required. "
                "Install it with: pip install duckdb"
            )

        if self.database_path:
            read_only = self.read_only and self.database_path != ":memory:"
            self._connection = duckdb.connect(self.database_path, read_only=read_only)
        elif self.connection_string:
            # Remove duckdb:/// prefix and query parameters if present
            path = self.connection_string
            if path.startswith('duckdb:///'):
                path = path[10:]
            elif path.startswith('duckdb://'):
                path = path[9:]
            if '?' in path:
                path = path.split('?')[0]
            self._connection = duckdb.connect(path, read_only=self.read_only)
        else:
            self._connection = duckdb.connect(':memory:')

        return self._connection

    def close(self):
        """Close the DuckDB connection."""
        if self._connection and self._owns_connection:
            self._connection.close()
            self._connection = None

    def _execute_query(self, sql: str, params: list = None) -> List:
        conn = self.open()
        return conn.execute(sql, params or []).fetchall()

    def table_names(self) -> List[str]:
        """Get all base tables in the schema."""
        result = self._execute_query("""
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = ?
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
        """, [self.schema])
        return [row[0] for row in result]

    def columns(self, table_name: str) -> List[Column]:
        """Get all columns for a table.

        Uniqueness comes from UNIQUE constraints in duckdb_constraints().
        """
        unique_columns = set()
        for (names,) in self._constraints(table_name, "UNIQUE", "constraint_column_names"):
            unique_columns.update(names)

        result = self._execute_query("""
            SELECT column_name, data_type, column_default, is_nullable
            FROM information_schema.columns
            WHERE table_schema = ?
              AND table_name = ?
            ORDER BY ordinal_position
        """, [self.schema, table_name])

        return [
            Column(
                name=row[0],
                type=row[1],
                db_type=row[1],
                default=row[2],
                nullable=(row[3] == 'YES'),
                unique=row[0] in unique_columns,
            )
            for row in result
        ]

    def primary_key_info(self, table_name: str) -> Optional[PrimaryKey]:
        """Get the primary key for a table."""
        result = self._constraints(table_name, "PRIMARY KEY", "constraint_column_names")
        if not result:
            return None

        pk_columns = result[0][0]
        if not isinstance(pk_columns, list):
            pk_columns = [pk_columns]
        return PrimaryKey(name=f"{table_name}_pkey", columns=list(pk_columns))

    def foreign_key_info(self, table_name: str) -> List[ForeignKey]:
        """Get foreign keys for a table, one per local column."""
        result = self._constraints(
            table_name,
            "FOREIGN KEY",
            "constraint_column_names, referenced_table, referenced_column_names",
        )

        fkeys = []
        for columns, foreign_table, foreign_columns in result:
            for column, foreign_column in zip(columns, foreign_columns):
                fkeys.append(ForeignKey(
                    name=f"{table_name}_{column}_fkey",
                    column=column,
                    foreign_table=foreign_table,
                    foreign_column=foreign_column,
                ))
        return fkeys

    def _constraints(self, table_name: str, constraint_type: str, fields: str) -> List:
        return self._execute_query(f"""
            SELECT {fields}
            FROM duckdb_constraints()
            WHERE schema_name = ?
              AND table_name = ?
              AND constraint_type = ?
            ORDER BY constraint_index
        """, [self.schema, table_name, constraint_type])
