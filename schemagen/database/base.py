"""Abstract base class for schema accessors."""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional, List

from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import TypeMapper


class SchemaAccessor(ABC):
    """Abstract base class for database schema accessors.

    Subclasses implement the raw metadata queries for one database system.
    Implementations raise driver exceptions freely; the schema builder wraps
    them in ``AccessorError``.
    """

    # Identifier used for driver capability lookups
    DRIVER: str = ""

    # Override in subclasses to exclude tables the database manages itself
    EXCLUDED_TABLES: set = set()

    type_mapper: TypeMapper

    @abstractmethod
    def open(self):
        """Establish the connection to the database."""
        pass

    @abstractmethod
    def close(self):
        """Close the database connection."""
        pass

    @abstractmethod
    def table_names(self) -> List[str]:
        """Get all user table names.

        Returns:
            List of table names, in a stable order
        """
        pass

    @abstractmethod
    def columns(self, table_name: str) -> List[Column]:
        """Get all columns for a table.

        Args:
            table_name: Table name

        Returns:
            List of Column objects with native types
        """
        pass

    @abstractmethod
    def primary_key_info(self, table_name: str) -> Optional[PrimaryKey]:
        """Get the primary key for a table.

        Args:
            table_name: Table name

        Returns:
            PrimaryKey, or None if the table has none
        """
        pass

    @abstractmethod
    def foreign_key_info(self, table_name: str) -> List[ForeignKey]:
        """Get the outbound foreign keys for a table.

        Args:
            table_name: Table name

        Returns:
            List of ForeignKey objects in declaration order, one per column
        """
        pass

    def translate_column_type(self, column: Column) -> Column:
        """Translate a column's native type to the target type vocabulary.

        Returns a new Column; ``db_type`` keeps the native type.
        """
        native = column.db_type or column.type
        return replace(
            column,
            db_type=native,
            type=self.type_mapper.translate(native, column.nullable),
        )

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
