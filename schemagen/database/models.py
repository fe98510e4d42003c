"""Database data models for schema introspection."""

from typing import Optional, List, Iterable
from dataclasses import dataclass, field


@dataclass
class Column:
    """Represents a database column.

    ``type`` starts out as the native database type and is replaced by the
    target type when the accessor translates the column. ``db_type`` keeps
    the native name.
    """
    name: str
    type: str
    db_type: str = ""
    nullable: bool = False
    unique: bool = False
    default: Optional[str] = None


@dataclass
class PrimaryKey:
    """Represents a table's primary key."""
    name: str
    columns: List[str] = field(default_factory=list)


@dataclass
class ForeignKey:
    """Represents an outbound foreign key.

    The four constraint flags are filled in during enrichment from the
    owning and referenced columns.
    """
    name: str
    column: str
    foreign_table: str
    foreign_column: str

    nullable: bool = False
    unique: bool = False
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False


@dataclass
class ToManyRelationship:
    """An inbound edge: rows of ``foreign_table`` reference this table.

    ``column`` is on this (one) side, ``foreign_column`` on the many side.
    """
    column: str
    foreign_table: str
    foreign_column: str
    to_join_table: bool = False


@dataclass
class ToOneRelationship:
    """An inbound edge whose referencing column is unique (one-to-one)."""
    column: str
    foreign_table: str
    foreign_column: str


@dataclass
class Table:
    """Represents a database table."""
    name: str
    columns: List[Column] = field(default_factory=list)
    pkey: Optional[PrimaryKey] = None
    fkeys: List[ForeignKey] = field(default_factory=list)

    is_join_table: bool = False
    to_many_relationships: List[ToManyRelationship] = field(default_factory=list)
    to_one_relationships: List[ToOneRelationship] = field(default_factory=list)

    def get_column(self, name: str) -> Optional[Column]:
        """Find a column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def column_names(self) -> List[str]:
        return column_names(self.columns)

    def can_last_insert_id(self, driver: str) -> bool:
        """Check whether inserted rows can be re-fetched via last insert id.

        Requires a driver that reports last insert ids and a single-column
        primary key.
        """
        from .drivers import driver_uses_last_insert_id

        if not driver_uses_last_insert_id(driver):
            return False
        return self.pkey is not None and len(self.pkey.columns) == 1


def get_table(tables: Iterable[Table], name: str) -> Optional[Table]:
    """Find a table by name."""
    for table in tables:
        if table.name == name:
            return table
    return None


def column_names(columns: Iterable[Column]) -> List[str]:
    return [c.name for c in columns]


def column_db_types(columns: Iterable[Column]) -> dict:
    """Map column names to their native database types."""
    return {c.name: c.db_type for c in columns}


def filter_columns_by_default(columns: Iterable[Column], defaults: bool) -> List[Column]:
    """Get the columns that have (or, with ``defaults=False``, lack) a default."""
    return [c for c in columns if (c.default is not None) == defaults]


def filter_columns_by_unique(columns: Iterable[Column]) -> List[Column]:
    return [c for c in columns if c.unique]
