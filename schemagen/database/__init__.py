"""Database schema module for schemagen.

This module reads raw table metadata through driver-specific schema
accessors and enriches it into a cross-referenced table graph.
"""

from .models import (
    Column,
    PrimaryKey,
    ForeignKey,
    ToManyRelationship,
    ToOneRelationship,
    Table,
    get_table,
)
from .base import SchemaAccessor
from .type_mappers import TypeMapper, PostgresTypeMapper, DuckDBTypeMapper, SnowflakeTypeMapper
from .enrichment import (
    set_is_join_table,
    set_foreign_key_constraints,
    set_relationships,
    enrich_tables,
)
from .builder import SchemaBuilder, SchemaResult, build_schema
from .drivers import driver_uses_last_insert_id, supported_drivers
from .postgres import PostgresAccessor
from .duckdb import DuckDBAccessor
from .snowflake import SnowflakeAccessor

__all__ = [
    # Data models
    "Column",
    "PrimaryKey",
    "ForeignKey",
    "ToManyRelationship",
    "ToOneRelationship",
    "Table",
    "get_table",
    # Base classes
    "SchemaAccessor",
    # Type mappers
    "TypeMapper",
    "PostgresTypeMapper",
    "DuckDBTypeMapper",
    "SnowflakeTypeMapper",
    # Enrichment
    "set_is_join_table",
    "set_foreign_key_constraints",
    "set_relationships",
    "enrich_tables",
    "SchemaBuilder",
    "SchemaResult",
    "build_schema",
    # Driver capabilities
    "driver_uses_last_insert_id",
    "supported_drivers",
    # Accessors
    "PostgresAccessor",
    "DuckDBAccessor",
    "SnowflakeAccessor",
]
