"""Enrichment passes over a fully fetched set of tables.

Every pass here needs the complete table list: relationships are recorded on
the referenced table, so no table is finished until all foreign keys of all
tables have been seen. ``enrich_tables`` runs the passes in dependency order.
"""

import logging
from typing import List, Optional

from ..errors import SchemaInconsistency
from .models import Column, Table, ToManyRelationship, ToOneRelationship, get_table

logger = logging.getLogger(__name__)


def set_is_join_table(table: Table) -> bool:
    """Classify a table as a many-to-many join table.

    A join table's primary key is exactly the two columns used by its
    foreign keys, compared as sets.
    """
    if table.pkey is None:
        table.is_join_table = False
        return False

    pkey_columns = set(table.pkey.columns)
    fkey_columns = {fkey.column for fkey in table.fkeys}

    table.is_join_table = len(pkey_columns) == 2 and pkey_columns == fkey_columns
    return table.is_join_table


def set_foreign_key_constraints(table: Table, tables: List[Table]) -> List[SchemaInconsistency]:
    """Copy nullability and uniqueness of both ends onto each foreign key.

    Foreign keys whose owning or referenced column cannot be found keep
    their default (False) flags and are reported as inconsistencies.

    Returns:
        List of inconsistencies found for this table
    """
    inconsistencies = []

    for fkey in table.fkeys:
        column = table.get_column(fkey.column)
        if column is None:
            inconsistencies.append(SchemaInconsistency(
                table=table.name,
                foreign_key=fkey.name,
                missing=f"{table.name}.{fkey.column}",
            ))
        else:
            fkey.nullable = column.nullable
            fkey.unique = column.unique

        foreign_column = _find_column(tables, fkey.foreign_table, fkey.foreign_column)
        if foreign_column is None:
            inconsistencies.append(SchemaInconsistency(
                table=table.name,
                foreign_key=fkey.name,
                missing=f"{fkey.foreign_table}.{fkey.foreign_column}",
            ))
        else:
            fkey.foreign_column_nullable = foreign_column.nullable
            fkey.foreign_column_unique = foreign_column.unique

    return inconsistencies


def set_relationships(table: Table, tables: List[Table]):
    """Record every foreign key that points at ``table`` as an inbound edge.

    Tables are scanned in list order and foreign keys in declaration order,
    so the result is deterministic. A table referencing itself gets a
    relationship to itself, except for a join table's own legs. Foreign
    keys over a unique column also produce a to-one relationship.
    """
    for other in tables:
        for fkey in other.fkeys:
            if fkey.foreign_table != table.name:
                continue
            if other.name == table.name and other.is_join_table:
                continue

            table.to_many_relationships.append(ToManyRelationship(
                column=fkey.foreign_column,
                foreign_table=other.name,
                foreign_column=fkey.column,
                to_join_table=other.is_join_table,
            ))

            if fkey.unique:
                table.to_one_relationships.append(ToOneRelationship(
                    column=fkey.foreign_column,
                    foreign_table=other.name,
                    foreign_column=fkey.column,
                ))


def enrich_tables(tables: List[Table]) -> List[SchemaInconsistency]:
    """Run all enrichment passes over a complete table list, in place.

    Join-table classification and constraint propagation must finish for
    every table before relationships are derived, since relationships read
    both.

    Returns:
        All inconsistencies found, in table order
    """
    inconsistencies: List[SchemaInconsistency] = []

    for table in tables:
        if set_is_join_table(table):
            logger.debug("Table %s is a join table", table.name)

    for table in tables:
        inconsistencies.extend(set_foreign_key_constraints(table, tables))

    for table in tables:
        table.to_many_relationships = []
        table.to_one_relationships = []
    for table in tables:
        set_relationships(table, tables)
        logger.debug(
            "Table %s: %d to-many, %d to-one relationships",
            table.name, len(table.to_many_relationships), len(table.to_one_relationships),
        )

    for inconsistency in inconsistencies:
        logger.warning("Schema inconsistency: %s", inconsistency)

    return inconsistencies


def _find_column(tables: List[Table], table_name: str, column_name: str) -> Optional[Column]:
    table = get_table(tables, table_name)
    if table is None:
        return None
    return table.get_column(column_name)
