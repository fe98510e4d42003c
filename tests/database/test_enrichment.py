"""Tests for the schema enrichment passes."""

import logging

import pytest

from schemagen.database.enrichment import (
    set_is_join_table,
    set_foreign_key_constraints,
    set_relationships,
    enrich_tables,
)
from schemagen.database.models import Column, PrimaryKey, ForeignKey, Table, ToManyRelationship


def _keyed_table(pkey, fkey_columns):
    table = Table(name="t", pkey=PrimaryKey(name="pk", columns=pkey))
    for column in fkey_columns:
        table.fkeys.append(ForeignKey(name=f"fk_{column}", column=column, foreign_table="x", foreign_column="id"))
    return table


class TestSetIsJoinTable:
    """Test join-table classification."""

    @pytest.mark.parametrize("pkey,fkeys,expected", [
        (["one", "two"], ["one", "two"], True),
        (["two", "one"], ["one", "two"], True),
        (["one"], ["one"], False),
        (["one", "two", "three"], ["one", "two"], False),
        (["one", "two", "three"], ["one", "two", "three"], False),
        (["one"], ["one", "two"], False),
        (["one", "two"], ["one"], False),
        (["one", "two"], ["one", "three"], False),
    ])
    def test_classification(self, pkey, fkeys, expected):
        """Test that only a two-column key matching the fk columns is a join table."""
        table = _keyed_table(pkey, fkeys)

        assert set_is_join_table(table) is expected
        assert table.is_join_table is expected

    def test_repeated_fkey_column_counts_once(self):
        """Test that two foreign keys over one column do not grow the fk column set."""
        table = _keyed_table(["one", "two"], ["one", "one", "two"])

        assert set_is_join_table(table) is True

    def test_no_primary_key(self):
        """Test that a table without a primary key is never a join table."""
        table = Table(name="t", fkeys=[
            ForeignKey(name="a", column="one", foreign_table="x", foreign_column="id"),
            ForeignKey(name="b", column="two", foreign_table="y", foreign_column="id"),
        ])

        assert set_is_join_table(table) is False


class TestSetForeignKeyConstraints:
    """Test propagation of nullability and uniqueness onto foreign keys."""

    @pytest.fixture
    def tables(self):
        return [
            Table(
                name="one",
                columns=[
                    Column(name="id1", type="string", nullable=False, unique=False),
                    Column(name="id2", type="string", nullable=True, unique=True),
                ],
            ),
            Table(
                name="other",
                columns=[
                    Column(name="one_id_1", type="string", nullable=False, unique=False),
                    Column(name="one_id_2", type="string", nullable=True, unique=True),
                ],
                fkeys=[
                    ForeignKey(name="fk1", column="one_id_1", foreign_table="one", foreign_column="id1"),
                    ForeignKey(name="fk2", column="one_id_2", foreign_table="one", foreign_column="id2"),
                ],
            ),
        ]

    def test_flags_copied_from_both_columns(self, tables):
        """Test that each fk takes its flags from its own and the referenced column."""
        for table in tables:
            assert set_foreign_key_constraints(table, tables) == []

        first, second = tables[1].fkeys
        assert not first.nullable
        assert not first.unique
        assert not first.foreign_column_nullable
        assert not first.foreign_column_unique
        assert second.nullable
        assert second.unique
        assert second.foreign_column_nullable
        assert second.foreign_column_unique

    def test_missing_referenced_column(self, tables):
        """Test that a missing referenced column leaves defaults and is reported."""
        tables[1].fkeys[1].foreign_column = "nope"

        inconsistencies = set_foreign_key_constraints(tables[1], tables)

        assert len(inconsistencies) == 1
        assert inconsistencies[0].foreign_key == "fk2"
        assert inconsistencies[0].missing == "one.nope"
        second = tables[1].fkeys[1]
        assert second.nullable and second.unique
        assert not second.foreign_column_nullable
        assert not second.foreign_column_unique

    def test_missing_referenced_table(self, tables):
        """Test that a reference to an unknown table is reported."""
        tables[1].fkeys[0].foreign_table = "ghost"

        inconsistencies = set_foreign_key_constraints(tables[1], tables)

        assert [i.missing for i in inconsistencies] == ["ghost.id1"]

    def test_missing_owning_column(self, tables):
        """Test that a foreign key over an unknown local column is reported."""
        tables[1].fkeys[0].column = "gone"

        inconsistencies = set_foreign_key_constraints(tables[1], tables)

        assert [i.missing for i in inconsistencies] == ["other.gone"]
        assert not tables[1].fkeys[0].nullable


class TestSetRelationships:
    """Test derivation of inbound relationships."""

    def test_relationship_recorded_on_referenced_table(self, one_and_other):
        """Test that a foreign key produces a to-many on the table it references."""
        for table in one_and_other:
            set_relationships(table, one_and_other)

        one, other = one_and_other
        assert one.to_many_relationships == [
            ToManyRelationship(column="id", foreign_table="other", foreign_column="other_id", to_join_table=False)
        ]
        assert other.to_many_relationships == []

    def test_self_reference(self):
        """Test that a self-referencing table gets a relationship to itself."""
        employees = Table(
            name="employees",
            columns=[Column(name="id", type="int"), Column(name="manager_id", type="int", nullable=True)],
            fkeys=[ForeignKey(name="mgr", column="manager_id", foreign_table="employees", foreign_column="id")],
        )

        set_relationships(employees, [employees])

        assert employees.to_many_relationships == [
            ToManyRelationship(column="id", foreign_table="employees", foreign_column="manager_id")
        ]

    def test_join_table_self_leg_skipped(self):
        """Test that a join table's key pointing back at itself adds no relationship."""
        pkey = PrimaryKey(name="pk", columns=["col1", "col2"])
        fkeys = [
            ForeignKey(name="fkey1", column="col1", foreign_table="table2", foreign_column="col2"),
            ForeignKey(name="fkey2", column="col2", foreign_table="table1", foreign_column="col1"),
        ]
        columns = [Column(name="col1", type="str"), Column(name="col2", type="str")]
        tables = [
            Table(name="table1", columns=list(columns), pkey=pkey, fkeys=[ForeignKey(**vars(f)) for f in fkeys]),
            Table(name="table2", columns=list(columns), pkey=pkey, fkeys=[ForeignKey(**vars(f)) for f in fkeys]),
        ]

        enrich_tables(tables)
        table1, table2 = tables

        assert table1.is_join_table and table2.is_join_table
        assert table1.to_many_relationships == [
            ToManyRelationship(column="col1", foreign_table="table2", foreign_column="col2", to_join_table=True)
        ]
        assert table2.to_many_relationships == [
            ToManyRelationship(column="col2", foreign_table="table1", foreign_column="col1", to_join_table=True)
        ]

    def test_order_follows_tables_then_fkeys(self):
        """Test that relationships follow table order, then fk declaration order."""
        target = Table(name="target", columns=[Column(name="id", type="int"), Column(name="code", type="str")])
        a = Table(name="a", fkeys=[
            ForeignKey(name="a2", column="code_ref", foreign_table="target", foreign_column="code"),
            ForeignKey(name="a1", column="target_id", foreign_table="target", foreign_column="id"),
        ])
        b = Table(name="b", fkeys=[
            ForeignKey(name="b1", column="target_id", foreign_table="target", foreign_column="id"),
        ])

        set_relationships(target, [b, target, a])

        assert [(r.foreign_table, r.foreign_column) for r in target.to_many_relationships] == [
            ("b", "target_id"),
            ("a", "code_ref"),
            ("a", "target_id"),
        ]

    def test_to_one_for_unique_referencing_column(self):
        """Test that a unique referencing column also yields a to-one relationship."""
        users = Table(name="users", columns=[Column(name="id", type="int")])
        profiles = Table(name="profiles", fkeys=[
            ForeignKey(name="p", column="user_id", foreign_table="users", foreign_column="id", unique=True),
        ])

        set_relationships(users, [users, profiles])

        assert len(users.to_many_relationships) == 1
        assert len(users.to_one_relationships) == 1
        assert users.to_one_relationships[0].foreign_table == "profiles"


class TestEnrichTables:
    """Test the full enrichment pipeline over a table list."""

    def test_one_and_other(self, one_and_other):
        """Test the nullable single-column reference scenario end to end."""
        enrich_tables(one_and_other)
        one, other = one_and_other

        fkey = other.fkeys[0]
        assert fkey.nullable is True
        assert fkey.foreign_column_nullable is False
        assert len(one.to_many_relationships) == 1
        rel = one.to_many_relationships[0]
        assert rel.column == "id"
        assert rel.foreign_table == "other"
        assert rel.foreign_column == "other_id"
        assert rel.to_join_table is False
        assert other.to_many_relationships == []

    def test_join_table_flag_reaches_relationships(self):
        """Test that join-table legs are marked on the referenced tables."""
        tables = [
            Table(name="tags", columns=[Column(name="id", type="int")], pkey=PrimaryKey(name="p", columns=["id"])),
            Table(name="posts", columns=[Column(name="id", type="int")], pkey=PrimaryKey(name="p", columns=["id"])),
            Table(
                name="post_tags",
                columns=[Column(name="post_id", type="int"), Column(name="tag_id", type="int")],
                pkey=PrimaryKey(name="p", columns=["post_id", "tag_id"]),
                fkeys=[
                    ForeignKey(name="f1", column="post_id", foreign_table="posts", foreign_column="id"),
                    ForeignKey(name="f2", column="tag_id", foreign_table="tags", foreign_column="id"),
                ],
            ),
        ]

        enrich_tables(tables)
        tags, posts, post_tags = tables

        assert post_tags.is_join_table
        assert not tags.is_join_table
        assert tags.to_many_relationships[0].to_join_table
        assert posts.to_many_relationships[0].to_join_table
        assert post_tags.to_many_relationships == []

    def test_rerun_is_stable(self, one_and_other):
        """Test that enriching twice yields the same relationships, not duplicates."""
        enrich_tables(one_and_other)
        first = list(one_and_other[0].to_many_relationships)

        enrich_tables(one_and_other)

        assert one_and_other[0].to_many_relationships == first

    def test_inconsistencies_logged(self, one_and_other, caplog):
        """Test that inconsistencies are returned and logged as warnings."""
        one_and_other[1].fkeys[0].foreign_column = "missing"

        with caplog.at_level(logging.WARNING, logger="schemagen.database.enrichment"):
            inconsistencies = enrich_tables(one_and_other)

        assert len(inconsistencies) == 1
        assert "one.missing" in caplog.text
