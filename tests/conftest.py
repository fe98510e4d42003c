"""Shared pytest fixtures for schemagen tests."""

import pytest

from schemagen.database.models import Column, PrimaryKey, ForeignKey, Table
from tests.database.fixtures import FakeAccessor


@pytest.fixture
def join_pair_accessor():
    """Two tables whose composite keys are exactly their two foreign keys."""
    columns = [
        Column(name="col1", type="character varying"),
        Column(name="col2", type="character varying", nullable=True),
    ]
    fkeys = [
        ForeignKey(name="fkey1", column="col1", foreign_table="table2", foreign_column="col2"),
        ForeignKey(name="fkey2", column="col2", foreign_table="table1", foreign_column="col1"),
    ]
    pkey = PrimaryKey(name="pkey1", columns=["col1", "col2"])

    return FakeAccessor(
        columns={"table1": columns, "table2": columns},
        pkeys={"table1": pkey, "table2": pkey},
        fkeys={"table1": fkeys, "table2": fkeys},
    )


@pytest.fixture
def shop_accessor():
    """A small shop schema: users, products, orders and a join table."""
    return FakeAccessor(
        columns={
            "users": [
                Column(name="id", type="integer"),
                Column(name="email", type="character varying", unique=True),
                Column(name="referrer_id", type="integer", nullable=True),
            ],
            "products": [
                Column(name="id", type="integer"),
                Column(name="name", type="text"),
            ],
            "orders": [
                Column(name="id", type="integer"),
                Column(name="user_id", type="integer"),
                Column(name="total", type="numeric", nullable=True, default="0"),
            ],
            "order_products": [
                Column(name="order_id", type="integer"),
                Column(name="product_id", type="integer"),
            ],
            "profiles": [
                Column(name="id", type="integer"),
                Column(name="user_id", type="integer", unique=True),
            ],
        },
        pkeys={
            "users": PrimaryKey(name="users_pkey", columns=["id"]),
            "products": PrimaryKey(name="products_pkey", columns=["id"]),
            "orders": PrimaryKey(name="orders_pkey", columns=["id"]),
            "order_products": PrimaryKey(name="order_products_pkey", columns=["product_id", "order_id"]),
            "profiles": PrimaryKey(name="profiles_pkey", columns=["id"]),
        },
        fkeys={
            "users": [
                ForeignKey(name="users_referrer_fkey", column="referrer_id", foreign_table="users", foreign_column="id"),
            ],
            "orders": [
                ForeignKey(name="orders_user_fkey", column="user_id", foreign_table="users", foreign_column="id"),
            ],
            "order_products": [
                ForeignKey(name="op_order_fkey", column="order_id", foreign_table="orders", foreign_column="id"),
                ForeignKey(name="op_product_fkey", column="product_id", foreign_table="products", foreign_column="id"),
            ],
            "profiles": [
                ForeignKey(name="profiles_user_fkey", column="user_id", foreign_table="users", foreign_column="id"),
            ],
        },
    )


@pytest.fixture
def one_and_other():
    """Table 'other' references 'one' through a nullable column."""
    return [
        Table(
            name="one",
            columns=[Column(name="id", type="string")],
        ),
        Table(
            name="other",
            columns=[Column(name="other_id", type="string", nullable=True)],
            fkeys=[ForeignKey(name="other_fkey", column="other_id", foreign_table="one", foreign_column="id")],
        ),
    ]
