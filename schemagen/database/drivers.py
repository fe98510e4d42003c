"""Static per-driver capabilities."""

from types import MappingProxyType
from typing import List

# Whether the database hands back generated primary keys through a
# "last insert id" call (True) or through RETURNING / OUTPUT clauses (False).
LAST_INSERT_ID_DRIVERS = MappingProxyType({
    "mysql": True,
    "sqlite3": True,
    "postgres": False,
    "mssql": False,
    "duckdb": False,
    "snowflake": False,
})


def driver_uses_last_insert_id(driver: str) -> bool:
    """Check if a driver retrieves generated keys via last insert id.

    Unknown drivers return False.
    """
    return LAST_INSERT_ID_DRIVERS.get(driver, False)


def supported_drivers() -> List[str]:
    """Get the driver identifiers with known capabilities."""
    return sorted(LAST_INSERT_ID_DRIVERS)
