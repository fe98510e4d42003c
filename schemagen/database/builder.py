"""Two-phase schema building: fetch every table, then enrich."""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, TypeVar

from ..errors import (
    AccessorError,
    SchemaBuildError,
    SchemaInconsistency,
    SchemaInconsistencyError,
)
from .base import SchemaAccessor
from .enrichment import enrich_tables
from .models import Table

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SchemaResult:
    """Enriched tables plus any non-fatal inconsistencies."""
    tables: List[Table] = field(default_factory=list)
    inconsistencies: List[SchemaInconsistency] = field(default_factory=list)


class SchemaBuilder:
    """Builds an enriched table list from a schema accessor.

    Raw metadata for all tables is fetched first (optionally on a thread
    pool); enrichment only starts once every fetch has completed. Any
    accessor failure aborts the build with ``SchemaBuildError``.
    """

    def __init__(
        self,
        accessor: SchemaAccessor,
        whitelist: Optional[Iterable[str]] = None,
        blacklist: Optional[Iterable[str]] = None,
        strict: bool = False,
        max_workers: int = 1,
    ):
        """Initialize the builder.

        Args:
            accessor: Schema accessor for the target database
            whitelist: If given, only these tables are built
            blacklist: Tables to skip
            strict: Raise SchemaInconsistencyError instead of collecting
                    inconsistencies as warnings
            max_workers: Number of threads for the fetch phase; the accessor
                         must tolerate concurrent calls when this exceeds 1
        """
        self.accessor = accessor
        self.whitelist = set(whitelist) if whitelist else None
        self.blacklist = set(blacklist) if blacklist else set()
        self.strict = strict
        self.max_workers = max(1, max_workers)

    def build(self) -> SchemaResult:
        """Fetch and enrich all tables."""
        try:
            self._call("open", None, self.accessor.open)
        except AccessorError as e:
            raise SchemaBuildError([e]) from e

        errors: List[AccessorError] = []
        tables: List[Table] = []
        try:
            tables = self.fetch_tables()
        except AccessorError as e:
            errors.append(e)
        except SchemaBuildError as e:
            errors.extend(e.errors)

        try:
            self._call("close", None, self.accessor.close)
        except AccessorError as e:
            errors.append(e)

        if errors:
            raise SchemaBuildError(errors)

        inconsistencies = enrich_tables(tables)
        if inconsistencies and self.strict:
            raise SchemaInconsistencyError(inconsistencies)

        logger.info("Built schema with %d tables", len(tables))
        return SchemaResult(tables=tables, inconsistencies=inconsistencies)

    def fetch_tables(self) -> List[Table]:
        """Fetch raw tables in accessor order, without enrichment.

        The accessor must already be open.

        Raises:
            AccessorError: When listing table names fails
            SchemaBuildError: When fetching one or more tables fails
        """
        names = self._filter(self._call("table_names", None, self.accessor.table_names))
        logger.debug("Fetching %d tables", len(names))

        if self.max_workers == 1 or len(names) < 2:
            tables = []
            for name in names:
                tables.append(self.fetch_table(name))
            return tables

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self.fetch_table, name) for name in names]
            concurrent.futures.wait(futures)

        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            raise SchemaBuildError(errors)
        return [f.result() for f in futures]

    def fetch_table(self, name: str) -> Table:
        """Fetch and assemble one raw table with translated column types."""
        columns = self._call("columns", name, lambda: self.accessor.columns(name))
        pkey = self._call("primary_key_info", name, lambda: self.accessor.primary_key_info(name))
        fkeys = self._call("foreign_key_info", name, lambda: self.accessor.foreign_key_info(name))

        translated = self._call(
            "translate_column_type", name,
            lambda: [self.accessor.translate_column_type(c) for c in columns],
        )

        table = Table(
            name=name,
            columns=translated,
            pkey=pkey,
            fkeys=list(fkeys),
        )
        logger.debug(
            "Fetched table %s: %d columns, %d foreign keys",
            name, len(table.columns), len(table.fkeys),
        )
        return table

    def _filter(self, names: List[str]) -> List[str]:
        result = []
        for name in names:
            if self.whitelist is not None and name not in self.whitelist:
                continue
            if name in self.blacklist or name in self.accessor.EXCLUDED_TABLES:
                continue
            result.append(name)
        return result

    @staticmethod
    def _call(operation: str, table: Optional[str], func: Callable[[], T]) -> T:
        try:
            return func()
        except AccessorError:
            raise
        except Exception as e:
            raise AccessorError(operation, table=table, cause=e) from e


def build_schema(accessor: SchemaAccessor, **kwargs) -> List[Table]:
    """Build the enriched, accessor-ordered table list.

    Keyword arguments are passed to SchemaBuilder.
    """
    return SchemaBuilder(accessor, **kwargs).build().tables
