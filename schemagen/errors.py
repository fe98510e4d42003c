"""Error types for schema building."""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List


class SchemaError(Exception):
    """Base exception for schema errors."""

    def __init__(self, message: str, code: str = "SCHEMA_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for reporting."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class AccessorError(SchemaError):
    """A schema accessor call failed.

    Wraps the driver-level cause together with the accessor operation
    that failed and, where the call was per-table, the table name.
    """

    def __init__(
        self,
        operation: str,
        table: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        target = f" for table {table}" if table else ""
        message = f"{operation} failed{target}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(
            message,
            code="ACCESSOR_ERROR",
            details={"operation": operation, "table": table, "cause": repr(cause) if cause else None},
        )
        self.operation = operation
        self.table = table
        self.cause = cause


class SchemaBuildError(SchemaError):
    """One or more accessor calls failed while building a schema."""

    def __init__(self, errors: List[AccessorError]):
        if len(errors) == 1:
            message = f"Schema build failed: {errors[0].message}"
        else:
            message = f"Schema build failed with {len(errors)} accessor errors"
        super().__init__(
            message,
            code="SCHEMA_BUILD_ERROR",
            details={"errors": [e.to_dict() for e in errors]},
        )
        self.errors = errors


@dataclass
class SchemaInconsistency:
    """A foreign key names a table or column missing from the fetched metadata."""
    table: str
    foreign_key: str
    missing: str  # "table.column" that could not be found

    def __str__(self) -> str:
        return f"{self.table}: foreign key {self.foreign_key} references missing {self.missing}"


class SchemaInconsistencyError(SchemaError):
    """Raised in strict mode when foreign keys reference missing columns."""

    def __init__(self, inconsistencies: List[SchemaInconsistency]):
        super().__init__(
            f"{len(inconsistencies)} foreign key(s) reference missing columns",
            code="SCHEMA_INCONSISTENCY",
            details={"inconsistencies": [str(i) for i in inconsistencies]},
        )
        self.inconsistencies = inconsistencies
