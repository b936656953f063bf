"""
Typed Exception Hierarchy for the Statement Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from StatementKernelError:

    StatementKernelError (base)
    |
    +-- HierarchyError
    |   +-- DuplicateIdError
    |   +-- CyclicHierarchyError
    |   +-- InvalidAccountRecordError
    |
    +-- ColumnError
        +-- UnknownColumnKeyError
        +-- MissingColumnSchemaError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                    | When Raised
-----------|-------------------------|---------------------------------------------
Hierarchy  | DUPLICATE_ACCOUNT_ID    | Two records in one batch share an id
           | CYCLIC_HIERARCHY        | A parent chain revisits an id
           | INVALID_ACCOUNT_RECORD  | Record missing id / unknown account type
-----------|-------------------------|---------------------------------------------
Column     | UNKNOWN_COLUMN_KEY      | Width/visibility request for unknown key
           | MISSING_COLUMN_SCHEMA   | No column schema for a statement

===============================================================================
HANDLING PATTERNS
===============================================================================

1. STRUCTURAL ERRORS abort forest construction for one account-type bucket.
   The assembler records them on the report instead of rendering a partial
   tree with a silently wrong total:

    try:
        forest = build_forest(records)
    except CyclicHierarchyError as e:
        log.warning("cycle", extra={"cycle": e.cycle})

2. UI ERRORS never crash the render loop. Controllers catch
   UnknownColumnKeyError and report a no-op outcome.

Every exception has a class-level ``code`` and stores its context as
attributes so log formatters and API layers can serialize it.
"""


class StatementKernelError(Exception):
    """
    Base exception for all statement kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STATEMENT_KERNEL_ERROR"


# Hierarchy-related exceptions


class HierarchyError(StatementKernelError):
    """Base exception for account hierarchy construction errors."""

    code: str = "HIERARCHY_ERROR"


class DuplicateIdError(HierarchyError):
    """Two account records in the same batch share an id."""

    code: str = "DUPLICATE_ACCOUNT_ID"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Duplicate account id: {account_id}")


class CyclicHierarchyError(HierarchyError):
    """
    The parent chain of an account revisits an id.

    ``cycle`` lists the ids on the loop in parent-chain order, starting and
    ending with the same id.
    """

    code: str = "CYCLIC_HIERARCHY"

    def __init__(self, account_id: str, cycle: tuple[str, ...]):
        self.account_id = account_id
        self.cycle = cycle
        super().__init__(
            f"Cyclic parent chain at account {account_id}: {' -> '.join(cycle)}"
        )


class InvalidAccountRecordError(HierarchyError):
    """Account record cannot be parsed from its external representation."""

    code: str = "INVALID_ACCOUNT_RECORD"

    def __init__(self, account_id: str | None, reason: str):
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Invalid account record {account_id}: {reason}")


# Column-related exceptions


class ColumnError(StatementKernelError):
    """Base exception for column schema and column state errors."""

    code: str = "COLUMN_ERROR"


class UnknownColumnKeyError(ColumnError):
    """Resize or visibility request for a key absent from the schema."""

    code: str = "UNKNOWN_COLUMN_KEY"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown column key: {key}")


class MissingColumnSchemaError(ColumnError):
    """No column schema was supplied for a statement."""

    code: str = "MISSING_COLUMN_SCHEMA"

    def __init__(self, statement: str):
        self.statement = statement
        super().__init__(f"No column schema for statement: {statement}")
