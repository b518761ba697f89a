"""
Custom exception hierarchy for region store operations.

Exception Hierarchy:
    RevenueStoreError (base)
    ├── NotFoundTable    - Backing table absent (tolerated for ALE listings)
    ├── DuplicateError   - Unique id violation on create
    ├── ConflictError    - Delete blocked by referencing records
    ├── NotFoundError    - Update/delete target does not exist
    └── UnknownError     - Anything else, original message preserved

    ValidationError      - Input validation failed
"""


class RevenueStoreError(Exception):
    """Base exception for all region store errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class NotFoundTable(RevenueStoreError):
    """
    Backing table does not exist.

    Only the ALE region is allowed to be missing its tables; list
    operations for ALE degrade to empty results instead of raising.
    """

    def __init__(self, message: str, details: str = None, region: str = None):
        super().__init__(message, details)
        self.region = region


class DuplicateError(RevenueStoreError):
    """A row with the same unique id already exists."""

    def __init__(self, message: str, details: str = None, key: str = None):
        super().__init__(message, details)
        self.key = key


class ConflictError(RevenueStoreError):
    """
    Operation blocked by dependent rows.

    Raised when deleting an account that still has revenue records.
    """

    def __init__(self, message: str, details: str = None, key: str = None):
        super().__init__(message, details)
        self.key = key


class NotFoundError(RevenueStoreError):
    """Update or delete targeted a row that does not exist."""

    def __init__(self, message: str, details: str = None, key: str = None):
        super().__init__(message, details)
        self.key = key


class UnknownError(RevenueStoreError):
    """
    Unclassified backend failure.

    The original error message is kept in `details` so it can be shown
    to the operator as-is.
    """


class ValidationError(Exception):
    """
    Input validation failed.

    Used for validating user input before processing.
    """

    def __init__(self, field: str, message: str, value: any = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"{field}: {message}")

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value!r})"
        return f"{self.field}: {self.message}"
