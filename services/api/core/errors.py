"""
Error types raised by the customer sheet store.
Routers translate these into HTTP responses.
"""


class ConfigurationError(RuntimeError):
    """The proxy cannot reach its spreadsheet with the current settings."""


class CredentialsError(ConfigurationError):
    """Service-account material is missing or unreadable."""


class SheetSchemaError(ValueError):
    """Header row is missing a column the operation needs (or is empty)."""

    def __init__(self, message: str, column: str | None = None) -> None:
        super().__init__(message)
        self.column = column


class RecordNotFound(LookupError):
    """No data row matches the requested identifier."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Record {record_id!r} not found")
        self.record_id = record_id


class EmptySheet(RecordNotFound):
    """Sheet has no data rows below the header."""


class SheetNotFound(LookupError):
    """Spreadsheet metadata has no tab with the configured title."""
