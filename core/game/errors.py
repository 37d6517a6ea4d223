"""Failures raised by the table engine."""


class TableError(Exception):
    """Base class for every failure reported to a caller."""

    code = "error"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(message or self.code)


class ValidationError(TableError):
    """An intent was rejected; the table was not touched."""

    code = "invalid-action"


class TableFullError(ValidationError):
    """Every seat at the table is taken."""

    code = "table-full"


class CodeTakenError(ValidationError):
    """The requested join code already points at another table."""

    code = "code-taken"


class NotFoundError(TableError):
    """Unknown session id or join code."""

    code = "not-found"
