class TableCrudError(Exception):
    """Base exception for tablecrud errors."""


class InvalidIdentifierError(TableCrudError, ValueError):
    """A table, column, filter key or sort term is not a safe SQL identifier."""


class PayloadError(TableCrudError, ValueError):
    """A payload cannot be turned into a valid statement."""


class EmitError(TableCrudError):
    """The event sink failed after the mutation succeeded."""
