"""Error types raised by the budget core."""


class BudgetError(Exception):
    """Base class for recoverable budget errors."""


class ValidationError(BudgetError):
    """Input was rejected before anything was written."""


class PersistenceError(BudgetError):
    """The store failed to apply a write or delete."""


class NotFoundError(BudgetError):
    """No record exists for the requested id."""
