"""Exception types raised by the Budgetify core."""

from __future__ import annotations


class BudgetifyError(Exception):
    """Base class for all Budgetify errors."""


class ValidationError(BudgetifyError, ValueError):
    """Raised for invalid user input or unknown enumeration values."""


class ShareTransitionError(BudgetifyError):
    """Raised when a split-expense share is moved out of a final status."""


class NotFoundError(BudgetifyError, KeyError):
    """Raised when an id does not exist in the repository."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages readable
        return str(self.args[0]) if self.args else ''


class StorageError(BudgetifyError):
    """Raised when a repository backend cannot read or write its data."""
