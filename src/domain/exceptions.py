"""Domain errors raised by ledger services."""


class LedgerError(Exception):
    """Base class for ledger domain errors."""


class InterchangeFormatError(LedgerError):
    """Raised when an interchange document is structurally unreadable."""


class ImportAbortedError(LedgerError):
    """Raised when an import cannot proceed and must be rolled back."""


class InvalidAccountMoveError(LedgerError):
    """Raised when re-parenting an account would break the account tree."""


class AccountDeletionError(LedgerError):
    """Raised when an account cannot be deleted."""


__all__ = [
    "LedgerError",
    "InterchangeFormatError",
    "ImportAbortedError",
    "InvalidAccountMoveError",
    "AccountDeletionError",
]
