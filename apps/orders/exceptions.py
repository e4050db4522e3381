"""Exceptions raised by the pure ledger functions."""


class LedgerError(Exception):
    """Base exception for ledger computations."""
    pass


class InvalidPeriodError(LedgerError):
    """Statistics period is not one of week, month or year."""
    pass
