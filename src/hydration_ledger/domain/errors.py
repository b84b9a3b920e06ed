"""Errors raised by ledger operations."""


class LedgerError(Exception):
    """Base error for rejected ledger operations."""

    kind = "LedgerError"


class InvalidGoal(LedgerError):
    """Daily goal outside the accepted range."""

    kind = "InvalidGoal"


class InvalidAmount(LedgerError):
    """Logged amount outside the accepted per-entry range."""

    kind = "InvalidAmount"


class AlreadyRegistered(LedgerError):
    """Account is already registered."""

    kind = "AlreadyRegistered"


class NotRegistered(LedgerError):
    """Account has no registration record."""

    kind = "NotRegistered"


class TooManyDates(LedgerError):
    """Historical query asked for too many day keys."""

    kind = "TooManyDates"
