"""
Exceptions raised when mutating a VolleySplit store
"""


class LedgerError(Exception):
    """Base exception for ledger mutations"""
    pass


class ValidationError(LedgerError):
    """Input rejected (blank name, negative cost, ...)"""
    pass


class InvalidWeightError(ValidationError):
    """Participation weight outside the allowed levels"""
    pass


class DuplicatePlayerError(LedgerError):
    """Player name already on the event roster"""
    pass


class UnknownPlayerError(LedgerError):
    """Player id not on the event roster"""
    pass


class UnknownSessionError(LedgerError):
    """Session id not in the event"""
    pass


class UnknownEventError(LedgerError):
    """Event id not in the store"""
    pass
