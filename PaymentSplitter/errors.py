"""
Errors Module

Exception types raised by the payment splitter.

All validation errors derive from ValueError so callers (CLI, API handlers)
can treat them uniformly as bad input. NumericDriftError derives from
AssertionError: it signals a broken invariant, not bad input.

Classes:
    PaymentSplitterError: Base class for all splitter errors.
    InvalidExpenseError: Expense cannot be apportioned.
    DuplicateParticipantError: Participant id registered twice.
    UnknownParticipantError: Participant id not part of the trip.
    DatasetError: Trip data file is malformed.
    NumericDriftError: Balances not zero after settlement.
"""


class PaymentSplitterError(Exception):
    """Base class for all payment splitter errors."""


class InvalidExpenseError(PaymentSplitterError, ValueError):
    """Raised when an expense has no beneficiaries or an invalid amount."""


class DuplicateParticipantError(PaymentSplitterError, ValueError):
    """Raised when two participants share the same identifier."""

    def __init__(self, participant_id: str):
        super().__init__(f"participant '{participant_id}' is already registered")
        self.participant_id = participant_id


class UnknownParticipantError(PaymentSplitterError, ValueError):
    """Raised when a participant is referenced outside its trip."""

    def __init__(self, participant_id: str, context: str = "trip"):
        super().__init__(f"participant '{participant_id}' is not part of the {context}")
        self.participant_id = participant_id


class DatasetError(PaymentSplitterError, ValueError):
    """Raised when a trip data file cannot be turned into a trip."""


class NumericDriftError(PaymentSplitterError, AssertionError):
    """Raised when a balance is left non-zero after settlement."""

    def __init__(self, residuals: dict):
        details = ", ".join(f"{pid}={amount}" for pid, amount in sorted(residuals.items()))
        super().__init__(f"balances not settled within tolerance: {details}")
        self.residuals = residuals
