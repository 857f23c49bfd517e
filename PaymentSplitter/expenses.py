"""
Expenses Module

This module defines the expense record for the payment splitter.

Features:
    - Track who paid and who benefits
    - Support for partial beneficiary lists ("everyone except Dave")
    - Fail-fast validation: an expense that cannot be apportioned is
      rejected when it is created, never when balances are computed

Data Model:
    Expense:
        - amount: Decimal (must be > 0, finite)
        - payer: Participant who paid
        - beneficiaries: ParticipantGroup (non-empty)
        - note: string or None

Functions:
    to_amount: Convert user input to a Decimal amount.
    new_expense: Create a validated expense.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from errors import InvalidExpenseError
from groups import ParticipantGroup
from participants import Participant


Amount = Union[Decimal, int, float, str]


def to_amount(value: Amount) -> Decimal:
    """
    Convert a monetary amount to Decimal.

    Floats go through str() first so 88.90 becomes Decimal("88.9"),
    not its binary approximation.

    Raises:
        InvalidExpenseError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise InvalidExpenseError(f"amount must be a number, got: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidExpenseError(f"amount must be a number, got: {value!r}") from None
    if not amount.is_finite():
        raise InvalidExpenseError(f"amount must be finite, got: {value!r}")
    return amount


class Expense:
    """
    Represents a single expense in the trip.

    Attributes:
        amount (Decimal): Amount of the expense (> 0).
        payer (Participant): Who paid.
        beneficiaries (ParticipantGroup): Who the cost is split between.
        note (str | None): Optional description.
    """

    __slots__ = ("_amount", "_payer", "_beneficiaries", "_note")

    def __init__(
        self,
        amount: Amount,
        payer: Participant,
        beneficiaries: ParticipantGroup,
        note: Optional[str] = None
    ):
        amount = to_amount(amount)
        if amount <= 0:
            raise InvalidExpenseError(f"amount must be a positive number, got: {amount}")

        if not isinstance(payer, Participant):
            raise InvalidExpenseError(f"payer must be a Participant, got: {payer!r}")

        if not isinstance(beneficiaries, ParticipantGroup):
            beneficiaries = ParticipantGroup(beneficiaries)
        if beneficiaries.is_empty():
            raise InvalidExpenseError(
                f"expense of {amount} paid by {payer} has no beneficiaries"
            )

        self._amount = amount
        self._payer = payer
        self._beneficiaries = beneficiaries
        self._note = note.strip() if note and note.strip() else None

    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def payer(self) -> Participant:
        return self._payer

    @property
    def beneficiaries(self) -> ParticipantGroup:
        return self._beneficiaries

    @property
    def note(self) -> Optional[str]:
        return self._note

    def participants(self) -> set:
        """Everyone this expense touches: the payer and the beneficiaries."""
        return {self._payer, *self._beneficiaries}

    def __repr__(self) -> str:
        return (
            f"Expense(amount={self._amount}, payer='{self._payer}', "
            f"beneficiaries={self._beneficiaries.ids()})"
        )


def new_expense(
    amount: Amount,
    payer: Participant,
    beneficiaries: ParticipantGroup,
    note: Optional[str] = None
) -> Expense:
    """Create an expense; see Expense for validation rules."""
    return Expense(amount, payer, beneficiaries, note=note)
