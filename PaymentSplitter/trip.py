"""
Trip Module

The trip ties participants, expenses, balances and payments together.

Lifecycle:
    1. Construction validates participants and expenses, applies every
       expense to a fresh ledger and snapshots the resulting balances
    2. The first settle() call generates payments; later calls return the
       same payments
    3. Nothing else mutates a trip

Classes:
    Trip: Aggregate root for one trip/event.

Functions:
    new_trip: Create a trip.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from errors import DuplicateParticipantError, UnknownParticipantError
from expenses import Expense
from participants import Participant, ParticipantRegistry
from settlement import Payment, SettlementState, partition, settle, settlement_state
from splitter import Ledger, ZERO

logger = logging.getLogger(__name__)


def _sorted_balances(balances: dict[str, Decimal]) -> list[tuple[str, Decimal]]:
    """Order balances ascending by amount, ties by participant_id."""
    return sorted(balances.items(), key=lambda item: (item[1], item[0]))


def _validate_tolerance(tolerance) -> Decimal:
    """
    Validate the post-settlement tolerance.

    Raises:
        ValueError: If tolerance is not a finite, non-negative number.
    """
    if tolerance is None:
        return ZERO
    try:
        value = tolerance if isinstance(tolerance, Decimal) else Decimal(str(tolerance))
    except InvalidOperation:
        raise ValueError(f"tolerance must be a number, got: {tolerance!r}") from None
    if not value.is_finite() or value < 0:
        raise ValueError(f"tolerance must be a finite, non-negative number, got: {tolerance}")
    return value


class Trip:
    """
    A trip with its participants and expenses.

    Attributes:
        label (str): Where/what the trip was, e.g. "Savannah".
        year (int): Year of the trip.
        participants (ParticipantRegistry): Everyone on the trip.
        expenses (tuple[Expense]): Expenses in the order they were applied.
    """

    def __init__(
        self,
        label: str,
        year: int,
        participants: Iterable[Participant],
        expenses: Iterable[Expense],
        tolerance: Optional[Decimal] = None
    ):
        if not isinstance(label, str) or not label.strip():
            raise ValueError("label must be a non-empty string")
        if isinstance(year, bool) or not isinstance(year, int):
            raise ValueError(f"year must be an integer, got: {year!r}")

        self.label = label.strip()
        self.year = year
        self.tolerance = _validate_tolerance(tolerance)
        self.participants = self._register(participants)
        self.expenses = tuple(expenses)

        self._ledger = Ledger(self.participants)
        for index, expense in enumerate(self.expenses):
            self._check_expense(index, expense)
            self._ledger.apply_expense(expense)

        self._before = self._ledger.balances()
        debtors, lenders = partition(self._ledger)
        self.debtors = tuple(debtors)
        self.lenders = tuple(lenders)
        self._payments: Optional[list[Payment]] = None

        logger.info(
            "trip %s %d: %d participants, %d expenses, %d debtors, %d lenders",
            self.label, self.year, len(self.participants), len(self.expenses),
            len(self.debtors), len(self.lenders)
        )

    @staticmethod
    def _register(participants: Iterable[Participant]) -> ParticipantRegistry:
        registry = ParticipantRegistry()
        for participant in participants:
            if participant in registry:
                # the same object listed twice is one person
                continue
            if participant.participant_id in registry:
                raise DuplicateParticipantError(participant.participant_id)
            registry.add(participant)
        return registry

    def _check_expense(self, index: int, expense: Expense) -> None:
        context = f"trip {self.label} {self.year} (expense #{index + 1})"
        for participant in sorted(expense.participants(), key=lambda p: p.participant_id):
            if participant not in self.participants:
                raise UnknownParticipantError(participant.participant_id, context)

    @property
    def state(self) -> SettlementState:
        return settlement_state(self._ledger, self.tolerance)

    @property
    def payments(self) -> list[Payment]:
        """Payments generated by settle(); empty before settling."""
        return list(self._payments or [])

    def balances(self) -> list[tuple[str, Decimal]]:
        """Current balances, ascending. All zero once settled."""
        return _sorted_balances(self._ledger.balances())

    def balances_before(self) -> list[tuple[str, Decimal]]:
        """Balances after applying expenses and before settling, ascending."""
        return _sorted_balances(self._before)

    def total(self) -> Decimal:
        return self._ledger.total()

    def settle(self) -> list[tuple[str, str, Decimal]]:
        """
        Settle the trip.

        Returns:
            list: (from_id, to_id, amount) per payment, in generation order.

        Raises:
            NumericDriftError: If balances cannot be brought to zero.
        """
        if self._payments is None:
            self._payments = settle(self._ledger, self.tolerance)
        return [payment.as_tuple() for payment in self._payments]

    def __repr__(self) -> str:
        return f"Trip('{self.label}', {self.year}, participants={len(self.participants)}, expenses={len(self.expenses)})"


def new_trip(
    label: str,
    year: int,
    participants: Iterable[Participant],
    expenses: Iterable[Expense],
    tolerance: Optional[Decimal] = None
) -> Trip:
    """Create a trip; expenses are applied immediately."""
    return Trip(label, year, participants, expenses, tolerance=tolerance)
