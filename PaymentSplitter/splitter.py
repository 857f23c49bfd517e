"""
Splitter Module

This module handles the expense splitting logic for the payment splitter.

Features:
    - Equal splitting among beneficiaries
    - Per-participant balance bookkeeping
    - Decimal-safe rounding with an exact zero-sum

Data Model:
    Input - participants: registered Participant objects
    Input - expenses: Expense objects, applied in sequence order

    Balances (owned by the Ledger, keyed by participant_id):
        - Decimal, positive = owed money, negative = owes money

Rounding:
    Each beneficiary is debited amount / N rounded to the cent
    (ROUND_HALF_UP). The payer is credited exactly what was debited, so the
    payer absorbs the sub-cent remainder and the balances always sum to 0.

Functions:
    round_cents: Round a Decimal to 2 decimal places.
    split_amount: Compute the per-head share of an amount.
    calculate_balances: Apply expenses to a fresh ledger.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from errors import InvalidExpenseError
from expenses import Expense
from participants import Participant, ParticipantRegistry

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round_cents(value: Decimal) -> Decimal:
    """Round a Decimal to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def split_amount(amount: Decimal, count: int) -> tuple[Decimal, Decimal]:
    """
    Split an amount equally between count beneficiaries.

    Args:
        amount: Expense amount.
        count: Number of beneficiaries (> 0).

    Returns:
        tuple: (share, charged) where share is the rounded per-head amount
            and charged = share * count is the total actually apportioned.

    Raises:
        InvalidExpenseError: If count is not positive.
    """
    if count <= 0:
        raise InvalidExpenseError("cannot split an expense between zero beneficiaries")
    share = round_cents(amount / Decimal(count))
    return share, share * count


class Ledger:
    """
    Balances of every participant of a trip.

    The ledger is the only owner of balance state; expense application and
    settlement both go through it.
    """

    def __init__(self, participants: Iterable[Participant]):
        self._registry = (
            participants if isinstance(participants, ParticipantRegistry)
            else ParticipantRegistry(participants)
        )
        self._balances = {pid: ZERO for pid in self._registry.ids()}

    @property
    def participants(self) -> ParticipantRegistry:
        return self._registry

    def apply_expense(self, expense: Expense) -> None:
        """
        Credit the payer and debit every beneficiary their share.

        Raises:
            UnknownParticipantError: If the payer or a beneficiary is not
                registered in this ledger.
        """
        self._registry.require(expense.payer, "trip (payer)")
        for beneficiary in expense.beneficiaries:
            self._registry.require(beneficiary, "trip (beneficiary)")

        share, charged = split_amount(expense.amount, len(expense.beneficiaries))

        self._balances[expense.payer.participant_id] += charged
        for beneficiary in expense.beneficiaries:
            self._balances[beneficiary.participant_id] -= share

        logger.debug(
            "applied %s paid by %s: %s each for %s (absorbed %s)",
            expense.amount, expense.payer, share,
            ", ".join(expense.beneficiaries.ids()), expense.amount - charged
        )

    def apply_all(self, expenses: Iterable[Expense]) -> None:
        """Apply expenses in sequence order."""
        for expense in expenses:
            self.apply_expense(expense)

    def balance(self, participant: Participant) -> Decimal:
        return self._balances[self._registry.require(participant).participant_id]

    def balances(self) -> dict[str, Decimal]:
        """Snapshot of all balances keyed by participant_id."""
        return dict(self._balances)

    def total(self) -> Decimal:
        """Sum of all balances; 0 whenever the ledger is consistent."""
        return sum(self._balances.values(), ZERO)

    def transfer(self, debtor: Participant, lender: Participant, amount: Decimal) -> None:
        """Move amount from debtor to lender, bringing both towards zero."""
        self._balances[debtor.participant_id] += amount
        self._balances[lender.participant_id] -= amount

    def __repr__(self) -> str:
        return f"Ledger({self._balances})"


def calculate_balances(participants: Iterable[Participant], expenses: Iterable[Expense]) -> Ledger:
    """
    Calculate per-participant balances from expenses.

    For each expense:
        1. Each beneficiary's balance decreases by (amount / num_beneficiaries)
        2. The payer's balance increases by what was apportioned

    Args:
        participants: Participants of the trip.
        expenses: Expenses to apply, in order.

    Returns:
        Ledger: Ledger holding the resulting balances.
    """
    ledger = Ledger(participants)
    ledger.apply_all(expenses)
    return ledger
