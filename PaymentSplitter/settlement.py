"""
Settlement Module

This module handles the settlement calculations for the payment splitter.

Features:
    - Split participants into debtors and lenders
    - Convert balances into payments using a greedy algorithm
    - Deterministic payment order (largest balances first, ties by id)
    - Post-settlement invariant check

Algorithm:
    1. Debtors: balance < 0, lenders: balance > 0 (zero balances are left out)
    2. Sort both by descending magnitude, ties broken by participant_id
    3. For each debtor, for each lender:
       - amount = min(|debtor balance|, |lender balance|)
       - skip if amount is 0 (one side already settled)
       - otherwise move amount from debtor to lender and record a payment
    4. One pass is enough: a debtor is offered every lender in turn, so the
       whole debt is placed before moving on

    The result is not guaranteed to use the fewest possible payments
    (cyclic debts can need more), but it never makes more than
    debtors + lenders - 1 of them.

Functions:
    partition: Split ledger participants into debtors and lenders.
    settlement_state: Report whether a ledger is settled.
    settle: Generate the payments that bring every balance to zero.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from errors import NumericDriftError
from participants import Participant
from splitter import Ledger, ZERO

logger = logging.getLogger(__name__)


class SettlementState(Enum):
    UNSETTLED = "unsettled"
    SETTLED = "settled"


@dataclass(frozen=True)
class Payment:
    """A transfer of amount from a debtor to a lender."""
    amount: Decimal
    debtor: Participant
    lender: Participant

    def as_tuple(self) -> tuple[str, str, Decimal]:
        return self.debtor.participant_id, self.lender.participant_id, self.amount

    def __str__(self) -> str:
        return f"{self.debtor} pays {self.amount:.2f} to {self.lender}"


def _by_magnitude(balances: dict[str, Decimal]):
    return lambda p: (-abs(balances[p.participant_id]), p.participant_id)


def partition(ledger: Ledger) -> tuple[list[Participant], list[Participant]]:
    """
    Split participants into debtors and lenders.

    Returns:
        tuple: (debtors, lenders), each sorted by descending balance
            magnitude, ties broken by participant_id. Participants with a
            zero balance are in neither list.
    """
    balances = ledger.balances()
    debtors = [p for p in ledger.participants if balances[p.participant_id] < 0]
    lenders = [p for p in ledger.participants if balances[p.participant_id] > 0]

    debtors.sort(key=_by_magnitude(balances))
    lenders.sort(key=_by_magnitude(balances))
    return debtors, lenders


def settlement_state(ledger: Ledger, tolerance: Decimal = ZERO) -> SettlementState:
    """Return SETTLED when every balance is within tolerance of zero."""
    if all(abs(balance) <= tolerance for balance in ledger.balances().values()):
        return SettlementState.SETTLED
    return SettlementState.UNSETTLED


def settle(ledger: Ledger, tolerance: Decimal = ZERO) -> list[Payment]:
    """
    Generate payments that settle every balance in the ledger.

    The ledger is updated in place: afterwards every balance is zero.

    Args:
        ledger: Ledger holding post-expense balances.
        tolerance: Largest residual balance accepted after settling.

    Returns:
        list[Payment]: Payments in generation order (outer loop over
            debtors, inner loop over lenders).

    Raises:
        NumericDriftError: If a balance is still further than tolerance
            from zero once all pairs have been visited.
    """
    debtors, lenders = partition(ledger)
    payments = []

    for debtor in debtors:
        for lender in lenders:
            # the most that can move is what one owes or the other is owed
            amount = min(abs(ledger.balance(debtor)), abs(ledger.balance(lender)))
            if amount == 0:
                continue

            ledger.transfer(debtor, lender, amount)
            payment = Payment(amount, debtor, lender)
            payments.append(payment)
            logger.debug("payment: %s", payment)

    residuals = {pid: b for pid, b in ledger.balances().items() if abs(b) > tolerance}
    if residuals:
        raise NumericDriftError(residuals)

    logger.info(
        "settled %d debtors and %d lenders with %d payments",
        len(debtors), len(lenders), len(payments)
    )
    return payments
