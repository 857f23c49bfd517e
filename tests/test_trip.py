"""
Tests for the trip aggregate: construction, validation and settling.
"""

from decimal import Decimal

import pytest

from config.settings import DEFAULT_DATASET
from dataset import load_trip
from errors import DuplicateParticipantError, InvalidExpenseError, UnknownParticipantError
from expenses import Expense
from groups import group
from participants import Participant
from settlement import SettlementState
from trip import Trip, new_trip


class TestConstruction:

    def test_balances_sorted_ascending(self, people) -> None:
        a, b = people["A"], people["B"]
        trip = new_trip("Test", 2024, group(a, b), [Expense(100, a, group(a, b))])
        assert trip.balances() == [("B", Decimal("-50.00")), ("A", Decimal("50.00"))]

    def test_debtors_and_lenders(self, people) -> None:
        a, b, c = people["A"], people["B"], people["C"]
        trip = Trip("Test", 2024, [a, b, c], [Expense(50, a, group(b))])
        assert trip.debtors == (b,)
        assert trip.lenders == (a,)

    def test_same_object_listed_twice_is_one_person(self, people) -> None:
        a = people["A"]
        trip = Trip("Test", 2024, [a, a], [])
        assert len(trip.participants) == 1

    def test_duplicate_identifier_rejected(self) -> None:
        with pytest.raises(DuplicateParticipantError):
            Trip("Test", 2024, group(Participant("Ben"), Participant("Ben")), [])

    def test_unknown_payer_rejected(self, people) -> None:
        a, b = people["A"], people["B"]
        with pytest.raises(UnknownParticipantError) as exc:
            Trip("Test", 2024, [a], [Expense(10, b, group(a))])
        assert exc.value.participant_id == "B"
        assert "expense #1" in str(exc.value)

    def test_unknown_beneficiary_rejected(self, people) -> None:
        a, b = people["A"], people["B"]
        with pytest.raises(UnknownParticipantError):
            Trip("Test", 2024, [a], [Expense(10, a, group(a, b))])

    def test_empty_beneficiaries_never_reach_the_trip(self, people) -> None:
        a = people["A"]
        with pytest.raises(InvalidExpenseError):
            Trip("Test", 2024, [a], [Expense(10, a, group())])

    @pytest.mark.parametrize("label, year", [("", 2024), ("  ", 2024), ("Test", "2024"), ("Test", True)])
    def test_label_and_year_validated(self, people, label, year) -> None:
        with pytest.raises(ValueError):
            Trip(label, year, [people["A"]], [])

    @pytest.mark.parametrize("tolerance", ["-0.01", -1, "nan", "Infinity", "lots"])
    def test_tolerance_validated(self, people, tolerance) -> None:
        with pytest.raises(ValueError):
            Trip("Test", 2024, [people["A"]], [], tolerance=tolerance)

    def test_tolerance_accepts_numbers(self, people) -> None:
        trip = Trip("Test", 2024, [people["A"]], [], tolerance=0.01)
        assert trip.tolerance == Decimal("0.01")


class TestSettle:

    def test_two_people(self, people) -> None:
        a, b = people["A"], people["B"]
        trip = Trip("Test", 2024, group(a, b), [Expense(100, a, group(a, b))])

        assert trip.state is SettlementState.UNSETTLED
        assert trip.settle() == [("B", "A", Decimal("50.00"))]
        assert trip.balances() == [("A", Decimal("0.00")), ("B", Decimal("0.00"))]
        assert trip.state is SettlementState.SETTLED

    def test_three_people(self, people) -> None:
        a, b, c = people["A"], people["B"], people["C"]
        trip = Trip(
            "Test", 2024, group(a, b, c),
            [Expense(90, a, group(a, b, c)), Expense(30, b, group(b, c))]
        )

        assert trip.balances_before() == [
            ("C", Decimal("-45")), ("B", Decimal("-15")), ("A", Decimal("60"))
        ]
        payments = trip.settle()
        assert payments == [("C", "A", Decimal("45")), ("B", "A", Decimal("15"))]
        assert sum(amount for _, _, amount in payments) == Decimal("60")

    def test_settle_is_idempotent(self, people) -> None:
        a, b = people["A"], people["B"]
        trip = Trip("Test", 2024, group(a, b), [Expense(100, a, group(a, b))])
        first = trip.settle()
        assert trip.settle() == first
        assert len(trip.payments) == 1

    def test_before_snapshot_survives_settling(self, people) -> None:
        a, b = people["A"], people["B"]
        trip = Trip("Test", 2024, group(a, b), [Expense(100, a, group(a, b))])
        trip.settle()
        assert trip.balances_before() == [("B", Decimal("-50.00")), ("A", Decimal("50.00"))]

    def test_no_expenses(self, people) -> None:
        trip = Trip("Test", 2024, group(people["A"], people["B"]), [])
        assert trip.state is SettlementState.SETTLED
        assert trip.settle() == []
        assert trip.payments == []


class TestSavannah:
    """The bundled ten-person trip."""

    @pytest.fixture
    def trip(self) -> Trip:
        return load_trip(DEFAULT_DATASET)

    def test_shape(self, trip) -> None:
        assert (trip.label, trip.year) == ("Savannah", 2022)
        assert len(trip.participants) == 10
        assert len(trip.expenses) == 24

    def test_zero_sum_before_and_after(self, trip) -> None:
        assert trip.total() == 0
        trip.settle()
        assert trip.total() == 0
        assert all(balance == 0 for _, balance in trip.balances())

    def test_payment_volume_matches_debt(self, trip) -> None:
        debt = sum(-balance for _, balance in trip.balances_before() if balance < 0)
        payments = trip.settle()
        assert sum(amount for _, _, amount in payments) == debt

    def test_payments_are_valid(self, trip) -> None:
        debtors = {p.participant_id for p in trip.debtors}
        lenders = {p.participant_id for p in trip.lenders}
        for debtor, lender, amount in trip.settle():
            assert amount > 0
            assert debtor != lender
            assert debtor in debtors
            assert lender in lenders

    def test_payments_are_reproducible(self, trip) -> None:
        assert load_trip(DEFAULT_DATASET).settle() == trip.settle()
