"""
Report Module

Human-readable output for a settled trip.

Layout of render_report():

    balances for Savannah 2022 before settling up:
    Ben: -812.40
    ...

    payments to settle up:
    Ben pays 812.40 to Greg
    ...

    balances for Savannah 2022 after settling up:
    Ben: 0.00
    ...

Functions:
    format_amount: Format a Decimal with 2 decimal places.
    format_balances: One "<name>: <balance>" line per participant.
    format_payments: One "<from> pays <amount> to <to>" line per payment.
    render_report: Full before/payments/after text report.
    render_html: HTML version of the report, used for PDF export.
"""

from decimal import Decimal
from html import escape
from typing import Iterable

from settlement import Payment
from splitter import round_cents
from trip import Trip


def format_amount(amount: Decimal) -> str:
    """Format an amount with 2 decimals; -0.00 is shown as 0.00."""
    rounded = round_cents(Decimal(amount))
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:.2f}"


def format_balances(balances: Iterable[tuple[str, Decimal]]) -> str:
    """Render balances sorted ascending by amount (ties by name)."""
    ordered = sorted(balances, key=lambda item: (item[1], item[0]))
    return "\n".join(f"{name}: {format_amount(balance)}" for name, balance in ordered)


def format_payments(payments: Iterable[Payment]) -> str:
    """Render payments in the order they were generated."""
    return "\n".join(
        f"{p.debtor} pays {format_amount(p.amount)} to {p.lender}" for p in payments
    )


def render_report(trip: Trip) -> str:
    """
    Render the before balances, the payments and the after balances.

    Settles the trip if it has not been settled yet.
    """
    trip.settle()
    title = f"{trip.label} {trip.year}"
    return "\n".join([
        f"balances for {title} before settling up:",
        format_balances(trip.balances_before()),
        "",
        "payments to settle up:",
        format_payments(trip.payments),
        "",
        f"balances for {title} after settling up:",
        format_balances(trip.balances()),
        "",
    ])


def render_html(trip: Trip) -> str:
    """Render the report as a standalone HTML page."""
    trip.settle()
    title = escape(f"{trip.label} {trip.year}")

    def balance_rows(balances):
        rows = "".join(
            f"<tr><td>{escape(name)}</td><td>{format_amount(balance)}</td></tr>"
            for name, balance in sorted(balances, key=lambda item: (item[1], item[0]))
        )
        return rows or '<tr><td colspan="2">No participants</td></tr>'

    payment_rows = "".join(
        f"<tr><td>{escape(str(p.debtor))}</td><td>{escape(str(p.lender))}</td>"
        f"<td>{format_amount(p.amount)}</td></tr>"
        for p in trip.payments
    ) or '<tr><td colspan="3">No payments needed</td></tr>'

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
        body {{ font-family: Arial, sans-serif; padding: 20px; color: #333; }}
        h1 {{ color: #667eea; border-bottom: 2px solid #667eea; padding-bottom: 10px; }}
        h2 {{ color: #444; margin-top: 25px; }}
        table {{ width: 100%; border-collapse: collapse; margin: 15px 0; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background: #667eea; color: white; }}
    </style>
</head>
<body>
    <h1>{title}</h1>

    <h2>Balances before settling up</h2>
    <table>
        <tr><th>Participant</th><th>Balance</th></tr>
        {balance_rows(trip.balances_before())}
    </table>

    <h2>Payments to settle up</h2>
    <table>
        <tr><th>From</th><th>To</th><th>Amount</th></tr>
        {payment_rows}
    </table>

    <h2>Balances after settling up</h2>
    <table>
        <tr><th>Participant</th><th>Balance</th></tr>
        {balance_rows(trip.balances())}
    </table>
</body>
</html>
"""
