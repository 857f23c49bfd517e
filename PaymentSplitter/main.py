"""
PaymentSplitter - FastAPI Web Backend

JSON API over the settlement core. The API is stateless: every request
carries the whole trip document (see dataset.py for the format) and gets
back balances and payments.

Endpoints:
    POST /settle  - Balances before, payments, balances after
    POST /report  - Plain-text report
    GET  /health  - Health check

Usage:
    uvicorn main:app --reload
"""

from decimal import Decimal

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from config.settings import get_settings
from dataset import TripSpec, build_trip
from report import render_report
from trip import Trip


# =============================================================================
# Pydantic Models for Response Validation
# =============================================================================

class BalanceResponse(BaseModel):
    """Balance of one participant."""
    participant: str
    balance: Decimal


class PaymentResponse(BaseModel):
    """One settling payment."""
    from_participant: str
    to_participant: str
    amount: Decimal


class SettleResponse(BaseModel):
    """Response model for a settled trip."""
    label: str
    year: int
    balances_before: list[BalanceResponse]
    payments: list[PaymentResponse]
    balances_after: list[BalanceResponse]


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Payment Splitter",
    description="Settle up shared trip expenses",
    version="1.0.0"
)


# =============================================================================
# Helper Functions
# =============================================================================

def _settled_trip(trip_data: TripSpec) -> Trip:
    """Build and settle a trip, mapping validation errors to 400."""
    try:
        trip = build_trip(trip_data, tolerance=get_settings().tolerance)
        trip.settle()
        return trip
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _balances(balances: list) -> list[BalanceResponse]:
    return [BalanceResponse(participant=pid, balance=amount) for pid, amount in balances]


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/settle", response_model=SettleResponse)
async def settle_trip(trip_data: TripSpec):
    """
    Settle a trip.

    Request flow:
        1. Validate the trip document (Pydantic)
        2. Build the trip, applying every expense
        3. Generate payments
        4. Return balances before/after and the payments
    """
    try:
        trip = _settled_trip(trip_data)
        return SettleResponse(
            label=trip.label,
            year=trip.year,
            balances_before=_balances(trip.balances_before()),
            payments=[
                PaymentResponse(from_participant=debtor, to_participant=lender, amount=amount)
                for debtor, lender, amount in trip.settle()
            ],
            balances_after=_balances(trip.balances())
        )

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/report", response_class=PlainTextResponse)
async def trip_report(trip_data: TripSpec):
    """Settle a trip and return the text report."""
    try:
        return PlainTextResponse(render_report(_settled_trip(trip_data)))

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "Payment Splitter"}


# =============================================================================
# Run with: python main.py
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
