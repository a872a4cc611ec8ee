from __future__ import annotations

from pydantic import BaseModel, Field


class PlanPriceRequest(BaseModel):
    """Request for a single protection-plan price."""

    base_fare: float = Field(..., description="Base fare (flight fare + taxes)")
    region: str = Field(..., description="Pricing region: global or uk")
    tier: str = Field(..., description="Plan tier: basic, premium or all")


class PlanPriceResponse(BaseModel):
    region: str
    tier: str
    label: str
    base_fare: float
    price: float = Field(..., description="Unrounded add-on price")


class PlanQuoteItem(BaseModel):
    tier: str
    label: str
    price: float


class PlanQuoteResponse(BaseModel):
    region: str
    base_fare: float
    items: list[PlanQuoteItem]


class ErrorResponse(BaseModel):
    code: str
    message: str
