from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from app.core.errors import InvalidArgument
from app.schemas.pricing import (
    ErrorResponse,
    PlanPriceRequest,
    PlanPriceResponse,
    PlanQuoteItem,
    PlanQuoteResponse,
)
from app.services.protection_plan import (
    compute_plan_price,
    parse_region,
    parse_tier,
    plan_label,
    quote_protection_plans,
    region_for_host,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/protection-plans", tags=["protection-plans"])


def _bad_request(exc: InvalidArgument) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": exc.code, "message": exc.message})


@router.post("/price", response_model=PlanPriceResponse, responses={400: {"model": ErrorResponse}})
def price_plan(request: PlanPriceRequest) -> PlanPriceResponse:
    """Price one iAssure tier for a base fare. The price is not rounded."""
    try:
        region = parse_region(request.region)
        tier = parse_tier(request.tier)
        price = compute_plan_price(request.base_fare, region, tier)
    except InvalidArgument as exc:
        logger.info("Rejected protection plan price request: %s", exc)
        raise _bad_request(exc) from exc

    return PlanPriceResponse(
        region=region.value,
        tier=tier.value,
        label=plan_label(tier),
        base_fare=request.base_fare,
        price=price,
    )


@router.get("/quote", response_model=PlanQuoteResponse, responses={400: {"model": ErrorResponse}})
def quote_plans(
    base_fare: float = Query(..., description="Base fare (flight fare + taxes)"),
    region: str | None = Query(None, description="global or uk; derived from host when omitted"),
    host: str | None = Query(None, description="Site hostname, e.g. globehunters.co.uk"),
) -> PlanQuoteResponse:
    try:
        resolved = parse_region(region) if region else region_for_host(host)
        quotes = quote_protection_plans(base_fare, resolved)
    except InvalidArgument as exc:
        logger.info("Rejected protection plan quote request: %s", exc)
        raise _bad_request(exc) from exc

    return PlanQuoteResponse(
        region=resolved.value,
        base_fare=base_fare,
        items=[PlanQuoteItem(tier=q.tier.value, label=q.label, price=q.price) for q in quotes],
    )
