"""FastAPI server — HTTP boundary over ``PricingService``.

Run with:
    uvicorn parking_pricing.api.server:app --reload --port 8000

Or:
    python -m parking_pricing.api.server

Endpoints:
    GET    /health
    GET    /locations/{location_id}/hierarchy                   — tree with effective pricing
    GET    /nodes/{node_id}/pricing                             — resolve (own / inherited / default)
    POST   /nodes/{node_id}/price                               — hourly price for a booking context
    POST   /nodes/{node_id}/price/explain                       — price + calculation breakdown text
    POST   /nodes/{node_id}/quote                               — price a whole stay
    PUT    /{level}/{node_id}/pricing                           — replace own config
    PATCH  /{level}/{node_id}/pricing                           — own config = effective + overrides
    DELETE /{level}/{node_id}/pricing                           — remove own config
    POST   /{level}/{node_id}/pricing/copy-to-children          — fill children without config
    GET    /discounts?operator_id=                              — active discounts
    POST   /discounts                                           — create discount
    PATCH  /discounts/{discount_id}                             — partial update
    DELETE /discounts/{discount_id}                             — deactivate
    POST   /locations/{location_id}/analytics/performance       — pricing performance report
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from parking_pricing.api.narrative import describe_calculation
from parking_pricing.config.discount import DiscountConfiguration
from parking_pricing.config.pricing import PricingConfig
from parking_pricing.config.settings import configure_logging, get_settings
from parking_pricing.errors import ConflictError, NotFoundError, PricingError, ValidationError
from parking_pricing.models.hierarchy import HierarchyLevel
from parking_pricing.models.results import (
    BookingContext,
    EffectivePricingNode,
    PricedResult,
    PriceQuote,
    PricingInheritanceResult,
    PricingPerformance,
)
from parking_pricing.service import PricingService
from parking_pricing.storage.memory import InMemoryPricingStore
from parking_pricing.storage.seed import load_store_from_yaml

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[PricingError], int] = {
    ValidationError: 422,
    NotFoundError: 404,
    ConflictError: 409,
}


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class QuoteRequest(BaseModel):
    """Request body for /quote: a booking context plus the end of the stay."""
    context: BookingContext
    end: dt.datetime


class ExplainResponse(BaseModel):
    inheritance: PricingInheritanceResult
    result: PricedResult
    breakdown: str


class CopyToChildrenResponse(BaseModel):
    updated: list[str]


class CreateDiscountRequest(BaseModel):
    created_by: str = Field(min_length=1)
    discount: dict[str, Any]


class PerformanceRequest(BaseModel):
    bookings: list[dict[str, Any]] = Field(default_factory=list)
    occupancy_ratio: float | None = Field(
        default=None, ge=0, le=1,
        description="Override the location's current occupancy",
    )


# ═══════════════════════════════════════════════════════════════════════════
# App factory
# ═══════════════════════════════════════════════════════════════════════════

def _default_service() -> PricingService:
    settings = get_settings()
    if settings.seed_file:
        store = load_store_from_yaml(settings.seed_file)
        logger.info("Seeded store from %s", settings.seed_file)
    else:
        store = InMemoryPricingStore()
    return PricingService(store, settings)


def get_service(request: Request) -> PricingService:
    return request.app.state.pricing_service


def create_app(service: PricingService | None = None) -> FastAPI:
    app = FastAPI(
        title="Parking Pricing Engine API",
        version="1.0",
        description=(
            "Hierarchical pricing resolution (Location → Section → Zone → Spot) "
            "and occupancy-based rate computation for parking bookings."
        ),
    )
    app.state.pricing_service = service or _default_service()

    @app.exception_handler(PricingError)
    async def _pricing_error(request: Request, exc: PricingError) -> JSONResponse:
        status = _STATUS_BY_ERROR.get(type(exc), 400)
        if status == 400:
            logger.warning("Unmapped pricing error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status, content={"error": exc.code, "detail": str(exc)})

    _register_routes(app)
    return app


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.get("/locations/{location_id}/hierarchy", response_model=EffectivePricingNode)
    def get_hierarchy(location_id: str, svc: PricingService = Depends(get_service)):
        return svc.get_pricing_hierarchy(location_id)

    @app.get("/nodes/{node_id}/pricing", response_model=PricingInheritanceResult)
    def resolve_pricing(
        node_id: str,
        level: HierarchyLevel | None = Query(default=None),
        svc: PricingService = Depends(get_service),
    ):
        return svc.resolve(node_id, level)

    @app.post("/nodes/{node_id}/price", response_model=PricedResult)
    def price_node(node_id: str, context: BookingContext, svc: PricingService = Depends(get_service)):
        return svc.price(node_id, context)

    @app.post("/nodes/{node_id}/price/explain", response_model=ExplainResponse)
    def explain_price(node_id: str, context: BookingContext, svc: PricingService = Depends(get_service)):
        inheritance, result = svc.explain(node_id, context)
        return ExplainResponse(
            inheritance=inheritance,
            result=result,
            breakdown=describe_calculation(inheritance, result, svc.settings.currency),
        )

    @app.post("/nodes/{node_id}/quote", response_model=PriceQuote)
    def quote_stay(node_id: str, req: QuoteRequest, svc: PricingService = Depends(get_service)):
        return svc.quote(node_id, req.context, req.end)

    @app.put("/{level}/{node_id}/pricing", response_model=PricingInheritanceResult)
    def put_pricing(
        level: HierarchyLevel,
        node_id: str,
        config: dict[str, Any],
        svc: PricingService = Depends(get_service),
    ):
        svc.create_or_update(level, node_id, config)
        return svc.resolve(node_id, level)

    @app.patch("/{level}/{node_id}/pricing", response_model=PricingConfig)
    def patch_pricing(
        level: HierarchyLevel,
        node_id: str,
        overrides: dict[str, Any],
        svc: PricingService = Depends(get_service),
    ):
        return svc.override_inherited(level, node_id, overrides)

    @app.delete("/{level}/{node_id}/pricing", status_code=204)
    def delete_pricing(level: HierarchyLevel, node_id: str, svc: PricingService = Depends(get_service)):
        svc.delete(level, node_id)
        return Response(status_code=204)

    @app.post("/{level}/{node_id}/pricing/copy-to-children", response_model=CopyToChildrenResponse)
    def copy_pricing_to_children(
        level: HierarchyLevel,
        node_id: str,
        recursive: bool = Query(default=False),
        override_existing: bool = Query(default=False),
        svc: PricingService = Depends(get_service),
    ):
        return CopyToChildrenResponse(
            updated=svc.copy_to_children(level, node_id, recursive, override_existing),
        )

    @app.get("/discounts", response_model=list[DiscountConfiguration])
    def list_discounts(
        operator_id: str | None = Query(default=None),
        svc: PricingService = Depends(get_service),
    ):
        return svc.list_discount_configurations(operator_id)

    @app.post("/discounts", response_model=DiscountConfiguration, status_code=201)
    def create_discount(req: CreateDiscountRequest, svc: PricingService = Depends(get_service)):
        return svc.create_discount_configuration(req.discount, req.created_by)

    @app.patch("/discounts/{discount_id}", response_model=DiscountConfiguration)
    def update_discount(discount_id: str, updates: dict[str, Any], svc: PricingService = Depends(get_service)):
        return svc.update_discount_configuration(discount_id, updates)

    @app.delete("/discounts/{discount_id}", status_code=204)
    def delete_discount(discount_id: str, svc: PricingService = Depends(get_service)):
        svc.delete_discount_configuration(discount_id)
        return Response(status_code=204)

    @app.post("/locations/{location_id}/analytics/performance", response_model=PricingPerformance)
    def pricing_performance(
        location_id: str,
        req: PerformanceRequest,
        svc: PricingService = Depends(get_service),
    ):
        return svc.analyze_performance(location_id, req.bookings, req.occupancy_ratio)


app = create_app()


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn

    configure_logging()
    uvicorn.run("parking_pricing.api.server:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
