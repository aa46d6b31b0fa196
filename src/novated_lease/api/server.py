"""FastAPI server — HTTP access to the novated lease quote engine.

Run with:
    uvicorn novated_lease.api.server:app --reload --port 8000

Or:
    novated-lease-api

Endpoints:
    GET  /health                    — liveness
    GET  /config/defaults           — active rule set as JSON
    POST /quote                     — price one lease (partial vehicle data filled from catalog)
    POST /quote/narrative           — price + plain-English interpretation
    GET  /lenders                   — current lender rates
    GET  /lenders/history           — rate change log
    PUT  /lenders/{lender_id}/rate  — replace a lender's rate
    POST /lenders/compare           — one schedule per lender, cheapest first
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from novated_lease.api.log_config import setup_logging
from novated_lease.api.narrative import generate_comparison_narrative, generate_narrative
from novated_lease.api.settings import Settings
from novated_lease.config.quote import QuoteConfig, load_quote_config
from novated_lease.config.request import Jurisdiction, build_lease_request
from novated_lease.engine.duty import assess_duty
from novated_lease.engine.orchestrator import generate_quote
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError
from novated_lease.finance.lenders import LenderRateRegistry, compare_lenders
from novated_lease.integrations.catalog import StaticVehicleCatalog, apply_catalog
from novated_lease.integrations.delivery import ClientDetails, deliver_quote
from novated_lease.integrations.images import HttpSceneImageRequester
from novated_lease.models.results import Quote

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class QuoteRequestBody(BaseModel):
    """Request body for /quote.  ``request`` is validated into a LeaseRequest."""
    request: dict[str, Any] = Field(
        description="Lease request fields. Vehicle attributes missing here are filled from "
                    "the catalog when make/model/year match. "
                    "Example: {'vehicle_price': 55000, 'jurisdiction': 'VIC', 'term_years': 3, "
                    "'annual_distance_km': 15000, 'annual_income': 90000}",
    )
    client: ClientDetails | None = Field(default=None, description="Optional client contact details")


class QuoteResponse(BaseModel):
    quote: dict[str, Any]
    delivery: list[dict[str, Any]] = Field(default_factory=list)


class RateUpdate(BaseModel):
    rate: float = Field(gt=0, description="New annual nominal rate (decimal, e.g. 0.069)")
    reason: str = ""


class CompareRequest(BaseModel):
    """Request body for /lenders/compare."""
    vehicle_price: float = Field(gt=0)
    jurisdiction: Jurisdiction
    term_years: int = Field(ge=1, le=5)
    is_zero_emission: bool = False


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Settings | None = None,
    config: QuoteConfig | None = None,
    catalog: StaticVehicleCatalog | None = None,
) -> FastAPI:
    """Build the app with its rule set, lender registry and optional collaborators."""
    settings = settings or Settings()
    if config is None:
        config = load_quote_config(settings.config_path) if settings.config_path else QuoteConfig()

    app = FastAPI(
        title="Novated Lease Quote API",
        version="1.0",
        description=(
            "Prices Australian novated leases: stamp duty, finance schedule, all-up rate, "
            "running costs and the pre-/post-tax salary split."
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.config = config
    app.state.registry = LenderRateRegistry.from_config(config.lenders)
    app.state.catalog = catalog or StaticVehicleCatalog([])
    app.state.image_requester = (
        HttpSceneImageRequester(
            api_url=settings.image_api_url,
            api_key=settings.image_api_key,
            model=settings.image_model,
            timeout=settings.http_timeout_seconds,
        )
        if settings.image_api_key else None
    )

    _register_error_handlers(app)
    _register_routes(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuoteValidationError)
    async def _validation_error(request: Request, exc: QuoteValidationError):
        return JSONResponse(status_code=422, content={"error": str(exc), "errors": exc.errors})

    @app.exception_handler(ConfigurationInconsistency)
    async def _configuration_error(request: Request, exc: ConfigurationInconsistency):
        logger.error("Configuration inconsistency", extra={"table": exc.table, "key": str(exc.key)})
        return JSONResponse(status_code=500, content=jsonable(exc.to_dict()))


def jsonable(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v if v is None or isinstance(v, (str, int, float, bool)) else str(v) for k, v in payload.items()}


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

def _price(app: FastAPI, body: QuoteRequestBody) -> Quote:
    data = apply_catalog(body.request, app.state.catalog)
    lease_request = build_lease_request(data)
    return generate_quote(lease_request, app.state.config, app.state.registry)


def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    def health_check():
        """Health check for deployment platforms."""
        return {"status": "ok", "rule_set": app.state.config.name}

    @app.get("/config/defaults")
    def get_defaults():
        """Active rule set (tax, duty, finance, running costs, FBT, lenders) as JSON."""
        return app.state.config.model_dump(mode="json")

    @app.post("/quote", response_model=QuoteResponse)
    def quote(body: QuoteRequestBody):
        """Price one lease.

        When a scene image service is configured the quote is returned with
        its ``image_reference`` attached; a failing service never fails the quote.
        """
        result = _price(app, body)
        outcomes: list[dict[str, Any]] = []
        if app.state.image_requester is not None:
            delivery = deliver_quote(result, client=body.client, image_requester=app.state.image_requester)
            result = delivery.quote
            outcomes = [o.model_dump() for o in delivery.outcomes]
        return QuoteResponse(quote=result.model_dump(mode="json"), delivery=outcomes)

    @app.post("/quote/narrative")
    def quote_with_narrative(body: QuoteRequestBody):
        """Price one lease and return ONLY the narrative plus headline numbers."""
        result = _price(app, body)
        return {
            "reference": result.reference,
            "narrative": generate_narrative(result),
            "headline_metrics": {
                "monthly_payment": result.finance.monthly_payment,
                "all_up_rate_pct": result.all_up_rate.annual_rate_pct,
                "total_annual_cost": result.total_annual_cost,
                "annual_tax_saving": result.fringe_benefit.total_tax_saving,
                "periodic_out_of_pocket": result.periodic_out_of_pocket,
                "monthly_saving_vs_purchase": result.comparison.monthly_saving,
            },
        }

    @app.get("/lenders")
    def list_lenders():
        """Current lender rates and the cheapest lender."""
        best = app.state.registry.best_lender()
        return {
            "rates": app.state.registry.current_rates(),
            "best": {"lender_id": best[0], "rate": best[1]} if best else None,
        }

    @app.get("/lenders/history")
    def lender_history():
        """Every rate change since startup, oldest first."""
        return [c.model_dump(mode="json") for c in app.state.registry.history()]

    @app.put("/lenders/{lender_id}/rate")
    def update_lender_rate(lender_id: str, body: RateUpdate):
        """Replace one lender's rate.  Unknown lenders and rates above 50% are rejected."""
        change = app.state.registry.update_rate(lender_id, body.rate, body.reason)
        return change.model_dump(mode="json")

    @app.post("/lenders/compare")
    def lenders_compare(body: CompareRequest):
        """One finance schedule per registered lender, cheapest monthly payment first."""
        config: QuoteConfig = app.state.config
        duty = assess_duty(body.jurisdiction, body.vehicle_price, body.is_zero_emission, config.duty)
        quotes = compare_lenders(
            app.state.registry,
            body.vehicle_price,
            duty.duty,
            duty.registration_fee,
            body.term_years,
            config.finance,
        )
        return {
            "quotes": [
                {
                    "lender_id": q.lender_id,
                    "nominal_rate": q.nominal_rate,
                    "monthly_payment": q.schedule.monthly_payment,
                    "balloon": q.schedule.balloon,
                    "all_up_rate_pct": q.all_up_rate.annual_rate_pct,
                    "total_cost": q.total_cost,
                }
                for q in quotes
            ],
            "comparison_narrative": generate_comparison_narrative(quotes),
        }


app = create_app()


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn

    settings = Settings()
    setup_logging(settings.log_level, settings.service_name)
    uvicorn.run(
        "novated_lease.api.server:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
