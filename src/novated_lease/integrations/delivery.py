"""Quote delivery — image, document rendering and persistence.

Each collaborator runs independently.  A failure is logged and recorded
as a ``CollaboratorOutcome``; the quote itself is never affected.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from pydantic import BaseModel, ConfigDict, Field

from novated_lease.integrations.images import build_scene_prompt
from novated_lease.models.results import Quote

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Collaborator interfaces
# ═══════════════════════════════════════════════════════════════════════════

class QuoteRenderer(Protocol):
    def render(self, quote: Quote) -> bytes: ...


class QuoteStore(Protocol):
    def save(self, record: dict[str, Any]) -> str: ...


class SceneImageRequester(Protocol):
    def request_image(self, prompt: str) -> str: ...


# ═══════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════

class ClientDetails(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    employer: str | None = None


class CollaboratorOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    collaborator: str
    succeeded: bool
    detail: str = ""


class QuoteDelivery(BaseModel):
    """What delivery produced.  ``quote`` carries the image if one was made."""

    model_config = ConfigDict(frozen=True)

    quote: Quote
    document: bytes | None = None
    record_id: str | None = None
    outcomes: list[CollaboratorOutcome] = Field(default_factory=list)

    @property
    def failures(self) -> list[CollaboratorOutcome]:
        return [o for o in self.outcomes if not o.succeeded]


def build_quote_record(quote: Quote, client: ClientDetails | None = None) -> dict[str, Any]:
    """Flatten a quote into one persistence row."""
    client = client or ClientDetails()
    req = quote.request
    fin = quote.finance
    rc = quote.running_costs
    fb = quote.fringe_benefit
    return {
        "reference": quote.reference,
        "created_at": quote.created_at.isoformat(),
        "rule_set": quote.rule_set,
        "status": "draft",
        # Client
        "client_name": client.name,
        "client_email": client.email,
        "client_phone": client.phone,
        "employer": client.employer,
        # Vehicle
        "vehicle_make": req.make,
        "vehicle_model": req.model,
        "vehicle_year": req.year,
        "vehicle_price": req.vehicle_price,
        "vehicle_class": quote.vehicle_class.value,
        "body_style": req.body_style,
        "engine_size": req.engine_size_litres,
        "fuel_type": req.fuel_type,
        "is_ev": req.is_zero_emission,
        "state": req.jurisdiction.value,
        "annual_kms": req.annual_distance_km,
        # Finance
        "term_years": req.term_years,
        "lender_id": quote.lender_id,
        "base_rate": fin.annual_rate,
        "all_up_rate": quote.all_up_rate.annual_rate_pct,
        "naf": fin.naf,
        "establishment_fee": fin.establishment_fee,
        "brokerage": fin.brokerage,
        "balloon_payment": fin.balloon,
        "monthly_payment": fin.monthly_payment,
        "stamp_duty": quote.duty.duty,
        "registration": quote.duty.registration_fee,
        # Running costs
        "insurance": rc.insurance,
        "fuel_cost": rc.energy,
        "maintenance_cost": rc.service,
        "tyre_cost": rc.tyres,
        "management_fee": rc.management_fee,
        # Tax
        "income": req.annual_income,
        "pay_cycle": req.pay_frequency.value,
        "fbt_method": fb.method.value,
        "fbt_policy": fb.policy,
        "business_use_percent": fb.business_use_percent,
        "total_annual_cost": quote.total_annual_cost,
        "pre_tax_amount": fb.pre_tax_amount,
        "post_tax_amount": fb.post_tax_amount,
        "tax_savings": fb.total_tax_saving,
        "net_annual_cost": fb.net_annual_cost,
        "pay_amount": quote.periodic_out_of_pocket,
        "image_url": quote.image_reference,
    }


# ═══════════════════════════════════════════════════════════════════════════
# Delivery
# ═══════════════════════════════════════════════════════════════════════════

def _attempt(name: str, quote: Quote, action: Callable[[], Any]) -> tuple[Any, CollaboratorOutcome]:
    try:
        value = action()
    except Exception as exc:
        logger.warning(
            "Collaborator failed",
            extra={"collaborator": name, "quote_reference": quote.reference, "error": str(exc)},
            exc_info=True,
        )
        return None, CollaboratorOutcome(collaborator=name, succeeded=False, detail=str(exc))
    return value, CollaboratorOutcome(collaborator=name, succeeded=True)


def deliver_quote(
    quote: Quote,
    client: ClientDetails | None = None,
    renderer: QuoteRenderer | None = None,
    store: QuoteStore | None = None,
    image_requester: SceneImageRequester | None = None,
) -> QuoteDelivery:
    """Run the configured collaborators for a finished quote.

    Order: image (so the rendered document and stored record can carry
    it), then rendering, then persistence.  Unconfigured collaborators are
    skipped without an outcome.
    """
    outcomes: list[CollaboratorOutcome] = []

    if image_requester is not None:
        req = quote.request
        prompt = build_scene_prompt(req.make, req.model, req.year, quote.vehicle_class)
        url, outcome = _attempt("scene_image", quote, lambda: image_requester.request_image(prompt))
        outcomes.append(outcome)
        if url:
            quote = quote.model_copy(update={"image_reference": url})

    document = None
    if renderer is not None:
        document, outcome = _attempt("renderer", quote, lambda: renderer.render(quote))
        outcomes.append(outcome)

    record_id = None
    if store is not None:
        record = build_quote_record(quote, client)
        record_id, outcome = _attempt("store", quote, lambda: store.save(record))
        outcomes.append(outcome)

    logger.info(
        "Quote delivered",
        extra={
            "quote_reference": quote.reference,
            "collaborators": len(outcomes),
            "failures": sum(1 for o in outcomes if not o.succeeded),
        },
    )
    return QuoteDelivery(quote=quote, document=document, record_id=record_id, outcomes=outcomes)
