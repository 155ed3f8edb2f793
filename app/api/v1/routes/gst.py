# app/api/v1/routes/gst.py
"""
GST endpoints: period summary, statutory set-off, invoice compliance check,
ITC reconciliation health.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from app.api.v1.envelope import ok
from app.api.v1.schemas.gst import (
    GSTComponentSchema,
    GSTInvoiceValidationRequest,
    GSTInvoiceValidationResponse,
    GSTSummaryRequest,
    GSTSummaryResponse,
    ITCActionSchema,
    ITCHealthRequest,
    ITCHealthResponse,
    RoundedTotalsSchema,
    SetOffResponse,
    ValidationIssueSchema,
)
from app.domain.models.gst import GSTComponent, GSTInvoice, GSTSummaryInput
from app.domain.models.itc import ITCHealthInput
from app.domain.services.gst_summary import (
    calculate_gst_summary,
    calculate_statutory_set_off,
    round_to_rupee,
)
from app.domain.services.gst_validation import validate_gst_invoice
from app.domain.services.itc_health import action_description, calculate_itc_health

logger = logging.getLogger("api.v1.gst")

router = APIRouter(prefix="/gst", tags=["GST"])


def _component(c: GSTComponent) -> GSTComponentSchema:
    return GSTComponentSchema(igst=c.igst, cgst=c.cgst, sgst=c.sgst, total=c.total)


@router.post("/summary", response_model=dict)
async def gst_summary(body: GSTSummaryRequest):
    """
    Net GST position for a period from aggregated output, ITC and RCM amounts.

    ``net_payable`` nets each head independently; see ``/gst/set-off`` for
    the statutory utilization order.
    """
    summary = calculate_gst_summary(GSTSummaryInput(**body.model_dump()))

    resp = GSTSummaryResponse(
        output_liability=_component(summary.output_liability),
        itc_available=_component(summary.itc_available),
        rcm_liability=_component(summary.rcm_liability),
        net_payable=_component(summary.net_payable),
        accumulated_itc=summary.accumulated_itc,
        is_refundable=summary.accumulated_itc > 0,
        rounded=RoundedTotalsSchema(
            output_liability=round_to_rupee(summary.output_liability.total),
            itc_available=round_to_rupee(summary.itc_available.total),
            rcm_liability=round_to_rupee(summary.rcm_liability.total),
            net_payable=round_to_rupee(summary.net_payable.total),
            accumulated_itc=round_to_rupee(summary.accumulated_itc),
        ),
    )
    return ok(data=resp.model_dump())


@router.post("/set-off", response_model=dict)
async def gst_set_off(body: GSTSummaryRequest):
    """Cash payable per head after applying ITC (including RCM credit) in GSTR-3B order."""
    summary = calculate_gst_summary(GSTSummaryInput(**body.model_dump()))
    set_off = calculate_statutory_set_off(summary.output_liability, summary.itc_available)

    resp = SetOffResponse(
        cash_payable=_component(set_off.cash_payable),
        credit_carried_forward=_component(set_off.credit_carried_forward),
    )
    return ok(data=resp.model_dump())


@router.post("/validate-invoice", response_model=dict)
async def validate_invoice(body: GSTInvoiceValidationRequest):
    """Check an invoice's GST fields against the export / LUT rules."""
    result = validate_gst_invoice(GSTInvoice(**body.model_dump()))

    resp = GSTInvoiceValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        issues=[
            ValidationIssueSchema(code=issue.name, message=issue.message)
            for issue in result.issues
        ],
    )
    message = None if result.is_valid else f"{len(result.issues)} compliance issue(s) found"
    return ok(data=resp.model_dump(), message=message)


@router.post("/itc-health", response_model=dict)
async def itc_health(body: ITCHealthRequest):
    """Match rate, ITC at risk and follow-up actions from GSTR-2B reconciliation counts."""
    health = calculate_itc_health(ITCHealthInput(**body.model_dump()))

    resp = ITCHealthResponse(
        match_rate=health.match_rate,
        status=health.status.value,
        total_amount=health.total_amount,
        matched_amount=health.matched_amount,
        itc_at_risk=health.itc_at_risk,
        follow_up_needed=health.follow_up_needed,
        follow_up_amount=health.follow_up_amount,
        summary=health.summary,
        actions=[
            ITCActionSchema(code=action.value, description=action_description(action))
            for action in health.actions
        ],
    )
    return ok(data=resp.model_dump())
