# app/api/v1/schemas/gst.py
"""Request and response schemas for GST endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Summary / set-off
# ---------------------------------------------------------------------------

class GSTSummaryRequest(BaseModel):
    """Period totals per head. All nine amounts are required."""

    output_igst: Decimal
    output_cgst: Decimal
    output_sgst: Decimal
    itc_igst: Decimal
    itc_cgst: Decimal
    itc_sgst: Decimal
    rcm_igst: Decimal
    rcm_cgst: Decimal
    rcm_sgst: Decimal


class GSTComponentSchema(BaseModel):
    igst: Decimal
    cgst: Decimal
    sgst: Decimal
    total: Decimal


class RoundedTotalsSchema(BaseModel):
    """Whole-rupee totals for dashboard display."""

    output_liability: int
    itc_available: int
    rcm_liability: int
    net_payable: int
    accumulated_itc: int


class GSTSummaryResponse(BaseModel):
    output_liability: GSTComponentSchema
    itc_available: GSTComponentSchema
    rcm_liability: GSTComponentSchema
    net_payable: GSTComponentSchema
    accumulated_itc: Decimal
    is_refundable: bool
    rounded: RoundedTotalsSchema


class SetOffResponse(BaseModel):
    cash_payable: GSTComponentSchema
    credit_carried_forward: GSTComponentSchema


# ---------------------------------------------------------------------------
# Compliance validation
# ---------------------------------------------------------------------------

class GSTInvoiceValidationRequest(BaseModel):
    gstin: str | None = None
    pan: str | None = None
    place_of_supply: str = Field(description="e.g. 'Outside India (Section 2-6)'")
    service_code: str | None = Field(default=None, description="HSN/SAC code")
    igst_rate: Decimal = Decimal("0")
    lut_number: str | None = None
    lut_date: date | None = None


class ValidationIssueSchema(BaseModel):
    code: str
    message: str


class GSTInvoiceValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str]
    issues: list[ValidationIssueSchema]


# ---------------------------------------------------------------------------
# ITC reconciliation health
# ---------------------------------------------------------------------------

class ITCHealthRequest(BaseModel):
    """GSTR-2B reconciliation counts and amounts for a period."""

    total_entries: int = Field(ge=0)
    matched_count: int = Field(default=0, ge=0)
    matched_amount: Decimal = Decimal("0")
    amount_mismatch_count: int = Field(default=0, ge=0)
    amount_mismatch_amount: Decimal = Decimal("0")
    not_in_2b_count: int = Field(default=0, ge=0)
    not_in_2b_amount: Decimal = Decimal("0")
    in_2b_only_count: int = Field(default=0, ge=0)
    in_2b_only_amount: Decimal = Decimal("0")
    pending_count: int = Field(default=0, ge=0)
    pending_amount: Decimal = Decimal("0")


class ITCActionSchema(BaseModel):
    code: str
    description: str


class ITCHealthResponse(BaseModel):
    match_rate: int
    status: str
    total_amount: Decimal
    matched_amount: Decimal
    itc_at_risk: Decimal
    follow_up_needed: int
    follow_up_amount: Decimal
    summary: str
    actions: list[ITCActionSchema]
