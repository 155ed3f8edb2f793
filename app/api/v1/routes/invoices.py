# app/api/v1/routes/invoices.py
"""
Invoice numbering endpoints.

Numbers are computed from the caller-supplied list of existing numbers;
assignment is not reserved, so concurrent callers must serialize on their side.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from app.api.v1.envelope import ok
from app.api.v1.schemas.invoices import (
    InvoiceNumberRequest,
    InvoiceNumberResponse,
    NextInvoiceNumberRequest,
)
from app.domain.services.invoice_numbering import (
    current_fiscal_year,
    format_invoice_number,
    next_invoice_number,
    next_invoice_sequence,
)

logger = logging.getLogger("api.v1.invoices")

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post("/number", response_model=dict)
async def invoice_number(body: InvoiceNumberRequest):
    """Format a given sequence as an invoice number."""
    number = format_invoice_number(body.fiscal_year, body.sequence)
    resp = InvoiceNumberResponse(
        fiscal_year=body.fiscal_year,
        sequence=body.sequence,
        invoice_number=number,
    )
    return ok(data=resp.model_dump())


@router.post("/next-number", response_model=dict)
async def get_next_invoice_number(body: NextInvoiceNumberRequest):
    """Next invoice number for a fiscal year, given the numbers already issued."""
    fiscal_year = body.fiscal_year or current_fiscal_year()
    sequence = next_invoice_sequence(fiscal_year, body.existing_numbers)
    number = next_invoice_number(fiscal_year, body.existing_numbers)

    logger.info("Next invoice number %s for %s", number, fiscal_year)

    resp = InvoiceNumberResponse(
        fiscal_year=fiscal_year,
        sequence=sequence,
        invoice_number=number,
    )
    return ok(data=resp.model_dump())
