# app/api/v1/schemas/invoices.py
"""Request and response schemas for invoice numbering endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class InvoiceNumberRequest(BaseModel):
    fiscal_year: str = Field(description="Fiscal year YYYY-YY, e.g. 2025-26")
    sequence: int = Field(ge=1)


class NextInvoiceNumberRequest(BaseModel):
    """
    ``fiscal_year`` defaults to the current Indian fiscal year.
    Only numbers of that fiscal year are considered.
    """

    fiscal_year: str | None = Field(default=None, description="Fiscal year YYYY-YY")
    existing_numbers: list[str] = Field(default_factory=list)


class InvoiceNumberResponse(BaseModel):
    fiscal_year: str
    sequence: int
    invoice_number: str
