"""Shared test fixtures for the GSTHive tax core test suite."""

from decimal import Decimal

import pytest

from app.domain.models.gst import GSTInvoice


@pytest.fixture
def export_invoice() -> GSTInvoice:
    """A compliant export of services under LUT."""
    return GSTInvoice(
        gstin="29ABCDE1234F1Z5",
        place_of_supply="Outside India (Section 2-6)",
        service_code="99831100",
        igst_rate=Decimal("0"),
        lut_number="AD290325012345L",
    )


@pytest.fixture
def sample_invoices() -> list[dict]:
    """Invoice records as the persistence layer would hand them over."""
    return [
        {
            "direction": "outward",
            "igst_amount": 18000,
            "cgst_amount": 0,
            "sgst_amount": 0,
        },
        {
            "direction": "outward",
            "igst_amount": 0,
            "cgst_amount": "900.50",
            "sgst_amount": "900.50",
        },
        {
            "direction": "inward",
            "itc_eligible": True,
            "igst_amount": 5000,
            "cgst_amount": None,
            "sgst_amount": None,
        },
        {
            "direction": "inward",
            "itc_eligible": False,
            "igst_amount": 700,
            "cgst_amount": 0,
            "sgst_amount": 0,
        },
        {
            "direction": "inward",
            "reverse_charge": True,
            "itc_eligible": True,
            "igst_amount": 3600,
            "cgst_amount": 0,
            "sgst_amount": 0,
        },
    ]
