# app/domain/services/gst_calculator.py
"""Split the GST on a taxable amount into IGST or CGST + SGST by place of supply."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping

from app.domain.models.gst import GSTCalculation

logger = logging.getLogger("gst_calculator")

VALID_GST_RATES = (0, 5, 12, 18, 28)

_HUNDRED = Decimal("100")
ZERO = Decimal("0")


def is_valid_gst_rate(rate: Any) -> bool:
    try:
        return Decimal(str(rate)) in {Decimal(r) for r in VALID_GST_RATES}
    except ArithmeticError:
        return False


def calculate_gst(
    amount: Any,
    gst_rate: Any,
    supplier_state_code: str,
    customer_state_code: str,
    cess_rate: Any = 0,
) -> GSTCalculation:
    """
    Inter-state supplies carry IGST at the full rate; intra-state supplies
    carry CGST and SGST at half the rate each. A 0% rate (exports under
    LUT, nil-rated goods) carries no GST.

    Compensation cess is levied on the taxable amount whatever the place of
    supply, and is included in ``total_gst``.
    """
    if not is_valid_gst_rate(gst_rate):
        raise ValueError(
            f"Invalid GST rate: {gst_rate}. Must be one of {', '.join(map(str, VALID_GST_RATES))}"
        )

    try:
        cess = Decimal(str(cess_rate))
    except ArithmeticError:
        raise ValueError(f"Invalid cess rate: {cess_rate}")
    if not cess.is_finite() or cess < 0:
        raise ValueError(f"Invalid cess rate: {cess_rate}")

    taxable = Decimal(str(amount))
    rate = Decimal(str(gst_rate))
    cess_amount = taxable * cess / _HUNDRED

    if rate == 0:
        return GSTCalculation(
            taxable_amount=taxable,
            cess_rate=cess,
            cess_amount=cess_amount,
            total_gst=cess_amount,
            total_amount=taxable + cess_amount,
        )

    if supplier_state_code != customer_state_code:
        igst = taxable * rate / _HUNDRED
        return GSTCalculation(
            taxable_amount=taxable,
            igst_rate=rate,
            igst_amount=igst,
            cess_rate=cess,
            cess_amount=cess_amount,
            total_gst=igst + cess_amount,
            total_amount=taxable + igst + cess_amount,
        )

    half_rate = rate / 2
    cgst = taxable * half_rate / _HUNDRED
    sgst = taxable * half_rate / _HUNDRED
    logger.debug("Intra-state supply in %s: CGST=%s SGST=%s", supplier_state_code, cgst, sgst)
    return GSTCalculation(
        taxable_amount=taxable,
        cgst_rate=half_rate,
        sgst_rate=half_rate,
        cgst_amount=cgst,
        sgst_amount=sgst,
        cess_rate=cess,
        cess_amount=cess_amount,
        total_gst=cgst + sgst + cess_amount,
        total_amount=taxable + cgst + sgst + cess_amount,
    )


def calculate_invoice_gst(
    line_items: Iterable[Mapping[str, Any]],
    supplier_state_code: str,
    customer_state_code: str,
) -> GSTCalculation:
    """
    GST for a whole invoice: each line (``amount``, ``gst_rate``, optional
    ``cess_rate``) is calculated on its own and the amounts are summed.

    The rate fields are display values taken from the last line; with no
    lines every field is zero.
    """
    totals = {
        "taxable_amount": ZERO,
        "igst_amount": ZERO,
        "cgst_amount": ZERO,
        "sgst_amount": ZERO,
        "cess_amount": ZERO,
        "total_gst": ZERO,
        "total_amount": ZERO,
    }
    rates = {"igst_rate": ZERO, "cgst_rate": ZERO, "sgst_rate": ZERO, "cess_rate": ZERO}
    count = 0

    for item in line_items:
        calc = calculate_gst(
            item["amount"],
            item["gst_rate"],
            supplier_state_code,
            customer_state_code,
            cess_rate=item.get("cess_rate") or 0,
        )
        for field in totals:
            totals[field] += getattr(calc, field)
        rates = {field: getattr(calc, field) for field in rates}
        count += 1

    logger.debug("Invoice GST over %d line items: total_gst=%s", count, totals["total_gst"])
    return GSTCalculation(**totals, **rates)
