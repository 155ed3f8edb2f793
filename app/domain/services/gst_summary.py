# app/domain/services/gst_summary.py
"""
GST tax summary for a return period.

Combines output tax, Input Tax Credit (ITC) and reverse charge (RCM) into a
net position per head (IGST / CGST / SGST).

Tax paid under reverse charge is available as ITC in the same period, so the
RCM amounts appear twice: as ``rcm_liability`` (reported separately in
GSTR-3B table 3.1(d)) and inside ``itc_available``.

``net_payable`` is a coarse indicator: each head is netted on its own and the
three nets are summed. It does NOT apply the statutory cross-utilization
order. Use ``calculate_statutory_set_off`` when the actual cash payable per
head is needed.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

from app.domain.models.gst import (
    GSTComponent,
    GSTSummaryInput,
    GSTSummaryResult,
    StatutorySetOff,
)

logger = logging.getLogger("gst_summary")

ZERO = Decimal("0")

_HEADS = ("igst", "cgst", "sgst")

# Credit head -> liability heads it may discharge, in order (CGST Act s.49 / rule 88A).
# CGST and SGST credit never offset each other.
_UTILIZATION_ORDER = (
    ("igst", ("igst", "cgst", "sgst")),
    ("cgst", ("cgst", "igst")),
    ("sgst", ("sgst", "igst")),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def calculate_gst_summary(data: GSTSummaryInput) -> GSTSummaryResult:
    """
    Build the period summary.

    - output liability: output amounts as given
    - ITC available: B2B ITC + RCM paid, per head
    - RCM liability: RCM amounts as given
    - net payable: output - ITC available, per head
    - accumulated ITC: the excess credit when the net total is negative
    """
    output_liability = GSTComponent.of(data.output_igst, data.output_cgst, data.output_sgst)
    itc_available = GSTComponent.of(
        data.itc_igst + data.rcm_igst,
        data.itc_cgst + data.rcm_cgst,
        data.itc_sgst + data.rcm_sgst,
    )
    rcm_liability = GSTComponent.of(data.rcm_igst, data.rcm_cgst, data.rcm_sgst)

    net_payable = calculate_net_payable(
        output_igst=output_liability.igst,
        output_cgst=output_liability.cgst,
        output_sgst=output_liability.sgst,
        itc_igst=itc_available.igst,
        itc_cgst=itc_available.cgst,
        itc_sgst=itc_available.sgst,
    )
    accumulated_itc = -net_payable.total if net_payable.total < ZERO else ZERO

    logger.debug(
        "GST summary: output=%s itc=%s rcm=%s net=%s accumulated_itc=%s",
        output_liability.total,
        itc_available.total,
        rcm_liability.total,
        net_payable.total,
        accumulated_itc,
    )

    return GSTSummaryResult(
        output_liability=output_liability,
        itc_available=itc_available,
        rcm_liability=rcm_liability,
        net_payable=net_payable,
        accumulated_itc=accumulated_itc,
    )


def calculate_net_payable(
    *,
    output_igst: Decimal,
    output_cgst: Decimal,
    output_sgst: Decimal,
    itc_igst: Decimal,
    itc_cgst: Decimal,
    itc_sgst: Decimal,
) -> GSTComponent:
    """Per-head ``output - itc``; a negative head is excess credit on that head."""
    return GSTComponent.of(
        _dec(output_igst) - _dec(itc_igst),
        _dec(output_cgst) - _dec(itc_cgst),
        _dec(output_sgst) - _dec(itc_sgst),
    )


def round_to_rupee(amount: Any) -> int:
    """Round to whole rupees, halves away from zero. For display only."""
    return int(_dec(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_statutory_set_off(output: GSTComponent, itc: GSTComponent) -> StatutorySetOff:
    """
    Set off ``itc`` against ``output`` in GSTR-3B utilization order.

    IGST credit goes first against IGST, then CGST, then SGST liability.
    CGST credit then goes against CGST, then IGST; SGST credit against SGST,
    then IGST. Whatever liability is left is payable in cash; whatever credit
    is left carries forward.

    Separate from ``calculate_gst_summary``, whose net figure stays the
    simple per-head difference.
    """
    liability = {head: getattr(output, head) for head in _HEADS}
    credit = {head: getattr(itc, head) for head in _HEADS}

    for credit_head, targets in _UTILIZATION_ORDER:
        for target in targets:
            used = min(credit[credit_head], liability[target])
            if used <= ZERO:
                continue
            credit[credit_head] -= used
            liability[target] -= used

    result = StatutorySetOff(
        cash_payable=GSTComponent.of(liability["igst"], liability["cgst"], liability["sgst"]),
        credit_carried_forward=GSTComponent.of(credit["igst"], credit["cgst"], credit["sgst"]),
    )
    logger.debug(
        "Statutory set-off: cash=%s carried_forward=%s",
        result.cash_payable.total,
        result.credit_carried_forward.total,
    )
    return result


def aggregate_summary_input(invoices: Iterable[Mapping[str, Any]]) -> GSTSummaryInput:
    """
    Reduce invoice records into a ``GSTSummaryInput``.

    - ``direction == "outward"``: output tax
    - inward with ``reverse_charge``: RCM liability
    - other inward with ``itc_eligible``: B2B ITC (ineligible credit is dropped)

    A missing ``direction`` means outward; a value other than "outward" or
    "inward" raises ``ValueError``. Missing tax amounts count as zero.
    """
    totals = {
        f"{bucket}_{head}": ZERO
        for bucket in ("output", "itc", "rcm")
        for head in _HEADS
    }
    outward_count = inward_count = 0

    for inv in invoices:
        direction = inv.get("direction") or "outward"
        if not isinstance(direction, str) or direction.lower() not in ("outward", "inward"):
            raise ValueError(
                f"Invalid invoice direction {direction!r}: expected 'outward' or 'inward'"
            )
        if direction.lower() == "outward":
            bucket = "output"
            outward_count += 1
        else:
            inward_count += 1
            if inv.get("reverse_charge"):
                bucket = "rcm"
            elif inv.get("itc_eligible"):
                bucket = "itc"
            else:
                continue

        for head in _HEADS:
            totals[f"{bucket}_{head}"] += _dec(inv.get(f"{head}_amount"))

    logger.info(
        "Aggregated %d outward and %d inward invoices into GST summary input",
        outward_count,
        inward_count,
    )
    return GSTSummaryInput(**totals)


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _dec(val: Any) -> Decimal:
    """Convert a numeric value to Decimal; ``None`` counts as zero."""
    if val is None:
        return ZERO
    if isinstance(val, Decimal):
        return val
    return Decimal(str(val))
