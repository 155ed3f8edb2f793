# app/domain/services/itc_health.py
"""
ITC reconciliation health for the dashboard.

Scores how much of the period's purchase register matched GSTR-2B, how much
credit is at risk, and which follow-ups are needed.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from app.domain.models.itc import ITCAction, ITCHealthInput, ITCHealthResult, ITCHealthStatus

logger = logging.getLogger("itc_health")

# Minimum match rate (percent) for each status
EXCELLENT_THRESHOLD = 95
GOOD_THRESHOLD = 80
WARNING_THRESHOLD = 60

ACTION_DESCRIPTIONS: dict[ITCAction, str] = {
    ITCAction.FOLLOW_UP_VENDORS: "Follow up with vendors who haven't filed their returns",
    ITCAction.VERIFY_INVOICES: "Verify invoice details against your purchase records",
    ITCAction.RECONCILE_PENDING: "Complete reconciliation for pending entries",
    ITCAction.REVIEW_MISMATCHES: "Review and resolve amount mismatches",
}
DEFAULT_ACTION_DESCRIPTION = "Take action on ITC entries"


def itc_health_status(match_rate: int | Decimal) -> ITCHealthStatus:
    if match_rate >= EXCELLENT_THRESHOLD:
        return ITCHealthStatus.EXCELLENT
    if match_rate >= GOOD_THRESHOLD:
        return ITCHealthStatus.GOOD
    if match_rate >= WARNING_THRESHOLD:
        return ITCHealthStatus.WARNING
    return ITCHealthStatus.CRITICAL


def action_description(action: ITCAction | str) -> str:
    try:
        return ACTION_DESCRIPTIONS[ITCAction(action)]
    except ValueError:
        return DEFAULT_ACTION_DESCRIPTION


def format_inr(amount: Decimal) -> str:
    """
    Indian digit grouping (lakh / crore), up to three decimals.

    >>> format_inr(Decimal("1234567.5"))
    '12,34,567.5'
    """
    amount = Decimal(amount).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, _, frac = f"{abs(amount):f}".partition(".")
    frac = frac.rstrip("0")

    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail])

    return f"{sign}{grouped}.{frac}" if frac else f"{sign}{grouped}"


def calculate_itc_health(data: ITCHealthInput) -> ITCHealthResult:
    """
    Match rate is matched / total entries, rounded half-up to a whole
    percent; a period with no entries counts as fully matched.

    ITC at risk is the credit on amount mismatches plus entries missing
    from GSTR-2B. Follow-up covers both sides of the 2B gap.
    """
    if data.total_entries > 0:
        match_rate = int(
            (Decimal(data.matched_count) * 100 / data.total_entries)
            .quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )
    else:
        match_rate = 100

    total_amount = (
        data.matched_amount
        + data.amount_mismatch_amount
        + data.not_in_2b_amount
        + data.in_2b_only_amount
        + data.pending_amount
    )
    summary, actions = _summary_and_actions(data, match_rate)

    result = ITCHealthResult(
        match_rate=match_rate,
        status=itc_health_status(match_rate),
        total_amount=total_amount,
        matched_amount=data.matched_amount,
        itc_at_risk=data.amount_mismatch_amount + data.not_in_2b_amount,
        follow_up_needed=data.not_in_2b_count + data.in_2b_only_count,
        follow_up_amount=data.not_in_2b_amount + data.in_2b_only_amount,
        summary=summary,
        actions=actions,
    )
    logger.debug("ITC health: match_rate=%s status=%s", match_rate, result.status.value)
    return result


def _summary_and_actions(
    data: ITCHealthInput, match_rate: int
) -> tuple[str, tuple[ITCAction, ...]]:
    if data.total_entries == 0:
        return "No ITC entries to reconcile.", ()
    if match_rate == 100:
        return "All entries are matched. ITC reconciliation is complete.", ()

    parts: list[str] = []
    actions: list[ITCAction] = []

    if data.amount_mismatch_count > 0:
        parts.append(
            f"{data.amount_mismatch_count} entries have amount mismatches "
            f"(₹{format_inr(data.amount_mismatch_amount)})"
        )
        actions += [ITCAction.VERIFY_INVOICES, ITCAction.REVIEW_MISMATCHES]

    if data.not_in_2b_count > 0:
        parts.append(
            f"{data.not_in_2b_count} entries not found in GSTR-2B "
            f"(₹{format_inr(data.not_in_2b_amount)} at risk)"
        )
        actions.append(ITCAction.FOLLOW_UP_VENDORS)

    if data.in_2b_only_count > 0:
        parts.append(f"{data.in_2b_only_count} entries in GSTR-2B not in your records")
        actions.append(ITCAction.VERIFY_INVOICES)

    if data.pending_count > 0:
        parts.append(f"{data.pending_count} entries pending reconciliation")
        actions.append(ITCAction.RECONCILE_PENDING)

    summary = ". ".join(parts) + "." if parts else f"{match_rate}% of entries matched."
    # first occurrence wins
    return summary, tuple(dict.fromkeys(actions))
