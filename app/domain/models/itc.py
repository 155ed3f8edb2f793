from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ITCHealthStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class ITCAction(str, Enum):
    FOLLOW_UP_VENDORS = "followUpVendors"
    VERIFY_INVOICES = "verifyInvoices"
    RECONCILE_PENDING = "reconcilePending"
    REVIEW_MISMATCHES = "reviewMismatches"


class ITCHealthInput(_Frozen):
    """GSTR-2B reconciliation counts and ITC amounts for a period."""

    total_entries: int = Field(ge=0)
    matched_count: int = Field(default=0, ge=0)
    matched_amount: Decimal = Decimal("0")
    amount_mismatch_count: int = Field(default=0, ge=0)
    amount_mismatch_amount: Decimal = Decimal("0")
    # In the books but not in GSTR-2B
    not_in_2b_count: int = Field(default=0, ge=0)
    not_in_2b_amount: Decimal = Decimal("0")
    # In GSTR-2B but not in the books
    in_2b_only_count: int = Field(default=0, ge=0)
    in_2b_only_amount: Decimal = Decimal("0")
    pending_count: int = Field(default=0, ge=0)
    pending_amount: Decimal = Decimal("0")


class ITCHealthResult(_Frozen):
    match_rate: int  # percent, 0-100
    status: ITCHealthStatus
    total_amount: Decimal
    matched_amount: Decimal
    itc_at_risk: Decimal
    follow_up_needed: int
    follow_up_amount: Decimal
    summary: str
    actions: tuple[ITCAction, ...] = ()
