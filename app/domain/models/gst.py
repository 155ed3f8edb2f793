from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class GSTComponent(_Frozen):
    """IGST / CGST / SGST split of an amount. ``total`` is always the exact sum."""

    igst: Decimal = Field(default=Decimal("0"))
    cgst: Decimal = Field(default=Decimal("0"))
    sgst: Decimal = Field(default=Decimal("0"))
    total: Decimal = Field(default=Decimal("0"))

    @model_validator(mode="after")
    def _check_total(self) -> "GSTComponent":
        if self.total != self.igst + self.cgst + self.sgst:
            raise ValueError("total must equal igst + cgst + sgst")
        return self

    @classmethod
    def of(cls, igst, cgst, sgst) -> "GSTComponent":
        igst, cgst, sgst = (Decimal(str(v)) for v in (igst, cgst, sgst))
        return cls(igst=igst, cgst=cgst, sgst=sgst, total=igst + cgst + sgst)


class GSTSummaryInput(_Frozen):
    """Period totals reduced from the user's invoices. Every amount is required."""

    # Output tax (outward supplies)
    output_igst: Decimal
    output_cgst: Decimal
    output_sgst: Decimal
    # ITC from B2B purchases
    itc_igst: Decimal
    itc_cgst: Decimal
    itc_sgst: Decimal
    # Reverse charge liability
    rcm_igst: Decimal
    rcm_cgst: Decimal
    rcm_sgst: Decimal


class GSTSummaryResult(_Frozen):
    output_liability: GSTComponent
    itc_available: GSTComponent
    rcm_liability: GSTComponent
    net_payable: GSTComponent
    accumulated_itc: Decimal


class StatutorySetOff(_Frozen):
    """Cash still payable and credit left over after GSTR-3B utilization order."""

    cash_payable: GSTComponent
    credit_carried_forward: GSTComponent


class GSTCalculation(_Frozen):
    taxable_amount: Decimal
    igst_rate: Decimal = Decimal("0")
    cgst_rate: Decimal = Decimal("0")
    sgst_rate: Decimal = Decimal("0")
    igst_amount: Decimal = Decimal("0")
    cgst_amount: Decimal = Decimal("0")
    sgst_amount: Decimal = Decimal("0")
    cess_rate: Decimal = Decimal("0")
    cess_amount: Decimal = Decimal("0")
    total_gst: Decimal = Decimal("0")
    total_amount: Decimal


# ---------------------------------------------------------------------------
# Compliance validation
# ---------------------------------------------------------------------------

class GSTInvoice(_Frozen):
    """Tax attributes of an invoice that the compliance validator inspects."""

    gstin: Optional[str] = None
    pan: Optional[str] = None
    place_of_supply: str
    service_code: Optional[str] = None
    igst_rate: Decimal = Decimal("0")
    lut_number: Optional[str] = None
    lut_date: Optional[date] = None


class ValidationErrorKind(str, Enum):
    INVALID_GSTIN = "Invalid GSTIN format"
    EXPORT_SERVICE_CODE = "Service code must be 8 digits for exports"
    LUT_IGST_NOT_ZERO = "IGST must be 0% for exports under LUT"
    PLACE_OF_SUPPLY_SECTION = "Place of supply must include Section 2-6 reference for exports"

    @property
    def message(self) -> str:
        return self.value


class ValidationResult(_Frozen):
    issues: tuple[ValidationErrorKind, ...] = ()

    @property
    def errors(self) -> list[str]:
        return [issue.message for issue in self.issues]

    @property
    def is_valid(self) -> bool:
        return not self.issues
