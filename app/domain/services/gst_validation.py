# app/domain/services/gst_validation.py
"""
GST compliance checks on an invoice's tax fields, plus GSTIN / PAN / LUT helpers.

``validate_gst_invoice`` never raises: every problem is reported as a
``ValidationErrorKind`` in the returned result, in rule order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.domain.models.gst import GSTInvoice, ValidationErrorKind, ValidationResult

logger = logging.getLogger("gst_validation")

# 2-digit state code + 10-char PAN + entity digit + 'Z' + check character.
# Always applied with fullmatch.
GSTIN_REGEX = re.compile(r"[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][0-9]Z[0-9A-Z]")
PAN_REGEX = re.compile(r"[A-Z]{5}[0-9]{4}[A-Z]")
LUT_NUMBER_REGEX = re.compile(r"[A-Z0-9]{10,20}")
EXPORT_SERVICE_CODE_REGEX = re.compile(r"[0-9]{8}")

EXPORT_MARKER = "Outside India"
EXPORT_SECTION_MARKER = "Section 2-6"

LUT_EXPIRY_WARNING_DAYS = 30

GST_STATE_CODES: dict[str, str] = {
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "26": "Dadra and Nagar Haveli and Daman and Diu",
    "27": "Maharashtra",
    "28": "Andhra Pradesh",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh (New)",
    "38": "Ladakh",
    "97": "Other Territory",
    "99": "Centre Jurisdiction",
}


# ---------------------------------------------------------------------------
# Invoice compliance
# ---------------------------------------------------------------------------

def validate_gst_invoice(invoice: GSTInvoice) -> ValidationResult:
    """Run the export / LUT compliance rules against ``invoice``."""
    issues: list[ValidationErrorKind] = []
    place = invoice.place_of_supply or ""
    is_export = EXPORT_MARKER in place

    # 1. GSTIN format (case-sensitive: GSTINs are issued upper-case)
    if invoice.gstin and not GSTIN_REGEX.fullmatch(invoice.gstin):
        issues.append(ValidationErrorKind.INVALID_GSTIN)

    # 2. Exports need an 8-digit service code
    if is_export and not EXPORT_SERVICE_CODE_REGEX.fullmatch(invoice.service_code or ""):
        issues.append(ValidationErrorKind.EXPORT_SERVICE_CODE)

    # 3. Supplies under LUT are zero-rated
    if invoice.lut_number and Decimal(invoice.igst_rate) != 0:
        issues.append(ValidationErrorKind.LUT_IGST_NOT_ZERO)

    # 4. Export place of supply must cite Section 2-6
    # NOTE: fires only when the reference is absent on an export; product has
    # not confirmed this is the intended direction of the check.
    if EXPORT_SECTION_MARKER not in place and is_export:
        issues.append(ValidationErrorKind.PLACE_OF_SUPPLY_SECTION)

    result = ValidationResult(issues=tuple(issues))
    if not result.is_valid:
        logger.info("GST validation failed: %s", ", ".join(i.name for i in issues))
    return result


# ---------------------------------------------------------------------------
# GSTIN / PAN helpers
# ---------------------------------------------------------------------------

def _normalize(value: str | None) -> str:
    return (value or "").strip().upper()


def is_valid_pan(pan: str | None) -> bool:
    return bool(PAN_REGEX.fullmatch(_normalize(pan)))


def is_valid_gstin(gstin: str | None) -> bool:
    """Format check plus a known state code. Whitespace and case are forgiven."""
    gstin = _normalize(gstin)
    if not GSTIN_REGEX.fullmatch(gstin):
        return False
    return gstin[:2] in GST_STATE_CODES


def extract_pan_from_gstin(gstin: str | None) -> str | None:
    """PAN embedded in a GSTIN (characters 3-12), or ``None`` if invalid."""
    if not is_valid_gstin(gstin):
        return None
    return _normalize(gstin)[2:12]


def pan_matches_gstin(pan: str | None, gstin: str | None) -> bool:
    extracted = extract_pan_from_gstin(gstin)
    return extracted is not None and extracted == _normalize(pan)


def state_code_from_gstin(gstin: str | None) -> str | None:
    if not is_valid_gstin(gstin):
        return None
    return _normalize(gstin)[:2]


def state_name_from_gstin(gstin: str | None) -> str | None:
    code = state_code_from_gstin(gstin)
    return GST_STATE_CODES.get(code) if code else None


# ---------------------------------------------------------------------------
# LUT helpers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LutStatus:
    status: str  # "active" | "expiring_soon" | "expired"
    days_remaining: int


def is_valid_lut_number(lut_number: str | None) -> bool:
    return bool(LUT_NUMBER_REGEX.fullmatch(_normalize(lut_number)))


def lut_expiry_status(expiry: date, today: date | None = None) -> LutStatus:
    """Classify a Letter of Undertaking by days left before ``expiry``."""
    today = today or date.today()
    days_remaining = (expiry - today).days

    if days_remaining < 0:
        return LutStatus("expired", 0)
    if days_remaining <= LUT_EXPIRY_WARNING_DAYS:
        return LutStatus("expiring_soon", days_remaining)
    return LutStatus("active", days_remaining)
