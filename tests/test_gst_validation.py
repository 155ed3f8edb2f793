"""Tests for GST compliance validation and GSTIN / PAN / LUT helpers."""

from datetime import date
from decimal import Decimal

import pytest

from app.domain.models.gst import GSTInvoice, ValidationErrorKind
from app.domain.services.gst_validation import (
    extract_pan_from_gstin,
    is_valid_gstin,
    is_valid_lut_number,
    is_valid_pan,
    lut_expiry_status,
    pan_matches_gstin,
    state_code_from_gstin,
    state_name_from_gstin,
    validate_gst_invoice,
)

EXPORT = "Outside India (Section 2-6)"
DOMESTIC = "29-Karnataka"


def _invoice(**overrides) -> GSTInvoice:
    fields = {"place_of_supply": DOMESTIC}
    fields.update(overrides)
    return GSTInvoice(**fields)


# ---------------------------------------------------------------------------
# validate_gst_invoice
# ---------------------------------------------------------------------------

class TestGstinRule:

    def test_valid_gstin(self):
        result = validate_gst_invoice(_invoice(gstin="29ABCDE1234F1Z5"))
        assert result.is_valid
        assert result.errors == []

    def test_short_gstin(self):
        result = validate_gst_invoice(_invoice(gstin="29ABCDE1234F1Z"))
        assert result.errors == ["Invalid GSTIN format"]
        assert result.issues == (ValidationErrorKind.INVALID_GSTIN,)

    def test_lowercase_gstin(self):
        result = validate_gst_invoice(_invoice(gstin="29abcde1234f1z5"))
        assert result.errors == ["Invalid GSTIN format"]

    def test_missing_z(self):
        result = validate_gst_invoice(_invoice(gstin="29ABCDE1234F1A5"))
        assert not result.is_valid

    def test_trailing_newline_gstin(self):
        result = validate_gst_invoice(_invoice(gstin="29ABCDE1234F1Z5\n"))
        assert result.issues == (ValidationErrorKind.INVALID_GSTIN,)

    def test_absent_gstin_not_checked(self):
        assert validate_gst_invoice(_invoice(gstin=None)).is_valid
        assert validate_gst_invoice(_invoice(gstin="")).is_valid


class TestExportServiceCode:

    def test_seven_digits(self):
        result = validate_gst_invoice(_invoice(place_of_supply=EXPORT, service_code="1234567"))
        assert "Service code must be 8 digits for exports" in result.errors

    def test_eight_digits(self):
        result = validate_gst_invoice(_invoice(place_of_supply=EXPORT, service_code="99881100"))
        assert "Service code must be 8 digits for exports" not in result.errors
        assert result.is_valid

    def test_missing_code(self):
        result = validate_gst_invoice(_invoice(place_of_supply=EXPORT, service_code=None))
        assert ValidationErrorKind.EXPORT_SERVICE_CODE in result.issues

    def test_non_digit_code(self):
        result = validate_gst_invoice(_invoice(place_of_supply=EXPORT, service_code="9988110A"))
        assert ValidationErrorKind.EXPORT_SERVICE_CODE in result.issues

    def test_trailing_newline_code(self):
        result = validate_gst_invoice(_invoice(place_of_supply=EXPORT, service_code="99881100\n"))
        assert result.issues == (ValidationErrorKind.EXPORT_SERVICE_CODE,)

    def test_domestic_short_code_allowed(self):
        result = validate_gst_invoice(_invoice(service_code="9983"))
        assert result.is_valid


class TestLutRule:

    def test_lut_with_igst(self):
        result = validate_gst_invoice(_invoice(lut_number="AD2903250001", igst_rate=5))
        assert "IGST must be 0% for exports under LUT" in result.errors

    def test_lut_with_zero_igst(self):
        result = validate_gst_invoice(_invoice(lut_number="AD2903250001", igst_rate=0))
        assert "IGST must be 0% for exports under LUT" not in result.errors

    def test_igst_without_lut(self):
        result = validate_gst_invoice(_invoice(igst_rate=Decimal("18")))
        assert result.is_valid


class TestPlaceOfSupplySection:

    def test_export_without_section_reference(self):
        result = validate_gst_invoice(_invoice(place_of_supply="Outside India", service_code="99881100"))
        assert result.errors == [
            "Place of supply must include Section 2-6 reference for exports"
        ]

    def test_export_with_section_reference(self):
        result = validate_gst_invoice(_invoice(place_of_supply=EXPORT, service_code="99881100"))
        assert ValidationErrorKind.PLACE_OF_SUPPLY_SECTION not in result.issues

    def test_domestic_not_checked(self):
        result = validate_gst_invoice(_invoice(place_of_supply="27-Maharashtra"))
        assert result.is_valid


class TestRuleOrdering:

    def test_all_rules_fire_in_order(self):
        result = validate_gst_invoice(
            _invoice(
                gstin="BAD",
                place_of_supply="Outside India",
                service_code="12",
                lut_number="AD2903250001",
                igst_rate=18,
            )
        )
        assert result.issues == (
            ValidationErrorKind.INVALID_GSTIN,
            ValidationErrorKind.EXPORT_SERVICE_CODE,
            ValidationErrorKind.LUT_IGST_NOT_ZERO,
            ValidationErrorKind.PLACE_OF_SUPPLY_SECTION,
        )
        assert result.errors == [kind.value for kind in result.issues]
        assert not result.is_valid

    def test_compliant_export(self, export_invoice):
        result = validate_gst_invoice(export_invoice)
        assert result.is_valid
        assert result.errors == []


# ---------------------------------------------------------------------------
# GSTIN / PAN helpers
# ---------------------------------------------------------------------------

def test_is_valid_gstin_normalizes():
    assert is_valid_gstin(" 29abcde1234f1z5 ")


def test_is_valid_gstin_unknown_state():
    assert not is_valid_gstin("98ABCDE1234F1Z5")


def test_is_valid_gstin_empty():
    assert not is_valid_gstin(None)
    assert not is_valid_gstin("")


def test_is_valid_pan():
    assert is_valid_pan("ABCDE1234F")
    assert not is_valid_pan("ABCD1234F")


def test_extract_pan_from_gstin():
    assert extract_pan_from_gstin("36AABCU9603R1ZM") == "AABCU9603R"
    assert extract_pan_from_gstin("invalid") is None


def test_pan_matches_gstin():
    assert pan_matches_gstin("aabcu9603r", "36AABCU9603R1ZM")
    assert not pan_matches_gstin("ABCDE1234F", "36AABCU9603R1ZM")


def test_state_from_gstin():
    assert state_code_from_gstin("27AADCB2230M1ZP") == "27"
    assert state_name_from_gstin("27AADCB2230M1ZP") == "Maharashtra"
    assert state_name_from_gstin("XX") is None


# ---------------------------------------------------------------------------
# LUT helpers
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "lut_number, expected",
    [
        ("AD290325012345L", True),
        ("ad2903250001", True),
        ("AD29", False),
        ("AD-2903-2500-01", False),
        (None, False),
    ],
)
def test_is_valid_lut_number(lut_number, expected):
    assert is_valid_lut_number(lut_number) is expected


def test_lut_expiry_status():
    today = date(2025, 6, 1)
    assert lut_expiry_status(date(2025, 5, 31), today=today).status == "expired"
    assert lut_expiry_status(date(2025, 5, 31), today=today).days_remaining == 0

    soon = lut_expiry_status(date(2025, 6, 20), today=today)
    assert soon.status == "expiring_soon"
    assert soon.days_remaining == 19

    assert lut_expiry_status(date(2026, 3, 31), today=today).status == "active"
