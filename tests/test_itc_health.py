"""Tests for ITC reconciliation health."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.domain.models.itc import ITCAction, ITCHealthInput, ITCHealthStatus
from app.domain.services.itc_health import (
    action_description,
    calculate_itc_health,
    format_inr,
    itc_health_status,
)


def _health_input(**overrides) -> ITCHealthInput:
    fields = {"total_entries": 100, "matched_count": 100, "matched_amount": Decimal("500000")}
    fields.update(overrides)
    return ITCHealthInput(**fields)


class TestCalculateITCHealth:

    def test_all_matched(self):
        result = calculate_itc_health(_health_input())
        assert result.match_rate == 100
        assert result.status == ITCHealthStatus.EXCELLENT
        assert result.itc_at_risk == 0
        assert result.follow_up_needed == 0
        assert result.summary == "All entries are matched. ITC reconciliation is complete."
        assert result.actions == ()

    def test_no_entries_counts_as_matched(self):
        result = calculate_itc_health(ITCHealthInput(total_entries=0))
        assert result.match_rate == 100
        assert result.status == ITCHealthStatus.EXCELLENT
        assert result.summary == "No ITC entries to reconcile."
        assert result.actions == ()

    def test_match_rate(self):
        result = calculate_itc_health(_health_input(
            matched_count=75,
            amount_mismatch_count=10,
            amount_mismatch_amount=Decimal("50000"),
            not_in_2b_count=10,
            not_in_2b_amount=Decimal("50000"),
            in_2b_only_count=5,
            in_2b_only_amount=Decimal("25000"),
        ))
        assert result.match_rate == 75
        assert result.status == ITCHealthStatus.WARNING

    def test_match_rate_rounds_half_up(self):
        # 1 / 8 = 12.5%
        result = calculate_itc_health(_health_input(total_entries=8, matched_count=1, pending_count=7))
        assert result.match_rate == 13

    def test_itc_at_risk(self):
        result = calculate_itc_health(_health_input(
            total_entries=50,
            matched_count=40,
            amount_mismatch_count=10,
            amount_mismatch_amount=Decimal("100000"),
            not_in_2b_count=2,
            not_in_2b_amount=Decimal("7500.50"),
        ))
        assert result.itc_at_risk == Decimal("107500.50")

    def test_follow_up_covers_both_sides_of_2b(self):
        result = calculate_itc_health(_health_input(
            total_entries=60,
            matched_count=45,
            not_in_2b_count=10,
            not_in_2b_amount=Decimal("75000"),
            in_2b_only_count=5,
            in_2b_only_amount=Decimal("25000"),
        ))
        assert result.follow_up_needed == 15
        assert result.follow_up_amount == Decimal("100000")

    def test_total_amount(self):
        result = calculate_itc_health(_health_input(
            matched_count=60,
            matched_amount=Decimal("300000"),
            amount_mismatch_amount=Decimal("1"),
            not_in_2b_amount=Decimal("2"),
            in_2b_only_amount=Decimal("3"),
            pending_amount=Decimal("4"),
        ))
        assert result.total_amount == Decimal("300010")
        assert result.matched_amount == Decimal("300000")

    def test_summary_and_actions_combined(self):
        result = calculate_itc_health(_health_input(
            matched_count=60,
            amount_mismatch_count=10,
            amount_mismatch_amount=Decimal("100000"),
            not_in_2b_count=15,
            not_in_2b_amount=Decimal("75000"),
            in_2b_only_count=10,
            in_2b_only_amount=Decimal("50000"),
            pending_count=5,
            pending_amount=Decimal("25000"),
        ))
        assert result.summary == (
            "10 entries have amount mismatches (₹1,00,000). "
            "15 entries not found in GSTR-2B (₹75,000 at risk). "
            "10 entries in GSTR-2B not in your records. "
            "5 entries pending reconciliation."
        )
        # verifyInvoices appears once, at its first position
        assert result.actions == (
            ITCAction.VERIFY_INVOICES,
            ITCAction.REVIEW_MISMATCHES,
            ITCAction.FOLLOW_UP_VENDORS,
            ITCAction.RECONCILE_PENDING,
        )

    def test_unmatched_without_categorised_entries(self):
        result = calculate_itc_health(_health_input(matched_count=90))
        assert result.summary == "90% of entries matched."
        assert result.status == ITCHealthStatus.GOOD
        assert result.actions == ()

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            ITCHealthInput(total_entries=-1)


@pytest.mark.parametrize(
    "match_rate, expected",
    [
        (100, ITCHealthStatus.EXCELLENT),
        (95, ITCHealthStatus.EXCELLENT),
        (94, ITCHealthStatus.GOOD),
        (80, ITCHealthStatus.GOOD),
        (79, ITCHealthStatus.WARNING),
        (60, ITCHealthStatus.WARNING),
        (59, ITCHealthStatus.CRITICAL),
        (0, ITCHealthStatus.CRITICAL),
    ],
)
def test_itc_health_status(match_rate, expected):
    assert itc_health_status(match_rate) == expected


def test_action_description():
    assert action_description(ITCAction.RECONCILE_PENDING) == "Complete reconciliation for pending entries"
    assert action_description("followUpVendors").startswith("Follow up with vendors")
    assert action_description("somethingElse") == "Take action on ITC entries"


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("0"), "0"),
        (Decimal("999"), "999"),
        (Decimal("50000"), "50,000"),
        (Decimal("100000"), "1,00,000"),
        (Decimal("12345678.50"), "1,23,45,678.5"),
        (Decimal("1.23456"), "1.235"),
        (Decimal("-250000"), "-2,50,000"),
    ],
)
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected
