"""
Unit Tests for the Installment Scheduler.

These tests verify:
1. Due dates follow calendar-month arithmetic with month-end clamping
2. Installment amounts always sum to the plan total
3. The same plan and start date always give the same schedule
4. Dues are materialized as pending, optionally without installment 1
5. Installment numbering checks
"""

import pytest
from datetime import date
from uuid import uuid4

from enrollment_gateway.domain.entities import Plan, PaymentDueStatus
from enrollment_gateway.service.scheduling import (
    add_months,
    check_installment_numbers,
    installment_due_date,
    materialize_dues,
    schedule,
)


def make_monthly_plan(count: int = 3) -> Plan:
    return Plan(
        id="monthly",
        name="Monthly Plan",
        total_amount=100_000 * count,
        installment_count=count,
        first_installment_amount=100_000,
        subsequent_installment_amount=100_000,
        interval_months=1,
    )


# =============================================================================
# schedule()
# =============================================================================

class TestSchedule:
    """Tests for schedule()."""

    def test_bronze_from_january_tenth(self, catalog):
        """Bronze splits into four quarterly installments of 15,000,000 kobo."""
        installments = schedule(catalog.get("bronze"), date(2024, 1, 10))

        assert [i.due_date for i in installments] == [
            date(2024, 1, 10),
            date(2024, 4, 10),
            date(2024, 7, 10),
            date(2024, 10, 10),
        ]
        assert all(i.amount == 15_000_000 for i in installments)
        assert [i.ordinal for i in installments] == [1, 2, 3, 4]

    def test_single_payment_plan_is_due_on_start_date(self, catalog):
        installments = schedule(catalog.get("gold"), date(2024, 5, 17))

        assert len(installments) == 1
        assert installments[0].due_date == date(2024, 5, 17)
        assert installments[0].amount == 50_000_000
        assert installments[0].description == "Full payment (Gold Plan)"

    def test_descriptions(self, catalog):
        installments = schedule(catalog.get("silver"), date(2024, 1, 1))

        assert installments[0].description == "Initial payment for Silver Plan"
        assert installments[1].description == "Installment 2 of 2"

    @pytest.mark.parametrize("plan_id", ["gold", "silver", "bronze"])
    def test_amounts_sum_to_total(self, catalog, plan_id):
        plan = catalog.get(plan_id)
        installments = schedule(plan, date(2024, 3, 1))

        assert sum(i.amount for i in installments) == plan.total_amount
        assert len(installments) == plan.installment_count

    def test_schedule_is_deterministic(self, catalog):
        plan = catalog.get("bronze")

        assert schedule(plan, date(2024, 2, 29)) == schedule(plan, date(2024, 2, 29))

    def test_month_end_is_clamped(self):
        """Jan 31 + 1 month falls on the last day of February."""
        installments = schedule(make_monthly_plan(), date(2024, 1, 31))

        assert [i.due_date for i in installments] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]

    def test_month_end_clamp_in_non_leap_year(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_clamping_does_not_drift(self, catalog):
        """Each due date is measured from the start date, not the previous due."""
        installments = schedule(catalog.get("silver"), date(2023, 11, 30))

        assert installments[1].due_date == date(2024, 2, 29)

    def test_due_date_outside_plan_is_rejected(self, catalog):
        with pytest.raises(ValueError):
            installment_due_date(catalog.get("silver"), date(2024, 1, 1), 3)

        with pytest.raises(ValueError):
            installment_due_date(catalog.get("silver"), date(2024, 1, 1), 0)


# =============================================================================
# materialize_dues()
# =============================================================================

class TestMaterializeDues:
    """Tests for materialize_dues()."""

    def test_dues_are_pending_and_complete(self, catalog):
        enrollment_id = uuid4()
        dues = materialize_dues(catalog.get("bronze"), date(2024, 1, 10), enrollment_id)

        assert len(dues) == 4
        for due in dues:
            assert due.status == PaymentDueStatus.PENDING
            assert due.enrollment_id == enrollment_id
            assert due.plan_id == "bronze"
            assert due.total_installments == 4
            assert due.paid_amount == 0
            assert due.paid_date is None

    def test_skip_first_omits_installment_one(self, catalog):
        dues = materialize_dues(
            catalog.get("bronze"), date(2024, 1, 10), uuid4(), skip_first=True
        )

        assert [d.installment_number for d in dues] == [2, 3, 4]
        assert dues[0].due_date == date(2024, 4, 10)
        assert dues[0].notes == "Installment 2 of 4"

    def test_skip_first_on_single_payment_plan_yields_nothing(self, catalog):
        assert materialize_dues(catalog.get("gold"), date(2024, 1, 10), uuid4(), skip_first=True) == []

    def test_due_ids_are_unique(self, catalog):
        dues = materialize_dues(catalog.get("bronze"), date(2024, 1, 10), uuid4())

        assert len({d.id for d in dues}) == len(dues)


# =============================================================================
# check_installment_numbers()
# =============================================================================

class TestInstallmentNumbers:
    """Tests for check_installment_numbers()."""

    def test_full_run_passes(self, catalog):
        check_installment_numbers(materialize_dues(catalog.get("bronze"), date(2024, 1, 1), uuid4()))

    def test_run_after_inline_first_payment_passes(self, catalog):
        check_installment_numbers(
            materialize_dues(catalog.get("bronze"), date(2024, 1, 1), uuid4(), skip_first=True)
        )

    def test_gap_is_rejected(self, catalog):
        dues = materialize_dues(catalog.get("bronze"), date(2024, 1, 1), uuid4())
        del dues[2]

        with pytest.raises(ValueError, match="contiguous"):
            check_installment_numbers(dues)

    def test_duplicate_is_rejected(self, catalog):
        dues = materialize_dues(catalog.get("bronze"), date(2024, 1, 1), uuid4())
        dues.append(dues[-1])

        with pytest.raises(ValueError, match="Duplicate"):
            check_installment_numbers(dues)

    def test_mixed_enrollments_are_rejected(self, catalog):
        plan = catalog.get("silver")
        dues = materialize_dues(plan, date(2024, 1, 1), uuid4())[:1]
        dues += materialize_dues(plan, date(2024, 1, 1), uuid4())[1:]

        with pytest.raises(ValueError):
            check_installment_numbers(dues)
