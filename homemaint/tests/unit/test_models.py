"""Unit tests for model-level rules: warranty status, overdue tasks and costs."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from factories import (
    AssetFactory,
    AttachmentFactory,
    MaintenanceRecordFactory,
    MaintenanceTaskFactory,
)
from hypothesis import given
from hypothesis import strategies as st

from homemaint.models import (
    AttachmentType,
    TaskPriority,
    TaskStatus,
    WarrantyStatus,
    is_task_overdue,
    parse_cost,
    warranty_status,
)

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

aware_datetimes = st.datetimes(
    min_value=datetime(2000, 1, 1),
    max_value=datetime(2100, 1, 1),
    timezones=st.just(UTC),
)


class TestWarrantyStatus:
    def test_no_expiration_is_unknown(self):
        assert warranty_status(None, NOW) is WarrantyStatus.UNKNOWN

    def test_past_expiration_is_expired(self):
        assert warranty_status(NOW - timedelta(seconds=1), NOW) is WarrantyStatus.EXPIRED

    def test_within_thirty_days_is_expiring_soon(self):
        assert warranty_status(NOW + timedelta(days=10), NOW) is WarrantyStatus.EXPIRING_SOON

    def test_expiring_exactly_now_is_expiring_soon(self):
        assert warranty_status(NOW, NOW) is WarrantyStatus.EXPIRING_SOON

    def test_thirty_days_out_is_active(self):
        assert warranty_status(NOW + timedelta(days=30), NOW) is WarrantyStatus.ACTIVE

    def test_far_future_is_active(self):
        assert warranty_status(NOW + timedelta(days=400), NOW) is WarrantyStatus.ACTIVE

    def test_naive_datetimes_are_treated_as_utc(self):
        naive_now = NOW.replace(tzinfo=None)
        expiration = naive_now + timedelta(days=5)
        assert warranty_status(expiration, naive_now) is WarrantyStatus.EXPIRING_SOON

    def test_other_timezones_are_normalized(self):
        plus_two = timezone(timedelta(hours=2))
        # 13:00+02:00 is 11:00 UTC, one hour before NOW
        expiration = datetime(2024, 6, 15, 13, 0, 0, tzinfo=plus_two)
        assert warranty_status(expiration, NOW) is WarrantyStatus.EXPIRED

    @given(expiration=aware_datetimes, now=aware_datetimes)
    def test_classification_matches_definition(self, expiration, now):
        status = warranty_status(expiration, now)
        if expiration < now:
            assert status is WarrantyStatus.EXPIRED
        elif expiration < now + timedelta(days=30):
            assert status is WarrantyStatus.EXPIRING_SOON
        else:
            assert status is WarrantyStatus.ACTIVE

    def test_display_text_and_color(self):
        assert WarrantyStatus.ACTIVE.display_text == "Active"
        assert WarrantyStatus.ACTIVE.color == "green"
        assert WarrantyStatus.EXPIRING_SOON.display_text == "Expiring Soon"
        assert WarrantyStatus.EXPIRING_SOON.color == "orange"
        assert WarrantyStatus.EXPIRED.color == "red"
        assert WarrantyStatus.UNKNOWN.color == "gray"

    def test_asset_property_uses_current_time(self):
        asset = AssetFactory.build(warranty_expiration=datetime.now(UTC) - timedelta(days=1))
        assert asset.warranty_status is WarrantyStatus.EXPIRED


class TestTaskOverdue:
    def test_past_due_pending_task_is_overdue(self):
        assert is_task_overdue(NOW - timedelta(days=1), "pending", NOW)

    def test_completed_task_is_never_overdue(self):
        assert not is_task_overdue(NOW - timedelta(days=1), "completed", NOW)

    def test_task_without_due_date_is_not_overdue(self):
        assert not is_task_overdue(None, "pending", NOW)

    def test_future_task_is_not_overdue(self):
        assert not is_task_overdue(NOW + timedelta(minutes=1), "pending", NOW)

    @pytest.mark.parametrize("status", ["pending", "in_progress", "cancelled"])
    def test_any_open_status_can_be_overdue(self, status):
        assert is_task_overdue(NOW - timedelta(hours=1), status, NOW)

    @given(due=aware_datetimes, now=aware_datetimes, status=st.sampled_from(list(TaskStatus)))
    def test_overdue_definition(self, due, now, status):
        expected = status is not TaskStatus.COMPLETED and due < now
        assert is_task_overdue(due, status.value, now) is expected

    def test_model_properties(self):
        task = MaintenanceTaskFactory.build(
            status=TaskStatus.COMPLETED.value, priority=TaskPriority.URGENT.value
        )
        assert task.is_completed
        assert not task.is_overdue
        assert task.status_enum is TaskStatus.COMPLETED
        assert task.priority_enum is TaskPriority.URGENT

    def test_missing_priority(self):
        task = MaintenanceTaskFactory.build(priority=None)
        assert task.priority_enum is None


class TestEnums:
    def test_priority_colors(self):
        assert [p.color for p in TaskPriority] == ["blue", "yellow", "orange", "red"]

    def test_display_names(self):
        assert TaskStatus.IN_PROGRESS.display_name == "In Progress"
        assert TaskPriority.HIGH.display_name == "High"
        assert AttachmentType.RECEIPT.display_name == "Receipt"

    def test_str_returns_value(self):
        assert str(TaskStatus.PENDING) == "pending"
        assert f"{AttachmentType.MANUAL}" == "manual"


class TestCosts:
    def test_parse_valid_cost(self):
        assert parse_cost("123.45") == Decimal("123.45")

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "NaN", "Infinity"])
    def test_parse_invalid_or_missing_cost(self, value):
        assert parse_cost(value) is None

    def test_cost_decimal_property(self):
        record = MaintenanceRecordFactory.build(cost="0.10")
        assert record.cost_decimal == Decimal("0.10")

    @given(
        st.lists(
            st.decimals(
                min_value=Decimal("0"),
                max_value=Decimal("100000"),
                places=2,
                allow_nan=False,
                allow_infinity=False,
            ),
            max_size=20,
        )
    )
    def test_summing_parsed_costs_is_exact(self, amounts):
        parsed = [parse_cost(str(amount)) for amount in amounts]
        assert sum(parsed, Decimal("0")) == sum(amounts, Decimal("0"))


class TestDisplayProperties:
    def test_asset_display_name_includes_model_number(self):
        asset = AssetFactory.build(name="Water Heater", model_number="WH-50")
        assert asset.display_name == "Water Heater (WH-50)"

    def test_asset_display_name_without_model_number(self):
        asset = AssetFactory.build(name="Furnace", model_number=None)
        assert asset.display_name == "Furnace"

    def test_attachment_kind_helpers(self):
        photo = AttachmentFactory.build(mime_type="image/png")
        pdf = AttachmentFactory.build(mime_type="application/pdf", type="manual")
        assert photo.is_image and not photo.is_pdf
        assert pdf.is_pdf and not pdf.is_image
        assert pdf.type_enum is AttachmentType.MANUAL

    def test_unknown_attachment_type_falls_back_to_other(self):
        attachment = AttachmentFactory.build(type="blueprint")
        assert attachment.type_enum is AttachmentType.OTHER
