from datetime import date, datetime

import pytest

from staffing_system.core.enums import LeaveStatus, LeaveType
from staffing_system.core.exceptions import ConflictError, NotFoundError, ValidationError

TODAY = date(2025, 1, 1)


@pytest.fixture
def nurse(add_staff):
    return add_staff(name="Nurse A", role="Nurse")


@pytest.fixture
def apply(container, nurse):
    def _apply(start, end, staff_id=None, leave_type="Sick Leave", reason="Flu", today=TODAY):
        return container.leave_service.apply(
            staff_id=nurse.staff_id if staff_id is None else staff_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            reason=reason,
            today=today,
        )

    return _apply


def test_apply_counts_inclusive_days(apply):
    leave = apply("2025-01-10", "2025-01-12")

    assert leave.number_of_days == 3
    assert leave.status == LeaveStatus.PENDING
    assert leave.leave_type == LeaveType.SICK


def test_single_day_leave(apply):
    assert apply("2025-01-10", "2025-01-10").number_of_days == 1


def test_overlapping_request_is_a_conflict(apply):
    apply("2025-01-10", "2025-01-15")

    with pytest.raises(ConflictError, match="overlaps"):
        apply("2025-01-14", "2025-01-20")

    assert apply("2025-01-16", "2025-01-20").number_of_days == 5


def test_rejected_or_cancelled_requests_do_not_block(container, apply):
    first = apply("2025-01-10", "2025-01-15")
    container.leave_service.reject(leave_id=first.leave_id, rejected_by=1)

    second = apply("2025-01-10", "2025-01-15")
    container.leave_service.cancel(leave_id=second.leave_id, today=TODAY)

    assert apply("2025-01-12", "2025-01-13").status == LeaveStatus.PENDING


def test_other_staff_do_not_conflict(apply, add_staff):
    other = add_staff(name="Dr. B", role="Doctor")
    apply("2025-01-10", "2025-01-15")

    assert apply("2025-01-10", "2025-01-15", staff_id=other.staff_id).staff_id == other.staff_id


def test_missing_fields_fail_first(apply):
    with pytest.raises(ValidationError, match="required fields"):
        apply("2025-01-10", "2025-01-12", staff_id="", reason=" ")


def test_unknown_staff(apply):
    with pytest.raises(NotFoundError):
        apply("2024-01-12", "2024-01-10", staff_id=404)


def test_start_after_end(apply):
    with pytest.raises(ValidationError, match="Start date cannot be after end date"):
        apply("2025-01-12", "2025-01-10")


def test_past_dates_are_rejected(apply):
    with pytest.raises(ValidationError, match="Cannot apply leave for past dates"):
        apply("2024-12-31", "2025-01-02")


def test_today_is_allowed(apply):
    assert apply("2025-01-01", "2025-01-01").start_date == TODAY


def test_invalid_type_and_long_reason(apply):
    with pytest.raises(ValidationError):
        apply("2025-01-10", "2025-01-12", leave_type="Holiday")
    with pytest.raises(ValidationError):
        apply("2025-01-10", "2025-01-12", reason="x" * 501)


def test_approve_records_decision(container, apply):
    leave = apply("2025-01-10", "2025-01-12")
    now = datetime(2025, 1, 2, 10, 30)

    approved = container.leave_service.approve(leave_id=leave.leave_id, approved_by=5, remarks="ok", now=now)

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == 5
    assert approved.approval_date == now
    assert approved.remarks == "ok"


def test_cannot_decide_twice(container, apply):
    leave = apply("2025-01-10", "2025-01-12")
    container.leave_service.approve(leave_id=leave.leave_id, approved_by=5)

    with pytest.raises(ValidationError, match="Cannot approve a approved leave request"):
        container.leave_service.approve(leave_id=leave.leave_id, approved_by=5)
    with pytest.raises(ValidationError, match="Cannot reject a approved leave request"):
        container.leave_service.reject(leave_id=leave.leave_id, rejected_by=5)


def test_lost_race_on_decision_is_a_conflict(container, repos, apply, monkeypatch):
    leave = apply("2025-01-10", "2025-01-12")
    monkeypatch.setattr(repos.leaves, "decide", lambda **kwargs: False)

    with pytest.raises(ConflictError):
        container.leave_service.approve(leave_id=leave.leave_id, approved_by=5)


def test_decide_unknown_leave(container):
    with pytest.raises(NotFoundError):
        container.leave_service.reject(leave_id=77)


def test_cancel_approved_future_leave(container, apply):
    leave = apply("2025-01-10", "2025-01-12")
    container.leave_service.approve(leave_id=leave.leave_id, approved_by=5)

    cancelled = container.leave_service.cancel(leave_id=leave.leave_id, today=TODAY)

    assert cancelled.status == LeaveStatus.CANCELLED
    assert cancelled.approved_by == 5


def test_cancel_rules(container, apply):
    started = apply("2025-01-01", "2025-01-03")
    with pytest.raises(ValidationError, match="already started"):
        container.leave_service.cancel(leave_id=started.leave_id, today=TODAY)

    rejected = apply("2025-02-01", "2025-02-02")
    container.leave_service.reject(leave_id=rejected.leave_id)
    with pytest.raises(ValidationError, match="rejected"):
        container.leave_service.cancel(leave_id=rejected.leave_id, today=TODAY)

    pending = apply("2025-03-01", "2025-03-02")
    container.leave_service.cancel(leave_id=pending.leave_id, today=TODAY)
    with pytest.raises(ValidationError, match="already cancelled"):
        container.leave_service.cancel(leave_id=pending.leave_id, today=TODAY)


def test_statistics_for_a_month(container, apply):
    a = apply("2025-01-10", "2025-01-12")
    b = apply("2025-01-20", "2025-01-21")
    apply("2025-01-25", "2025-01-25")
    apply("2025-01-30", "2025-02-02")
    container.leave_service.approve(leave_id=a.leave_id)
    container.leave_service.approve(leave_id=b.leave_id)

    january = container.leave_service.statistics(month="1", year="2025")
    overall = container.leave_service.statistics()

    assert january == {
        "total_requests": 3,
        "approved": 2,
        "pending": 1,
        "rejected": 0,
        "cancelled": 0,
        "total_days_approved": 5,
    }
    assert overall["total_requests"] == 4


def test_statistics_rejects_bad_month(container):
    with pytest.raises(ValidationError):
        container.leave_service.statistics(month="13", year="2025")


def test_list_and_read_back(container, apply, nurse):
    first = apply("2025-01-10", "2025-01-12")
    apply("2025-02-10", "2025-02-12", leave_type="Annual Leave")

    annual = container.leave_service.list_leaves(leave_type="Annual Leave")
    everything = container.leave_service.list_leaves()
    one = container.leave_service.get(leave_id=str(first.leave_id))
    mine = container.leave_service.for_staff(staff_id=nurse.staff_id)

    assert len(annual) == 1
    assert [row["start_date"] for row in everything] == ["2025-02-10", "2025-01-10"]
    assert one["staff"]["staff_code"] == "N001"
    assert mine["count"] == 2

    with pytest.raises(NotFoundError):
        container.leave_service.for_staff(staff_id=404)
