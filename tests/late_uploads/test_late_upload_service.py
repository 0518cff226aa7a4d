from __future__ import annotations

from datetime import datetime

import pytest

from src.robochamps_erp.robochamps_erp.access.context import CallerContext
from src.robochamps_erp.robochamps_erp.access.filters import LateRequestFilters
from src.robochamps_erp.robochamps_erp.core.enums import RequestStatus, Role
from src.robochamps_erp.robochamps_erp.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleViolation,
    NotFoundError,
    ValidationError,
)
from src.robochamps_erp.robochamps_erp.late_uploads.service import NO_SCHOOL_MESSAGE, LateUploadService
from src.robochamps_erp.robochamps_erp.schools.model import School
from tests.fakes import FakeLateRequestsRepo, FakeSchoolsRepo

AFTER_DEADLINE = datetime(2025, 4, 7, 9, 0, 0)

TRAINER = CallerContext(
    caller_id=10,
    role=Role.TRAINER_ROBOCHAMPS,
    school_id=1,
    name="Tina Trainer",
    email="tina@example.com",
)
ADMIN = CallerContext(caller_id=1, role=Role.ADMIN, name="Ada Admin", email="ada@example.com")
REASON = "Sheet was signed late by the principal"


def make_service():
    repo = FakeLateRequestsRepo()
    schools = FakeSchoolsRepo([School(school_id=1, name="North School")])
    return LateUploadService(repo, schools), repo


def create(svc, caller=TRAINER, month="2025-03", year=2025, reason=REASON, now=AFTER_DEADLINE):
    return svc.create_request(caller=caller, month=month, year=year, reason=reason, now=now)


def test_create_request_after_deadline_is_pending_with_denormalized_names():
    svc, repo = make_service()

    req = create(svc)

    assert req.status == RequestStatus.PENDING
    assert req.trainer_name == "Tina Trainer"
    assert req.trainer_email == "tina@example.com"
    assert req.school_name == "North School"
    assert req.created_at == AFTER_DEADLINE
    assert len(repo.rows) == 1


def test_request_at_midnight_after_the_fifth_is_pending():
    svc, _ = make_service()

    req = create(svc, reason="Was on sick leave all week", now=datetime(2025, 4, 6, 0, 0, 0))

    assert req.status == RequestStatus.PENDING
    assert (req.month, req.year) == ("2025-03", 2025)


@pytest.mark.parametrize("variant", ["2025-03\n", "٢٠٢٥-٠٣"])
def test_non_canonical_month_cannot_open_a_second_pending_request(variant):
    svc, repo = make_service()
    create(svc)

    with pytest.raises(ValidationError) as exc:
        create(svc, month=variant)

    assert "month" in exc.value.field_errors
    assert len(repo.rows) == 1


def test_create_request_before_deadline_is_refused():
    svc, repo = make_service()

    with pytest.raises(BusinessRuleViolation) as exc:
        create(svc, now=datetime(2025, 4, 5, 23, 0, 0))

    assert exc.value.code == "BEFORE_DEADLINE"
    assert repo.rows == {}


def test_second_request_while_pending_is_refused():
    svc, repo = make_service()
    create(svc)

    with pytest.raises(BusinessRuleViolation) as exc:
        create(svc)

    assert exc.value.code == "ALREADY_PENDING"
    assert len(repo.rows) == 1


def test_request_after_approval_is_refused():
    svc, repo = make_service()
    repo.add(status=RequestStatus.APPROVED)

    with pytest.raises(BusinessRuleViolation) as exc:
        create(svc)

    assert exc.value.code == "ALREADY_APPROVED"


def test_rejected_request_does_not_block_a_new_one():
    svc, repo = make_service()
    repo.add(status=RequestStatus.REJECTED)

    req = create(svc)

    assert req.status == RequestStatus.PENDING
    assert len(repo.rows) == 2


def test_other_month_is_independent():
    svc, repo = make_service()
    repo.add(month="2025-02", status=RequestStatus.PENDING)

    req = create(svc)

    assert req.month == "2025-03"


def test_create_requires_a_caller():
    svc, _ = make_service()
    with pytest.raises(AuthenticationError):
        create(svc, caller=None)


@pytest.mark.parametrize("role", [Role.ADMIN, Role.TEACHER])
def test_only_trainers_can_create(role):
    svc, _ = make_service()
    with pytest.raises(AuthorizationError):
        create(svc, caller=CallerContext(caller_id=5, role=role, school_id=1))


def test_trainer_without_school_is_told_to_contact_admin():
    svc, _ = make_service()
    with pytest.raises(ValidationError) as exc:
        create(svc, caller=CallerContext(caller_id=10, role=Role.TRAINER_SCHOOL))
    assert str(exc.value) == NO_SCHOOL_MESSAGE


def test_all_invalid_fields_are_reported_together():
    svc, _ = make_service()

    with pytest.raises(ValidationError) as exc:
        create(svc, month="2025/03", year="abc", reason="short")

    assert set(exc.value.field_errors) == {"month", "year", "reason"}


@pytest.mark.parametrize("year", [1999, 2101])
def test_year_out_of_range(year):
    svc, _ = make_service()
    with pytest.raises(ValidationError) as exc:
        create(svc, year=year)
    assert "year" in exc.value.field_errors


def test_year_given_as_text_is_rejected():
    svc, repo = make_service()
    with pytest.raises(ValidationError) as exc:
        create(svc, year="2025")
    assert exc.value.field_errors == {"year": "must be a number"}
    assert repo.rows == {}


def test_year_must_match_month():
    svc, _ = make_service()
    with pytest.raises(ValidationError) as exc:
        create(svc, year=2024)
    assert exc.value.field_errors == {"year": "must match the year of month"}


def test_reason_of_exactly_ten_characters_is_accepted():
    svc, _ = make_service()
    req = create(svc, reason="0123456789")
    assert req.reason == "0123456789"


def test_admin_approves_pending_request():
    svc, repo = make_service()
    req = create(svc)
    decided_at = datetime(2025, 4, 8, 10, 0, 0)

    updated = svc.decide(caller=ADMIN, request_id=req.request_id, status="APPROVED", now=decided_at)

    assert updated.status == RequestStatus.APPROVED
    assert updated.decided_at == decided_at
    assert updated.decided_by_admin_id == 1
    assert updated.decided_by_admin_name == "Ada Admin"
    assert svc.has_approved(trainer_id=10, month="2025-03", year=2025)


def test_decided_request_cannot_be_decided_again():
    svc, _ = make_service()
    req = create(svc)
    svc.decide(caller=ADMIN, request_id=req.request_id, status="REJECTED")

    with pytest.raises(BusinessRuleViolation) as exc:
        svc.decide(caller=ADMIN, request_id=req.request_id, status="APPROVED")

    assert exc.value.code == "ALREADY_DECIDED"
    assert not svc.has_approved(trainer_id=10, month="2025-03", year=2025)


def test_lost_race_on_decision_reports_already_decided():
    svc, repo = make_service()
    req = create(svc)
    # Simulate another admin winning between the read and the conditional write.
    repo.decide = lambda **kwargs: False

    with pytest.raises(BusinessRuleViolation) as exc:
        svc.decide(caller=ADMIN, request_id=req.request_id, status="APPROVED")

    assert exc.value.code == "ALREADY_DECIDED"


def test_decide_unknown_request():
    svc, _ = make_service()
    with pytest.raises(NotFoundError):
        svc.decide(caller=ADMIN, request_id=999, status="APPROVED")


@pytest.mark.parametrize("status", ["PENDING", "approved", None, "MAYBE"])
def test_decide_rejects_invalid_status(status):
    svc, _ = make_service()
    req = create(svc)
    with pytest.raises(ValidationError):
        svc.decide(caller=ADMIN, request_id=req.request_id, status=status)


def test_only_admin_decides():
    svc, _ = make_service()
    req = create(svc)
    with pytest.raises(AuthorizationError):
        svc.decide(caller=TRAINER, request_id=req.request_id, status="APPROVED")


def test_trainer_lists_only_own_requests():
    svc, repo = make_service()
    repo.add(trainer_id=10)
    repo.add(trainer_id=11, trainer_email="other@example.com")

    mine = svc.list_requests(caller=TRAINER, filters=LateRequestFilters(trainer_email="other"))

    assert [r.trainer_id for r in mine] == [10]


def test_admin_filters_by_status_and_substrings():
    svc, repo = make_service()
    repo.add(trainer_email="tina@example.com", school_name="North School")
    repo.add(trainer_email="sam@example.com", school_name="South School", status=RequestStatus.APPROVED)
    repo.add(trainer_email="sara@example.com", school_name="South Academy")

    result = svc.list_requests(
        caller=ADMIN,
        filters=LateRequestFilters(status=RequestStatus.PENDING, school_name="south"),
    )

    assert [r.trainer_email for r in result] == ["sara@example.com"]


def test_teacher_cannot_list_requests():
    svc, _ = make_service()
    with pytest.raises(AuthorizationError):
        svc.list_requests(caller=CallerContext(caller_id=3, role=Role.TEACHER, school_id=1))
