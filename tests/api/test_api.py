from __future__ import annotations

import io

import pytest
from werkzeug.security import generate_password_hash

from src.robochamps_erp.robochamps_erp.container import wire_services
from src.robochamps_erp.robochamps_erp.core.enums import Role
from src.robochamps_erp.robochamps_erp.core.exceptions import DependencyError
from src.robochamps_erp.robochamps_erp.main import create_app
from src.robochamps_erp.robochamps_erp.schools.model import School
from src.robochamps_erp.robochamps_erp.users.model import User
from tests.fakes import (
    FakeAttendanceRepo,
    FakeBlobStorage,
    FakeLateRequestsRepo,
    FakeMeetingLinksRepo,
    FakeReportsRepo,
    FakeSchoolsRepo,
    FakeSheetsRepo,
    FakeUsersRepo,
)

PASSWORD = "correct horse"
RESET_SECRET = "test-reset-secret"


class BrokenStorage:
    def put(self, *, bucket, path, upload):
        raise DependencyError("storage bucket unreachable")


def _user(user_id, name, email, role, school_id=None):
    return User(
        user_id=user_id,
        name=name,
        email=email,
        password_hash=generate_password_hash(PASSWORD),
        role=role,
        school_id=school_id,
    )


USERS = [
    _user(1, "Ada Admin", "ada@example.com", Role.ADMIN),
    _user(3, "Theo Teacher", "theo@example.com", Role.TEACHER, 1),
    _user(10, "Tina Trainer", "tina@example.com", Role.TRAINER_ROBOCHAMPS, 1),
]


def _app(monkeypatch, storage=None):
    monkeypatch.setenv("APP_ENV", "testing")
    container = wire_services(
        conn=None,
        users_repo=FakeUsersRepo(USERS),
        schools_repo=FakeSchoolsRepo([School(school_id=1, name="North School")]),
        attendance_repo=FakeAttendanceRepo(),
        reports_repo=FakeReportsRepo(),
        late_requests_repo=FakeLateRequestsRepo(),
        sheets_repo=FakeSheetsRepo(),
        meeting_links_repo=FakeMeetingLinksRepo(),
        storage=storage or FakeBlobStorage(),
        admin_reset_secret=RESET_SECRET,
    )
    return create_app(container=container)


@pytest.fixture()
def app(monkeypatch):
    return _app(monkeypatch)


def login(client, email):
    resp = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    return resp


def test_login_me_logout(app):
    client = app.test_client()

    body = login(client, "tina@example.com").get_json()
    assert body["user"]["role"] == "TRAINER_ROBOCHAMPS"

    me = client.get("/api/auth/me").get_json()
    assert me["user"] == {
        "id": 10,
        "name": "Tina Trainer",
        "email": "tina@example.com",
        "role": "TRAINER_ROBOCHAMPS",
        "school_id": 1,
    }

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_bad_login(app):
    resp = app.test_client().post("/api/auth/login", json={"email": "tina@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid email or password"}


def test_requests_require_login(app):
    resp = app.test_client().get("/api/late-upload-requests")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized"}


def test_late_upload_flow_end_to_end(app):
    trainer = app.test_client()
    admin = app.test_client()
    login(trainer, "tina@example.com")
    login(admin, "ada@example.com")

    created = trainer.post(
        "/api/late-upload-requests",
        json={"month": "2025-03", "year": 2025, "reason": "Principal signed the sheet late"},
    )
    assert created.status_code == 201
    request_id = created.get_json()["request"]["id"]
    assert created.get_json()["request"]["status"] == "PENDING"

    again = trainer.post(
        "/api/late-upload-requests",
        json={"month": "2025-03", "year": 2025, "reason": "Principal signed the sheet late"},
    )
    assert again.status_code == 400
    assert again.get_json()["code"] == "ALREADY_PENDING"

    sheet = {"month": "2025-03", "year": "2025", "file": (io.BytesIO(b"%PDF-1.4"), "march.pdf", "application/pdf")}
    blocked = trainer.post("/api/uploaded-sheets", data=sheet, content_type="multipart/form-data")
    assert blocked.status_code == 400
    assert blocked.get_json()["code"] == "LATE_APPROVAL_REQUIRED"

    listed = admin.get("/api/late-upload-requests?status=PENDING&trainerEmail=TINA").get_json()
    assert [r["id"] for r in listed["requests"]] == [request_id]
    by_school = admin.get("/api/late-upload-requests?schoolName=north").get_json()["requests"]
    assert [r["id"] for r in by_school] == [request_id]
    assert admin.get("/api/late-upload-requests?schoolName=south").get_json()["requests"] == []

    approved = admin.patch(f"/api/late-upload-requests/{request_id}", json={"status": "APPROVED"})
    assert approved.status_code == 200
    assert approved.get_json()["request"]["decided_by_admin_name"] == "Ada Admin"

    twice = admin.patch(f"/api/late-upload-requests/{request_id}", json={"status": "REJECTED"})
    assert twice.status_code == 400
    assert twice.get_json()["code"] == "ALREADY_DECIDED"

    sheet = {"month": "2025-03", "year": "2025", "file": (io.BytesIO(b"%PDF-1.4"), "march.pdf", "application/pdf")}
    uploaded = trainer.post("/api/uploaded-sheets", data=sheet, content_type="multipart/form-data")
    assert uploaded.status_code == 201
    assert uploaded.get_json()["sheet"]["file_name"] == "march.pdf"

    sheets = admin.get("/api/uploaded-sheets?month=2025-03").get_json()["sheets"]
    assert len(sheets) == 1


def test_decision_errors(app):
    admin = app.test_client()
    login(admin, "ada@example.com")

    missing = admin.patch("/api/late-upload-requests/999", json={"status": "APPROVED"})
    assert missing.status_code == 404

    bad = admin.patch("/api/late-upload-requests/1", json={"status": "MAYBE"})
    assert bad.status_code == 400
    assert bad.get_json()["details"] == {"status": "must be APPROVED or REJECTED"}


def test_validation_details_are_returned(app):
    trainer = app.test_client()
    login(trainer, "tina@example.com")

    resp = trainer.post("/api/late-upload-requests", json={"month": "March", "year": "x", "reason": "late"})

    assert resp.status_code == 400
    assert set(resp.get_json()["details"]) == {"month", "year", "reason"}


def test_teacher_is_forbidden_from_late_requests(app):
    teacher = app.test_client()
    login(teacher, "theo@example.com")
    assert teacher.get("/api/late-upload-requests").status_code == 403
    resp = teacher.post("/api/late-upload-requests", json={"month": "2025-03", "year": 2025, "reason": "x" * 20})
    assert resp.status_code == 403


def test_attendance_report_and_combined_records(app):
    trainer = app.test_client()
    login(trainer, "tina@example.com")

    marked = trainer.post(
        "/api/attendance",
        data={"class_label": "Grade 5", "lat": "12.97", "lng": "77.59", "photo": (io.BytesIO(b"jpeg"), "me.jpg", "image/jpeg")},
        content_type="multipart/form-data",
    )
    assert marked.status_code == 201

    report = trainer.post(
        "/api/reports",
        json={"type": "TRAINER_CLASS", "topics": "Motors", "summary": "Built a fan"},
    )
    assert report.status_code == 201

    records = trainer.get("/api/combined-records").get_json()["records"]
    assert len(records) == 1
    assert records[0]["attendance"]["class_label"] == "Grade 5"
    assert records[0]["attendance"]["geo"]["lat"] == 12.97
    assert [r["summary"] for r in records[0]["reports"]] == ["Built a fan"]
    assert records[0]["school_name"] == "North School"

    assert len(trainer.get("/api/attendance").get_json()["records"]) == 1
    assert len(trainer.get("/api/reports").get_json()["reports"]) == 1


def test_bad_query_parameters(app):
    admin = app.test_client()
    login(admin, "ada@example.com")
    resp = admin.get("/api/combined-records?startDate=yesterday")
    assert resp.status_code == 400
    assert "startDate" in resp.get_json()["details"]


def test_meeting_links_api(app):
    admin = app.test_client()
    trainer = app.test_client()
    login(admin, "ada@example.com")
    login(trainer, "tina@example.com")

    created = admin.post("/api/meeting-links", json={"title": "Sync", "url": "https://meet.test/x"})
    assert created.status_code == 201
    link_id = created.get_json()["meeting_link"]["id"]

    assert trainer.post("/api/meeting-links", json={"title": "x", "url": "https://x.test"}).status_code == 403
    assert [l["id"] for l in trainer.get("/api/meeting-links").get_json()["meeting_links"]] == [link_id]

    assert trainer.post("/api/meeting-links/click", json={"meeting_link_id": link_id}).status_code == 200
    assert trainer.post("/api/meeting-links/click", json={"meeting_link_id": 404}).status_code == 404

    stats = admin.get("/api/meeting-links/stats").get_json()
    assert stats["total_clicks"] == 1
    assert stats["recent_clicks"][0]["school_name"] == "North School"

    assert admin.put(f"/api/meeting-links/{link_id}", json={"title": "Renamed"}).status_code == 200
    assert admin.delete(f"/api/meeting-links/{link_id}").status_code == 200
    assert admin.delete(f"/api/meeting-links/{link_id}").status_code == 404


def test_storage_failure_is_an_opaque_500(monkeypatch):
    app = _app(monkeypatch, storage=BrokenStorage())
    trainer = app.test_client()
    login(trainer, "tina@example.com")

    resp = trainer.post(
        "/api/attendance",
        data={"class_label": "Grade 5", "photo": (io.BytesIO(b"jpeg"), "me.jpg", "image/jpeg")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to mark attendance"}


def test_user_administration_api(app):
    admin = app.test_client()
    trainer = app.test_client()
    login(admin, "ada@example.com")
    login(trainer, "tina@example.com")

    assert trainer.get("/api/users").status_code == 403

    created = admin.post(
        "/api/users",
        json={"name": "Sam", "email": "sam@example.com", "password": "secret1", "role": "TEACHER", "school_id": 1},
    )
    assert created.status_code == 201
    sam_id = created.get_json()["user"]["id"]
    assert "password_hash" not in created.get_json()["user"]

    duplicate = admin.post(
        "/api/users/create",
        json={"name": "Sam", "email": "SAM@example.com", "password": "secret1", "role": "TEACHER"},
    )
    assert duplicate.status_code == 400
    assert duplicate.get_json()["details"] == {"email": "is already registered"}

    listed = admin.get("/api/users").get_json()["users"]
    assert listed[0]["id"] == sam_id
    assert listed[0]["school_name"] == "North School"

    assert admin.put(f"/api/users/{sam_id}", json={"new_password": "changed1"}).status_code == 200
    assert app.test_client().post(
        "/api/auth/login", json={"email": "sam@example.com", "password": "changed1"}
    ).status_code == 200

    self_delete = admin.delete("/api/users/1")
    assert self_delete.status_code == 400
    assert self_delete.get_json()["code"] == "SELF_DELETE"
    assert admin.delete(f"/api/users/{sam_id}").status_code == 200
    assert admin.delete(f"/api/users/{sam_id}").status_code == 404


def test_school_administration_and_signup_api(app):
    admin = app.test_client()
    login(admin, "ada@example.com")

    assert app.test_client().get("/api/schools").status_code == 401

    created = admin.post("/api/schools", json={"name": "West School", "location_text": "Mumbai", "school_code": "west-2"})
    assert created.status_code == 201
    school_id = created.get_json()["school"]["id"]

    found = app.test_client().get("/api/schools/by-code?code=west-2")
    assert found.status_code == 200
    assert found.get_json()["school"]["id"] == school_id
    assert app.test_client().get("/api/schools/by-code?code=nope").status_code == 404

    signup = app.test_client().post(
        "/api/auth/signup",
        json={
            "full_name": "Rita Robo",
            "email": "rita@example.com",
            "password": "secret1",
            "trainer_type": "SCHOOL",
            "school_code": "WEST-2",
        },
    )
    assert signup.status_code == 201
    assert signup.get_json()["user"]["role"] == "TRAINER_SCHOOL"

    in_use = admin.delete(f"/api/schools/{school_id}")
    assert in_use.status_code == 400
    assert in_use.get_json()["code"] == "SCHOOL_IN_USE"

    renamed = admin.put(f"/api/schools/{school_id}", json={"name": "West High"})
    assert renamed.get_json()["school"]["name"] == "West High"
    assert [s["name"] for s in admin.get("/api/schools").get_json()["schools"]] == ["North School", "West High"]


def test_reset_password_api(app):
    client = app.test_client()

    refused = client.post(
        "/api/admin/reset-password",
        json={"email": "ada@example.com", "new_password": "recovered", "secret_key": "guess"},
    )
    assert refused.status_code == 403

    reset = client.post(
        "/api/admin/reset-password",
        json={"email": "ada@example.com", "new_password": "recovered", "secret_key": RESET_SECRET},
    )
    assert reset.status_code == 200
    assert reset.get_json()["created"] is False
    assert client.post("/api/auth/login", json={"email": "ada@example.com", "password": "recovered"}).status_code == 200
