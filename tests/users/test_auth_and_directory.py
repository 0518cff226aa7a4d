from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.robochamps_erp.robochamps_erp.core.enums import Role
from src.robochamps_erp.robochamps_erp.core.exceptions import AuthenticationError
from src.robochamps_erp.robochamps_erp.schools.model import School
from src.robochamps_erp.robochamps_erp.users.directory import Directory, matches_trainer
from src.robochamps_erp.robochamps_erp.users.model import User
from src.robochamps_erp.robochamps_erp.users.service import AuthService
from tests.fakes import FakeSchoolsRepo, FakeUsersRepo

TINA = User(
    user_id=10,
    name="Tina Trainer",
    email="tina@example.com",
    password_hash=generate_password_hash("s3cret-pass"),
    role=Role.TRAINER_SCHOOL,
    school_id=1,
)


def test_authenticate_returns_session_user():
    svc = AuthService(FakeUsersRepo([TINA]))

    user = svc.authenticate("Tina@Example.com", "s3cret-pass")

    assert (user.user_id, user.role, user.school_id) == (10, Role.TRAINER_SCHOOL, 1)


@pytest.mark.parametrize(
    "email,password",
    [("tina@example.com", "wrong"), ("nobody@example.com", "s3cret-pass"), ("tina@example.com", "")],
)
def test_authenticate_failures_share_one_message(email, password):
    svc = AuthService(FakeUsersRepo([TINA]))
    with pytest.raises(AuthenticationError) as exc:
        svc.authenticate(email, password)
    assert str(exc.value) == "Invalid email or password"


def test_placeholder_hash_never_matches():
    svc = AuthService(FakeUsersRepo([User(user_id=2, name="X", email="x@example.com", password_hash="CHANGE_ME", role=Role.ADMIN)]))
    with pytest.raises(AuthenticationError):
        svc.authenticate("x@example.com", "CHANGE_ME")


def test_directory_resolves_unknown_ids():
    directory = Directory.load(FakeUsersRepo([TINA]), FakeSchoolsRepo([School(school_id=1, name="North School")]))

    assert directory.trainer(10).name == "Tina Trainer"
    assert directory.trainer(99).email == "Unknown"
    assert directory.trainer(None).name == "Unknown"
    assert directory.school_name(1) == "North School"
    assert directory.school_name(None) == "Unknown"


def test_matches_trainer_is_case_insensitive_substring():
    assert matches_trainer("Tina Trainer", "tina@example.com", name="TRAIN")
    assert matches_trainer("Tina Trainer", "tina@example.com", email="EXAMPLE")
    assert not matches_trainer("Tina Trainer", "tina@example.com", name="sam")
    assert matches_trainer("Tina Trainer", "tina@example.com")
