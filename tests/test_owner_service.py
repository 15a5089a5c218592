"""Use-case tests for OwnerAccountService."""
from __future__ import annotations

import threading

from delfood.domain.owners import (
    AccountDeleted,
    Available,
    Created,
    EmptyContent,
    EmptyPassword,
    IdDuplicated,
    InvalidCredentials,
    LoggedOut,
    LoginSuccess,
    OwnerProfile,
    PasswordDuplicated,
    PasswordMismatch,
    Taken,
    Unauthenticated,
    Updated,
    ValidationFailed,
)
from delfood.repositories.owner_repository import SQLOwnerRepository
from delfood.services.owner_service import OwnerAccountService
from delfood.services.session_service import InMemorySessionStore, SessionManager
from tests.conftest import InMemoryIdentityStore

CHEF = {"id": "chef1", "password": "p@ss", "mail": "a@b.com", "tel": "010-1234-5678"}


def _login(service: OwnerAccountService, password: str = "p@ss") -> str:
    outcome = service.login("chef1", password, None)
    assert isinstance(outcome, LoginSuccess)
    return outcome.session_token


def test_sign_up_then_id_is_taken(service):
    assert isinstance(service.check_id_availability("chef1"), Available)
    assert service.sign_up(CHEF) == Created("chef1")
    assert isinstance(service.check_id_availability("chef1"), Taken)


def test_sign_up_duplicate_id(service):
    service.sign_up(CHEF)
    assert service.sign_up({**CHEF, "password": "other"}) == IdDuplicated("chef1")


def test_sign_up_missing_fields(service):
    outcome = service.sign_up({"id": "chef1", "password": "p@ss", "mail": None, "tel": "  "})
    assert isinstance(outcome, ValidationFailed)
    assert outcome.missing_fields == ("mail", "tel")
    assert isinstance(service.check_id_availability("chef1"), Available)


def test_sign_up_stores_hashed_password(service):
    service.sign_up(CHEF)
    owner = SQLOwnerRepository().find_by_id("chef1")
    assert owner.password_hash != "p@ss"
    assert owner.password_hash.startswith("argon2$")


def test_login_success_binds_session(service):
    service.sign_up(CHEF)
    outcome = service.login("chef1", "p@ss", None)
    assert isinstance(outcome, LoginSuccess)
    assert outcome.owner.id == "chef1"
    assert not hasattr(outcome.owner, "password")
    assert not hasattr(outcome.owner, "password_hash")
    assert service.sessions.current_owner_id(outcome.session_token) == "chef1"


def test_login_wrong_password_does_not_touch_session(service):
    service.sign_up(CHEF)
    service.sign_up({**CHEF, "id": "chef2"})
    token = service.login("chef2", "p@ss", None).session_token

    assert isinstance(service.login("chef1", "wrong", token), InvalidCredentials)
    assert isinstance(service.login("ghost", "p@ss", token), InvalidCredentials)
    assert service.sessions.current_owner_id(token) == "chef2"


def test_login_deleted_owner(service):
    service.sign_up(CHEF)
    SQLOwnerRepository().mark_deleted("chef1")
    assert isinstance(service.login("chef1", "p@ss", "tok"), AccountDeleted)
    assert service.sessions.current_owner_id("tok") is None
    assert isinstance(service.login("chef1", "wrong", "tok"), InvalidCredentials)


def test_login_issues_fresh_token_and_drops_previous_one(service):
    service.sign_up(CHEF)
    planted = service.login("chef1", "p@ss", "planted-token")
    assert isinstance(planted, LoginSuccess)
    assert planted.session_token != "planted-token"
    assert service.sessions.current_owner_id("planted-token") is None

    first = planted.session_token
    second = service.login("chef1", "p@ss", first).session_token
    assert second != first
    assert service.sessions.current_owner_id(first) is None
    assert service.sessions.current_owner_id(second) == "chef1"


def test_owner_id_whitespace_is_ignored_consistently(service):
    assert service.sign_up({**CHEF, "id": " chef1 "}) == Created("chef1")
    assert isinstance(service.check_id_availability(" chef1 "), Taken)
    assert isinstance(service.check_id_availability("chef1"), Taken)
    assert isinstance(service.login(" chef1 ", "p@ss", None), LoginSuccess)
    assert service.sign_up(CHEF) == IdDuplicated("chef1")


def test_profile_of_deleted_owner_is_unauthenticated(service):
    service.sign_up(CHEF)
    token = _login(service)
    SQLOwnerRepository().mark_deleted("chef1")

    assert isinstance(service.get_own_profile(token), Unauthenticated)
    assert service.sessions.current_owner_id(token) is None


def test_logout_clears_binding_and_repeat_is_gated(service):
    service.sign_up(CHEF)
    token = _login(service)

    assert isinstance(service.logout(token), LoggedOut)
    assert service.sessions.current_owner_id(token) is None
    assert isinstance(service.logout(token), Unauthenticated)
    assert service.sessions.current_owner_id(token) is None


def test_protected_operations_reject_anonymous(service):
    service.sign_up(CHEF)
    assert isinstance(service.get_own_profile(None), Unauthenticated)
    assert isinstance(service.get_own_profile("bogus"), Unauthenticated)
    assert isinstance(service.update_contact(None, "x@y.com", None, "p@ss"), Unauthenticated)
    assert isinstance(service.update_password("bogus", "p@ss", "newpw"), Unauthenticated)
    assert isinstance(service.logout(None), Unauthenticated)
    assert service.login("chef1", "wrong", None) == InvalidCredentials()


def test_get_own_profile(service):
    service.sign_up({**CHEF, "name": "Kim"})
    profile = service.get_own_profile(_login(service))
    assert isinstance(profile, OwnerProfile)
    assert profile.id == "chef1"
    assert profile.name == "Kim"
    assert "password" not in profile.as_dict()


def test_update_contact(service):
    service.sign_up(CHEF)
    token = _login(service)

    assert isinstance(service.update_contact(token, "new@b.com", None, "wrong"), PasswordMismatch)
    assert isinstance(service.update_contact(token, None, None, "p@ss"), EmptyContent)
    assert service.update_contact(token, "new@b.com", None, "p@ss") == Updated("chef1")

    profile = service.get_own_profile(token)
    assert profile.mail == "new@b.com"
    assert profile.tel == "010-1234-5678"


def test_update_password_rules(service):
    service.sign_up(CHEF)
    token = _login(service)

    assert isinstance(service.update_password(token, None, "newpw"), EmptyPassword)
    assert isinstance(service.update_password(token, "p@ss", None), EmptyPassword)
    assert isinstance(service.update_password(token, "wrong", "newpw"), PasswordMismatch)
    assert isinstance(service.update_password(token, "p@ss", "p@ss"), PasswordDuplicated)
    # rejected change was not persisted
    assert isinstance(service.login("chef1", "p@ss", None), LoginSuccess)


def test_password_change_keeps_other_sessions(service):
    service.sign_up(CHEF)
    first = _login(service)
    second = _login(service)

    assert service.update_password(first, "p@ss", "newpw") == Updated("chef1")
    assert service.sessions.current_owner_id(second) == "chef1"


def test_chef_scenario(service):
    assert service.sign_up(CHEF) == Created("chef1")

    login = service.login("chef1", "p@ss", None)
    assert isinstance(login, LoginSuccess)
    assert login.owner.id == "chef1"
    token = login.session_token

    assert isinstance(service.update_password(token, "p@ss", "p@ss"), PasswordDuplicated)
    assert service.update_password(token, "p@ss", "newpw") == Updated("chef1")
    assert isinstance(service.login("chef1", "p@ss", None), InvalidCredentials)
    assert isinstance(service.login("chef1", "newpw", None), LoginSuccess)


class RacingIdentityStore(InMemoryIdentityStore):
    """Both signups pass the existence check before either inserts."""

    def __init__(self) -> None:
        super().__init__()
        self.barrier = threading.Barrier(2)

    def exists_by_id(self, owner_id: str) -> bool:
        exists = super().exists_by_id(owner_id)
        self.barrier.wait(timeout=5)
        return exists


def test_concurrent_sign_up_creates_once():
    store = RacingIdentityStore()
    service = OwnerAccountService(identity_store=store, sessions=SessionManager(store=InMemorySessionStore(), ttl_seconds=600))
    outcomes = []

    def _sign_up(password: str) -> None:
        outcomes.append(service.sign_up({**CHEF, "password": password}))

    threads = [threading.Thread(target=_sign_up, args=(pw,)) for pw in ("one", "two")]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert sorted(type(o).__name__ for o in outcomes) == ["Created", "IdDuplicated"]
    assert list(store.owners) == ["chef1"]
