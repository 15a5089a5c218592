"""
Owner account use cases: signup, login/logout and self-service updates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from delfood.core.security import hash_password
from delfood.domain.owners import (
    AccountDeleted,
    Available,
    Created,
    EmptyContent,
    EmptyPassword,
    IdAvailabilityOutcome,
    IdDuplicated,
    InvalidCredentials,
    LoggedOut,
    LoginOutcome,
    LoginSuccess,
    LogoutOutcome,
    Owner,
    OwnerStatus,
    PasswordDuplicated,
    PasswordMismatch,
    ProfileOutcome,
    SignUpOutcome,
    Taken,
    Unauthenticated,
    UpdateContactOutcome,
    Updated,
    UpdatePasswordOutcome,
    ValidationFailed,
    missing_signup_fields,
    normalize_owner_id,
)
from delfood.repositories.owner_repository import DuplicateIdentityError, IdentityStore, SQLOwnerRepository
from delfood.services.access_gate import AccessGate, AuthenticatedOwner, owner_required
from delfood.services.credential_service import AuthFailure, CredentialValidator
from delfood.services.session_service import SessionManager, SQLSessionStore

logger = logging.getLogger(__name__)


@dataclass
class OwnerAccountService:
    """Handles signup, login/logout and profile/password changes for owners."""

    identity_store: IdentityStore
    sessions: SessionManager
    credentials: CredentialValidator = field(default=None)
    access_gate: AccessGate = field(default=None)

    def __post_init__(self):
        if self.credentials is None:
            self.credentials = CredentialValidator(self.identity_store)
        if self.access_gate is None:
            self.access_gate = AccessGate(self.sessions)

    # -------------------------------------- signup --------------------------------------
    def sign_up(self, owner_info: Mapping[str, Any]) -> SignUpOutcome:
        missing = missing_signup_fields(owner_info)
        if missing:
            return ValidationFailed(missing_fields=missing)
        owner_id = normalize_owner_id(owner_info["id"])
        # Fast path only; the primary key constraint at insert time is the real guard.
        if self.identity_store.exists_by_id(owner_id):
            return IdDuplicated(owner_id)
        owner = Owner(
            id=owner_id,
            password_hash=hash_password(owner_info["password"]),
            name=owner_info.get("name"),
            mail=owner_info["mail"],
            tel=owner_info["tel"],
            status=OwnerStatus.ACTIVE,
        )
        try:
            self.identity_store.insert(owner)
        except DuplicateIdentityError:
            logger.info("Concurrent signup lost the race for owner id %s", owner_id)
            return IdDuplicated(owner_id)
        logger.info("Owner %s signed up", owner_id)
        return Created(owner_id)

    def check_id_availability(self, owner_id: str) -> IdAvailabilityOutcome:
        owner_id = normalize_owner_id(owner_id)
        if self.identity_store.exists_by_id(owner_id):
            return Taken(owner_id)
        return Available(owner_id)

    # -------------------------------------- login --------------------------------------
    def login(self, owner_id: str | None, password: str | None, session_token: str | None) -> LoginOutcome:
        result = self.credentials.authenticate(owner_id, password)
        if result is AuthFailure.ACCOUNT_DELETED:
            return AccountDeleted()
        if isinstance(result, AuthFailure):
            return InvalidCredentials()
        token = self.sessions.bind(session_token, result.id)
        logger.info("Owner %s logged in", result.id)
        return LoginSuccess(owner=result.to_profile(), session_token=token)

    @owner_required
    def logout(self, session: AuthenticatedOwner) -> LogoutOutcome:
        self.sessions.clear(session.token)
        logger.info("Owner %s logged out", session.owner_id)
        return LoggedOut()

    # -------------------------------------- profile --------------------------------------
    @owner_required
    def get_own_profile(self, session: AuthenticatedOwner) -> ProfileOutcome:
        owner = self.identity_store.find_by_id(session.owner_id)
        if owner is None or not owner.is_active:
            # Binding points at a record that no longer exists or was deleted.
            self.sessions.clear(session.token)
            return Unauthenticated()
        return owner.to_profile()

    @owner_required
    def update_contact(
        self,
        session: AuthenticatedOwner,
        mail: str | None,
        tel: str | None,
        current_password: str | None,
    ) -> UpdateContactOutcome:
        if not isinstance(self.credentials.authenticate(session.owner_id, current_password), Owner):
            return PasswordMismatch()
        if mail is None and tel is None:
            return EmptyContent()
        self.identity_store.update_contact(session.owner_id, mail=mail, tel=tel)
        logger.info("Owner %s updated contact details", session.owner_id)
        return Updated(session.owner_id)

    @owner_required
    def update_password(
        self,
        session: AuthenticatedOwner,
        current_password: str | None,
        new_password: str | None,
    ) -> UpdatePasswordOutcome:
        if current_password is None or new_password is None:
            return EmptyPassword()
        if not isinstance(self.credentials.authenticate(session.owner_id, current_password), Owner):
            return PasswordMismatch()
        if current_password == new_password:
            return PasswordDuplicated()
        # Other sessions of this owner stay bound.
        self.identity_store.update_password(session.owner_id, hash_password(new_password))
        logger.info("Owner %s changed password", session.owner_id)
        return Updated(session.owner_id)


def build_owner_service() -> OwnerAccountService:
    """Wire the service against the SQL identity store and SQL sessions."""
    return OwnerAccountService(
        identity_store=SQLOwnerRepository(),
        sessions=SessionManager(store=SQLSessionStore()),
    )
