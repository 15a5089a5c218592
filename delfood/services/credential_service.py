"""Checks id/password pairs against the identity store."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from delfood.domain.owners import Owner, normalize_owner_id
from delfood.repositories.owner_repository import IdentityStore

logger = logging.getLogger(__name__)


class AuthFailure(Enum):
    """Why a credential check failed. Only ACCOUNT_DELETED is shown to callers as such."""

    NO_SUCH_ID = "no_such_id"
    PASSWORD_MISMATCH = "password_mismatch"
    ACCOUNT_DELETED = "account_deleted"


@dataclass
class CredentialValidator:
    identity_store: IdentityStore

    def authenticate(self, owner_id: str | None, password: str | None) -> Owner | AuthFailure:
        """Return the owner when the pair matches an ACTIVE record, else the failure reason."""
        owner_id = normalize_owner_id(owner_id)
        if not owner_id:
            return AuthFailure.NO_SUCH_ID
        if password is None:
            return AuthFailure.PASSWORD_MISMATCH
        owner = self.identity_store.find_by_id_and_password(owner_id, password)
        if owner is None:
            if self.identity_store.exists_by_id(owner_id):
                logger.info("Password mismatch for owner %s", owner_id)
                return AuthFailure.PASSWORD_MISMATCH
            logger.info("Login attempt for unknown owner %s", owner_id)
            return AuthFailure.NO_SUCH_ID
        if not owner.is_active:
            logger.info("Login attempt for deleted owner %s", owner_id)
            return AuthFailure.ACCOUNT_DELETED
        return owner
