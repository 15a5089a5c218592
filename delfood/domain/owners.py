"""
Owner entity and the outcome values returned by account operations.

Every expected business condition is reported as one of the frozen
dataclasses below rather than as an exception. Each operation returns a
union of the variants it can produce (see the ``*Outcome`` aliases), so
callers dispatch on the concrete type.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Any, Optional, Union

SIGNUP_REQUIRED_FIELDS = ("id", "password", "mail", "tel")


class OwnerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


@dataclass(frozen=True)
class OwnerProfile:
    """Outward view of an owner. Has no password attribute."""

    id: str
    name: Optional[str]
    mail: str
    tel: str
    status: OwnerStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "mail": self.mail,
            "tel": self.tel,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class Owner:
    id: str
    password_hash: str = field(repr=False)
    mail: str
    tel: str
    name: Optional[str] = None
    status: OwnerStatus = OwnerStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status is OwnerStatus.ACTIVE

    def to_profile(self) -> OwnerProfile:
        return OwnerProfile(
            id=self.id,
            name=self.name,
            mail=self.mail,
            tel=self.tel,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


def normalize_owner_id(value: str | None) -> str:
    """Owner ids are compared without surrounding whitespace everywhere."""
    return (value or "").strip()


def missing_signup_fields(owner_info: Mapping[str, Any]) -> tuple[str, ...]:
    """Return the required signup fields that are absent or blank."""
    missing = []
    for name in SIGNUP_REQUIRED_FIELDS:
        value = owner_info.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return tuple(missing)


# -------------------------------------- outcomes --------------------------------------
@dataclass(frozen=True)
class Created:
    owner_id: str


@dataclass(frozen=True)
class IdDuplicated:
    owner_id: str


@dataclass(frozen=True)
class ValidationFailed:
    missing_fields: tuple[str, ...]


@dataclass(frozen=True)
class Available:
    owner_id: str


@dataclass(frozen=True)
class Taken:
    owner_id: str


@dataclass(frozen=True)
class LoginSuccess:
    owner: OwnerProfile
    session_token: str = field(repr=False)


@dataclass(frozen=True)
class InvalidCredentials:
    pass


@dataclass(frozen=True)
class AccountDeleted:
    pass


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class Unauthenticated:
    pass


@dataclass(frozen=True)
class Updated:
    owner_id: str


@dataclass(frozen=True)
class PasswordMismatch:
    pass


@dataclass(frozen=True)
class EmptyContent:
    pass


@dataclass(frozen=True)
class EmptyPassword:
    pass


@dataclass(frozen=True)
class PasswordDuplicated:
    pass


SignUpOutcome = Union[Created, IdDuplicated, ValidationFailed]
IdAvailabilityOutcome = Union[Available, Taken]
LoginOutcome = Union[LoginSuccess, InvalidCredentials, AccountDeleted]
LogoutOutcome = Union[LoggedOut, Unauthenticated]
ProfileOutcome = Union[OwnerProfile, Unauthenticated]
UpdateContactOutcome = Union[Updated, PasswordMismatch, EmptyContent, Unauthenticated]
UpdatePasswordOutcome = Union[Updated, EmptyPassword, PasswordMismatch, PasswordDuplicated, Unauthenticated]
