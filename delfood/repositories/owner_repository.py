"""Identity store for owner records, backed by SQLAlchemy."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from delfood.core.security import verify_password
from delfood.db.models import OwnerRow
from delfood.db.session import get_session
from delfood.domain.owners import Owner, OwnerStatus

logger = logging.getLogger(__name__)


class IdentityStoreError(Exception):
    """Base class for identity store failures."""


class DuplicateIdentityError(IdentityStoreError):
    def __init__(self, owner_id: str):
        super().__init__(f"Owner id already exists: {owner_id}")
        self.owner_id = owner_id


class IdentityStore(Protocol):
    """Persistence interface consumed by the account services."""

    def find_by_id(self, owner_id: str) -> Optional[Owner]:
        """Return the owner with this id, if present."""

    def find_by_id_and_password(self, owner_id: str, password: str) -> Optional[Owner]:
        """Return the owner only when the password matches."""

    def exists_by_id(self, owner_id: str) -> bool:
        """Return True when any record (active or deleted) uses this id."""

    def insert(self, owner: Owner) -> None:
        """Persist a new owner. Raises DuplicateIdentityError when the id is taken."""

    def update_contact(self, owner_id: str, mail: str | None = None, tel: str | None = None) -> None:
        """Overwrite the given contact fields, leaving omitted ones untouched."""

    def update_password(self, owner_id: str, password_hash: str) -> None:
        """Overwrite the stored credential."""


def _to_owner(row: OwnerRow) -> Owner:
    return Owner(
        id=row.id,
        password_hash=row.password_hash,
        name=row.name,
        mail=row.mail,
        tel=row.tel,
        status=OwnerStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SQLOwnerRepository:
    """CRUD helpers for the owners table."""

    def find_by_id(self, owner_id: str) -> Optional[Owner]:
        with get_session() as session:
            row = session.get(OwnerRow, owner_id)
            return _to_owner(row) if row else None

    def find_by_id_and_password(self, owner_id: str, password: str) -> Optional[Owner]:
        owner = self.find_by_id(owner_id)
        if owner is None or not verify_password(password, owner.password_hash):
            return None
        return owner

    def exists_by_id(self, owner_id: str) -> bool:
        with get_session() as session:
            stmt = select(OwnerRow.id).where(OwnerRow.id == owner_id).limit(1)
            return session.execute(stmt).first() is not None

    def insert(self, owner: Owner) -> None:
        now = datetime.now(timezone.utc)
        row = OwnerRow(
            id=owner.id,
            password_hash=owner.password_hash,
            name=owner.name,
            mail=owner.mail,
            tel=owner.tel,
            status=owner.status.value,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                # Only a primary key clash is a duplicate identity; other constraint errors propagate.
                if self.exists_by_id(owner.id):
                    raise DuplicateIdentityError(owner.id) from exc
                raise

    def update_contact(self, owner_id: str, mail: str | None = None, tel: str | None = None) -> None:
        values: dict = {}
        if mail is not None:
            values["mail"] = mail
        if tel is not None:
            values["tel"] = tel
        if not values:
            return
        values["updated_at"] = datetime.now(timezone.utc)
        with get_session() as session:
            session.execute(update(OwnerRow).where(OwnerRow.id == owner_id).values(**values))
            session.commit()

    def update_password(self, owner_id: str, password_hash: str) -> None:
        with get_session() as session:
            stmt = (
                update(OwnerRow)
                .where(OwnerRow.id == owner_id)
                .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()

    def mark_deleted(self, owner_id: str) -> bool:
        """Move an owner to DELETED. Returns False when no such owner exists."""
        with get_session() as session:
            stmt = (
                update(OwnerRow)
                .where(OwnerRow.id == owner_id)
                .values(status=OwnerStatus.DELETED.value, updated_at=datetime.now(timezone.utc))
            )
            result = session.execute(stmt)
            session.commit()
            changed = bool(result.rowcount)
        if changed:
            logger.info("Owner %s marked as deleted", owner_id)
        return changed
