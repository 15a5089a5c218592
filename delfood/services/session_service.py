"""Session helpers: bind/clear/resolve the owner behind a session token, plus cookies."""
from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol, Tuple

from fastapi import Request, Response
from sqlalchemy import delete

from delfood.core.config import get_settings
from delfood.db.models import OwnerSessionRow
from delfood.db.session import get_session

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "owner_session"
MIN_SESSION_TTL_SECONDS = 60


def _utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC.
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SessionStore(Protocol):
    """Token -> owner id mapping with expiry."""

    def save(self, token: str, owner_id: str, expires_at: datetime) -> None:
        """Create or overwrite the binding for a token."""

    def owner_for(self, token: str, now: datetime) -> Optional[str]:
        """Return the bound owner id, purging the binding when expired."""

    def delete(self, token: str) -> None:
        """Remove a binding; missing tokens are ignored."""

    def delete_for_owner(self, owner_id: str) -> None:
        """Remove every binding of one owner."""


class SQLSessionStore:
    """Sessions persisted in the owner_sessions table."""

    def save(self, token: str, owner_id: str, expires_at: datetime) -> None:
        with get_session() as session:
            session.merge(OwnerSessionRow(token=token, owner_id=owner_id, expires_at=expires_at))
            session.commit()

    def owner_for(self, token: str, now: datetime) -> Optional[str]:
        with get_session() as session:
            row = session.get(OwnerSessionRow, token)
            if not row:
                return None
            if row.expires_at and _utc(row.expires_at) < now:
                session.delete(row)
                session.commit()
                return None
            return row.owner_id

    def delete(self, token: str) -> None:
        with get_session() as session:
            session.execute(delete(OwnerSessionRow).where(OwnerSessionRow.token == token))
            session.commit()

    def delete_for_owner(self, owner_id: str) -> None:
        with get_session() as session:
            session.execute(delete(OwnerSessionRow).where(OwnerSessionRow.owner_id == owner_id))
            session.commit()


class InMemorySessionStore:
    """Process-local sessions, for single-worker deployments and tests."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Tuple[str, datetime]] = {}
        self._lock = threading.Lock()

    def save(self, token: str, owner_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._sessions[token] = (owner_id, expires_at)

    def owner_for(self, token: str, now: datetime) -> Optional[str]:
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            owner_id, expires_at = entry
            if expires_at < now:
                del self._sessions[token]
                return None
            return owner_id

    def delete(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def delete_for_owner(self, owner_id: str) -> None:
        with self._lock:
            for token in [t for t, (oid, _) in self._sessions.items() if oid == owner_id]:
                del self._sessions[token]


def _default_ttl() -> int:
    return get_settings().session_ttl_seconds


@dataclass
class SessionManager:
    """
    Tracks which owner, if any, a session token is authenticated as.

    A token is either anonymous (no binding) or bound to exactly one owner id.
    ``bind`` drops the caller's previous token and issues a new one, so a
    client-chosen token is never authenticated. ``clear`` always succeeds.
    """

    store: SessionStore
    ttl_seconds: int = field(default_factory=_default_ttl)
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(timezone.utc), repr=False)

    def bind(self, previous_token: Optional[str], owner_id: str) -> str:
        """Authenticate as ``owner_id`` under a freshly issued token; the previous token is cleared."""
        self.clear(previous_token)
        token = secrets.token_urlsafe(32)
        ttl = max(MIN_SESSION_TTL_SECONDS, self.ttl_seconds)
        self.store.save(token, owner_id, self.clock() + timedelta(seconds=ttl))
        return token

    def clear(self, token: Optional[str]) -> None:
        if not token:
            return
        self.store.delete(token)

    def current_owner_id(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        return self.store.owner_for(token, self.clock())

    def revoke_owner(self, owner_id: str) -> None:
        self.store.delete_for_owner(owner_id)
        logger.info("Revoked all sessions of owner %s", owner_id)


def session_token(request: Request) -> str | None:
    """Return the session token carried by the request cookie, if any."""
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    secure_cookie = settings.app_env == "prod"
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=secure_cookie,
        samesite="strict",
        max_age=max(MIN_SESSION_TTL_SECONDS, settings.session_ttl_seconds),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
