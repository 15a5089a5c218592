"""Shared test fixtures."""
from __future__ import annotations

import sys
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

# Make the delfood package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from delfood.core import config as core_config  # noqa: E402
from delfood.core.rate_limiter import reset_limits  # noqa: E402
from delfood.core.security import verify_password  # noqa: E402
from delfood.db.create_tables import create_all, drop_all  # noqa: E402
from delfood.db import session as db_session  # noqa: E402
from delfood.domain.owners import Owner  # noqa: E402
from delfood.repositories.owner_repository import DuplicateIdentityError, SQLOwnerRepository  # noqa: E402
from delfood.services.owner_service import OwnerAccountService  # noqa: E402
from delfood.services.session_service import SessionManager, SQLSessionStore  # noqa: E402


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point the app at a temporary SQLite file and reset cached settings/engine."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    drop_all(engine)
    create_all(engine)

    yield db_file

    drop_all(engine)
    engine.dispose()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
    core_config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    reset_limits()
    yield
    reset_limits()


@pytest.fixture()
def service(db_env) -> OwnerAccountService:
    return OwnerAccountService(
        identity_store=SQLOwnerRepository(),
        sessions=SessionManager(store=SQLSessionStore(), ttl_seconds=3600),
    )


@dataclass
class InMemoryIdentityStore:
    """Dict-backed identity store. ``insert`` enforces id uniqueness like a primary key."""

    owners: dict[str, Owner] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def find_by_id(self, owner_id: str) -> Optional[Owner]:
        return self.owners.get(owner_id)

    def find_by_id_and_password(self, owner_id: str, password: str) -> Optional[Owner]:
        owner = self.owners.get(owner_id)
        if owner is None or not verify_password(password, owner.password_hash):
            return None
        return owner

    def exists_by_id(self, owner_id: str) -> bool:
        return owner_id in self.owners

    def insert(self, owner: Owner) -> None:
        with self.lock:
            if owner.id in self.owners:
                raise DuplicateIdentityError(owner.id)
            self.owners[owner.id] = replace(owner, created_at=datetime.now(timezone.utc))

    def update_contact(self, owner_id: str, mail: str | None = None, tel: str | None = None) -> None:
        owner = self.owners[owner_id]
        self.owners[owner_id] = replace(
            owner,
            mail=owner.mail if mail is None else mail,
            tel=owner.tel if tel is None else tel,
        )

    def update_password(self, owner_id: str, password_hash: str) -> None:
        self.owners[owner_id] = replace(self.owners[owner_id], password_hash=password_hash)
