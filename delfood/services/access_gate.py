"""
Authentication guard for owner operations.

:func:`owner_required` protects service methods that need a logged-in owner.
The decorated method is called with the session token as its first argument;
the wrapper resolves it through the service's :class:`AccessGate` and, when
the session is anonymous, returns :class:`Unauthenticated` without running
the method. Otherwise the method receives an :class:`AuthenticatedOwner` in
place of the raw token:

.. code-block:: python

   @owner_required
   def get_own_profile(self, session: AuthenticatedOwner) -> ProfileOutcome:
       ...

   service.get_own_profile(request.cookies.get("owner_session"))
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from delfood.domain.owners import Unauthenticated
from delfood.services.session_service import SessionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedOwner:
    """A session token together with the owner id it resolved to."""

    token: str
    owner_id: str


@dataclass
class AccessGate:
    sessions: SessionManager

    def resolve(self, token: Optional[str]) -> Optional[AuthenticatedOwner]:
        owner_id = self.sessions.current_owner_id(token)
        if owner_id is None:
            return None
        return AuthenticatedOwner(token=token, owner_id=owner_id)


def owner_required(func: Callable) -> Callable:
    """Reject calls whose session token does not resolve to an owner."""
    @wraps(func)
    def wrapper(self: Any, token: Optional[str], *args: Any, **kwargs: Any) -> Any:
        session = self.access_gate.resolve(token)
        if session is None:
            logger.debug("No authenticated owner for %s; rejecting", func.__name__)
            return Unauthenticated()
        return func(self, session, *args, **kwargs)
    return wrapper
