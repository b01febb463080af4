"""Bearer-token gate in front of the task routes.

Tokens are issued elsewhere; this module only turns one back into an owner
identity. The default verifier reads the ``session`` collection that the
issuing service writes (``{token, userId, name?, expiresAt?}``). Deployments
with a different issuer override ``get_token_verifier``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .database import DocumentStore, get_store
from .errors import Unauthenticated

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    user_id: str
    name: Optional[str] = None


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Optional[Identity]: ...


class SessionTokenVerifier:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def verify(self, token: str) -> Optional[Identity]:
        session = await self.store.get_document("session", {"token": token})
        if not session or not session.get("userId"):
            return None
        expires_at = session.get("expiresAt")
        if isinstance(expires_at, datetime) and expires_at <= datetime.utcnow():
            return None
        return Identity(user_id=str(session["userId"]), name=session.get("name"))


def get_token_verifier(store: DocumentStore = Depends(get_store)) -> TokenVerifier:
    return SessionTokenVerifier(store)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    identity = await verifier.verify(credentials.credentials)
    if identity is None:
        logger.info("Rejected unknown or expired bearer token")
        raise Unauthenticated("Invalid or expired token")
    return identity


async def get_current_owner(identity: Identity = Depends(get_current_identity)) -> str:
    return identity.user_id
