from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request

from db.database import get_store
from db.kv_store import KVStore
from models.account import Profile, Role
from utils.errors import InternalError, Unauthorized
from utils.identity import IdentityProvider, IdentityUnavailable, build_identity_provider
from utils.profiles import require_role

logger = logging.getLogger(__name__)


def get_identity_provider(store: KVStore = Depends(get_store)) -> IdentityProvider:
    try:
        return build_identity_provider(store)
    except IdentityUnavailable as exc:
        logger.error("Identity provider misconfigured: %s", exc)
        raise InternalError("Identity provider unavailable")


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_account_id(
    request: Request,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> str:
    """Resolve the caller from the bearer token; asks the provider on every request."""
    token = bearer_token(request)
    if not token:
        raise Unauthorized()
    try:
        account_id = identity.verify_token(token)
    except IdentityUnavailable:
        raise InternalError("Failed to verify token")
    if not account_id:
        logger.info("Rejected bearer token on %s %s", request.method, request.url.path)
        raise Unauthorized()
    return account_id


def require_admin(
    account_id: str = Depends(get_current_account_id),
    store: KVStore = Depends(get_store),
) -> Profile:
    return require_role(store, account_id, Role.ADMIN)
