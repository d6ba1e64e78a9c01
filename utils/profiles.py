from __future__ import annotations

from datetime import datetime, timezone

from db.kv_store import KVStore
from models.account import Profile, Role
from utils.errors import Forbidden, NotFound

PROFILE_PREFIX = "users:"


def profile_key(account_id: str) -> str:
    return f"{PROFILE_PREFIX}{account_id}"


def create_profile(store: KVStore, account_id: str, email: str, name: str, role: Role) -> Profile:
    """Write the role-bearing profile for an account the identity provider already created."""
    profile = Profile(
        id=account_id,
        email=email,
        name=name,
        role=role,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    store.set(profile_key(account_id), profile.to_record())
    return profile


def get_profile(store: KVStore, account_id: str) -> Profile:
    record = store.get(profile_key(account_id))
    if not record:
        raise NotFound("User profile not found")
    return Profile.model_validate(record)


def require_role(store: KVStore, account_id: str, expected_role: Role) -> Profile:
    record = store.get(profile_key(account_id))
    if not record or record.get("role") != Role(expected_role).value:
        raise Forbidden(f"{Role(expected_role).value.capitalize()} access required")
    return Profile.model_validate(record)
