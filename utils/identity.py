"""Identity provider adapters.

The application never owns credentials directly; it asks a provider to
create accounts, exchange email/password for a bearer token and resolve a
bearer token back to an account id. Two providers ship:

- LocalIdentityProvider keeps accounts in the KV store (``auth:`` keys)
  and issues its own signed tokens.
- RemoteIdentityProvider talks to a Supabase auth (GoTrue) server over REST
  with the service-role key.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import requests

from config import load_config
from db.kv_store import KVStore
from utils.security import (
    MIN_PASSWORD_LENGTH,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

ACCOUNT_PREFIX = "auth:accounts:"
EMAIL_PREFIX = "auth:emails:"


class IdentityError(Exception):
    """The provider rejected the request (duplicate email, bad credentials, ...)."""


class IdentityUnavailable(Exception):
    """The provider could not be reached or answered unexpectedly."""


@dataclass(frozen=True)
class Account:
    id: str
    email: str
    name: str
    role: str


class IdentityProvider:
    def create_user(self, email: str, password: str, name: str, role: str) -> Account:
        raise NotImplementedError

    def sign_in(self, email: str, password: str) -> str:
        raise NotImplementedError

    def verify_token(self, token: str) -> Optional[str]:
        raise NotImplementedError


class LocalIdentityProvider(IdentityProvider):
    def __init__(self, store: KVStore, secret: str, token_minutes: int):
        self.store = store
        self.secret = secret
        self.token_minutes = token_minutes

    def create_user(self, email: str, password: str, name: str, role: str) -> Account:
        email_key = email.strip().lower()
        if not email_key:
            raise IdentityError("Email is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise IdentityError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")
        if self.store.get(EMAIL_PREFIX + email_key):
            raise IdentityError("A user with this email address has already been registered")
        account_id = str(uuid.uuid4())
        self.store.set(
            ACCOUNT_PREFIX + account_id,
            {
                "id": account_id,
                "email": email_key,
                "metadata": {"name": name, "role": role},
                "passwordHash": hash_password(password),
                "createdAt": datetime.now(timezone.utc).isoformat(),
            },
        )
        self.store.set(EMAIL_PREFIX + email_key, {"id": account_id})
        return Account(id=account_id, email=email_key, name=name, role=role)

    def sign_in(self, email: str, password: str) -> str:
        pointer = self.store.get(EMAIL_PREFIX + (email or "").strip().lower())
        account = self.store.get(ACCOUNT_PREFIX + pointer["id"]) if pointer else None
        if not account or not verify_password(password or "", account.get("passwordHash", "")):
            raise IdentityError("Invalid login credentials")
        return create_access_token(account["id"], self.secret, self.token_minutes)

    def verify_token(self, token: str) -> Optional[str]:
        account_id = decode_access_token(token, self.secret)
        if not account_id or not self.store.get(ACCOUNT_PREFIX + account_id):
            return None
        return account_id


class RemoteIdentityProvider(IdentityProvider):
    def __init__(self, url: str, service_role_key: str, timeout: int = 10):
        if not url or not service_role_key:
            raise IdentityUnavailable("Remote identity provider requires url and service_role_key")
        self.url = url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout

    def _headers(self, bearer: Optional[str] = None) -> dict:
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {bearer or self.service_role_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return requests.request(method, f"{self.url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Identity provider request %s %s failed: %s", method, path, exc)
            raise IdentityUnavailable(str(exc)) from exc

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        return body.get("msg") or body.get("message") or body.get("error_description") or body.get("error") or f"HTTP {response.status_code}"

    def create_user(self, email: str, password: str, name: str, role: str) -> Account:
        response = self._request(
            "POST",
            "/auth/v1/admin/users",
            headers=self._headers(),
            json={
                "email": email,
                "password": password,
                "user_metadata": {"name": name, "role": role},
                # no mail server is configured, so accounts are confirmed on creation
                "email_confirm": True,
            },
        )
        if response.status_code >= 500:
            raise IdentityUnavailable(self._error_message(response))
        if response.status_code >= 400:
            raise IdentityError(self._error_message(response))
        body = response.json()
        return Account(id=body["id"], email=body.get("email", email), name=name, role=role)

    def sign_in(self, email: str, password: str) -> str:
        response = self._request(
            "POST",
            "/auth/v1/token?grant_type=password",
            headers=self._headers(),
            json={"email": email, "password": password},
        )
        if response.status_code >= 500:
            raise IdentityUnavailable(self._error_message(response))
        if response.status_code >= 400:
            raise IdentityError(self._error_message(response))
        return response.json()["access_token"]

    def verify_token(self, token: str) -> Optional[str]:
        response = self._request("GET", "/auth/v1/user", headers=self._headers(token))
        if response.status_code >= 500:
            raise IdentityUnavailable(self._error_message(response))
        if response.status_code != 200:
            logger.info("Token rejected by identity provider (HTTP %s)", response.status_code)
            return None
        return response.json().get("id")


def build_identity_provider(store: KVStore, config: Optional[dict] = None) -> IdentityProvider:
    if not config:
        config = load_config()
    identity_cfg = config["identity"]
    if identity_cfg["provider"] == "remote":
        return RemoteIdentityProvider(
            identity_cfg["url"],
            identity_cfg["service_role_key"],
            identity_cfg["timeout"],
        )
    auth_cfg = config["auth"]
    return LocalIdentityProvider(store, auth_cfg["jwt_secret"], auth_cfg["token_minutes"])
