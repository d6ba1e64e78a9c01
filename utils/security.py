from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

PASSWORD_HASH_ALGO = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 200_000
TOKEN_ALGORITHM = "HS256"
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        PASSWORD_HASH_ITERATIONS,
    )
    digest = base64.urlsafe_b64encode(dk).decode("utf-8")
    return f"{PASSWORD_HASH_ALGO}${PASSWORD_HASH_ITERATIONS}${salt}${digest}"


def verify_password(password: str, stored_hash: str) -> bool:
    if not stored_hash or password is None:
        return False
    try:
        algo, iterations_str, salt, digest = stored_hash.split("$", 3)
    except ValueError:
        return False
    if algo != PASSWORD_HASH_ALGO:
        return False
    try:
        iterations = int(iterations_str)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )
    computed = base64.urlsafe_b64encode(dk).decode("utf-8")
    return hmac.compare_digest(computed, digest)


def create_access_token(account_id: str, secret: str, duration_minutes: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": account_id,
        "iat": now,
        "exp": now + timedelta(minutes=int(duration_minutes)),
    }
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_access_token(token: Optional[str], secret: str) -> Optional[str]:
    """Account id carried by a valid, unexpired token; None otherwise."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) and subject else None
