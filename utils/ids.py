import secrets
import string
import time
from datetime import datetime, timezone

_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(kind: str) -> str:
    """Collision-resistant id: <kind>_<epoch ms>_<9 random base36 chars>."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"{kind}_{int(time.time() * 1000)}_{suffix}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
