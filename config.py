import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".weekwise"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_ADMIN_SECRET = "admin123"
DEFAULT_TOKEN_MINUTES = 60


def load_config() -> Dict[str, Any]:
    """Load config from ~/.weekwise/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., WEEKWISE_ADMIN_SECRET)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    auth_cfg = config.get("auth", {})
    config["auth"] = {
        "admin_secret": os.getenv("WEEKWISE_ADMIN_SECRET", auth_cfg.get("admin_secret", DEFAULT_ADMIN_SECRET)),
        "jwt_secret": os.getenv("WEEKWISE_JWT_SECRET", auth_cfg.get("jwt_secret", "change-me-weekwise-local-signing-key")),
        "token_minutes": int(os.getenv("WEEKWISE_TOKEN_MINUTES", auth_cfg.get("token_minutes", DEFAULT_TOKEN_MINUTES))),
    }
    store_cfg = config.get("store", {})
    config["store"] = {
        "backend": os.getenv("WEEKWISE_STORE_BACKEND", store_cfg.get("backend", "sqlite")).lower(),
        "db_path": os.getenv("WEEKWISE_DB_PATH", store_cfg.get("db_path", "")),
    }
    identity_cfg = config.get("identity", {})
    config["identity"] = {
        "provider": os.getenv("WEEKWISE_IDENTITY_PROVIDER", identity_cfg.get("provider", "local")).lower(),
        "url": os.getenv("SUPABASE_URL", identity_cfg.get("url", "")),
        "service_role_key": os.getenv("SUPABASE_SERVICE_ROLE_KEY", identity_cfg.get("service_role_key", "")),
        "timeout": int(os.getenv("WEEKWISE_IDENTITY_TIMEOUT", identity_cfg.get("timeout", 10))),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("WEEKWISE_LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
    }
    return config


def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('auth', 'admin_secret')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
