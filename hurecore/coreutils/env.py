from dotenv import load_dotenv
import os

load_dotenv()  # take environment variables from .env


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    return os.getenv(key, default)


def env_get_int(key: str, default: int) -> int:
    """Get an integer environment variable, falling back to default when unset."""
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return int(value)


LOG_LEVEL = env_get("HURECORE_LOG_LEVEL", "INFO")
LOG_DIR = env_get("HURECORE_LOG_DIR", "logs")
RULES_DB = env_get("HURECORE_RULES_DB", "data/statutory_rules.duckdb")
EXPORT_DIR = env_get("HURECORE_EXPORT_DIR", "output")
TRIAL_DAYS = env_get_int("HURECORE_TRIAL_DAYS", 10)
TIMEZONE = env_get("HURECORE_TIMEZONE", "Africa/Nairobi")
