"""Environment variable parsing for client settings."""
import os

from .logging_config import get_logger

logger = get_logger(__name__)


def get_env_float(key: str, default: float, *, positive: bool = False) -> float:
    """Read a float from the environment.

    Empty, unparseable and (with ``positive``) non-positive values fall back
    to ``default`` with a warning naming the variable.
    """
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring unparseable environment value", key=key, value=raw)
        return default
    if positive and value <= 0:
        logger.warning("Ignoring non-positive environment value", key=key, value=raw)
        return default
    return value


def get_env_str(key: str, default: str) -> str:
    """Get an environment variable, treating an empty value as unset."""
    return os.getenv(key) or default
