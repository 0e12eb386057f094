"""
Client configuration.

Values are read from the environment when a ClientSettings is created:

    R2R_BASE_URL     server root, e.g. http://localhost:8000
    R2R_API_PREFIX   path prefix appended to the base URL (default /v1)
    R2R_TIMEOUT      request timeout in seconds, must be positive
"""

from dataclasses import dataclass, field

from .env_utils import get_env_float, get_env_str

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_PREFIX = "/v1"
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class ClientSettings:
    """Connection settings for R2RClient."""

    base_url: str = field(
        default_factory=lambda: get_env_str("R2R_BASE_URL", DEFAULT_BASE_URL)
    )
    prefix: str = field(
        default_factory=lambda: get_env_str("R2R_API_PREFIX", DEFAULT_PREFIX)
    )
    timeout: float = field(
        default_factory=lambda: get_env_float(
            "R2R_TIMEOUT", DEFAULT_TIMEOUT, positive=True
        )
    )
