"""
Runtime configuration for the CLI and the preview API.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from flip_core.common.enums import SellShortfallPolicy

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Global settings, read from FLIP_* environment variables (or a .env file)."""

    # Logging
    log_level: str = "INFO"

    # Pricing
    sell_policy: SellShortfallPolicy = SellShortfallPolicy.STRICT
    chart_points: int = 50

    # HTTP API
    api_host: str = "127.0.0.1"
    api_port: int = 5000
    api_debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Creates a Settings instance from the environment."""
        return cls(
            log_level=os.getenv("FLIP_LOG_LEVEL", "INFO").upper(),
            sell_policy=SellShortfallPolicy.from_str(os.getenv("FLIP_SELL_POLICY", "STRICT")),
            chart_points=int(os.getenv("FLIP_CHART_POINTS", "50")),
            api_host=os.getenv("FLIP_API_HOST", "127.0.0.1"),
            api_port=int(os.getenv("FLIP_API_PORT", "5000")),
            api_debug=_env_bool("FLIP_API_DEBUG", False),
        )
