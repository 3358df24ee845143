"""Configuration management"""
import os
from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# API
API_KEYS: list[str] = [k.strip() for k in os.getenv("API_KEYS", "").split(",") if k.strip()]
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:8081").split(",") if o.strip()
]
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8080"))

# Day boundaries for streaks are computed in this timezone unless the caller
# injects its own clock
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Progression
# When false a single session can raise the level by at most one
ENABLE_MULTI_LEVEL_UP: bool = os.getenv("ENABLE_MULTI_LEVEL_UP", "false").lower() == "true"

# When true a streak saver is spent automatically to bridge exactly one missed
# day; otherwise a missed day resets the streak and savers are only banked
AUTO_USE_STREAK_SAVERS: bool = os.getenv("AUTO_USE_STREAK_SAVERS", "false").lower() == "true"

# Glow card economy
STREAK_SAVER_CAP: int = int(os.getenv("STREAK_SAVER_CAP", "3"))
STREAK_SAVER_OVERFLOW_TOKENS: int = int(os.getenv("STREAK_SAVER_OVERFLOW_TOKENS", "25"))
PAID_PICK_COST: int = int(os.getenv("PAID_PICK_COST", "50"))


def validate_config() -> None:
    """Validate required configuration"""
    if not API_KEYS:
        raise ValueError("API_KEYS is required")
    if STREAK_SAVER_CAP < 0:
        raise ValueError("STREAK_SAVER_CAP must be non-negative")
    if PAID_PICK_COST <= 0:
        raise ValueError("PAID_PICK_COST must be positive")
