import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import redis.asyncio as redis
from dotenv import load_dotenv

from profile_mirror.entities import RewriteRule

load_dotenv()

# Mapbox token hard-coded in the upstream bundle; it is locked to the upstream domain
UPSTREAM_MAP_TOKEN = (
    "pk.eyJ1IjoibXVnZWViIiwiYSI6ImNsdG5idzFrbTA0c3UycnA4OWRtbTJ6dmMifQ.Qa0vYWIbFEHuNuPpbVkdEQ"
)

# Class attributes of the upstream sign-up footer and floating sign-in bar
FOOTER_CLASS = "flex w-full flex-col items-center bg-[#FBFBFB]"
FLOATING_BAR_CLASS = (
    "fixed left-16 bottom-[52px] -m-1 hidden items-center space-x-1 rounded-[12px] "
    "p-1 transition-colors xl:flex 2xl:space-x-2"
)

THREE_DAYS = 3 * 24 * 60 * 60


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Mirror
    base_url: str = os.getenv("BASE_URL", "http://localhost:8000").rstrip("/")
    profile_username: str = os.getenv("PROFILE_USERNAME", "")
    map_token: str = os.getenv("MAP_TOKEN", "")
    upstream_map_token: str = os.getenv("UPSTREAM_MAP_TOKEN", UPSTREAM_MAP_TOKEN)

    # Upstreams
    mirror_origin: str = os.getenv("MIRROR_ORIGIN", "https://bento.me").rstrip("/")
    api_origin: str = os.getenv("API_ORIGIN", "https://api.bento.me").rstrip("/")
    storage_origin: str = os.getenv(
        "STORAGE_ORIGIN", "https://storage.googleapis.com"
    ).rstrip("/")
    origin_timeout: float = float(os.getenv("ORIGIN_TIMEOUT", "30"))

    # Cache
    cache_retention_seconds: int = int(os.getenv("CACHE_RETENTION_SECONDS", str(THREE_DAYS)))
    cleanup_interval_seconds: int = int(os.getenv("CLEANUP_INTERVAL_SECONDS", "0"))
    object_namespace: str = os.getenv("OBJECT_NAMESPACE", "profile_mirror")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Rewriting
    rewrite_rules_file: str | None = os.getenv("REWRITE_RULES_FILE")
    inject_css: str = os.getenv("INJECT_CSS", "")
    inject_js: str = os.getenv("INJECT_JS", "")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"BASE_URL must be an absolute http(s) URL, got {self.base_url!r}")

        if self.cache_retention_seconds <= 0:
            raise ValueError("CACHE_RETENTION_SECONDS must be positive")

        if self.cleanup_interval_seconds < 0:
            raise ValueError("CLEANUP_INTERVAL_SECONDS must be zero (disabled) or positive")

        if self.origin_timeout <= 0:
            raise ValueError("ORIGIN_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create an asyncio Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )


def configure_logging(config: Settings | None = None) -> None:
    """Set the root log level from LOG_LEVEL."""
    config = config or settings
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def default_rewrite_rules(config: Settings) -> list[RewriteRule]:
    """Build the built-in rewrite rule list for a configuration.

    Order matters: later rules see the output of earlier ones.
    """
    return [
        RewriteRule(config.api_origin, f"{config.base_url}/api"),
        RewriteRule(config.storage_origin, f"{config.base_url}/googleapis_storage"),
        RewriteRule(config.upstream_map_token, config.map_token),
        RewriteRule(FOOTER_CLASS, "hidden"),
        RewriteRule(FLOATING_BAR_CLASS, "hidden"),
    ]


def load_rewrite_rules(config: Settings | None = None) -> list[RewriteRule]:
    """Load the ordered rewrite rules.

    If REWRITE_RULES_FILE is set, the file must hold a JSON list of
    ``{"match": ..., "replacement": ...}`` objects and replaces the
    built-in rules entirely.

    Args:
        config: Settings to read from. Defaults to the global settings.

    Returns:
        The rules in application order

    Raises:
        ValueError: If the rules file is not a list of rule objects
    """
    config = config or settings
    if not config.rewrite_rules_file:
        return default_rewrite_rules(config)

    raw = json.loads(Path(config.rewrite_rules_file).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{config.rewrite_rules_file} must contain a JSON list of rules")

    rules = []
    for entry in raw:
        if not isinstance(entry, dict) or "match" not in entry or "replacement" not in entry:
            raise ValueError(f"Invalid rewrite rule entry: {entry!r}")
        rules.append(RewriteRule(match=str(entry["match"]), replacement=str(entry["replacement"])))
    return rules
