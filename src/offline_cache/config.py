import os
from dataclasses import dataclass, field
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()


def _csv(name: str, default: str) -> tuple[str, ...]:
    """Read a comma-separated environment variable as a tuple."""
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


DEFAULT_STATIC_ASSETS = ",".join(
    [
        "./",
        "./index.html",
        "./manifest.json",
        "./icons/icon-192.svg",
        "./icons/icon-512.svg",
        "./icons/icon-maskable.svg",
    ]
)

DEFAULT_CDN_RESOURCES = ",".join(
    [
        "https://cdn.tailwindcss.com",
        "https://fonts.googleapis.com/css2?family=Marcellus&family=Quicksand:wght@300;400;500;600;700&display=swap",
        "https://cdn.jsdelivr.net/npm/@mediapipe/tasks-vision@0.10.3/+esm",
    ]
)

DEFAULT_CDN_HOSTS = "cdn.tailwindcss.com,fonts.googleapis.com,cdn.jsdelivr.net,fonts.gstatic.com"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Generations
    cache_version: str = os.getenv("CACHE_VERSION", "zenflow-v1")
    cache_namespace: str = os.getenv("CACHE_NAMESPACE", "zenflow")
    legacy_store_names: tuple[str, ...] = field(
        default_factory=lambda: _csv("LEGACY_STORE_NAMES", "default-cache")
    )

    # Application being fronted
    app_name: str = os.getenv("APP_NAME", "ZenFlow")
    origin_url: str = os.getenv("APP_ORIGIN", "http://localhost:3000")
    base_path: str = os.getenv("APP_BASE_PATH", "/")
    fallback_document: str = os.getenv("FALLBACK_DOCUMENT", "./index.html")

    # Pre-population lists
    static_assets: tuple[str, ...] = field(
        default_factory=lambda: _csv("STATIC_ASSETS", DEFAULT_STATIC_ASSETS)
    )
    cdn_resources: tuple[str, ...] = field(
        default_factory=lambda: _csv("CDN_RESOURCES", DEFAULT_CDN_RESOURCES)
    )

    # Routing
    api_hosts: tuple[str, ...] = field(
        default_factory=lambda: _csv("API_HOSTS", "generativelanguage.googleapis.com")
    )
    cdn_hosts: tuple[str, ...] = field(default_factory=lambda: _csv("CDN_HOSTS", DEFAULT_CDN_HOSTS))
    static_suffixes: tuple[str, ...] = field(
        default_factory=lambda: _csv("STATIC_SUFFIXES", ".svg,.png,.jpg,.jpeg,.webp")
    )

    # Network
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", "30"))

    # Lifecycle
    skip_waiting_on_install: bool = os.getenv("SKIP_WAITING_ON_INSTALL", "true").lower() == "true"
    wellness_interval: float = float(os.getenv("WELLNESS_INTERVAL", "0"))  # 0 disables

    # Storage
    store_backend: str = os.getenv("STORE_BACKEND", "memory")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_prefix: str = os.getenv("REDIS_PREFIX", "offline_cache")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")
    log_json: bool = os.getenv("LOG_JSON", "false").lower() == "true"

    @property
    def base_url(self) -> str:
        """Absolute URL of the application's base path."""
        path = self.base_path.strip("/")
        return self.origin_url.rstrip("/") + "/" + (f"{path}/" if path else "")

    def resolve(self, path: str) -> str:
        """Resolve a manifest entry against the application base URL.

        Absolute URLs are returned unchanged; ``./x`` and ``x`` are relative
        to the base path, ``/x`` to the origin.
        """
        if "://" in path:
            return path
        if path.startswith("/"):
            return self.origin_url.rstrip("/") + path
        if path.startswith("./"):
            path = path[2:]
        return self.base_url + path

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.cache_version.startswith(f"{self.cache_namespace}-"):
            raise ValueError(
                f"CACHE_VERSION must start with the namespace prefix '{self.cache_namespace}-', "
                f"got {self.cache_version!r}"
            )

        if self.store_backend not in ("memory", "redis"):
            raise ValueError(f"STORE_BACKEND must be 'memory' or 'redis', got {self.store_backend!r}")

        if self.fetch_timeout <= 0:
            raise ValueError("FETCH_TIMEOUT must be positive")

        if self.wellness_interval < 0:
            raise ValueError("WELLNESS_INTERVAL must not be negative")


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
