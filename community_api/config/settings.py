"""
Application settings

Loaded from config.yaml, every key can be overridden by an environment variable
"""

import os
from pathlib import Path
from typing import Optional, List

import dotenv
import yaml

dotenv.load_dotenv()


class Settings:
    """Global application settings (backed by config.yaml)"""

    def __init__(self, config_path: Optional[str] = None):
        path = Path(config_path) if config_path else Path(__file__).parent.parent.parent / "config.yaml"
        with open(path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f)

    # ==================== Application ====================
    @property
    def APP_NAME(self) -> str:
        return os.getenv("APP_NAME", self._config["app"]["name"])

    @property
    def APP_VERSION(self) -> str:
        return os.getenv("APP_VERSION", self._config["app"]["version"])

    @property
    def API_V1_PREFIX(self) -> str:
        return os.getenv("API_V1_PREFIX", self._config["app"]["api_prefix"])

    @property
    def DEBUG(self) -> bool:
        debug_str = os.getenv("DEBUG", str(self._config["app"]["debug"]))
        return debug_str.lower() in ("true", "1", "yes")

    @property
    def PORT(self) -> int:
        return int(os.getenv("PORT", self._config["app"]["port"]))

    # ==================== Database ====================
    @property
    def DATABASE_URL(self) -> str:
        return os.getenv("DATABASE_URL", self._config["database"]["url"])

    @property
    def DATABASE_POOL_SIZE(self) -> int:
        return int(os.getenv("DATABASE_POOL_SIZE", self._config["database"]["pool_size"]))

    @property
    def DATABASE_MAX_OVERFLOW(self) -> int:
        return int(os.getenv("DATABASE_MAX_OVERFLOW", self._config["database"]["max_overflow"]))

    # ==================== Redis ====================
    @property
    def REDIS_HOST(self) -> str:
        return os.getenv("REDIS_HOST", self._config["redis"]["host"])

    @property
    def REDIS_PORT(self) -> int:
        return int(os.getenv("REDIS_PORT", self._config["redis"]["port"]))

    @property
    def REDIS_DB(self) -> int:
        return int(os.getenv("REDIS_DB", self._config["redis"]["database"]))

    @property
    def REDIS_PASSWORD(self) -> Optional[str]:
        return os.getenv("REDIS_PASSWORD", self._config["redis"]["password"])

    @property
    def REDIS_MAX_CONNECTIONS(self) -> int:
        return int(os.getenv("REDIS_MAX_CONNECTIONS", self._config["redis"]["max_connections"]))

    # ==================== JWT ====================
    @property
    def JWT_SECRET_KEY(self) -> str:
        return os.getenv("JWT_SECRET_KEY", self._config["jwt"]["secret_key"])

    @property
    def JWT_ALGORITHM(self) -> str:
        return os.getenv("JWT_ALGORITHM", self._config["jwt"]["algorithm"])

    @property
    def JWT_EXPIRE_MINUTES(self) -> int:
        return int(os.getenv("JWT_EXPIRE_MINUTES", self._config["jwt"]["expire_minutes"]))

    # ==================== Firebase ====================
    @property
    def FIREBASE_PROJECT_ID(self) -> str:
        return os.getenv("FIREBASE_PROJECT_ID", self._config["firebase"]["project_id"])

    # ==================== IGDB / Twitch ====================
    @property
    def IGDB_API_URL(self) -> str:
        return os.getenv("IGDB_API_URL", self._config["igdb"]["api_url"])

    @property
    def TWITCH_TOKEN_URL(self) -> str:
        return os.getenv("TWITCH_TOKEN_URL", self._config["igdb"]["token_url"])

    @property
    def TWITCH_CLIENT_ID(self) -> str:
        return os.getenv("TWITCH_CLIENT_ID", self._config["igdb"]["client_id"])

    @property
    def TWITCH_CLIENT_SECRET(self) -> str:
        return os.getenv("TWITCH_CLIENT_SECRET", self._config["igdb"]["client_secret"])

    @property
    def IGDB_TOKEN_CACHE_TTL(self) -> int:
        return int(os.getenv("IGDB_TOKEN_CACHE_TTL", self._config["igdb"]["token_cache_ttl"]))

    @property
    def IGDB_TIMEOUT(self) -> int:
        return int(os.getenv("IGDB_TIMEOUT", self._config["igdb"]["timeout"]))

    # ==================== Catalog cache TTLs ====================
    @property
    def CACHE_TTL_SEARCH_RESULTS(self) -> int:
        return int(os.getenv("CACHE_TTL_SEARCH_RESULTS", self._config["cache"]["ttl_search_results"]))

    @property
    def CACHE_TTL_GAME_DETAILS(self) -> int:
        return int(os.getenv("CACHE_TTL_GAME_DETAILS", self._config["cache"]["ttl_game_details"]))

    @property
    def CACHE_TTL_LISTINGS(self) -> int:
        return int(os.getenv("CACHE_TTL_LISTINGS", self._config["cache"]["ttl_listings"]))

    # ==================== Rate limit ====================
    @property
    def RATE_LIMIT_WINDOW_SECONDS(self) -> int:
        return int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", self._config["rate_limit"]["window_seconds"]))

    @property
    def RATE_LIMIT_MAX_REQUESTS(self) -> int:
        return int(os.getenv("RATE_LIMIT_MAX_REQUESTS", self._config["rate_limit"]["max_requests"]))

    # ==================== CORS ====================
    @property
    def CORS_ORIGINS(self) -> List[str]:
        env_origins = os.getenv("CORS_ORIGINS")
        if env_origins:
            return [origin.strip() for origin in env_origins.split(",")]
        return self._config["cors"]["origins"]

    # ==================== Logging ====================
    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", self._config["logging"]["level"]).upper()

    @property
    def LOG_DIR(self) -> str:
        return os.getenv("LOG_DIR", self._config["logging"]["dir"])

    # ==================== Business rules ====================
    @property
    def DEFAULT_PAGE_SIZE(self) -> int:
        return int(os.getenv("DEFAULT_PAGE_SIZE", self._config["business"]["default_page_size"]))

    @property
    def MAX_PAGE_SIZE(self) -> int:
        return int(os.getenv("MAX_PAGE_SIZE", self._config["business"]["max_page_size"]))


# Global settings instance
settings = Settings()
