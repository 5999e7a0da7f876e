from pathlib import Path
from typing import List

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DAY_SECONDS = 24 * 60 * 60


class Settings(BaseSettings):
    """Application configuration"""

    # API Settings
    app_name: str = "Mendicant Cache"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Cache Settings
    cache_dir: Path = Path.home() / ".mendicant"
    cache_file_name: str = "cache_data.json"
    cache_namespaces: List[str] = ["embeddings", "agent_performance"]

    # L1: memory
    cache_memory_max_entries: int = Field(default=100, gt=0)
    cache_memory_ttl_seconds: float = Field(default=DAY_SECONDS, ge=0)

    # L2: disk
    cache_disk_ttl_seconds: float = Field(default=DAY_SECONDS, ge=0)
    # Persist only what is resident in memory instead of keeping disk as an
    # independent, larger map
    cache_disk_mirrors_memory: bool = False

    # L3: knowledge graph
    cache_remote_ttl_seconds: float = Field(default=90 * DAY_SECONDS, ge=0)
    cache_remote_timeout_seconds: float = Field(default=5.0, gt=0)
    cache_remote_retry_attempts: int = Field(default=2, ge=0)

    # Per-lookup logging is noisy, keep it off unless debugging
    cache_log_hits: bool = False
    cache_log_misses: bool = False

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class CacheConfig(BaseModel):
    """
    Constants consumed by a single cache layer.

    Built once from Settings and handed to each TieredCache, so cache
    behavior never depends on process-wide state at call time.
    """
    cache_dir: Path
    file_name: str = "cache_data.json"
    max_entries: int = Field(default=100, gt=0)
    memory_ttl_seconds: float = Field(default=DAY_SECONDS, ge=0)
    disk_ttl_seconds: float = Field(default=DAY_SECONDS, ge=0)
    disk_mirrors_memory: bool = False
    remote_ttl_seconds: float = Field(default=90 * DAY_SECONDS, ge=0)
    remote_timeout_seconds: float = Field(default=5.0, gt=0)
    remote_retry_attempts: int = Field(default=2, ge=0)
    log_hits: bool = False
    log_misses: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheConfig":
        return cls(
            cache_dir=settings.cache_dir.expanduser(),
            file_name=settings.cache_file_name,
            max_entries=settings.cache_memory_max_entries,
            memory_ttl_seconds=settings.cache_memory_ttl_seconds,
            disk_ttl_seconds=settings.cache_disk_ttl_seconds,
            disk_mirrors_memory=settings.cache_disk_mirrors_memory,
            remote_ttl_seconds=settings.cache_remote_ttl_seconds,
            remote_timeout_seconds=settings.cache_remote_timeout_seconds,
            remote_retry_attempts=settings.cache_remote_retry_attempts,
            log_hits=settings.cache_log_hits,
            log_misses=settings.cache_log_misses,
        )

    def disk_path(self, namespace: str) -> Path:
        """Tier-2 file for a namespace: <cache_dir>/<namespace>_<file_name>"""
        return self.cache_dir / f"{namespace}_{self.file_name}"


settings = Settings()
