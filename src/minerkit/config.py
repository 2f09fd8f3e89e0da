"""Launcher configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .hardware.gpu_memory import DEFAULT_QUERY_TIMEOUT
from .launch.orchestrator import DEFAULT_WORKER_PATTERN
from .models.catalog import CATALOG_URL, DEFAULT_TIMEOUT
from .utils.network import DEFAULT_HOST, DEFAULT_PORT


class Settings(BaseSettings):
    """Explicit configuration for one launcher run."""

    model_config = SettingsConfigDict(env_prefix="MINERKIT_", case_sensitive=False)

    # Model catalog
    catalog_url: str = CATALOG_URL
    request_timeout: float = DEFAULT_TIMEOUT

    # GPU memory query
    device_backend: Literal["nvml", "nvidia-smi"] = "nvml"
    device_query_timeout: float = DEFAULT_QUERY_TIMEOUT

    # Worker discovery
    worker_dir: str = "."
    worker_pattern: str = DEFAULT_WORKER_PATTERN
    python_executable: Optional[str] = None  # sys.executable when unset

    # Connectivity check
    connectivity_check: bool = True
    connectivity_host: str = DEFAULT_HOST
    connectivity_port: int = DEFAULT_PORT

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
