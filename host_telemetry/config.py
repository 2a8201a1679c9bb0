"""Runtime configuration helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Usage is always sampled over this fixed window.
CPU_SAMPLE_SECONDS = 1.0


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    cpu_sample_seconds: float = CPU_SAMPLE_SECONDS

    def __post_init__(self) -> None:
        if self.cpu_sample_seconds <= 0:
            raise ValueError(f"cpu_sample_seconds must be positive, got {self.cpu_sample_seconds}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load listener and logging settings from environment variables with sensible defaults."""
    host = os.getenv("HOST_TELEMETRY_HOST", "0.0.0.0")
    port = int(os.getenv("HOST_TELEMETRY_PORT", "8080"))
    log_level = os.getenv("HOST_TELEMETRY_LOG_LEVEL", "info").lower()
    return Settings(host=host, port=port, log_level=log_level)
