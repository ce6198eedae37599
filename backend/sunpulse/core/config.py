from dataclasses import dataclass
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class CacheTTLs:
    """Per-endpoint time-to-live table, in seconds."""
    default: float = 300
    snapshot: float = 300
    alerts: float = 120
    cme: float = 120
    planets: float = 900
    markers: float = 300


class Settings(BaseSettings):
    PROJECT_NAME: str = "SunPulse"
    HOST: str = "127.0.0.1"
    PORT: int = 0  # 0 lets the OS pick a free port
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    CACHE_DEFAULT_TTL_SECONDS: float = 300
    SNAPSHOT_TTL_SECONDS: float = 300
    ALERTS_TTL_SECONDS: float = 120
    CME_TTL_SECONDS: float = 120
    PLANETS_TTL_SECONDS: float = 900
    MARKERS_TTL_SECONDS: float = 300

    FETCH_TIMEOUT_SECONDS: float = 8.0
    PROBE_HEAD_TIMEOUT_SECONDS: float = 5.0
    PROBE_GET_TIMEOUT_SECONDS: float = 8.0

    USER_AGENT: str = "SunPulse/1.0 (space weather gateway)"
    SWPC_BASE_URL: str = "https://services.swpc.noaa.gov"

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

    @property
    def cache_ttls(self) -> CacheTTLs:
        return CacheTTLs(
            default=self.CACHE_DEFAULT_TTL_SECONDS,
            snapshot=self.SNAPSHOT_TTL_SECONDS,
            alerts=self.ALERTS_TTL_SECONDS,
            cme=self.CME_TTL_SECONDS,
            planets=self.PLANETS_TTL_SECONDS,
            markers=self.MARKERS_TTL_SECONDS,
        )


settings = Settings()
