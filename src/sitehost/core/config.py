import tempfile
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Static Sites Host"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True  # Set to False in production
    access_log: bool = True  # uvicorn access log, one line per served file

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "site-deployments"

    # Sites
    base_domain: str = "localhost"
    static_root: Path = Path("static")
    upload_dir: Path | None = None  # Defaults to the system temp dir
    max_upload_size: int = 500 * 1024 * 1024  # 500 MB, matches the extractor limit

    # Admin API
    admin_api_key: str | None = None  # If set, /api/v1 requires X-Admin-Key

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("base_domain")
    @classmethod
    def normalize_base_domain(cls, v: str) -> str:
        """Hosts are compared lower-cased, so the base domain is stored that way."""
        v = v.strip().strip(".").lower()
        if not v:
            raise ValueError("BASE_DOMAIN must not be empty")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @property
    def resolved_upload_dir(self) -> Path:
        return self.upload_dir or Path(tempfile.gettempdir())


@dataclass(frozen=True)
class SitesConfig:
    """Site hosting configuration handed to routing and deployment components.

    Built once from Settings and passed to each component at construction.
    """

    base_domain: str
    static_root: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> "SitesConfig":
        return cls(base_domain=settings.base_domain, static_root=settings.static_root)

    @property
    def sites_root(self) -> Path:
        """Directory holding one sub-directory per deployed subdomain."""
        return self.static_root / "sites"

    def site_dir(self, subdomain: str) -> Path:
        return self.sites_root / subdomain

    @property
    def url_scheme(self) -> str:
        """http:// for localhost development domains, https:// otherwise."""
        return "http://" if self.base_domain.startswith("localhost") else "https://"


@lru_cache
def get_settings() -> Settings:
    return Settings()
