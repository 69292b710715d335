from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    database_url: str = "sqlite:///./rentiful.db"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Logging ----
    log_level: str = "INFO"
    sql_log_level: str = "WARNING"

    # ---- Auth (identity provider tokens) ----
    auth_mode: str = "dev"  # dev|jwt
    jwt_secret: str = "dev-change-me"
    jwt_algorithms: list[str] = ["HS256"]
    jwt_audience: str | None = None
    jwt_verify_signature: bool = True
    role_claim: str = "custom:role"

    # Dev header names
    dev_header_user_sub: str = "X-User-Sub"
    dev_header_user_role: str = "X-User-Role"
    dev_header_user_email: str = "X-User-Email"
    dev_header_user_name: str = "X-User-Name"

    # ---- Search ----
    search_radius_km: float = 50.0
    km_per_degree: float = 111.0  # planar approximation, not geodesic

    # ---- Geocoding ----
    geocoding_enabled: bool = True
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "RentifulApp (ops@rentiful.local)"
    geocoding_timeout_seconds: float = 10.0
    geocode_backfill_batch_size: int = 50
    geocode_retry_after_hours: int = 24

    # ---- Photo storage (GCS) ----
    gcs_bucket_name: str | None = None
    gcs_project_id: str | None = None
    gcs_credentials_file: str | None = None
    photo_key_prefix: str = "properties/"

    # ---- Celery ----
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"

    @property
    def is_prod(self) -> bool:
        return (self.app_env or "local").strip().lower() in ("prod", "production")

    @property
    def search_radius_degrees(self) -> float:
        return float(self.search_radius_km) / float(self.km_per_degree)

    def model_post_init(self, __context) -> None:
        if self.is_prod:
            if (self.auth_mode or "").strip().lower() == "dev":
                raise ValueError("SECURITY: auth_mode=dev is not allowed in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
