"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration.

    Values are read from environment variables (or a `.env` file).
    """

    # Resource backend
    resource_backend: str = "http"
    resource_api_base_url: str = "https://foamla-backend-2.onrender.com"
    resource_api_timeout_seconds: int = 15
    http_max_connections: int = 100
    http_max_keepalive_connections: int = 50

    # Supabase (only used when resource_backend == "supabase")
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_postgrest_timeout_seconds: int = 30

    # App
    app_name: str = "FOAM Resource Tracker API"
    app_version: str = "1.0.0"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"
    enable_scheduler: bool = True

    # Scheduling
    timezone: str = "America/Chicago"
    load_on_startup: bool = True
    refresh_interval_minutes: int = 15
    sync_retry_after_seconds: int = 5

    # Visualization
    donut_radius: float = 70.0
    donut_stroke_width: float = 24.0
    donut_hover_stroke_delta: float = 6.0
    ring_radius: float = 52.0
    ring_stroke_width: float = 10.0
    counter_duration_ms: int = 1000
    animation_frame_rate: int = 60
    trend_window_months: int = 6

    # Performance tuning
    slow_request_log_threshold_ms: int = 0
    slow_sync_log_threshold_ms: int = 0

    @property
    def origins_list(self) -> list[str]:
        """Parse comma-separated ALLOWED_ORIGINS into a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
