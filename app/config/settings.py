from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "statements"
    db_username: str = "statements"
    db_password: str = "secret"
    db_connect_timeout_seconds: float = 10.0

    api_base_url: str = "http://localhost:8000"
    api_timeout_seconds: int = 30

    poll_interval_seconds: float = 3.0
    trigger_nudge_delay_seconds: float = 1.0

    max_upload_size_mb: int = 50
    storage_root: str = "/app/files"

    pdf_engine: str = "pdfplumber"
    pdf_preview_max_pages: int = 5

    owner_id: str = ""
    access_token: str = ""
