from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    port: int = 4210
    host: str = "0.0.0.0"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Image editing backend
    editor_backend: str = "gemini"
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash-image"

    # Upload limits
    max_upload_mb: int = 30

    # Credential store
    db_path: str = "./data/portrait_studio.db"
    admin_password: str = "12345"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
