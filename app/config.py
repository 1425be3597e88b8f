"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Taskboard"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Apper record store
    APPER_MODE: str = "stub"  # stub or live
    APPER_BASE_URL: Optional[str] = "https://api.apper.io/v1/records/"
    APPER_PROJECT_ID: Optional[str] = None
    APPER_PUBLIC_KEY: Optional[str] = None
    APPER_TIMEOUT: float = 30.0

    # Collections
    TASKS_TABLE: str = "task30"
    CATEGORIES_TABLE: str = "category2"
    TASK_PAGE_SIZE: int = 50
    CATEGORY_PAGE_SIZE: int = 20
    DEFAULT_CATEGORY_COLOR: str = "#6366f1"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text

    # Localization
    LOCALE: str = "en"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
