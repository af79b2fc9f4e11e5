from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database (any SQLAlchemy async URL, e.g. postgresql+asyncpg://...)
    database_url: str = "sqlite+aiosqlite:///./product_mgmt.db"

    # Application
    environment: str = "development"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Redis
    redis_url: str = "redis://localhost:6379"

    # Category hierarchy
    max_category_depth: int = 64  # Upper bound for the ancestor walk

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()
