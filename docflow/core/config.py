from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # App
    app_name: str = "Docflow"
    debug: bool = False
    
    # Database
    database_url: str = "sqlite:///./docflow.db"
    
    # Security
    secret_key: str = "dev-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    
    # Workflow
    approval_deadline_days: int = 7
    strict_stage_order: bool = False  # legacy behaviour lets any stage act on any status
    
    # Logging
    log_level: str = "INFO"
    log_dir: str = "./logs"
    log_to_file: bool = False
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DOCFLOW_",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
