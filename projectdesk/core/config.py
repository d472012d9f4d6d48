from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Project Desk"
    MONGODB_URL: str = "mongodb://localhost:27017/projectdesk"
    # Used when MONGODB_URL carries no database path (e.g. some SRV URIs)
    MONGODB_DB_NAME: str = "projectdesk"
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')


class ClientSettings(BaseSettings):
    """Settings for the browser-side client. Read from PROJECTDESK_* variables."""
    API_BASE_URL: str = "http://localhost:5000"
    REQUEST_TIMEOUT: float = 20

    model_config = SettingsConfigDict(
        env_prefix='PROJECTDESK_', env_file='.env', env_file_encoding='utf-8', extra='ignore'
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
