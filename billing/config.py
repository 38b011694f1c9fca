from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+pysqlite:///./billing.db"
    sqlite_busy_timeout_seconds: float = 5.0
    sequence_lock_timeout_ms: int = 5000
    transition_retry_attempts: int = 3
    default_currency: str = "EUR"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()
