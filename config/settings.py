from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Redis is the key-value store backing every record
    REDIS_URL: str = "redis://localhost:6379/0"

    # Server salt for password and token digests. No default, MUST be set in .env
    AUTH_SALT: str

    # Pagination
    DEFAULT_PAGE_LIMIT: int = 5
    MAX_PAGE_LIMIT: int = 1000

    # App
    APP_NAME: str = "Wallet Ledger"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"


settings = Settings()
