from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "SplitLedger Backend"
    DATABASE_URL: str = "sqlite+aiosqlite:///./splitledger.db"
    STORE_BACKEND: str = "sql"

    JWT_SECRET: str = "change-me"
    JWT_ALGO: str = "HS256"
    ACCESS_TOKEN_MINUTES: int = 30
    REFRESH_TOKEN_DAYS: int = 7
    COOKIE_SECURE: bool = False

    PHONE_COUNTRY_CODE: str = "+91"

    LOG_LEVEL: str = "INFO"
    DEV_MODE: bool = False
    DEV_LOG_FILE: str = "dev-operations.log"

    RECURRING_ENABLED: bool = True
    RECURRING_INTERVAL_SECONDS: int = 3600


settings = Settings()
