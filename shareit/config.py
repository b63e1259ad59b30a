from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./shareit.db"

    LOG_LEVEL: str = "INFO"

    # Identity header set by the gateway after it has validated the caller
    USER_ID_HEADER: str = "X-Sharer-User-Id"

    # State used by the listing endpoints when the query omits one
    DEFAULT_STATE: str = "ALL"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
