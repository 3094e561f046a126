from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "dev"
    API_BASE: str = "http://localhost:8000/api"

    HTTP_CONNECT_TIMEOUT: float = 5
    HTTP_READ_TIMEOUT: float = 25
    RETRY_ATTEMPTS: int = 2

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Seconds of slack when deciding whether a stored token has expired
    TOKEN_LEEWAY: int = 30

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SCHOOLDASH_", extra="ignore")

settings = Settings()
