
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "GoCinema API"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    ADMIN_SECRET_KEY: str = "change-this-admin-secret"
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "gocinema"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # Telegram bot (OTP delivery + phone linking)
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_BOT_USERNAME: str = ""
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    TELEGRAM_TIMEOUT_SECONDS: float = 10.0
    APP_URL: str = "http://localhost:8000"

    # Cinema defaults
    DEFAULT_HALL_NAME: str = "Գլխավոր դահլիճ"
    DEFAULT_BASE_PRICE: int = 2000
    MAX_SEATS_PER_BOOKING: int = 10

    # Password recovery
    OTP_EXPIRY_MINUTES: int = 10
    OTP_MAX_REQUESTS_PER_HOUR: int = 5
    RESET_SESSION_EXPIRY_MINUTES: int = 15
    MIN_PASSWORD_LENGTH: int = 6

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
