# roomchat/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    PROJECT_NAME: str = "RoomChat API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Conference rooms with real-time chat"
    API_V1_STR: str = "/api/v1"
    APP_NAME: str = "RoomChat"

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_SECRET_KEY: str
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    REDIS_HOST: str
    REDIS_PORT: int
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"

    # Room and message policy
    FREE_ROOM_CAPACITY: int = 10
    PREMIUM_ROOM_CAPACITY: int = 100
    PREMIUM_PERIOD_DAYS: int = 30
    MESSAGE_EDIT_WINDOW_SECONDS: int = 180
    MESSAGE_RETENTION_HOURS: int = 24
    ROOM_MESSAGES_LIMIT: int = 100
    MAX_MESSAGE_LENGTH: int = 4000

    # Housekeeping
    HOUSEKEEPING_ENABLED: bool = True
    HOUSEKEEPING_INTERVAL_SECONDS: int = 3600
    PREMIUM_EXPIRY_BATCH_SIZE: int = 100
    MESSAGE_PURGE_BATCH_SIZE: int = 1000

    # One-time email codes
    OTP_LENGTH: int = 6
    OTP_EXPIRE_MINUTES: int = 15
    OTP_MAX_ATTEMPTS: int = 5
    EMAIL_API_URL: str = "https://api.diva.com/email/send"
    EMAIL_API_KEY: str | None = None
    ADMIN_SETUP_KEY: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="allow")
