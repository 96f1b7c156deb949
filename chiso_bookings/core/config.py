from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Eat with Chiso Bookings"
    API_V1_STR: str = "/api"

    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"

    # Security (empty = store endpoint open)
    API_KEY: str = ""

    # Storage (empty = in-memory)
    STORE_PATH: str = ""

    # Restaurant catalog (empty = packaged data/restaurant_config.json)
    RESTAURANT_CONFIG_PATH: str = ""

    # Resend
    RESEND_API_KEY: str = ""
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str = "Eat with Chiso <booking@eatwchiso.pages.dev>"
    EMAIL_REPLY_TO: str = "Chiso <chiboguchisomu@gmail.com>"
    EMAIL_TIMEOUT: int = 10

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # Terminal client
    BOOKING_API_URL: str = "http://localhost:8000"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
