from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OWNER_NUMBER: str = ""

    BUSINESS_NAME: str = "JotaBarber"
    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = False

    STORE_PROVIDER: str = "json"
    BOOKING_STORE_URL: str = "./data/bookings.json"

    WHATSAPP_VERIFY_TOKEN: str = ""
    WHATSAPP_APP_SECRET: str | None = None
    WHATSAPP_ACCESS_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER_ID: str | None = None
    WHATSAPP_GRAPH_API_VERSION: str = "v20.0"


settings = Settings()
