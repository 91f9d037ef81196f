from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Wall-clock used to decide which of today's slots are already gone.
    SCHEDULING_TIMEZONE: str = "Asia/Kolkata"

    HOLD_TTL_MINUTES: int = 10

    # Applied to consultants that never saved their own working hours.
    DEFAULT_SESSION_DURATION_MINUTES: int = 60
    DEFAULT_BUFFER_MINUTES: int = 0
    DEFAULT_MAX_SESSIONS_PER_DAY: int = 8
    DEFAULT_WORKDAY_START: str = "09:00"
    DEFAULT_WORKDAY_END: str = "17:00"

    DATA_DIR: str = "./data/scheduling"


settings = Settings()
