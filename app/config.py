from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "campus_events"
    MONGO_TIMEOUT_MS: int = 5000
    JWT_SECRET: str = "change-me"
    JWT_EXPIRE_MINUTES: int = 60
    LOG_LEVEL: str = "INFO"
    ALLOW_TEST_DATA: bool = False
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    @property
    def is_production(self) -> bool:
        return self.ENV.strip().lower() == "production"

    @property
    def test_data_enabled(self) -> bool:
        return self.ALLOW_TEST_DATA and not self.is_production


settings = Settings()
