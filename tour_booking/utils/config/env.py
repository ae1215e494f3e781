from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "tour-booking-api"
    environment: str = "development"
    debug: bool = True

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    database: str = "mongodb://localhost:27017/natours"
    database_password: str | None = None

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    jwt_expires_in_days: int = 90

    # Subtracted from password_changed_at so tokens issued in the same second stay valid
    password_changed_skew_seconds: int = 1

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=True)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def mongo_uri(self) -> str:
        if self.database_password:
            return self.database.replace("<db_password>", self.database_password)
        return self.database


settings = Settings()
