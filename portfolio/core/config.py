from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_refresh_secret: str
    jwt_algorithm: str = "HS256"

    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    bcrypt_rounds: int = 12

    # development | production | test
    environment: str = "development"
    api_prefix: str = "/api/v1"
    frontend_url: str = "http://localhost:3000"

    rate_limit_enabled: bool = True
    login_rate_limit: str = "5/15minutes"
    track_rate_limit: str = "100/15minutes"
    # только за одним доверенным прокси, иначе X-Forwarded-For подделывается клиентом
    trust_proxy: bool = False

    log_level: str = "INFO"
    db_echo: bool = False
    create_tables_on_startup: bool = True

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
