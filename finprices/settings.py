from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FINPRICES_", extra="ignore")
    http_timeout: Optional[float] = 30.0  # None blocks until the upstream answers
    max_attempts: int = 1
    user_agent: str = "Mozilla/5.0 (compatible; finance-prices/0.1)"
    currency: str = "CNY"
    workers: int = 1
    log_level: str = "WARNING"

settings = Settings()
