from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration settings.
    """
    model_config = SettingsConfigDict(env_prefix="REQUEST_ACCOUNTING_", env_file=".env", extra="ignore")

    # Service Info
    service_name: str = "request-accounting"
    environment: str = "local"
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Accounting
    accounting_enabled: bool = True
    reap_children: bool = True
    expose_headers: bool = False

    # Access log
    access_log_enabled: bool = True
    access_log_format: Literal["console", "json"] = "console"

settings = Settings()
