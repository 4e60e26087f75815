from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(frozen=True)

    stripe_webhook_secret: SecretStr
    signature_tolerance: int = 300
    log_level: str = "INFO"
    log_format: str = "pretty"
