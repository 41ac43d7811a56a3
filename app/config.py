"""Environment configuration management."""
from typing import List, Optional
from pydantic_settings import BaseSettings

# Env var names of the settings the relay cannot run without
REQUIRED_SETTINGS = {
    "openai_api_key": "OPENAI_API_KEY",
    "dingtalk_webhook": "DINGTALK_WEBHOOK",
    "dingtalk_secret": "DINGTALK_SECRET",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.6
    openai_timeout: float = 30.0

    # Base robot URL carrying only access_token, no timestamp/sign
    dingtalk_webhook: Optional[str] = None
    dingtalk_secret: Optional[str] = None
    dingtalk_timeout: float = 10.0

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def missing_required(self) -> List[str]:
        """Return env var names of required settings that are unset or empty."""
        return [
            env_name
            for field, env_name in REQUIRED_SETTINGS.items()
            if not getattr(self, field)
        ]

    def secret_values(self) -> List[str]:
        """Configured values that must never appear in responses or logs."""
        values = [self.openai_api_key, self.dingtalk_secret]
        if self.dingtalk_webhook and "access_token=" in self.dingtalk_webhook:
            token = self.dingtalk_webhook.split("access_token=", 1)[1].split("&", 1)[0]
            values.append(token)
        return [v for v in values if v]


# Global settings instance
settings = Settings()
