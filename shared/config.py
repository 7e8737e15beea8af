"""
Configuration management for the Slack deploy bot
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Slack Configuration
    slack_bot_token: str = ""
    slack_app_token: str = ""  # Only needed for Socket Mode
    slack_signing_secret: str = ""
    slack_admin_channel: Optional[str] = None  # Channel for error notifications

    # Deployment Configuration
    deployment_password: str = ""
    deploy_api_endpoint: str = ""
    deployment_key: str = ""
    deploy_request_timeout: float = 30.0
    deployment_eta_minutes: int = 10
    require_confirmation: bool = True

    # HTTP Configuration (production mode)
    host: str = "0.0.0.0"
    port: int = 3000
    events_path: str = "/slack/events"

    # Application Configuration
    app_name: str = "Slack Deploy Bot"
    app_version: str = "1.0.0"
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"

    def use_socket_mode(self) -> bool:
        """Socket Mode is used everywhere except production"""
        return not self.is_production()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def validate_settings() -> tuple[bool, list[str]]:
    """Validate all required settings are configured"""
    settings = get_settings()
    errors = []

    # Check required Slack settings
    if not settings.slack_bot_token:
        errors.append("SLACK_BOT_TOKEN is required")

    if settings.use_socket_mode() and not settings.slack_app_token:
        errors.append("SLACK_APP_TOKEN is required in Socket Mode")

    if settings.is_production() and not settings.slack_signing_secret:
        errors.append("SLACK_SIGNING_SECRET is required in production")

    # Check required deployment settings
    if not settings.deployment_password:
        errors.append("DEPLOYMENT_PASSWORD is required")

    if not settings.deploy_api_endpoint:
        errors.append("DEPLOY_API_ENDPOINT is required")

    if not settings.deployment_key:
        errors.append("DEPLOYMENT_KEY is required")

    return len(errors) == 0, errors


def print_configuration():
    """Print current configuration (excluding secrets)"""
    settings = get_settings()

    print(f"🔧 {settings.app_name} v{settings.app_version}")
    print(f"Environment: {settings.environment}")
    print(f"Log Level: {settings.log_level}")
    if settings.use_socket_mode():
        print("Connection: Socket Mode")
    else:
        print(f"Connection: HTTP {settings.host}:{settings.port}{settings.events_path}")
    print(f"Deploy Endpoint: {settings.deploy_api_endpoint or 'Not configured'}")
    print(f"Features:")
    print(f"  - Password Confirmation: {'✅' if settings.require_confirmation else '❌'}")
    print(f"  - Admin Error Channel: {'✅' if settings.slack_admin_channel else '❌'}")


if __name__ == "__main__":
    # Test configuration
    is_valid, validation_errors = validate_settings()

    if is_valid:
        print("✅ Configuration is valid")
        print_configuration()
    else:
        print("❌ Configuration errors:")
        for error in validation_errors:
            print(f"  - {error}")
        exit(1)
