"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings


class ClientBankingConfig(BaseSettings):
    """Client banking configuration"""

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    # Business rules configuration
    max_transaction_amount: str = "10000.00"  # Ceiling for pre-flight validation
    max_history_size: int = 10000  # Oldest transaction records are dropped past this

    # Feature flags
    enable_events: bool = True

    class Config:
        env_prefix = "CLIENT_BANKING_"
        env_file = ".env"
        case_sensitive = False

    @property
    def max_transaction_decimal(self) -> Decimal:
        return Decimal(self.max_transaction_amount)


# Global configuration instance
config = ClientBankingConfig()


def get_config() -> ClientBankingConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> ClientBankingConfig:
    """Reload configuration from environment"""
    global config
    config = ClientBankingConfig()
    return config
