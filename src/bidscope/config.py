from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from bidscope.exceptions import ConfigError

class AppSettings(BaseSettings):
    name: str = "BidScope"
    version: str = "1.0.0"

class PathSettings(BaseSettings):
    input_dir: Path = Path("./data/input")
    db_path: Path = Path("./data/bidscope.db")


class SecuritySettings(BaseSettings):
    """
    Optional auth for the analytics routes.
    """
    api_token: Optional[str] = None  # Bearer token or X-API-Key
    require_auth_on_queries: bool = False

class LoggingSettings(BaseSettings):
    log_requests: bool = True
    level: str = "INFO"


class AnalyticsSettings(BaseSettings):
    """
    Engine defaults. The three placeholder figures are reported verbatim by the
    performance metrics until a data source for them exists.
    """
    default_months: int = 6
    max_months: int = 36
    default_timeframe: str = "month"
    average_response_time: float = 2.5  # days
    competitive_index: float = 8.5
    average_markup: float = 15.0

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")
    app: AppSettings = AppSettings()
    paths: PathSettings = PathSettings()
    security: SecuritySettings = SecuritySettings()
    logging: LoggingSettings = LoggingSettings()
    analytics: AnalyticsSettings = AnalyticsSettings()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        # Load from default path if exists
        default_path = Path("config/settings.yaml")
        path = config_path or (default_path if default_path.exists() else None)

        if not path:
            return cls()

        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot read settings from {path}: {exc}") from exc

        return cls(**config_data)

settings = Settings.load()
