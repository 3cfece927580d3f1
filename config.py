"""Configuration for the metrics dashboard service"""
import logging
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


DEFAULT_DISPLAY_NAMES = (
    "USLACKBOT=Slackbot,"
    "U09ALTU98N9=Abhilash,"
    "U09ANKW5H0A=Varsha,"
    "U09ANKXGRPC=Saiprakash,"
    "U09ANKZMCRG=Harsha,"
    "U09ANL082SW=Prasanna"
)


def parse_pairs(value: str) -> Dict[str, str]:
    """Parse 'key=value,key=value' into an ordered dict"""
    pairs = {}
    for item in value.split(','):
        if '=' in item:
            key, val = item.split('=', 1)
            if key.strip():
                pairs[key.strip()] = val.strip()
    return pairs


class Config(BaseSettings):
    """Service configuration read from the environment"""

    # Metrics source
    metrics_url: str = Field(default="http://localhost:8000/metrics", description="Exposition endpoint to poll")
    poll_interval: int = Field(default=30, ge=1, description="Poll interval in seconds")
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP request timeout in seconds")

    # Service identification
    service_name: str = Field(default="metrics-dashboard", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    # Server settings
    server_port: int = Field(default=8080, ge=1, le=65535, description="API server port")
    server_host: str = Field(default="0.0.0.0", description="API server host")
    enable_request_logging: bool = Field(default=True, description="Enable HTTP request logging")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file")

    # Presentation
    display_names_str: str = Field(
        default=DEFAULT_DISPLAY_NAMES,
        description="User id to display name mapping (id=Name, comma-separated)"
    )
    hidden_users_str: str = Field(default="USLACKBOT", description="User ids hidden from charts (comma-separated)")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('metrics_url')
    def validate_metrics_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("METRICS_URL must be an http(s) URL")
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @validator('log_file')
    def ensure_log_directory(cls, v):
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def display_names(self) -> Dict[str, str]:
        """Get the display name mapping as a dict"""
        return parse_pairs(self.display_names_str)

    @property
    def hidden_users(self) -> List[str]:
        """Get hidden user ids as a list"""
        return [item.strip() for item in self.hidden_users_str.split(',') if item.strip()]
