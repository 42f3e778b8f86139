"""Configuration loader for Disaster Info."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class HazardMapConfig(BaseModel):
    base_url: str = "http://localhost:3001/api/hazard"
    api_key: Optional[str] = None
    datum: str = "wgs84"
    timeout_seconds: float = 120.0
    retry_attempts: int = 3
    retry_delay_seconds: float = 2.0
    user_agent: str = "DisasterInfoApp/1.0"


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    cors_origins: list[str] = ["*"]


class BoundingBox(BaseModel):
    north: float = 45.557
    south: float = 24.045
    east: float = 145.817
    west: float = 122.934


class ServiceConfig(BaseModel):
    japan_bbox: BoundingBox = BoundingBox()
    max_history_events: int = 50
    history_years: int = 20


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    rotation: str = "10 MB"
    retention: str = "7 days"
    to_file: bool = True


class AppConfig(BaseModel):
    name: str = "disaster_info"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    logging: LoggingConfig = LoggingConfig()
    hazard_map: HazardMapConfig = HazardMapConfig()
    api: APIConfig = APIConfig()
    service: ServiceConfig = ServiceConfig()


def get_project_root() -> Path:
    return Path(__file__).parent.parent.parent


def load_yaml_config(env: str = "development") -> dict[str, Any]:
    config_path = get_project_root() / "config" / "environments" / f"{env}.yaml"
    if not config_path.exists():
        return {}
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def get_settings(env: Optional[str] = None) -> Settings:
    env = env or os.getenv("APP_ENV", "development")
    yaml_config = load_yaml_config(env)

    # Override with env vars
    if os.getenv("HAZARD_MAP_API_URL"):
        yaml_config.setdefault("hazard_map", {})["base_url"] = os.getenv("HAZARD_MAP_API_URL")
    if os.getenv("HAZARD_MAP_API_TIMEOUT"):
        # Deployments set this in milliseconds
        timeout_ms = int(os.getenv("HAZARD_MAP_API_TIMEOUT"))
        yaml_config.setdefault("hazard_map", {})["timeout_seconds"] = timeout_ms / 1000
    if os.getenv("HAZARD_MAP_API_KEY"):
        yaml_config.setdefault("hazard_map", {})["api_key"] = os.getenv("HAZARD_MAP_API_KEY")
    if os.getenv("LOG_LEVEL"):
        yaml_config.setdefault("logging", {})["level"] = os.getenv("LOG_LEVEL")

    yaml_config.setdefault("app", {})["environment"] = env
    return Settings(**yaml_config)


settings = get_settings()
