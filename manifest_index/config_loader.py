import os
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from manifest_index import log

ANDROID_NS = "http://schemas.android.com/apk/res/android"
CONFIG_REL_PATH = "config/settings.yaml"


class ConfigError(Exception):
    """Settings file could not be read or validated."""


class ManifestSettings(BaseModel):
    min_sdk_floor: int = 3
    namespaces: Dict[str, str] = Field(default_factory=lambda: {"android": ANDROID_NS})


class LoggingSettings(BaseModel):
    verbose: bool = False


class Settings(BaseModel):
    manifest: ManifestSettings = Field(default_factory=ManifestSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def default_config_path() -> str:
    app_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(app_root, CONFIG_REL_PATH)


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Loads the YAML settings file; a missing file gives the defaults.
    A missing bundled file is logged at DEBUG, a missing explicit path at WARNING.
    """
    explicit = config_path is not None
    config_path = config_path or default_config_path()
    if not os.path.exists(config_path):
        if explicit:
            log.warning(f"Configuration file not found at {config_path}. Using default settings.")
        else:
            log.debug(f"No bundled settings at {config_path}. Using default settings.")
        return Settings()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        log.error(f"Error parsing YAML configuration: {e}")
        raise ConfigError(f"invalid YAML in {config_path}") from e

    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        log.error(f"Invalid settings in {config_path}: {e}")
        raise ConfigError(f"invalid settings in {config_path}") from e
