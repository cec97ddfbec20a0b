"""Configuration package for grey-so."""

from .config import Config, parse_allowed_models
from .user_settings import UserSettings, config_dir, load_user_settings

__all__ = [
    "Config",
    "UserSettings",
    "config_dir",
    "load_user_settings",
    "parse_allowed_models",
]
