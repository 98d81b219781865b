from .config_loader import (
    ConfigLoader,
    find_config_path,
    load_settings,
    parse_config,
)
from .knife_config import KnifeConfig
from .settings import Settings

# NOTE: nothing is loaded at import time; callers use
# ConfigLoader.load_config() or load_settings() explicitly.

__all__ = [
    "ConfigLoader",
    "KnifeConfig",
    "Settings",
    "find_config_path",
    "load_settings",
    "parse_config",
]
