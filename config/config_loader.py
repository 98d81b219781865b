# config/config_loader.py

import logging
import os
from pathlib import Path
from typing import Any, ClassVar

from config.knife_config import KnifeConfig
from config.knife_parser import parse_knife_text
from config.settings import Settings
from utils.errors import ConfigNotFoundError, ConfigParseError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "KNIFE_CONFIG_PATH"


def default_config_paths() -> list[Path]:
    """Locations searched when no path is given, in knife's order."""
    return [
        Path(".chef") / "knife.rb",
        Path.home() / ".chef" / "knife.rb",
    ]


def find_config_path(config_path: str | os.PathLike[str] | None = None) -> Path:
    """Resolve which knife.rb to read.

    Priority: explicit argument > KNIFE_CONFIG_PATH env var > ./.chef/knife.rb
    > ~/.chef/knife.rb. An explicit or env-provided path is returned even if
    it does not exist, so the load reports it as not found.

    Raises:
        ConfigNotFoundError: If no path is given and no default location exists.
    """
    if config_path is not None and str(config_path) != "":
        return Path(config_path)

    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        logger.info("Config path overridden via %s env: %s", CONFIG_PATH_ENV, env_path)
        return Path(env_path)

    for candidate in default_config_paths():
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError("knife.rb configuration file not found")


def load_settings(config_path: str | os.PathLike[str]) -> Settings:
    """Read and parse one knife.rb file.

    One blocking read, one parse pass, no other side effects. Either the whole
    file loads or an error is raised; no partial settings are returned.

    Raises:
        ConfigNotFoundError: If the path is missing, a directory, or unreadable.
        ConfigParseError: If a line is not a recognized declaration or the
            content is not valid UTF-8.
    """
    path = Path(config_path)
    try:
        with path.open(encoding="utf-8-sig") as file:
            text = file.read()
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"not valid UTF-8 ({e.reason})", source=str(path)) from e
    except (OSError, ValueError) as e:
        # ValueError: paths open() rejects outright, e.g. an embedded NUL byte
        logger.warning(
            "Configuration file not found at path: %r (%s)",
            str(path),
            getattr(e, "strerror", None) or e,
            extra={"config_path": str(path)},
        )
        raise ConfigNotFoundError(f"Configuration file not found: {path}", path=path) from e

    values = parse_knife_text(text, source=str(path))
    return Settings(values, source=str(path))


class ConfigLoader:
    """
    Process-wide cache for the knife.rb settings.

    Observability:
        - Logs INFO on successful config load with path
        - Logs WARNING on missing config file
        - Logs ERROR on parse errors
        - Tracks config_status for health reporting
    """

    _config: ClassVar[Settings | None] = None
    _config_status: ClassVar[str] = "not_loaded"  # "ok", "error"
    _config_path: ClassVar[str | None] = None

    @classmethod
    def load_config(cls, config_path: str | os.PathLike[str] | None = None) -> Settings:
        """Load the knife settings if not already loaded.

        Args:
            config_path: Path to knife.rb. If not provided, the file is
                discovered via KNIFE_CONFIG_PATH or the default .chef locations.

        Returns:
            Settings: The loaded, read-only settings.

        Raises:
            ConfigNotFoundError: No file found or readable.
            ConfigParseError: The file has an unrecognized line.
        """
        if cls._config is not None:
            return cls._config

        try:
            path = find_config_path(config_path)
        except ConfigNotFoundError as e:
            logger.warning("No knife.rb to load: %s", e)
            cls._config_status = "error"
            raise

        cls._config_path = str(path)
        try:
            settings = load_settings(path)
        except ConfigParseError as e:
            logger.error("Error parsing configuration: %s", e)
            cls._config_status = "error"
            raise
        except ConfigNotFoundError:
            cls._config_status = "error"
            raise

        cls._config = settings
        cls._config_status = "ok"
        logger.info(
            "Configuration loaded successfully from %s (%d settings)",
            cls._config_path,
            len(settings),
            extra={"config_path": cls._config_path},
        )
        return settings

    @classmethod
    def knife_config(cls, config_path: str | os.PathLike[str] | None = None) -> KnifeConfig:
        """Typed view over the cached settings, loading them first if needed."""
        return KnifeConfig.from_settings(cls.load_config(config_path))

    @classmethod
    def get_config_status(cls) -> dict[str, Any]:
        """Return config health status for diagnostics.

        Returns:
            Dict with config_status, config_path, and whether config is loaded.
        """
        return {
            "config_status": cls._config_status,
            "config_path": cls._config_path,
            "config_loaded": cls._config is not None,
        }

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Retrieves a value from the configuration.

        Args:
            key (str): The setting name, or a dotted path such as "chef_zero.port".
            default (Any, optional): The default value if the key is not found.
                Defaults to None.

        Returns:
            Any: The value associated with the key.
        """
        if cls._config is None:
            return default
        return cls._config.get(key, default)

    @classmethod
    def reset(cls) -> None:
        """Reset the config loader state (useful for testing)."""
        cls._config = None
        cls._config_status = "not_loaded"
        cls._config_path = None


def parse_config(config_path: str | os.PathLike[str] | None = None) -> KnifeConfig:
    """Discover, load and type a knife.rb in one call, bypassing the cache."""
    return KnifeConfig.from_settings(load_settings(find_config_path(config_path)))
