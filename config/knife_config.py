# config/knife_config.py

"""
Typed view over the well-known knife.rb settings.

Most attributes map to a knife.rb name directly (``node_name``,
``cookbook_path``...). Server ``host``/``port`` are derived from
``chef_server_url`` and ``no_proxy`` is split into its individual patterns.
Keys that the view does not know about stay reachable through ``settings``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from config.settings import Settings
from helpers.keys import key_from_file
from utils.errors import ConfigError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric import rsa

DEFAULT_PORTS = {"http": 80, "https": 443}

_MISSING = object()


def _typed(settings: Settings, name: str, expected: type | tuple[type, ...], default: Any) -> Any:
    value = settings.lookup(*name.split("."), default=_MISSING)
    if value is _MISSING:
        return default
    # bool is an int subclass; keep them apart
    if isinstance(value, bool) and expected is int:
        raise ConfigError(f"Setting {name} must be an integer, got boolean")
    if not isinstance(value, expected):
        expected_name = (
            expected.__name__
            if isinstance(expected, type)
            else "/".join(t.__name__ for t in expected)
        )
        raise ConfigError(
            f"Setting {name} must be {expected_name}, got {type(value).__name__}"
        )
    return value


def split_server_url(url: str) -> tuple[str, int]:
    """
    Return the host and port a chef_server_url points at.

    An explicit port wins; otherwise http maps to 80 and https to 443.

    Raises:
        ConfigError: For an unsupported scheme or a URL without a host.
    """
    try:
        parts = urlsplit(url)
        explicit_port = parts.port
    except ValueError as e:
        raise ConfigError(f"Invalid chef_server_url {url!r}: {e}") from e

    if parts.scheme not in DEFAULT_PORTS:
        raise ConfigError(f"Invalid http scheme in chef_server_url {url!r}")
    if not parts.hostname:
        raise ConfigError(f"Invalid host format in chef_server_url {url!r}")
    return parts.hostname, explicit_port or DEFAULT_PORTS[parts.scheme]


def split_no_proxy(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class KnifeConfig:
    chef_server_url: str = ""
    host: str = ""
    port: int | None = None
    chef_zero_enabled: bool = False
    chef_zero_port: int | None = None
    client_key_path: str = ""
    cookbook_copyright: str = ""
    cookbook_email: str = ""
    cookbook_license: str = ""
    cookbook_path: tuple[str, ...] = ()
    data_bag_encrypt_version: int | None = None
    local_mode: bool = False
    log_level: str = ""
    log_location: str = ""
    node_name: str = ""
    no_proxy: tuple[str, ...] = ()
    syntax_check_cache_path: str = ""
    validation_client_name: str = ""
    validation_key_path: str = ""
    versioned_cookbooks: bool = False
    settings: Settings = field(default_factory=Settings, repr=False, compare=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> KnifeConfig:
        """
        Build the typed view from a loaded Settings mapping.

        Raises:
            ConfigError: If a well-known key holds the wrong type or the
                server URL cannot be split into host and port.
        """
        chef_server_url = _typed(settings, "chef_server_url", str, "")
        host, port = ("", None)
        if chef_server_url:
            host, port = split_server_url(chef_server_url)

        cookbook_path = _typed(settings, "cookbook_path", (tuple, str), ())
        if isinstance(cookbook_path, str):
            cookbook_path = (cookbook_path,)

        no_proxy = _typed(settings, "no_proxy", (tuple, str), "")
        if isinstance(no_proxy, str):
            no_proxy = split_no_proxy(no_proxy)
        else:
            no_proxy = tuple(item for entry in no_proxy for item in split_no_proxy(entry))

        return cls(
            chef_server_url=chef_server_url,
            host=host,
            port=port,
            chef_zero_enabled=_typed(settings, "chef_zero.enabled", bool, False),
            chef_zero_port=_typed(settings, "chef_zero.port", int, None),
            client_key_path=_typed(settings, "client_key", str, ""),
            cookbook_copyright=_typed(settings, "cookbook_copyright", str, ""),
            cookbook_email=_typed(settings, "cookbook_email", str, ""),
            cookbook_license=_typed(settings, "cookbook_license", str, ""),
            cookbook_path=cookbook_path,
            data_bag_encrypt_version=_typed(settings, "data_bag_encrypt_version", int, None),
            local_mode=_typed(settings, "local_mode", bool, False),
            log_level=_typed(settings, "log_level", str, ""),
            log_location=_typed(settings, "log_location", str, ""),
            node_name=_typed(settings, "node_name", str, ""),
            no_proxy=no_proxy,
            syntax_check_cache_path=_typed(settings, "syntax_check_cache_path", str, ""),
            validation_client_name=_typed(settings, "validation_client_name", str, ""),
            validation_key_path=_typed(settings, "validation_key", str, ""),
            versioned_cookbooks=_typed(settings, "versioned_cookbooks", bool, False),
            settings=settings,
        )

    def load_client_key(self) -> rsa.RSAPrivateKey:
        if not self.client_key_path:
            raise ConfigError("client_key is not set")
        return key_from_file(self.client_key_path)

    def load_validation_key(self) -> rsa.RSAPrivateKey:
        if not self.validation_key_path:
            raise ConfigError("validation_key is not set")
        return key_from_file(self.validation_key_path)

    def as_dict(self) -> dict[str, Any]:
        """Field values without the underlying settings, tuples as lists."""
        result: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "settings":
                continue
            value = getattr(self, f.name)
            result[f.name] = list(value) if isinstance(value, tuple) else value
        return result
