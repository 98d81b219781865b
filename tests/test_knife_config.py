"""Tests for the typed KnifeConfig view."""

import dataclasses

import pytest

from config.config_loader import load_settings
from config.knife_config import KnifeConfig, split_no_proxy, split_server_url
from config.knife_parser import parse_knife_text
from config.settings import Settings
from utils.errors import ConfigError, KeyLoadError


def _view(text: str) -> KnifeConfig:
    return KnifeConfig.from_settings(Settings(parse_knife_text(text)))


class TestExampleFile:
    """Typed view of the shipped sample knife.rb."""

    @pytest.fixture
    def knife_config(self, example_knife_rb):
        return KnifeConfig.from_settings(load_settings(example_knife_rb))

    def test_server_url_split(self, knife_config):
        assert knife_config.chef_server_url == "http://127.0.0.1:8443"
        assert knife_config.host == "127.0.0.1"
        assert knife_config.port == 8443

    def test_chef_zero(self, knife_config):
        assert knife_config.chef_zero_enabled is True
        assert knife_config.chef_zero_port == 8889

    def test_cookbook_metadata(self, knife_config):
        assert knife_config.cookbook_copyright == "chef-golang-copyright"
        assert knife_config.cookbook_email == "chef-golang@chef-golang.github.com"
        assert knife_config.cookbook_license == "chef-golang-license"
        assert knife_config.cookbook_path == (
            "/var/chef/cookbooks",
            "/var/chef/site-cookbooks",
        )

    def test_flags_and_versions(self, knife_config):
        assert knife_config.data_bag_encrypt_version == 2
        assert knife_config.local_mode is True
        assert knife_config.versioned_cookbooks is True

    def test_identity_and_keys(self, knife_config):
        assert knife_config.node_name == "admin"
        assert knife_config.client_key_path == "/tmp/goiardi/admin.pem"
        assert knife_config.validation_client_name == "chef-validator"
        assert knife_config.validation_key_path == "/tmp/goiardi/chef-validator.pem"

    def test_no_proxy_split(self, knife_config):
        assert knife_config.no_proxy == (
            "localhost",
            "10.*",
            "*.example.com",
            "*.dev.example.com",
        )

    def test_unset_keys_use_defaults(self, knife_config):
        assert knife_config.syntax_check_cache_path == ""

    def test_logging_settings(self, knife_config):
        assert knife_config.log_level == "info"
        assert knife_config.log_location == "STDOUT"

    def test_settings_kept_for_open_ended_keys(self, knife_config):
        assert knife_config.settings["chef_zero"]["port"] == 8889

    def test_frozen(self, knife_config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            knife_config.node_name = "other"  # type: ignore[misc]

    def test_as_dict_excludes_settings(self, knife_config):
        data = knife_config.as_dict()
        assert "settings" not in data
        assert data["cookbook_path"] == ["/var/chef/cookbooks", "/var/chef/site-cookbooks"]
        assert data["port"] == 8443


class TestDefaults:
    def test_empty_settings(self):
        knife_config = KnifeConfig.from_settings(Settings())

        assert knife_config.chef_server_url == ""
        assert knife_config.host == ""
        assert knife_config.port is None
        assert knife_config.chef_zero_enabled is False
        assert knife_config.chef_zero_port is None
        assert knife_config.cookbook_path == ()
        assert knife_config.no_proxy == ()
        assert knife_config.data_bag_encrypt_version is None

    def test_single_string_cookbook_path(self):
        assert _view("cookbook_path '/only'").cookbook_path == ("/only",)

    def test_no_proxy_as_list(self):
        knife_config = _view('no_proxy [ "localhost", "a.example.com, b.example.com" ]')
        assert knife_config.no_proxy == ("localhost", "a.example.com", "b.example.com")


class TestServerUrl:
    @pytest.mark.parametrize(
        ("url", "host", "port"),
        [
            ("http://chef.example.com", "chef.example.com", 80),
            ("https://chef.example.com/organizations/acme", "chef.example.com", 443),
            ("https://chef.example.com:8443", "chef.example.com", 8443),
            ("http://[::1]:4000", "::1", 4000),
        ],
    )
    def test_host_and_port(self, url, host, port):
        assert split_server_url(url) == (host, port)

    def test_invalid_scheme_rejected(self):
        with pytest.raises(ConfigError, match="Invalid http scheme"):
            split_server_url("ftp://chef.example.com")

    def test_missing_host_rejected(self):
        with pytest.raises(ConfigError, match="Invalid host format"):
            split_server_url("https://")

    def test_invalid_port_rejected(self):
        with pytest.raises(ConfigError):
            split_server_url("https://chef.example.com:notaport")

    def test_invalid_url_in_file_fails_view(self):
        with pytest.raises(ConfigError):
            _view("chef_server_url 'chef.example.com'")


class TestTypeChecks:
    @pytest.mark.parametrize(
        "text",
        [
            "local_mode 'yes'",
            "data_bag_encrypt_version true",
            "data_bag_encrypt_version '2'",
            "node_name 5",
            "chef_zero[:port] '8889'",
            "cookbook_path[:x] '/a'",
        ],
    )
    def test_wrong_type_rejected(self, text):
        with pytest.raises(ConfigError):
            _view(text)

    def test_error_names_the_key(self):
        with pytest.raises(ConfigError, match="local_mode"):
            _view("local_mode 'yes'")


class TestSplitNoProxy:
    def test_blank_entries_dropped(self):
        assert split_no_proxy("a, ,b,") == ("a", "b")


class TestKeyLoading:
    def test_load_client_key(self, rsa_key_file):
        knife_config = _view(f"client_key '{rsa_key_file}'")
        key = knife_config.load_client_key()
        assert key.key_size == 2048

    def test_load_validation_key(self, rsa_key_file):
        knife_config = _view(f"validation_key '{rsa_key_file}'")
        assert knife_config.load_validation_key().key_size == 2048

    def test_unset_client_key(self):
        with pytest.raises(ConfigError, match="client_key is not set"):
            KnifeConfig().load_client_key()

    def test_missing_key_file(self, tmp_path):
        knife_config = _view(f"validation_key '{tmp_path / 'missing.pem'}'")
        with pytest.raises(KeyLoadError):
            knife_config.load_validation_key()
