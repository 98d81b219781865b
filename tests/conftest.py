import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for CI environments where
# Python might not automatically include it (e.g., some GitHub
# Actions runners invoking pytest differently).
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config.config_loader import CONFIG_PATH_ENV, ConfigLoader
from tests.factories import EXAMPLE_KNIFE_RB, make_rsa_pem
from utils.logging import shutdown_logging


@pytest.fixture(autouse=True)
def _isolated_loader(monkeypatch):
    """Every test starts with an empty loader cache and no env override."""
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
    shutdown_logging()


@pytest.fixture
def example_knife_rb() -> str:
    """Path to the sample knife.rb shipped with the tests."""
    return str(EXAMPLE_KNIFE_RB)


@pytest.fixture(scope="session")
def rsa_pem() -> bytes:
    """One PKCS#1 RSA key per session; generation is slow."""
    return make_rsa_pem()


@pytest.fixture
def rsa_key_file(tmp_path, rsa_pem) -> Path:
    path = tmp_path / "admin.pem"
    path.write_bytes(rsa_pem)
    return path
