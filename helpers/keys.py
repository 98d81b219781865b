# helpers/keys.py

"""
RSA private key loading for knife client and validation keys.

knife.rb only references keys by path (``client_key``, ``validation_key``);
these helpers turn such a path, or raw PEM content, into a usable key object.
"""

from __future__ import annotations

from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from utils.errors import KeyLoadError
from utils.logging import get_logger

logger = get_logger(__name__)


def key_from_string(key: bytes | str) -> rsa.RSAPrivateKey:
    """
    Parse an unencrypted PEM RSA private key (PKCS#1 or PKCS#8).

    Raises:
        KeyLoadError: If the content is not valid PEM, is encrypted, or is not RSA.
    """
    data = key.encode("utf-8") if isinstance(key, str) else key
    try:
        private_key = serialization.load_pem_private_key(data, password=None)
    except TypeError as e:
        # Raised by cryptography for password-protected keys
        raise KeyLoadError(f"Encrypted private keys are not supported: {e}") from e
    except ValueError as e:
        raise KeyLoadError(f"Invalid PEM private key: {e}") from e

    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise KeyLoadError(
            f"Expected an RSA private key, got {type(private_key).__name__}"
        )
    return private_key


def key_from_file(filename: str | Path) -> rsa.RSAPrivateKey:
    """
    Read an RSA private key given a filepath.

    Raises:
        KeyLoadError: If the file cannot be read or does not hold an RSA key.
    """
    path = Path(filename).expanduser()
    try:
        content = path.read_bytes()
    except OSError as e:
        logger.warning("Unable to read key file %s: %s", path, e)
        raise KeyLoadError(f"Unable to read key file {path}: {e}") from e

    try:
        private_key = key_from_string(content)
    except KeyLoadError as e:
        raise KeyLoadError(f"{path}: {e}") from e

    logger.debug("Loaded %d-bit RSA key from %s", private_key.key_size, path)
    return private_key
