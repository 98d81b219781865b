"""
Test Factories Module

Centralized factory functions for creating knife.rb content, temp files and keys.
"""

from .knife_factories import (
    EXAMPLE_KNIFE_RB,
    make_ec_pem,
    make_encrypted_rsa_pem,
    make_knife_rb,
    make_rsa_pem,
    temp_knife_file,
)

__all__ = [
    "EXAMPLE_KNIFE_RB",
    "make_ec_pem",
    "make_encrypted_rsa_pem",
    "make_knife_rb",
    "make_rsa_pem",
    "temp_knife_file",
]
