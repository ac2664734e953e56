"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, payrollctl.toml only contains
overrides.  A fresh project needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel


class DatabaseConfig(BaseModel):
    """[database] section.

    An empty ``url`` selects the SQLite file under ``.payrollctl/``.
    """

    model_config = {"frozen": True}

    url: str = ""
    echo: bool = False


class SeedConfig(BaseModel):
    """[seed] section — the default administrator created by ``payrollctl seed``."""

    model_config = {"frozen": True}

    name: str = "Default User"
    email: str = "staff@swinpayroll.xyz"
    password: str = "password"


class SecurityConfig(BaseModel):
    """[security] section — password hashing parameters."""

    model_config = {"frozen": True}

    hash_method: str = "pbkdf2:sha256"
    salt_length: int = 16

