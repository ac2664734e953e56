"""Password hashing via werkzeug's salted hash helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from werkzeug.security import check_password_hash, generate_password_hash

if TYPE_CHECKING:
    from payrollctl.config.models import SecurityConfig


def hash_password(password: str, config: SecurityConfig | None = None) -> str:
    """Return a salted hash of *password*; the raw value is never stored."""
    if config is None:
        return generate_password_hash(password)
    return generate_password_hash(
        password, method=config.hash_method, salt_length=config.salt_length
    )


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)
