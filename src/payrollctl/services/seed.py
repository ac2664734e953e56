"""SeedService — create the default administrator on a fresh database."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from payrollctl.domain.types import EntityType, Role
from payrollctl.services.base import BaseService
from payrollctl.services.result import ServiceResult
from payrollctl.services.security import hash_password

if TYPE_CHECKING:
    from payrollctl.config.models import SecurityConfig, SeedConfig
    from payrollctl.infrastructure.store import RecordStore

log = structlog.get_logger(__name__)


class SeedService(BaseService):
    """Bootstraps the first level1 user so role-gated commands can be used."""

    def __init__(
        self,
        store: RecordStore,
        *,
        seed: SeedConfig,
        security: SecurityConfig | None = None,
    ) -> None:
        super().__init__(store)
        self._seed = seed
        self._security = security

    def seed_default_user(self) -> ServiceResult:
        """Insert the configured default user unless one with that email exists.

        The row is written directly: the default password is shorter than
        the validated minimum, and the operator is expected to change it.
        """
        op = "seed"
        email = self._seed.email
        if self._store.find_first_where(EntityType.USERS, "email", email) is not None:
            log.warning("seed.user_exists", email=email)
            return ServiceResult.failure(
                op, "ALREADY_EXISTS", f"Default user already exists: {email}", email=email
            )

        record_id = self._store.insert(
            EntityType.USERS,
            {
                "name": self._seed.name,
                "email": email,
                "password_hash": hash_password(self._seed.password, self._security),
                "role": Role.LEVEL_1.value,
            },
        )
        log.info("seed.user_created", email=email, id=record_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": record_id, "email": email, "role": Role.LEVEL_1.value},
            warnings=["Change the default password before going live"],
        )
