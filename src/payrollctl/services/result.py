"""ServiceResult and ServiceError — the universal service contract.

All service-layer methods return ServiceResult; the CLI consumes it.
Expected outcomes (validation failures, missing records, role denials)
are results, never exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    For ``VALIDATION_FAILED`` the ``detail`` carries
    ``{"errors": [{"attribute": ..., "message": ...}, ...]}``.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"create_employee"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (counts, entity type).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Shorthand for an ``ok=False`` result."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @property
    def field_errors(self) -> list[dict[str, str]]:
        """Attribute-level validation errors, empty unless validation failed."""
        if self.error is None:
            return []
        return list(self.error.detail.get("errors", []))
