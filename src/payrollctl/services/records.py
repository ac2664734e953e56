"""RecordService — create, update, read, and delete records of any entity type.

Write pipeline: AUTHORIZE → EXTRACT → VALIDATE → TRANSFORM → PERSIST → RESPOND

- AUTHORIZE: the actor's role must be allowed for the entity and action.
- EXTRACT: the body is the bare record object or an envelope keyed by the
  singular entity name (``{"employee": {...}}``); JSON strings are decoded.
- VALIDATE: :class:`~payrollctl.domain.validation.ValidationEngine`.
- TRANSFORM: :func:`~payrollctl.services.transforms.apply_transform`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy.exc import IntegrityError

from payrollctl.domain.schemas import UnknownEntityTypeError
from payrollctl.domain.types import EntityType
from payrollctl.domain.validation import Accepted, NotFound, Rejected, ValidationEngine
from payrollctl.services.access import Action, allowed_roles, is_permitted
from payrollctl.services.base import BaseService
from payrollctl.services.result import ServiceResult
from payrollctl.services.transforms import apply_transform

if TYPE_CHECKING:
    from payrollctl.config.models import SecurityConfig
    from payrollctl.domain.types import Actor
    from payrollctl.domain.validation import ValidationOutcome
    from payrollctl.infrastructure.store import RecordStore

log = structlog.get_logger(__name__)

HIDDEN_FIELDS: frozenset[str] = frozenset({"password_hash"})


def coerce_entity_type(entity_type: EntityType | str) -> EntityType:
    try:
        return EntityType(entity_type)
    except ValueError:
        msg = f"No schema registered for entity type: {entity_type!r}"
        raise UnknownEntityTypeError(msg) from None


def _decode(value: Any) -> Any:
    if isinstance(value, str | bytes):
        try:
            return json.loads(value)
        except ValueError:
            return None
    return value


def extract_payload(entity_type: EntityType, body: Any) -> Any:
    """Pull the candidate payload out of a request body."""
    body = _decode(body)
    if isinstance(body, Mapping) and entity_type.singular in body:
        return _decode(body[entity_type.singular])
    return body


def sanitise(row: Mapping[str, Any]) -> dict[str, Any]:
    """Strip fields that must never leave the service layer."""
    return {k: v for k, v in row.items() if k not in HIDDEN_FIELDS}


class RecordService(BaseService):
    """Handles the record lifecycle for all eight entity types."""

    def __init__(self, store: RecordStore, *, security: SecurityConfig | None = None) -> None:
        super().__init__(store)
        self._security = security
        self._engine = ValidationEngine(store)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(
        self, entity_type: EntityType | str, body: Any, *, actor: Actor | None
    ) -> ServiceResult:
        """Validate and insert a new record."""
        entity = coerce_entity_type(entity_type)
        op = f"create_{entity.singular}"

        denied = self._authorize(op, entity, Action.WRITE, actor)
        if denied is not None:
            return denied

        outcome = self._engine.validate(
            entity, is_new=True, raw_payload=extract_payload(entity, body), actor=actor
        )
        if not isinstance(outcome, Accepted):
            return self._reject(op, entity, outcome)

        row = apply_transform(entity, outcome.payload, store=self._store, security=self._security)
        try:
            record_id = self._store.insert(entity, row)
        except Exception:
            log.error("record.create_failed", entity=str(entity), exc_info=True)
            raise

        stored = self._store.find_by_id(entity, record_id) or {}
        log.info("record.created", entity=str(entity), id=record_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": record_id, entity.singular: sanitise(stored)},
        )

    def update(
        self,
        entity_type: EntityType | str,
        record_id: str,
        body: Any,
        *,
        actor: Actor | None,
    ) -> ServiceResult:
        """Validate and apply changes to an existing record."""
        entity = coerce_entity_type(entity_type)
        op = f"update_{entity.singular}"

        denied = self._authorize(op, entity, Action.WRITE, actor)
        if denied is not None:
            return denied

        outcome = self._engine.validate(
            entity,
            is_new=False,
            raw_payload=extract_payload(entity, body),
            actor=actor,
            record_id=record_id,
        )
        if not isinstance(outcome, Accepted):
            return self._reject(op, entity, outcome)

        row = apply_transform(entity, outcome.payload, store=self._store, security=self._security)
        try:
            affected = self._store.update(entity, record_id, row)
        except Exception:
            log.error("record.update_failed", entity=str(entity), id=record_id, exc_info=True)
            raise
        if affected == 0:
            return self._not_found(op, entity, record_id)

        stored = self._store.find_by_id(entity, record_id) or {}
        log.info("record.updated", entity=str(entity), id=record_id, fields=sorted(row))
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": record_id, entity.singular: sanitise(stored)},
        )

    def delete(
        self, entity_type: EntityType | str, record_id: str, *, actor: Actor | None
    ) -> ServiceResult:
        """Delete a record; rows still referenced by others are refused."""
        entity = coerce_entity_type(entity_type)
        op = f"delete_{entity.singular}"

        denied = self._authorize(op, entity, Action.WRITE, actor)
        if denied is not None:
            return denied

        try:
            affected = self._store.delete(entity, record_id)
        except IntegrityError:
            log.warning("record.delete_refused", entity=str(entity), id=record_id)
            return ServiceResult.failure(
                op,
                "IN_USE",
                f"{entity.singular} {record_id} is still referenced by other records",
                id=record_id,
            )
        if affected == 0:
            return self._not_found(op, entity, record_id)

        log.info("record.deleted", entity=str(entity), id=record_id)
        return ServiceResult(ok=True, op=op, data={"id": record_id, "deleted": True})

    def check(
        self,
        entity_type: EntityType | str,
        body: Any,
        *,
        actor: Actor | None,
        record_id: str | None = None,
    ) -> ServiceResult:
        """Dry-run validation: report what a create (or update) would say.

        Nothing is written.
        """
        entity = coerce_entity_type(entity_type)
        op = f"check_{entity.singular}"

        denied = self._authorize(op, entity, Action.WRITE, actor)
        if denied is not None:
            return denied

        outcome = self._engine.validate(
            entity,
            is_new=record_id is None,
            raw_payload=extract_payload(entity, body),
            actor=actor,
            record_id=record_id,
        )
        if not isinstance(outcome, Accepted):
            return self._reject(op, entity, outcome)
        return ServiceResult(ok=True, op=op, data={entity.singular: outcome.payload})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(
        self, entity_type: EntityType | str, record_id: str, *, actor: Actor | None
    ) -> ServiceResult:
        entity = coerce_entity_type(entity_type)
        op = f"get_{entity.singular}"

        denied = self._authorize(op, entity, Action.READ, actor)
        if denied is not None:
            return denied

        row = self._store.find_by_id(entity, record_id)
        if row is None:
            return self._not_found(op, entity, record_id)
        return ServiceResult(ok=True, op=op, data={entity.singular: sanitise(row)})

    def list_all(self, entity_type: EntityType | str, *, actor: Actor | None) -> ServiceResult:
        entity = coerce_entity_type(entity_type)
        op = f"list_{entity.value}"

        denied = self._authorize(op, entity, Action.READ, actor)
        if denied is not None:
            return denied

        rows = [sanitise(row) for row in self._store.list_all(entity)]
        return ServiceResult(
            ok=True,
            op=op,
            data={entity.value: rows},
            meta={"count": len(rows)},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _authorize(
        op: str, entity: EntityType, action: Action, actor: Actor | None
    ) -> ServiceResult | None:
        if is_permitted(actor, entity, action):
            return None
        roles = sorted(str(role) for role in allowed_roles(entity, action))
        log.warning(
            "access.denied",
            entity=str(entity),
            action=str(action),
            actor=actor.email if actor else None,
        )
        if actor is None:
            message = "An acting user is required (use --as EMAIL)"
        else:
            message = f"Role {actor.role} may not {action} {entity.value}"
        return ServiceResult.failure(op, "FORBIDDEN", message, allowed_roles=roles)

    @staticmethod
    def _not_found(op: str, entity: EntityType, record_id: str | None) -> ServiceResult:
        return ServiceResult.failure(
            op, "NOT_FOUND", f"No {entity.singular} found with ID: {record_id}", id=record_id
        )

    def _reject(
        self, op: str, entity: EntityType, outcome: ValidationOutcome
    ) -> ServiceResult:
        if isinstance(outcome, NotFound):
            return self._not_found(op, entity, outcome.record_id)
        assert isinstance(outcome, Rejected)
        errors = outcome.to_list()
        log.warning("validation.rejected", entity=str(entity), errors=errors)
        count = len(errors)
        return ServiceResult.failure(
            op,
            "VALIDATION_FAILED",
            f"{count} validation error{'s' if count != 1 else ''}",
            errors=errors,
        )
