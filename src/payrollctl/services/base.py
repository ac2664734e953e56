"""BaseService — foundation for all payrollctl services.

Every service receives a :class:`RecordStore` at construction time and
reads and writes rows only through it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from payrollctl.infrastructure.store import RecordStore


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class RecordService(BaseService):
            def get(self, entity_type, record_id, *, actor) -> ServiceResult:
                row = self._store.find_by_id(entity_type, record_id)
                ...
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
