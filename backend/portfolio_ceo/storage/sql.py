from __future__ import annotations

from sqlalchemy.orm import Session

from portfolio_ceo.models.kv_entry import ALLOWED_SCOPES, SCOPE_LOCAL
from portfolio_ceo.repositories import kv_entries as kv_repo


class SqlKeyValueStore:
    """Store adapter over the ``kv_entries`` table.

    One instance covers a single ``(namespace, scope)`` slice; every ``set`` and
    ``delete`` commits immediately.
    """

    def __init__(self, db: Session, namespace: str, scope: str = SCOPE_LOCAL) -> None:
        if scope not in ALLOWED_SCOPES:
            raise ValueError(f"Scope must be one of: {', '.join(ALLOWED_SCOPES)}.")
        self.db = db
        self.namespace = namespace
        self.scope = scope

    def get(self, key: str) -> str | None:
        entry = kv_repo.get_entry(self.db, self.namespace, self.scope, key)
        if entry is None:
            return None
        return entry.value

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Store values must be strings, got {type(value).__name__}.")
        kv_repo.upsert_entry(self.db, self.namespace, self.scope, key, value)

    def delete(self, key: str) -> None:
        kv_repo.delete_entry(self.db, self.namespace, self.scope, key)

    def keys(self) -> list[str]:
        return kv_repo.list_keys(self.db, self.namespace, self.scope)

    def clear(self) -> None:
        kv_repo.clear_scope(self.db, self.namespace, self.scope)
