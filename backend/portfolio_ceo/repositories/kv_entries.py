from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from portfolio_ceo.models.kv_entry import KVEntry


def get_entry(db: Session, namespace: str, scope: str, key: str) -> KVEntry | None:
    stmt = select(KVEntry).where(
        KVEntry.namespace == namespace,
        KVEntry.scope == scope,
        KVEntry.key == key,
    )
    return db.scalar(stmt)


def list_keys(db: Session, namespace: str, scope: str) -> list[str]:
    stmt = (
        select(KVEntry.key)
        .where(KVEntry.namespace == namespace, KVEntry.scope == scope)
        .order_by(KVEntry.key.asc())
    )
    return list(db.scalars(stmt).all())


def upsert_entry(db: Session, namespace: str, scope: str, key: str, value: str) -> KVEntry:
    entry = get_entry(db, namespace, scope, key)
    if entry is None:
        entry = KVEntry(namespace=namespace, scope=scope, key=key, value=value)
    else:
        entry.value = value
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, namespace: str, scope: str, key: str) -> bool:
    result = db.execute(
        delete(KVEntry).where(
            KVEntry.namespace == namespace,
            KVEntry.scope == scope,
            KVEntry.key == key,
        )
    )
    db.commit()
    return bool(result.rowcount)


def clear_scope(db: Session, namespace: str, scope: str) -> int:
    result = db.execute(delete(KVEntry).where(KVEntry.namespace == namespace, KVEntry.scope == scope))
    db.commit()
    return int(result.rowcount or 0)
