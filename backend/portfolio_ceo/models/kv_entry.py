from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_ceo.db.base import Base

SCOPE_LOCAL = "local"
SCOPE_SESSION = "session"
ALLOWED_SCOPES = (SCOPE_LOCAL, SCOPE_SESSION)


class KVEntry(Base):
    __tablename__ = "kv_entries"
    __table_args__ = (UniqueConstraint("namespace", "scope", "key", name="uq_kv_entries_namespace_scope_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    namespace: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    scope: Mapped[str] = mapped_column(String(16), nullable=False, default=SCOPE_LOCAL)
    key: Mapped[str] = mapped_column(String(128), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
