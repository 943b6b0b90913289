from __future__ import annotations

from uuid import uuid4

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from portfolio_ceo.core.config import settings
from portfolio_ceo.core.security import create_session_token, decode_session_token
from portfolio_ceo.db.session import get_db
from portfolio_ceo.storage.base import LOGGED_IN_KEY, get_flag
from portfolio_ceo.storage.sql import SqlKeyValueStore

DEFAULT_NAMESPACE = "default"


def _session_max_age() -> int:
    return settings.session_ttl_days * 24 * 60 * 60


def get_client_id_optional(request: Request) -> str | None:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    payload = decode_session_token(token, _session_max_age())
    if not payload:
        return None
    client_id = payload.get("cid")
    return str(client_id) if client_id else None


def get_client_id(request: Request) -> str:
    """Namespace of the calling client; a fresh one is minted when none is known."""
    cached = getattr(request.state, "client_id", None)
    if cached:
        return cached
    client_id = get_client_id_optional(request)
    if client_id is None:
        if settings.auth_enabled:
            client_id = uuid4().hex
            request.state.new_client = True
        else:
            client_id = DEFAULT_NAMESPACE
    request.state.client_id = client_id
    return client_id


def attach_session_cookie(request: Request, response: Response) -> None:
    if not getattr(request.state, "new_client", False):
        return
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(request.state.client_id),
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        max_age=_session_max_age(),
    )


def require_access(request: Request, db: Session = Depends(get_db)) -> str | None:
    if not settings.auth_enabled:
        return None
    client_id = get_client_id_optional(request)
    if not client_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not get_flag(SqlKeyValueStore(db, client_id), LOGGED_IN_KEY):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    request.state.client_id = client_id
    return client_id
