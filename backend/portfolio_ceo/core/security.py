from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from portfolio_ceo.core.config import settings

_SESSION_SALT = "portfolio-ceo-session"


def _get_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.required_secret_key, salt=_SESSION_SALT)


def create_session_token(client_id: str) -> str:
    payload = {"cid": client_id}
    return _get_serializer().dumps(payload)


def decode_session_token(token: str, max_age_seconds: int) -> dict[str, str] | None:
    serializer = _get_serializer()
    try:
        return serializer.loads(token, max_age=max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None
