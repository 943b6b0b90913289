from __future__ import annotations

import hmac
import logging
import re
import secrets
import string
from typing import Any

from portfolio_ceo.services import metrics as metrics_service
from portfolio_ceo.services.result import Err, ErrorKind, Ok, Result
from portfolio_ceo.storage.base import (
    ACCESS_GRANTED_KEY,
    HAS_VISITED_KEY,
    LOGGED_IN_KEY,
    ONBOARDING_COMPLETED_KEY,
    USER_CODE_KEY,
    USER_CODES_KEY,
    KeyValueStore,
    get_flag,
    get_json,
    set_flag,
    set_json,
)

logger = logging.getLogger("portfolio_ceo.services")

ACCOUNT_CODE_LENGTH = 8
ACCOUNT_CODE_ALPHABET = string.ascii_uppercase + string.digits
_ACCOUNT_CODE_RE = re.compile(rf"^[A-Z0-9]{{{ACCOUNT_CODE_LENGTH}}}$")

SCREEN_WELCOME = "welcome"
SCREEN_LOGIN = "login"
SCREEN_ONBOARDING = "onboarding"
SCREEN_DASHBOARD = "dashboard"


def generate_account_code() -> str:
    return "".join(secrets.choice(ACCOUNT_CODE_ALPHABET) for _ in range(ACCOUNT_CODE_LENGTH))


def is_valid_account_code(code: str) -> bool:
    return bool(_ACCOUNT_CODE_RE.match(code))


def _registered_codes(registry: KeyValueStore) -> list[str]:
    return list(get_json(registry, USER_CODES_KEY, []))


def mark_visited(store: KeyValueStore) -> None:
    set_flag(store, HAS_VISITED_KEY)


def grant_access(store: KeyValueStore, session_store: KeyValueStore, code: str, expected: str) -> Result[None]:
    if not code or not hmac.compare_digest(code.encode("utf-8"), expected.encode("utf-8")):
        return Err(ErrorKind.UNAUTHORIZED, "Incorrect access code.")
    set_flag(store, LOGGED_IN_KEY)
    set_flag(session_store, ACCESS_GRANTED_KEY)
    mark_visited(store)
    return Ok(None)


def create_account(store: KeyValueStore, registry: KeyValueStore, code: str) -> Result[str]:
    cleaned = code.strip()
    if not is_valid_account_code(cleaned):
        return Err(
            ErrorKind.VALIDATION_FAILED,
            f"Code must be exactly {ACCOUNT_CODE_LENGTH} uppercase letters or digits.",
        )
    codes = _registered_codes(registry)
    if cleaned in codes:
        return Err(ErrorKind.VALIDATION_FAILED, "This code is already in use.")
    codes.append(cleaned)
    set_json(registry, USER_CODES_KEY, codes)
    store.set(USER_CODE_KEY, cleaned)
    logger.info("Registered account code %s", cleaned)
    return Ok(cleaned)


def login_with_code(store: KeyValueStore, registry: KeyValueStore, code: str) -> Result[str]:
    cleaned = code.strip().upper()
    if not cleaned:
        return Err(ErrorKind.VALIDATION_FAILED, "Access code is required.")
    if cleaned not in _registered_codes(registry):
        return Err(ErrorKind.NOT_FOUND, "Code not found.")
    store.set(USER_CODE_KEY, cleaned)
    return Ok(cleaned)


def complete_onboarding(store: KeyValueStore, variant: str, fields: dict[str, Any]) -> Result[dict[str, Any]]:
    if not metrics_service.has_any_value(fields):
        return Err(ErrorKind.VALIDATION_FAILED, "Enter at least one metric.")
    metrics = metrics_service.save_metrics(store, variant, fields)
    set_flag(store, ONBOARDING_COMPLETED_KEY)
    return Ok(metrics)


def logout(store: KeyValueStore, session_store: KeyValueStore) -> None:
    store.delete(LOGGED_IN_KEY)
    store.delete(USER_CODE_KEY)
    session_store.delete(ACCESS_GRANTED_KEY)


def resolve_screen(store: KeyValueStore) -> str:
    if not get_flag(store, HAS_VISITED_KEY):
        return SCREEN_WELCOME
    if not get_flag(store, LOGGED_IN_KEY):
        return SCREEN_LOGIN
    if not get_flag(store, ONBOARDING_COMPLETED_KEY):
        return SCREEN_ONBOARDING
    return SCREEN_DASHBOARD
