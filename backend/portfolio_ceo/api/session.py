from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from portfolio_ceo.api.errors import raise_for_err
from portfolio_ceo.core.auth import attach_session_cookie
from portfolio_ceo.core.config import settings
from portfolio_ceo.core.dependencies import get_local_store, get_metrics_variant, get_registry_store, get_session_store
from portfolio_ceo.schemas.session import (
    AccessCodeRequest,
    AccountCodeRequest,
    AccountCodeResponse,
    OnboardingRequest,
    ScreenResponse,
)
from portfolio_ceo.services import session as session_service
from portfolio_ceo.storage.base import LOGGED_IN_KEY, ONBOARDING_COMPLETED_KEY, USER_CODE_KEY, KeyValueStore, get_flag

router = APIRouter(prefix="/api/session", tags=["session"])
logger = logging.getLogger("portfolio_ceo.api")


def _screen_state(store: KeyValueStore) -> ScreenResponse:
    return ScreenResponse(
        screen=session_service.resolve_screen(store),
        user_code=store.get(USER_CODE_KEY),
        logged_in=get_flag(store, LOGGED_IN_KEY),
        onboarding_completed=get_flag(store, ONBOARDING_COMPLETED_KEY),
    )


@router.get("/screen", response_model=ScreenResponse)
def get_screen(
    request: Request,
    response: Response,
    store: KeyValueStore = Depends(get_local_store),
) -> ScreenResponse:
    state = _screen_state(store)
    attach_session_cookie(request, response)
    return state


@router.post("/visit", response_model=ScreenResponse)
def visit(
    request: Request,
    response: Response,
    store: KeyValueStore = Depends(get_local_store),
) -> ScreenResponse:
    session_service.mark_visited(store)
    attach_session_cookie(request, response)
    return _screen_state(store)


@router.post("/login", response_model=ScreenResponse)
def login(
    payload: AccessCodeRequest,
    request: Request,
    response: Response,
    store: KeyValueStore = Depends(get_local_store),
    session_store: KeyValueStore = Depends(get_session_store),
) -> ScreenResponse:
    result = session_service.grant_access(store, session_store, payload.access_code, settings.access_code)
    if not result.is_ok:
        logger.info("Rejected access code attempt")
        raise_for_err(result)
    attach_session_cookie(request, response)
    return _screen_state(store)


@router.get("/accounts/suggest", response_model=AccountCodeResponse)
def suggest_account_code() -> AccountCodeResponse:
    return AccountCodeResponse(code=session_service.generate_account_code())


@router.post("/accounts", response_model=AccountCodeResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCodeRequest,
    request: Request,
    response: Response,
    store: KeyValueStore = Depends(get_local_store),
    registry: KeyValueStore = Depends(get_registry_store),
) -> AccountCodeResponse:
    result = session_service.create_account(store, registry, payload.code)
    if not result.is_ok:
        raise_for_err(result)
    attach_session_cookie(request, response)
    return AccountCodeResponse(code=result.value)


@router.post("/login-code", response_model=ScreenResponse)
def login_with_code(
    payload: AccountCodeRequest,
    request: Request,
    response: Response,
    store: KeyValueStore = Depends(get_local_store),
    registry: KeyValueStore = Depends(get_registry_store),
) -> ScreenResponse:
    result = session_service.login_with_code(store, registry, payload.code)
    if not result.is_ok:
        raise_for_err(result)
    attach_session_cookie(request, response)
    return _screen_state(store)


@router.post("/onboarding", response_model=ScreenResponse)
def complete_onboarding(
    payload: OnboardingRequest,
    request: Request,
    response: Response,
    store: KeyValueStore = Depends(get_local_store),
    variant: str = Depends(get_metrics_variant),
) -> ScreenResponse:
    result = session_service.complete_onboarding(store, variant, payload.metrics)
    if not result.is_ok:
        raise_for_err(result)
    attach_session_cookie(request, response)
    return _screen_state(store)


@router.post("/logout", response_model=ScreenResponse)
def logout(
    store: KeyValueStore = Depends(get_local_store),
    session_store: KeyValueStore = Depends(get_session_store),
) -> ScreenResponse:
    session_service.logout(store, session_store)
    return _screen_state(store)
