from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import APIRouter, Body, Depends, status

from portfolio_ceo.api.errors import raise_for_err
from portfolio_ceo.core.dependencies import get_bundle_loader, get_local_store
from portfolio_ceo.schemas.action import ActionKind, ActionListsResponse
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.services.action_lists import ActionListManager
from portfolio_ceo.storage.base import KeyValueStore

router = APIRouter(prefix="/api/actions", tags=["actions"])
logger = logging.getLogger("portfolio_ceo.api")


def get_manager(
    store: KeyValueStore = Depends(get_local_store),
    load_bundle: Callable[[], AnalysisBundle] = Depends(get_bundle_loader),
) -> ActionListManager:
    return ActionListManager(store, load_bundle)


@router.get("", response_model=ActionListsResponse)
def list_actions(manager: ActionListManager = Depends(get_manager)) -> ActionListsResponse:
    critical_actions, quick_actions = manager.load()
    return ActionListsResponse(critical_actions=critical_actions, quick_actions=quick_actions)


@router.post("/{kind}", response_model=dict[str, Any], status_code=status.HTTP_201_CREATED)
def add_action(
    kind: ActionKind,
    payload: dict[str, Any] = Body(...),
    manager: ActionListManager = Depends(get_manager),
) -> dict[str, Any]:
    result = manager.add(kind, payload)
    if not result.is_ok:
        raise_for_err(result)
    return result.value.model_dump()


@router.patch("/{kind}/{action_id}", response_model=dict[str, Any])
def update_action(
    kind: ActionKind,
    action_id: str,
    payload: dict[str, Any] = Body(...),
    manager: ActionListManager = Depends(get_manager),
) -> dict[str, Any]:
    result = manager.update(kind, action_id, payload)
    if not result.is_ok:
        raise_for_err(result)
    return result.value.model_dump()


@router.delete("/{kind}/{action_id}", response_model=ActionListsResponse)
def delete_action(
    kind: ActionKind,
    action_id: str,
    manager: ActionListManager = Depends(get_manager),
) -> ActionListsResponse:
    result = manager.remove(kind, action_id)
    if not result.is_ok:
        raise_for_err(result)
    critical_actions, quick_actions = manager.load()
    return ActionListsResponse(critical_actions=critical_actions, quick_actions=quick_actions)
