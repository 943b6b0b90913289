"""Critical / quick action collections backed by the key-value store.

Each collection lives under its own key as a JSON array and is rewritten in
full after every mutation. When a key is absent the collection is seeded once
from the analysis bundle; from then on the stored copy wins. The bundle may be
given as a zero-argument loader, which is only called when seeding is needed.

Ids come from one per-kind sequence (``critical-0``, ``critical-1``, ...) kept
under ``portfolio_ceo_action_sequence``, whether the record was seeded or added
by the user.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Union

from pydantic import BaseModel, ValidationError

from portfolio_ceo.schemas.action import (
    ActionKind,
    CriticalAction,
    CriticalActionCreate,
    CriticalActionUpdate,
    QuickAction,
    QuickActionCreate,
    QuickActionUpdate,
)
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.services.result import Err, ErrorKind, Ok, Result
from portfolio_ceo.storage.base import (
    ACTION_SEQUENCE_KEY,
    CRITICAL_ACTIONS_KEY,
    QUICK_ACTIONS_KEY,
    KeyValueStore,
    get_json,
    set_json,
)

logger = logging.getLogger("portfolio_ceo.services")

ACTION_KINDS: tuple[str, ...] = ("critical", "quick")
COLLECTION_KEYS = {"critical": CRITICAL_ACTIONS_KEY, "quick": QUICK_ACTIONS_KEY}

_RECORD_MODELS: dict[str, type[BaseModel]] = {"critical": CriticalAction, "quick": QuickAction}
_CREATE_MODELS: dict[str, type[BaseModel]] = {"critical": CriticalActionCreate, "quick": QuickActionCreate}
_UPDATE_MODELS: dict[str, type[BaseModel]] = {"critical": CriticalActionUpdate, "quick": QuickActionUpdate}

_ID_SUFFIX_RE = re.compile(r"-(\d+)$")

BundleSource = Union[AnalysisBundle, Callable[[], AnalysisBundle], None]


def _check_kind(kind: str) -> None:
    if kind not in COLLECTION_KEYS:
        raise ValueError(f"Action kind must be one of: {', '.join(ACTION_KINDS)}.")


def _as_dict(fields: dict[str, Any] | BaseModel, exclude_unset: bool = False) -> dict[str, Any]:
    if isinstance(fields, BaseModel):
        return fields.model_dump(exclude_unset=exclude_unset)
    return dict(fields)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{location}: {first.get('msg', 'invalid value')}"
    return first.get("msg", "invalid value")


def _next_free_suffix(records: list[BaseModel]) -> int:
    highest = -1
    for record in records:
        match = _ID_SUFFIX_RE.search(record.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


class ActionListManager:
    def __init__(self, store: KeyValueStore, bundle: BundleSource = None) -> None:
        self.store = store
        self._bundle_source = bundle

    @property
    def bundle(self) -> AnalysisBundle | None:
        if callable(self._bundle_source):
            self._bundle_source = self._bundle_source()
        return self._bundle_source

    def load(self) -> tuple[list[CriticalAction], list[QuickAction]]:
        return self.list_actions("critical"), self.list_actions("quick")

    def list_actions(self, kind: ActionKind) -> list[Any]:
        _check_kind(kind)
        raw = get_json(self.store, COLLECTION_KEYS[kind])
        if raw is None:
            return self._seed(kind)
        model = _RECORD_MODELS[kind]
        return [model.model_validate(item) for item in raw]

    def add(self, kind: ActionKind, fields: dict[str, Any] | BaseModel) -> Result[Any]:
        _check_kind(kind)
        try:
            payload = _CREATE_MODELS[kind].model_validate(_as_dict(fields))
        except ValidationError as exc:
            return Err(ErrorKind.VALIDATION_FAILED, _validation_message(exc))
        if not payload.action.strip():
            return Err(ErrorKind.VALIDATION_FAILED, "action: text is required")

        records = self.list_actions(kind)
        record = _RECORD_MODELS[kind](id=self._next_id(kind, records), **payload.model_dump())
        records.append(record)
        self._save(kind, records)
        logger.info("Added %s action %s", kind, record.id)
        return Ok(record)

    def update(self, kind: ActionKind, action_id: str, fields: dict[str, Any] | BaseModel) -> Result[Any]:
        _check_kind(kind)
        try:
            partial = _UPDATE_MODELS[kind].model_validate(_as_dict(fields, exclude_unset=True))
        except ValidationError as exc:
            return Err(ErrorKind.VALIDATION_FAILED, _validation_message(exc))
        changes = {key: value for key, value in partial.model_dump(exclude_unset=True).items() if value is not None}
        if "action" in changes and not changes["action"].strip():
            return Err(ErrorKind.VALIDATION_FAILED, "action: text is required")

        records = self.list_actions(kind)
        for index, record in enumerate(records):
            if record.id == action_id:
                merged = record.model_copy(update=changes)
                records[index] = merged
                self._save(kind, records)
                return Ok(merged)
        return Err(ErrorKind.NOT_FOUND, f"{kind.capitalize()} action {action_id} not found")

    def remove(self, kind: ActionKind, action_id: str) -> Result[None]:
        _check_kind(kind)
        records = self.list_actions(kind)
        remaining = [record for record in records if record.id != action_id]
        if len(remaining) == len(records):
            return Err(ErrorKind.NOT_FOUND, f"{kind.capitalize()} action {action_id} not found")
        self._save(kind, remaining)
        logger.info("Removed %s action %s", kind, action_id)
        return Ok(None)

    def reseed(self, bundle: AnalysisBundle | None) -> tuple[list[CriticalAction], list[QuickAction]]:
        """Drop both stored collections and seed again from ``bundle``."""
        for key in COLLECTION_KEYS.values():
            self.store.delete(key)
        self.store.delete(ACTION_SEQUENCE_KEY)
        self._bundle_source = bundle
        return self.load()

    def _seed(self, kind: str) -> list[Any]:
        if self.bundle is None:
            return []
        if kind == "critical":
            records: list[Any] = [
                CriticalAction(id=f"critical-{index}", **item.model_dump())
                for index, item in enumerate(self.bundle.critical_actions)
            ]
        else:
            records = [QuickAction(id=f"quick-{index}", action=step) for index, step in enumerate(self.bundle.next_30_days)]
        self._save(kind, records)
        sequence = get_json(self.store, ACTION_SEQUENCE_KEY, {})
        sequence[kind] = len(records)
        set_json(self.store, ACTION_SEQUENCE_KEY, sequence)
        logger.info("Seeded %d %s actions from analysis bundle", len(records), kind)
        return records

    def _next_id(self, kind: str, records: list[Any]) -> str:
        sequence = get_json(self.store, ACTION_SEQUENCE_KEY, {})
        value = max(int(sequence.get(kind, 0)), _next_free_suffix(records))
        sequence[kind] = value + 1
        set_json(self.store, ACTION_SEQUENCE_KEY, sequence)
        return f"{kind}-{value}"

    def _save(self, kind: str, records: list[Any]) -> None:
        set_json(self.store, COLLECTION_KEYS[kind], [record.model_dump() for record in records])
