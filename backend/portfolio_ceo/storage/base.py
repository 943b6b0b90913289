"""Key-value persistence port.

Values are stored as strings, the same way the dashboard kept them in browser
storage: JSON documents for collections and records, the literal ``"true"``
for flags. Services only talk to :class:`KeyValueStore`; adapters decide where
the strings live.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

CRITICAL_ACTIONS_KEY = "portfolio_ceo_critical_actions"
QUICK_ACTIONS_KEY = "portfolio_ceo_quick_actions"
ACTION_SEQUENCE_KEY = "portfolio_ceo_action_sequence"
LAST_ANALYSIS_KEY = "portfolio_ceo_last_analysis"
PLANS_KEY = "portfolio_ceo_plans"

USER_METRICS_KEY = "user_metrics"
INSTAGRAM_METRICS_KEY = "instagram_metrics"
FINANCIAL_METRICS_KEY = "financial_metrics"

ACCESS_GRANTED_KEY = "access_granted"
ONBOARDING_COMPLETED_KEY = "onboarding_completed"
LOGGED_IN_KEY = "portfolio_ceo_logged_in"
HAS_VISITED_KEY = "has_visited_before"
USER_CODE_KEY = "user_code"
USER_CODES_KEY = "user_codes"

FLAG_TRUE = "true"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


def get_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    raw = store.get(key)
    if raw is None:
        return default
    return json.loads(raw)


def set_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value, ensure_ascii=False))


def get_flag(store: KeyValueStore, key: str) -> bool:
    return store.get(key) == FLAG_TRUE


def set_flag(store: KeyValueStore, key: str) -> None:
    store.set(key, FLAG_TRUE)
