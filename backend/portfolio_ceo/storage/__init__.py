from portfolio_ceo.storage.base import KeyValueStore, get_flag, get_json, set_flag, set_json
from portfolio_ceo.storage.memory import InMemoryStore
from portfolio_ceo.storage.sql import SqlKeyValueStore

__all__ = [
    "InMemoryStore",
    "KeyValueStore",
    "SqlKeyValueStore",
    "get_flag",
    "get_json",
    "set_flag",
    "set_json",
]
