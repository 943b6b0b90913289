from portfolio_ceo.models.kv_entry import KVEntry

__all__ = [
    "KVEntry",
]
