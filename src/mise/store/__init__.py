"""Process-local kitchen store and its access helpers."""

from mise.store.repository import (
    KitchenDraft,
    KitchenStore,
    get_store,
    reset_store_state,
    store_scope,
)

__all__ = ["KitchenDraft", "KitchenStore", "get_store", "reset_store_state", "store_scope"]
