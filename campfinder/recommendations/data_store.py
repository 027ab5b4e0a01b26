from __future__ import annotations

import logging

from ..store.base import CampStore
from ..store.config import DEFAULT_STORE_CONFIG, StoreConfig
from ..store.memory import InMemoryCampStore

logger = logging.getLogger(__name__)

_store: CampStore | None = None


def _load(config: StoreConfig) -> CampStore:
    if config.backend == "supabase":
        from ..store.supabase_store import SupabaseCampStore

        logger.info("Using Supabase camp store at %s", config.supabase_url)
        return SupabaseCampStore.from_config(config)

    if config.camps_csv_path.exists():
        logger.info("Using in-memory camp store seeded from %s", config.camps_csv_path)
        return InMemoryCampStore.from_csv(config.camps_csv_path)

    logger.warning("No camp catalog at %s, starting with an empty store", config.camps_csv_path)
    return InMemoryCampStore()


def get_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> CampStore:
    """Return the configured camp store, building it on first call."""
    global _store
    if _store is None:
        _store = _load(config)
    return _store


def set_store(store: CampStore | None) -> None:
    """Replace the process-wide store (``None`` resets to lazy loading)."""
    global _store
    _store = store
