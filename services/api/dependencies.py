# services/api/dependencies.py
"""
DI helpers shared by main.py and routers/*.

The store is built once, on first use, so a bad credential setup surfaces
on the first request instead of at import time.
"""
import logging
import threading

from adapters.sheets import SheetRecordStore
from core.credentials import select_credential_provider
from settings import get_settings

logger = logging.getLogger(__name__)

_store = None
# sync dependencies run in the threadpool
_store_lock = threading.Lock()


def get_store() -> SheetRecordStore:
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                settings = get_settings()
                provider = select_credential_provider(settings)
                logger.info(f"Connecting to spreadsheet {settings.spreadsheet_id} ({provider.source})")
                _store = SheetRecordStore.connect(provider, settings.store_config())
    return _store
