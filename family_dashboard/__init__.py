"""
Family Dashboard

- JSON-file backend (server.py, storage.py)
- Sync client: store client, sync engine, Nextcloud mode switch
- Kitchen timer with repeating alarm
- Schedule view model for the calendar card
"""

from .app_state import AppState
from .dashboard import Dashboard
from .store_client import StoreClient
from .sync_engine import SyncEngine
from .nextcloud import NextcloudMode
from .timer import TimerEngine, TimerState

__all__ = [
    'AppState',
    'Dashboard',
    'StoreClient',
    'SyncEngine',
    'NextcloudMode',
    'TimerEngine',
    'TimerState',
]
