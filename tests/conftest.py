import copy
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from family_dashboard.app_state import AppState
from family_dashboard.config import default_document
from family_dashboard.scheduling import BaseLoop
from family_dashboard.sync_engine import SyncEngine


class ManualLoop(BaseLoop):
    """Deterministic loop: time only moves on advance(), background work runs inline."""

    def __init__(self):
        super().__init__()
        self.now = 0.0

    def clock(self):
        return self.now

    def submit(self, func, on_done, *args):
        on_done(func(*args))

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            if not self._queue or self._queue[0][0] > target:
                break
            self.now = max(self.now, self._queue[0][0])
            handle = self._pop_due(self.now)
            if handle is not None:
                self._run_handle(handle)
        self.now = target


class FakeStoreClient:
    """In-memory backend that records every push."""

    def __init__(self, document=None):
        self.document = document or default_document()
        self.pushes = []
        self.fail_fetch = False
        self.fetches = 0

    def fetch_document(self):
        self.fetches += 1
        if self.fail_fetch:
            return None
        return copy.deepcopy(self.document)

    def _push(self, key, value):
        self.pushes.append((key, copy.deepcopy(value)))
        self.document[key] = copy.deepcopy(value)
        return True

    def push_events(self, events):
        return self._push('events', events)

    def push_groceries(self, groceries):
        return self._push('groceries', groceries)

    def push_settings(self, settings):
        return self._push('settings', settings)

    def pushes_of(self, key):
        return [value for k, value in self.pushes if k == key]


@pytest.fixture
def loop():
    return ManualLoop()


@pytest.fixture
def store():
    return FakeStoreClient()


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def sync(state, store, loop):
    engine = SyncEngine(state, store, loop)
    engine.load_initial()
    return engine
