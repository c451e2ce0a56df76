"""
Sync Engine - keeps the local events and groceries in step with the backend.

Three moving parts:

- an initial full-document load that flips the state to ready; nothing is
  written back before that,
- a poll every few seconds that replaces a local collection with the
  server's copy, unless that collection was edited locally within the
  staleness window,
- a debounced push after local edits that writes the whole collection.

This is last-writer-wins per collection. Two clients editing the same
collection inside one staleness window can still race; the last push to
land wins.
"""

import json
import logging

from . import config

logger = logging.getLogger(__name__)

SYNCED_COLLECTIONS = ('events', 'groceries')


def _serialize(value):
    return json.dumps(value or [], sort_keys=True)


class SyncEngine:
    def __init__(self, state, client, loop,
                 poll_interval=config.POLL_INTERVAL,
                 staleness_window=config.STALENESS_WINDOW,
                 debounce_delay=config.DEBOUNCE_DELAY):
        self.state = state
        self.client = client
        self.loop = loop
        self.poll_interval = poll_interval
        self.staleness_window = staleness_window
        self.debounce_delay = debounce_delay

        self.last_mutated = {c: float('-inf') for c in SYNCED_COLLECTIONS}
        self._push_handles = {}
        self._poll_handle = None
        self._on_ready = []

        state.subscribe(self._on_state_changed)

    # ============================================
    # LIFECYCLE
    # ============================================
    def load_initial(self, on_ready=None):
        """Fetch the Document once, populate the state and start polling."""
        if on_ready is not None:
            self._on_ready.append(on_ready)
        self.loop.submit(self.client.fetch_document, self._initial_loaded)

    def _initial_loaded(self, document):
        if document is not None:
            self.state.load_document(document)
            logger.info("Loaded %d events, %d groceries",
                        len(self.state.events), len(self.state.groceries))
        else:
            logger.error("Initial load failed, starting with empty state")
        self.state.ready = True
        self._poll_handle = self.loop.call_every(self.poll_interval, self.poll_tick)
        for callback in self._on_ready:
            callback()

    def stop(self):
        if self._poll_handle is not None:
            self._poll_handle.cancel()
            self._poll_handle = None
        for handle in self._push_handles.values():
            handle.cancel()
        self._push_handles.clear()

    # ============================================
    # POLLING
    # ============================================
    def poll_tick(self):
        self.loop.submit(self.client.fetch_document, self.apply_remote)

    def apply_remote(self, document):
        """Merge a fetched Document into local state, collection by collection."""
        if document is None:
            return
        now = self.loop.clock()
        for collection in SYNCED_COLLECTIONS:
            if collection == 'events' and self.state.nextcloud_enabled:
                # local events are parked in the Nextcloud backup
                continue
            if now - self.last_mutated[collection] <= self.staleness_window:
                continue
            incoming = document.get(collection) or []
            if _serialize(incoming) != _serialize(getattr(self.state, collection)):
                setattr(self.state, collection, list(incoming))
                logger.info("%s synced from server", collection.capitalize())

    # ============================================
    # PUSHING
    # ============================================
    def _on_state_changed(self, collection, previous):
        self.on_local_change(collection)

    def on_local_change(self, collection):
        """Record the edit time and (re)arm the debounced push for ``collection``."""
        if collection in self.last_mutated:
            self.last_mutated[collection] = self.loop.clock()
        handle = self._push_handles.get(collection)
        if handle is not None:
            handle.cancel()
        self._push_handles[collection] = self.loop.call_later(self.debounce_delay, self._push, collection)

    def _push(self, collection):
        self._push_handles.pop(collection, None)
        if not self.state.ready:
            return
        if collection == 'events':
            if self.state.nextcloud_enabled:
                return
            self.loop.submit(self.client.push_events, self._pushed('events'), list(self.state.events))
        elif collection == 'groceries':
            self.loop.submit(self.client.push_groceries, self._pushed('groceries'), list(self.state.groceries))
        elif collection == 'settings':
            self.loop.submit(self.client.push_settings, self._pushed('settings'), dict(self.state.settings))

    def push_restored_events(self, events):
        """Write restored local events straight away, shielded from the next poll."""
        self.last_mutated['events'] = self.loop.clock()
        handle = self._push_handles.pop('events', None)
        if handle is not None:
            handle.cancel()
        self.loop.submit(self.client.push_events, self._pushed('events'), list(events))

    def _pushed(self, collection):
        def _done(ok):
            if not ok:
                logger.error("Push of %s failed, waiting for the next local change", collection)
        return _done
