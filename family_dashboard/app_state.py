"""
Application state shared by the client components.

Holds the local copy of the Document (events, groceries, settings), the
remote Nextcloud events and the small bits of derived display state. Local
edits go through the methods below, which notify subscribers (the sync
engine, the Nextcloud switch, the feeds) with the collection name and its
previous value.
"""

import logging
import time

from .config import default_settings

logger = logging.getLogger(__name__)

COLLECTIONS = ('events', 'groceries', 'settings')


class AppState:
    def __init__(self):
        self.events = []
        self.groceries = []
        self.settings = default_settings()
        self.remote_events = []
        self.ready = False

        self.news_headline = ''
        self.weather = None
        self.current_song = None

        self._listeners = []
        self._last_id = 0

    # ============================================
    # SUBSCRIPTIONS
    # ============================================
    def subscribe(self, listener):
        """``listener(collection, previous)`` is called after every local edit."""
        self._listeners.append(listener)

    def _changed(self, collection, previous):
        for listener in list(self._listeners):
            listener(collection, previous)

    # ============================================
    # DERIVED
    # ============================================
    @property
    def nextcloud_enabled(self):
        return bool(self.settings.get('nextcloudEnabled'))

    def active_events(self):
        """Remote events while Nextcloud mode is on, the local list otherwise."""
        return self.remote_events if self.nextcloud_enabled else self.events

    def load_document(self, document):
        self.events = list(document.get('events') or [])
        self.groceries = list(document.get('groceries') or [])
        settings = document.get('settings')
        if settings:
            self.settings = dict(settings)

    def _new_id(self):
        # creation-time millis, bumped when two items land in the same millisecond
        new_id = max(int(time.time() * 1000), self._last_id + 1)
        self._last_id = new_id
        return new_id

    # ============================================
    # EVENTS
    # ============================================
    def add_event(self, title, date, time=''):
        """Add a local event. Returns the event, or None when nothing was added."""
        if not title or not date or self.nextcloud_enabled:
            return None
        event = {'title': title, 'date': date}
        if time:
            event['time'] = time
        event['id'] = self._new_id()
        previous = self.events
        self.events = previous + [event]
        self._changed('events', previous)
        return event

    def delete_event(self, event_id):
        if self.nextcloud_enabled:
            return
        previous = self.events
        self.events = [e for e in previous if e.get('id') != event_id]
        self._changed('events', previous)

    # ============================================
    # GROCERIES
    # ============================================
    def add_grocery(self, text):
        if not text or not text.strip():
            return None
        item = {'id': self._new_id(), 'text': text, 'checked': False}
        previous = self.groceries
        self.groceries = previous + [item]
        self._changed('groceries', previous)
        return item

    def toggle_grocery(self, item_id):
        previous = self.groceries
        self.groceries = [
            dict(item, checked=not item.get('checked', False)) if item.get('id') == item_id else item
            for item in previous
        ]
        self._changed('groceries', previous)

    def delete_grocery(self, item_id):
        previous = self.groceries
        self.groceries = [g for g in previous if g.get('id') != item_id]
        self._changed('groceries', previous)

    def grocery_export(self):
        """Plain-text shopping list of the unchecked items."""
        return '\n'.join(f"- {item.get('text', '')}" for item in self.groceries if not item.get('checked'))

    # ============================================
    # SETTINGS
    # ============================================
    def update_settings(self, **changes):
        previous = self.settings
        self.settings = dict(previous, **changes)
        self._changed('settings', previous)
