"""
Nextcloud mode switch.

While Nextcloud mode is on, the dashboard shows a read-only calendar feed
instead of the local event list. The local events are parked in a backup
buffer on the way in and put back (and re-saved) on the way out. Remote
events are never written to the Document.
"""

import logging

from . import config
from .ical import parse_ics
from .proxies import fetch_via_proxies

logger = logging.getLogger(__name__)


def export_url(calendar_url):
    url = calendar_url.strip()
    return url if '?export' in url else f"{url}?export"


class NextcloudMode:
    def __init__(self, state, sync, loop, proxies=None, session=None,
                 refresh_interval=config.CALENDAR_REFRESH_INTERVAL):
        self.state = state
        self.sync = sync
        self.loop = loop
        self.proxies = proxies
        self.session = session
        self.refresh_interval = refresh_interval

        self.backup = []
        self.url_backup = ''
        self._refresh_handle = None
        self._active_url = None

        state.subscribe(self._on_state_changed)

    @property
    def remote(self):
        return self.state.nextcloud_enabled

    # ============================================
    # MODE TRANSITIONS
    # ============================================
    def _on_state_changed(self, collection, previous):
        if collection != 'settings' or not self.state.ready:
            return
        was_enabled = bool(previous.get('nextcloudEnabled'))
        if was_enabled != self.remote:
            if self.remote:
                self.enable()
            else:
                self.disable()
        self.refresh_if_needed()

    def sync_mode(self):
        """Apply the mode the loaded settings ask for (called once the state is ready)."""
        if self.remote:
            self.enable()
        self.refresh_if_needed()

    def enable(self):
        """Local -> Remote: park the local events and clear the live list."""
        if self.state.events and not self.backup:
            self.backup = list(self.state.events)
            self.state.events = []
            logger.info("Local events backed up: %d", len(self.backup))
        url = self.state.settings.get('nextcloudCalendarUrl')
        if url and not self.url_backup:
            self.url_backup = url

    def disable(self):
        """Remote -> Local: restore the parked events and save them again."""
        if self.backup:
            restored = list(self.backup)
            self.state.events = restored
            self.sync.push_restored_events(restored)
            self.backup = []
            logger.info("Local events restored from backup: %d", len(restored))

        url = self.state.settings.get('nextcloudCalendarUrl')
        url_backup, self.url_backup = self.url_backup, ''
        if url and url != url_backup:
            self.state.update_settings(nextcloudCalendarUrl='')

    # ============================================
    # REMOTE CALENDAR REFRESH
    # ============================================
    def refresh_if_needed(self):
        url = (self.state.settings.get('nextcloudCalendarUrl') or '').strip()
        if not self.remote or not url:
            self.stop()
            self.state.remote_events = []
            return
        if url == self._active_url and self._refresh_handle is not None:
            return
        self.stop()
        self._active_url = url
        self.refresh()
        self._refresh_handle = self.loop.call_every(self.refresh_interval, self.refresh)

    def refresh(self):
        url = self._active_url
        if not url:
            return
        self.loop.submit(self.fetch_calendar, lambda events: self._fetched(url, events), url)

    def fetch_calendar(self, url):
        return fetch_via_proxies(export_url(url), self.proxies, parse=parse_ics, session=self.session)

    def _fetched(self, url, events):
        if url != self._active_url or not self.remote:
            return
        if events is None:
            # keep whatever the last good fetch produced
            return
        self.state.remote_events = events
        logger.info("Nextcloud calendar synced: %d events", len(events))

    def stop(self):
        if self._refresh_handle is not None:
            self._refresh_handle.cancel()
            self._refresh_handle = None
        self._active_url = None
