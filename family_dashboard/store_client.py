"""
Store Client - typed HTTP access to the backend's four endpoints.

No retries: failures are logged and reported as None / False.
"""

import logging

import requests

from . import config

logger = logging.getLogger(__name__)


class StoreClient:
    def __init__(self, api_url=None, timeout=config.HTTP_TIMEOUT, session=None):
        self.api_url = (api_url or config.API_URL).rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_document(self):
        """GET /data -> the full Document, or None on failure."""
        try:
            resp = self.session.get(f"{self.api_url}/data", timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching data: %s", e)
            return None
        if not isinstance(data, dict):
            logger.error("Unexpected document payload: %r", type(data).__name__)
            return None
        return data

    def _post(self, name, body):
        try:
            resp = self.session.post(f"{self.api_url}/{name}", json=body, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error("Error saving %s: %s", name, e)
            return False
        return True

    def push_events(self, events):
        return self._post('events', list(events or []))

    def push_groceries(self, groceries):
        return self._post('groceries', list(groceries or []))

    def push_settings(self, settings):
        return self._post('settings', dict(settings))
