"""
Fetch a URL through an ordered list of CORS proxies.

Each proxy is tried in turn and the first usable response wins. An empty
proxy prefix fetches the URL directly.
"""

import logging
from urllib.parse import quote

import requests

from . import config

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """One proxy attempt produced nothing usable."""


def proxied_url(proxy, url):
    if not proxy:
        return url
    return proxy + quote(url, safe='')


def fetch_via_proxies(url, proxies=None, parse=None, session=None, timeout=config.HTTP_TIMEOUT):
    """
    Fetch ``url`` through ``proxies`` and return the parsed body.

    ``parse`` turns the response text into the result and raises FetchError
    (or ValueError) when the body is unusable, which moves on to the next
    proxy. Returns None once every proxy has failed.
    """
    if proxies is None:
        proxies = config.load_proxies()
    http = session or requests
    last_error = None

    for proxy in proxies:
        try:
            resp = http.get(proxied_url(proxy, url), timeout=timeout)
            if not resp.ok:
                raise FetchError(f"HTTP {resp.status_code}")
            text = resp.text
            if not text or not text.strip():
                raise FetchError("Empty response")
            return parse(text) if parse else text
        except (requests.RequestException, FetchError, ValueError) as e:
            last_error = e
            logger.warning("Proxy %s failed: %s", proxy or '(direct)', e)

    logger.error("All proxies failed for %s: %s", url, last_error)
    return None
