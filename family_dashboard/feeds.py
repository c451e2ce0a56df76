"""
News headline and weather refresh loops.

Both are best-effort: a failed refresh keeps the last good value (news falls
back to a placeholder line) and the next scheduled refresh tries again.
"""

import logging
import time
import xml.etree.ElementTree as ET

import requests

from . import config
from .proxies import FetchError, fetch_via_proxies

logger = logging.getLogger(__name__)

NEWS_UNAVAILABLE = 'Unable to load news'

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_LAT = 40.7128
DEFAULT_LON = -74.0060


# ============================================
# NEWS
# ============================================
def first_headline(text):
    """Title of the first RSS item, raising FetchError when there is none."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise FetchError(f"XML parsing error: {e}")
    for item in root.iter('item'):
        title = (item.findtext('title') or '').strip()
        if title:
            return title
        break
    raise FetchError("No items found")


def cache_busted(url):
    sep = '&' if '?' in url else '?'
    return f"{url}{sep}_cb={int(time.time() * 1000)}"


class NewsTicker:
    def __init__(self, state, loop, proxies=None, session=None,
                 refresh_interval=config.NEWS_REFRESH_INTERVAL):
        self.state = state
        self.loop = loop
        self.proxies = proxies
        self.session = session
        self.refresh_interval = refresh_interval
        self._handle = None

        state.subscribe(self._on_state_changed)

    def _on_state_changed(self, collection, previous):
        if collection != 'settings' or not self.state.ready:
            return
        settings = self.state.settings
        if (previous.get('showNews') != settings.get('showNews')
                or previous.get('newsFeedUrl') != settings.get('newsFeedUrl')):
            self.start()

    def start(self):
        self.stop()
        if not self.state.settings.get('showNews'):
            self.state.news_headline = ''
            return
        self.refresh()
        self._handle = self.loop.call_every(self.refresh_interval, self.refresh)

    def stop(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def refresh(self):
        feed_url = (self.state.settings.get('newsFeedUrl') or '').strip() or config.DEFAULT_NEWS_FEED_URL
        self.loop.submit(self.fetch_headline, self._fetched, feed_url)

    def fetch_headline(self, feed_url):
        return fetch_via_proxies(cache_busted(feed_url), self.proxies, parse=first_headline,
                                 session=self.session)

    def _fetched(self, headline):
        if not self.state.settings.get('showNews'):
            return
        if headline is None:
            self.state.news_headline = NEWS_UNAVAILABLE
            return
        self.state.news_headline = headline
        logger.info("News updated")


# ============================================
# WEATHER
# ============================================
def geocode(zip_code, session=None, timeout=config.HTTP_TIMEOUT):
    """Latitude/longitude for a zip code, New York when the lookup fails."""
    http = session or requests
    if zip_code:
        try:
            resp = http.get(GEOCODING_URL, timeout=timeout, params={
                'name': zip_code, 'count': 1, 'language': 'en', 'format': 'json',
            })
            results = resp.json().get('results') or []
            if results:
                return results[0]['latitude'], results[0]['longitude']
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.error("Geocoding error: %s", e)
    return DEFAULT_LAT, DEFAULT_LON


def fetch_weather(zip_code, timezone, session=None, timeout=config.HTTP_TIMEOUT):
    """Current conditions in Fahrenheit / mph, or None on failure."""
    http = session or requests
    lat, lon = geocode(zip_code, session=session, timeout=timeout)
    try:
        resp = http.get(FORECAST_URL, timeout=timeout, params={
            'latitude': lat,
            'longitude': lon,
            'current': 'temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m',
            'temperature_unit': 'fahrenheit',
            'wind_speed_unit': 'mph',
            'timezone': timezone,
        })
        resp.raise_for_status()
        return resp.json().get('current')
    except (requests.RequestException, ValueError) as e:
        logger.error("Error fetching weather: %s", e)
        return None


def weather_label(code):
    if code in (0, 1):
        return 'Sunny'
    if code in (2, 3):
        return 'Cloudy'
    if code is not None and 51 <= code <= 67:
        return 'Rain'
    if code is not None and 71 <= code <= 77:
        return 'Snow'
    return 'Cloudy'


class WeatherService:
    def __init__(self, state, loop, session=None,
                 refresh_interval=config.WEATHER_REFRESH_INTERVAL):
        self.state = state
        self.loop = loop
        self.session = session
        self.refresh_interval = refresh_interval
        self._handle = None

        state.subscribe(self._on_state_changed)

    def _on_state_changed(self, collection, previous):
        if collection != 'settings' or not self.state.ready:
            return
        settings = self.state.settings
        if (previous.get('zipCode') != settings.get('zipCode')
                or previous.get('timezone') != settings.get('timezone')):
            self.start()

    def start(self):
        self.stop()
        self.refresh()
        self._handle = self.loop.call_every(self.refresh_interval, self.refresh)

    def stop(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def refresh(self):
        settings = self.state.settings
        self.loop.submit(fetch_weather, self._fetched,
                         settings.get('zipCode'), settings.get('timezone'), self.session)

    def _fetched(self, current):
        if current is not None:
            self.state.weather = current
