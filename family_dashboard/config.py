"""
Family Dashboard configuration.

Defaults for the shared Settings document plus the server/client knobs that
can be overridden from the environment.
"""

import copy
import os

# ============================================
# DEFAULT SETTINGS DOCUMENT
# ============================================
DEFAULT_NEWS_FEED_URL = "https://feeds.bbci.co.uk/news/rss.xml"

DEFAULT_SETTINGS = {
    'zipCode': '10001',
    'timezone': 'America/New_York',
    'theme': 'purple',
    'familyName': '',
    'timeFormat': '12',
    'showNews': True,
    'newsFeedUrl': DEFAULT_NEWS_FEED_URL,
    'musicEnabled': False,
    'musicServer': '',
    'musicUsername': '',
    'musicPassword': '',
    'musicServerType': 'subsonic',
    'nextcloudEnabled': False,
    'nextcloudCalendarUrl': '',
}


def default_settings():
    return copy.deepcopy(DEFAULT_SETTINGS)


def default_document():
    """A fresh Document with empty collections and default settings."""
    return {
        'events': [],
        'groceries': [],
        'settings': default_settings(),
    }

# ============================================
# SERVER CONFIGURATION
# ============================================
DATA_FILE = os.environ.get('DASHBOARD_DATA_FILE', os.path.join('data', 'data.json'))
SERVER_HOST = os.environ.get('DASHBOARD_HOST', '0.0.0.0')
SERVER_PORT = int(os.environ.get('DASHBOARD_PORT', '3001'))

# ============================================
# CLIENT CONFIGURATION
# ============================================
API_URL = os.environ.get('DASHBOARD_API_URL', 'http://localhost:3001/api')
HTTP_TIMEOUT = 10

DEFAULT_PROXIES = [
    'https://corsproxy.io/?',
    'https://api.allorigins.win/raw?url=',
    'https://cors-anywhere.herokuapp.com/',
]


def load_proxies():
    """Proxy prefixes from DASHBOARD_PROXIES, an empty entry means direct fetch."""
    raw = os.environ.get('DASHBOARD_PROXIES')
    if raw is None:
        return list(DEFAULT_PROXIES)
    return [p.strip() for p in raw.split(',')]

# ============================================
# TIMING (seconds)
# ============================================
POLL_INTERVAL = 3.0
STALENESS_WINDOW = 2.0
DEBOUNCE_DELAY = 0.5
CALENDAR_REFRESH_INTERVAL = 900.0
NEWS_REFRESH_INTERVAL = 300.0
WEATHER_REFRESH_INTERVAL = 600.0
TIMER_TICK = 1.0
ALARM_REPEAT_INTERVAL = 2.5
