"""
Random-song lookup against a Subsonic or Ampache server.

Returns {url, title, artist} for something playable, or None.
"""

import logging

import requests

from . import config

logger = logging.getLogger(__name__)

SUBSONIC_API_VERSION = '1.16.1'
CLIENT_NAME = 'FamilyDashboard'


class MusicClient:
    def __init__(self, session=None, timeout=config.HTTP_TIMEOUT):
        self.session = session or requests.Session()
        self.timeout = timeout

    def random_song(self, settings):
        server = (settings.get('musicServer') or '').rstrip('/')
        username = settings.get('musicUsername') or ''
        password = settings.get('musicPassword') or ''
        if not server or not username or not password:
            logger.error("Music server credentials not configured")
            return None

        try:
            if settings.get('musicServerType') == 'ampache':
                return self._ampache_song(server, username, password)
            return self._subsonic_song(server, username, password)
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.error("Error fetching random song: %s", e)
            return None

    def _subsonic_song(self, server, username, password):
        auth = {'u': username, 'p': password, 'v': SUBSONIC_API_VERSION, 'c': CLIENT_NAME}
        resp = self.session.get(f"{server}/rest/getRandomSongs", timeout=self.timeout,
                                params=dict(auth, f='json', size=1))
        resp.raise_for_status()
        body = resp.json().get('subsonic-response') or {}

        if body.get('status') == 'failed':
            logger.error("Subsonic error: %s", (body.get('error') or {}).get('message', 'Unknown error'))
            return None
        songs = (body.get('randomSongs') or {}).get('song') or []
        if body.get('status') != 'ok' or not songs:
            return None

        song = songs[0]
        stream = requests.Request('GET', f"{server}/rest/stream", params=dict(auth, id=song['id'])).prepare().url

        # some servers answer a bad stream request with an XML error document
        try:
            head = self.session.head(stream, timeout=self.timeout)
            if 'xml' in head.headers.get('content-type', '').lower():
                logger.error("Stream returned XML instead of audio")
                return None
        except requests.RequestException as e:
            logger.warning("Could not verify stream content-type: %s", e)

        return {
            'url': stream,
            'title': song.get('title') or 'Unknown',
            'artist': song.get('artist') or 'Unknown Artist',
        }

    def _ampache_song(self, server, username, password):
        resp = self.session.get(f"{server}/rest.php", timeout=self.timeout, params={
            'action': 'random_songs', 'format': 'json', 'user': username, 'pass': password,
        })
        resp.raise_for_status()
        data = resp.json()
        if not data:
            return None

        song = data[0]
        stream = requests.Request('GET', f"{server}/server/stream.php", params={
            'action': 'stream', 'object_type': 'song', 'id': song['id'], 'auth': password,
        }).prepare().url
        return {
            'url': stream,
            'title': song.get('title') or song.get('name') or 'Unknown',
            'artist': song.get('artist') or 'Unknown Artist',
        }
