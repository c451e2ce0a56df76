"""
Dashboard - wires the client components around one AppState.

The dashboard owns the loop and every component that schedules work on it;
teardown() cancels all of them.
"""

from datetime import date
import logging

from .app_state import AppState
from .feeds import NewsTicker, WeatherService
from .music import MusicClient
from .nextcloud import NextcloudMode
from .schedule import CalendarView
from .scheduling import EventLoop
from .store_client import StoreClient
from .sync_engine import SyncEngine
from .timer import TimerEngine

logger = logging.getLogger(__name__)


class Dashboard:
    def __init__(self, api_url=None, loop=None, client=None, proxies=None,
                 session=None, on_alarm=None, music=None):
        self.loop = loop or EventLoop()
        self.state = AppState()
        self.client = client or StoreClient(api_url)
        self.sync = SyncEngine(self.state, self.client, self.loop)
        self.nextcloud = NextcloudMode(self.state, self.sync, self.loop, proxies=proxies, session=session)
        self.news = NewsTicker(self.state, self.loop, proxies=proxies, session=session)
        self.weather = WeatherService(self.state, self.loop, session=session)
        self.timer = TimerEngine(self.loop, on_alarm=on_alarm)
        self.music = music or MusicClient()
        self.calendar = CalendarView()
        self.playing = False

    # ============================================
    # LIFECYCLE
    # ============================================
    def start(self):
        if isinstance(self.loop, EventLoop):
            self.loop.start()
        self.sync.load_initial(on_ready=self._on_ready)

    def _on_ready(self):
        self.nextcloud.sync_mode()
        self.news.start()
        self.weather.start()

    def teardown(self):
        # state is only touched from the loop thread, so stop it before cancelling
        if isinstance(self.loop, EventLoop):
            self.loop.stop()
        self.sync.stop()
        self.nextcloud.stop()
        self.news.stop()
        self.weather.stop()
        self.timer.reset()

    # ============================================
    # LOCAL EDITS
    # ============================================
    def add_event(self, title, date, time=''):
        return self.state.add_event(title, date, time)

    def delete_event(self, event_id):
        self.state.delete_event(event_id)

    def add_grocery(self, text):
        return self.state.add_grocery(text)

    def toggle_grocery(self, item_id):
        self.state.toggle_grocery(item_id)

    def delete_grocery(self, item_id):
        self.state.delete_grocery(item_id)

    def update_settings(self, **changes):
        self.state.update_settings(**changes)

    # ============================================
    # VIEWS
    # ============================================
    def agenda(self, today=None):
        return self.calendar.agenda(self.state.active_events(), today or date.today())

    def month_grid(self, today=None):
        return self.calendar.grid(self.state.active_events(), today or date.today())

    # ============================================
    # MUSIC
    # ============================================
    def toggle_music(self):
        if self.playing:
            self.playing = False
            self.state.current_song = None
            return
        self.playing = True
        self.play_random_song()

    def play_random_song(self):
        self.loop.submit(self.music.random_song, self._song_loaded, dict(self.state.settings))

    def _song_loaded(self, song):
        if not self.playing:
            return
        if song is None:
            self.playing = False
        self.state.current_song = song
