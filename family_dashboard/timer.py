"""
Kitchen timer: a countdown with an alarm that repeats until dismissed.

Idle -> Running -> Complete -> (dismiss) -> Idle(0, 0). Stopping a running
timer keeps the remaining time; reset always goes back to Idle(0, 0).
"""

from dataclasses import dataclass
import logging
import sys

from . import config

logger = logging.getLogger(__name__)

MAX_MINUTES = 99
SECONDS_STEP = 15


def terminal_bell():
    """Default alarm signal: ring the terminal bell."""
    sys.stdout.write('\a')
    sys.stdout.flush()


@dataclass
class TimerState:
    minutes: int = 0
    seconds: int = 0
    running: bool = False
    complete: bool = False
    alarm_enabled: bool = True

    @property
    def phase(self):
        if self.running:
            return 'running'
        if self.complete:
            return 'complete'
        return 'idle'

    @property
    def display(self):
        return f"{self.minutes:02d}:{self.seconds:02d}"


class TimerEngine:
    def __init__(self, loop, on_alarm=None,
                 tick=config.TIMER_TICK, alarm_interval=config.ALARM_REPEAT_INTERVAL):
        self.loop = loop
        self.on_alarm = on_alarm or terminal_bell
        self.tick = tick
        self.alarm_interval = alarm_interval
        self.state = TimerState()
        self._tick_handle = None
        self._alarm_handle = None

    @property
    def alarm_active(self):
        return self._alarm_handle is not None

    def adjust(self, field, direction):
        """
        Step minutes by 1 (clamped 0..99) or seconds by 15 (wrapping).

        Allowed whenever the timer is not running; adjusting a completed
        timer returns it to Idle.
        """
        if self.state.running:
            return
        step = 1 if direction == 'up' else -1
        if field == 'minutes':
            self.state.minutes = max(0, min(MAX_MINUTES, self.state.minutes + step))
        else:
            value = self.state.seconds + step * SECONDS_STEP
            if value >= 60:
                value = 0
            elif value < 0:
                value = 45
            self.state.seconds = value
        self.state.complete = False

    def set_alarm_enabled(self, enabled):
        # only read on the next completion, a ringing alarm keeps ringing
        self.state.alarm_enabled = enabled

    def toggle_alarm(self):
        self.set_alarm_enabled(not self.state.alarm_enabled)

    def start(self):
        if self.state.running or (self.state.minutes == 0 and self.state.seconds == 0):
            return
        self.state.running = True
        self.state.complete = False
        self._tick_handle = self.loop.call_every(self.tick, self._countdown)

    def _countdown(self):
        if self.state.seconds > 0:
            self.state.seconds -= 1
        elif self.state.minutes > 0:
            self.state.minutes -= 1
            self.state.seconds = 59
        else:
            self._cancel_tick()
            self.state.running = False
            self.state.complete = True
            logger.info("Timer complete")
            if self.state.alarm_enabled:
                self._start_alarm()

    def _start_alarm(self):
        self._cancel_alarm()
        self.on_alarm()
        self._alarm_handle = self.loop.call_every(self.alarm_interval, self.on_alarm)

    def _cancel_tick(self):
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _cancel_alarm(self):
        if self._alarm_handle is not None:
            self._alarm_handle.cancel()
            self._alarm_handle = None

    def stop(self):
        self._cancel_tick()
        self.state.running = False

    def reset(self):
        self.stop()
        self._cancel_alarm()
        self.state = TimerState()

    def dismiss(self):
        self._cancel_alarm()
        self.state.complete = False
        self.state.minutes = 0
        self.state.seconds = 0

    def close(self):
        """Leaving the timer view discards the countdown."""
        self.reset()
