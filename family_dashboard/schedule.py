"""
Schedule view model.

Pure derivations over whichever event list is active (local or Nextcloud):
the agenda for a day, the month grid with event markers, and display helpers.
Nothing here mutates the events it is given.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional

MAX_DAY_MARKERS = 3
WEEKDAY_HEADERS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']


def _date_key(day):
    if isinstance(day, date):
        return day.isoformat()
    return day


def sort_events(events):
    """Untimed (all-day) events first, then ascending by "HH:MM"."""
    return sorted(events, key=lambda e: e.get('time') or '')


def events_for_date(events, day):
    if day is None:
        return []
    key = _date_key(day)
    return sort_events([e for e in events if e.get('date') == key])


def todays_agenda(events, today=None):
    return events_for_date(events, today or date.today())


@dataclass
class DayCell:
    day: Optional[date]
    has_events: bool = False
    markers: int = 0
    is_today: bool = False
    is_selected: bool = False


def month_days(year, month):
    """Days of a month padded with leading None so the grid starts on Sunday."""
    first_weekday, days_in_month = calendar.monthrange(year, month)
    # calendar counts Monday as 0
    padding = (first_weekday + 1) % 7
    days = [None] * padding
    days.extend(date(year, month, d) for d in range(1, days_in_month + 1))
    return days


def month_grid(events, month, today, viewing):
    """
    Build the day cells for the month containing ``month``.

    A cell is marked selected only when it is the viewing day and not today,
    so today keeps its own highlight.
    """
    counts = {}
    for event in events:
        key = event.get('date')
        if key:
            counts[key] = counts.get(key, 0) + 1

    cells = []
    for day in month_days(month.year, month.month):
        if day is None:
            cells.append(DayCell(day=None))
            continue
        n = counts.get(day.isoformat(), 0)
        is_today = day == today
        cells.append(DayCell(
            day=day,
            has_events=n > 0,
            markers=min(n, MAX_DAY_MARKERS),
            is_today=is_today,
            is_selected=day == viewing and not is_today,
        ))
    return cells


def shift_month(month, direction):
    """First day of the month ``direction`` months away."""
    index = month.year * 12 + (month.month - 1) + direction
    return date(index // 12, index % 12 + 1, 1)


def format_event_time(time_string, time_format='12'):
    if not time_string:
        return 'All day'
    hours, minutes = (int(part) for part in time_string.split(':')[:2])
    if time_format == '12':
        period = 'PM' if hours >= 12 else 'AM'
        hour12 = hours % 12 or 12
        return f"{hour12}:{minutes:02d} {period}"
    return time_string


def schedule_title(viewing, today):
    if viewing == today:
        return "Today's Schedule"
    return f"{viewing.strftime('%A')}'s Schedule"


class CalendarView:
    """Navigation state for the calendar card: displayed month and viewing day."""

    def __init__(self, today=None):
        today = today or date.today()
        self.month = today.replace(day=1)
        self.viewing = today

    def change_month(self, direction):
        self.month = shift_month(self.month, direction)

    def select_date(self, day):
        if day is not None:
            self.viewing = day

    def agenda(self, events, today):
        """Events for the viewing day, or today's agenda when viewing today."""
        if self.viewing == today:
            return todays_agenda(events, today)
        return events_for_date(events, self.viewing)

    def grid(self, events, today):
        return month_grid(events, self.month, today, self.viewing)

    def title(self, today):
        return schedule_title(self.viewing, today)
