"""
Schedule view model tests.
"""

from datetime import date

from family_dashboard.schedule import (
    CalendarView, events_for_date, format_event_time, month_days, month_grid,
    schedule_title, shift_month, sort_events, todays_agenda,
)

EVENTS = [
    {'id': 1, 'title': 'Dinner', 'date': '2025-06-15', 'time': '18:30'},
    {'id': 2, 'title': 'Birthday', 'date': '2025-06-15'},
    {'id': 3, 'title': 'Soccer', 'date': '2025-06-15', 'time': '09:00'},
    {'id': 4, 'title': 'Dentist', 'date': '2025-06-16', 'time': '14:00'},
    {'id': 5, 'title': 'Garbage', 'date': '2025-06-15', 'time': ''},
]


def test_untimed_events_sort_first_then_by_time():
    ordered = sort_events(EVENTS)
    times = [e.get('time') or '' for e in ordered]
    assert times[:2] == ['', '']
    assert times[2:] == sorted(times[2:])


def test_sort_does_not_mutate_input():
    events = list(EVENTS)
    sort_events(events)
    assert events == EVENTS


def test_events_for_date_filters_and_sorts():
    titles = [e['title'] for e in events_for_date(EVENTS, date(2025, 6, 15))]
    assert titles == ['Birthday', 'Garbage', 'Soccer', 'Dinner']


def test_events_for_date_accepts_string_and_none():
    assert [e['id'] for e in events_for_date(EVENTS, '2025-06-16')] == [4]
    assert events_for_date(EVENTS, None) == []


def test_todays_agenda():
    assert [e['id'] for e in todays_agenda(EVENTS, date(2025, 6, 16))] == [4]


def test_month_days_pads_to_sunday():
    # June 1st 2025 is a Sunday, March 1st 2025 a Saturday
    assert month_days(2025, 6)[0] == date(2025, 6, 1)
    march = month_days(2025, 3)
    assert march[:6] == [None] * 6
    assert march[6] == date(2025, 3, 1)
    assert march[-1] == date(2025, 3, 31)


def test_month_grid_caps_markers_at_three():
    cells = month_grid(EVENTS, date(2025, 6, 1), today=date(2025, 6, 16), viewing=date(2025, 6, 15))
    by_day = {c.day: c for c in cells if c.day}

    assert by_day[date(2025, 6, 15)].has_events
    assert by_day[date(2025, 6, 15)].markers == 3
    assert by_day[date(2025, 6, 16)].markers == 1
    assert not by_day[date(2025, 6, 17)].has_events


def test_today_and_selected_highlighted_distinctly():
    cells = month_grid(EVENTS, date(2025, 6, 1), today=date(2025, 6, 16), viewing=date(2025, 6, 15))
    by_day = {c.day: c for c in cells if c.day}
    assert by_day[date(2025, 6, 16)].is_today and not by_day[date(2025, 6, 16)].is_selected
    assert by_day[date(2025, 6, 15)].is_selected and not by_day[date(2025, 6, 15)].is_today

    same = month_grid(EVENTS, date(2025, 6, 1), today=date(2025, 6, 16), viewing=date(2025, 6, 16))
    today_cell = [c for c in same if c.day == date(2025, 6, 16)][0]
    assert today_cell.is_today and not today_cell.is_selected


def test_shift_month_crosses_years():
    assert shift_month(date(2025, 12, 1), 1) == date(2026, 1, 1)
    assert shift_month(date(2025, 1, 1), -1) == date(2024, 12, 1)


def test_format_event_time():
    assert format_event_time('') == 'All day'
    assert format_event_time(None) == 'All day'
    assert format_event_time('00:05') == '12:05 AM'
    assert format_event_time('14:00') == '2:00 PM'
    assert format_event_time('14:00', '24') == '14:00'


def test_schedule_title():
    assert schedule_title(date(2025, 6, 16), date(2025, 6, 16)) == "Today's Schedule"
    assert schedule_title(date(2025, 6, 15), date(2025, 6, 16)) == "Sunday's Schedule"


def test_calendar_view_navigation():
    view = CalendarView(today=date(2025, 6, 16))
    assert [e['id'] for e in view.agenda(EVENTS, date(2025, 6, 16))] == [4]

    view.select_date(date(2025, 6, 15))
    assert view.title(date(2025, 6, 16)) == "Sunday's Schedule"
    assert len(view.agenda(EVENTS, date(2025, 6, 16))) == 4

    view.select_date(None)
    assert view.viewing == date(2025, 6, 15)

    view.change_month(1)
    assert view.month == date(2025, 7, 1)
    assert all(c.day is None or c.day.month == 7 for c in view.grid(EVENTS, date(2025, 6, 16)))
