"""
Minimal calendar text parser.

Only VEVENT blocks are looked at, and inside them only SUMMARY and DTSTART.
A block missing either a title or a date is dropped.
"""

import re
import time

DTSTART_RE = re.compile(r'[:;](\d{8})(T(\d{6})Z?)?')


def parse_ics(text):
    events = []
    current = None
    stamp = int(time.time() * 1000)

    for raw in re.split(r'\r?\n', text or ''):
        line = raw.strip()

        if line == 'BEGIN:VEVENT':
            current = {'id': f"ics-{stamp}-{len(events)}"}
        elif line == 'END:VEVENT' and current is not None:
            if current.get('title') and current.get('date'):
                events.append(current)
            current = None
        elif current is not None:
            if line.startswith('SUMMARY:'):
                current['title'] = line[8:]
            elif line.startswith('DTSTART'):
                match = DTSTART_RE.search(line)
                if match:
                    d = match.group(1)
                    current['date'] = f"{d[0:4]}-{d[4:6]}-{d[6:8]}"
                    if match.group(3):
                        t = match.group(3)
                        current['time'] = f"{t[0:2]}:{t[2:4]}"

    return events
