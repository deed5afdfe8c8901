"""
iCalendar generation module.

Generates standards-compliant .ics files for calendar import.
"""

import uuid
from datetime import timedelta
from typing import List

from icalendar import Alarm, Calendar, Event
from pytz import timezone

from .models import PendingDeadline


class ICalendarGenerator:
    """Generates iCalendar (.ics) files from resolved deadlines."""

    def __init__(self, timezone_str: str = "Australia/Perth"):
        """Initialize calendar generator.

        Args:
            timezone_str: Timezone string (default: Australia/Perth)
        """
        self.tz = timezone(timezone_str)

    def generate_calendar(self, deadlines: List[PendingDeadline]) -> Calendar:
        """Generate a calendar with one event per dated deadline.

        Args:
            deadlines: Extracted deadlines; TBA items are skipped

        Returns:
            Calendar object ready for export
        """
        cal = Calendar()
        cal.add('prodid', '-//Unit Outline Deadlines//EN')
        cal.add('version', '2.0')
        cal.add('calscale', 'GREGORIAN')
        cal.add('method', 'PUBLISH')

        for deadline in deadlines:
            if deadline.is_tba or deadline.resolved_date is None:
                continue
            cal.add_component(self._create_deadline_event(deadline))

        return cal

    def _create_deadline_event(self, deadline: PendingDeadline) -> Event:
        """Create the event for one deadline.

        A midnight resolved_date means no time is known, so the event spans
        the whole day; otherwise it is a one hour event at the due time.
        """
        due = deadline.resolved_date
        label = f"{deadline.unit} — {deadline.title}"
        has_time = due.hour != 0 or due.minute != 0

        event = Event()
        event.add('uid', f"{uuid.uuid4()}@outline-deadlines")
        event.add('summary', label)
        if has_time:
            start = self.tz.localize(due)
            event.add('dtstart', start)
            event.add('dtend', start + timedelta(hours=1))
            event.add('transp', 'OPAQUE')
        else:
            event.add('dtstart', due.date())
            event.add('dtend', due.date() + timedelta(days=1))
            event.add('transp', 'TRANSPARENT')
        event.add('status', 'CONFIRMED')

        desc_parts = []
        if deadline.week_label:
            desc_parts.append(deadline.week_label)
        desc_parts.append(label)
        if deadline.weight is not None:
            desc_parts.append(f"Weight: {deadline.weight:g}%")
        event.add('description', "\n".join(desc_parts))

        event.add_component(self._create_alarm(f"{label} due in 3 days", timedelta(days=3)))
        event.add_component(self._create_alarm(f"{label} due tomorrow", timedelta(days=1)))
        if has_time:
            event.add_component(self._create_alarm(f"{label} due in 1 hour", timedelta(hours=1)))

        return event

    def _create_alarm(self, description: str, before: timedelta) -> Alarm:
        """Create a display reminder firing `before` the event starts."""
        alarm = Alarm()
        alarm.add('action', 'DISPLAY')
        alarm.add('description', description)
        alarm.add('trigger', -before)
        return alarm

    def export_to_file(self, calendar: Calendar, filepath: str):
        """Export calendar to .ics file.

        Args:
            calendar: Calendar object
            filepath: Path to output file
        """
        with open(filepath, 'wb') as f:
            f.write(calendar.to_ical())
