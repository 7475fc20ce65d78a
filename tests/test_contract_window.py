import datetime as dt
import unittest

from eventgrid.model import CalendarEvent
from eventgrid.window import (
    agenda_events_for_day,
    build_view_window,
    events_starting_on_day,
    shift_anchor,
    sort_events,
    spanning_events_for_day,
    timed_events_for_day,
    view_for_shortcut,
    view_title,
    week_start_of,
)

BASE = 1577836800000  # 2020-01-01T00:00:00Z (Wednesday)
H = 60 * 60000
DAY = 24 * H
JAN1 = dt.date(2020, 1, 1)
CFG = {"tz": "UTC"}
UTC = dt.timezone.utc


def _ev(eid, start_ms, end_ms, **kw) -> CalendarEvent:
    return CalendarEvent(id=eid, title=eid, start_ms=start_ms, end_ms=end_ms, **kw)


class TestViewWindowContract(unittest.TestCase):
    def test_day_window(self) -> None:
        w = build_view_window(JAN1, "day", CFG)
        self.assertEqual(w.dates, (JAN1,))
        self.assertEqual(w.outside, frozenset())

    def test_week_window_default_sunday(self) -> None:
        w = build_view_window(JAN1, "week", CFG)
        self.assertEqual(w.first, dt.date(2019, 12, 29))
        self.assertEqual(w.last, dt.date(2020, 1, 4))
        self.assertEqual(len(w.dates), 7)

    def test_week_window_monday_start(self) -> None:
        w = build_view_window(JAN1, "week", {"tz": "UTC", "week_start": "monday"})
        self.assertEqual(w.first, dt.date(2019, 12, 30))
        self.assertEqual(w.first.weekday(), 0)

    def test_week_start_of_is_identity_on_start_day(self) -> None:
        sunday = dt.date(2020, 1, 5)
        self.assertEqual(week_start_of(sunday, 0), sunday)
        self.assertEqual(week_start_of(sunday, 1), dt.date(2019, 12, 30))

    def test_month_window_whole_weeks_and_outside(self) -> None:
        w = build_view_window(dt.date(2020, 2, 14), "month", CFG)
        self.assertEqual(w.first, dt.date(2020, 1, 26))
        self.assertEqual(w.last, dt.date(2020, 2, 29))
        self.assertEqual(len(w.dates) % 7, 0)
        self.assertEqual(w.outside, frozenset(dt.date(2020, 1, d) for d in range(26, 32)))
        self.assertEqual(w.index_of(dt.date(2020, 2, 1)), 6)
        self.assertIsNone(w.index_of(dt.date(2020, 3, 1)))

    def test_agenda_window_length(self) -> None:
        w = build_view_window(JAN1, "agenda", {"tz": "UTC", "agenda_days": 10})
        self.assertEqual(w.first, JAN1)
        self.assertEqual(w.last, dt.date(2020, 1, 10))

    def test_unknown_view(self) -> None:
        with self.assertRaises(ValueError):
            build_view_window(JAN1, "year", CFG)


class TestDaySelectorsContract(unittest.TestCase):
    def setUp(self) -> None:
        self.timed = _ev("timed", BASE + 9 * H, BASE + 10 * H)
        self.overnight = _ev("overnight", BASE + 22 * H, BASE + DAY + 2 * H)
        self.allday = _ev("allday", BASE, BASE + DAY - 1, all_day=True)
        self.tomorrow = _ev("tomorrow", BASE + DAY + 9 * H, BASE + DAY + 10 * H)
        self.events = [self.tomorrow, self.overnight, self.allday, self.timed]

    def test_timed_excludes_all_day_and_multi_day(self) -> None:
        self.assertEqual([e.id for e in timed_events_for_day(self.events, JAN1, UTC)], ["timed"])

    def test_spanning_includes_all_day_and_multi_day(self) -> None:
        ids = {e.id for e in spanning_events_for_day(self.events, JAN1, UTC)}
        self.assertEqual(ids, {"overnight", "allday"})
        ids2 = {e.id for e in spanning_events_for_day(self.events, dt.date(2020, 1, 2), UTC)}
        self.assertEqual(ids2, {"overnight"})

    def test_starting_on_day(self) -> None:
        ids = [e.id for e in events_starting_on_day(self.events, JAN1, UTC)]
        self.assertEqual(ids, ["allday", "timed", "overnight"])

    def test_agenda_sorted_by_start(self) -> None:
        ids = [e.id for e in agenda_events_for_day(self.events, dt.date(2020, 1, 2), UTC)]
        self.assertEqual(ids, ["overnight", "tomorrow"])

    def test_sort_events_multi_day_first(self) -> None:
        ids = [e.id for e in sort_events(self.events, UTC)]
        self.assertEqual(ids, ["allday", "overnight", "timed", "tomorrow"])


class TestNavigationContract(unittest.TestCase):
    def test_shift_anchor(self) -> None:
        self.assertEqual(shift_anchor(dt.date(2020, 1, 31), "month", 1), dt.date(2020, 2, 29))
        self.assertEqual(shift_anchor(dt.date(2020, 1, 15), "month", -1), dt.date(2019, 12, 15))
        self.assertEqual(shift_anchor(JAN1, "week", 1), dt.date(2020, 1, 8))
        self.assertEqual(shift_anchor(JAN1, "day", -1), dt.date(2019, 12, 31))
        self.assertEqual(shift_anchor(JAN1, "agenda", 1, {"tz": "UTC"}), dt.date(2020, 1, 31))

    def test_view_title(self) -> None:
        self.assertEqual(view_title(JAN1, "day", CFG), "January 1, 2020")
        self.assertEqual(view_title(JAN1, "month", CFG), "January 2020")
        self.assertEqual(view_title(JAN1, "week", CFG), "Dec - Jan 2020")
        self.assertEqual(view_title(dt.date(2020, 1, 15), "week", CFG), "January 2020")

    def test_shortcuts(self) -> None:
        self.assertEqual(view_for_shortcut("m"), "month")
        self.assertEqual(view_for_shortcut("W"), "week")
        self.assertEqual(view_for_shortcut("d"), "day")
        self.assertEqual(view_for_shortcut("a"), "agenda")
        self.assertIsNone(view_for_shortcut("x"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
