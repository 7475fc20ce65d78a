import datetime as dt
import random
import unittest

from eventgrid.interval import overlaps
from eventgrid.layout import positioned_events_for_day
from eventgrid.model import CalendarEvent
from eventgrid.packing import pack_columns

BASE = 1577836800000  # 2020-01-01T00:00:00Z
H = 60 * 60000
M = 60000
DAY = dt.date(2020, 1, 1)
CFG = {"tz": "UTC"}


def _ev(eid: str, start_min: int, end_min: int) -> CalendarEvent:
    return CalendarEvent(id=eid, title=eid, start_ms=BASE + start_min * M, end_ms=BASE + end_min * M)


def _items(events):
    return [(e, e.start_ms, e.end_ms) for e in events]


class TestColumnPackingContract(unittest.TestCase):
    def test_overlapping_pair_uses_two_columns(self) -> None:
        a = _ev("a", 9 * 60, 10 * 60)
        b = _ev("b", 9 * 60 + 30, 10 * 60 + 30)
        res = pack_columns(_items([b, a]))
        self.assertEqual(res.column_count, 2)
        self.assertEqual(res.column_of("a"), 0)
        self.assertEqual(res.column_of("b"), 1)

    def test_touching_events_share_column_zero(self) -> None:
        evs = [_ev("a", 9 * 60, 10 * 60), _ev("b", 10 * 60, 11 * 60), _ev("c", 11 * 60, 12 * 60)]
        res = pack_columns(_items(evs))
        self.assertEqual(res.column_count, 1)
        self.assertEqual([a.column for a in res.assignments], [0, 0, 0])

    def test_equal_start_longer_event_claims_left_column(self) -> None:
        short = _ev("short", 9 * 60, 9 * 60 + 30)
        long = _ev("long", 9 * 60, 11 * 60)
        res = pack_columns(_items([short, long]))
        self.assertEqual(res.column_of("long"), 0)
        self.assertEqual(res.column_of("short"), 1)

    def test_equal_start_and_duration_breaks_ties_by_id(self) -> None:
        x = _ev("x", 9 * 60, 10 * 60)
        y = _ev("y", 9 * 60, 10 * 60)
        self.assertEqual(pack_columns(_items([y, x])).column_of("x"), 0)
        self.assertEqual(pack_columns(_items([x, y])).column_of("x"), 0)

    def test_freed_column_is_reused(self) -> None:
        evs = [_ev("a", 9 * 60, 12 * 60), _ev("b", 9 * 60, 10 * 60), _ev("c", 10 * 60, 11 * 60)]
        res = pack_columns(_items(evs))
        self.assertEqual(res.column_of("a"), 0)
        self.assertEqual(res.column_of("b"), 1)
        self.assertEqual(res.column_of("c"), 1)
        self.assertEqual(res.column_count, 2)

    def test_zero_duration_event_gets_a_column(self) -> None:
        a = _ev("a", 9 * 60, 10 * 60)
        z = _ev("z", 9 * 60 + 30, 9 * 60 + 30)
        res = pack_columns(_items([a, z]))
        self.assertEqual(res.column_of("z"), 1)

    def test_empty_input(self) -> None:
        res = pack_columns([])
        self.assertEqual(res.assignments, ())
        self.assertEqual(res.column_count, 0)

    def test_no_same_column_overlap_and_determinism(self) -> None:
        rng = random.Random(20200101)
        for _round in range(50):
            evs = []
            for i in range(rng.randint(1, 25)):
                s = rng.randrange(0, 23 * 60, 5)
                d = rng.choice([0, 15, 30, 45, 60, 90, 120, 240])
                evs.append(_ev(f"e{i:02d}", s, min(s + d, 24 * 60)))

            res = pack_columns(_items(evs))
            for col, members in res.by_column().items():
                for i, a in enumerate(members):
                    for b in members[i + 1:]:
                        self.assertFalse(
                            overlaps(a.start_ms, a.end_ms, b.start_ms, b.end_ms),
                            f"column {col}: {a.event.id} overlaps {b.event.id}",
                        )

            shuffled = list(evs)
            rng.shuffle(shuffled)
            again = pack_columns(_items(shuffled))
            self.assertEqual(
                {a.event.id: a.column for a in res.assignments},
                {a.event.id: a.column for a in again.assignments},
            )
            self.assertEqual(res.column_count, again.column_count)


class TestPositionedDayContract(unittest.TestCase):
    def test_scenario_overlapping_pair_geometry(self) -> None:
        evs = [_ev("a", 9 * 60, 10 * 60), _ev("b", 9 * 60 + 30, 10 * 60 + 30)]
        out = {p.event.id: p for p in positioned_events_for_day(evs, DAY, CFG)}

        self.assertEqual(out["a"].column, 0)
        self.assertEqual(out["a"].column_width_fraction, 1.0)
        self.assertEqual(out["a"].column_left_fraction, 0.0)

        self.assertEqual(out["b"].column, 1)
        self.assertAlmostEqual(out["b"].column_width_fraction, 0.9)
        self.assertAlmostEqual(out["b"].column_left_fraction, 0.1)
        self.assertEqual(out["b"].column_count, 2)

    def test_scenario_sequential_events_all_column_zero(self) -> None:
        evs = [_ev("a", 9 * 60, 10 * 60), _ev("b", 10 * 60, 11 * 60), _ev("c", 11 * 60, 12 * 60)]
        out = positioned_events_for_day(evs, DAY, CFG)
        self.assertEqual([p.column for p in out], [0, 0, 0])
        self.assertTrue(all(p.column_width_fraction == 1.0 for p in out))

    def test_all_day_and_other_days_are_excluded(self) -> None:
        evs = [
            _ev("a", 9 * 60, 10 * 60),
            CalendarEvent(id="ad", title="ad", start_ms=BASE, end_ms=BASE + 24 * H - 1, all_day=True),
            _ev("tomorrow", 33 * 60, 34 * 60),
            _ev("span", 22 * 60, 26 * 60),
        ]
        out = positioned_events_for_day(evs, DAY, CFG)
        self.assertEqual([p.event.id for p in out], ["a"])

    def test_packing_uses_local_day_of_cfg_timezone(self) -> None:
        # 23:30Z on Jan 1 is 00:30 on Jan 2 at +01:00
        ev = _ev("late", 23 * 60 + 30, 23 * 60 + 45)
        cfg = {"tz": "+01:00"}
        self.assertEqual(positioned_events_for_day([ev], dt.date(2020, 1, 1), cfg), ())
        out = positioned_events_for_day([ev], dt.date(2020, 1, 2), cfg)
        self.assertEqual(len(out), 1)
        self.assertAlmostEqual(out[0].top_px, 0.5 * 64)


if __name__ == "__main__":
    unittest.main(verbosity=2)
