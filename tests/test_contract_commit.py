import datetime as dt
import threading
import unittest
from concurrent.futures import Future
from unittest.mock import patch

from eventgrid.commit import InMemoryEventStore, JsonFileEventStore, apply_patch, resolve_result
from eventgrid.io import load_events, save_events
from eventgrid.model import CalendarEvent

BASE = 1577836800000  # 2020-01-01T00:00:00Z
H = 60 * 60000


def _ev(eid: str = "a") -> CalendarEvent:
    return CalendarEvent(id=eid, title=eid, start_ms=BASE + 9 * H, end_ms=BASE + 10 * H)


class TestInMemoryStoreContract(unittest.TestCase):
    def test_create_update_delete(self) -> None:
        store = InMemoryEventStore()
        self.assertTrue(store.propose_create(_ev()))
        self.assertFalse(store.propose_create(_ev()))
        self.assertTrue(store.propose_update("a", {"title": "Standup", "color": "amber"}))
        self.assertEqual(store.get("a").title, "Standup")
        self.assertEqual(store.get("a").color, "amber")
        self.assertTrue(store.propose_delete("a"))
        self.assertFalse(store.propose_delete("a"))
        self.assertEqual(store.snapshot(), ())

    def test_update_refuses_missing_unknown_and_inverted(self) -> None:
        store = InMemoryEventStore([_ev()])
        self.assertFalse(store.propose_update("zzz", {"title": "x"}))
        self.assertFalse(store.propose_update("a", {"id": "b"}))
        self.assertFalse(store.propose_update("a", {"end_ms": BASE}))
        self.assertEqual(store.get("a"), _ev())

    def test_reject_predicate(self) -> None:
        calls = []

        def reject(op, eid):
            calls.append((op, eid))
            return op == "delete"

        store = InMemoryEventStore([_ev()], reject=reject)
        self.assertFalse(store.propose_delete("a"))
        self.assertTrue(store.propose_update("a", {"title": "ok"}))
        self.assertEqual(calls, [("delete", "a"), ("update", "a")])

    def test_apply_patch(self) -> None:
        ev = apply_patch(_ev(), {"start_ms": BASE, "end_ms": BASE + H})
        self.assertEqual((ev.start_ms, ev.end_ms), (BASE, BASE + H))
        with self.assertRaises(ValueError):
            apply_patch(_ev(), {"owner": "x"})


class TestResolveResultContract(unittest.TestCase):
    def test_bool_is_immediate(self) -> None:
        got = []
        resolve_result(True, got.append)
        resolve_result(0, got.append)
        self.assertEqual(got, [True, False])

    def test_future_resolves_later(self) -> None:
        got = []
        fut = Future()
        resolve_result(fut, got.append)
        self.assertEqual(got, [])
        fut.set_result(True)
        self.assertEqual(got, [True])

    def test_failed_future_is_rejection(self) -> None:
        got = []
        fut = Future()
        resolve_result(fut, got.append)
        fut.set_exception(RuntimeError("offline"))
        self.assertEqual(got, [False])


class TestJsonFileStoreContract:
    def test_changes_are_flushed(self, tmp_path) -> None:
        p = tmp_path / "events.json"
        store = JsonFileEventStore(p, {"tz": "UTC"})
        assert store.snapshot() == ()
        assert store.propose_create(_ev())
        assert store.propose_update("a", {"start_ms": BASE + 11 * H, "end_ms": BASE + 12 * H})

        (saved,) = load_events(p, dt.timezone.utc)
        assert saved.start_ms == BASE + 11 * H

        reopened = JsonFileEventStore(p, {"tz": "UTC"})
        assert reopened.get("a") == saved

    def test_rejected_change_is_not_flushed(self, tmp_path) -> None:
        p = tmp_path / "events.json"
        store = JsonFileEventStore(p, {"tz": "UTC"})
        assert not store.propose_delete("missing")
        assert not p.exists()

    def test_write_happens_under_the_write_lock(self, tmp_path) -> None:
        store = JsonFileEventStore(tmp_path / "events.json", {"tz": "UTC"})
        held = []

        def _save(path, events):
            held.append(store._write_lock.locked())
            save_events(path, events)

        with patch("eventgrid.commit.save_events", _save):
            store.propose_create(_ev())
            store.propose_update("a", {"title": "b"})
            store.propose_delete("a")
        assert held == [True, True, True]

    def test_concurrent_changes_leave_latest_state_on_disk(self, tmp_path) -> None:
        p = tmp_path / "events.json"
        store = JsonFileEventStore(p, {"tz": "UTC"})
        threads = [threading.Thread(target=store.propose_create, args=(_ev(f"e{i:02d}"),)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        on_disk = {e.id for e in load_events(p, dt.timezone.utc)}
        assert on_disk == {e.id for e in store.snapshot()}
        assert len(on_disk) == 20


if __name__ == "__main__":
    unittest.main(verbosity=2)
