"""
Local draft store: fallbacks, quota signaling, size warning, cross-tab updates.
"""
import json
import tempfile
import unittest

from intake_client.store import (
    QUOTA_EXCEEDED,
    SAVE_ERROR,
    DraftStore,
    FileStorage,
    MemoryStorage,
    read_json,
    subscribe,
    write_json,
)


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


class BrokenStorage(MemoryStorage):
    def set_item(self, key, value, origin=None):
        raise OSError("disk unplugged")


class TestReadWrite(unittest.TestCase):
    def test_missing_key_returns_fallback(self):
        self.assertEqual(read_json(MemoryStorage(), "draft", {"a": 1}), {"a": 1})

    def test_corrupt_value_returns_fallback(self):
        backend = MemoryStorage()
        backend.set_item("draft", "{oops")
        self.assertEqual(read_json(backend, "draft", []), [])

    def test_write_then_read(self):
        backend = MemoryStorage()
        self.assertIsNone(write_json(backend, "draft", {"firstName": "Ada"}))
        self.assertEqual(read_json(backend, "draft", None), {"firstName": "Ada"})

    def test_quota_exceeded_is_reported_not_raised(self):
        backend = MemoryStorage(quota_bytes=32)
        error = write_json(backend, "draft", {"notes": "x" * 100})
        self.assertEqual(error.type, QUOTA_EXCEEDED)
        self.assertEqual(error.key, "draft")
        self.assertIsNone(backend.get_item("draft"))

    def test_other_failures_are_save_errors(self):
        error = write_json(BrokenStorage(), "draft", {"a": 1})
        self.assertEqual(error.type, SAVE_ERROR)
        self.assertIn("disk unplugged", error.message)

    def test_unserializable_value_is_save_error(self):
        error = write_json(MemoryStorage(), "draft", {"when": object()})
        self.assertEqual(error.type, SAVE_ERROR)

    def test_size_warning_above_threshold(self):
        warnings = []
        with self.assertLogs("intake_client.store", level="WARNING"):
            error = write_json(MemoryStorage(), "draft", "x" * 64, warning_bytes=16, on_size_warning=warnings.append)
        self.assertIsNone(error)
        self.assertEqual(len(warnings), 1)
        self.assertEqual(warnings[0].size_bytes, 66)

    def test_subscribe_filters_key_origin_and_removals(self):
        backend = MemoryStorage()
        me = object()
        seen = []
        unsubscribe = subscribe(backend, "draft", seen.append, origin=me)
        backend.set_item("draft", json.dumps({"v": 1}))
        backend.set_item("other", json.dumps({"v": 2}))
        backend.set_item("draft", json.dumps({"v": 3}), origin=me)
        backend.set_item("draft", "{broken")
        backend.remove_item("draft")
        unsubscribe()
        backend.set_item("draft", json.dumps({"v": 4}))
        self.assertEqual(seen, [{"v": 1}])


class TestFileStorage(unittest.TestCase):
    def test_round_trip_and_notifications(self):
        with tempfile.TemporaryDirectory() as tmp:
            backend = FileStorage(tmp)
            changes = []
            backend.subscribe(changes.append)
            backend.set_item("form/session id", "abc")
            self.assertEqual(FileStorage(tmp).get_item("form/session id"), "abc")
            backend.remove_item("form/session id")
            backend.remove_item("form/session id")
            self.assertIsNone(backend.get_item("form/session id"))
            self.assertEqual([c.new_value for c in changes], ["abc", None])


class TestDraftStore(unittest.TestCase):
    def test_loads_persisted_value(self):
        backend = MemoryStorage()
        write_json(backend, "draft", {"firstName": "Ada"})
        store = DraftStore("draft", {}, backend)
        self.assertEqual(store.value, {"firstName": "Ada"})

    def test_set_accepts_updater(self):
        store = DraftStore("draft", {"count": 1}, MemoryStorage())
        store.set(lambda prev: {"count": prev["count"] + 1})
        self.assertEqual(store.value, {"count": 2})
        self.assertEqual(read_json(store.backend, "draft", None), {"count": 2})

    def test_memory_stays_authoritative_on_quota_error(self):
        errors = []
        store = DraftStore("draft", {}, MemoryStorage(quota_bytes=20), on_error=errors.append)
        error = store.set({"notes": "y" * 200})
        self.assertEqual(error.type, QUOTA_EXCEEDED)
        self.assertEqual(errors, [error])
        self.assertEqual(store.value, {"notes": "y" * 200})

    def test_external_change_applied_outside_window(self):
        backend = MemoryStorage()
        clock = FakeClock()
        tab_a = DraftStore("draft", {}, backend, protection_seconds=2.0, clock=clock)
        tab_b = DraftStore("draft", {}, backend, protection_seconds=2.0, clock=clock)
        notified = []
        tab_a.subscribe(notified.append)
        tab_b.set({"step": 2})
        self.assertEqual(tab_a.value, {"step": 2})
        self.assertEqual(notified, [{"step": 2}])

    def test_external_change_ignored_inside_window(self):
        backend = MemoryStorage()
        clock = FakeClock()
        tab_a = DraftStore("draft", {}, backend, protection_seconds=2.0, clock=clock)
        tab_b = DraftStore("draft", {}, backend, protection_seconds=2.0, clock=clock)
        tab_a.set({"uploads": ["a.pdf"]})
        clock.now += 1.0
        tab_b.set({"uploads": []})
        self.assertEqual(tab_a.value, {"uploads": ["a.pdf"]})
        clock.now += 1.5
        tab_b.set({"uploads": ["b.pdf"]})
        self.assertEqual(tab_a.value, {"uploads": ["b.pdf"]})

    def test_zero_window_disables_guard(self):
        backend = MemoryStorage()
        tab_a = DraftStore("draft", {}, backend, protection_seconds=0)
        tab_b = DraftStore("draft", {}, backend, protection_seconds=0)
        tab_a.set({"v": 1})
        tab_b.set({"v": 2})
        self.assertEqual(tab_a.value, {"v": 2})

    def test_writer_ignores_its_own_notification(self):
        store = DraftStore("draft", {}, MemoryStorage(), protection_seconds=0)
        notified = []
        store.subscribe(notified.append)
        store.set({"v": 1})
        self.assertEqual(notified, [])

    def test_close_stops_external_updates(self):
        backend = MemoryStorage()
        tab_a = DraftStore("draft", {}, backend, protection_seconds=0)
        tab_b = DraftStore("draft", {}, backend, protection_seconds=0)
        tab_a.close()
        tab_b.set({"v": 1})
        self.assertEqual(tab_a.value, {})

    def test_reset(self):
        store = DraftStore("draft", {"v": 0}, MemoryStorage())
        store.set({"v": 5})
        store.reset()
        self.assertEqual(store.value, {"v": 0})
        self.assertIsNone(store.backend.get_item("draft"))


if __name__ == "__main__":
    unittest.main()
