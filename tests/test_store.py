import threading
import unittest

from cpauth.errors import NotFound
from cpauth.store import SessionStore, UserStore


class TestUserStore(unittest.TestCase):
    def test_register_and_lookup(self) -> None:
        store = UserStore()
        store.register("alice", 18, 2)
        record = store.lookup("alice")
        self.assertEqual((record.user_id, record.y1, record.y2), ("alice", 18, 2))
        self.assertIn("alice", store)

    def test_reregistration_overwrites(self) -> None:
        store = UserStore()
        _, replaced = store.register("alice", 18, 2)
        self.assertFalse(replaced)
        _, replaced = store.register("alice", 13, 8)
        self.assertTrue(replaced)
        self.assertEqual(len(store), 1)
        self.assertEqual(store.lookup("alice").y1, 13)

    def test_unknown_user(self) -> None:
        store = UserStore()
        self.assertIsNone(store.get("bob"))
        with self.assertRaises(NotFound):
            store.lookup("bob")

    def test_concurrent_registration(self) -> None:
        store = UserStore()
        threads = [
            threading.Thread(target=store.register, args=(f"user-{index}", index, index))
            for index in range(64)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(store), 64)
        self.assertEqual(store.lookup("user-42").y2, 42)


class TestSessionStore(unittest.TestCase):
    def test_auth_ids_are_unique(self) -> None:
        store = SessionStore()
        ids = {store.create("alice", 8, 18, 5).auth_id for _ in range(200)}
        self.assertEqual(len(ids), 200)
        self.assertEqual(len(store), 200)

    def test_consume_is_single_use(self) -> None:
        store = SessionStore()
        session = store.create("alice", 8, 18, 5)
        consumed = store.consume(session.auth_id)
        self.assertEqual((consumed.user_id, consumed.r1, consumed.r2, consumed.c), ("alice", 8, 18, 5))
        self.assertNotIn(session.auth_id, store)
        with self.assertRaises(NotFound):
            store.consume(session.auth_id)

    def test_expired_session_cannot_be_consumed(self) -> None:
        now = [100.0]
        store = SessionStore(ttl=30, clock=lambda: now[0])
        session = store.create("alice", 8, 18, 5)
        now[0] += 30
        with self.assertRaises(NotFound):
            store.consume(session.auth_id)
        self.assertEqual(len(store), 0)

    def test_expired_sessions_pruned_on_create(self) -> None:
        now = [0.0]
        store = SessionStore(ttl=30, clock=lambda: now[0])
        stale = [store.create("alice", 8, 18, 5) for _ in range(3)]
        now[0] = 20.0
        fresh = store.create("alice", 8, 18, 5)
        now[0] = 40.0
        latest = store.create("alice", 8, 18, 5)
        for session in stale:
            self.assertNotIn(session.auth_id, store)
        self.assertIn(fresh.auth_id, store)
        self.assertIn(latest.auth_id, store)
        self.assertEqual(store.consume(fresh.auth_id).created_at, 20.0)

    def test_oldest_session_evicted_at_capacity(self) -> None:
        store = SessionStore(max_sessions=3)
        sessions = [store.create("alice", 8, 18, c) for c in range(5)]
        self.assertEqual(len(store), 3)
        for session in sessions[:2]:
            self.assertNotIn(session.auth_id, store)
        self.assertEqual(store.consume(sessions[-1].auth_id).c, 4)

    def test_concurrent_consume_succeeds_once(self) -> None:
        store = SessionStore()
        session = store.create("alice", 8, 18, 5)
        outcomes = []
        lock = threading.Lock()

        def attempt() -> None:
            try:
                store.consume(session.auth_id)
                outcome = "consumed"
            except NotFound:
                outcome = "missing"
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=attempt) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(outcomes.count("consumed"), 1)
        self.assertEqual(outcomes.count("missing"), 15)


if __name__ == "__main__":
    unittest.main()
