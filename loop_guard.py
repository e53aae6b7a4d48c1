# loop_guard.py - stop the assistant from sending the same guidance twice in a row
import hashlib
import threading

from flask import session as flask_session

CANNED_NAMESPACE = "last_response"
ANSWER_NAMESPACE = "last_response_hash"


def fingerprint(text: str) -> str:
    return hashlib.md5((text or "").encode("utf-8"), usedforsecurity=False).hexdigest()


class SessionStore:
    """Key-value storage for per-session loop state."""

    def get(self, key):
        raise NotImplementedError

    def set(self, key, value):
        raise NotImplementedError

    def clear(self, key):
        raise NotImplementedError


class FlaskSessionStore(SessionStore):
    """Keeps values in the signed-cookie Flask session of the current request."""

    prefix = "assistant:"

    def get(self, key):
        return flask_session.get(self.prefix + key)

    def set(self, key, value):
        flask_session[self.prefix + key] = value

    def clear(self, key):
        flask_session.pop(self.prefix + key, None)


class InMemorySessionStore(SessionStore):
    """Process-local store. Each operation is atomic, a read-then-write is not."""

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            return self._data.get(key)

    def set(self, key, value):
        with self._lock:
            self._data[key] = value

    def clear(self, key):
        with self._lock:
            self._data.pop(key, None)


class LoopGuard:
    def __init__(self, store: SessionStore):
        self.store = store

    @staticmethod
    def _key(session_key, namespace):
        return f"{namespace}:{session_key}"

    def check_and_update(self, session_key, candidate, namespace=CANNED_NAMESPACE) -> bool:
        """Return True if *candidate* equals the last value sent in this namespace.

        A repeat clears the stored value so the next distinct input goes through;
        anything else replaces it.
        """
        key = self._key(session_key, namespace)
        if self.store.get(key) == candidate:
            self.store.clear(key)
            return True
        self.store.set(key, candidate)
        return False

    def reset(self, session_key, namespace=CANNED_NAMESPACE):
        self.store.clear(self._key(session_key, namespace))


def build_store(kind: str) -> SessionStore:
    if kind == "cookie":
        return FlaskSessionStore()
    if kind == "memory":
        return InMemorySessionStore()
    raise ValueError(f"unknown session store: {kind!r}")
