import threading

from drivebridge.exceptions import AuthenticationError


class CredentialStore:
    """Holds the bearer token for the current session.

    A single slot guarded by a lock: requests in flight may read it while a
    new ``initialize`` call overwrites it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._token: str | None = None

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token

    def get(self) -> str | None:
        with self._lock:
            return self._token

    def is_set(self) -> bool:
        return self.get() is not None

    def require(self) -> str:
        token = self.get()
        if not token:
            raise AuthenticationError(
                "Bridge not initialized. Call initialize() with an access token first.",
                code="NOT_INITIALIZED",
            )
        return token
