"""Shared HTTP client. Failures surface to the caller as-is, so no retry adapter is mounted."""

import requests

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session for connection pooling."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session
