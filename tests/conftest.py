import json

import pytest
import requests
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from drivebridge.auth import CredentialStore
from drivebridge.config import Settings
from drivebridge.services.drive import DriveClient


# --- Canned API responses ---

ACCESS_TOKEN = "ya29.a0AfH6SMBx-example-access-token"
FILE_ID = "1a2B3c4D5e6F7g8H9i0JkLmNoPqRsTuV"
FOLDER_ID = "0BxFolderAbCdEfGhIjKlMnOp"

DRIVE_API_FILE = {
    "id": FILE_ID,
    "name": "report.txt",
    "mimeType": "text/plain",
    "size": "1024",
    "createdTime": "2025-01-01T00:00:00Z",
    "modifiedTime": "2025-01-02T00:00:00Z",
    "parents": [FOLDER_ID],
    "webViewLink": f"https://drive.google.com/file/d/{FILE_ID}/view",
    "iconLink": "https://drive-thirdparty.googleusercontent.com/16/type/text/plain",
}

DRIVE_API_LIST = {
    "files": [DRIVE_API_FILE],
    "nextPageToken": "page-2-token",
}

DRIVE_API_NOT_FOUND = {"error": {"message": "File not found", "code": 404}}


def make_response(status: int = 200, json_data=None, content: bytes | None = None, reason: str = "OK") -> requests.Response:
    """Build a real requests.Response as the transport would return it."""
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp.encoding = "utf-8"
    if json_data is not None:
        resp._content = json.dumps(json_data).encode("utf-8")
    else:
        resp._content = content if content is not None else b""
    return resp


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def mock_session(mocker):
    """Shared requests.Session replaced by a mock; set request.return_value/side_effect per test."""
    session = MagicMock()
    mocker.patch("drivebridge.services.drive.get_session", return_value=session)
    return session


@pytest.fixture
def drive_client(settings):
    """Client with no credential set."""
    return DriveClient(credentials=CredentialStore(), settings=settings)


@pytest.fixture
def initialized_client(drive_client):
    drive_client.credentials.set(ACCESS_TOKEN)
    return drive_client


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from drivebridge.main import api
    return TestClient(api)
