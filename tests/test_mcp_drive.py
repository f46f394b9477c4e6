import pytest
from unittest.mock import AsyncMock, MagicMock

from drivebridge.exceptions import AuthenticationError, IntegrationError, InvalidRequestError
from drivebridge.models.common import SuccessResponse
from drivebridge.models.drive import (
    CreateFolderResponse,
    DownloadResponse,
    DriveFile,
    FileMetadataResponse,
    ListFilesResponse,
    UploadResponse,
)
from conftest import FILE_ID, FOLDER_ID

SAMPLE_FILE = DriveFile(
    id=FILE_ID, name="report.txt", mime_type="text/plain",
    size="1024", created_time="2025-01-01T00:00:00Z",
    modified_time="2025-01-02T00:00:00Z",
)


@pytest.fixture(autouse=True)
def mock_client(mocker):
    client = AsyncMock()
    client.credentials = MagicMock()
    svc = mocker.patch("drivebridge.mcp_server.drive_service")
    svc.get_client.return_value = client
    return client


class TestDriveInitialize:
    async def test_returns_success(self, mock_client):
        mock_client.initialize.return_value = SuccessResponse(success=True)
        from drivebridge.mcp_server import drive_initialize
        result = await drive_initialize.fn(access_token="ya29.token-from-host-app")
        assert result == {"success": True}

    async def test_error_returns_dict_not_raises(self, mock_client):
        mock_client.initialize.side_effect = AuthenticationError(
            "Invalid access token format", code="INVALID_TOKEN", status=400
        )
        from drivebridge.mcp_server import drive_initialize
        result = await drive_initialize.fn(access_token="short")
        assert result["error"] == "INVALID_TOKEN"
        assert result["code"] == "INVALID_TOKEN"
        assert result["status"] == 400


class TestDriveListFiles:
    async def test_returns_dict(self, mock_client):
        mock_client.list_files.return_value = ListFilesResponse(files=[SAMPLE_FILE], next_page_token="next")
        from drivebridge.mcp_server import drive_list_files
        result = await drive_list_files.fn(page_size=5)
        assert result["files"][0]["id"] == FILE_ID
        assert result["files"][0]["mimeType"] == "text/plain"
        assert result["nextPageToken"] == "next"
        mock_client.list_files.assert_awaited_once_with(page_size=5, query=None, order_by=None, page_token=None)

    async def test_not_initialized(self, mock_client):
        mock_client.list_files.side_effect = AuthenticationError("Bridge not initialized.")
        from drivebridge.mcp_server import drive_list_files
        result = await drive_list_files.fn()
        assert result["error"] == "NOT_INITIALIZED"


    async def test_forwards_query(self, mock_client):
        mock_client.list_files.return_value = ListFilesResponse(files=[])
        from drivebridge.mcp_server import drive_list_files
        await drive_list_files.fn(query="name contains 'report'")
        mock_client.list_files.assert_awaited_once_with(
            page_size=None, query="name contains 'report'", order_by=None, page_token=None
        )


class TestDriveSearch:
    async def test_returns_dict(self, mock_client):
        mock_client.search_files.return_value = ListFilesResponse(files=[SAMPLE_FILE])
        from drivebridge.mcp_server import drive_search
        result = await drive_search.fn(query="name contains 'report'")
        assert len(result["files"]) == 1
        assert "nextPageToken" not in result


class TestDriveFileTools:
    async def test_get_metadata(self, mock_client):
        mock_client.get_file_metadata.return_value = FileMetadataResponse(file=SAMPLE_FILE)
        from drivebridge.mcp_server import drive_get_file_metadata
        result = await drive_get_file_metadata.fn(file_id=FILE_ID)
        assert result["file"]["name"] == "report.txt"

    async def test_download(self, mock_client):
        mock_client.download_file.return_value = DownloadResponse(content="hello", name="a.txt", mime_type="text/plain")
        from drivebridge.mcp_server import drive_download_file
        result = await drive_download_file.fn(file_id=FILE_ID)
        assert result == {"content": "hello", "name": "a.txt", "mimeType": "text/plain"}

    async def test_upload(self, mock_client):
        mock_client.upload_file.return_value = UploadResponse(file_id=FILE_ID, web_view_link="https://link")
        from drivebridge.mcp_server import drive_upload_file
        result = await drive_upload_file.fn(name="a.txt", content="hello", folder_id=FOLDER_ID)
        assert result["fileId"] == FILE_ID
        mock_client.upload_file.assert_awaited_once_with("a.txt", "hello", "text/plain", FOLDER_ID)

    async def test_update(self, mock_client):
        mock_client.update_file.return_value = UploadResponse(file_id=FILE_ID)
        from drivebridge.mcp_server import drive_update_file
        result = await drive_update_file.fn(file_id=FILE_ID, content="v2")
        assert result["fileId"] == FILE_ID

    async def test_delete(self, mock_client):
        mock_client.delete_file.return_value = SuccessResponse(success=True)
        from drivebridge.mcp_server import drive_delete_file
        assert await drive_delete_file.fn(file_id=FILE_ID) == {"success": True}

    async def test_bad_id(self, mock_client):
        mock_client.delete_file.side_effect = InvalidRequestError(
            "Invalid file_id format", code="INVALID_FILE_ID_FORMAT"
        )
        from drivebridge.mcp_server import drive_delete_file
        result = await drive_delete_file.fn(file_id="bad id!")
        assert result["error"] == "INVALID_FILE_ID_FORMAT"

    async def test_upstream_error(self, mock_client):
        mock_client.download_file.side_effect = IntegrationError("File not found", code="HTTP_404", status=404)
        from drivebridge.mcp_server import drive_download_file
        result = await drive_download_file.fn(file_id=FILE_ID)
        assert result["message"] == "File not found"
        assert result["status"] == 404


class TestDriveCreateFolder:
    async def test_returns_folder_id(self, mock_client):
        mock_client.create_folder.return_value = CreateFolderResponse(folder_id=FOLDER_ID)
        from drivebridge.mcp_server import drive_create_folder
        result = await drive_create_folder.fn(name="Reports")
        assert result == {"folderId": FOLDER_ID}


class TestStatus:
    def test_reports_initialized(self, mock_client):
        mock_client.credentials.is_set.return_value = True
        from drivebridge.mcp_server import drivebridge_status
        result = drivebridge_status.fn()
        assert result["initialized"] is True
