import asyncio
import logging
import re
from typing import Any, Callable

import requests
from pydantic import ValidationError

from drivebridge import multipart
from drivebridge.auth import CredentialStore
from drivebridge.config import Settings, get_settings
from drivebridge.exceptions import (
    AuthenticationError,
    IntegrationError,
    InvalidRequestError,
    RateLimitError,
)
from drivebridge.http_client import get_session
from drivebridge.models.common import SuccessResponse
from drivebridge.models.drive import (
    CreateFolderResponse,
    DownloadResponse,
    DriveFile,
    FileMetadataResponse,
    ListFilesResponse,
    UploadResponse,
)

logger = logging.getLogger(__name__)

FIELDS = "id,name,mimeType,createdTime,modifiedTime,size,webViewLink,webContentLink,iconLink,thumbnailLink,parents"
LIST_FIELDS = f"files({FIELDS}),nextPageToken"
DOWNLOAD_FIELDS = "id,name,mimeType"
UPLOAD_FIELDS = "id,webViewLink"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

MIN_TOKEN_LENGTH = 21
MAX_PAGE_SIZE = 1000
ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{20,60}$")


def _require(value: Any, field: str, allow_empty: bool = False) -> None:
    if value is None or (value == "" and not allow_empty):
        raise InvalidRequestError(f"{field} is required", code=f"MISSING_{field.upper()}")


def _validate_id(value: str | None, field: str, required: bool = True) -> None:
    if not value and not required:
        return
    _require(value, field)
    if not ID_PATTERN.match(value):
        raise InvalidRequestError(f"Invalid {field} format", code=f"INVALID_{field.upper()}_FORMAT")


def _error_message(resp: requests.Response) -> str:
    """Prefer Drive's ``error.message``, then the raw body, then the reason phrase."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(error, str):
            return data.get("error_description") or error
    return resp.text or resp.reason or f"HTTP {resp.status_code}"


def _handle_api_error(resp: requests.Response):
    message = _error_message(resp)
    code = f"HTTP_{resp.status_code}"
    logger.warning("Drive API returned %d: %s", resp.status_code, message)
    if resp.status_code == 429:
        raise RateLimitError(message, code=code, status=429)
    if resp.status_code in (401, 403):
        raise AuthenticationError(message, code=code, status=resp.status_code)
    raise IntegrationError(message, code=code, status=resp.status_code)


def _parse_json(resp: requests.Response) -> dict:
    if not resp.content:
        return {}
    try:
        data = resp.json()
    except ValueError as e:
        raise IntegrationError(f"Failed to parse Drive API response: {e}", code="PARSE_ERROR") from e
    if not isinstance(data, dict):
        raise IntegrationError(
            f"Expected a JSON object from Drive API, got {type(data).__name__}", code="PARSE_ERROR"
        )
    return data


def _parse_file(f: dict) -> DriveFile:
    return DriveFile.model_validate(f)


def _parse_file_list(data: dict) -> ListFilesResponse:
    return ListFilesResponse(
        files=[_parse_file(f) for f in data.get("files") or []],
        next_page_token=data.get("nextPageToken"),
    )


def _parse_upload(data: dict) -> UploadResponse:
    return UploadResponse(file_id=data.get("id", ""), web_view_link=data.get("webViewLink"))


class DriveClient:
    """Async client for the supported subset of the Drive v3 REST API.

    Holds one session credential and maps every operation onto one request
    (two for ``download_file``). Blocking ``requests`` calls run in a worker
    thread so independent operations can proceed concurrently.
    """

    def __init__(self, credentials: CredentialStore | None = None, settings: Settings | None = None):
        self.credentials = credentials or CredentialStore()
        self.settings = settings or get_settings()

    # --- Session ---

    async def initialize(self, access_token: str | None) -> SuccessResponse:
        """Store the caller's OAuth access token for all later calls."""
        if not access_token:
            raise AuthenticationError("Access token is required", code="MISSING_TOKEN", status=400)
        if len(access_token) < MIN_TOKEN_LENGTH:
            raise AuthenticationError("Invalid access token format", code="INVALID_TOKEN", status=400)
        self.credentials.set(access_token)
        logger.info("Drive session initialized (token length %d)", len(access_token))
        return SuccessResponse(success=True)

    # --- Transport ---

    def _url(self, path: str, upload: bool = False) -> str:
        base = self.settings.drive_upload_base if upload else self.settings.drive_api_base
        return f"{base}{path}"

    async def _send(
        self,
        token: str,
        method: str,
        url: str,
        params: dict | None = None,
        data: bytes | None = None,
        json_body: dict | None = None,
        headers: dict | None = None,
    ) -> requests.Response:
        request_headers = {"Authorization": f"Bearer {token}", **(headers or {})}
        try:
            resp = await asyncio.to_thread(
                get_session().request,
                method,
                url,
                params=params,
                data=data,
                json=json_body,
                headers=request_headers,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise IntegrationError(str(e), code="REQUEST_FAILED", status=503) from e
        if not resp.ok:
            _handle_api_error(resp)
        return resp

    async def _perform_request(
        self,
        token: str,
        method: str,
        url: str,
        transform: Callable[[dict], Any] | None = None,
        **kwargs,
    ) -> Any:
        resp = await self._send(token, method, url, **kwargs)
        data = _parse_json(resp)
        if transform is None:
            return data
        try:
            return transform(data)
        except ValidationError as e:
            raise IntegrationError(f"Unexpected Drive API response: {e}", code="PARSE_ERROR") from e

    def _multipart_upload_kwargs(self, metadata: dict, content: str, mime_type: str) -> dict:
        boundary = self.settings.multipart_boundary
        return {
            "params": {"uploadType": "multipart", "fields": UPLOAD_FIELDS},
            "data": multipart.build_body(metadata, content, mime_type, boundary),
            "headers": {"Content-Type": multipart.content_type(boundary)},
        }

    # --- Operations ---

    async def list_files(
        self,
        page_size: int | None = None,
        query: str | None = None,
        order_by: str | None = None,
        page_token: str | None = None,
    ) -> ListFilesResponse:
        """List files, optionally filtered by a Drive query (e.g. name contains 'report')."""
        token = self.credentials.require()
        if page_size is None:
            page_size = self.settings.default_page_size
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise InvalidRequestError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}", code="INVALID_PAGE_SIZE"
            )
        params = {"pageSize": page_size, "fields": LIST_FIELDS}
        if query:
            params["q"] = query
        if order_by:
            params["orderBy"] = order_by
        if page_token:
            params["pageToken"] = page_token
        result = await self._perform_request(
            token, "GET", self._url("/files"), transform=_parse_file_list, params=params
        )
        logger.info("Listed %d files", len(result.files))
        return result

    async def search_files(self, query: str, page_size: int | None = None) -> ListFilesResponse:
        """Search files using Drive query syntax. Same endpoint as list_files."""
        self.credentials.require()
        _require(query, "query")
        return await self.list_files(page_size=page_size, query=query)

    async def upload_file(
        self,
        name: str,
        content: str,
        mime_type: str,
        folder_id: str | None = None,
    ) -> UploadResponse:
        """Create a text file with metadata and content in one multipart request."""
        token = self.credentials.require()
        _require(name, "name")
        _require(content, "content", allow_empty=True)
        _require(mime_type, "mime_type")
        _validate_id(folder_id, "folder_id", required=False)

        metadata: dict = {"name": name, "mimeType": mime_type}
        if folder_id:
            metadata["parents"] = [folder_id]
        result = await self._perform_request(
            token,
            "POST",
            self._url("/files", upload=True),
            transform=_parse_upload,
            **self._multipart_upload_kwargs(metadata, content, mime_type),
        )
        logger.info("Uploaded %s as %s", name, result.file_id)
        return result

    async def download_file(self, file_id: str) -> DownloadResponse:
        """Fetch name/mimeType, then the content as UTF-8 text."""
        token = self.credentials.require()
        _validate_id(file_id, "file_id")

        url = self._url(f"/files/{file_id}")
        meta = await self._perform_request(token, "GET", url, params={"fields": DOWNLOAD_FIELDS})
        resp = await self._send(token, "GET", url, params={"alt": "media"})
        try:
            content = resp.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise IntegrationError(
                f"File {file_id} is not UTF-8 text", code="PARSE_ERROR"
            ) from e
        logger.info("Downloaded %s (%d bytes)", file_id, len(resp.content))
        return DownloadResponse(
            content=content,
            name=meta.get("name", ""),
            mime_type=meta.get("mimeType", ""),
        )

    async def update_file(self, file_id: str, content: str, mime_type: str) -> UploadResponse:
        """Replace a file's content. Name and parents are left untouched."""
        token = self.credentials.require()
        _validate_id(file_id, "file_id")
        _require(content, "content", allow_empty=True)
        _require(mime_type, "mime_type")

        result = await self._perform_request(
            token,
            "PATCH",
            self._url(f"/files/{file_id}", upload=True),
            transform=_parse_upload,
            **self._multipart_upload_kwargs({"mimeType": mime_type}, content, mime_type),
        )
        logger.info("Updated %s", file_id)
        return result

    async def delete_file(self, file_id: str) -> SuccessResponse:
        token = self.credentials.require()
        _validate_id(file_id, "file_id")
        await self._send(token, "DELETE", self._url(f"/files/{file_id}"))
        logger.info("Deleted %s", file_id)
        return SuccessResponse(success=True)

    async def create_folder(self, name: str, parent_folder_id: str | None = None) -> CreateFolderResponse:
        token = self.credentials.require()
        _require(name, "name")
        _validate_id(parent_folder_id, "parent_folder_id", required=False)

        metadata: dict = {"name": name, "mimeType": FOLDER_MIME_TYPE}
        if parent_folder_id:
            metadata["parents"] = [parent_folder_id]
        result = await self._perform_request(
            token,
            "POST",
            self._url("/files"),
            transform=lambda data: CreateFolderResponse(folder_id=data.get("id", "")),
            json_body=metadata,
        )
        logger.info("Created folder %s as %s", name, result.folder_id)
        return result

    async def get_file_metadata(self, file_id: str) -> FileMetadataResponse:
        token = self.credentials.require()
        _validate_id(file_id, "file_id")
        return await self._perform_request(
            token,
            "GET",
            self._url(f"/files/{file_id}"),
            transform=lambda data: FileMetadataResponse(file=_parse_file(data)),
            params={"fields": FIELDS},
        )


_client: DriveClient | None = None


def get_client() -> DriveClient:
    """Return the process-wide client shared by the HTTP and MCP bindings."""
    global _client
    if _client is None:
        _client = DriveClient()
    return _client
