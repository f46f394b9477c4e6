from fastmcp import FastMCP

from drivebridge.exceptions import DriveBridgeError
from drivebridge.services import drive as drive_service

mcp = FastMCP("Drivebridge")


def _handle_mcp_error(e: DriveBridgeError) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    return {"error": e.code, **e.to_dict()}


# --- Session ---

@mcp.tool
async def drive_initialize(access_token: str) -> dict:
    """Start a Drive session with an OAuth access token obtained by the host application.
    Must be called before any other drive_* tool."""
    try:
        result = await drive_service.get_client().initialize(access_token)
        return result.model_dump(by_alias=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


# --- Drive tools ---

@mcp.tool
async def drive_list_files(
    page_size: int | None = None,
    query: str | None = None,
    order_by: str | None = None,
    page_token: str | None = None,
) -> dict:
    """List files in Google Drive. Pass nextPageToken from a previous call as page_token to get the next page.
    order_by accepts Drive sort keys such as 'modifiedTime desc' or 'name'. query is optional Drive query syntax."""
    try:
        result = await drive_service.get_client().list_files(
            page_size=page_size, query=query, order_by=order_by, page_token=page_token
        )
        return result.model_dump(by_alias=True, exclude_none=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


@mcp.tool
async def drive_search(query: str, page_size: int | None = None) -> dict:
    """Search files in Google Drive using Drive query syntax.
    Examples: "name contains 'report'", "mimeType = 'application/pdf'", "modifiedTime > '2024-01-01'".
    See https://developers.google.com/drive/api/guides/search-files for full syntax."""
    try:
        result = await drive_service.get_client().search_files(query, page_size=page_size)
        return result.model_dump(by_alias=True, exclude_none=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


@mcp.tool
async def drive_get_file_metadata(file_id: str) -> dict:
    """Get metadata for a specific file by its ID (name, size, type, dates, links, parents)."""
    try:
        result = await drive_service.get_client().get_file_metadata(file_id)
        return result.model_dump(by_alias=True, exclude_none=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


@mcp.tool
async def drive_download_file(file_id: str) -> dict:
    """Read the text content of a file along with its name and MIME type.
    Only UTF-8 text files are supported. Use drive_list_files or drive_search first to find the file ID."""
    try:
        result = await drive_service.get_client().download_file(file_id)
        return result.model_dump(by_alias=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


@mcp.tool
async def drive_upload_file(name: str, content: str, mime_type: str = "text/plain", folder_id: str | None = None) -> dict:
    """Create a new text file in Google Drive. Optionally place it inside the folder folder_id."""
    try:
        result = await drive_service.get_client().upload_file(name, content, mime_type, folder_id)
        return result.model_dump(by_alias=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


@mcp.tool
async def drive_update_file(file_id: str, content: str, mime_type: str = "text/plain") -> dict:
    """Replace the content of an existing file. The name and parent folders are kept."""
    try:
        result = await drive_service.get_client().update_file(file_id, content, mime_type)
        return result.model_dump(by_alias=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


@mcp.tool
async def drive_delete_file(file_id: str) -> dict:
    """Permanently delete a file or folder by its ID."""
    try:
        result = await drive_service.get_client().delete_file(file_id)
        return result.model_dump(by_alias=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


@mcp.tool
async def drive_create_folder(name: str, parent_folder_id: str | None = None) -> dict:
    """Create a new folder in Google Drive. Optionally place it inside an existing folder."""
    try:
        result = await drive_service.get_client().create_folder(name, parent_folder_id)
        return result.model_dump(by_alias=True)
    except DriveBridgeError as e:
        return _handle_mcp_error(e)


# --- Status tool ---

@mcp.tool
def drivebridge_status() -> dict:
    """Check whether a Drive session has been initialized."""
    initialized = drive_service.get_client().credentials.is_set()
    return {
        "initialized": initialized,
        "message": "Ready" if initialized else "Call drive_initialize with an access token first",
    }
