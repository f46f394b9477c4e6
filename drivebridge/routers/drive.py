from fastapi import APIRouter

from drivebridge.models.common import SuccessResponse
from drivebridge.models.drive import (
    CreateFolderRequest,
    CreateFolderResponse,
    DownloadResponse,
    FileMetadataResponse,
    InitializeRequest,
    ListFilesResponse,
    UpdateFileRequest,
    UploadFileRequest,
    UploadResponse,
)
from drivebridge.services import drive as drive_service

router = APIRouter(prefix="/api/drive", tags=["drive"])


@router.post("/initialize")
async def initialize(request: InitializeRequest) -> SuccessResponse:
    return await drive_service.get_client().initialize(request.access_token)


@router.get("/files")
async def list_files(
    page_size: int | None = None,
    query: str | None = None,
    order_by: str | None = None,
    page_token: str | None = None,
) -> ListFilesResponse:
    return await drive_service.get_client().list_files(
        page_size=page_size, query=query, order_by=order_by, page_token=page_token
    )


@router.get("/search")
async def search_files(query: str, page_size: int | None = None) -> ListFilesResponse:
    return await drive_service.get_client().search_files(query, page_size=page_size)


@router.post("/files")
async def upload_file(request: UploadFileRequest) -> UploadResponse:
    return await drive_service.get_client().upload_file(
        request.name, request.content, request.mime_type, request.folder_id
    )


@router.get("/files/{file_id}")
async def get_file_metadata(file_id: str) -> FileMetadataResponse:
    return await drive_service.get_client().get_file_metadata(file_id)


@router.get("/files/{file_id}/content")
async def download_file(file_id: str) -> DownloadResponse:
    return await drive_service.get_client().download_file(file_id)


@router.patch("/files/{file_id}")
async def update_file(file_id: str, request: UpdateFileRequest) -> UploadResponse:
    return await drive_service.get_client().update_file(file_id, request.content, request.mime_type)


@router.delete("/files/{file_id}")
async def delete_file(file_id: str) -> SuccessResponse:
    return await drive_service.get_client().delete_file(file_id)


@router.post("/folders")
async def create_folder(request: CreateFolderRequest) -> CreateFolderResponse:
    return await drive_service.get_client().create_folder(request.name, request.parent_folder_id)
