from drivebridge.models.common import CamelModel


class DriveFile(CamelModel):
    id: str
    name: str = ""
    mime_type: str = ""
    created_time: str | None = None
    modified_time: str | None = None
    size: str | None = None
    web_view_link: str | None = None
    web_content_link: str | None = None
    icon_link: str | None = None
    thumbnail_link: str | None = None
    parents: list[str] | None = None


class ListFilesResponse(CamelModel):
    files: list[DriveFile]
    next_page_token: str | None = None


class UploadResponse(CamelModel):
    file_id: str
    web_view_link: str | None = None


class DownloadResponse(CamelModel):
    content: str
    name: str
    mime_type: str


class CreateFolderResponse(CamelModel):
    folder_id: str


class FileMetadataResponse(CamelModel):
    file: DriveFile


class InitializeRequest(CamelModel):
    access_token: str | None = None


class UploadFileRequest(CamelModel):
    name: str
    content: str
    mime_type: str = "text/plain"
    folder_id: str | None = None


class UpdateFileRequest(CamelModel):
    content: str
    mime_type: str = "text/plain"


class CreateFolderRequest(CamelModel):
    name: str
    parent_folder_id: str | None = None
