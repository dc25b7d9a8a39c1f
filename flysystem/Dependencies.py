from __future__ import annotations

from typing import Annotated, Iterator, Optional

from fastapi import Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from .Exceptions import FilesystemException, UnableToReadFile, UnableToRetrieveMetadata
from .Filesystem import Filesystem
from .FilesystemManager import FilesystemManager, get_filesystem_manager
from .MimeType import detect_mime_type_from_path

CHUNK_SIZE = 64 * 1024


class FileMetadata(BaseModel):
    """Serializable metadata of a stored file."""
    
    path: str
    file_size: Optional[int] = Field(None, description="File size in bytes")
    last_modified: Optional[int] = Field(None, description="Unix timestamp of the last change")
    visibility: Optional[str] = Field(None, description="Either public or private")


# Storage Dependencies

def get_manager() -> FilesystemManager:
    """Get the process wide filesystem manager."""
    return get_filesystem_manager()


def get_storage_disk(
    disk: Optional[str] = None,
    manager: FilesystemManager = Depends(get_manager),
) -> Filesystem:
    """Get a storage disk instance."""
    try:
        return manager.disk(disk)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def get_default_storage(manager: FilesystemManager = Depends(get_manager)) -> Filesystem:
    """Get the default storage disk."""
    return manager.disk()


StorageDisk = Annotated[Filesystem, Depends(get_storage_disk)]
DefaultStorage = Annotated[Filesystem, Depends(get_default_storage)]


# Response helpers

def file_metadata(filesystem: Filesystem, path: str) -> FileMetadata:
    """Collect file metadata, answering 404 for missing files."""
    try:
        return FileMetadata(**filesystem.metadata(path))
    except UnableToRetrieveMetadata as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FilesystemException as e:
        raise HTTPException(status_code=400, detail=str(e))


def stream_file(filesystem: Filesystem, path: str, chunk_size: int = CHUNK_SIZE) -> StreamingResponse:
    """Stream a stored file as the response body."""
    if not filesystem.file_exists(path):
        raise HTTPException(status_code=404, detail=f"File not found: {path}")
    
    try:
        stream = filesystem.read_stream(path)
    except UnableToReadFile as e:
        raise HTTPException(status_code=404, detail=str(e))
    
    def iterate() -> Iterator[bytes]:
        with stream:
            while True:
                chunk = stream.read(chunk_size)
                if not chunk:
                    break
                yield chunk
    
    media_type = detect_mime_type_from_path(path) or 'application/octet-stream'
    filename = path.rsplit('/', 1)[-1]
    
    return StreamingResponse(
        iterate(),
        media_type=media_type,
        headers={'Content-Disposition': f'inline; filename="{filename}"'},
    )
