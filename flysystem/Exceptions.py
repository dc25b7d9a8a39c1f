from __future__ import annotations

from typing import List, Optional


class FilesystemException(Exception):
    """Base exception for every filesystem error."""
    pass


class FilesystemOperationFailed(FilesystemException):
    """A backend rejected or botched a specific operation."""

    OPERATION_WRITE = 'WRITE'
    OPERATION_UPDATE = 'UPDATE'
    OPERATION_FILE_EXISTS = 'FILE_EXISTS'
    OPERATION_CREATE_DIRECTORY = 'CREATE_DIRECTORY'
    OPERATION_DELETE = 'DELETE'
    OPERATION_DELETE_DIRECTORY = 'DELETE_DIRECTORY'
    OPERATION_MOVE = 'MOVE'
    OPERATION_RETRIEVE_METADATA = 'RETRIEVE_METADATA'
    OPERATION_COPY = 'COPY'
    OPERATION_READ = 'READ'
    OPERATION_SET_VISIBILITY = 'SET_VISIBILITY'
    OPERATION_LIST_CONTENTS = 'LIST_CONTENTS'

    operation_name: str = ''

    def __init__(self, message: str, location: str = '', reason: str = '') -> None:
        self.location = location
        self.reason = reason
        super().__init__(message)

    def operation(self) -> str:
        """Get the name of the failed operation."""
        return self.operation_name


def _with_reason(message: str, reason: str) -> str:
    return f"{message} {reason}".rstrip() if reason else message


class UnableToWriteFile(FilesystemOperationFailed):
    """Raised when a file could not be written."""

    operation_name = FilesystemOperationFailed.OPERATION_WRITE

    @classmethod
    def at_location(cls, location: str, reason: str = '') -> UnableToWriteFile:
        return cls(_with_reason(f"Unable to write file at location: {location}.", reason), location, reason)


class UnableToReadFile(FilesystemOperationFailed):
    """Raised when a file could not be read."""

    operation_name = FilesystemOperationFailed.OPERATION_READ

    @classmethod
    def from_location(cls, location: str, reason: str = '') -> UnableToReadFile:
        return cls(_with_reason(f"Unable to read file from location: {location}.", reason), location, reason)


class UnableToDeleteFile(FilesystemOperationFailed):
    """Raised when a file could not be deleted."""

    operation_name = FilesystemOperationFailed.OPERATION_DELETE

    @classmethod
    def at_location(cls, location: str, reason: str = '') -> UnableToDeleteFile:
        return cls(_with_reason(f"Unable to delete file located at: {location}.", reason), location, reason)


class UnableToDeleteDirectory(FilesystemOperationFailed):
    """Raised when a directory tree could not be removed."""

    operation_name = FilesystemOperationFailed.OPERATION_DELETE_DIRECTORY

    @classmethod
    def at_location(cls, location: str, reason: str = '') -> UnableToDeleteDirectory:
        return cls(_with_reason(f"Unable to delete directory located at: {location}.", reason), location, reason)


class UnableToCreateDirectory(FilesystemOperationFailed):
    """Raised when a directory could not be created."""

    operation_name = FilesystemOperationFailed.OPERATION_CREATE_DIRECTORY

    @classmethod
    def at_location(cls, location: str, reason: str = '') -> UnableToCreateDirectory:
        return cls(_with_reason(f"Unable to create a directory at {location}.", reason), location, reason)


class UnableToSetVisibility(FilesystemOperationFailed):
    """Raised when the visibility of a file could not be changed."""

    operation_name = FilesystemOperationFailed.OPERATION_SET_VISIBILITY

    @classmethod
    def at_location(cls, location: str, reason: str = '') -> UnableToSetVisibility:
        return cls(_with_reason(f"Unable to set visibility for file {location}.", reason), location, reason)


class UnableToListContents(FilesystemOperationFailed):
    """Raised when a directory listing could not be retrieved."""

    operation_name = FilesystemOperationFailed.OPERATION_LIST_CONTENTS

    @classmethod
    def at_location(cls, location: str, deep: bool, reason: str = '') -> UnableToListContents:
        kind = 'deep' if deep else 'shallow'
        return cls(_with_reason(f"Unable to list contents for '{location}', {kind} listing.", reason), location, reason)


class UnableToMoveFile(FilesystemOperationFailed):
    """Raised when a file could not be moved."""

    operation_name = FilesystemOperationFailed.OPERATION_MOVE

    def __init__(self, message: str, source: str = '', destination: str = '', reason: str = '') -> None:
        self.source = source
        self.destination = destination
        super().__init__(message, source, reason)

    @classmethod
    def from_location_to(cls, source: str, destination: str, reason: str = '') -> UnableToMoveFile:
        message = _with_reason(f"Unable to move file from {source} to {destination}.", reason)
        return cls(message, source, destination, reason)


class UnableToCopyFile(FilesystemOperationFailed):
    """Raised when a file could not be copied."""

    operation_name = FilesystemOperationFailed.OPERATION_COPY

    def __init__(self, message: str, source: str = '', destination: str = '', reason: str = '') -> None:
        self.source = source
        self.destination = destination
        super().__init__(message, source, reason)

    @classmethod
    def from_location_to(cls, source: str, destination: str, reason: str = '') -> UnableToCopyFile:
        message = _with_reason(f"Unable to copy file from {source} to {destination}.", reason)
        return cls(message, source, destination, reason)


class UnableToRetrieveMetadata(FilesystemOperationFailed):
    """Raised when size, timestamp, visibility or MIME type is unavailable."""

    operation_name = FilesystemOperationFailed.OPERATION_RETRIEVE_METADATA

    def __init__(self, message: str, location: str = '', metadata_type: str = '', reason: str = '') -> None:
        self.metadata_type = metadata_type
        super().__init__(message, location, reason)

    @classmethod
    def create(cls, location: str, metadata_type: str, reason: str = '') -> UnableToRetrieveMetadata:
        message = _with_reason(f"Unable to retrieve the {metadata_type} for file at location: {location}.", reason)
        return cls(message, location, metadata_type, reason)

    @classmethod
    def file_size(cls, location: str, reason: str = '') -> UnableToRetrieveMetadata:
        return cls.create(location, 'file_size', reason)

    @classmethod
    def last_modified(cls, location: str, reason: str = '') -> UnableToRetrieveMetadata:
        return cls.create(location, 'last_modified', reason)

    @classmethod
    def visibility(cls, location: str, reason: str = '') -> UnableToRetrieveMetadata:
        return cls.create(location, 'visibility', reason)

    @classmethod
    def mime_type(cls, location: str, reason: str = '') -> UnableToRetrieveMetadata:
        return cls.create(location, 'mime_type', reason)


class InvalidVisibilityProvided(FilesystemException, ValueError):
    """Raised when a visibility other than public/private is requested."""

    def __init__(self, visibility: str, allowed: List[str]) -> None:
        self.visibility = visibility
        allowed_str = ", ".join(allowed)
        super().__init__(f"Invalid visibility provided. Expected one of [{allowed_str}], received '{visibility}'.")


class InvalidStreamProvided(FilesystemException, ValueError):
    """Raised when a write stream is not a readable binary stream."""
    pass


class PathTraversalDetected(FilesystemException):
    """Raised when a path resolves outside of the filesystem root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path traversal detected: {path}")


class CorruptedPathDetected(FilesystemException):
    """Raised when a path contains control characters."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        super().__init__(reason or f"Corrupted path detected: {path}")
