from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Union

from .Config import Config
from .StorageAttributes import FileAttributes, StorageAttributes


class FilesystemAdapter(ABC):
    """Uniform contract every storage backend implements.

    Paths are logical paths relative to the adapter root. Failures are
    reported through the exceptions in ``flysystem.Exceptions``.
    """

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if a file exists."""
        pass

    @abstractmethod
    def write(self, path: str, contents: Union[str, bytes], config: Config) -> None:
        """Write contents to a file."""
        pass

    @abstractmethod
    def write_stream(self, path: str, contents: BinaryIO, config: Config) -> None:
        """Write a binary stream to a file."""
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Read the full contents of a file."""
        pass

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """Open a file as a binary stream positioned at the start."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete a file."""
        pass

    @abstractmethod
    def delete_directory(self, path: str) -> None:
        """Delete a directory and everything below it."""
        pass

    @abstractmethod
    def create_directory(self, path: str, config: Config) -> None:
        """Create a directory including missing parents."""
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: str) -> None:
        """Change the visibility of a file."""
        pass

    @abstractmethod
    def visibility(self, path: str) -> FileAttributes:
        """Get file attributes carrying the visibility."""
        pass

    @abstractmethod
    def mime_type(self, path: str) -> FileAttributes:
        """Get file attributes carrying the MIME type."""
        pass

    @abstractmethod
    def last_modified(self, path: str) -> FileAttributes:
        """Get file attributes carrying the last modified timestamp."""
        pass

    @abstractmethod
    def file_size(self, path: str) -> FileAttributes:
        """Get file attributes carrying the file size."""
        pass

    @abstractmethod
    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """Lazily list the contents of a directory."""
        pass

    @abstractmethod
    def move(self, source: str, destination: str, config: Config) -> None:
        """Move a file."""
        pass

    @abstractmethod
    def copy(self, source: str, destination: str, config: Config) -> None:
        """Copy a file."""
        pass
