from __future__ import annotations

from typing import Any, BinaryIO, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, TypeVar, Union

from .Config import Config
from .FilesystemAdapter import FilesystemAdapter
from .PathNormalizer import PathNormalizer, WhitespacePathNormalizer
from .StorageAttributes import StorageAttributes

T = TypeVar('T')


class DirectoryListing:
    """Lazy, chainable wrapper around a listing generator."""
    
    def __init__(self, listing: Iterable[Any]) -> None:
        self._listing = listing
    
    def filter(self, predicate: Callable[[Any], bool]) -> DirectoryListing:
        return DirectoryListing(item for item in self._listing if predicate(item))
    
    def map(self, callback: Callable[[Any], T]) -> DirectoryListing:
        return DirectoryListing(callback(item) for item in self._listing)
    
    def sort_by_path(self) -> DirectoryListing:
        """Sort the listing by path. Consumes the underlying generator."""
        return DirectoryListing(sorted(self._listing, key=lambda item: item.path))
    
    def to_list(self) -> List[Any]:
        return list(self._listing)
    
    def __iter__(self) -> Iterator[Any]:
        return iter(self._listing)


class Filesystem:
    """Caller facing filesystem operating on a single adapter.
    
    Every path is normalized before it reaches the adapter and per-call
    options are merged over the disk defaults.
    """
    
    def __init__(
        self,
        adapter: FilesystemAdapter,
        config: Optional[Mapping[str, Any]] = None,
        path_normalizer: Optional[PathNormalizer] = None,
    ) -> None:
        self.adapter = adapter
        self.config = Config(config)
        self.path_normalizer = path_normalizer or WhitespacePathNormalizer()
    
    def _path(self, path: str) -> str:
        return self.path_normalizer.normalize_path(path)
    
    def _config(self, config: Optional[Mapping[str, Any]]) -> Config:
        return self.config.extend(config or {})
    
    def get_adapter(self) -> FilesystemAdapter:
        """Get the underlying adapter."""
        return self.adapter
    
    def file_exists(self, location: str) -> bool:
        return self.adapter.file_exists(self._path(location))
    
    def write(self, location: str, contents: Union[str, bytes], config: Optional[Mapping[str, Any]] = None) -> None:
        self.adapter.write(self._path(location), contents, self._config(config))
    
    def write_stream(self, location: str, contents: BinaryIO, config: Optional[Mapping[str, Any]] = None) -> None:
        self.adapter.write_stream(self._path(location), contents, self._config(config))
    
    def read(self, location: str) -> bytes:
        return self.adapter.read(self._path(location))
    
    def read_stream(self, location: str) -> BinaryIO:
        return self.adapter.read_stream(self._path(location))
    
    def delete(self, location: str) -> None:
        self.adapter.delete(self._path(location))
    
    def delete_directory(self, location: str) -> None:
        self.adapter.delete_directory(self._path(location))
    
    def create_directory(self, location: str, config: Optional[Mapping[str, Any]] = None) -> None:
        self.adapter.create_directory(self._path(location), self._config(config))
    
    def list_contents(self, location: str = '', deep: bool = False) -> DirectoryListing:
        """List a directory, optionally recursively."""
        return DirectoryListing(self.adapter.list_contents(self._path(location), deep))
    
    def move(self, source: str, destination: str, config: Optional[Mapping[str, Any]] = None) -> None:
        self.adapter.move(self._path(source), self._path(destination), self._config(config))
    
    def copy(self, source: str, destination: str, config: Optional[Mapping[str, Any]] = None) -> None:
        self.adapter.copy(self._path(source), self._path(destination), self._config(config))
    
    def last_modified(self, path: str) -> Optional[int]:
        """Get last modified timestamp."""
        return self.adapter.last_modified(self._path(path)).last_modified
    
    def file_size(self, path: str) -> Optional[int]:
        """Get file size."""
        return self.adapter.file_size(self._path(path)).file_size
    
    def mime_type(self, path: str) -> Optional[str]:
        """Get file MIME type."""
        return self.adapter.mime_type(self._path(path)).mime_type
    
    def set_visibility(self, path: str, visibility: str) -> None:
        self.adapter.set_visibility(self._path(path), visibility)
    
    def visibility(self, path: str) -> Optional[str]:
        """Get file visibility."""
        return self.adapter.visibility(self._path(path)).visibility
    
    def metadata(self, path: str) -> Dict[str, Any]:
        """Collect size, timestamp and visibility of a file in one dict."""
        path = self._path(path)
        return {
            StorageAttributes.ATTRIBUTE_PATH: path,
            StorageAttributes.ATTRIBUTE_FILE_SIZE: self.adapter.file_size(path).file_size,
            StorageAttributes.ATTRIBUTE_LAST_MODIFIED: self.adapter.last_modified(path).last_modified,
            StorageAttributes.ATTRIBUTE_VISIBILITY: self.adapter.visibility(path).visibility,
        }
