from __future__ import annotations

import posixpath
from typing import BinaryIO, Dict, Iterator, List, Union

from ..Config import Config
from ..Exceptions import (
    InvalidStreamProvided,
    UnableToCopyFile,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
)
from ..FilesystemAdapter import FilesystemAdapter
from ..StorageAttributes import DirectoryAttributes, FileAttributes, StorageAttributes
from ..Visibility import Visibility
from .InMemoryFile import InMemoryFile

# Written by create_directory so that empty directories show up in listings.
DIRECTORY_PLACEHOLDER = '______DUMMY_FILE_FOR_FORCED_LISTING'


class InMemoryFilesystemAdapter(FilesystemAdapter):
    """In-memory filesystem adapter for testing."""
    
    def __init__(self, default_visibility: str = Visibility.PUBLIC.value) -> None:
        self.default_visibility = default_visibility
        self._files: Dict[str, InMemoryFile] = {}
    
    def _prepare_path(self, path: str) -> str:
        return '/' + path.lstrip('/')
    
    def _get_file(self, path: str) -> InMemoryFile:
        return self._files[self._prepare_path(path)]
    
    def file_exists(self, path: str) -> bool:
        """Check if file exists."""
        return self._prepare_path(path) in self._files
    
    def write(self, path: str, contents: Union[str, bytes], config: Config) -> None:
        """Store a file."""
        if isinstance(contents, str):
            contents = contents.encode('utf-8')
        
        key = self._prepare_path(path)
        file = self._files.get(key)
        
        if file is None:
            file = self._files[key] = InMemoryFile(visibility=self.default_visibility)
        
        file.update_contents(contents)
        
        visibility = config.get(Config.OPTION_VISIBILITY)
        if visibility:
            file.set_visibility(visibility)
    
    def write_stream(self, path: str, contents: BinaryIO, config: Config) -> None:
        """Store a file from a stream."""
        if not hasattr(contents, 'read'):
            raise InvalidStreamProvided(f"Expected a readable binary stream for {path}, got {type(contents).__name__}.")
        
        self.write(path, contents.read(), config)
    
    def read(self, path: str) -> bytes:
        """Get file contents."""
        try:
            return self._get_file(path).read()
        except KeyError:
            raise UnableToReadFile.from_location(path, 'file does not exist')
    
    def read_stream(self, path: str) -> BinaryIO:
        """Get a stream for file contents."""
        try:
            return self._get_file(path).read_stream()
        except KeyError:
            raise UnableToReadFile.from_location(path, 'file does not exist')
    
    def delete(self, path: str) -> None:
        """Delete a file."""
        self._files.pop(self._prepare_path(path), None)
    
    def delete_directory(self, path: str) -> None:
        """Delete every file below a directory."""
        prefix = self._prepare_path(path).rstrip('/') + '/'
        
        for key in [key for key in self._files if key.startswith(prefix)]:
            del self._files[key]
    
    def create_directory(self, path: str, config: Config) -> None:
        """Create a directory by writing a hidden placeholder into it."""
        directory_config = Config({Config.OPTION_VISIBILITY: config.get(Config.OPTION_DIRECTORY_VISIBILITY)})
        self.write(path.rstrip('/') + '/' + DIRECTORY_PLACEHOLDER, b'', directory_config)
    
    def set_visibility(self, path: str, visibility: str) -> None:
        """Set the visibility of a file."""
        try:
            file = self._get_file(path)
        except KeyError:
            raise UnableToSetVisibility.at_location(path, 'file does not exist')
        
        file.set_visibility(visibility)
    
    def visibility(self, path: str) -> FileAttributes:
        """Get file visibility."""
        try:
            file = self._get_file(path)
        except KeyError:
            raise UnableToRetrieveMetadata.visibility(path, 'file does not exist')
        
        return FileAttributes(path, visibility=file.visibility())
    
    def mime_type(self, path: str) -> FileAttributes:
        """Get file MIME type."""
        try:
            file = self._get_file(path)
        except KeyError:
            raise UnableToRetrieveMetadata.mime_type(path, 'file does not exist')
        
        mime_type = file.mime_type(path)
        if mime_type is None:
            raise UnableToRetrieveMetadata.mime_type(path, 'unknown mime type')
        
        return FileAttributes(path, mime_type=mime_type)
    
    def last_modified(self, path: str) -> FileAttributes:
        """Get last modified timestamp."""
        try:
            file = self._get_file(path)
        except KeyError:
            raise UnableToRetrieveMetadata.last_modified(path, 'file does not exist')
        
        return FileAttributes(path, last_modified=file.last_modified())
    
    def file_size(self, path: str) -> FileAttributes:
        """Get file size."""
        try:
            file = self._get_file(path)
        except KeyError:
            raise UnableToRetrieveMetadata.file_size(path, 'file does not exist')
        
        return FileAttributes(path, file_size=file.file_size())
    
    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """List files, deriving directory entries from the stored paths."""
        prefix = self._prepare_path(path).rstrip('/') + '/'
        listed_directories: List[str] = []
        
        for key in list(self._files):
            if not key.startswith(prefix):
                continue
            
            sub_path = key[len(prefix):]
            dirname = posixpath.dirname(sub_path)
            
            if dirname:
                dir_path = ''
                
                for index, part in enumerate(dirname.split('/')):
                    if not deep and index >= 1:
                        break
                    
                    dir_path += part + '/'
                    
                    if dir_path not in listed_directories:
                        listed_directories.append(dir_path)
                        yield DirectoryAttributes((prefix + dir_path).strip('/'))
            
            if key.endswith(DIRECTORY_PLACEHOLDER):
                continue
            
            if deep or '/' not in sub_path:
                file = self._files[key]
                yield FileAttributes(
                    key,
                    file_size=file.file_size(),
                    visibility=file.visibility(),
                    last_modified=file.last_modified(),
                )
    
    def move(self, source: str, destination: str, config: Config) -> None:
        """Move a file. The destination must not exist yet."""
        if not self.file_exists(source) or self.file_exists(destination):
            raise UnableToMoveFile.from_location_to(source, destination)
        
        self._files[self._prepare_path(destination)] = self._files.pop(self._prepare_path(source))
    
    def copy(self, source: str, destination: str, config: Config) -> None:
        """Copy a file."""
        if not self.file_exists(source):
            raise UnableToCopyFile.from_location_to(source, destination, 'file does not exist')
        
        clone = self._get_file(source).copy()
        visibility = config.get(Config.OPTION_VISIBILITY)
        if visibility:
            clone.set_visibility(visibility)
        
        self._files[self._prepare_path(destination)] = clone
