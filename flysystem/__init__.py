from __future__ import annotations

from .Config import Config
from .Exceptions import (
    CorruptedPathDetected,
    FilesystemException,
    FilesystemOperationFailed,
    InvalidStreamProvided,
    InvalidVisibilityProvided,
    PathTraversalDetected,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToListContents,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from .Filesystem import DirectoryListing, Filesystem
from .FilesystemAdapter import FilesystemAdapter
from .FilesystemManager import FilesystemManager, get_filesystem_manager, storage
from .PathNormalizer import PathNormalizer, WhitespacePathNormalizer
from .PathPrefixer import PathPrefixer
from .StorageAttributes import DirectoryAttributes, FileAttributes, StorageAttributes
from .Visibility import Visibility

__all__ = [
    'Config',
    'Filesystem',
    'DirectoryListing',
    'FilesystemAdapter',
    'FilesystemManager',
    'get_filesystem_manager',
    'storage',
    'PathNormalizer',
    'WhitespacePathNormalizer',
    'PathPrefixer',
    'StorageAttributes',
    'FileAttributes',
    'DirectoryAttributes',
    'Visibility',
    'FilesystemException',
    'FilesystemOperationFailed',
    'UnableToWriteFile',
    'UnableToReadFile',
    'UnableToDeleteFile',
    'UnableToDeleteDirectory',
    'UnableToCreateDirectory',
    'UnableToSetVisibility',
    'UnableToListContents',
    'UnableToMoveFile',
    'UnableToCopyFile',
    'UnableToRetrieveMetadata',
    'InvalidVisibilityProvided',
    'InvalidStreamProvided',
    'PathTraversalDetected',
    'CorruptedPathDetected',
]
