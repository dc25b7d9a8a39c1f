from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from .Visibility import Visibility


class StorageAttributes(ABC):
    """Metadata record for a single entry of a filesystem listing."""

    TYPE_FILE = 'file'
    TYPE_DIRECTORY = 'dir'

    ATTRIBUTE_PATH = 'path'
    ATTRIBUTE_TYPE = 'type'
    ATTRIBUTE_FILE_SIZE = 'file_size'
    ATTRIBUTE_VISIBILITY = 'visibility'
    ATTRIBUTE_LAST_MODIFIED = 'last_modified'
    ATTRIBUTE_MIME_TYPE = 'mime_type'
    ATTRIBUTE_EXTRA_METADATA = 'extra_metadata'

    path: str
    visibility: Optional[str]

    @property
    @abstractmethod
    def type(self) -> str:
        """Get the entry type, either 'file' or 'dir'."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialize the attributes to a JSON-compatible dict."""
        pass

    def is_file(self) -> bool:
        return self.type == self.TYPE_FILE

    def is_dir(self) -> bool:
        return self.type == self.TYPE_DIRECTORY

    def with_path(self, path: str) -> StorageAttributes:
        """Get a copy of the attributes for another path."""
        return replace(self, path=path)  # type: ignore[type-var]

    def __getitem__(self, key: str) -> Any:
        return self.to_dict()[key]

    def _normalize(self) -> None:
        object.__setattr__(self, 'path', self.path.lstrip('/'))
        if isinstance(self.visibility, Visibility):
            object.__setattr__(self, 'visibility', self.visibility.value)

    @classmethod
    def from_dict(cls, attributes: Mapping[str, Any]) -> StorageAttributes:
        """Rebuild attributes from their serialized form."""
        if attributes.get(cls.ATTRIBUTE_TYPE) == cls.TYPE_DIRECTORY:
            return DirectoryAttributes.from_dict(attributes)
        return FileAttributes.from_dict(attributes)


@dataclass(frozen=True)
class FileAttributes(StorageAttributes):
    """Attributes of a file."""

    path: str
    file_size: Optional[int] = None
    visibility: Optional[str] = None
    last_modified: Optional[int] = None
    mime_type: Optional[str] = None
    extra_metadata: Dict[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        self._normalize()

    @property
    def type(self) -> str:
        return self.TYPE_FILE

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.ATTRIBUTE_TYPE: self.TYPE_FILE,
            self.ATTRIBUTE_PATH: self.path,
            self.ATTRIBUTE_FILE_SIZE: self.file_size,
            self.ATTRIBUTE_VISIBILITY: self.visibility,
            self.ATTRIBUTE_LAST_MODIFIED: self.last_modified,
            self.ATTRIBUTE_MIME_TYPE: self.mime_type,
            self.ATTRIBUTE_EXTRA_METADATA: dict(self.extra_metadata),
        }

    @classmethod
    def from_dict(cls, attributes: Mapping[str, Any]) -> FileAttributes:
        return cls(
            path=attributes[cls.ATTRIBUTE_PATH],
            file_size=attributes.get(cls.ATTRIBUTE_FILE_SIZE),
            visibility=attributes.get(cls.ATTRIBUTE_VISIBILITY),
            last_modified=attributes.get(cls.ATTRIBUTE_LAST_MODIFIED),
            mime_type=attributes.get(cls.ATTRIBUTE_MIME_TYPE),
            extra_metadata=dict(attributes.get(cls.ATTRIBUTE_EXTRA_METADATA) or {}),
        )


@dataclass(frozen=True)
class DirectoryAttributes(StorageAttributes):
    """Attributes of a directory. Directories never carry size or MIME type."""

    path: str
    visibility: Optional[str] = None

    def __post_init__(self) -> None:
        self._normalize()

    @property
    def type(self) -> str:
        return self.TYPE_DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.ATTRIBUTE_TYPE: self.TYPE_DIRECTORY,
            self.ATTRIBUTE_PATH: self.path,
            self.ATTRIBUTE_VISIBILITY: self.visibility,
        }

    @classmethod
    def from_dict(cls, attributes: Mapping[str, Any]) -> DirectoryAttributes:
        return cls(
            path=attributes[cls.ATTRIBUTE_PATH],
            visibility=attributes.get(cls.ATTRIBUTE_VISIBILITY),
        )
