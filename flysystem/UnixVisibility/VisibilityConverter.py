from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Union

from ..Exceptions import InvalidVisibilityProvided
from ..Visibility import Visibility

WORLD_READABLE = 0o004
PERMISSION_BITS = 0o777


class VisibilityConverter(ABC):
    """Maps abstract visibility to unix permission bits and back."""
    
    @abstractmethod
    def for_file(self, visibility: Union[str, Visibility]) -> int:
        pass
    
    @abstractmethod
    def for_directory(self, visibility: Union[str, Visibility]) -> int:
        pass
    
    @abstractmethod
    def inverse_for_file(self, mode: int) -> str:
        pass
    
    @abstractmethod
    def inverse_for_directory(self, mode: int) -> str:
        pass
    
    @abstractmethod
    def default_for_directories(self) -> int:
        pass


class PortableVisibilityConverter(VisibilityConverter):
    """Visibility converter with the portable 0644/0600/0755/0700 defaults.
    
    Modes that match neither configured value are classified by the
    world-readable bit, so the inverse mapping never fails.
    """
    
    def __init__(
        self,
        file_public: int = 0o644,
        file_private: int = 0o600,
        directory_public: int = 0o755,
        directory_private: int = 0o700,
        default_for_directories: Union[str, Visibility] = Visibility.PRIVATE,
    ) -> None:
        self.file_public = file_public
        self.file_private = file_private
        self.directory_public = directory_public
        self.directory_private = directory_private
        self.default_directory_visibility = self._guard(default_for_directories)
    
    def for_file(self, visibility: Union[str, Visibility]) -> int:
        """Get the file mode for a visibility."""
        visibility = self._guard(visibility)
        return self.file_public if visibility == Visibility.PUBLIC.value else self.file_private
    
    def for_directory(self, visibility: Union[str, Visibility]) -> int:
        """Get the directory mode for a visibility."""
        visibility = self._guard(visibility)
        return self.directory_public if visibility == Visibility.PUBLIC.value else self.directory_private
    
    def inverse_for_file(self, mode: int) -> str:
        """Classify file permission bits as public or private."""
        return self._inverse(mode, self.file_public, self.file_private)
    
    def inverse_for_directory(self, mode: int) -> str:
        """Classify directory permission bits as public or private."""
        return self._inverse(mode, self.directory_public, self.directory_private)
    
    def default_for_directories(self) -> int:
        """Get the mode used for directories created without a visibility."""
        return self.for_directory(self.default_directory_visibility)
    
    def _inverse(self, mode: int, public: int, private: int) -> str:
        # File-type bits (e.g. the directory bit from a stat mode) are ignored.
        mode &= PERMISSION_BITS
        
        if mode == public & PERMISSION_BITS:
            return Visibility.PUBLIC.value
        if mode == private & PERMISSION_BITS:
            return Visibility.PRIVATE.value
        
        return Visibility.PUBLIC.value if mode & WORLD_READABLE else Visibility.PRIVATE.value
    
    @staticmethod
    def _guard(visibility: Union[str, Visibility]) -> str:
        value = visibility.value if isinstance(visibility, Visibility) else visibility
        if value not in Visibility.values():
            raise InvalidVisibilityProvided(str(value), Visibility.values())
        return value
    
    @classmethod
    def from_dict(
        cls,
        permissions: Mapping[str, Mapping[str, int]],
        default_for_directories: Union[str, Visibility] = Visibility.PRIVATE,
    ) -> PortableVisibilityConverter:
        """Build a converter from {'file': {...}, 'dir': {...}} permission maps."""
        file_permissions: Mapping[str, int] = permissions.get('file', {})
        dir_permissions: Mapping[str, int] = permissions.get('dir', {})
        
        return cls(
            file_public=file_permissions.get('public', 0o644),
            file_private=file_permissions.get('private', 0o600),
            directory_public=dir_permissions.get('public', 0o755),
            directory_private=dir_permissions.get('private', 0o700),
            default_for_directories=default_for_directories,
        )
