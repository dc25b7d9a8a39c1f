from __future__ import annotations

import logging
from typing import Any, BinaryIO, Callable, Dict, List, Mapping, Optional, Union

from .Config import Config
from .Filesystem import DirectoryListing, Filesystem
from .FilesystemAdapter import FilesystemAdapter

DiskConfig = Dict[str, Any]
DriverCreator = Callable[[DiskConfig], FilesystemAdapter]


class FilesystemManager:
    """Laravel-style filesystem manager."""
    
    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        if config is None:
            config = self._load_default_config()
        
        self._config: Dict[str, Any] = dict(config)
        self._disks: Dict[str, Filesystem] = {}
        self._custom_drivers: Dict[str, DriverCreator] = {}
        self._default_disk: str = self._config.get('default', 'memory')
        self.logger = logging.getLogger(self.__class__.__name__)
    
    @staticmethod
    def _load_default_config() -> Dict[str, Any]:
        from config import filesystems
        return {'default': filesystems.default, 'disks': filesystems.disks}
    
    def disk(self, name: Optional[str] = None) -> Filesystem:
        """Get a filesystem disk."""
        name = name or self._default_disk
        
        if name not in self._disks:
            self._disks[name] = self._create_disk(name)
        
        return self._disks[name]
    
    def _create_disk(self, name: str) -> Filesystem:
        """Create a filesystem disk."""
        disks: Dict[str, DiskConfig] = self._config.get('disks', {})
        
        if name not in disks:
            raise ValueError(f"Filesystem disk '{name}' is not configured")
        
        config = dict(disks[name])
        driver = config.get('driver', 'memory')
        
        if driver in self._custom_drivers:
            adapter = self._custom_drivers[driver](config)
        elif driver == 'ftp':
            adapter = self._create_ftp_adapter(config)
        elif driver == 'memory':
            adapter = self._create_memory_adapter(config)
        else:
            raise ValueError(f"Filesystem driver '{driver}' not supported")
        
        self.logger.debug(f"Created disk {name} using the {driver} driver")
        return Filesystem(adapter, self._default_options(config))
    
    def _create_ftp_adapter(self, config: DiskConfig) -> FilesystemAdapter:
        """Create FTP filesystem adapter."""
        from .Ftp import FtpAdapter, FtpConnectionOptions
        from .UnixVisibility import PortableVisibilityConverter
        
        visibility_converter = PortableVisibilityConverter.from_dict(
            config.get('permissions', {}),
            config.get('directory_visibility', 'private'),
        )
        return FtpAdapter(FtpConnectionOptions.from_dict(config), visibility_converter=visibility_converter)
    
    def _create_memory_adapter(self, config: DiskConfig) -> FilesystemAdapter:
        """Create memory filesystem adapter."""
        from .InMemory import InMemoryFilesystemAdapter
        
        return InMemoryFilesystemAdapter(config.get('visibility', 'public'))
    
    @staticmethod
    def _default_options(config: DiskConfig) -> Dict[str, Any]:
        return {
            key: config[key]
            for key in (Config.OPTION_VISIBILITY, Config.OPTION_DIRECTORY_VISIBILITY)
            if config.get(key)
        }
    
    def get_default_driver(self) -> str:
        """Get the default filesystem disk."""
        return self._default_disk
    
    def set_default_driver(self, name: str) -> None:
        """Set the default filesystem disk."""
        self._default_disk = name
    
    def extend(self, driver: str, creator: DriverCreator) -> None:
        """Register a custom filesystem driver."""
        self._custom_drivers[driver] = creator
    
    def forget_disk(self, name: str) -> None:
        """Drop a cached disk so it is rebuilt on next use."""
        self._disks.pop(name, None)
    
    def disk_config(self, disk: Optional[str] = None) -> Dict[str, Any]:
        """Get the configuration of a disk."""
        disk = disk or self._default_disk
        return dict(self._config.get('disks', {}).get(disk, {}))
    
    def available_drivers(self) -> List[str]:
        """Get the names of all registered drivers."""
        return ['ftp', 'memory', *self._custom_drivers]
    
    # Proxy methods to the default disk
    
    def file_exists(self, path: str) -> bool:
        return self.disk().file_exists(path)
    
    def missing(self, path: str) -> bool:
        return not self.disk().file_exists(path)
    
    def read(self, path: str) -> bytes:
        return self.disk().read(path)
    
    def read_stream(self, path: str) -> BinaryIO:
        return self.disk().read_stream(path)
    
    def write(self, path: str, contents: Union[str, bytes], config: Optional[Mapping[str, Any]] = None) -> None:
        self.disk().write(path, contents, config)
    
    def write_stream(self, path: str, contents: BinaryIO, config: Optional[Mapping[str, Any]] = None) -> None:
        self.disk().write_stream(path, contents, config)
    
    def delete(self, path: str) -> None:
        self.disk().delete(path)
    
    def delete_directory(self, path: str) -> None:
        self.disk().delete_directory(path)
    
    def create_directory(self, path: str, config: Optional[Mapping[str, Any]] = None) -> None:
        self.disk().create_directory(path, config)
    
    def list_contents(self, path: str = '', deep: bool = False) -> DirectoryListing:
        return self.disk().list_contents(path, deep)
    
    def move(self, source: str, destination: str, config: Optional[Mapping[str, Any]] = None) -> None:
        self.disk().move(source, destination, config)
    
    def copy(self, source: str, destination: str, config: Optional[Mapping[str, Any]] = None) -> None:
        self.disk().copy(source, destination, config)
    
    def file_size(self, path: str) -> Optional[int]:
        return self.disk().file_size(path)
    
    def last_modified(self, path: str) -> Optional[int]:
        return self.disk().last_modified(path)
    
    def mime_type(self, path: str) -> Optional[str]:
        return self.disk().mime_type(path)
    
    def visibility(self, path: str) -> Optional[str]:
        return self.disk().visibility(path)
    
    def set_visibility(self, path: str, visibility: str) -> None:
        self.disk().set_visibility(path, visibility)


# Global filesystem manager instance
filesystem_manager_instance: Optional[FilesystemManager] = None


def get_filesystem_manager() -> FilesystemManager:
    """Get the global filesystem manager instance."""
    global filesystem_manager_instance
    if filesystem_manager_instance is None:
        filesystem_manager_instance = FilesystemManager()
    return filesystem_manager_instance


def storage(disk: Optional[str] = None) -> Filesystem:
    """Get a filesystem disk."""
    return get_filesystem_manager().disk(disk)
