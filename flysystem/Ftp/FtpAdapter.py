from __future__ import annotations

import contextlib
import ftplib
import io
import logging
import posixpath
import tempfile
from datetime import datetime, timezone
from enum import Enum
from types import TracebackType
from typing import BinaryIO, Iterator, List, Optional, Type, Union

from ..Config import Config
from ..Exceptions import (
    FilesystemException,
    InvalidStreamProvided,
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
from ..FilesystemAdapter import FilesystemAdapter
from ..MimeType import detect_mime_type
from ..PathPrefixer import PathPrefixer
from ..StorageAttributes import DirectoryAttributes, FileAttributes, StorageAttributes
from ..UnixVisibility import PortableVisibilityConverter, VisibilityConverter
from .ConnectionProvider import ConnectionProvider, FtpConnectionProvider
from .ConnectivityChecker import ConnectivityChecker, NoopCommandConnectivityChecker
from .Exceptions import UnableToConnectToFtpHost
from .FtpConnectionOptions import FTP_ASCII, FtpConnectionOptions
from .ListingParser import ListingParser

# A stale session is replaced at most once per operation.
MAX_CONNECTION_ATTEMPTS = 2

# Downloads larger than this spill from memory to a temporary file.
TEMPORARY_STREAM_MAX_SIZE = 2 * 1024 * 1024


class ConnectionState(Enum):
    """Lifecycle of the adapter's FTP session."""
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    CONNECTED = 'connected'


class FtpAdapter(FilesystemAdapter):
    """FTP filesystem adapter.

    The adapter owns a single lazily opened session. Before every operation the
    session is validated with the connectivity checker and replaced once when
    it went stale. Instances are not thread-safe; use one adapter per
    concurrent caller.
    """

    def __init__(
        self,
        connection_options: FtpConnectionOptions,
        connection_provider: Optional[ConnectionProvider] = None,
        connectivity_checker: Optional[ConnectivityChecker] = None,
        visibility_converter: Optional[VisibilityConverter] = None,
    ) -> None:
        self.connection_options = connection_options
        self.connection_provider = connection_provider or FtpConnectionProvider()
        self.connectivity_checker = connectivity_checker or NoopCommandConnectivityChecker()
        self.visibility_converter = visibility_converter or PortableVisibilityConverter()
        self.prefixer = PathPrefixer(connection_options.root)
        self.listing_parser = ListingParser(
            self.visibility_converter,
            timestamps_on_unix_listings_enabled=connection_options.timestamps_on_unix_listings_enabled,
            system_type=connection_options.system_type,
        )
        self.state = ConnectionState.DISCONNECTED
        self._connection: Optional[ftplib.FTP] = None
        self._is_pure_ftpd_server: Optional[bool] = None

        self.logger = logging.getLogger(self.__class__.__name__)

    # Connection lifecycle

    def connection(self) -> ftplib.FTP:
        """Get a validated session whose working directory is the root."""
        for _ in range(MAX_CONNECTION_ATTEMPTS):
            if self._connection is None:
                self._connect()

            assert self._connection is not None
            if self.connectivity_checker.is_connected(self._connection):
                break

            self.logger.warning(f"FTP connection to {self.connection_options.host} went stale, reconnecting")
            self._discard_connection()
        else:
            raise UnableToConnectToFtpHost.for_host(
                self.connection_options.host,
                self.connection_options.port,
                self.connection_options.ssl,
                'The connection could not be validated.',
            )

        connection = self._connection
        assert connection is not None
        self._change_to_root(connection)
        return connection

    def _connect(self) -> None:
        self.state = ConnectionState.CONNECTING

        try:
            self._connection = self.connection_provider.create_connection(self.connection_options)
        except Exception:
            self.state = ConnectionState.DISCONNECTED
            raise

        self.state = ConnectionState.CONNECTED

    def _discard_connection(self) -> None:
        connection, self._connection = self._connection, None
        self.state = ConnectionState.DISCONNECTED

        if connection is not None:
            with contextlib.suppress(OSError):
                connection.close()

    def _change_to_root(self, connection: ftplib.FTP) -> None:
        try:
            connection.cwd(self.connection_options.root)
        except ftplib.all_errors as e:
            self.logger.warning(f"Unable to change to root {self.connection_options.root}: {e}")

    def disconnect(self) -> None:
        """Close the session, if any."""
        if self._connection is not None:
            with contextlib.suppress(*ftplib.all_errors):
                self._connection.quit()
            self.logger.debug(f"Disconnected from {self.connection_options.host}")

        self._discard_connection()

    def __enter__(self) -> FtpAdapter:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.disconnect()

    def _is_pure_ftpd(self, connection: ftplib.FTP) -> bool:
        if self._is_pure_ftpd_server is None:
            try:
                response = connection.sendcmd('HELP')
            except ftplib.error_perm:
                response = ''
            except ftplib.all_errors as e:
                # Undecided until a probe gets an answer.
                self.logger.warning(f"Unable to detect the FTP server type: {e}")
                return False
            self._is_pure_ftpd_server = 'pure-ftpd' in response.lower()

        return self._is_pure_ftpd_server

    # Files

    def file_exists(self, path: str) -> bool:
        """Check if a file exists."""
        try:
            self.file_size(path)
        except UnableToRetrieveMetadata:
            return False

        return True

    def write(self, path: str, contents: Union[str, bytes], config: Config) -> None:
        """Store a file."""
        if isinstance(contents, str):
            contents = contents.encode('utf-8')

        with io.BytesIO(contents) as stream:
            self.write_stream(path, stream, config)

    def write_stream(self, path: str, contents: BinaryIO, config: Config) -> None:
        """Store a file from a binary stream."""
        if not hasattr(contents, 'read'):
            raise InvalidStreamProvided(f"Expected a readable binary stream for {path}, got {type(contents).__name__}.")

        try:
            self._ensure_parent_directory_exists(path, config.get(Config.OPTION_DIRECTORY_VISIBILITY))
        except FilesystemException as e:
            raise UnableToWriteFile.at_location(path, 'creating parent directory failed') from e

        location = self.prefixer.prefix_path(path)
        connection = self.connection()

        try:
            self._store(connection, location, contents)
        except ftplib.all_errors as e:
            self.logger.error(f"Error putting file {path}: {e}")
            raise UnableToWriteFile.at_location(path, 'writing the file failed') from e

        visibility = config.get(Config.OPTION_VISIBILITY)
        if not visibility:
            return

        try:
            self.set_visibility(path, visibility)
        except FilesystemException as e:
            raise UnableToWriteFile.at_location(path, 'setting visibility failed') from e

    def read(self, path: str) -> bytes:
        """Get file contents."""
        with self.read_stream(path) as stream:
            return stream.read()

    def read_stream(self, path: str) -> BinaryIO:
        """Download a file into a temporary stream positioned at the start."""
        location = self.prefixer.prefix_path(path)
        connection = self.connection()
        stream = tempfile.SpooledTemporaryFile(max_size=TEMPORARY_STREAM_MAX_SIZE, mode='w+b')

        try:
            self._retrieve(connection, location, stream)
        except ftplib.all_errors as e:
            stream.close()
            self.logger.error(f"Error getting file {path}: {e}")
            raise UnableToReadFile.from_location(path, str(e)) from e

        stream.seek(0)
        return stream  # type: ignore[return-value]

    def delete(self, path: str) -> None:
        """Delete a file. Deleting a file that is already gone succeeds."""
        connection = self.connection()
        self._delete_file(path, connection)

    def _delete_file(self, path: str, connection: ftplib.FTP) -> None:
        location = self.prefixer.prefix_path(path)

        try:
            connection.delete(location)
        except ftplib.all_errors as e:
            if self._size(connection, location) != -1:
                raise UnableToDeleteFile.at_location(path, 'the file still exists') from e

    def move(self, source: str, destination: str, config: Config) -> None:
        """Move a file."""
        try:
            self._ensure_parent_directory_exists(destination, config.get(Config.OPTION_DIRECTORY_VISIBILITY))
        except FilesystemException as e:
            raise UnableToMoveFile.from_location_to(source, destination, str(e)) from e

        source_location = self.prefixer.prefix_path(source)
        destination_location = self.prefixer.prefix_path(destination)
        connection = self.connection()

        try:
            connection.rename(source_location, destination_location)
        except ftplib.all_errors as e:
            raise UnableToMoveFile.from_location_to(source, destination, str(e)) from e

    def copy(self, source: str, destination: str, config: Config) -> None:
        """Copy a file by downloading and uploading it, keeping its visibility."""
        read_stream: Optional[BinaryIO] = None

        try:
            read_stream = self.read_stream(source)
            visibility = self.visibility(source).visibility
            self.write_stream(destination, read_stream, config.extend({Config.OPTION_VISIBILITY: visibility}))
        except FilesystemException as e:
            raise UnableToCopyFile.from_location_to(source, destination, str(e)) from e
        finally:
            if read_stream is not None:
                read_stream.close()

    def set_visibility(self, path: str, visibility: str) -> None:
        """Change the permissions of a file."""
        location = self.prefixer.prefix_path(path)
        mode = self.visibility_converter.for_file(visibility)
        connection = self.connection()

        try:
            self._chmod(connection, mode, location)
        except ftplib.all_errors as e:
            raise UnableToSetVisibility.at_location(path, str(e)) from e

    # Metadata

    def file_size(self, path: str) -> FileAttributes:
        """Get file size."""
        location = self.prefixer.prefix_path(path)
        connection = self.connection()
        file_size = self._size(connection, location)

        if file_size < 0:
            raise UnableToRetrieveMetadata.file_size(path)

        return FileAttributes(path, file_size=file_size)

    def last_modified(self, path: str) -> FileAttributes:
        """Get last modified timestamp."""
        location = self.prefixer.prefix_path(path)
        connection = self.connection()
        last_modified = self._mdtm(connection, location)

        if last_modified < 0:
            raise UnableToRetrieveMetadata.last_modified(path)

        return FileAttributes(path, last_modified=last_modified)

    def visibility(self, path: str) -> FileAttributes:
        """Get the visibility of a file from its parent directory listing."""
        return self._fetch_file_metadata(path, StorageAttributes.ATTRIBUTE_VISIBILITY)

    def mime_type(self, path: str) -> FileAttributes:
        """Detect the MIME type of a file from its contents."""
        try:
            contents = self.read(path)
            mime_type = detect_mime_type(path, contents)
        except Exception as e:
            raise UnableToRetrieveMetadata.mime_type(path, str(e)) from e

        if mime_type is None:
            raise UnableToRetrieveMetadata.mime_type(path, 'unknown mime type')

        return FileAttributes(path, mime_type=mime_type)

    def _fetch_file_metadata(self, path: str, metadata_type: str) -> FileAttributes:
        path = path.lstrip('/')
        found: Optional[StorageAttributes] = None

        try:
            for attributes in self.list_contents(posixpath.dirname(path), False):
                if attributes.path == path:
                    found = attributes
                    break
        except FilesystemException as e:
            raise UnableToRetrieveMetadata.create(path, metadata_type, str(e)) from e

        if not isinstance(found, FileAttributes):
            what = 'directory found' if isinstance(found, DirectoryAttributes) else 'nothing found'
            raise UnableToRetrieveMetadata.create(path, metadata_type, f"expected file, {what}")

        return found

    # Directories

    def create_directory(self, path: str, config: Config) -> None:
        """Create a directory and any missing parents."""
        visibility = config.get(Config.OPTION_DIRECTORY_VISIBILITY, config.get(Config.OPTION_VISIBILITY))
        self._ensure_directory_exists(path, visibility)

    def delete_directory(self, path: str) -> None:
        """Delete every file below a directory, then the directories deepest first."""
        try:
            contents = list(self.list_contents(path, True))
        except FilesystemException as e:
            raise UnableToDeleteDirectory.at_location(path, 'unable to list the directory') from e

        connection = self.connection()
        directories: List[str] = [path.strip('/')]

        for item in contents:
            if item.is_dir():
                directories.append(item.path)
                continue

            try:
                self._delete_file(item.path, connection)
            except FilesystemException as e:
                raise UnableToDeleteDirectory.at_location(path, 'unable to delete child') from e

        for directory in sorted(directories, reverse=True):
            try:
                connection.rmd(self.prefixer.prefix_path(directory))
            except ftplib.all_errors as e:
                self.logger.error(f"Error deleting directory {directory}: {e}")
                raise UnableToDeleteDirectory.at_location(path, f"Could not delete directory {directory}") from e

    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """Lazily list a directory, optionally including everything below it."""
        path = path.strip('/')
        path = path if path == '' else path + '/'

        if deep and self.connection_options.recurse_manually:
            yield from self._list_directory_contents_recursive(path)
        else:
            location = self.prefixer.prefix_path(path)
            listing = self._ftp_rawlist('-alnR' if deep else '-aln', location)
            yield from self.listing_parser.parse(listing, path, self.prefixer.prefix)

    def _list_directory_contents_recursive(self, directory: str) -> Iterator[StorageAttributes]:
        # Depth-first, pre-order: an entry is yielded before its descendants.
        pending: List[Iterator[StorageAttributes]] = [self._list_directory(directory)]

        while pending:
            item = next(pending[-1], None)

            if item is None:
                pending.pop()
                continue

            yield item

            if item.is_dir():
                pending.append(self._list_directory(item.path))

    def _list_directory(self, directory: str) -> Iterator[StorageAttributes]:
        listing = self._ftp_rawlist('-aln', self.prefixer.prefix_path(directory))
        return self.listing_parser.parse(listing, directory)

    def _ftp_rawlist(self, options: str, path: str) -> List[str]:
        path = path.rstrip('/') + '/'
        connection = self.connection()

        if self._is_pure_ftpd(connection):
            path = path.replace(' ', '\\ ')

        lines: List[str] = []
        self.logger.debug(f"LIST {options} {path}")

        try:
            connection.retrlines(f"LIST {options} {path}", lines.append)
        except ftplib.error_perm as e:
            # Servers answer 550 for directories that do not exist.
            self.logger.debug(f"Listing {path} failed: {e}")
            return []
        except ftplib.all_errors as e:
            self.logger.error(f"Error listing {path}: {e}")
            raise UnableToListContents.at_location(path, 'R' in options, str(e)) from e

        return lines

    def _ensure_parent_directory_exists(self, path: str, visibility: Optional[str]) -> None:
        dirname = posixpath.dirname(path.lstrip('/'))

        if dirname in ('', '.'):
            return

        self._ensure_directory_exists(dirname, visibility)

    def _ensure_directory_exists(self, dirname: str, visibility: Optional[str]) -> None:
        connection = self.connection()
        mode = self.visibility_converter.for_directory(visibility) if visibility else None
        dir_path = ''

        for part in dirname.strip('/').split('/'):
            dir_path = f"{dir_path}/{part}" if dir_path else part
            location = self.prefixer.prefix_path(dir_path)

            try:
                exists = self._is_directory(connection, location)
            except ftplib.all_errors as e:
                raise UnableToCreateDirectory.at_location(dir_path, str(e)) from e

            if exists:
                continue

            try:
                connection.mkd(location)
            except ftplib.all_errors as e:
                raise UnableToCreateDirectory.at_location(dir_path, str(e)) from e

            if mode is None:
                continue

            try:
                self._chmod(connection, mode, location)
            except ftplib.all_errors as e:
                raise UnableToCreateDirectory.at_location(dir_path, 'unable to chmod the directory') from e

    def _is_directory(self, connection: ftplib.FTP, location: str) -> bool:
        try:
            connection.cwd(location)
        except ftplib.error_perm:
            return False

        # Probing moves the working directory; relative locations expect the root.
        self._change_to_root(connection)
        return True

    # Raw commands

    def _store(self, connection: ftplib.FTP, location: str, stream: BinaryIO) -> None:
        if self.connection_options.transfer_mode == FTP_ASCII:
            connection.storlines(f"STOR {location}", stream)
        else:
            connection.storbinary(f"STOR {location}", stream)

    def _retrieve(self, connection: ftplib.FTP, location: str, target: BinaryIO) -> None:
        if self.connection_options.transfer_mode == FTP_ASCII:
            encoding = connection.encoding
            connection.retrlines(f"RETR {location}", lambda line: target.write(line.encode(encoding) + b'\n'))
        else:
            connection.retrbinary(f"RETR {location}", target.write)

    @staticmethod
    def _chmod(connection: ftplib.FTP, mode: int, location: str) -> None:
        connection.sendcmd(f"SITE CHMOD {mode:o} {location}")

    @staticmethod
    def _size(connection: ftplib.FTP, location: str) -> int:
        """Get the size of a file, or -1 when the server cannot report it."""
        try:
            # SIZE is only reliable in binary mode.
            connection.voidcmd('TYPE I')
            size = connection.size(location)
        except ftplib.all_errors:
            return -1

        return -1 if size is None else size

    @staticmethod
    def _mdtm(connection: ftplib.FTP, location: str) -> int:
        """Get the modification time of a file, or -1 when unavailable."""
        try:
            response = connection.sendcmd(f"MDTM {location}")
        except ftplib.all_errors:
            return -1

        code, _, value = response.partition(' ')
        if code != '213':
            return -1

        try:
            moment = datetime.strptime(value.strip()[:14], '%Y%m%d%H%M%S')
        except ValueError:
            return -1

        return int(moment.replace(tzinfo=timezone.utc).timestamp())
