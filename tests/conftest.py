from __future__ import annotations

import ftplib
import posixpath
from datetime import datetime, timezone
from typing import BinaryIO, Callable, Dict, List, Optional, Set

import pytest

from flysystem.Ftp import FtpAdapter, FtpConnectionOptions
from flysystem.Ftp.ConnectionProvider import ConnectionProvider

FIXED_MTIME = datetime(2020, 1, 2, 12, 30, tzinfo=timezone.utc)


class FakeFtpServer:
    """In-memory FTP server state shared by every fake connection."""
    
    def __init__(self, system_type: str = 'unix', banner: str = 'FakeFTPd') -> None:
        self.system_type = system_type
        self.banner = banner
        self.files: Dict[str, bytes] = {}
        self.directories: Set[str] = {'/'}
        self.modes: Dict[str, int] = {'/': 0o755}
        self.commands: List[str] = []
        self.refused: Set[str] = set()
        self.failures: Dict[str, Exception] = {}
    
    @staticmethod
    def normalize(path: str) -> str:
        return posixpath.normpath('/' + path.strip('/')) if path.strip('/') else '/'
    
    def add_directory(self, path: str, mode: int = 0o755) -> None:
        path = self.normalize(path)
        parent = posixpath.dirname(path)
        if parent not in self.directories:
            self.add_directory(parent)
        self.directories.add(path)
        self.modes.setdefault(path, mode)
    
    def add_file(self, path: str, contents: bytes = b'', mode: int = 0o644) -> None:
        path = self.normalize(path)
        self.add_directory(posixpath.dirname(path))
        self.files[path] = contents
        self.modes[path] = mode
    
    def exists(self, path: str) -> bool:
        return path in self.files or path in self.directories
    
    def children(self, directory: str) -> List[str]:
        entries = [
            path for path in list(self.directories) + list(self.files)
            if path != '/' and posixpath.dirname(path) == directory
        ]
        return sorted(entries)
    
    def listing(self, directory: str, recursive: bool) -> List[str]:
        if self.system_type == 'windows':
            return [self._windows_line(path) for path in self.children(directory)]
        
        lines: List[str] = []
        if recursive:
            lines.append(f"{directory}:")
        lines.append('total 8')
        lines.append(self._unix_line(directory, '.'))
        lines.append(self._unix_line(posixpath.dirname(directory), '..'))
        lines.extend(self._unix_line(path, posixpath.basename(path)) for path in self.children(directory))
        
        if recursive:
            for path in self.children(directory):
                if path in self.directories:
                    lines.append('')
                    lines.extend(self.listing(path, True))
        
        return lines
    
    def _unix_line(self, path: str, name: str) -> str:
        is_directory = path in self.directories
        mode = self.modes.get(path, 0o755 if is_directory else 0o644)
        permissions = ('d' if is_directory else '-') + self.render_mode(mode)
        size = 4096 if is_directory else len(self.files[path])
        return f"{permissions}    1 1000     1000     {size:>8} Jan 02 12:30 {name}"
    
    def _windows_line(self, path: str) -> str:
        name = posixpath.basename(path)
        if path in self.directories:
            return f"01-02-20  12:30PM       <DIR>          {name}"
        return f"01-02-20  12:30PM       {len(self.files[path]):>14} {name}"
    
    @staticmethod
    def render_mode(mode: int) -> str:
        rendered = ''
        for shift in (6, 3, 0):
            triplet = (mode >> shift) & 0o7
            rendered += 'r' if triplet & 4 else '-'
            rendered += 'w' if triplet & 2 else '-'
            rendered += 'x' if triplet & 1 else '-'
        return rendered


class FakeFtpConnection:
    """Emulates the parts of ftplib.FTP the adapter talks to."""
    
    def __init__(self, server: FakeFtpServer) -> None:
        self.server = server
        self.working_directory = '/'
        self.alive = True
        self.closed = False
        self.encoding = 'utf-8'
    
    def _record(self, command: str) -> None:
        if self.closed:
            raise AttributeError("'NoneType' object has no attribute 'sendall'")
        self.server.commands.append(command)
        verb = command.split(' ', 1)[0]
        if verb in self.server.refused:
            raise ftplib.error_perm(f"550 {verb} refused")
        if verb in self.server.failures:
            raise self.server.failures[verb]
    
    def _resolve(self, path: str) -> str:
        path = path.replace('\\ ', ' ')
        if not path.startswith('/'):
            path = posixpath.join(self.working_directory, path)
        return self.server.normalize(path)
    
    def _require_file(self, path: str) -> str:
        resolved = self._resolve(path)
        if resolved not in self.server.files:
            raise ftplib.error_perm(f"550 {path}: No such file")
        return resolved
    
    def _require_parent(self, path: str) -> str:
        resolved = self._resolve(path)
        if posixpath.dirname(resolved) not in self.server.directories:
            raise ftplib.error_perm(f"553 {path}: No such directory")
        return resolved
    
    def sendcmd(self, command: str) -> str:
        self._record(command)
        verb, _, argument = command.partition(' ')
        
        if verb == 'NOOP':
            if not self.alive:
                raise ftplib.error_temp('421 Timeout')
            return '200 Zzz...'
        if verb == 'HELP':
            return f"214 {self.server.banner} help"
        if verb == 'TYPE' or verb == 'OPTS':
            return '200 OK'
        if verb == 'MDTM':
            self._require_file(argument)
            return '213 ' + FIXED_MTIME.strftime('%Y%m%d%H%M%S')
        if verb == 'SITE':
            _, mode, path = argument.split(' ', 2)
            resolved = self._resolve(path)
            if not self.server.exists(resolved):
                raise ftplib.error_perm(f"550 {path}: No such file or directory")
            self.server.modes[resolved] = int(mode, 8)
            return '200 SITE CHMOD command successful'
        
        raise ftplib.error_perm(f"500 {verb} not understood")
    
    def voidcmd(self, command: str) -> str:
        return self.sendcmd(command)
    
    def cwd(self, path: str) -> str:
        self._record(f"CWD {path}")
        resolved = self._resolve(path)
        if resolved not in self.server.directories:
            raise ftplib.error_perm(f"550 {path}: No such directory")
        self.working_directory = resolved
        return '250 OK'
    
    def mkd(self, path: str) -> str:
        self._record(f"MKD {path}")
        resolved = self._require_parent(path)
        if self.server.exists(resolved):
            raise ftplib.error_perm(f"550 {path}: File exists")
        self.server.directories.add(resolved)
        self.server.modes[resolved] = 0o755
        return resolved
    
    def rmd(self, path: str) -> str:
        self._record(f"RMD {path}")
        resolved = self._resolve(path)
        if resolved not in self.server.directories or self.server.children(resolved):
            raise ftplib.error_perm(f"550 {path}: Directory not empty")
        self.server.directories.discard(resolved)
        return '250 OK'
    
    def delete(self, path: str) -> str:
        self._record(f"DELE {path}")
        resolved = self._require_file(path)
        del self.server.files[resolved]
        return '250 OK'
    
    def rename(self, source: str, destination: str) -> str:
        self._record(f"RNFR {source}")
        source_path = self._require_file(source)
        destination_path = self._require_parent(destination)
        self.server.files[destination_path] = self.server.files.pop(source_path)
        self.server.modes[destination_path] = self.server.modes.pop(source_path, 0o644)
        return '250 OK'
    
    def size(self, path: str) -> Optional[int]:
        self._record(f"SIZE {path}")
        return len(self.server.files[self._require_file(path)])
    
    def retrlines(self, command: str, callback: Callable[[str], object]) -> str:
        self._record(command)
        verb, _, argument = command.partition(' ')
        
        if verb == 'RETR':
            for line in self.server.files[self._require_file(argument)].decode(self.encoding).splitlines():
                callback(line)
            return '226 Transfer complete'
        
        options, _, path = argument.partition(' ')
        if not options.startswith('-'):
            options, path = '', argument
        
        resolved = self._resolve(path or '.')
        if resolved not in self.server.directories:
            raise ftplib.error_perm(f"550 {path}: No such directory")
        
        for line in self.server.listing(resolved, 'R' in options):
            callback(line)
        return '226 Transfer complete'
    
    def retrbinary(self, command: str, callback: Callable[[bytes], object]) -> str:
        self._record(command)
        callback(self.server.files[self._require_file(command.split(' ', 1)[1])])
        return '226 Transfer complete'
    
    def storbinary(self, command: str, fp: BinaryIO) -> str:
        self._record(command)
        resolved = self._require_parent(command.split(' ', 1)[1])
        self.server.files[resolved] = fp.read()
        self.server.modes.setdefault(resolved, 0o644)
        return '226 Transfer complete'
    
    def storlines(self, command: str, fp: BinaryIO) -> str:
        self._record(command)
        resolved = self._require_parent(command.split(' ', 1)[1])
        self.server.files[resolved] = b''.join(line.rstrip(b'\r\n') + b'\r\n' for line in iter(fp.readline, b''))
        self.server.modes.setdefault(resolved, 0o644)
        return '226 Transfer complete'
    
    def quit(self) -> str:
        self._record('QUIT')
        self.close()
        return '221 Goodbye'
    
    def close(self) -> None:
        self.closed = True


class FakeConnectionProvider(ConnectionProvider):
    """Hands out fake connections to a shared fake server."""
    
    def __init__(self, server: FakeFtpServer) -> None:
        self.server = server
        self.connections: List[FakeFtpConnection] = []
    
    def create_connection(self, options: FtpConnectionOptions) -> FakeFtpConnection:  # type: ignore[override]
        connection = FakeFtpConnection(self.server)
        self.connections.append(connection)
        return connection


@pytest.fixture
def ftp_server() -> FakeFtpServer:
    """Create an empty unix style FTP server."""
    return FakeFtpServer()


@pytest.fixture
def connection_provider(ftp_server: FakeFtpServer) -> FakeConnectionProvider:
    """Create a provider bound to the fake server."""
    return FakeConnectionProvider(ftp_server)


@pytest.fixture
def make_adapter(connection_provider: FakeConnectionProvider) -> Callable[..., FtpAdapter]:
    """Build FTP adapters with custom options against the fake server."""
    def factory(**options: object) -> FtpAdapter:
        connection_options = FtpConnectionOptions.from_dict({'host': 'ftp.example.com', **options})
        return FtpAdapter(connection_options, connection_provider)
    return factory


@pytest.fixture
def adapter(make_adapter: Callable[..., FtpAdapter]) -> FtpAdapter:
    """Create an FTP adapter rooted at the server's top level."""
    return make_adapter()
