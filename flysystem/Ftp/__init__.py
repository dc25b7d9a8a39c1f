from __future__ import annotations

from .ConnectionProvider import ConnectionProvider, FtpConnectionProvider
from .ConnectivityChecker import (
    ConnectivityChecker,
    NoopCommandConnectivityChecker,
    RawListFtpConnectivityChecker,
)
from .Exceptions import (
    FtpConnectionException,
    InvalidListResponseReceived,
    UnableToAuthenticate,
    UnableToConnectToFtpHost,
    UnableToEnableUtf8Mode,
)
from .FtpAdapter import ConnectionState, FtpAdapter
from .FtpConnectionOptions import FTP_ASCII, FTP_BINARY, FtpConnectionOptions
from .ListingParser import SYSTEM_TYPE_UNIX, SYSTEM_TYPE_WINDOWS, ListingParser

__all__ = [
    'FtpAdapter',
    'ConnectionState',
    'FtpConnectionOptions',
    'FTP_ASCII',
    'FTP_BINARY',
    'ConnectionProvider',
    'FtpConnectionProvider',
    'ConnectivityChecker',
    'NoopCommandConnectivityChecker',
    'RawListFtpConnectivityChecker',
    'ListingParser',
    'SYSTEM_TYPE_UNIX',
    'SYSTEM_TYPE_WINDOWS',
    'FtpConnectionException',
    'UnableToConnectToFtpHost',
    'UnableToAuthenticate',
    'UnableToEnableUtf8Mode',
    'InvalidListResponseReceived',
]
