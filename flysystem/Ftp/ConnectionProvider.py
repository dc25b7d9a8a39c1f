from __future__ import annotations

import ftplib
import logging
from abc import ABC, abstractmethod

from .Exceptions import UnableToAuthenticate, UnableToConnectToFtpHost, UnableToEnableUtf8Mode
from .FtpConnectionOptions import FtpConnectionOptions


class ConnectionProvider(ABC):
    """Creates live FTP sessions."""

    @abstractmethod
    def create_connection(self, options: FtpConnectionOptions) -> ftplib.FTP:
        pass


class FtpConnectionProvider(ConnectionProvider):
    """Opens ftplib sessions (plain or explicit TLS) from connection options."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    def create_connection(self, options: FtpConnectionOptions) -> ftplib.FTP:
        """Connect, authenticate and configure a new session."""
        connection = self._create_connection_resource(options)

        try:
            self._authenticate(options, connection)
            self._enable_utf8_mode(options, connection)
            self._ignore_passive_address(options, connection)
            connection.set_pasv(options.passive)
        except Exception:
            connection.close()
            raise

        self.logger.debug(f"Connected to {options.host}:{options.port}")
        return connection

    def _create_connection_resource(self, options: FtpConnectionOptions) -> ftplib.FTP:
        connection = ftplib.FTP_TLS(timeout=options.timeout) if options.ssl else ftplib.FTP(timeout=options.timeout)

        try:
            connection.connect(options.host, options.port, timeout=options.timeout)
        except ftplib.all_errors as e:
            self.logger.error(f"Unable to connect to {options.host}:{options.port}: {e}")
            connection.close()
            raise UnableToConnectToFtpHost.for_host(options.host, options.port, options.ssl, str(e)) from e

        return connection

    def _authenticate(self, options: FtpConnectionOptions, connection: ftplib.FTP) -> None:
        try:
            connection.login(options.username, options.password)
        except ftplib.all_errors as e:
            raise UnableToAuthenticate() from e

        if options.ssl:
            # Protect the data channel as well as the control channel.
            connection.prot_p()  # type: ignore[attr-defined]

    def _enable_utf8_mode(self, options: FtpConnectionOptions, connection: ftplib.FTP) -> None:
        if not options.utf8:
            return

        try:
            response = connection.sendcmd('OPTS UTF8 ON')
        except ftplib.all_errors as e:
            raise UnableToEnableUtf8Mode(f"Could not set UTF-8 mode for connection: {options.host}::{options.port}.") from e

        # 202 means the server already runs in UTF-8 mode.
        if response[:3] not in ('200', '202'):
            raise UnableToEnableUtf8Mode(
                f"Could not set UTF-8 mode for connection: {options.host}::{options.port}. Response: {response}"
            )

        connection.encoding = 'utf-8'

    def _ignore_passive_address(self, options: FtpConnectionOptions, connection: ftplib.FTP) -> None:
        if options.ignore_passive_address is None:
            return

        connection.trust_server_pasv_ipv4_address = not options.ignore_passive_address
