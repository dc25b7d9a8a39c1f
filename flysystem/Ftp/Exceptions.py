from __future__ import annotations

from ..Exceptions import FilesystemException


class FtpConnectionException(FilesystemException):
    """Base exception for failures establishing or validating an FTP session."""
    pass


class UnableToConnectToFtpHost(FtpConnectionException):
    """Raised when the FTP host cannot be reached."""
    
    @classmethod
    def for_host(cls, host: str, port: int, ssl: bool, reason: str = '') -> UnableToConnectToFtpHost:
        using_ssl = ', using ssl' if ssl else ''
        message = f"Unable to connect to host {host} at port {port}{using_ssl}."
        return cls(f"{message} {reason}" if reason else message)


class UnableToAuthenticate(FtpConnectionException):
    """Raised when the FTP server rejects the credentials."""
    
    def __init__(self, message: str = "Unable to login/authenticate with FTP") -> None:
        super().__init__(message)


class UnableToEnableUtf8Mode(FtpConnectionException):
    """Raised when the server refuses OPTS UTF8 ON."""
    pass


class InvalidListResponseReceived(FilesystemException):
    """Raised when a directory listing line cannot be parsed."""
    pass
