from __future__ import annotations

import ftplib
from abc import ABC, abstractmethod

# A closed ftplib session drops its socket, so commands fail with AttributeError.
CONNECTION_ERRORS = ftplib.all_errors + (AttributeError,)


class ConnectivityChecker(ABC):
    """Decides whether an FTP session is still usable."""
    
    @abstractmethod
    def is_connected(self, connection: ftplib.FTP) -> bool:
        pass


class NoopCommandConnectivityChecker(ConnectivityChecker):
    """Pings the server with NOOP and expects a 200 reply."""
    
    def is_connected(self, connection: ftplib.FTP) -> bool:
        try:
            response = connection.sendcmd('NOOP')
        except CONNECTION_ERRORS:
            return False
        
        return response[:3] == '200'


class RawListFtpConnectivityChecker(ConnectivityChecker):
    """Treats a successful listing of the working directory as connected."""
    
    def is_connected(self, connection: ftplib.FTP) -> bool:
        try:
            connection.retrlines('LIST ./', lambda line: None)
        except CONNECTION_ERRORS:
            return False
        
        return True
