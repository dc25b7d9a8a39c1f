"""Tests for the FTP connectivity checkers."""

from __future__ import annotations

import ftplib
from unittest import mock

import pytest

from flysystem.Ftp import NoopCommandConnectivityChecker, RawListFtpConnectivityChecker


class TestNoopCommandConnectivityChecker:
    """Test suite for NoopCommandConnectivityChecker."""
    
    def test_connected(self) -> None:
        """Test that a 200 reply means connected."""
        connection = mock.MagicMock()
        connection.sendcmd.return_value = '200 Zzz...'
        
        assert NoopCommandConnectivityChecker().is_connected(connection) is True
        connection.sendcmd.assert_called_once_with('NOOP')
    
    def test_unexpected_reply(self) -> None:
        """Test that other positive replies are not accepted."""
        connection = mock.MagicMock()
        connection.sendcmd.return_value = '202 Command not implemented'
        
        assert NoopCommandConnectivityChecker().is_connected(connection) is False
    
    @pytest.mark.parametrize('error', [
        ftplib.error_temp('421 Timeout.'),
        ConnectionResetError(),
        EOFError(),
        AttributeError("'NoneType' object has no attribute 'sendall'"),
    ])
    def test_disconnected(self, error: Exception) -> None:
        """Test that protocol and socket errors mean disconnected."""
        connection = mock.MagicMock()
        connection.sendcmd.side_effect = error
        
        assert NoopCommandConnectivityChecker().is_connected(connection) is False


class TestRawListFtpConnectivityChecker:
    """Test suite for RawListFtpConnectivityChecker."""
    
    def test_connected(self) -> None:
        """Test that a successful listing means connected."""
        connection = mock.MagicMock()
        
        assert RawListFtpConnectivityChecker().is_connected(connection) is True
        assert connection.retrlines.call_args[0][0] == 'LIST ./'
    
    def test_disconnected(self) -> None:
        """Test that a failing listing means disconnected."""
        connection = mock.MagicMock()
        connection.retrlines.side_effect = BrokenPipeError()
        
        assert RawListFtpConnectivityChecker().is_connected(connection) is False
