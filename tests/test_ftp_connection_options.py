"""Tests for FtpConnectionOptions."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from flysystem.Ftp import FTP_ASCII, FTP_BINARY, FtpConnectionOptions


class TestFtpConnectionOptions:
    """Test suite for FtpConnectionOptions."""
    
    def test_defaults(self) -> None:
        """Test the default connection settings."""
        options = FtpConnectionOptions(host='ftp.example.com')
        
        assert options.root == '/'
        assert options.port == 21
        assert options.ssl is False
        assert options.timeout == 90
        assert options.utf8 is False
        assert options.passive is True
        assert options.transfer_mode == FTP_BINARY
        assert options.system_type is None
        assert options.ignore_passive_address is None
        assert options.timestamps_on_unix_listings_enabled is False
        assert options.recurse_manually is False
    
    def test_from_dict_ignores_disk_keys(self) -> None:
        """Test building options from a disk configuration."""
        options = FtpConnectionOptions.from_dict({
            'driver': 'ftp',
            'host': 'ftp.example.com',
            'username': None,
            'password': None,
            'root': '',
            'port': '2121',
            'transfer_mode': FTP_ASCII,
            'visibility': 'public',
        })
        
        assert options.username == ''
        assert options.password == ''
        assert options.root == '/'
        assert options.port == 2121
        assert options.transfer_mode == 'ascii'
    
    def test_options_are_immutable(self) -> None:
        """Test that options cannot be changed after construction."""
        options = FtpConnectionOptions(host='ftp.example.com')
        
        with pytest.raises(ValidationError):
            options.host = 'other.example.com'  # type: ignore[misc]
    
    @pytest.mark.parametrize('overrides', [
        {'port': 0},
        {'port': 70000},
        {'timeout': 0},
        {'transfer_mode': 'ebcdic'},
        {'system_type': 'vms'},
    ])
    def test_invalid_options(self, overrides: dict) -> None:
        """Test that invalid settings are rejected."""
        with pytest.raises(ValidationError):
            FtpConnectionOptions.from_dict({'host': 'ftp.example.com', **overrides})
    
    def test_host_is_required(self) -> None:
        """Test that a host must be configured."""
        with pytest.raises(ValidationError):
            FtpConnectionOptions.from_dict({})
