from __future__ import annotations

import os
from typing import Any, Dict


def env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Default filesystem disk
default = os.getenv('FILESYSTEM_DISK', 'memory')

# Filesystem disks configuration
disks: Dict[str, Dict[str, Any]] = {
    'ftp': {
        'driver': 'ftp',
        'host': os.getenv('FTP_HOST', 'localhost'),
        'username': os.getenv('FTP_USERNAME', ''),
        'password': os.getenv('FTP_PASSWORD', ''),
        'port': int(os.getenv('FTP_PORT', 21)),
        'root': os.getenv('FTP_ROOT', '/'),
        'ssl': env_flag('FTP_SSL'),
        'passive': env_flag('FTP_PASSIVE', True),
        'utf8': env_flag('FTP_UTF8'),
        'timeout': int(os.getenv('FTP_TIMEOUT', 90)),
        'recurse_manually': env_flag('FTP_RECURSE_MANUALLY'),
        'timestamps_on_unix_listings_enabled': env_flag('FTP_TIMESTAMPS_ON_UNIX_LISTINGS'),
        'visibility': 'public',
        'directory_visibility': 'public',
        'permissions': {
            'file': {'public': 0o644, 'private': 0o600},
            'dir': {'public': 0o755, 'private': 0o700},
        },
    },
    
    # Memory filesystem (for testing)
    'memory': {
        'driver': 'memory',
        'visibility': 'public',
    },
}
