from __future__ import annotations

import mimetypes
from typing import Optional

GENERIC_MIME_TYPES = ('application/octet-stream', 'inode/x-empty', 'application/x-empty', 'text/plain')


def detect_mime_type(path: str, contents: bytes) -> Optional[str]:
    """Detect a MIME type from file contents, falling back to the extension."""
    import magic
    
    detected: Optional[str] = magic.from_buffer(contents, mime=True) if contents else None
    
    if detected and detected not in GENERIC_MIME_TYPES:
        return detected
    
    # Plain text and unknown binaries are better described by the extension.
    return detect_mime_type_from_path(path) or detected


def detect_mime_type_from_path(path: str) -> Optional[str]:
    """Guess a MIME type from the file extension only."""
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type
