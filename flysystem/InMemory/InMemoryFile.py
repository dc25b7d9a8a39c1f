from __future__ import annotations

import io
import time
from typing import BinaryIO, Optional

from ..MimeType import detect_mime_type


class InMemoryFile:
    """A single file held by the in-memory adapter."""
    
    def __init__(self, contents: bytes = b'', visibility: Optional[str] = None) -> None:
        self._contents = b''
        self._last_modified = 0
        self._visibility = visibility
        self.update_contents(contents)
    
    def update_contents(self, contents: bytes) -> None:
        """Replace the contents and touch the modification time."""
        self._contents = contents
        self._last_modified = int(time.time())
    
    def last_modified(self) -> int:
        return self._last_modified
    
    def read(self) -> bytes:
        return self._contents
    
    def read_stream(self) -> BinaryIO:
        return io.BytesIO(self._contents)
    
    def file_size(self) -> int:
        return len(self._contents)
    
    def mime_type(self, path: str) -> Optional[str]:
        return detect_mime_type(path, self._contents)
    
    def set_visibility(self, visibility: str) -> None:
        self._visibility = visibility
    
    def visibility(self) -> Optional[str]:
        return self._visibility
    
    def copy(self) -> InMemoryFile:
        """Clone the file, keeping its visibility and timestamp."""
        clone = InMemoryFile(self._contents, self._visibility)
        clone._last_modified = self._last_modified
        return clone
