from __future__ import annotations

from .InMemoryFile import InMemoryFile
from .InMemoryFilesystemAdapter import DIRECTORY_PLACEHOLDER, InMemoryFilesystemAdapter

__all__ = [
    'InMemoryFile',
    'InMemoryFilesystemAdapter',
    'DIRECTORY_PLACEHOLDER',
]
