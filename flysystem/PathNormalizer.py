from __future__ import annotations

import unicodedata
from abc import ABC, abstractmethod
from typing import List

from .Exceptions import CorruptedPathDetected, PathTraversalDetected


class PathNormalizer(ABC):
    """Normalizes caller supplied paths before they reach an adapter."""
    
    @abstractmethod
    def normalize_path(self, path: str) -> str:
        pass


class WhitespacePathNormalizer(PathNormalizer):
    """Resolves '.' and '..' segments and rejects control characters."""
    
    def normalize_path(self, path: str) -> str:
        path = path.replace('\\', '/')
        self._reject_funky_white_space(path)
        return self._normalize_relative_path(path)
    
    def _reject_funky_white_space(self, path: str) -> None:
        if any(unicodedata.category(char).startswith('C') for char in path):
            raise CorruptedPathDetected(path, f"Corrupted path detected: {path!r}")
    
    def _normalize_relative_path(self, path: str) -> str:
        parts: List[str] = []
        
        for part in path.split('/'):
            if part in ('', '.'):
                continue
            if part == '..':
                if not parts:
                    raise PathTraversalDetected(path)
                parts.pop()
                continue
            parts.append(part)
        
        return '/'.join(parts)
