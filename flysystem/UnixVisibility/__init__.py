from __future__ import annotations

from .VisibilityConverter import PortableVisibilityConverter, VisibilityConverter

__all__ = [
    'VisibilityConverter',
    'PortableVisibilityConverter',
]
