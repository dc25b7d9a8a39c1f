from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional


class Config:
    """Read-only bag of per-operation options."""
    
    OPTION_VISIBILITY = 'visibility'
    OPTION_DIRECTORY_VISIBILITY = 'directory_visibility'
    
    def __init__(self, options: Optional[Mapping[str, Any]] = None) -> None:
        self._options: Dict[str, Any] = dict(options or {})
    
    def get(self, key: str, default: Any = None) -> Any:
        """Get an option, falling back to the default when it is missing."""
        return self._options.get(key, default)
    
    def extend(self, options: Mapping[str, Any]) -> Config:
        """Return a new config with the given options layered on top."""
        return Config({**self._options, **options})
    
    def with_defaults(self, defaults: Mapping[str, Any]) -> Config:
        """Return a new config where missing options take the given defaults."""
        return Config({**defaults, **self._options})
    
    def to_dict(self) -> Dict[str, Any]:
        """Get a copy of all options."""
        return dict(self._options)
    
    def __contains__(self, key: object) -> bool:
        return key in self._options
    
    def __iter__(self) -> Iterator[str]:
        return iter(self._options)
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Config):
            return NotImplemented
        return self._options == other._options
    
    def __repr__(self) -> str:
        return f"Config({self._options!r})"
