from __future__ import annotations


class PathPrefixer:
    """Translates logical paths into backend-rooted paths and back."""
    
    def __init__(self, prefix: str, separator: str = '/') -> None:
        self.separator = separator
        self.prefix = prefix.rstrip('\\/')
        
        if prefix != '':
            self.prefix += separator
    
    def prefix_path(self, path: str) -> str:
        """Prepend the root prefix to a logical path."""
        return self.prefix + path.lstrip('\\/')
    
    def strip_prefix(self, path: str) -> str:
        """Remove the root prefix from a prefixed path."""
        return path[len(self.prefix):]
    
    def prefix_directory_path(self, path: str) -> str:
        """Prefix a path and make sure it ends with a separator."""
        prefixed = self.prefix_path(path)
        
        if prefixed == '' or prefixed.endswith(self.separator):
            return prefixed
        
        return prefixed.rstrip('\\/') + self.separator
    
    def strip_directory_prefix(self, path: str) -> str:
        """Remove the root prefix and any trailing separators."""
        return self.strip_prefix(path).rstrip('\\/')
