from __future__ import annotations

from enum import Enum
from typing import List


class Visibility(str, Enum):
    """Abstract access level of a file or directory."""
    PUBLIC = 'public'
    PRIVATE = 'private'
    
    @classmethod
    def values(cls) -> List[str]:
        """Get the supported visibility strings."""
        return [member.value for member in cls]
