from __future__ import annotations

from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

FTP_BINARY = 'binary'
FTP_ASCII = 'ascii'


class FtpConnectionOptions(BaseModel):
    """Immutable connection settings for an FTP adapter."""
    
    model_config = ConfigDict(frozen=True, extra='ignore')
    
    host: str
    root: str = '/'
    username: str = ''
    password: str = ''
    port: int = Field(21, gt=0, lt=65536)
    ssl: bool = False
    timeout: int = Field(90, gt=0)
    utf8: bool = False
    passive: bool = True
    transfer_mode: Literal['binary', 'ascii'] = FTP_BINARY
    system_type: Optional[Literal['unix', 'windows']] = None
    ignore_passive_address: Optional[bool] = None
    timestamps_on_unix_listings_enabled: bool = False
    recurse_manually: bool = False
    
    @field_validator('root', mode='before')
    @classmethod
    def default_root(cls, value: Any) -> Any:
        # An empty root means the server's top level directory.
        return value or '/'
    
    @field_validator('username', 'password', mode='before')
    @classmethod
    def empty_credentials(cls, value: Any) -> Any:
        return '' if value is None else value
    
    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> FtpConnectionOptions:
        """Build options from a disk configuration mapping."""
        return cls.model_validate(dict(options))
