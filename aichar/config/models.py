"""Pydantic models for configuration validation."""

from pydantic import BaseModel, Field, field_validator

from .. import __version__


class ToolInfo(BaseModel):
    """Identifies the exporting library in card metadata."""

    name: str = "aichar"
    version: str = __version__
    url: str = "https://github.com/Hukasx0/aichar"

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensure URL is properly formatted."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('url must start with http:// or https://')
        return v.rstrip('/')


class CardSettings(BaseModel):
    """Character card import/export settings."""

    chunk_keyword: str = Field(default="chara", description="PNG text chunk keyword holding the card payload")
    json_indent: int = Field(default=2, ge=0, le=8)
    metadata_version: int = Field(default=1, ge=1)
    fallback_scan: bool = Field(default=True, description="Scan raw bytes when the PNG decoder finds no payload")
    tool: ToolInfo = Field(default_factory=ToolInfo)

    @field_validator('chunk_keyword')
    @classmethod
    def validate_keyword(cls, v: str) -> str:
        """PNG keywords are 1-79 latin-1 bytes without NUL."""
        if not v:
            raise ValueError('chunk_keyword must not be empty')
        if '\x00' in v:
            raise ValueError('chunk_keyword must not contain NUL')
        try:
            encoded = v.encode('latin-1')
        except UnicodeEncodeError:
            raise ValueError('chunk_keyword must be latin-1 text')
        if len(encoded) > 79:
            raise ValueError('chunk_keyword must be at most 79 bytes')
        return v
