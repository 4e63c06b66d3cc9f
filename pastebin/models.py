"""
Pydantic models for stored pastes and request/response validation.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pastebin.exceptions import CorruptRecordError

DEFAULT_TITLE = "Untitled"
DEFAULT_LANGUAGE = "plaintext"
MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 500_000

# Expiry choices offered to clients, in milliseconds. None = never expires.
EXPIRY_OPTIONS: Dict[str, Optional[int]] = {
    "never": None,
    "10m": 10 * 60 * 1000,
    "1h": 60 * 60 * 1000,
    "1d": 24 * 60 * 60 * 1000,
    "1w": 7 * 24 * 60 * 60 * 1000,
}


class Paste(BaseModel):
    """A stored paste. Immutable; serialized with camelCase field names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., description="Unique paste ID")
    title: str = Field(DEFAULT_TITLE, description="Display title")
    content: str = Field(..., description="Text content")
    language: str = Field(DEFAULT_LANGUAGE, description="Free-form language tag")
    created_at: int = Field(..., alias="createdAt", description="Creation time (ms since epoch)")
    expires_at: Optional[int] = Field(
        None, alias="expiresAt", description="Expiry time (ms since epoch, null if never)"
    )

    def is_expired(self, now: int) -> bool:
        """A paste is invisible from the moment its expiry time is reached."""
        return self.expires_at is not None and now >= self.expires_at

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, payload: str) -> "Paste":
        """
        Parse a serialized record.

        Raises:
            CorruptRecordError: If the payload is not a valid paste record
        """
        try:
            return cls.model_validate_json(payload)
        except ValidationError as e:
            raise CorruptRecordError(f"Invalid paste record: {e}") from e


class PasteCreate(BaseModel):
    """
    Schema for creating a new paste.

    Fields accept any JSON value: a non-string title, language or expiry falls
    back to its default, and content is checked by the route.
    """

    title: Optional[Any] = Field(None, description="Optional title (truncated to 200 chars)")
    content: Optional[Any] = Field(None, description="Text content (required, non-empty)")
    language: Optional[Any] = Field(None, description="Optional language tag")
    expiry: Optional[Any] = Field(None, description="One of never, 10m, 1h, 1d, 1w")

    def has_content(self) -> bool:
        return isinstance(self.content, str) and bool(self.content.strip())

    def to_paste(self, paste_id: str, now: int) -> Paste:
        """Build the stored record, filling defaults for missing fields."""
        title = self.title[:MAX_TITLE_LENGTH] if isinstance(self.title, str) else ""
        if not title.strip():
            title = DEFAULT_TITLE

        expiry = self.expiry if isinstance(self.expiry, str) else "never"
        ttl_ms = EXPIRY_OPTIONS.get(expiry)
        return Paste(
            id=paste_id,
            title=title,
            content=self.content.strip(),
            language=self.language if isinstance(self.language, str) else DEFAULT_LANGUAGE,
            created_at=now,
            expires_at=now + ttl_ms if ttl_ms else None,
        )


class PasteCreated(BaseModel):
    """Schema for paste creation response."""
    id: str = Field(..., description="Unique paste ID")


class DeleteResult(BaseModel):
    """Schema for paste deletion response."""
    deleted: bool = Field(..., description="True if a paste existed and was removed")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the storage backend reachable?")
    mode: str = Field(..., description="Active storage backend")
