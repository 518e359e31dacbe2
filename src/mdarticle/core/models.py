"""Document, metadata, and import record models"""

from datetime import date, datetime, time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


RESERVED_FIELDS = ('title', 'slug', 'created', 'modified')


class Metadata(BaseModel):
    """Article metadata: four reserved fields plus caller-defined extras kept in insertion order."""
    model_config = ConfigDict(extra='allow', frozen=True)

    title:    Optional[str] = None
    slug:     Optional[str] = None
    created:  datetime
    modified: datetime

    @field_validator('title', 'slug', mode='before')
    @classmethod
    def _to_text(cls, value: Any) -> Any:
        # YAML may load a numeric title or slug (e.g. an epoch slug).
        if value is not None and not isinstance(value, str):
            return str(value)
        return value

    @field_validator('created', 'modified', mode='before')
    @classmethod
    def _date_to_datetime(cls, value: Any) -> Any:
        # YAML loads bare dates (2026-01-15) as date, not datetime.
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Caller-defined fields beyond the reserved ones."""
        return dict(self.model_extra or {})


class Document(BaseModel):
    """A markdown body and its metadata. Body is raw source, never pre-rendered."""
    model_config = ConfigDict(frozen=True)

    metadata: Metadata
    body:     str


class ImportItem(BaseModel):
    """A raw document handed to the import pipeline; meta is the parsed frontmatter, if any."""
    text: str
    meta: Optional[dict[str, Any]] = None


class PostRecord(BaseModel):
    """Normalized post ready for insertion into the store."""
    title:       str
    slug:        str
    text:        str
    created:     datetime
    modified:    datetime
    category_id: Optional[int] = None
    extra:       dict[str, Any] = {}


class NoteRecord(BaseModel):
    """Normalized note ready for insertion into the store."""
    title:    str
    text:     str
    created:  datetime
    modified: datetime
    extra:    dict[str, Any] = {}
