"""Import pipeline: raw (text, meta) items -> normalized post and note records"""

from datetime import datetime
from typing import Any, Iterable, Optional

import structlog

from mdarticle.core.frontmatter import normalize_metadata, split_frontmatter
from mdarticle.core.models import RESERVED_FIELDS, ImportItem, Metadata, NoteRecord, PostRecord
from mdarticle.crud.repo import CategoryRepo


log = structlog.get_logger(__name__)

UNTITLED_POST = 'untitled'
UNTITLED_NOTE = 'untitled note'


def item_from_text(text: str) -> ImportItem:
    """Split a markdown file's text into an ImportItem; meta is None when there is no header."""
    header, body = split_frontmatter(text)
    return ImportItem(text=body.strip(), meta=header or None)


def _first_category(meta: dict[str, Any]) -> Optional[str]:
    names = meta.get('categories')
    if isinstance(names, str):
        names = [names]
    if not names:
        return None
    return str(names[0]) if names[0] else None


def _extra(metadata: Metadata) -> dict[str, Any]:
    """JSON-safe extra fields; categories are stored relationally."""
    dumped = metadata.model_dump(mode="json")
    return {k: v for k, v in dumped.items() if k not in RESERVED_FIELDS and k != "categories"}


def prepare_posts(
    items: Iterable[ImportItem],
    categories: CategoryRepo,
    now: Optional[datetime] = None,
    ) -> list[PostRecord]:
    """Normalize items into PostRecords, resolving each post's first category.

    Items without meta get a numbered placeholder title, an epoch-based slug,
    and the default category. Every use of the default category is recorded
    through categories.use_default().
    """
    now = now or datetime.now()
    records = []
    untitled = 0

    for item in items:
        meta = dict(item.meta or {})
        metadata = normalize_metadata(meta, now)

        if not item.meta:
            untitled += 1
            records.append(PostRecord(
                title=f"{UNTITLED_POST}-{untitled}",
                slug=f"{int(now.timestamp() * 1000)}-{untitled}",
                text=item.text,
                created=metadata.created,
                modified=metadata.modified,
                category_id=categories.use_default(),
                extra=_extra(metadata),
            ))
            continue

        name = _first_category(meta)
        category_id = categories.resolve_or_create(name) if name else None
        if category_id is None:
            category_id = categories.use_default()

        if metadata.title:
            title = metadata.title
        else:
            untitled += 1
            title = f"{UNTITLED_POST}-{untitled}"
        records.append(PostRecord(
            title=title,
            slug=metadata.slug or title,
            text=item.text,
            created=metadata.created,
            modified=metadata.modified,
            category_id=category_id,
            extra=_extra(metadata),
        ))

    log.info("prepared posts", count=len(records), untitled=untitled)
    return records


def prepare_notes(items: Iterable[ImportItem], now: Optional[datetime] = None) -> list[NoteRecord]:
    """Normalize items into NoteRecords; notes carry no slug or category."""
    records = []
    for item in items:
        metadata = normalize_metadata(item.meta, now)
        records.append(NoteRecord(
            title=metadata.title or UNTITLED_NOTE,
            text=item.text,
            created=metadata.created,
            modified=metadata.modified,
            extra=_extra(metadata),
        ))
    log.info("prepared notes", count=len(records))
    return records
