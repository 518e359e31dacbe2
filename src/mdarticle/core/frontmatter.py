"""Frontmatter codec: metadata + body <-> text with a YAML header block"""

import re
from datetime import datetime
from typing import Any, Mapping, Optional

import structlog
import yaml

from mdarticle.core.models import Document, Metadata
from mdarticle.errors import FrontmatterError


log = structlog.get_logger(__name__)

DELIMITER = '---'
FRONTMATTER_RE = re.compile(r'^---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|$)', re.DOTALL)

_SKIP = object()


class _HeaderDumper(yaml.SafeDumper):
    """SafeDumper that indents block sequences under their key (tags:\\n  - x) and never emits anchors."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)

    def ignore_aliases(self, data):
        return True


def _representable(value: Any, field: str = '') -> Any:
    """Return value with anything the safe representer rejects removed, or _SKIP."""
    if isinstance(value, Mapping):
        out = {}
        for k, v in value.items():
            key = f"{field}.{k}" if field else str(k)
            if _representable(k, key) is _SKIP:
                log.debug("skipped header field", field=key)
                continue
            v = _representable(v, key)
            if v is _SKIP:
                log.debug("skipped header field", field=key)
                continue
            out[k] = v
        return out
    if isinstance(value, (list, tuple)):
        items = (_representable(v, f"{field}[{i}]") for i, v in enumerate(value))
        return [v for v in items if v is not _SKIP]
    try:
        yaml.dump(value, Dumper=_HeaderDumper)
    except yaml.YAMLError:
        return _SKIP
    return value


def dump_header(header: Mapping[str, Any]) -> str:
    """Serialize a header mapping as block-style YAML, keeping key order."""
    return yaml.dump(
        _representable(header),
        Dumper=_HeaderDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    ).strip()


def build_header(metadata: Metadata) -> dict[str, Any]:
    """Header object: date/updated/title first, then every other metadata field."""
    header: dict[str, Any] = {"date": metadata.created, "updated": metadata.modified}
    if metadata.title is not None:
        header["title"] = metadata.title
    if metadata.slug is not None:
        header["slug"] = metadata.slug
    header.update(metadata.extra_fields)
    return header


def compose(
    metadata: Metadata,
    body: str,
    include_header: bool = True,
    include_title_heading: bool = False,
    ) -> str:
    """Return body with an optional YAML header and optional '# title' heading prepended."""
    heading = f"# {metadata.title}\n\n" if include_title_heading and metadata.title else ''
    if not include_header:
        return f"{heading}{body.strip()}"
    header = dump_header(build_header(metadata))
    return f"{DELIMITER}\n{header}\n{DELIMITER}\n\n{heading}{body.strip()}".strip()


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (header_dict, body) with the YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        header = yaml.safe_load(m.group(1) or '') or {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(header, dict):
        raise FrontmatterError(f"Invalid YAML frontmatter: expected a mapping, got {type(header).__name__}")
    return header, text[m.end():]


def normalize_metadata(meta: Optional[Mapping[str, Any]], now: Optional[datetime] = None) -> Metadata:
    """Derive created/modified from date/updated (or created/modified), defaulting to now.

    modified falls back to the created source value, then now. All other
    fields pass through unchanged.
    """
    fields = dict(meta or {})
    now = now or datetime.now()

    date, created = fields.pop('date', None), fields.pop('created', None)
    updated, modified = fields.pop('updated', None), fields.pop('modified', None)
    created_src = date if date is not None else created
    modified_src = updated if updated is not None else modified

    fields['created'] = created_src if created_src is not None else now
    fields['modified'] = modified_src if modified_src is not None else fields['created']
    return Metadata.model_validate(fields)


def decompose(text: str, strip_title_heading: bool = False, now: Optional[datetime] = None) -> Document:
    """Split text into normalized metadata and trimmed body."""
    header, body = split_frontmatter(text)
    metadata = normalize_metadata(header, now)
    body = body.strip()
    if strip_title_heading and metadata.title:
        first, _, rest = body.partition('\n')
        if first.strip() == f"# {metadata.title}":
            body = rest.strip()
    return Document(metadata=metadata, body=body)
