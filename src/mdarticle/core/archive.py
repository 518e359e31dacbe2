"""Archive packaging: many documents into one zip keyed by title or slug"""

import io
import zipfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Union

import structlog

from mdarticle.core.frontmatter import compose
from mdarticle.core.models import Document, Metadata
from mdarticle.errors import ArchiveCollisionError


log = structlog.get_logger(__name__)

DEFAULT_EXTENSION = '.md'
PATH_SEPARATORS = ('/', '\\')
SAFE_CHAR = '-'
UNTITLED = 'untitled'


class NamingPolicy(str, Enum):
    """Metadata field used to name archive entries"""
    title = "title"
    slug = "slug"


class CollisionPolicy(str, Enum):
    """What to do when a sanitized entry name is already taken"""
    overwrite = "overwrite"     # last write wins, recorded in Archive.collisions
    error = "error"
    suffix = "suffix"           # 'name (2).md', 'name (3).md', ...


def safe_entry_name(name: str, extension: str = DEFAULT_EXTENSION) -> str:
    """Append extension and replace every path separator with SAFE_CHAR."""
    name = f"{name}{extension}"
    for sep in PATH_SEPARATORS:
        name = name.replace(sep, SAFE_CHAR)
    return name


def entry_name(metadata: Metadata, naming: NamingPolicy, extension: str = DEFAULT_EXTENSION) -> str:
    """Sanitized entry name from the naming field, falling back to the other field, then UNTITLED."""
    if naming == NamingPolicy.slug:
        primary, fallback = metadata.slug, metadata.title
    else:
        primary, fallback = metadata.title, metadata.slug
    return safe_entry_name(primary or fallback or UNTITLED, extension)


def _suffixed(name: str, n: int) -> str:
    base, dot, ext = name.rpartition('.')
    if not dot or not base:
        return f"{name} ({n})"
    return f"{base} ({n}).{ext}"


@dataclass
class Archive:
    """Ordered name -> bytes mapping, built by a single writer and serializable as zip."""
    entries:    dict[str, bytes] = field(default_factory=dict)
    collisions: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __getitem__(self, name: str) -> bytes:
        return self.entries[name]

    def names(self) -> list[str]:
        return list(self.entries)

    def add(
        self,
        name: str,
        content: Union[bytes, str],
        on_collision: CollisionPolicy = CollisionPolicy.overwrite,
        ) -> str:
        """Add an entry and return the name it was stored under."""
        if isinstance(content, str):
            content = content.encode('utf-8')
        if name in self.entries:
            if on_collision == CollisionPolicy.error:
                raise ArchiveCollisionError(name)
            if on_collision == CollisionPolicy.suffix:
                n = 2
                while _suffixed(name, n) in self.entries:
                    n += 1
                name = _suffixed(name, n)
            else:
                log.warning("archive entry overwritten", name=name)
                self.collisions.append(name)
        self.entries[name] = content
        return name

    def to_zip(self) -> bytes:
        """Serialize entries as a deflated zip, in insertion order."""
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
            for name, content in self.entries.items():
                zf.writestr(name, content)
        return buf.getvalue()

    def write(self, path: Path) -> Path:
        """Write the zip to path, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_zip())
        return path


def pack(
    documents: Iterable[Document],
    naming: NamingPolicy = NamingPolicy.title,
    *,
    compose_header: bool = True,
    include_title_heading: bool = False,
    on_collision: CollisionPolicy = CollisionPolicy.overwrite,
    extension: str = DEFAULT_EXTENSION,
    ) -> Archive:
    """Compose each document and collect it into an Archive, in input order."""
    archive = Archive()
    for doc in documents:
        text = compose(doc.metadata, doc.body, compose_header, include_title_heading)
        archive.add(entry_name(doc.metadata, NamingPolicy(naming), extension), text, on_collision)
    log.info("packed archive", entries=len(archive), collisions=len(archive.collisions))
    return archive
