"""Markdown file discovery and reading"""

from pathlib import Path
from typing import Iterable


MD_EXTENSIONS = {'.md', '.mdx', '.markdown'}


def discover_files(path: Path) -> list[Path]:
    """Return sorted markdown files under path, or [path] if it is a single markdown file."""
    if path.is_file():
        return [path] if path.suffix.lower() in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in MD_EXTENSIONS)


def discover_all(paths: Iterable[Path]) -> list[Path]:
    """discover_files over several paths, keeping argument order and dropping repeats."""
    return list(dict.fromkeys(f for p in paths for f in discover_files(Path(p))))


def read_text(path: Path) -> str:
    return path.read_text(encoding='utf-8')
