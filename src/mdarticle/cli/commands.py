"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdarticle.config import Settings, load_config
from mdarticle.core.archive import CollisionPolicy, NamingPolicy, pack
from mdarticle.core.frontmatter import decompose
from mdarticle.core.ingest import item_from_text, prepare_notes, prepare_posts
from mdarticle.core.models import Document
from mdarticle.core.parse import make_parser
from mdarticle.core.render import render
from mdarticle.crud.articles import (
    SQLCategoryRepo,
    all_articles,
    article_document,
    insert_notes,
    insert_posts,
    render_article,
)
from mdarticle.crud.database import init_db, make_engine, reset_db
from mdarticle.crud.models import ArticleKind
from mdarticle.errors import MdArticleError
from mdarticle.util.fs import discover_all, read_text


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _parser(settings: Settings):
    return make_parser(settings.parser_config, settings.allow_html, settings.caption_markers)


def _emit(text: str, out: Optional[str]) -> None:
    """Write text to out if given, else print it."""
    if out:
        Path(out).write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {out}")
    else:
        typer.echo(text, nl=False)


def _load_documents(paths: list[str]) -> list[Document]:
    """Decompose each markdown file; a file without a title is titled by its stem."""
    docs = []
    for path in discover_all(Path(p) for p in paths):
        try:
            doc = decompose(read_text(path))
        except MdArticleError as e:
            _fail(f"Failed to read {path}", e)
        if not doc.metadata.title:
            doc = doc.model_copy(update={"metadata": doc.metadata.model_copy(update={"title": path.stem})})
        docs.append(doc)
    return docs


def render_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to render")],
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Write HTML here instead of stdout")] = None,
    allow_html: Annotated[Optional[bool], typer.Option("--allow-html/--escape-html", help="Pass raw HTML through")] = None,
    ):
    """Render a markdown file (frontmatter stripped) to an HTML fragment."""
    settings = _settings(overrides={"allow_html": allow_html})
    source = Path(path)
    if not source.is_file():
        _fail(f"No such file: {path}")
    try:
        doc = decompose(read_text(source))
    except MdArticleError as e:
        _fail(f"Failed to read {path}", e)
    _emit(render(doc.body, _parser(settings)), out)


def pack_cmd(
    paths: Annotated[list[str], typer.Argument(help="Markdown files or directories")],
    out: Annotated[str, typer.Option("--out", "-o", help="Zip file to write")],
    naming: Annotated[Optional[str], typer.Option("--naming", help="Name entries by 'title' or 'slug'")] = None,
    header: Annotated[Optional[bool], typer.Option("--header/--no-header", help="Prepend YAML frontmatter")] = None,
    title_heading: Annotated[Optional[bool], typer.Option("--title-heading/--no-title-heading", help="Prepend '# <title>'")] = None,
    on_collision: Annotated[Optional[str], typer.Option("--on-collision", help="overwrite, error, or suffix")] = None,
    ):
    """Pack markdown files into a zip archive with one entry per document."""
    settings = _settings(overrides={
        "naming": naming, "include_header": header,
        "include_title_heading": title_heading, "on_collision": on_collision,
    })
    docs = _load_documents(paths)
    if not docs:
        typer.echo("No markdown files found.")
        raise typer.Exit(1)
    _write_archive(docs, settings, Path(out))


def _write_archive(docs: list[Document], settings: Settings, out: Path) -> None:
    try:
        archive = pack(
            docs,
            NamingPolicy(settings.naming),
            compose_header=settings.include_header,
            include_title_heading=settings.include_title_heading,
            on_collision=CollisionPolicy(settings.on_collision),
            extension=settings.archive_extension,
        )
    except MdArticleError as e:
        _fail("Packing failed", e)
    archive.write(out)
    for name in archive.collisions:
        typer.echo(f"  overwritten: {name}")
    typer.echo(f"Packed {len(archive)} document(s) into {out}")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def import_cmd(
    paths: Annotated[list[str], typer.Argument(help="Markdown files or directories")],
    kind: Annotated[ArticleKind, typer.Option("--kind", help="Import as posts, notes, or pages")] = ArticleKind.post,
    ):
    """Import markdown files into the database as posts or notes."""
    settings = _settings()
    files = discover_all(Path(p) for p in paths)
    if not files:
        typer.echo("No markdown files found.")
        raise typer.Exit(1)
    try:
        items = [item_from_text(read_text(f)) for f in files]
    except MdArticleError as e:
        _fail("Import failed", e)

    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            if kind == ArticleKind.note:
                rows = insert_notes(session, prepare_notes(items))
            else:
                rows = insert_posts(session, prepare_posts(items, SQLCategoryRepo(session)), kind)
            session.commit()
            ids = [r.id for r in rows]
    except Exception as e:
        _fail("Import failed", e)
    for f, article_id in zip(files, ids):
        typer.echo(f"  {f} -> {article_id}")
    typer.echo(f"Imported {len(ids)} {kind.value}(s)")


def show_cmd(
    article_id: Annotated[int, typer.Argument(help="Article id")],
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Write HTML here instead of stdout")] = None,
    ):
    """Render a stored article to HTML."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            html, _ = render_article(session, article_id, _parser(settings))
    except MdArticleError as e:
        _fail(str(e))
    _emit(html, out)


def export_cmd(
    out: Annotated[str, typer.Option("--out", "-o", help="Zip file to write")],
    kind: Annotated[Optional[ArticleKind], typer.Option("--kind", help="Only export this kind")] = None,
    naming: Annotated[Optional[str], typer.Option("--naming", help="Name entries by 'title' or 'slug'")] = None,
    header: Annotated[Optional[bool], typer.Option("--header/--no-header", help="Prepend YAML frontmatter")] = None,
    on_collision: Annotated[Optional[str], typer.Option("--on-collision", help="overwrite, error, or suffix")] = None,
    ):
    """Export stored articles into a zip archive."""
    settings = _settings(overrides={"naming": naming, "include_header": header, "on_collision": on_collision})
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        docs = [article_document(a) for a in all_articles(session, kind)]
    if not docs:
        typer.echo("No articles found in database.")
        raise typer.Exit(1)
    _write_archive(docs, settings, Path(out))
