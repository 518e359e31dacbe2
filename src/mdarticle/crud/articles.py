"""Article and category persistence: category resolution, inserts, lookup, and rendering"""

from typing import Iterable, Optional

import structlog
from markdown_it import MarkdownIt
from sqlmodel import Session, select

from mdarticle.core.models import Document, Metadata, NoteRecord, PostRecord
from mdarticle.core.render import render
from mdarticle.crud.models import Article, ArticleKind, Category
from mdarticle.crud.repo import DEFAULT_CATEGORY, CategoryRepo
from mdarticle.errors import DocumentNotFound


log = structlog.get_logger(__name__)


class SQLCategoryRepo(CategoryRepo):
    """Category resolution backed by the categories table. Flushes, never commits."""

    def __init__(self, session: Session):
        self.session = session

    def _bump(self, category: Category) -> int:
        category.count += 1
        self.session.add(category)
        self.session.flush()
        return category.id

    def _create(self, name: str) -> Category:
        category = Category(name=name, slug=name)
        self.session.add(category)
        self.session.flush()
        log.info("created category", name=name, id=category.id)
        return category

    def resolve_or_create(self, name: str) -> int:
        category = self.session.exec(select(Category).where(Category.name == name)).first()
        return self._bump(category or self._create(name))

    def use_default(self) -> int:
        category = self.session.exec(select(Category).order_by(Category.id)).first()
        return self._bump(category or self._create(DEFAULT_CATEGORY))


def list_category_names(session: Session) -> list[str]:
    return list(session.exec(select(Category.name).order_by(Category.id)).all())


def insert_posts(
    session: Session,
    records: Iterable[PostRecord],
    kind: ArticleKind = ArticleKind.post,
    ) -> list[Article]:
    """Add posts (or pages) to the session and flush; caller controls the transaction."""
    rows = [Article(kind=kind, **r.model_dump()) for r in records]
    session.add_all(rows)
    session.flush()
    return rows


def insert_notes(session: Session, records: Iterable[NoteRecord]) -> list[Article]:
    """Add notes to the session and flush; caller controls the transaction."""
    rows = [Article(kind=ArticleKind.note, **r.model_dump()) for r in records]
    session.add_all(rows)
    session.flush()
    return rows


def get_article(session: Session, article_id: int) -> Optional[Article]:
    """Return the article with the given id, or None if not found."""
    return session.get(Article, article_id)


def all_articles(session: Session, kind: Optional[ArticleKind] = None) -> list[Article]:
    """Return stored articles ordered by id, optionally of a single kind."""
    query = select(Article).order_by(Article.id)
    if kind is not None:
        query = query.where(Article.kind == kind)
    return list(session.exec(query).all())


def article_document(article: Article) -> Document:
    """Build an immutable Document from a stored article."""
    extra = dict(article.extra or {})
    if article.category:
        extra["categories"] = [article.category.name]
    metadata = Metadata(
        title=article.title,
        slug=article.slug,
        created=article.created,
        modified=article.modified,
        **extra,
    )
    return Document(metadata=metadata, body=article.text)


def render_article(session: Session, article_id: int, md: Optional[MarkdownIt] = None) -> tuple[str, Document]:
    """Return (html, document) for a stored article. Raises DocumentNotFound."""
    article = get_article(session, article_id)
    if article is None:
        raise DocumentNotFound(article_id)
    document = article_document(article)
    return render(document.body, md), document
