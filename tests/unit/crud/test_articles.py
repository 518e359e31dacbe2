"""Unit tests for crud/articles.py"""

from datetime import datetime

import pytest
from sqlmodel import select

from mdarticle.core.ingest import prepare_posts
from mdarticle.core.models import ImportItem, NoteRecord, PostRecord
from mdarticle.crud.articles import (
    SQLCategoryRepo, all_articles, article_document, get_article,
    insert_notes, insert_posts, list_category_names, render_article,
)
from mdarticle.crud.models import Article, ArticleKind, Category
from mdarticle.errors import DocumentNotFound


T = datetime(2024, 3, 4, 5, 6, 7)


def _post(title: str = "P", **kw) -> PostRecord:
    return PostRecord(title=title, slug=kw.pop("slug", title.lower()), text="body", created=T, modified=T, **kw)


# --- SQLCategoryRepo ---

def test_resolve_creates_category(session):
    repo = SQLCategoryRepo(session)
    cid = repo.resolve_or_create("tech")
    c = session.get(Category, cid)
    assert (c.name, c.slug, c.count) == ("tech", "tech", 1)


def test_resolve_existing_increments_count(session, category):
    repo = SQLCategoryRepo(session)
    assert repo.resolve_or_create("tech") == category.id
    assert repo.resolve_or_create("tech") == category.id
    assert session.get(Category, category.id).count == 2


def test_use_default_creates_default(session):
    repo = SQLCategoryRepo(session)
    cid = repo.use_default()
    assert session.get(Category, cid).name == "default"
    assert repo.use_default() == cid
    assert session.get(Category, cid).count == 2


def test_use_default_prefers_first_category(session, category):
    repo = SQLCategoryRepo(session)
    repo.resolve_or_create("later")
    assert repo.use_default() == category.id
    assert list_category_names(session) == ["tech", "later"]


def test_prepare_posts_with_sql_repo(session):
    items = [
        ImportItem(text="a", meta={"title": "A", "categories": ["news"], "tags": ["x"]}),
        ImportItem(text="b"),
    ]
    rows = insert_posts(session, prepare_posts(items, SQLCategoryRepo(session), now=T))
    assert [r.category.name for r in rows] == ["news", "news"]
    assert rows[0].extra == {"tags": ["x"]}
    assert session.exec(select(Category)).one().count == 2


# --- inserts and lookups ---

def test_insert_posts_assigns_ids(session, category):
    rows = insert_posts(session, [_post("A", category_id=category.id), _post("B")])
    assert all(r.id is not None for r in rows)
    assert all(r.kind == ArticleKind.post for r in rows)
    assert rows[0].category.name == "tech"
    assert rows[1].category is None


def test_insert_posts_as_pages(session):
    [row] = insert_posts(session, [_post("About")], ArticleKind.page)
    assert row.kind == ArticleKind.page
    assert all_articles(session, ArticleKind.post) == []
    assert all_articles(session, ArticleKind.page) == [row]


def test_insert_notes(session):
    [row] = insert_notes(session, [NoteRecord(title="N", text="n", created=T, modified=T)])
    assert row.kind == ArticleKind.note
    assert row.slug is None


def test_get_article(session, article):
    assert get_article(session, article.id) is article
    assert get_article(session, 9999) is None


def test_all_articles_filters_by_kind(session, article):
    [note] = insert_notes(session, [NoteRecord(title="N", text="n", created=T, modified=T)])
    assert [a.id for a in all_articles(session)] == [article.id, note.id]
    assert all_articles(session, ArticleKind.note) == [note]
    assert all_articles(session, ArticleKind.page) == []


# --- documents and rendering ---

def test_article_document(article):
    doc = article_document(article)
    assert doc.metadata.title == "Hello"
    assert doc.metadata.slug == "hello"
    assert doc.metadata.created == datetime(2024, 1, 1)
    assert doc.metadata.modified == datetime(2024, 1, 2)
    assert doc.metadata.extra_fields == {"tags": ["x"], "categories": ["tech"]}
    assert doc.body == article.text


def test_article_document_without_category(session):
    [row] = insert_notes(session, [NoteRecord(title="N", text="n", created=T, modified=T)])
    assert article_document(row).metadata.extra_fields == {}


def test_render_article(session, article):
    html, doc = render_article(session, article.id)
    assert html == (
        '<h1>Hello</h1>\n'
        '<p><del class="spoiler" style="filter: invert(25%);">secret</del></p>\n'
    )
    assert doc.metadata.title == "Hello"


def test_render_article_not_found(session):
    with pytest.raises(DocumentNotFound, match="Document not found: 42"):
        render_article(session, 42)


def test_document_not_found_is_lookup_error(session):
    with pytest.raises(LookupError):
        render_article(session, 1)
    assert session.exec(select(Article)).all() == []
