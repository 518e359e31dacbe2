"""Unit tests for core/ingest.py"""

from datetime import datetime

import pytest

from mdarticle.core.ingest import item_from_text, prepare_notes, prepare_posts
from mdarticle.core.models import ImportItem
from mdarticle.crud.memory_repo import MemoryCategoryRepo
from mdarticle.crud.repo import DEFAULT_CATEGORY


NOW = datetime(2024, 5, 6, 7, 8, 9)


@pytest.fixture(name="repo")
def repo_fixture():
    return MemoryCategoryRepo()


# --- item_from_text ---

def test_item_from_text_with_header():
    item = item_from_text("---\ntitle: T\n---\n\n body \n")
    assert item == ImportItem(text="body", meta={"title": "T"})


def test_item_from_text_without_header():
    assert item_from_text("# Heading\n").meta is None


# --- posts ---

def test_post_without_meta_gets_placeholders(repo):
    records = prepare_posts([ImportItem(text="a"), ImportItem(text="b")], repo, now=NOW)
    assert [r.title for r in records] == ["untitled-1", "untitled-2"]
    millis = int(NOW.timestamp() * 1000)
    assert [r.slug for r in records] == [f"{millis}-1", f"{millis}-2"]
    assert all(r.created == NOW and r.modified == NOW for r in records)


def test_post_without_meta_uses_default_category(repo):
    """The default category is created once and its usage is recorded per post."""
    records = prepare_posts([ImportItem(text="a"), ImportItem(text="b")], repo, now=NOW)
    default_id = repo.resolve_or_create(DEFAULT_CATEGORY)
    assert {r.category_id for r in records} == {default_id}
    assert repo.counts[default_id] == 3


def test_post_with_meta(repo):
    meta = {
        "title": "Hello",
        "slug": "hello",
        "date": datetime(2024, 1, 1),
        "updated": datetime(2024, 1, 2),
        "categories": ["tech", "life"],
    }
    [record] = prepare_posts([ImportItem(text="body", meta=meta)], repo, now=NOW)
    assert record.title == "Hello"
    assert record.slug == "hello"
    assert record.created == datetime(2024, 1, 1)
    assert record.modified == datetime(2024, 1, 2)
    assert record.category_id == repo.resolve_or_create("tech")
    assert "life" not in repo._ids


def test_post_slug_falls_back_to_title(repo):
    [record] = prepare_posts([ImportItem(text="x", meta={"title": "Hi"})], repo, now=NOW)
    assert record.slug == "Hi"


def test_post_category_as_string(repo):
    [record] = prepare_posts([ImportItem(text="x", meta={"title": "Hi", "categories": "misc"})], repo)
    assert record.category_id == repo.resolve_or_create("misc")


def test_post_without_category_uses_default(repo):
    repo.resolve_or_create("first")
    [record] = prepare_posts([ImportItem(text="x", meta={"title": "Hi"})], repo)
    assert record.category_id == repo.resolve_or_create("first")


def test_category_counts_accumulate(repo):
    items = [ImportItem(text=str(i), meta={"title": str(i), "categories": ["tech"]}) for i in range(3)]
    records = prepare_posts(items, repo)
    cid = records[0].category_id
    assert repo.counts[cid] == 3


def test_post_meta_without_title(repo):
    records = prepare_posts([
        ImportItem(text="a"),
        ImportItem(text="b", meta={"slug": "b-slug"}),
    ], repo, now=NOW)
    assert [r.title for r in records] == ["untitled-1", "untitled-2"]
    assert records[1].slug == "b-slug"


def test_post_numeric_title_is_text(repo):
    [record] = prepare_posts([ImportItem(text="x", meta={"title": 2024})], repo)
    assert record.title == "2024"


# --- notes ---

def test_prepare_notes():
    records = prepare_notes([
        ImportItem(text="n1", meta={"title": "Note", "date": datetime(2024, 1, 1)}),
        ImportItem(text="n2"),
    ], now=NOW)
    assert records[0].title == "Note"
    assert records[0].created == records[0].modified == datetime(2024, 1, 1)
    assert records[1].title == "untitled note"
    assert records[1].created == NOW
