"""Database table definitions for articles and categories"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, JSON, Text
from sqlmodel import Field, Relationship, SQLModel


class ArticleKind(str, Enum):
    """Kinds of stored article"""
    post = "post"
    note = "note"
    page = "page"


class Category(SQLModel, table=True):
    """A post category; count tracks how many imported posts used it"""
    __tablename__ = "categories"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(..., index=True, unique=True, nullable=False)
    slug: str = Field(..., nullable=False)
    type: int = Field(default=0, nullable=False)
    count: int = Field(default=0, nullable=False)
    articles: List["Article"] = Relationship(back_populates="category")


class Article(SQLModel, table=True):
    """A stored post, note, or page with its raw markdown text"""
    __tablename__ = "articles"
    id: Optional[int] = Field(default=None, primary_key=True)
    kind: ArticleKind = Field(default=ArticleKind.post, index=True, nullable=False)
    title: str = Field(..., nullable=False)
    slug: Optional[str] = Field(default=None, index=True)
    text: str = Field(..., sa_column=Column(Text, nullable=False))
    created: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    modified: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    extra: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id")
    category: Optional[Category] = Relationship(back_populates="articles")
