"""
Relational schema for articles, tags and reader engagement.

Migrations under ``folio/migrations`` create these tables; the metadata is
also the autogenerate target for new revisions.
"""
from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, MetaData, String, Table, Text,
    UniqueConstraint,
)

metadata = MetaData()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


articles = Table(
    'articles', metadata,
    Column('id', Integer, primary_key=True),
    Column('slug', String(255), nullable=False),
    Column('locale', String(10), nullable=False),
    Column('title', String(255), nullable=False),
    Column('description', Text),
    Column('body', Text, nullable=False, default=''),
    Column('author', String(255)),
    Column('image', Text),
    # {layer name: markdown} for layered articles
    Column('layers', JSON),
    Column('date', DateTime(timezone=True), nullable=False, default=utcnow),
    Column('published', Boolean, nullable=False, default=True),
    Column('created_at', DateTime(timezone=True), nullable=False, default=utcnow),
    Column('updated_at', DateTime(timezone=True), nullable=False, default=utcnow),
    UniqueConstraint('slug', 'locale', name='uq_articles_slug_locale'),
    Index('idx_articles_locale_date', 'locale', 'date'),
)

tags = Table(
    'tags', metadata,
    Column('id', Integer, primary_key=True),
    Column('name', String(100), nullable=False, unique=True),
    Column('created_at', DateTime(timezone=True), nullable=False, default=utcnow),
)

article_tags = Table(
    'article_tags', metadata,
    Column('article_id', Integer, ForeignKey('articles.id', ondelete='CASCADE'), primary_key=True),
    Column('tag_id', Integer, ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
)

claps = Table(
    'claps', metadata,
    Column('id', Integer, primary_key=True),
    Column('article_id', Integer, ForeignKey('articles.id', ondelete='CASCADE'), nullable=False),
    Column('text_fragment', Text, nullable=False),
    Column('start_offset', Integer, nullable=False),
    Column('end_offset', Integer, nullable=False),
    Column('count', Integer, nullable=False, default=1),
    Column('created_at', DateTime(timezone=True), nullable=False, default=utcnow),
    Column('updated_at', DateTime(timezone=True), nullable=False, default=utcnow),
    Index('idx_claps_article', 'article_id'),
)

annotations = Table(
    'annotations', metadata,
    Column('id', Integer, primary_key=True),
    Column('article_id', Integer, ForeignKey('articles.id', ondelete='CASCADE'), nullable=False),
    Column('user_id', String(255), nullable=False),
    Column('text_fragment', Text, nullable=False),
    Column('start_offset', Integer, nullable=False),
    Column('end_offset', Integer, nullable=False),
    Column('note', Text, nullable=False),
    Column('created_at', DateTime(timezone=True), nullable=False, default=utcnow),
    Column('updated_at', DateTime(timezone=True), nullable=False, default=utcnow),
    Index('idx_annotations_article', 'article_id'),
)
