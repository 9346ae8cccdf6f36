"""create articles and tags

Revision ID: 0001
Revises:
Create Date: 2025-03-01

Articles are unique per (slug, locale); tags are shared across locales and
linked through article_tags.
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'articles',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('locale', sa.String(10), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('body', sa.Text, nullable=False, server_default=''),
        sa.Column('author', sa.String(255), nullable=True),
        sa.Column('image', sa.Text, nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('published', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('slug', 'locale', name='uq_articles_slug_locale'),
    )
    op.create_index('idx_articles_locale_date', 'articles', ['locale', 'date'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'article_tags',
        sa.Column('article_id', sa.Integer, sa.ForeignKey('articles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer, sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table('article_tags')
    op.drop_table('tags')
    op.drop_index('idx_articles_locale_date', table_name='articles')
    op.drop_table('articles')
