"""create claps and annotations

Revision ID: 0002
Revises: 0001
Create Date: 2025-03-15
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'claps',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('article_id', sa.Integer, sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text_fragment', sa.Text, nullable=False),
        sa.Column('start_offset', sa.Integer, nullable=False),
        sa.Column('end_offset', sa.Integer, nullable=False),
        sa.Column('count', sa.Integer, nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_claps_article', 'claps', ['article_id'])

    op.create_table(
        'annotations',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('article_id', sa.Integer, sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('text_fragment', sa.Text, nullable=False),
        sa.Column('start_offset', sa.Integer, nullable=False),
        sa.Column('end_offset', sa.Integer, nullable=False),
        sa.Column('note', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_annotations_article', 'annotations', ['article_id'])


def downgrade() -> None:
    op.drop_index('idx_annotations_article', table_name='annotations')
    op.drop_table('annotations')
    op.drop_index('idx_claps_article', table_name='claps')
    op.drop_table('claps')
