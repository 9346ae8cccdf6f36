"""Scripts package - One-shot database and content tasks"""
from .migrate import run_migrations, get_current_revision
from .seed import seed_database, SEED_ARTICLES
from .import_mdx import import_content, parse_front_matter

__all__ = [
    'run_migrations', 'get_current_revision',
    'seed_database', 'SEED_ARTICLES',
    'import_content', 'parse_front_matter',
]
