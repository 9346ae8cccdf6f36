"""
Content import - Load markdown/MDX articles from the content directory

Files live under ``<content_dir>/articles/<locale>/<slug>.mdx`` (or ``.md``)
and may start with a YAML front-matter block::

    ---
    title: My article
    description: One-line summary
    date: 2025-04-15
    tags: [Blockchain, UI/UX]
    published: true
    layers:
      headline: The short version
      detail: The long version
    ---
"""
import logging
import os
import re
from typing import Any, Dict, Optional, Tuple

import yaml

from ..model.article_model import (
    ArticleModel, ArticleNotFoundError, ArticleValidationError, DuplicateArticleError, parse_bool,
)
from ..utils.config import Config

logger = logging.getLogger(__name__)

CONTENT_EXTENSIONS = ('.mdx', '.md')
FRONT_MATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)', re.S)
FRONT_MATTER_FIELDS = ('title', 'description', 'date', 'image', 'tags', 'published', 'author', 'layers')


def parse_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a document into its front-matter mapping and markdown body.

    Raises:
        ValueError: If the front matter is not a YAML mapping
    """
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid front matter: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Front matter must be a mapping")
    return data, text[match.end():]


def article_from_file(path: str, locale: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        front_matter, body = parse_front_matter(f.read())

    data = {key: front_matter[key] for key in FRONT_MATTER_FIELDS if key in front_matter}
    data['slug'] = os.path.splitext(os.path.basename(path))[0]
    data['locale'] = locale
    data['body'] = body.lstrip('\n')
    # Published unless the front matter says otherwise
    data['published'] = parse_bool(front_matter['published']) if 'published' in front_matter else True
    return data


def import_content(content_dir: Optional[str] = None, update: bool = False,
                   article_model: Optional[ArticleModel] = None) -> Dict[str, int]:
    """
    Import every article file of every supported locale.

    Args:
        content_dir: Root holding ``articles/<locale>/``; defaults to CONTENT_DIR
        update: Overwrite articles that already exist instead of skipping them
        article_model: Repository to write through

    Returns:
        Counts of imported, updated, skipped and failed files
    """
    content_dir = content_dir or Config.CONTENT_DIR
    article_model = article_model or ArticleModel()
    stats = {'imported': 0, 'updated': 0, 'skipped': 0, 'failed': 0}

    for locale in Config.SUPPORTED_LOCALES:
        articles_dir = os.path.join(content_dir, 'articles', locale)
        if not os.path.isdir(articles_dir):
            logger.warning(f"Articles directory for locale '{locale}' does not exist: {articles_dir}")
            continue

        for filename in sorted(os.listdir(articles_dir)):
            if not filename.endswith(CONTENT_EXTENSIONS):
                continue
            path = os.path.join(articles_dir, filename)

            try:
                data = article_from_file(path, locale)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to read {path}: {e}")
                stats['failed'] += 1
                continue

            try:
                article_model.create_article(data)
                stats['imported'] += 1
                logger.info(f"Imported article: {data['slug']} ({locale})")
            except DuplicateArticleError:
                if not update:
                    logger.info(f"Article {data['slug']} ({locale}) already exists, skipping")
                    stats['skipped'] += 1
                    continue
                try:
                    fields = {k: v for k, v in data.items() if k not in ('slug', 'locale')}
                    article_model.update_article(data['slug'], locale, fields)
                    stats['updated'] += 1
                    logger.info(f"Updated article: {data['slug']} ({locale})")
                except (ArticleNotFoundError, ArticleValidationError) as e:
                    logger.error(f"Failed to update article {data['slug']} ({locale}): {e}")
                    stats['failed'] += 1
            except ArticleValidationError as e:
                logger.error(f"Failed to import article {data['slug']} ({locale}): {e}")
                stats['failed'] += 1

    logger.info(
        f"Import completed: {stats['imported']} imported, {stats['updated']} updated, "
        f"{stats['skipped']} skipped, {stats['failed']} failed"
    )
    return stats
