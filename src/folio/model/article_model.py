"""
Article Model - Repository for articles and their tags
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from ..utils.config import Config
from ..utils.text_normalizer import TextNormalizer
from .database import Database
from .schema import article_tags, articles, tags, utcnow

logger = logging.getLogger(__name__)

TRUE_STRINGS = ('1', 'true', 'yes', 'on')

# Reading depth of a layered article, shallowest first
LAYER_NAMES = ('headline', 'context', 'detail', 'discussion')


class ArticleNotFoundError(LookupError):
    """Raised when no article matches a slug/locale pair or an id."""

    def __init__(self, slug=None, locale=None, article_id=None):
        self.slug = slug
        self.locale = locale
        self.article_id = article_id
        if article_id is not None:
            message = f"Article not found: #{article_id}"
        else:
            message = f"Article not found: {slug} ({locale})"
        super().__init__(message)


class DuplicateArticleError(Exception):
    """Raised when an article with the same slug already exists for a locale."""
    pass


class ArticleValidationError(ValueError):
    """Raised when article data cannot be stored as given."""
    pass


@dataclass
class Article:
    """An article as read from the store, tags included."""
    id: int
    slug: str
    locale: str
    title: str
    description: Optional[str]
    body: str
    date: datetime
    published: bool
    author: Optional[str] = None
    image: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    layers: Dict[str, str] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_draft(self) -> bool:
        return not self.published

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'slug': self.slug,
            'locale': self.locale,
            'title': self.title,
            'description': self.description,
            'body': self.body,
            'author': self.author,
            'image': self.image,
            'published': self.published,
            'tags': list(self.tags),
            'layers': dict(self.layers),
        }
        for key in ('date', 'created_at', 'updated_at'):
            value = getattr(self, key)
            data[key] = value.isoformat() if value else None
        return data


def parse_date(value: Any) -> Optional[datetime]:
    """Accept a datetime, a date or an ISO string; naive values are taken as UTC."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
        except ValueError as e:
            raise ArticleValidationError(f"Invalid date: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def text_field(data: Dict[str, Any], key: str) -> Optional[str]:
    """A string field of ``data``; None when absent or null."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ArticleValidationError(f"Field '{key}' must be a string")
    return value


def normalize_layers(value: Any) -> Optional[Dict[str, str]]:
    """
    Clean the layers of a layered article.

    Each layer is given as markdown, or as ``{"content": markdown}``.
    Blank layers are dropped; no layers at all is None.

    Raises:
        ArticleValidationError: If a layer name is unknown or its content isn't text
    """
    if value is None or value == '':
        return None
    if not isinstance(value, dict):
        raise ArticleValidationError(
            f"Layers must be an object keyed by layer name ({', '.join(LAYER_NAMES)})"
        )

    unknown = [name for name in value if name not in LAYER_NAMES]
    if unknown:
        raise ArticleValidationError(f"Unknown layer(s): {', '.join(map(str, unknown))}")

    layers = {}
    for name in LAYER_NAMES:
        content = value.get(name)
        if isinstance(content, dict):
            content = content.get('content')
        if content is None:
            continue
        if not isinstance(content, str):
            raise ArticleValidationError(f"Layer '{name}' must be markdown text")
        if content.strip():
            layers[name] = content
    return layers or None


class ArticleModel:
    """Article data model with business logic"""

    def __init__(self, database: Optional[Database] = None):
        self.db = database or Database()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """
        Clean incoming article data.

        Args:
            data: Raw fields (form values or JSON)
            partial: True for updates, where absent fields are left alone

        Returns:
            Dictionary with only the recognised fields, normalised

        Raises:
            ArticleValidationError: If a field is missing or malformed
        """
        cleaned: Dict[str, Any] = {}

        if 'title' in data or not partial:
            title = (text_field(data, 'title') or '').strip()
            if not title:
                raise ArticleValidationError("Title is required")
            if len(title) > 255:
                raise ArticleValidationError("Title must be at most 255 characters")
            cleaned['title'] = title

        if not partial:
            locale = (text_field(data, 'locale') or '').strip()
            if not Config.is_supported_locale(locale):
                raise ArticleValidationError(
                    f"Unsupported locale '{locale}'. Expected one of: {', '.join(Config.SUPPORTED_LOCALES)}"
                )
            cleaned['locale'] = locale

            slug = (text_field(data, 'slug') or '').strip() or TextNormalizer.slugify(cleaned['title'])
            if not TextNormalizer.is_valid_slug(slug):
                raise ArticleValidationError(
                    f"Invalid slug '{slug}': use lowercase letters, digits and single hyphens"
                )
            cleaned['slug'] = slug

        for key in ('description', 'author', 'image'):
            if key in data:
                cleaned[key] = (text_field(data, key) or '').strip() or None

        if cleaned.get('image') and not TextNormalizer.is_safe_url(cleaned['image']):
            raise ArticleValidationError("Image must be an http(s) URL or a site path")

        if 'body' in data or not partial:
            cleaned['body'] = text_field(data, 'body') or text_field(data, 'content') or ''

        if 'layers' in data:
            cleaned['layers'] = normalize_layers(data.get('layers'))

        if 'date' in data:
            cleaned['date'] = parse_date(data.get('date'))

        if 'published' in data:
            cleaned['published'] = parse_bool(data.get('published'))

        if 'tags' in data:
            try:
                cleaned['tags'] = TextNormalizer.normalize_tags(data.get('tags'))
            except ValueError as e:
                raise ArticleValidationError(str(e)) from e

        return cleaned

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def _load_tags(conn: Connection, article_ids: Iterable[int]) -> Dict[int, List[str]]:
        article_ids = list(article_ids)
        if not article_ids:
            return {}
        stmt = (
            select(article_tags.c.article_id, tags.c.name)
            .join(tags, tags.c.id == article_tags.c.tag_id)
            .where(article_tags.c.article_id.in_(article_ids))
            .order_by(tags.c.name)
        )
        tags_by_article: Dict[int, List[str]] = {}
        for article_id, name in conn.execute(stmt):
            tags_by_article.setdefault(article_id, []).append(name)
        return tags_by_article

    @staticmethod
    def _to_article(row, tag_names: List[str]) -> Article:
        return Article(
            id=row['id'],
            slug=row['slug'],
            locale=row['locale'],
            title=row['title'],
            description=row['description'],
            body=row['body'] or '',
            date=row['date'],
            published=bool(row['published']),
            author=row['author'],
            image=row['image'],
            tags=tag_names,
            layers=dict(row['layers'] or {}),
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def _fetch_many(self, stmt) -> List[Article]:
        with self.db.connection() as conn:
            rows = conn.execute(stmt).mappings().all()
            tags_by_article = self._load_tags(conn, (row['id'] for row in rows))
        return [self._to_article(row, tags_by_article.get(row['id'], [])) for row in rows]

    def _fetch_one(self, conn: Connection, stmt) -> Optional[Article]:
        row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return self._to_article(row, self._load_tags(conn, [row['id']]).get(row['id'], []))

    def get_article_by_slug(self, slug: str, locale: str) -> Article:
        """
        Retrieve a single article by slug and locale, drafts included.

        Raises:
            ArticleNotFoundError: If no article matches
        """
        stmt = select(articles).where(articles.c.slug == slug, articles.c.locale == locale)
        with self.db.connection() as conn:
            article = self._fetch_one(conn, stmt)
        if article is None:
            raise ArticleNotFoundError(slug=slug, locale=locale)
        return article

    def get_article_by_id(self, article_id: int) -> Article:
        stmt = select(articles).where(articles.c.id == article_id)
        with self.db.connection() as conn:
            article = self._fetch_one(conn, stmt)
        if article is None:
            raise ArticleNotFoundError(article_id=article_id)
        return article

    def article_exists(self, article_id: int) -> bool:
        stmt = select(articles.c.id).where(articles.c.id == article_id)
        with self.db.connection() as conn:
            return conn.execute(stmt).first() is not None

    def get_articles_by_locale(self, locale: str, include_drafts: bool = False) -> List[Article]:
        """Retrieve the articles of a locale, newest publish date first"""
        stmt = select(articles).where(articles.c.locale == locale)
        if not include_drafts:
            stmt = stmt.where(articles.c.published.is_(True))
        stmt = stmt.order_by(articles.c.date.desc(), articles.c.id.desc())
        return self._fetch_many(stmt)

    def get_article_slugs(self, locale: str) -> List[str]:
        stmt = (
            select(articles.c.slug)
            .where(articles.c.locale == locale, articles.c.published.is_(True))
            .order_by(articles.c.slug)
        )
        with self.db.connection() as conn:
            return list(conn.execute(stmt).scalars())

    def get_recent_articles(self, limit: int = 5, locale: Optional[str] = None,
                            published_only: bool = False) -> List[Article]:
        """Get the most recently created articles"""
        stmt = select(articles)
        if locale:
            stmt = stmt.where(articles.c.locale == locale)
        if published_only:
            stmt = stmt.where(articles.c.published.is_(True))
        stmt = stmt.order_by(articles.c.created_at.desc(), articles.c.id.desc()).limit(limit)
        return self._fetch_many(stmt)

    def get_popular_tags(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Tags ordered by the number of articles using them"""
        article_count = func.count(article_tags.c.article_id).label('count')
        stmt = (
            select(tags.c.name, article_count)
            .join(article_tags, article_tags.c.tag_id == tags.c.id)
            .group_by(tags.c.id, tags.c.name)
            .order_by(article_count.desc(), tags.c.name)
            .limit(limit)
        )
        with self.db.connection() as conn:
            return [{'name': name, 'count': count} for name, count in conn.execute(stmt)]

    def get_statistics(self) -> Dict[str, Any]:
        """Get article statistics for the dashboard"""
        with self.db.connection() as conn:
            total = conn.execute(select(func.count()).select_from(articles)).scalar_one()
            published = conn.execute(
                select(func.count()).select_from(articles).where(articles.c.published.is_(True))
            ).scalar_one()
            by_locale = {locale: 0 for locale in Config.SUPPORTED_LOCALES}
            for locale, count in conn.execute(
                select(articles.c.locale, func.count()).group_by(articles.c.locale)
            ):
                by_locale[locale] = count
            tags_total = conn.execute(select(func.count()).select_from(tags)).scalar_one()

        return {
            'total': total,
            'published': published,
            'drafts': total - published,
            'by_locale': by_locale,
            'tags_total': tags_total,
            'popular_tags': self.get_popular_tags(),
        }

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @staticmethod
    def _set_tags(conn: Connection, article_id: int, tag_names: List[str]) -> None:
        """Replace the tag links of an article, creating tags that don't exist yet."""
        conn.execute(delete(article_tags).where(article_tags.c.article_id == article_id))
        for name in tag_names:
            tag_id = conn.execute(
                select(tags.c.id).where(func.lower(tags.c.name) == name.lower())
            ).scalar()
            if tag_id is None:
                tag_id = conn.execute(
                    insert(tags).values(name=name, created_at=utcnow())
                ).inserted_primary_key[0]
                logger.debug(f"Created tag: {name}")
            conn.execute(insert(article_tags).values(article_id=article_id, tag_id=tag_id))

    def create_article(self, data: Dict[str, Any]) -> Article:
        """
        Insert a new article with its tags.

        Args:
            data: Article fields; ``locale`` and ``title`` are required,
                a blank ``slug`` is derived from the title

        Returns:
            The stored article

        Raises:
            ArticleValidationError: If the data is invalid
            DuplicateArticleError: If the slug is taken for that locale
        """
        cleaned = self.validate(data)
        now = utcnow()
        values = {
            'slug': cleaned['slug'],
            'locale': cleaned['locale'],
            'title': cleaned['title'],
            'description': cleaned.get('description'),
            'body': cleaned['body'],
            'author': cleaned.get('author') or Config.SITE_AUTHOR,
            'image': cleaned.get('image'),
            'layers': cleaned.get('layers'),
            'date': cleaned.get('date') or now,
            'published': cleaned.get('published', True),
            'created_at': now,
            'updated_at': now,
        }

        try:
            with self.db.begin() as conn:
                existing = conn.execute(
                    select(articles.c.id).where(
                        articles.c.slug == values['slug'], articles.c.locale == values['locale']
                    )
                ).first()
                if existing is not None:
                    raise DuplicateArticleError(
                        f"Article already exists: {values['slug']} ({values['locale']})"
                    )
                article_id = conn.execute(insert(articles).values(**values)).inserted_primary_key[0]
                self._set_tags(conn, article_id, cleaned.get('tags', []))
        except IntegrityError as e:
            raise DuplicateArticleError(
                f"Article already exists: {values['slug']} ({values['locale']})"
            ) from e

        logger.info(f"Created article: {values['slug']} ({values['locale']}) - {values['title']}")
        return self.get_article_by_id(article_id)

    def update_article(self, slug: str, locale: str, data: Dict[str, Any]) -> Article:
        """
        Update an existing article. Only the fields present in ``data`` change;
        ``tags``, when present, replaces the whole tag set.

        Raises:
            ArticleNotFoundError: If the article doesn't exist
            ArticleValidationError: If the data is invalid
        """
        cleaned = self.validate(data, partial=True)
        tag_names = cleaned.pop('tags', None)
        if 'date' in cleaned and cleaned['date'] is None:
            cleaned.pop('date')

        with self.db.begin() as conn:
            article_id = conn.execute(
                select(articles.c.id).where(articles.c.slug == slug, articles.c.locale == locale)
            ).scalar()
            if article_id is None:
                raise ArticleNotFoundError(slug=slug, locale=locale)

            cleaned['updated_at'] = utcnow()
            conn.execute(update(articles).where(articles.c.id == article_id).values(**cleaned))
            if tag_names is not None:
                self._set_tags(conn, article_id, tag_names)

        logger.info(f"Updated article: {slug} ({locale})")
        return self.get_article_by_id(article_id)

    def set_published(self, slug: str, locale: str, published: bool) -> Article:
        return self.update_article(slug, locale, {'published': published})

    def delete_article(self, slug: str, locale: str) -> Article:
        """
        Delete an article and its tag links.

        Returns:
            The article as it was before deletion

        Raises:
            ArticleNotFoundError: If the article doesn't exist
        """
        article = self.get_article_by_slug(slug, locale)
        with self.db.begin() as conn:
            conn.execute(delete(article_tags).where(article_tags.c.article_id == article.id))
            conn.execute(delete(articles).where(articles.c.id == article.id))
        logger.info(f"Deleted article: {slug} ({locale})")
        return article
