"""
Engagement Model - Text-level claps and inline annotations on articles
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update

from .article_model import ArticleNotFoundError
from .database import Database
from .schema import annotations, articles, claps, utcnow

logger = logging.getLogger(__name__)


class AnnotationNotFoundError(LookupError):
    """Raised when an annotation id doesn't exist."""
    pass


class AnnotationPermissionError(PermissionError):
    """Raised when someone other than its author changes an annotation."""
    pass


class EngagementValidationError(ValueError):
    """Raised when a clap or annotation payload is incomplete."""
    pass


def _serialize(row) -> Dict[str, Any]:
    data = dict(row)
    for key in ('created_at', 'updated_at'):
        if data.get(key) is not None:
            data[key] = data[key].isoformat()
    return data


def _require_text(value: Any, name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise EngagementValidationError(f"{name} must be a string")
    if not value or not value.strip():
        raise EngagementValidationError(f"{name} is required")
    return value


def _validate_fragment(text_fragment: Any, start_offset: Any, end_offset: Any):
    _require_text(text_fragment, 'textFragment')
    if isinstance(start_offset, bool) or isinstance(end_offset, bool):
        raise EngagementValidationError("position must hold integer startOffset and endOffset")
    try:
        start, end = int(start_offset), int(end_offset)
    except (TypeError, ValueError) as e:
        raise EngagementValidationError("position must hold integer startOffset and endOffset") from e
    if start < 0 or end < start:
        raise EngagementValidationError("position offsets must satisfy 0 <= startOffset <= endOffset")
    return start, end


class _EngagementModel:
    def __init__(self, database: Optional[Database] = None):
        self.db = database or Database()

    @staticmethod
    def _require_article(conn, article_id: int) -> None:
        found = conn.execute(select(articles.c.id).where(articles.c.id == article_id)).first()
        if found is None:
            raise ArticleNotFoundError(article_id=article_id)


class ClapModel(_EngagementModel):
    """Claps readers give to specific passages of an article"""

    def add_clap(self, article_id: int, text_fragment: str, start_offset: int, end_offset: int) -> Dict[str, Any]:
        """
        Clap for a passage: the count of an already clapped fragment is
        incremented, a new fragment starts at 1.

        Raises:
            ArticleNotFoundError: If the article doesn't exist
            EngagementValidationError: If the fragment or offsets are invalid
        """
        start, end = _validate_fragment(text_fragment, start_offset, end_offset)
        now = utcnow()

        with self.db.begin() as conn:
            self._require_article(conn, article_id)
            existing = conn.execute(
                select(claps.c.id, claps.c.count).where(
                    claps.c.article_id == article_id, claps.c.text_fragment == text_fragment
                )
            ).first()

            if existing is not None:
                clap_id = existing.id
                conn.execute(
                    update(claps)
                    .where(claps.c.id == clap_id)
                    .values(count=claps.c.count + 1, updated_at=now)
                )
            else:
                clap_id = conn.execute(
                    insert(claps).values(
                        article_id=article_id,
                        text_fragment=text_fragment,
                        start_offset=start,
                        end_offset=end,
                        count=1,
                        created_at=now,
                        updated_at=now,
                    )
                ).inserted_primary_key[0]

            row = conn.execute(select(claps).where(claps.c.id == clap_id)).mappings().one()

        logger.debug(f"Clap on article #{article_id}: count={row['count']}")
        return _serialize(row)

    def get_claps(self, article_id: int) -> List[Dict[str, Any]]:
        """All claps of an article, most clapped first"""
        with self.db.connection() as conn:
            self._require_article(conn, article_id)
            rows = conn.execute(
                select(claps)
                .where(claps.c.article_id == article_id)
                .order_by(claps.c.count.desc(), claps.c.id)
            ).mappings().all()
        return [_serialize(row) for row in rows]


class AnnotationModel(_EngagementModel):
    """Inline notes readers attach to passages of an article"""

    def add_annotation(self, article_id: int, user_id: str, text_fragment: str,
                       start_offset: int, end_offset: int, note: str) -> Dict[str, Any]:
        start, end = _validate_fragment(text_fragment, start_offset, end_offset)
        _require_text(user_id, 'userId')
        note = _require_text(note, 'note').strip()
        now = utcnow()

        with self.db.begin() as conn:
            self._require_article(conn, article_id)
            annotation_id = conn.execute(
                insert(annotations).values(
                    article_id=article_id,
                    user_id=user_id,
                    text_fragment=text_fragment,
                    start_offset=start,
                    end_offset=end,
                    note=note,
                    created_at=now,
                    updated_at=now,
                )
            ).inserted_primary_key[0]
            row = conn.execute(select(annotations).where(annotations.c.id == annotation_id)).mappings().one()

        logger.info(f"Annotation #{annotation_id} added to article #{article_id}")
        return _serialize(row)

    def get_annotations(self, article_id: int) -> List[Dict[str, Any]]:
        """All annotations of an article, newest first"""
        with self.db.connection() as conn:
            self._require_article(conn, article_id)
            rows = conn.execute(
                select(annotations)
                .where(annotations.c.article_id == article_id)
                .order_by(annotations.c.created_at.desc(), annotations.c.id.desc())
            ).mappings().all()
        return [_serialize(row) for row in rows]

    @staticmethod
    def _owned_row(conn, annotation_id: int, user_id: Any):
        """
        The annotation row, provided ``user_id`` wrote it.

        Raises:
            EngagementValidationError: If no user id is given
            AnnotationNotFoundError: If the annotation doesn't exist
            AnnotationPermissionError: If another user wrote it
        """
        _require_text(user_id, 'userId')
        row = conn.execute(select(annotations).where(annotations.c.id == annotation_id)).mappings().first()
        if row is None:
            raise AnnotationNotFoundError(f"Annotation not found: #{annotation_id}")
        if row['user_id'] != user_id:
            logger.warning(f"User {user_id!r} tried to change annotation #{annotation_id}")
            raise AnnotationPermissionError(f"Annotation #{annotation_id} belongs to another user")
        return row

    def update_annotation(self, annotation_id: int, note: str, user_id: str) -> Dict[str, Any]:
        """Replace the note of an annotation; only its author may do so."""
        note = _require_text(note, 'note').strip()
        with self.db.begin() as conn:
            self._owned_row(conn, annotation_id, user_id)
            conn.execute(
                update(annotations)
                .where(annotations.c.id == annotation_id)
                .values(note=note, updated_at=utcnow())
            )
            row = conn.execute(select(annotations).where(annotations.c.id == annotation_id)).mappings().one()
        return _serialize(row)

    def delete_annotation(self, annotation_id: int, user_id: str) -> Dict[str, Any]:
        with self.db.begin() as conn:
            row = self._owned_row(conn, annotation_id, user_id)
            conn.execute(delete(annotations).where(annotations.c.id == annotation_id))
        logger.info(f"Annotation #{annotation_id} deleted")
        return _serialize(row)
