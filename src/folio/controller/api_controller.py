"""
API Controller - JSON endpoints for articles, claps, annotations and the editor preview
"""
import logging

from flask import current_app, jsonify, request

from ..model.article_model import (
    ArticleModel, ArticleNotFoundError, ArticleValidationError, DuplicateArticleError,
)
from ..model.engagement_model import (
    AnnotationModel, AnnotationNotFoundError, AnnotationPermissionError, ClapModel,
    EngagementValidationError,
)
from ..services.renderer import MarkdownRenderer
from .base_controller import (
    admin_required, authentication_required, get_translator, has_admin_access, json_error,
    json_success,
)

logger = logging.getLogger(__name__)

WEBSOCKET_STUB_MESSAGE = {
    "message": (
        "WebSocket connections require a server component. In a production environment, "
        "you would use a WebSocket server like Socket.IO, ws, or a service like Pusher or Ably."
    ),
    "info": "For this demo, the client will fall back to polling the API for updates.",
}


def _json_object():
    """The request's JSON object, {} without a body, None for any other JSON value"""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    return payload if isinstance(payload, dict) else None


def _position(payload: dict):
    position = payload.get('position')
    if not isinstance(position, dict):
        return None, None
    return position.get('startOffset'), position.get('endOffset')


class ApiController:
    """Controller for the JSON API"""

    def __init__(self):
        self.article_model = ArticleModel()
        self.clap_model = ClapModel()
        self.annotation_model = AnnotationModel()
        self.renderer = MarkdownRenderer()

    def _query_locale(self):
        return request.args.get('locale') or current_app.config['DEFAULT_LOCALE']

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    def get_articles(self):
        """
        List the published articles of a locale, or one article when ``slug`` is given.

        Drafts are admin-only: ``drafts=true`` needs admin access and adds them
        to the listing or lets a draft slug through. Otherwise a draft answers 404.
        """
        locale = self._query_locale()
        slug = request.args.get('slug')
        include_drafts = request.args.get('drafts', '').lower() == 'true'
        if include_drafts and not has_admin_access():
            return authentication_required()

        if slug:
            try:
                article = self.article_model.get_article_by_slug(slug, locale)
                if article.is_draft and not include_drafts:
                    raise ArticleNotFoundError(slug=slug, locale=locale)
            except ArticleNotFoundError as e:
                return json_error(str(e), 404)
            return json_success(article.to_dict())

        articles = self.article_model.get_articles_by_locale(locale, include_drafts=include_drafts)
        return json_success([a.to_dict() for a in articles])

    @admin_required
    def create_article(self):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return json_error("Article data is required", 400)

        missing = [key for key in ('slug', 'locale', 'title') if not data.get(key)]
        if not (data.get('body') or data.get('content') or data.get('layers')):
            missing.append('body')
        if missing:
            return json_error(f"Missing required fields: {', '.join(missing)}", 400)

        try:
            article = self.article_model.create_article(data)
        except ArticleValidationError as e:
            return json_error(str(e), 400)
        except DuplicateArticleError as e:
            return json_error(str(e), 409)
        return json_success(article.to_dict(), 201)

    @admin_required
    def update_article(self):
        slug = request.args.get('slug')
        locale = request.args.get('locale')
        if not slug or not locale:
            return json_error("Missing required parameters: slug, locale", 400)

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return json_error("Article data is required", 400)

        try:
            article = self.article_model.update_article(slug, locale, data)
        except ArticleNotFoundError as e:
            return json_error(str(e), 404)
        except ArticleValidationError as e:
            return json_error(str(e), 400)
        return json_success(article.to_dict())

    @admin_required
    def delete_article(self):
        slug = request.args.get('slug')
        locale = request.args.get('locale')
        if not slug or not locale:
            return json_error("Missing required parameters: slug, locale", 400)

        try:
            article = self.article_model.delete_article(slug, locale)
        except ArticleNotFoundError as e:
            return json_error(str(e), 404)
        return json_success(article.to_dict())

    # ------------------------------------------------------------------
    # Claps & annotations
    # ------------------------------------------------------------------

    def get_claps(self, article_id: int):
        try:
            return json_success(self.clap_model.get_claps(article_id))
        except ArticleNotFoundError as e:
            return json_error(str(e), 404)

    def add_clap(self, article_id: int):
        payload = _json_object()
        if payload is None:
            return json_error("Request body must be a JSON object", 400)
        start, end = _position(payload)
        try:
            clap = self.clap_model.add_clap(article_id, payload.get('textFragment'), start, end)
        except ArticleNotFoundError as e:
            return json_error(str(e), 404)
        except EngagementValidationError as e:
            return json_error(str(e), 400)
        return json_success(clap)

    def get_annotations(self, article_id: int):
        try:
            return json_success(self.annotation_model.get_annotations(article_id))
        except ArticleNotFoundError as e:
            return json_error(str(e), 404)

    def add_annotation(self, article_id: int):
        payload = _json_object()
        if payload is None:
            return json_error("Request body must be a JSON object", 400)
        start, end = _position(payload)
        try:
            annotation = self.annotation_model.add_annotation(
                article_id,
                payload.get('userId'),
                payload.get('textFragment'),
                start,
                end,
                payload.get('note'),
            )
        except ArticleNotFoundError as e:
            return json_error(str(e), 404)
        except EngagementValidationError as e:
            return json_error(str(e), 400)
        return json_success(annotation, 201)

    def update_annotation(self, annotation_id: int):
        """Change the note of an annotation; ``userId`` must be its author"""
        payload = _json_object()
        if payload is None:
            return json_error("Request body must be a JSON object", 400)
        user_id = payload.get('userId') or request.args.get('userId')
        try:
            annotation = self.annotation_model.update_annotation(annotation_id, payload.get('note'), user_id)
        except AnnotationNotFoundError as e:
            return json_error(str(e), 404)
        except AnnotationPermissionError as e:
            return json_error(str(e), 403)
        except EngagementValidationError as e:
            return json_error(str(e), 400)
        return json_success(annotation)

    def delete_annotation(self, annotation_id: int):
        payload = _json_object() or {}
        user_id = payload.get('userId') or request.args.get('userId')
        try:
            return json_success(self.annotation_model.delete_annotation(annotation_id, user_id))
        except AnnotationNotFoundError as e:
            return json_error(str(e), 404)
        except AnnotationPermissionError as e:
            return json_error(str(e), 403)
        except EngagementValidationError as e:
            return json_error(str(e), 400)

    # ------------------------------------------------------------------
    # Admin helpers
    # ------------------------------------------------------------------

    @admin_required
    def get_statistics(self):
        stats = self.article_model.get_statistics()
        stats['recent'] = [a.to_dict() for a in self.article_model.get_recent_articles(limit=5)]
        return json_success(stats)

    @admin_required
    def preview(self):
        """Render markdown for the editor's preview pane"""
        payload = _json_object()
        if payload is None:
            return json_error("Request body must be a JSON object", 400)
        locale = payload.get('locale') or self._query_locale()
        if not isinstance(locale, str) or locale not in current_app.config['SUPPORTED_LOCALES']:
            return json_error(f"Unsupported locale '{locale}'", 400)
        body = payload.get('body') or ''
        if not isinstance(body, str):
            return json_error("Field 'body' must be a string", 400)
        html = self.renderer.render(body, get_translator(locale))
        return json_success({'html': str(html)})

    def websocket(self):
        """Placeholder for real-time updates: a static JSON message"""
        return jsonify(WEBSOCKET_STUB_MESSAGE)
