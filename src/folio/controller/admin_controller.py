"""
Admin Controller - Dashboard and the write/preview article editor
"""
import logging
from typing import Any, Dict, Optional

from flask import abort, flash, redirect, render_template, request, url_for

from ..model.article_model import (
    LAYER_NAMES, Article, ArticleModel, ArticleNotFoundError, ArticleValidationError,
    DuplicateArticleError,
)
from ..services.renderer import MarkdownRenderer
from .base_controller import admin_required, get_translator

logger = logging.getLogger(__name__)

EDITOR_VIEWS = ('write', 'preview')
FORM_FIELDS = ('title', 'slug', 'description', 'body', 'tags', 'date', 'author', 'image')


def form_from_article(article: Article) -> Dict[str, Any]:
    return {
        'title': article.title,
        'slug': article.slug,
        'description': article.description or '',
        'body': article.body,
        'tags': ', '.join(article.tags),
        'date': article.date.strftime('%Y-%m-%d') if article.date else '',
        'author': article.author or '',
        'image': article.image or '',
        'layers': {name: article.layers.get(name, '') for name in LAYER_NAMES},
        'published': article.published,
    }


def form_from_request(locale: str) -> Dict[str, Any]:
    form = {field: request.form.get(field, '') for field in FORM_FIELDS}
    form['locale'] = locale
    form['published'] = 'published' in request.form
    form['layers'] = {name: request.form.get(f'layer_{name}', '') for name in LAYER_NAMES}
    return form


class AdminController:
    """Controller for the admin dashboard"""

    def __init__(self):
        self.article_model = ArticleModel()
        self.renderer = MarkdownRenderer()

    def _render_editor(self, locale: str, form: Dict[str, Any], view: str,
                       article: Optional[Article] = None, error: Optional[str] = None, status: int = 200):
        if view not in EDITOR_VIEWS:
            view = 'write'
        preview_html = None
        layer_previews = []
        if view == 'preview':
            t = get_translator(locale)
            preview_html = self.renderer.render(form.get('body', ''), t)
            layer_previews = [
                {'name': name, 'html': self.renderer.render(content, t)}
                for name, content in form.get('layers', {}).items() if content.strip()
            ]
        return render_template(
            'admin/editor.html',
            form=form,
            view=view,
            article=article,
            preview_html=preview_html,
            layer_previews=layer_previews,
            layer_names=LAYER_NAMES,
            error=error,
        ), status

    @admin_required
    def index(self, locale: str):
        """Render the dashboard: statistics, popular tags, recent and all articles"""
        stats = self.article_model.get_statistics()
        recent_articles = self.article_model.get_recent_articles(limit=5)
        articles = self.article_model.get_articles_by_locale(locale, include_drafts=True)
        return render_template(
            'admin/index.html',
            stats=stats,
            recent_articles=recent_articles,
            articles=articles,
        )

    @admin_required
    def new_article(self, locale: str):
        """Create an article; a 'preview' submit re-renders the form without saving"""
        if request.method == 'GET':
            form = {field: '' for field in FORM_FIELDS}
            form.update(locale=locale, published=True, layers={name: '' for name in LAYER_NAMES})
            return self._render_editor(locale, form, request.args.get('view', 'write'))

        form = form_from_request(locale)
        action = request.form.get('action', 'save')
        if action in EDITOR_VIEWS:
            return self._render_editor(locale, form, action)

        try:
            article = self.article_model.create_article(form)
        except ArticleValidationError as e:
            return self._render_editor(locale, form, 'write', error=str(e), status=400)
        except DuplicateArticleError as e:
            return self._render_editor(locale, form, 'write', error=str(e), status=409)

        flash(get_translator(locale)('Admin.saved', title=article.title))
        return redirect(url_for('admin_index', locale=locale))

    @admin_required
    def edit_article(self, locale: str, slug: str):
        """Edit an article; the slug and locale of an existing article don't change"""
        try:
            article = self.article_model.get_article_by_slug(slug, locale)
        except ArticleNotFoundError:
            abort(404)

        if request.method == 'GET':
            return self._render_editor(locale, form_from_article(article), request.args.get('view', 'write'), article)

        form = form_from_request(locale)
        form['slug'] = article.slug
        action = request.form.get('action', 'save')
        if action in EDITOR_VIEWS:
            return self._render_editor(locale, form, action, article)

        data = {key: value for key, value in form.items() if key not in ('slug', 'locale')}
        try:
            article = self.article_model.update_article(slug, locale, data)
        except ArticleValidationError as e:
            return self._render_editor(locale, form, 'write', article, error=str(e), status=400)

        flash(get_translator(locale)('Admin.saved', title=article.title))
        return redirect(url_for('admin_index', locale=locale))

    @admin_required
    def delete_article(self, locale: str, slug: str):
        try:
            article = self.article_model.delete_article(slug, locale)
        except ArticleNotFoundError:
            abort(404)
        flash(get_translator(locale)('Admin.deleted', title=article.title))
        return redirect(url_for('admin_index', locale=locale))

    @admin_required
    def toggle_published(self, locale: str, slug: str):
        try:
            article = self.article_model.get_article_by_slug(slug, locale)
        except ArticleNotFoundError:
            abort(404)
        self.article_model.set_published(slug, locale, not article.published)
        return redirect(url_for('admin_index', locale=locale))
