"""
Site Controller - Public pages: home, blog listing and article pages
"""
import logging
from typing import List, Optional

from flask import render_template, request

from ..model.article_model import LAYER_NAMES, Article, ArticleModel, ArticleNotFoundError
from ..services.renderer import MarkdownRenderer, estimate_reading_time
from .base_controller import get_translator

logger = logging.getLogger(__name__)

HOME_ARTICLE_COUNT = 3
DEFAULT_VISIBLE_LAYERS = ('headline', 'context')


def article_text(article: Article) -> str:
    """Body and layers of an article, for word counts"""
    return '\n\n'.join([article.body] + [article.layers[name] for name in LAYER_NAMES if name in article.layers])


def visible_layers(requested: Optional[str]) -> List[str]:
    """
    Layers shown expanded on the article page, from ``?layers=headline,detail``.
    Headline and context by default; headline alone when nothing valid is asked for.
    """
    if requested is None:
        return list(DEFAULT_VISIBLE_LAYERS)
    names = [name.strip().lower() for name in requested.split(',')]
    return [name for name in LAYER_NAMES if name in names] or ['headline']


def article_card(article: Article) -> dict:
    """Summary of an article for listings"""
    return {
        'id': article.id,
        'slug': article.slug,
        'title': article.title,
        'description': article.description or '',
        'date': article.date,
        'tags': article.tags,
        'reading_time': estimate_reading_time(article_text(article)),
    }


class SiteController:
    """Controller for the public site"""

    def __init__(self):
        self.article_model = ArticleModel()
        self.renderer = MarkdownRenderer()

    def home(self, locale: str):
        """Render the landing page with the latest articles"""
        articles = self.article_model.get_articles_by_locale(locale)[:HOME_ARTICLE_COUNT]
        return render_template(
            'home.html',
            articles=[article_card(a) for a in articles],
        )

    def blog_index(self, locale: str):
        """Render the published articles of a locale"""
        t = get_translator(locale)
        articles = self.article_model.get_articles_by_locale(locale)
        return render_template(
            'blog/index.html',
            articles=[article_card(a) for a in articles],
            meta={'title': t('Blog.title'), 'description': t('Blog.subtitle')},
        )

    def blog_article(self, locale: str, slug: str):
        """Render a single article, or the not-found page for unknown slugs and drafts"""
        t = get_translator(locale)
        try:
            article = self.article_model.get_article_by_slug(slug, locale)
        except ArticleNotFoundError:
            logger.info(f"Article not found: {slug} ({locale})")
            return self.article_not_found(locale)

        if article.is_draft:
            logger.info(f"Draft requested on public site: {slug} ({locale})")
            return self.article_not_found(locale)

        meta = {
            'title': article.title,
            'description': article.description or '',
            'open_graph': {
                'title': article.title,
                'description': article.description or '',
                'type': 'article',
                'published_time': article.date.isoformat(),
                'authors': [article.author] if article.author else [],
                'tags': article.tags,
            },
        }
        shown = visible_layers(request.args.get('layers'))
        layers = [
            {
                'name': name,
                'html': self.renderer.render(article.layers[name], t),
                'open': name in shown,
            }
            for name in LAYER_NAMES if name in article.layers
        ]
        return render_template(
            'blog/article.html',
            article=article,
            body_html=self.renderer.render(article.body, t) if article.body.strip() else None,
            layers=layers,
            all_layers=','.join(LAYER_NAMES),
            reading_time=estimate_reading_time(article_text(article)),
            meta=meta,
        )

    def article_not_found(self, locale: str):
        t = get_translator(locale)
        meta = {'title': t('NotFound.title'), 'description': t('NotFound.description')}
        return render_template('errors/404.html', meta=meta), 404
