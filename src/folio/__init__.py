"""
Flask Application Factory with Singleton Pattern
"""
import logging
from datetime import datetime
from typing import Optional

from flask import Flask, g, jsonify, render_template, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import InternalServerError, NotFound
from werkzeug.routing import BaseConverter

from .model.database import Database
from .utils.base import Base
from .utils.config import Config, ConfigurationError
from .utils.i18n import MessageLoader
from .utils.locale import resolve_locale

logger = logging.getLogger(__name__)


class LocaleConverter(BaseConverter):
    """URL segment matching one of the supported locales"""

    def __init__(self, url_map, *locales):
        super().__init__(url_map)
        self.regex = '|'.join(locales or Config.SUPPORTED_LOCALES)


class FlaskApp(metaclass=Base):
    """Singleton Flask application factory"""

    def __init__(self):
        self._app: Optional[Flask] = None

    def create_app(self, config: Optional[dict] = None) -> Flask:
        """Create and configure the Flask application"""
        if self._app is not None:
            return self._app

        app = Flask(
            __name__,
            template_folder='view/templates',
            static_folder='view/static'
        )

        # Default configuration from environment variables
        app.config.update(
            SECRET_KEY=Config.SECRET_KEY,
            DATABASE_URL=Config.DATABASE_URL,
            DB_POOL_SIZE=Config.DB_POOL_SIZE,
            SUPPORTED_LOCALES=Config.SUPPORTED_LOCALES,
            DEFAULT_LOCALE=Config.DEFAULT_LOCALE,
            ADMIN_USERNAME=Config.ADMIN_USERNAME,
            ADMIN_PASSWORD=Config.ADMIN_PASSWORD,
            MESSAGES_DIR=Config.MESSAGES_DIR,
            MESSAGES_CACHE=True,
        )

        # Update with custom config if provided
        if config:
            app.config.update(config)

        app.json.sort_keys = False

        self._init_database(app)
        self._init_i18n(app)
        self._register_locale_routing(app)
        self._register_routes(app)
        self._register_error_handlers(app)

        if not app.config.get('ADMIN_PASSWORD'):
            logger.warning("ADMIN_PASSWORD is not set: admin authentication is disabled (development mode)")

        self._app = app
        return app

    def _init_database(self, app: Flask):
        """Initialize the shared database engine"""
        if not app.config.get('DATABASE_URL'):
            raise ConfigurationError("Missing required environment variables: DATABASE_URL")
        Database().connect(app.config['DATABASE_URL'], pool_size=app.config['DB_POOL_SIZE'])

    def _init_i18n(self, app: Flask):
        """Load message bundles and expose the translator to templates"""
        loader = MessageLoader(app.config['MESSAGES_DIR'], use_cache=app.config['MESSAGES_CACHE'])
        app.extensions['folio.messages'] = loader

        @app.context_processor
        def inject_i18n():
            locale = g.get('locale') or app.config['DEFAULT_LOCALE']
            return {
                't': loader.translator(locale, app.config['DEFAULT_LOCALE']),
                'locale': locale,
                'supported_locales': app.config['SUPPORTED_LOCALES'],
                'locale_url': _locale_url,
                'current_year': datetime.now().year,
            }

    def _register_locale_routing(self, app: Flask):
        """Redirect unprefixed paths to a locale and remember the request's locale"""
        supported = app.config['SUPPORTED_LOCALES']
        app.url_map.converters['locale'] = LocaleConverter

        @app.before_request
        def redirect_to_locale():
            decision = resolve_locale(
                request.path,
                request.headers.get('Accept-Language'),
                request.query_string.decode('utf-8', 'replace'),
                supported=supported,
                default=app.config['DEFAULT_LOCALE'],
            )
            if decision.should_redirect:
                return app.redirect(decision.redirect_to, code=307)
            g.locale = decision.locale

        @app.url_defaults
        def add_locale(endpoint, values):
            if 'locale' in values or not g.get('locale'):
                return
            if app.url_map.is_endpoint_expecting(endpoint, 'locale'):
                values['locale'] = g.locale

    def _register_routes(self, app: Flask):
        """Register application routes"""
        from .controller import AdminController, ApiController, SiteController

        site = SiteController()
        admin = AdminController()
        api = ApiController()

        # Public site
        app.add_url_rule('/<locale:locale>/', 'home', site.home)
        app.add_url_rule('/<locale:locale>/blog', 'blog_index', site.blog_index)
        app.add_url_rule('/<locale:locale>/blog/<slug>', 'blog_article', site.blog_article)

        # Admin dashboard
        app.add_url_rule('/<locale:locale>/admin', 'admin_index', admin.index)
        app.add_url_rule('/<locale:locale>/admin/new', 'admin_new', admin.new_article, methods=['GET', 'POST'])
        app.add_url_rule('/<locale:locale>/admin/edit/<slug>', 'admin_edit', admin.edit_article,
                         methods=['GET', 'POST'])
        app.add_url_rule('/<locale:locale>/admin/delete/<slug>', 'admin_delete', admin.delete_article,
                         methods=['POST'])
        app.add_url_rule('/<locale:locale>/admin/toggle/<slug>', 'admin_toggle', admin.toggle_published,
                         methods=['POST'])

        # API routes
        app.add_url_rule('/api/articles', 'api_articles', api.get_articles, methods=['GET'])
        app.add_url_rule('/api/articles', 'api_articles_create', api.create_article, methods=['POST'])
        app.add_url_rule('/api/articles', 'api_articles_update', api.update_article, methods=['PUT'])
        app.add_url_rule('/api/articles', 'api_articles_delete', api.delete_article, methods=['DELETE'])
        app.add_url_rule('/api/articles/<int:article_id>/claps', 'api_claps', api.get_claps, methods=['GET'])
        app.add_url_rule('/api/articles/<int:article_id>/claps', 'api_claps_add', api.add_clap, methods=['POST'])
        app.add_url_rule('/api/articles/<int:article_id>/annotations', 'api_annotations',
                         api.get_annotations, methods=['GET'])
        app.add_url_rule('/api/articles/<int:article_id>/annotations', 'api_annotations_add',
                         api.add_annotation, methods=['POST'])
        app.add_url_rule('/api/annotations/<int:annotation_id>', 'api_annotation_update',
                         api.update_annotation, methods=['PUT'])
        app.add_url_rule('/api/annotations/<int:annotation_id>', 'api_annotation_delete',
                         api.delete_annotation, methods=['DELETE'])
        app.add_url_rule('/api/admin/stats', 'api_admin_stats', api.get_statistics)
        app.add_url_rule('/api/preview', 'api_preview', api.preview, methods=['POST'])
        app.add_url_rule('/api/ws', 'api_ws', api.websocket)

    def _register_error_handlers(self, app: Flask):
        @app.errorhandler(NotFound)
        def not_found(error):
            if request.path.startswith('/api/'):
                return jsonify({"success": False, "error": "Not found"}), 404
            return render_template('errors/404.html', meta=None), 404

        @app.errorhandler(SQLAlchemyError)
        def database_error(error):
            logger.exception(f"Database error on {request.method} {request.path}")
            if request.path.startswith('/api/'):
                return jsonify({"success": False, "error": "Database error"}), 500
            return render_template('errors/500.html'), 500

        @app.errorhandler(InternalServerError)
        def internal_error(error):
            original = getattr(error, 'original_exception', None)
            if original is not None:
                logger.error(
                    f"Unhandled error on {request.method} {request.path}: {original}",
                    exc_info=original,
                )
            if request.path.startswith('/api/'):
                return jsonify({"success": False, "error": "Internal server error"}), 500
            return render_template('errors/500.html'), 500

    def get_app(self) -> Optional[Flask]:
        """Get the Flask application instance"""
        return self._app


def _locale_url(target_locale: str) -> str:
    """The current page's path under another locale"""
    path = request.path
    current = g.get('locale')
    if current and (path == f'/{current}' or path.startswith(f'/{current}/')):
        path = path[len(current) + 1:]
    return f'/{target_locale}{path or "/"}'


def create_app(config: Optional[dict] = None) -> Flask:
    """Factory function to create Flask app"""
    app_factory = FlaskApp()
    return app_factory.create_app(config)
