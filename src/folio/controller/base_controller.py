"""
Helpers shared by the controllers: translators, JSON envelopes and the admin check
"""
import hmac
import logging
from functools import wraps
from typing import Any, Optional

from flask import Response, current_app, g, jsonify, request

from ..utils.i18n import Translator

logger = logging.getLogger(__name__)


def get_translator(locale: Optional[str] = None) -> Translator:
    """Translator for a locale, the request's locale by default"""
    locale = locale or g.get('locale') or current_app.config['DEFAULT_LOCALE']
    loader = current_app.extensions['folio.messages']
    return loader.translator(locale, current_app.config['DEFAULT_LOCALE'])


def json_success(data: Any = None, status: int = 200, **extra):
    return jsonify({"success": True, "data": data, **extra}), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def _credentials_match(username: str, password: str) -> bool:
    expected_username = current_app.config.get('ADMIN_USERNAME') or ''
    expected_password = current_app.config.get('ADMIN_PASSWORD') or ''
    username_ok = hmac.compare_digest(username.encode('utf-8'), expected_username.encode('utf-8'))
    password_ok = hmac.compare_digest(password.encode('utf-8'), expected_password.encode('utf-8'))
    return username_ok and password_ok


def has_admin_access() -> bool:
    """
    True when the request may see admin-only data: either no ADMIN_PASSWORD is
    configured (development mode) or valid HTTP Basic credentials were sent.
    """
    if not current_app.config.get('ADMIN_PASSWORD'):
        return True
    auth = request.authorization
    return auth is not None and _credentials_match(auth.username or '', auth.password or '')


def authentication_required() -> Response:
    logger.warning(f"Rejected admin request to {request.path} from {request.remote_addr}")
    return Response(
        'Authentication required',
        401,
        {'WWW-Authenticate': 'Basic realm="Folio Admin"'}
    )


def admin_required(view):
    """
    Require HTTP Basic credentials on admin views when ADMIN_PASSWORD is configured.
    Without a password the check is skipped (development mode).
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not has_admin_access():
            return authentication_required()
        return view(*args, **kwargs)

    return wrapped
