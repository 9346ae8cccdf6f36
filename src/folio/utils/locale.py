"""
Locale resolution for incoming requests.

Every page lives under a locale prefix (``/en/...``, ``/fr/...``). Requests
without one are redirected to the same path under the visitor's preferred
locale, taken from the ``Accept-Language`` header in the order it lists
languages, or the default locale when none is supported.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import Config

logger = logging.getLogger(__name__)

# Paths that are never locale-prefixed
UNLOCALIZED_PREFIXES = ('/api/', '/static/')
UNLOCALIZED_PATHS = ('/api', '/static', '/favicon.ico')


@dataclass(frozen=True)
class LocaleDecision:
    """Outcome of resolving a request: the locale, and where to redirect if anywhere."""
    locale: Optional[str]
    redirect_to: Optional[str] = None

    @property
    def should_redirect(self) -> bool:
        return self.redirect_to is not None


def is_localizable_path(path: str) -> bool:
    """
    Check whether a path belongs to the localized page tree.

    API routes, static assets and anything that looks like a file
    (a dot in the last segment) are left alone.
    """
    if not path.startswith('/'):
        path = '/' + path
    if path in UNLOCALIZED_PATHS or path.startswith(UNLOCALIZED_PREFIXES):
        return False
    last_segment = path.rstrip('/').rsplit('/', 1)[-1]
    return '.' not in last_segment


def path_locale(path: str, supported: Iterable[str] = Config.SUPPORTED_LOCALES) -> Optional[str]:
    """Return the supported locale the path is prefixed with, or None."""
    for locale in supported:
        if path == f'/{locale}' or path.startswith(f'/{locale}/'):
            return locale
    return None


def negotiate_locale(
    accept_language: Optional[str],
    supported: Iterable[str] = Config.SUPPORTED_LOCALES,
    default: str = Config.DEFAULT_LOCALE,
) -> str:
    """
    Pick the first language of an Accept-Language header whose primary subtag is supported.

    Entries are scanned in the order the client sent them; quality values
    are not used for ordering.

    Args:
        accept_language: Raw header value, e.g. ``"fr-CA,fr;q=0.9,en;q=0.8"``
        supported: Supported locale codes
        default: Locale returned when nothing matches

    Returns:
        The resolved locale code
    """
    supported = tuple(supported)
    if not accept_language:
        return default

    for entry in accept_language.split(','):
        language_range = entry.split(';')[0].strip()
        if not language_range:
            continue
        primary = language_range.split('-')[0].lower()
        if primary in supported:
            return primary

    return default


def resolve_locale(
    path: str,
    accept_language: Optional[str] = None,
    query_string: str = '',
    supported: Iterable[str] = Config.SUPPORTED_LOCALES,
    default: str = Config.DEFAULT_LOCALE,
) -> LocaleDecision:
    """
    Decide the locale of a request and whether it must be redirected.

    A path that already carries a supported locale prefix passes through
    unchanged. Paths outside the page tree pass through without a locale.
    Anything else is redirected to ``/{locale}{path}`` keeping the query string.
    """
    supported = tuple(supported)
    if not path.startswith('/'):
        path = '/' + path

    if not is_localizable_path(path):
        return LocaleDecision(locale=None)

    prefixed = path_locale(path, supported)
    if prefixed:
        return LocaleDecision(locale=prefixed)

    locale = negotiate_locale(accept_language, supported, default)
    target = f'/{locale}{path}'
    if query_string:
        target = f'{target}?{query_string}'

    logger.debug(f"Redirecting {path} to {target} (Accept-Language: {accept_language!r})")
    return LocaleDecision(locale=locale, redirect_to=target)
