"""
Utility modules for configuration, locales and message bundles.
"""
from .config import Config, ConfigurationError
from .base import Base
from .text_normalizer import TextNormalizer
from .i18n import MessageLoader, Translator
from .locale import LocaleDecision, resolve_locale, negotiate_locale, path_locale

__all__ = [
    'Config', 'ConfigurationError', 'Base', 'TextNormalizer', 'MessageLoader', 'Translator',
    'LocaleDecision', 'resolve_locale', 'negotiate_locale', 'path_locale',
]
