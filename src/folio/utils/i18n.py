"""
Translated UI strings.

Each supported locale has a JSON bundle in the messages directory, made of
namespaces holding key -> string mappings:

    {"Blog": {"title": "Blog", "readingTime": "{minutes} min read"}}

Strings are looked up with dotted keys (``Blog.readingTime``).
"""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Config

logger = logging.getLogger(__name__)


class _MissingPlaceholder(dict):
    """Leave unknown ``{placeholders}`` untouched when formatting."""

    def __missing__(self, key):
        return '{' + key + '}'


class MessageLoader:
    """Loads and caches the JSON message bundle of each locale."""

    def __init__(self, messages_dir: Optional[str] = None, use_cache: bool = True):
        self.messages_dir = Path(messages_dir or Config.MESSAGES_DIR)
        self.use_cache = use_cache
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

        if not self.messages_dir.is_dir():
            raise ValueError(f"Messages directory not found: {self.messages_dir}")

    def load(self, locale: str) -> Dict[str, Any]:
        """
        Load the message bundle for a locale.

        Raises:
            FileNotFoundError: If the locale has no bundle
            ValueError: If the bundle is not a JSON object
        """
        if self.use_cache and locale in self._cache:
            return self._cache[locale]

        bundle_path = self.messages_dir / f'{locale}.json'
        if not bundle_path.is_file():
            raise FileNotFoundError(f"No message bundle for locale '{locale}' in {self.messages_dir}")

        try:
            with open(bundle_path, 'r', encoding='utf-8') as f:
                messages = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid message bundle {bundle_path}: {e}") from e

        if not isinstance(messages, dict):
            raise ValueError(f"Message bundle {bundle_path} must contain a JSON object")

        logger.debug(f"Loaded {len(messages)} message namespaces for '{locale}'")

        if self.use_cache:
            with self._lock:
                self._cache[locale] = messages
        return messages

    def translator(self, locale: str, default_locale: str = Config.DEFAULT_LOCALE) -> 'Translator':
        """Build a translator for a locale, falling back to the default locale's bundle."""
        fallback = None
        if locale != default_locale:
            fallback = self.load(default_locale)
        return Translator(locale, self.load(locale), fallback)

    def clear(self):
        with self._lock:
            self._cache.clear()


class Translator:
    """Resolves dotted message keys for one locale."""

    def __init__(self, locale: str, messages: Dict[str, Any], fallback: Optional[Dict[str, Any]] = None):
        self.locale = locale
        self.messages = messages
        self.fallback = fallback or {}

    @staticmethod
    def _lookup(messages: Dict[str, Any], key: str) -> Optional[Any]:
        node: Any = messages
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def get(self, key: str, default: Any = None) -> Any:
        """Return the raw value for a key (string, list or namespace), or ``default``."""
        value = self._lookup(self.messages, key)
        if value is None:
            value = self._lookup(self.fallback, key)
        return default if value is None else value

    def __call__(self, key: str, **params) -> str:
        """
        Translate a key, interpolating ``{name}`` placeholders from ``params``.

        Missing keys fall back to the default locale, then to the key itself.
        """
        value = self.get(key)
        if not isinstance(value, str):
            logger.warning(f"Missing translation for '{key}' ({self.locale})")
            return key
        if params:
            return value.format_map(_MissingPlaceholder(params))
        return value

    def namespace(self, name: str) -> Dict[str, Any]:
        value = self.get(name, {})
        return value if isinstance(value, dict) else {}
