"""
Slug and tag normalization utilities.
"""
import logging
import re
import unicodedata
from typing import Iterable, List, Union

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
URL_SCHEME_PATTERN = re.compile(r'^([a-z][a-z0-9+.\-]*):')


class TextNormalizer:
    """Handles slug generation and tag cleaning."""

    @staticmethod
    def slugify(text: str) -> str:
        """
        Build a URL-safe slug:
        - Stripping accents
        - Lowercasing
        - Replacing runs of other characters with a single hyphen

        Args:
            text: Title or free text

        Returns:
            Slug, empty when nothing usable remains
        """
        normalized = unicodedata.normalize('NFKD', text or '')
        ascii_text = normalized.encode('ascii', 'ignore').decode('ascii').lower()
        slug = re.sub(r'[^a-z0-9]+', '-', ascii_text).strip('-')
        logger.debug(f"Slugified {text!r} → {slug!r}")
        return slug

    @staticmethod
    def is_valid_slug(slug: str) -> bool:
        return bool(slug) and len(slug) <= 255 and bool(SLUG_PATTERN.match(slug))

    @staticmethod
    def normalize_tags(tags: Union[str, Iterable[str], None]) -> List[str]:
        """
        Clean a tag list, accepting a comma-separated string as well.
        Blank entries are dropped and duplicates (case-insensitive) removed,
        keeping the first spelling.

        Raises:
            ValueError: If tags is neither a string nor a list of strings
        """
        if tags is None:
            return []
        if isinstance(tags, str):
            tags = tags.split(',')
        elif not isinstance(tags, (list, tuple, set)):
            raise ValueError("Tags must be a comma-separated string or a list of strings")

        cleaned = []
        seen = set()
        for tag in tags:
            if not isinstance(tag, str):
                raise ValueError(f"Tag names must be strings, got {tag!r}")
            name = ' '.join(tag.split())
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            cleaned.append(name[:100])
        return cleaned

    @staticmethod
    def is_safe_url(value: str, schemes: Iterable[str] = ('http', 'https')) -> bool:
        """
        Relative URLs and URLs with one of the given schemes are safe.
        Whitespace and control characters are ignored, so ``java\\tscript:`` is caught.
        """
        compact = re.sub(r'[\x00-\x20]+', '', value or '').lower()
        match = URL_SCHEME_PATTERN.match(compact)
        return match is None or match.group(1) in tuple(schemes)
