"""
Markdown/MDX rendering for article bodies.

Bodies are written in markdown and may embed a few components in MDX style:

    <Callout type="warning">
    Back up your keys **before** upgrading.

    - export the seed
    - verify it
    </Callout>
    <TranslatedHeading key="Blog.relatedArticles" />
    <Translate key="Blog.readMore" />
    <YouTube id="dQw4w9WgXcQ" />

Block components (Callout, TranslatedHeading, YouTube) are rewritten to
``<div data-component=...>`` wrappers before conversion, so that the
``md_in_html`` extension parses their children as markdown. The converted
HTML is sanitized with BeautifulSoup, then the wrappers and the inline
``<Translate>`` tags are expanded into plain HTML.
"""
import html
import logging
import math
import re
from typing import Optional

import markdown
from bs4 import BeautifulSoup, Comment, NavigableString
from markupsafe import Markup

from ..utils.i18n import Translator
from ..utils.text_normalizer import TextNormalizer

logger = logging.getLogger(__name__)

FRONT_MATTER_RE = re.compile(r'\A---[ \t]*\r?\n.*?\r?\n---[ \t]*(?:\r?\n|\Z)', re.S)
YOUTUBE_ID_RE = re.compile(r'^[A-Za-z0-9_-]{6,20}$')

# Fenced code blocks and inline code spans are left verbatim
PROTECTED_RE = re.compile(r'^(```|~~~)[^\n]*\n.*?^\1[ \t]*$|`[^`\n]+`', re.M | re.S)
COMPONENT_TAG_RE = re.compile(r'<(/?)(Callout|TranslatedHeading|YouTube)\b([^<>]*?)(/?)>', re.I)
ATTRIBUTE_RE = re.compile(r'([A-Za-z][\w-]*)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')')

MARKDOWN_EXTENSIONS = ['extra', 'sane_lists']

# Removed together with everything inside them
DROPPED_TAGS = (
    'script', 'style', 'iframe', 'object', 'embed', 'form', 'input', 'button', 'textarea',
    'select', 'link', 'meta', 'base', 'frame', 'frameset', 'noscript', 'template', 'svg', 'math',
)

# Attributes each block component keeps, carried as data-* on its wrapper
BLOCK_COMPONENTS = {
    'callout': ('type',),
    'translatedheading': ('key',),
    'youtube': ('id', 'title'),
}
COMPONENT_DATA_ATTRIBUTES = {'data-component'} | {
    f'data-{name}' for names in BLOCK_COMPONENTS.values() for name in names
}
# html.parser lowercases tag names
INLINE_COMPONENTS = {
    'translate': {'key'},
}

GLOBAL_ATTRIBUTES = {'id', 'class', 'title'}
ALLOWED_TAGS = {
    'a': {'href', 'rel'},
    'abbr': set(),
    'b': set(),
    'blockquote': {'cite'},
    'br': set(),
    'code': set(),
    'dd': set(),
    'del': set(),
    'div': COMPONENT_DATA_ATTRIBUTES,
    'dl': set(),
    'dt': set(),
    'em': set(),
    'figcaption': set(),
    'figure': set(),
    'h1': set(), 'h2': set(), 'h3': set(), 'h4': set(), 'h5': set(), 'h6': set(),
    'hr': set(),
    'i': set(),
    'img': {'src', 'alt', 'width', 'height'},
    'kbd': set(),
    'li': set(),
    'mark': set(),
    'ol': {'start'},
    'p': set(),
    'pre': set(),
    's': set(),
    'span': set(),
    'strong': set(),
    'sub': set(),
    'sup': set(),
    'table': set(),
    'tbody': set(),
    'td': {'align', 'colspan', 'rowspan'},
    'th': {'align', 'colspan', 'rowspan'},
    'thead': set(),
    'tr': set(),
    'u': set(),
    'ul': set(),
}
URL_ATTRIBUTES = ('href', 'src', 'cite')
SAFE_URL_SCHEMES = ('http', 'https', 'mailto')
CALLOUT_TYPES = ('info', 'tip', 'warning')

WORDS_PER_MINUTE = 225
MIN_READING_MINUTES = 2


def strip_front_matter(source: str) -> str:
    return FRONT_MATTER_RE.sub('', source or '', count=1)


def estimate_reading_time(text: str) -> int:
    """Reading time in minutes at 225 words per minute, never less than 2."""
    words = len((text or '').split())
    return max(MIN_READING_MINUTES, math.ceil(words / WORDS_PER_MINUTE))


def _component_block(match) -> str:
    """Turn one component tag into the opening or closing tag of its wrapper div."""
    closing, name, attr_text, self_closing = match.groups()
    component = name.lower()

    if closing:
        # Callout bodies are block content, headings and embeds are inline
        return '\n\n</div>\n\n' if component == 'callout' else '</div>\n\n'

    attrs = {key.lower(): double or single for key, double, single in ATTRIBUTE_RE.findall(attr_text)}
    data = ''.join(
        f' data-{key}="{html.escape(attrs[key], quote=True)}"'
        for key in BLOCK_COMPONENTS[component] if key in attrs
    )
    if component == 'callout':
        opening = f'\n\n<div markdown="1" data-component="callout"{data}>'
    elif component == 'translatedheading':
        opening = f'\n\n<div markdown="span" data-component="translatedheading"{data}>'
    else:
        opening = f'\n\n<div data-component="youtube"{data}>'

    if self_closing:
        return opening + '</div>\n\n'
    return opening + '\n\n' if component == 'callout' else opening


def rewrite_components(source: str) -> str:
    """Replace block component tags with md_in_html wrappers, outside code."""
    parts = []
    last = 0
    for match in PROTECTED_RE.finditer(source):
        parts.append(COMPONENT_TAG_RE.sub(_component_block, source[last:match.start()]))
        parts.append(match.group(0))
        last = match.end()
    parts.append(COMPONENT_TAG_RE.sub(_component_block, source[last:]))
    return ''.join(parts)


class MarkdownRenderer:
    """Turns article markdown into sanitized HTML with embedded components expanded."""

    def __init__(self, extensions=None):
        self.extensions = list(extensions or MARKDOWN_EXTENSIONS)

    def render(self, source: str, translator: Optional[Translator] = None) -> Markup:
        """
        Render a markdown/MDX body.

        Args:
            source: Markdown text, optionally starting with a front-matter block
            translator: Supplies the strings for translated components

        Returns:
            Markup safe to insert in a template
        """
        text = rewrite_components(strip_front_matter(source))
        converted = markdown.markdown(text, extensions=self.extensions, output_format='html')
        soup = BeautifulSoup(converted, 'html.parser')
        self._sanitize(soup)
        self._expand_components(soup, translator)
        return Markup(str(soup).strip())

    # ------------------------------------------------------------------
    # Sanitizing
    # ------------------------------------------------------------------

    def _sanitize(self, soup: BeautifulSoup) -> None:
        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        for tag in soup.find_all(list(DROPPED_TAGS)):
            tag.extract()

        for tag in soup.find_all(True):
            if tag.name in INLINE_COMPONENTS:
                allowed = INLINE_COMPONENTS[tag.name]
            elif tag.name in ALLOWED_TAGS:
                allowed = ALLOWED_TAGS[tag.name] | GLOBAL_ATTRIBUTES
            else:
                logger.debug(f"Unwrapping disallowed tag <{tag.name}>")
                tag.unwrap()
                continue

            attrs = {}
            for name, value in tag.attrs.items():
                if name not in allowed:
                    continue
                if name in URL_ATTRIBUTES and not TextNormalizer.is_safe_url(value, SAFE_URL_SCHEMES):
                    logger.warning(f"Dropped unsafe {name} on <{tag.name}>")
                    continue
                attrs[name] = value
            tag.attrs = attrs

            if tag.name == 'a' and 'href' in attrs and attrs['href'].startswith(('http://', 'https://')):
                tag['rel'] = 'noopener noreferrer'

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @staticmethod
    def _move_children(source, target) -> None:
        for child in list(source.contents):
            target.append(child.extract())

    def _expand_components(self, soup: BeautifulSoup, translator: Optional[Translator]) -> None:
        for node in soup.find_all('translate'):
            key = node.get('key')
            text = translator(key) if key and translator else (key or node.get_text())
            node.replace_with(NavigableString(text))

        for node in soup.find_all('div', attrs={'data-component': True}):
            component = node['data-component']
            if component == 'callout':
                self._expand_callout(soup, node)
            elif component == 'translatedheading':
                self._expand_heading(soup, node, translator)
            elif component == 'youtube':
                self._expand_youtube(soup, node)
            else:
                node.unwrap()

    def _expand_callout(self, soup: BeautifulSoup, node) -> None:
        kind = (node.get('data-type') or 'info').lower()
        if kind not in CALLOUT_TYPES:
            kind = 'info'
        aside = soup.new_tag('aside', attrs={'class': f'callout callout-{kind}', 'role': 'note'})
        self._move_children(node, aside)
        node.replace_with(aside)

    def _expand_heading(self, soup: BeautifulSoup, node, translator: Optional[Translator]) -> None:
        heading = soup.new_tag('h2', attrs={'class': 'translated-heading'})
        key = node.get('data-key')
        if key and translator:
            heading.string = translator(key)
        else:
            self._move_children(node, heading)
        node.replace_with(heading)

    @staticmethod
    def _expand_youtube(soup: BeautifulSoup, node) -> None:
        video_id = node.get('data-id', '')
        if not YOUTUBE_ID_RE.match(video_id):
            logger.warning(f"Dropped YouTube embed with invalid id {video_id!r}")
            node.extract()
            return
        wrapper = soup.new_tag('div', attrs={'class': 'video-embed'})
        wrapper.append(soup.new_tag('iframe', attrs={
            'src': f'https://www.youtube-nocookie.com/embed/{video_id}',
            'title': node.get('data-title') or 'YouTube video',
            'loading': 'lazy',
            'allowfullscreen': '',
        }))
        node.replace_with(wrapper)
