"""Tests for markdown rendering, sanitizing and embedded components."""
import pytest
from bs4 import BeautifulSoup
from markupsafe import Markup

from folio.services.renderer import MarkdownRenderer, estimate_reading_time, strip_front_matter
from folio.utils.i18n import Translator

MESSAGES = {
    'Blog': {'readMore': 'Read More', 'relatedArticles': 'Related Articles'},
}


@pytest.fixture
def renderer():
    return MarkdownRenderer()


@pytest.fixture
def translator():
    return Translator('en', MESSAGES)


def soup_of(html):
    return BeautifulSoup(str(html), 'html.parser')


class TestMarkdown:
    def test_returns_markup(self, renderer):
        html = renderer.render('# Title\n\nSome **bold** text.')
        assert isinstance(html, Markup)
        soup = soup_of(html)
        assert soup.h1.get_text() == 'Title'
        assert soup.strong.get_text() == 'bold'

    def test_front_matter_is_stripped(self, renderer):
        html = renderer.render('---\ntitle: Hidden\n---\nVisible body')
        assert 'Hidden' not in html
        assert 'Visible body' in html

    def test_tables_from_extra(self, renderer):
        html = renderer.render('| a | b |\n|---|---|\n| 1 | 2 |')
        assert soup_of(html).find('table') is not None


class TestSanitize:
    def test_script_removed_with_content(self, renderer):
        html = renderer.render('Hello\n\n<script>alert("x")</script>\n')
        assert 'script' not in html
        assert 'alert' not in html

    def test_event_handlers_dropped(self, renderer):
        html = renderer.render('<p onclick="steal()">Hi</p>')
        assert 'onclick' not in html
        assert 'Hi' in html

    def test_javascript_links_dropped(self, renderer):
        html = renderer.render('[click](javascript:alert(1))')
        a = soup_of(html).find('a')
        assert a is not None
        assert 'href' not in a.attrs

    def test_external_links_get_rel(self, renderer):
        a = soup_of(renderer.render('[site](https://example.com)')).find('a')
        assert a['href'] == 'https://example.com'
        assert a['rel'] == ['noopener', 'noreferrer']

    def test_unknown_tags_unwrapped(self, renderer):
        html = renderer.render('<blink>still here</blink>')
        assert 'blink' not in html
        assert 'still here' in html


class TestComponents:
    def test_callout(self, renderer):
        html = renderer.render('<Callout type="warning">Back up **first**.</Callout>')
        aside = soup_of(html).find('aside')
        assert aside['class'] == ['callout', 'callout-warning']
        assert aside.strong.get_text() == 'first'
        assert aside.parent.name != 'p'

    def test_callout_with_several_paragraphs(self, renderer):
        source = (
            'Intro.\n\n'
            '<Callout type="tip">\n'
            'First paragraph.\n\n'
            'Second *paragraph*.\n'
            '</Callout>\n\n'
            'Outro.'
        )
        soup = soup_of(renderer.render(source))
        aside = soup.find('aside')
        paragraphs = aside.find_all('p')
        assert [p.get_text() for p in paragraphs] == ['First paragraph.', 'Second paragraph.']
        assert aside.em.get_text() == 'paragraph'
        assert 'Intro.' not in aside.get_text()
        assert 'Outro.' in soup.get_text()

    def test_callout_containing_list(self, renderer):
        source = '<Callout type="warning">\nBefore upgrading:\n\n- export the seed\n- verify it\n</Callout>'
        aside = soup_of(renderer.render(source)).find('aside')
        assert aside['class'] == ['callout', 'callout-warning']
        assert [li.get_text() for li in aside.find('ul').find_all('li')] == ['export the seed', 'verify it']
        assert 'markdown' not in aside.attrs
        assert '<Callout' not in str(aside)

    def test_component_inside_code_block_left_alone(self, renderer):
        html = renderer.render('```\n<Callout>literal</Callout>\n```')
        soup = soup_of(html)
        assert soup.find('aside') is None
        assert '<Callout>literal</Callout>' in soup.find('code').get_text()

    def test_callout_unknown_type_defaults_to_info(self, renderer):
        aside = soup_of(renderer.render('<Callout type="shout">Hey</Callout>')).find('aside')
        assert aside['class'] == ['callout', 'callout-info']

    def test_translate(self, renderer, translator):
        html = renderer.render('Go: <Translate key="Blog.readMore" />', translator)
        assert 'Go: Read More' in soup_of(html).get_text()

    def test_translated_heading(self, renderer, translator):
        html = renderer.render('<TranslatedHeading key="Blog.relatedArticles"></TranslatedHeading>', translator)
        heading = soup_of(html).find('h2')
        assert heading.get_text() == 'Related Articles'

    def test_translated_heading_without_key_keeps_children(self, renderer):
        html = renderer.render('<TranslatedHeading>Plain heading</TranslatedHeading>')
        assert soup_of(html).find('h2').get_text().strip() == 'Plain heading'

    def test_youtube_embed(self, renderer):
        html = renderer.render('<YouTube id="dQw4w9WgXcQ" />')
        iframe = soup_of(html).find('iframe')
        assert iframe['src'] == 'https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ'

    def test_youtube_invalid_id_dropped(self, renderer):
        html = renderer.render('<YouTube id="bad id&lt;" />')
        assert soup_of(html).find('iframe') is None


class TestHelpers:
    def test_reading_time_minimum(self):
        assert estimate_reading_time('just a few words') == 2
        assert estimate_reading_time('') == 2

    def test_reading_time_rounds_up(self):
        assert estimate_reading_time('word ' * 500) == 3

    def test_strip_front_matter_without_block(self):
        assert strip_front_matter('No front matter') == 'No front matter'
