"""Tests for message bundles and the translator."""
import json

import pytest

from folio.utils.config import Config
from folio.utils.i18n import MessageLoader, Translator


@pytest.fixture
def messages_dir(tmp_path):
    (tmp_path / 'en.json').write_text(json.dumps({
        'Blog': {'title': 'Blog', 'minuteRead': '{minutes} min read', 'onlyEnglish': 'English only'},
    }), encoding='utf-8')
    (tmp_path / 'fr.json').write_text(json.dumps({
        'Blog': {'title': 'Blogue', 'minuteRead': '{minutes} min de lecture'},
    }), encoding='utf-8')
    return tmp_path


class TestMessageLoader:
    def test_packaged_bundles_share_namespaces(self):
        loader = MessageLoader(Config.MESSAGES_DIR)
        en, fr = loader.load('en'), loader.load('fr')
        assert set(en) == set(fr)
        for namespace in en:
            assert set(en[namespace]) == set(fr[namespace]), namespace

    def test_missing_bundle(self, messages_dir):
        with pytest.raises(FileNotFoundError):
            MessageLoader(messages_dir).load('de')

    def test_invalid_bundle(self, messages_dir):
        (messages_dir / 'xx.json').write_text('[1, 2', encoding='utf-8')
        with pytest.raises(ValueError):
            MessageLoader(messages_dir).load('xx')

    def test_cache_can_be_disabled(self, messages_dir):
        loader = MessageLoader(messages_dir, use_cache=False)
        assert loader.load('fr')['Blog']['title'] == 'Blogue'
        (messages_dir / 'fr.json').write_text(json.dumps({'Blog': {'title': 'Carnet'}}), encoding='utf-8')
        assert loader.load('fr')['Blog']['title'] == 'Carnet'

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ValueError):
            MessageLoader(tmp_path / 'nope')


class TestTranslator:
    def test_dotted_lookup_and_interpolation(self, messages_dir):
        t = MessageLoader(messages_dir).translator('fr', 'en')
        assert t('Blog.title') == 'Blogue'
        assert t('Blog.minuteRead', minutes=4) == '4 min de lecture'

    def test_falls_back_to_default_locale(self, messages_dir):
        t = MessageLoader(messages_dir).translator('fr', 'en')
        assert t('Blog.onlyEnglish') == 'English only'

    def test_missing_key_returns_key(self, messages_dir):
        t = MessageLoader(messages_dir).translator('en', 'en')
        assert t('Blog.nope') == 'Blog.nope'
        assert t('Blog') == 'Blog'

    def test_unknown_placeholders_are_kept(self):
        t = Translator('en', {'Footer': {'copyright': '© {year} {owner}'}})
        assert t('Footer.copyright', year=2025) == '© 2025 {owner}'

    def test_namespace(self, messages_dir):
        t = MessageLoader(messages_dir).translator('en', 'en')
        assert t.namespace('Blog')['title'] == 'Blog'
        assert t.namespace('Nope') == {}
