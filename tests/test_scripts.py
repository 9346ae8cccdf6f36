"""Tests for the seed and import scripts and the folio command."""
import pytest

from folio.main import build_parser, main
from folio.model import ArticleModel, Database
from folio.scripts.import_mdx import import_content, parse_front_matter
from folio.scripts.seed import SEED_ARTICLES, seed_database
from folio.utils.config import Config


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')


@pytest.fixture
def content_dir(tmp_path):
    root = tmp_path / 'content'
    _write(root / 'articles' / 'en' / 'first-post.mdx', (
        '---\n'
        'title: First Post\n'
        'description: Imported from MDX\n'
        'date: 2025-04-15\n'
        'tags: [Blockchain, UI/UX]\n'
        '---\n'
        '\n'
        '# Hello\n'
    ))
    _write(root / 'articles' / 'fr' / 'brouillon.md', (
        '---\n'
        'title: Brouillon\n'
        'published: false\n'
        '---\n'
        'Pas encore prêt.\n'
    ))
    _write(root / 'articles' / 'en' / 'notes.txt', 'ignored')
    return root


class TestSeed:
    def test_seed_is_idempotent(self, article_model):
        assert seed_database(article_model) == {'created': len(SEED_ARTICLES), 'skipped': 0}
        assert seed_database(article_model) == {'created': 0, 'skipped': len(SEED_ARTICLES)}

    def test_seed_covers_every_locale(self, article_model):
        seed_database(article_model)
        for locale in Config.SUPPORTED_LOCALES:
            assert article_model.get_articles_by_locale(locale)


class TestParseFrontMatter:
    def test_splits_metadata_and_body(self):
        data, body = parse_front_matter('---\ntitle: Hi\ntags:\n  - a\n---\nBody\n')
        assert data == {'title': 'Hi', 'tags': ['a']}
        assert body == 'Body\n'

    def test_no_front_matter(self):
        assert parse_front_matter('Just text') == ({}, 'Just text')

    def test_front_matter_must_be_a_mapping(self):
        with pytest.raises(ValueError):
            parse_front_matter('---\n- a list\n---\nBody')


class TestImportContent:
    def test_imports_every_locale(self, article_model, content_dir):
        stats = import_content(str(content_dir), article_model=article_model)
        assert stats == {'imported': 2, 'updated': 0, 'skipped': 0, 'failed': 0}

        article = article_model.get_article_by_slug('first-post', 'en')
        assert article.title == 'First Post'
        assert article.body == '# Hello\n'
        assert sorted(article.tags) == ['Blockchain', 'UI/UX']
        assert article_model.get_article_by_slug('brouillon', 'fr').is_draft

    def test_existing_articles_skipped(self, article_model, content_dir):
        import_content(str(content_dir), article_model=article_model)
        stats = import_content(str(content_dir), article_model=article_model)
        assert stats['skipped'] == 2

    def test_update_overwrites(self, article_model, content_dir):
        import_content(str(content_dir), article_model=article_model)
        _write(content_dir / 'articles' / 'en' / 'first-post.mdx', '---\ntitle: Retitled\n---\nNew body\n')

        stats = import_content(str(content_dir), update=True, article_model=article_model)
        assert stats['updated'] == 2
        assert article_model.get_article_by_slug('first-post', 'en').title == 'Retitled'

    def test_invalid_file_counted_as_failure(self, article_model, content_dir):
        _write(content_dir / 'articles' / 'en' / 'untitled.mdx', 'No front matter at all')
        stats = import_content(str(content_dir), article_model=article_model)
        assert stats['failed'] == 1
        assert stats['imported'] == 2

    @pytest.mark.parametrize('value', ['"false"', "'no'", '"0"', 'off'])
    def test_quoted_false_imports_as_draft(self, article_model, tmp_path, value):
        root = tmp_path / 'quoted'
        _write(root / 'articles' / 'en' / 'quoted.mdx', f'---\ntitle: Quoted\npublished: {value}\n---\nBody\n')

        import_content(str(root), article_model=article_model)
        assert article_model.get_article_by_slug('quoted', 'en').is_draft

    def test_layers_from_front_matter(self, article_model, tmp_path):
        root = tmp_path / 'layered'
        _write(root / 'articles' / 'en' / 'layered.mdx', (
            '---\n'
            'title: Layered\n'
            'layers:\n'
            '  headline: The short version\n'
            '  detail:\n'
            '    content: The long version\n'
            '---\n'
        ))

        stats = import_content(str(root), article_model=article_model)
        assert stats['imported'] == 1
        article = article_model.get_article_by_slug('layered', 'en')
        assert article.layers == {'headline': 'The short version', 'detail': 'The long version'}
        assert not article.is_draft

    def test_missing_content_dir(self, article_model, tmp_path):
        stats = import_content(str(tmp_path / 'missing'), article_model=article_model)
        assert stats == {'imported': 0, 'updated': 0, 'skipped': 0, 'failed': 0}


class TestCommandLine:
    def test_parser(self):
        args = build_parser().parse_args(['import-mdx', '--update', '--content-dir', 'content', '--verbose'])
        assert args.command == 'import-mdx'
        assert args.update and args.verbose
        assert args.content_dir == 'content'

    def test_missing_database_url_exits(self, monkeypatch):
        monkeypatch.setattr(Config, 'DATABASE_URL', None)
        with pytest.raises(SystemExit) as exc_info:
            main(['seed'])
        assert exc_info.value.code == 1

    def test_setup_migrates_then_seeds(self, monkeypatch, database_url):
        monkeypatch.setattr(Config, 'DATABASE_URL', database_url)
        main(['setup'])
        assert Database.current() is None

        database = Database()
        database.connect(database_url)
        assert len(ArticleModel(database).get_articles_by_locale('en')) == 2

    def test_import_command(self, monkeypatch, database_url, content_dir):
        monkeypatch.setattr(Config, 'DATABASE_URL', database_url)
        main(['migrate'])
        main(['import-mdx', '--content-dir', str(content_dir)])

        database = Database()
        database.connect(database_url)
        assert ArticleModel(database).get_article_slugs('en') == ['first-post']
