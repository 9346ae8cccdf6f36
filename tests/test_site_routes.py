"""Tests for the public pages and locale routing."""
import pytest
from bs4 import BeautifulSoup


class TestLocaleRedirects:
    def test_root_redirects_to_browser_language(self, client):
        response = client.get('/', headers={'Accept-Language': 'fr-CA,fr;q=0.9,en;q=0.8'})
        assert response.status_code == 307
        assert response.headers['Location'] == '/fr/'

    def test_unsupported_language_uses_default(self, client):
        response = client.get('/blog', headers={'Accept-Language': 'de-DE'})
        assert response.status_code == 307
        assert response.headers['Location'] == '/en/blog'

    def test_query_string_kept(self, client):
        response = client.get('/blog?tag=ui', headers={'Accept-Language': 'fr'})
        assert response.headers['Location'] == '/fr/blog?tag=ui'

    def test_prefixed_path_not_redirected(self, client):
        response = client.get('/fr/blog', headers={'Accept-Language': 'en'})
        assert response.status_code == 200

    def test_static_files_not_redirected(self, client):
        response = client.get('/static/site.css')
        assert response.status_code == 200
        response.close()


class TestPages:
    def test_home_lists_latest_articles(self, client, make_article):
        make_article(title='Newest Post', slug='newest', date='2025-06-01')
        response = client.get('/en/')
        assert response.status_code == 200
        assert b'Newest Post' in response.data
        assert b'Latest Articles' in response.data

    def test_home_is_translated(self, client):
        response = client.get('/fr/')
        assert response.status_code == 200
        assert 'lang="fr"' in response.get_data(as_text=True)

    def test_blog_index_hides_drafts_and_other_locales(self, client, make_article):
        make_article(title='Visible Post', slug='visible')
        make_article(title='Secret Draft', slug='secret', published=False)
        make_article(title='Article Français', slug='francais', locale='fr')

        html = client.get('/en/blog').get_data(as_text=True)
        assert 'Visible Post' in html
        assert 'Secret Draft' not in html
        assert 'Article Français' not in html

    def test_article_page(self, client, make_article):
        make_article(
            body='Intro\n\n<Callout type="tip">Remember this.</Callout>',
            tags=['Blockchain'],
            author='Jane Doe',
        )
        response = client.get('/en/blog/hello-world')
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert '<title>Hello World</title>' in html
        assert 'callout callout-tip' in html
        assert 'property="og:type" content="article"' in html
        assert 'content="Jane Doe"' in html
        assert '2 min read' in html

    def test_layered_article_page(self, client, make_article):
        make_article(body='', layers={
            'headline': 'The **short** version.',
            'context': 'Why it matters.',
            'detail': 'All the details.',
        })
        html = client.get('/en/blog/hello-world').get_data(as_text=True)
        soup = BeautifulSoup(html, 'html.parser')

        layers = soup.select('details.layer')
        assert [d['data-layer'] for d in layers] == ['headline', 'context', 'detail']
        assert [d.has_attr('open') for d in layers] == [True, True, False]
        assert layers[0].summary.get_text() == 'Headline'
        assert layers[0].strong.get_text() == 'short'
        assert soup.select_one('.article-body') is None
        assert soup.select_one('.layer-toggle a')['href'].startswith('/en/blog/hello-world?layers=')

    def test_layers_chosen_from_query(self, client, make_article):
        make_article(layers={'headline': 'Short.', 'detail': 'Long.'})
        html = client.get('/en/blog/hello-world?layers=detail').get_data(as_text=True)
        soup = BeautifulSoup(html, 'html.parser')
        assert {d['data-layer']: d.has_attr('open') for d in soup.select('details.layer')} == {
            'headline': False, 'detail': True,
        }
        assert soup.select_one('.article-body') is not None

    def test_layer_labels_are_translated(self, client, make_article):
        make_article(locale='fr', title='Bonjour', layers={'context': 'Contexte ici.'})
        html = client.get('/fr/blog/hello-world').get_data(as_text=True)
        assert BeautifulSoup(html, 'html.parser').select_one('details.layer summary').get_text() == 'Contexte'

    def test_unknown_article_is_404(self, client):
        response = client.get('/en/blog/does-not-exist')
        assert response.status_code == 404
        assert 'Article Not Found' in response.get_data(as_text=True)

    def test_draft_article_is_404(self, client, make_article):
        make_article(published=False)
        assert client.get('/en/blog/hello-world').status_code == 404

    def test_article_in_other_locale_is_404(self, client, make_article):
        make_article(locale='fr', title='Bonjour')
        assert client.get('/en/blog/hello-world').status_code == 404

    def test_unknown_page_is_404(self, client):
        response = client.get('/en/nowhere')
        assert response.status_code == 404
        assert 'Page Not Found' in response.get_data(as_text=True)

    @pytest.mark.parametrize('locale', ['en', 'fr'])
    def test_language_switcher_links(self, client, locale):
        html = client.get(f'/{locale}/blog').get_data(as_text=True)
        assert 'href="/en/blog"' in html
        assert 'href="/fr/blog"' in html
