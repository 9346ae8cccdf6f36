"""Tests for the admin dashboard and editor."""
import pytest

from folio import create_app


def _form(**overrides):
    data = {
        'title': 'Hello World',
        'slug': 'hello-world',
        'description': 'A first post',
        'body': 'Some body',
        'tags': 'Blockchain, UI/UX',
        'date': '2025-04-15',
        'author': '',
        'image': '',
        'published': '1',
        'action': 'save',
    }
    data.update(overrides)
    return data


class TestDashboard:
    def test_dashboard_shows_statistics(self, client, make_article):
        make_article(tags=['Blockchain'])
        make_article(slug='draft-post', title='Draft Post', published=False, tags=[])

        response = client.get('/en/admin')
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert '<strong id="stat-total">2</strong>' in html
        assert '<strong id="stat-drafts">1</strong>' in html
        assert 'Blockchain (1)' in html
        assert 'Draft Post' in html


class TestEditor:
    def test_new_article_form(self, client):
        response = client.get('/en/admin/new')
        assert response.status_code == 200
        assert 'name="action" value="preview"' in response.get_data(as_text=True)

    def test_create_article(self, client, article_model):
        response = client.post('/en/admin/new', data=_form())
        assert response.status_code == 302
        assert response.headers['Location'] == '/en/admin'

        article = article_model.get_article_by_slug('hello-world', 'en')
        assert sorted(article.tags) == ['Blockchain', 'UI/UX']
        assert article.published

    def test_preview_does_not_save(self, client, article_model):
        response = client.post('/en/admin/new', data=_form(
            action='preview', body='<Callout type="tip">Previewed</Callout>'
        ))
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert 'callout callout-tip' in html
        assert 'type="hidden" name="body"' in html
        assert article_model.get_articles_by_locale('en', include_drafts=True) == []

    def test_missing_title_rerenders_with_error(self, client):
        response = client.post('/en/admin/new', data=_form(title=''))
        assert response.status_code == 400
        assert 'Title is required' in response.get_data(as_text=True)

    def test_duplicate_slug(self, client, make_article):
        make_article()
        response = client.post('/en/admin/new', data=_form())
        assert response.status_code == 409

    def test_edit_article(self, client, article_model, make_article):
        make_article()
        data = _form(title='Renamed', slug='ignored-slug')
        del data['published']
        response = client.post('/en/admin/edit/hello-world', data=data)
        assert response.status_code == 302

        article = article_model.get_article_by_slug('hello-world', 'en')
        assert article.title == 'Renamed'
        assert article.is_draft

    def test_create_layered_article(self, client, article_model):
        response = client.post('/en/admin/new', data=_form(
            layer_headline='In one line.', layer_detail='Every **detail**.', layer_discussion='  ',
        ))
        assert response.status_code == 302
        article = article_model.get_article_by_slug('hello-world', 'en')
        assert article.layers == {'headline': 'In one line.', 'detail': 'Every **detail**.'}

    def test_layers_in_editor_and_preview(self, client, make_article):
        make_article(layers={'context': 'Background first.'})
        html = client.get('/en/admin/edit/hello-world').get_data(as_text=True)
        assert 'name="layer_context"' in html
        assert 'Background first.' in html

        response = client.post('/en/admin/edit/hello-world', data=_form(
            action='preview', layer_context='Background *revised*.',
        ))
        html = response.get_data(as_text=True)
        assert 'type="hidden" name="layer_context" value="Background *revised*."' in html
        assert '<em>revised</em>' in html

    def test_unsafe_image_rejected(self, client, article_model):
        response = client.post('/en/admin/new', data=_form(image='javascript:alert(1)'))
        assert response.status_code == 400
        assert article_model.get_articles_by_locale('en', include_drafts=True) == []

    def test_edit_unknown_article(self, client):
        assert client.get('/en/admin/edit/nope').status_code == 404

    def test_toggle_published(self, client, article_model, make_article):
        make_article()
        assert client.post('/en/admin/toggle/hello-world').status_code == 302
        assert article_model.get_article_by_slug('hello-world', 'en').is_draft

    def test_delete_article(self, client, article_model, make_article):
        make_article()
        assert client.post('/en/admin/delete/hello-world').status_code == 302
        assert article_model.get_articles_by_locale('en', include_drafts=True) == []
        assert client.post('/en/admin/delete/hello-world').status_code == 404


class TestAdminAuthentication:
    @pytest.fixture
    def secured_client(self, db, app_config):
        app_config['ADMIN_PASSWORD'] = 's3cret'
        return create_app(app_config).test_client()

    def test_credentials_required(self, secured_client):
        response = secured_client.get('/en/admin')
        assert response.status_code == 401
        assert response.headers['WWW-Authenticate'].startswith('Basic')

    def test_wrong_password(self, secured_client):
        assert secured_client.get('/en/admin', auth=('admin', 'nope')).status_code == 401

    def test_valid_credentials(self, secured_client):
        assert secured_client.get('/en/admin', auth=('admin', 's3cret')).status_code == 200

    def test_public_pages_stay_open(self, secured_client):
        assert secured_client.get('/en/blog').status_code == 200
