"""Shared test fixtures."""
import pytest

from leadintake.processors import processor_config
from leadintake.processors.base import RequestContext


@pytest.fixture(autouse=True)
def _fresh_processor_config():
    """Every test starts from the bundled processor_config.yaml."""
    processor_config.reset_cache()
    yield
    processor_config.reset_cache()


@pytest.fixture
def app():
    """Flask test app."""
    from leadintake import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_context():
    """Factory fixture — builds a RequestContext from a header dict."""
    def _make(headers=None, user_agent=None):
        headers = dict(headers or {})
        if user_agent is not None:
            headers['User-Agent'] = user_agent
        return RequestContext(headers=headers)
    return _make


@pytest.fixture
def facebook_envelope():
    """Page subscription payload with two leadgen changes and one unrelated change."""
    return {
        'object': 'page',
        'entry': [
            {
                'id': 'page-1',
                'changes': [
                    {
                        'field': 'leadgen',
                        'value': {
                            'leadgen_id': 'lg-1',
                            'form_id': 'form-9',
                            'page_id': 'page-1',
                            'field_data': [
                                {'name': 'first_name', 'values': ['Jane']},
                                {'name': 'last_name', 'values': ['Doe']},
                                {'name': 'email', 'values': ['jane@example.com']},
                            ],
                        },
                    },
                    {'field': 'feed', 'value': {'item': 'status'}},
                ],
            },
            {
                'id': 'page-2',
                'changes': [
                    {
                        'field': 'leadgen',
                        'value': {
                            'leadgen_id': 'lg-2',
                            'ad_id': 'ad-3',
                            'campaign_id': 'cmp-4',
                            'field_data': [
                                {'name': 'full_name', 'values': ['John Smith']},
                                {'name': 'company_name', 'values': ['Acme']},
                            ],
                        },
                    },
                ],
            },
        ],
    }


@pytest.fixture
def swipepages_submission():
    """Realistic SwipePages landing page form post."""
    return {
        'first_name': 'Maya',
        'last_name': 'Patel',
        'email': '  Maya.Patel@Example.COM ',
        'phone': ' +1 555 0100 ',
        'company': ' Patel Design ',
        'job_title': 'Founder',
        'zipcode': '94107',
        'budget': '25k-50k',
        'message': 'Need a new site',
        'comments': 'Call after 5pm',
        'utm_campaign': 'Spring Promo',
        'form_name': 'Contact Form',
        'landing_page': 'https://example.com/lp',
        'favorite_color': 'teal',
    }
