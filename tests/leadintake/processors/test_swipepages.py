"""Tests for leadintake.processors.swipepages — landing page form submissions."""
import pytest

from leadintake.processors.swipepages import SwipePagesProcessor, estimate_budget, resolve_source


@pytest.fixture
def processor():
    return SwipePagesProcessor()


class TestEstimateBudget:
    """Range labels first, then the first digit run."""

    @pytest.mark.parametrize('budget,expected', [
        ('10k-25k', 17500.0),
        ('$10K-25K per year', 17500.0),
        ('Under 1k', 500.0),
        ('100k+', 150000.0),
        ('Enterprise', 250000.0),
        ('enterprise 5000', 250000.0),
        ('$15,000', 15000.0),
        ('about 800 dollars', 800.0),
        (4000, 4000.0),
    ])
    def test_estimates(self, budget, expected):
        assert estimate_budget(budget) == expected

    @pytest.mark.parametrize('budget', ['not sure', '0', 'TBD'])
    def test_no_estimate(self, budget):
        assert estimate_budget(budget) is None


class TestResolveSource:

    def test_utm_source_wins(self):
        assert resolve_source({'utm_source': ' Google ', 'source': 'ads'}) == 'google'

    def test_source_field(self):
        assert resolve_source({'source': 'Newsletter'}) == 'newsletter'

    def test_referrer(self):
        assert resolve_source({'referrer': 'https://news.ycombinator.com'}) == 'referral'

    def test_direct_referrer_is_website(self):
        assert resolve_source({'referrer': 'Direct'}) == 'website'

    def test_default(self):
        assert resolve_source({}) == 'website'


class TestSwipePagesValidate:

    @pytest.mark.parametrize('payload', [
        {'email': 'a@b.com'},
        {'Name': 'Ada'},
        {'first_name': 'Ada'},
        {'last_name': 'L'},
    ])
    def test_accepts_contact_fields(self, processor, payload):
        assert processor.validate(payload) is True

    @pytest.mark.parametrize('payload', [{}, {'email': '  '}, {'company': 'Acme'}, [{'email': 'a@b.com'}]])
    def test_rejects(self, processor, payload):
        assert processor.validate(payload) is False


class TestSwipePagesExtraction:

    def test_budget_label_and_utm_source(self, processor):
        result = processor.process({'email': 'a@b.com', 'budget': '10k-25k', 'utm_source': 'google'})
        lead = result.leads[0]
        assert lead.value == 17500.0
        assert lead.source == 'google'
        assert lead.name == 'a'
        assert lead.priority == 'high'
        assert result.source == 'google'

    def test_full_submission(self, processor, swipepages_submission):
        lead = processor.process(swipepages_submission).leads[0]
        assert lead.name == 'Maya Patel'
        assert lead.email == 'maya.patel@example.com'
        assert lead.phone == '+1 555 0100'
        assert lead.company == 'Patel Design'
        assert lead.value == 37500.0
        assert lead.source == 'website'
        assert lead.notes == 'Need a new site\n\nCall after 5pm'
        assert lead.tags == ['swipepages', 'form-contact-form', 'campaign-spring-promo']
        assert lead.priority == 'high'

    def test_custom_fields_use_mapped_names(self, processor, swipepages_submission):
        custom = processor.process(swipepages_submission).leads[0].custom_fields
        assert custom['firstName'] == 'Maya'
        assert custom['lastName'] == 'Patel'
        assert custom['jobTitle'] == 'Founder'
        assert custom['zip'] == '94107'
        assert custom['utmCampaign'] == 'Spring Promo'
        assert custom['formName'] == 'Contact Form'
        assert custom['landingPage'] == 'https://example.com/lp'
        assert custom['budget'] == '25k-50k'
        assert custom['favorite_color'] == 'teal'
        assert 'email' not in custom

    def test_keys_matched_case_insensitively(self, processor):
        lead = processor.process({'EMAIL': 'A@B.COM', 'Full_Name': 'Ada L'}).leads[0]
        assert lead.email == 'a@b.com'
        assert lead.name == 'Ada L'

    def test_second_name_key_kept(self, processor):
        lead = processor.process({'name': 'Ada', 'full_name': 'Ada Lovelace'}).leads[0]
        assert lead.name == 'Ada'
        assert lead.custom_fields['full_name'] == 'Ada Lovelace'

    def test_second_email_key_kept(self, processor):
        lead = processor.process({'email': 'ada@x.com', 'EMAIL': 'ada@work.com'}).leads[0]
        assert lead.email == 'ada@x.com'
        assert lead.custom_fields['EMAIL'] == 'ada@work.com'

    def test_aliases_of_one_mapped_name_both_kept(self, processor):
        lead = processor.process({'email': 'a@b.com', 'zip': '10001', 'postal_code': '10002'}).leads[0]
        assert lead.custom_fields['zip'] == '10001'
        assert lead.custom_fields['postal_code'] == '10002'

    def test_job_title_gives_medium(self, processor):
        lead = processor.process({'email': 'a@b.com', 'title': 'Owner'}).leads[0]
        assert lead.priority == 'medium'

    def test_unparseable_budget(self, processor):
        lead = processor.process({'email': 'a@b.com', 'budget': 'not sure'}).leads[0]
        assert lead.value is None
        assert lead.custom_fields['budget'] == 'not sure'
        assert lead.priority == 'low'


class TestSwipePagesMetadata:

    def test_form_and_utm_metadata(self, processor, swipepages_submission):
        metadata = processor.process(swipepages_submission).metadata
        assert metadata['formName'] == 'Contact Form'
        assert metadata['landingPage'] == 'https://example.com/lp'
        assert metadata['utmParams']['campaign'] == 'Spring Promo'
        assert metadata['utmParams']['source'] is None
        assert metadata['originalData'] == swipepages_submission

    def test_request_headers(self, processor, make_context):
        context = make_context(headers={'X-SwipePages-Webhook': 'wh-42'}, user_agent='SwipePages-Hook/2')
        metadata = processor.process({'email': 'a@b.com'}, context).metadata
        assert metadata['webhookId'] == 'wh-42'
        assert metadata['userAgent'] == 'SwipePages-Hook/2'

    def test_no_header_no_webhook_id(self, processor):
        assert 'webhookId' not in processor.process({'email': 'a@b.com'}).metadata
