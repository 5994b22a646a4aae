"""Tests for leadintake.processors.google_forms — relay, Apps Script and direct dialects."""
import pytest

from leadintake.processors.base import ProcessingError
from leadintake.processors.google_forms import GoogleFormsProcessor


@pytest.fixture
def processor():
    return GoogleFormsProcessor()


class TestGoogleFormsValidate:

    @pytest.mark.parametrize('payload', [
        {'form_response': {'q': 'a'}},
        {'formId': 'f-1'},
        {'responseId': 'r-1'},
        {'values': []},
        {'timestamp': '2026-01-01T10:00:00Z', 'email': 'a@b.com'},
        {'timestamp': '2026-01-01T10:00:00Z', 'name': 'Sam'},
    ])
    def test_accepts(self, processor, payload):
        assert processor.validate(payload) is True

    @pytest.mark.parametrize('payload', [
        {},
        {'timestamp': '2026-01-01'},
        {'email': 'a@b.com'},
        {'values': 'a,b'},
        [{'formId': 'x'}],
        None,
    ])
    def test_rejects(self, processor, payload):
        assert processor.validate(payload) is False


class TestRelayFormat:
    """form_response objects relayed by automation tools."""

    def test_alias_table_and_normalized_keys(self, processor):
        payload = {
            'formId': 'f-1',
            'form_response': {
                'First Name': 'Ada',
                'Last Name': 'Lovelace',
                'Email Address': 'ada@example.com',
                'Phone': '555-0100',
                'Budget': '7500',
                'Favourite Colour!': 'green',
            },
        }
        result = processor.process(payload)
        assert len(result.leads) == 1
        lead = result.leads[0]
        assert lead.name == 'Ada Lovelace'
        assert lead.email == 'ada@example.com'
        assert lead.phone == '555-0100'
        assert lead.value == 7500.0
        assert lead.priority == 'high'
        assert lead.custom_fields == {'favourite_colour_': 'green', 'formId': 'f-1'}
        assert lead.tags == ['google-forms']

    def test_name_parts_order_independent(self, processor):
        payload = {'form_response': {'last_name': 'Lovelace', 'first_name': 'Ada'}}
        assert processor.process(payload).leads[0].name == 'Ada Lovelace'

    def test_full_name_wins_over_parts(self, processor):
        payload = {'form_response': {'first_name': 'A', 'full_name': 'Ada Lovelace', 'email': 'ada@x.com'}}
        lead = processor.process(payload).leads[0]
        assert lead.name == 'Ada Lovelace'
        assert lead.custom_fields['first_name'] == 'A'

    def test_second_email_question_kept(self, processor):
        payload = {'form_response': {'Email': 'ada@x.com', 'Email Address': 'ada@work.com', 'name': 'Ada'}}
        lead = processor.process(payload).leads[0]
        assert lead.email == 'ada@x.com'
        assert lead.custom_fields['email_address'] == 'ada@work.com'

    def test_colliding_normalized_keys_both_kept(self, processor):
        payload = {'form_response': {'name': 'Ada', 'Team Size': '5', 'team size': '6'}}
        custom = processor.process(payload).leads[0].custom_fields
        assert custom == {'team_size': '5', 'team size': '6'}

    def test_second_budget_kept(self, processor):
        payload = {'form_response': {'name': 'Ada', 'budget': '100', 'estimated_budget': '200'}}
        lead = processor.process(payload).leads[0]
        assert lead.value == 100.0
        assert lead.custom_fields['estimated_budget'] == '200'

    def test_notes_concatenate(self, processor):
        payload = {'form_response': {'name': 'Ada', 'message': 'one', 'comments': 'two'}}
        assert processor.process(payload).leads[0].notes == 'one\ntwo'

    def test_organization_gives_medium(self, processor):
        payload = {'form_response': {'name': 'Ada', 'organization': 'Analytical Engines'}}
        lead = processor.process(payload).leads[0]
        assert lead.company == 'Analytical Engines'
        assert lead.priority == 'medium'

    def test_value_at_cutoff_not_high(self, processor):
        payload = {'form_response': {'name': 'Ada', 'estimated_budget': 5000}}
        assert processor.process(payload).leads[0].priority == 'low'

    def test_unparseable_budget_preserved(self, processor):
        payload = {'form_response': {'name': 'Ada', 'budget': 'TBD'}}
        lead = processor.process(payload).leads[0]
        assert lead.value is None
        assert lead.custom_fields['budget'] == 'TBD'

    def test_no_name_or_email_yields_no_leads(self, processor):
        payload = {'formId': 'f', 'form_response': {'colour': 'red'}}
        result = processor.process(payload)
        assert result.leads == []
        assert result.provider == 'google-forms'

    def test_relay_wins_over_rows(self, processor):
        payload = {'form_response': {'email': 'relay@x.com'}, 'values': ['row@x.com'], 'headers': ['Email']}
        assert processor.process(payload).leads[0].email == 'relay@x.com'


class TestAppsScriptFormat:
    """headers[i] ↔ values[i] rows."""

    def test_headers_and_values(self, processor):
        result = processor.process({'headers': ['Name', 'Email'], 'values': ['Sam', 'sam@z.com']})
        assert len(result.leads) == 1
        lead = result.leads[0]
        assert lead.name == 'Sam'
        assert lead.email == 'sam@z.com'
        assert result.provider == 'google-forms'
        assert result.source == 'website'

    def test_substring_matching(self, processor):
        payload = {
            'headers': ['Your Email', 'Mobile Phone', 'Company Name', 'Comments', 'Project Budget', 'Referral'],
            'values': ['a@b.com', '555', 'Acme', 'Soon please', '9000', 'friend'],
        }
        lead = processor.process(payload).leads[0]
        assert lead.email == 'a@b.com'
        assert lead.phone == '555'
        assert lead.company == 'Acme'
        assert lead.notes == 'Soon please'
        assert lead.value == 9000.0
        assert lead.custom_fields == {'referral': 'friend'}
        assert lead.name == 'a'

    def test_first_and_last_name_columns(self, processor):
        payload = {'headers': ['Last Name', 'First Name'], 'values': ['Doe', 'Jane']}
        assert processor.process(payload).leads[0].name == 'Jane Doe'

    def test_surplus_values_kept_by_column(self, processor):
        payload = {'headers': ['Email'], 'values': ['a@b.com', 'extra']}
        assert processor.process(payload).leads[0].custom_fields['column_1'] == 'extra'

    def test_second_email_column_kept(self, processor):
        payload = {'headers': ['Name', 'Email', 'Work Email'], 'values': ['Sam', 'sam@x.com', 'sam@z.com']}
        lead = processor.process(payload).leads[0]
        assert lead.email == 'sam@x.com'
        assert lead.custom_fields['work email'] == 'sam@z.com'

    def test_full_name_column_keeps_parts(self, processor):
        payload = {'headers': ['First Name', 'Name'], 'values': ['S', 'Sam Lee']}
        lead = processor.process(payload).leads[0]
        assert lead.name == 'Sam Lee'
        assert lead.custom_fields['first name'] == 'S'

    def test_repeated_header_kept_by_column(self, processor):
        payload = {'headers': ['Name', 'Referral', 'Referral'], 'values': ['Sam', 'friend', 'ad']}
        custom = processor.process(payload).leads[0].custom_fields
        assert custom == {'referral': 'friend', 'column_2': 'ad'}

    def test_non_list_headers_is_processing_error(self, processor):
        with pytest.raises(ProcessingError) as exc_info:
            processor.process({'headers': 5, 'values': ['Sam']})
        assert exc_info.value.provider == 'google-forms'
        assert str(exc_info.value).startswith('Failed to process Google Forms webhook')

    def test_missing_headers(self, processor):
        result = processor.process({'values': ['Sam']})
        assert result.leads == []


class TestDirectFormat:
    """Flat submissions read through the alias set."""

    def test_aliases(self, processor):
        payload = {
            'timestamp': '2026-01-01T10:00:00Z',
            'full_name': 'Sam Lee',
            'email_address': 'sam@x.com',
            'phone_number': '555',
            'company_name': 'Lee Co',
            'comments': 'hi',
            'estimated_budget': '6000',
        }
        lead = processor.process(payload).leads[0]
        assert lead.name == 'Sam Lee'
        assert lead.email == 'sam@x.com'
        assert lead.phone == '555'
        assert lead.company == 'Lee Co'
        assert lead.notes == 'hi'
        assert lead.value == 6000.0
        assert lead.priority == 'high'
        assert lead.custom_fields == {'timestamp': '2026-01-01T10:00:00Z'}

    def test_first_alias_wins_other_kept(self, processor):
        payload = {'timestamp': 't', 'email': 'a@x.com', 'email_address': 'b@x.com'}
        lead = processor.process(payload).leads[0]
        assert lead.email == 'a@x.com'
        assert lead.custom_fields['email_address'] == 'b@x.com'

    def test_unknown_keys_preserved(self, processor):
        payload = {'timestamp': 't', 'name': 'Sam', 'how_heard': 'podcast'}
        assert processor.process(payload).leads[0].custom_fields['how_heard'] == 'podcast'

    def test_invalid_budget_kept(self, processor):
        payload = {'timestamp': 't', 'name': 'Sam', 'budget': 'unknown'}
        lead = processor.process(payload).leads[0]
        assert lead.value is None
        assert lead.custom_fields['budget'] == 'unknown'

    def test_full_name_keeps_first_name(self, processor):
        payload = {'timestamp': 't', 'name': 'Sam Lee', 'first_name': 'Samuel'}
        lead = processor.process(payload).leads[0]
        assert lead.name == 'Sam Lee'
        assert lead.custom_fields['first_name'] == 'Samuel'
