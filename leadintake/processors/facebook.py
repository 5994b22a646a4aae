"""
Facebook Lead Ads processor.

Accepts either the page-subscription envelope
    {"object": "page", "entry": [{"changes": [{"field": "leadgen", "value": {...}}]}]}
or a single lead object carrying leadgen_id / form_id / field_data.
One call yields one lead per leadgen change, in entry/changes order.
"""
import logging
from typing import Any, Dict, List, Optional

from leadintake.processors.base import ProcessedLead, RequestContext, WebhookProcessor
from leadintake.processors.parsing import is_blank, parse_amount

logger = logging.getLogger('processors.facebook')


# Lead-level identifiers → custom_fields key
FACEBOOK_IDENTIFIERS = {
    'leadgen_id': 'facebookLeadId',
    'form_id': 'facebookFormId',
    'ad_id': 'facebookAdId',
    'campaign_id': 'facebookCampaignId',
    'page_id': 'facebookPageId',
    'adgroup_id': 'facebookAdgroupId',
    'created_time': 'facebookCreatedTime',
}

# Keys read directly from a lead object without field_data
_DIRECT_FIELDS = {'name', 'email', 'phone', 'company', 'message'}

# Name parts concatenate in field_data order
_NAME_FIELDS = {'full_name', 'name', 'first_name', 'last_name'}
_PHONE_FIELDS = {'phone_number', 'phone'}
_COMPANY_FIELDS = {'company_name', 'company'}
_JOB_TITLE_FIELDS = {'job_title', 'position'}
_LOCATION_FIELDS = {'city', 'state', 'country'}
_BUDGET_FIELDS = {'budget', 'estimated_budget'}
_NOTE_FIELDS = {'message', 'comments', 'additional_info'}


class FacebookLeadsProcessor(WebhookProcessor):
    """Facebook Lead Ads: page webhook envelope or direct lead objects."""
    provider = 'facebook'
    name = 'Facebook Lead Ads'
    source = 'social_media'
    tag = 'facebook-lead'
    job_title_field = 'jobTitle'

    def validate(self, data: Any) -> bool:
        if not isinstance(data, dict):
            return False
        if data.get('object') == 'page' and isinstance(data.get('entry'), list):
            return True
        return bool(data.get('leadgen_id') or data.get('form_id') or data.get('field_data'))

    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        if data.get('object') == 'page' and data.get('entry'):
            candidates = self._leadgen_values(data['entry'])
            logger.debug("Found %d leadgen changes in %d entries", len(candidates), len(data['entry']))
            return self.collect_leads(candidates, self._build_lead)

        return self.single_lead(data, self._build_lead)

    def _leadgen_values(self, entries: List[Any]) -> List[Dict[str, Any]]:
        """Walk entry[].changes[] keeping leadgen values; a malformed entry is skipped."""
        values = []
        for index, entry in enumerate(entries):
            try:
                for change in entry.get('changes') or []:
                    if change.get('field') == 'leadgen' and change.get('value'):
                        values.append(change['value'])
            except (AttributeError, TypeError) as e:
                logger.warning("Skipping malformed facebook entry #%d: %s", index, e)
        return values

    def extra_metadata(self, data: Any, context: RequestContext) -> Dict[str, Any]:
        if context.raw_user_agent:
            return {'userAgent': context.raw_user_agent}
        return {}

    def _build_lead(self, lead_data: Dict[str, Any]) -> Optional[ProcessedLead]:
        lead = self.new_lead()

        field_data = lead_data.get('field_data')
        if isinstance(field_data, list):
            for index, item in enumerate(field_data):
                self._apply_field(lead, index, item)
        else:
            self._apply_direct_fields(lead, lead_data)

        for key, target in FACEBOOK_IDENTIFIERS.items():
            if not is_blank(lead_data.get(key)):
                lead.custom_fields[target] = lead_data[key]

        return lead

    def _apply_field(self, lead: ProcessedLead, index: int, item: Dict[str, Any]) -> None:
        """
        Map one {name, values[]} entry of field_data onto the lead.

        The first value feeds the canonical attribute. A multi-valued answer
        keeps its whole list in custom_fields, and a second email/phone/
        company/budget entry lands there too instead of overwriting the first.
        """
        values = item.get('values')
        value = values[0] if isinstance(values, list) and values else item.get('value')
        if is_blank(value):
            return

        field_name = str(item.get('name') or '').lower() or f'field_{index}'
        multi = isinstance(values, list) and len(values) > 1
        if multi:
            lead.custom_fields[field_name] = list(values)
        budget = parse_amount(value) if field_name in _BUDGET_FIELDS else None

        if field_name in _NAME_FIELDS:
            lead.name = f"{lead.name} {value}" if lead.name else str(value)
        elif field_name == 'email' and lead.email is None:
            lead.email = str(value)
        elif field_name in _PHONE_FIELDS and lead.phone is None:
            lead.phone = str(value)
        elif field_name in _COMPANY_FIELDS and lead.company is None:
            lead.company = str(value)
        elif field_name in _JOB_TITLE_FIELDS and 'jobTitle' not in lead.custom_fields:
            lead.custom_fields['jobTitle'] = value
        elif budget is not None and lead.value is None:
            lead.value = budget
        elif field_name in _NOTE_FIELDS:
            lead.notes = f"{lead.notes}\n{value}" if lead.notes else str(value)
        elif not multi:
            key = field_name if field_name not in lead.custom_fields else f'{field_name}_{index}'
            lead.custom_fields[key] = value

    def _apply_direct_fields(self, lead: ProcessedLead, lead_data: Dict[str, Any]) -> None:
        if not is_blank(lead_data.get('name')):
            lead.name = str(lead_data['name'])
        if not is_blank(lead_data.get('email')):
            lead.email = str(lead_data['email'])
        if not is_blank(lead_data.get('phone')):
            lead.phone = str(lead_data['phone'])
        if not is_blank(lead_data.get('company')):
            lead.company = str(lead_data['company'])
        if not is_blank(lead_data.get('message')):
            lead.notes = str(lead_data['message'])

        for key, value in lead_data.items():
            if key in _DIRECT_FIELDS or key in FACEBOOK_IDENTIFIERS or key == 'field_data':
                continue
            if is_blank(value):
                continue
            lead.custom_fields[key] = value
