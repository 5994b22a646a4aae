"""
SwipePages processor.

Landing-page form submissions: a flat object whose keys come from the
page builder. Known keys are mapped (contact fields onto the lead, the
rest into custom_fields under their mapped name); unknown keys are kept
under their original name.

Derived attributes:
  value  — budget range label ("10k-25k") via the configured range table,
           otherwise the first number in the budget string
  source — utm_source, then source, then 'referral' for a non-direct
           referrer, else 'website'
  tags   — swipepages + form-<slug> + campaign-<slug>
"""
import logging
import re
from typing import Any, Dict, List, Optional

from leadintake.processors.base import ProcessedLead, RequestContext, WebhookProcessor
from leadintake.processors.parsing import is_blank, join_name, slugify
from leadintake.processors.processor_config import get_budget_ranges

logger = logging.getLogger('processors.swipepages')


# Lowercased SwipePages key → mapped field name
FIELD_MAPPINGS = {
    # Contact
    'name': 'name',
    'full_name': 'name',
    'first_name': 'firstName',
    'last_name': 'lastName',
    'email': 'email',
    'phone': 'phone',
    'company': 'company',

    # Address
    'address': 'address',
    'city': 'city',
    'state': 'state',
    'zip': 'zip',
    'zipcode': 'zip',
    'postal_code': 'zip',
    'country': 'country',

    # Business
    'job_title': 'jobTitle',
    'title': 'jobTitle',
    'role': 'role',
    'position': 'position',
    'industry': 'industry',
    'website': 'website',

    # Qualification
    'budget': 'budget',
    'timeline': 'timeline',
    'interest': 'interest',
    'message': 'message',
    'comments': 'comments',
    'notes': 'notes',

    # Marketing
    'utm_source': 'utmSource',
    'utm_medium': 'utmMedium',
    'utm_campaign': 'utmCampaign',
    'utm_term': 'utmTerm',
    'utm_content': 'utmContent',
    'source': 'leadSource',
    'referrer': 'referrer',
    'landing_page': 'landingPage',
    'form_name': 'formName',
    'page_url': 'pageUrl',

    # Contact preferences
    'preferred_contact': 'preferredContact',
    'best_time_to_call': 'bestTimeToCall',
    'contact_method': 'contactMethod',
}

# Joined with a blank line, in this order
NOTE_FIELDS = ['message', 'comments', 'notes', 'additional_info', 'description']

_NUMBER_RUN = re.compile(r'\d[\d,]*')


def estimate_budget(budget: Any) -> Optional[float]:
    """
    Estimated lead value for a free-text budget answer.

    Range labels are checked first (first match wins) so "10k-25k" maps to
    its midpoint rather than to the leading "10". Without a label the first
    digit run is used ("$15,000" -> 15000). None when nothing positive is found.

    A label anywhere in the text beats any digits next to it: "enterprise 5000"
    resolves to the enterprise label's 250000, not to 5000.
    """
    text = str(budget).lower()

    for label, value in get_budget_ranges():
        if label in text:
            return value

    match = _NUMBER_RUN.search(text)
    if match:
        digits = match.group(0).replace(',', '')
        if digits and int(digits) > 0:
            return float(int(digits))
    return None


def resolve_source(fields: Dict[str, Any]) -> str:
    if not is_blank(fields.get('utm_source')):
        return str(fields['utm_source']).strip().lower()
    if not is_blank(fields.get('source')):
        return str(fields['source']).strip().lower()
    referrer = fields.get('referrer')
    if not is_blank(referrer) and str(referrer).strip().lower() != 'direct':
        return 'referral'
    return 'website'


def _lowered(data: Dict[str, Any]) -> Dict[str, Any]:
    return {str(key).lower(): value for key, value in data.items()}


class SwipePagesProcessor(WebhookProcessor):
    """SwipePages landing page forms: one lead per call."""
    provider = 'swipepages'
    name = 'SwipePages'
    source = 'website'
    tag = 'swipepages'
    job_title_field = 'jobTitle'

    def validate(self, data: Any) -> bool:
        if not isinstance(data, dict):
            return False
        fields = _lowered(data)
        return any(not is_blank(fields.get(key)) for key in ('email', 'name', 'first_name', 'last_name'))

    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        logger.debug("Processing SwipePages submission with %d fields", len(data))
        return self.single_lead(data, self._build_lead)

    def call_source(self, data: Any, leads: List[ProcessedLead]) -> str:
        if leads:
            return leads[0].source
        return resolve_source(_lowered(data))

    def extra_metadata(self, data: Any, context: RequestContext) -> Dict[str, Any]:
        fields = _lowered(data)
        metadata = {
            'formName': fields.get('form_name'),
            'landingPage': fields.get('landing_page') or fields.get('page_url'),
            'utmParams': {
                'source': fields.get('utm_source'),
                'medium': fields.get('utm_medium'),
                'campaign': fields.get('utm_campaign'),
                'term': fields.get('utm_term'),
                'content': fields.get('utm_content'),
            },
        }
        if context.raw_user_agent:
            metadata['userAgent'] = context.raw_user_agent
        if context.has_header('X-SwipePages-Webhook'):
            metadata['webhookId'] = context.header('X-SwipePages-Webhook')
        return metadata

    def _build_lead(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        fields = _lowered(data)
        lead = self.new_lead(source=resolve_source(fields))

        name_key = next((k for k in ('name', 'full_name') if not is_blank(fields.get(k))), None)
        if name_key:
            lead.name = str(fields[name_key]).strip()
        else:
            lead.name = join_name(fields.get('first_name'), fields.get('last_name'))

        for key, value in data.items():
            if is_blank(value):
                continue
            lowered_key = str(key).lower()
            mapped = FIELD_MAPPINGS.get(lowered_key)

            if mapped is None:
                lead.custom_fields[key] = value
            elif mapped == 'name':
                if lowered_key != name_key:
                    lead.custom_fields[key] = value
            elif mapped == 'email' and lead.email is None:
                lead.email = str(value).lower().strip()
            elif mapped == 'phone' and lead.phone is None:
                lead.phone = str(value).strip()
            elif mapped == 'company' and lead.company is None:
                lead.company = str(value).strip()
            elif mapped in ('email', 'phone', 'company') or mapped in lead.custom_fields:
                lead.custom_fields[key] = value
            else:
                lead.custom_fields[mapped] = value

        notes = [str(fields[key]) for key in NOTE_FIELDS if not is_blank(fields.get(key))]
        if notes:
            lead.notes = '\n\n'.join(notes)

        if not is_blank(fields.get('budget')):
            lead.value = estimate_budget(fields['budget'])

        if not is_blank(fields.get('form_name')):
            lead.add_tag(f"form-{slugify(fields['form_name'])}")
        if not is_blank(fields.get('utm_campaign')):
            lead.add_tag(f"campaign-{slugify(fields['utm_campaign'])}")

        return lead
