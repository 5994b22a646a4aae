"""
Generic processor — fallback for any provider without a dedicated normalizer.

Field recognition is alias driven and order independent: every raw key is
lowercased and stripped to [a-z0-9], then looked up in FIELD_MAPPINGS.
Unmatched keys are kept verbatim in custom_fields, and so is a matched
value that was replaced by a later alias or could not be parsed. A list
payload is a batch; each element becomes an independent candidate lead.
"""
import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from leadintake.config import LEAD_SOURCES
from leadintake.processors.base import ProcessedLead, RequestContext, WebhookProcessor, as_batch
from leadintake.processors.parsing import is_blank, normalize_key, parse_amount

logger = logging.getLogger('processors.generic')


FIELD_MAPPINGS = {
    'name': [
        'name', 'fullname', 'full_name', 'firstname', 'first_name',
        'lastname', 'last_name', 'contact_name', 'lead_name',
    ],
    'email': [
        'email', 'emailaddress', 'email_address', 'mail', 'e_mail', 'contact_email',
    ],
    'phone': [
        'phone', 'phonenumber', 'phone_number', 'mobile', 'telephone', 'tel', 'contact_phone',
    ],
    'company': [
        'company', 'companyname', 'company_name', 'organization', 'org', 'business', 'employer',
    ],
    'notes': [
        'notes', 'message', 'comments', 'description', 'details', 'additional_info', 'remarks',
    ],
    'value': [
        'value', 'amount', 'budget', 'price', 'cost', 'deal_value', 'estimated_value',
    ],
    'source': [
        'source', 'lead_source', 'origin', 'channel', 'medium', 'campaign',
    ],
}

# Normalized alias → lead attribute
_ALIAS_INDEX = {
    normalize_key(alias): attribute
    for attribute, aliases in FIELD_MAPPINGS.items()
    for alias in aliases
}

# Spellings accepted for the lead source enum
_SOURCE_SYNONYMS = {'social': 'social_media'}

# Last alias wins; the value it replaces moves to custom_fields under its own key
_REPLACEABLE = {'email', 'phone', 'company', 'value', 'source'}


def find_mapped_field(key: str) -> Optional[str]:
    return _ALIAS_INDEX.get(normalize_key(key))


class GenericProcessor(WebhookProcessor):
    """Flexible alias-based mapping for arbitrary JSON objects and batches."""
    provider = 'generic'
    name = 'Generic Webhook'
    source = 'other'
    tag = 'webhook'

    def validate(self, data: Any) -> bool:
        return isinstance(data, (dict, list)) and len(data) > 0

    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        return self.collect_leads(as_batch(data), self._build_lead)

    def call_source(self, data: Any, leads: List[ProcessedLead]) -> str:
        if not leads:
            return self.source
        return Counter(lead.source for lead in leads).most_common(1)[0][0]

    def _build_lead(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        lead = self.new_lead()
        # attribute -> (key, value) that currently fills it
        owners: Dict[str, Tuple[str, Any]] = {}
        for key, value in data.items():
            if is_blank(value):
                continue
            mapped = find_mapped_field(key)
            if not mapped:
                lead.custom_fields[key] = value
                continue
            if not self._set_field(lead, mapped, value):
                lead.custom_fields[key] = value
                continue
            if mapped in _REPLACEABLE:
                if mapped in owners:
                    replaced_key, replaced_value = owners[mapped]
                    lead.custom_fields[replaced_key] = replaced_value
                owners[mapped] = (key, value)
        return lead

    @staticmethod
    def _set_field(lead: ProcessedLead, field: str, value: Any) -> bool:
        """Apply one aliased value. False when it cannot fill the attribute."""
        if field == 'name':
            lead.name = f"{lead.name} {value}" if lead.name else str(value)
        elif field == 'email':
            lead.email = str(value)
        elif field == 'phone':
            lead.phone = str(value)
        elif field == 'company':
            lead.company = str(value)
        elif field == 'notes':
            lead.notes = f"{lead.notes}\n{value}" if lead.notes else str(value)
        elif field == 'value':
            amount = parse_amount(value)
            if amount is None:
                return False
            lead.value = amount
        elif field == 'source':
            source = str(value).strip().lower()
            source = _SOURCE_SYNONYMS.get(source, source)
            if source in LEAD_SOURCES:
                lead.source = source
            else:
                lead.source = 'other'
                lead.custom_fields['original_source'] = value
        return True
