"""
HubSpot processor.

Fixed-shape single lead built from the object's `properties`. Contact
properties may arrive flat ("firstname": "Ada") or in the legacy
{"value": ...} wrapper; both are accepted.
"""
from typing import Any, Dict, List, Optional

from leadintake.processors.base import ProcessedLead, RequestContext, WebhookProcessor
from leadintake.processors.parsing import is_blank, join_name

# Top-level key → custom_fields key
HUBSPOT_IDENTIFIERS = {
    'objectId': 'hubspotId',
    'portalId': 'hubspotPortalId',
    'subscriptionType': 'subscriptionType',
}

_CONTACT_PROPERTIES = {'firstname', 'lastname', 'email', 'phone', 'company', 'dealstage'}


def _unwrap(value: Any) -> Any:
    if isinstance(value, dict) and 'value' in value:
        return value['value']
    return value


class HubSpotProcessor(WebhookProcessor):
    """HubSpot contact/deal webhooks: one lead per call."""
    provider = 'hubspot'
    name = 'HubSpot'
    source = 'website'
    tag = 'hubspot-lead'
    job_title_field = 'jobtitle'

    def validate(self, data: Any) -> bool:
        if not isinstance(data, dict):
            return False
        return bool(data.get('subscriptionType') or data.get('portalId') or data.get('objectId'))

    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        return self.single_lead(data, self._build_lead)

    def _build_lead(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        properties = {key: _unwrap(value) for key, value in (data.get('properties') or {}).items()}

        lead = self.new_lead()
        lead.name = join_name(properties.get('firstname'), properties.get('lastname'))
        if not is_blank(properties.get('email')):
            lead.email = str(properties['email'])
        if not is_blank(properties.get('phone')):
            lead.phone = str(properties['phone'])
        if not is_blank(properties.get('company')):
            lead.company = str(properties['company'])

        for key, target in HUBSPOT_IDENTIFIERS.items():
            if not is_blank(data.get(key)):
                lead.custom_fields[target] = data[key]
        if not is_blank(properties.get('dealstage')):
            lead.custom_fields['dealStage'] = properties['dealstage']

        for key, value in properties.items():
            if key in _CONTACT_PROPERTIES or is_blank(value):
                continue
            lead.custom_fields.setdefault(key, value)

        for key, value in data.items():
            if key in HUBSPOT_IDENTIFIERS or key == 'properties' or is_blank(value):
                continue
            lead.custom_fields.setdefault(key, value)

        return lead
