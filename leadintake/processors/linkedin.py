"""
LinkedIn Lead Gen Forms processor.

Fixed-shape single lead. Known properties are read from the top level,
falling back to a nested formResponse object.
"""
from typing import Any, Dict, List, Optional

from leadintake.processors.base import ProcessedLead, RequestContext, WebhookProcessor
from leadintake.processors.parsing import is_blank, join_name

# Property → custom_fields key for LinkedIn identifiers kept on the lead
LINKEDIN_CUSTOM_FIELDS = {
    'id': 'linkedinId',
    'jobTitle': 'jobTitle',
}

_CONTACT_PROPERTIES = {'firstName', 'lastName', 'emailAddress', 'phoneNumber', 'companyName'}


class LinkedInProcessor(WebhookProcessor):
    """LinkedIn Lead Gen Forms: one lead per call."""
    provider = 'linkedin'
    name = 'LinkedIn Lead Gen Forms'
    source = 'social_media'
    tag = 'linkedin-lead'
    job_title_field = 'jobTitle'

    def validate(self, data: Any) -> bool:
        if not isinstance(data, dict):
            return False
        return bool(data.get('leadGenForms') or data.get('sponsoredAccount') or data.get('formResponse'))

    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        return self.single_lead(data, self._build_lead)

    def _build_lead(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        layers = [data]
        if isinstance(data.get('formResponse'), dict):
            layers.append(data['formResponse'])

        def read(key):
            for layer in layers:
                if not is_blank(layer.get(key)):
                    return layer[key]
            return None

        lead = self.new_lead()
        lead.name = join_name(read('firstName'), read('lastName'))
        if read('emailAddress') is not None:
            lead.email = str(read('emailAddress'))
        if read('phoneNumber') is not None:
            lead.phone = str(read('phoneNumber'))
        if read('companyName') is not None:
            lead.company = str(read('companyName'))

        for key, target in LINKEDIN_CUSTOM_FIELDS.items():
            value = read(key)
            if value is not None:
                lead.custom_fields[target] = value

        known = _CONTACT_PROPERTIES | set(LINKEDIN_CUSTOM_FIELDS)
        for layer in layers:
            for key, value in layer.items():
                if key in known or is_blank(value):
                    continue
                if layer is data and key == 'formResponse' and len(layers) > 1:
                    continue
                lead.custom_fields.setdefault(key, value)

        return lead
