"""
Zapier processor.

The payload shape is whatever the Zap author configured, so validate()
accepts everything. A `custom_fields` object is copied verbatim; a list
payload is processed as a batch.
"""
from typing import Any, Dict, List, Optional, Set

from leadintake.processors.base import ProcessedLead, RequestContext, WebhookProcessor, as_batch
from leadintake.processors.parsing import is_blank, join_name


class ZapierProcessor(WebhookProcessor):
    """Zapier automation workflows."""
    provider = 'zapier'
    name = 'Zapier'
    source = 'other'
    tag = 'zapier-lead'

    def validate(self, data: Any) -> bool:
        return True

    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        return self.collect_leads(as_batch(data), self._build_lead)

    def _build_lead(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        lead = self.new_lead()
        used: Set[str] = set()

        custom = data.get('custom_fields')
        if isinstance(custom, dict):
            lead.custom_fields.update(custom)
            used.add('custom_fields')

        for key in ('name', 'full_name'):
            if not is_blank(data.get(key)):
                lead.name = str(data[key])
                used.add(key)
                break
        else:
            lead.name = join_name(data.get('first_name'), data.get('last_name'))
            used.update(key for key in ('first_name', 'last_name') if not is_blank(data.get(key)))

        for key in ('email', 'phone', 'company'):
            if not is_blank(data.get(key)):
                setattr(lead, key, str(data[key]))
                used.add(key)

        notes = [str(data[key]) for key in ('notes', 'message') if not is_blank(data.get(key))]
        if notes:
            lead.notes = '\n'.join(notes)
            used.update(('notes', 'message'))

        for key, value in data.items():
            if key in used or is_blank(value):
                continue
            lead.custom_fields.setdefault(key, value)

        return lead
