"""
Google Forms processor.

Three payload dialects, tried in this order:
  1. Relay envelope (Zapier/Make): {"form_response": {<question>: <answer>, ...}}
  2. Apps Script rows: {"headers": [...], "values": [...]} aligned by index
  3. Direct submission: flat object read through a fixed alias set

Always one lead per call, or none when neither name nor email resolves.
"""
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from leadintake.processors.base import ProcessedLead, RequestContext, WebhookProcessor
from leadintake.processors.parsing import is_blank, join_name, normalize_key, parse_amount

logger = logging.getLogger('processors.google_forms')


# Relay envelope: normalized question key → lead attribute
RELAY_FIELD_MAPPINGS = {
    'name': 'name',
    'full_name': 'name',
    'first_name': 'first_name',
    'last_name': 'last_name',
    'email': 'email',
    'email_address': 'email',
    'phone': 'phone',
    'phone_number': 'phone',
    'company': 'company',
    'company_name': 'company',
    'organization': 'company',
    'message': 'notes',
    'comments': 'notes',
    'additional_info': 'notes',
    'budget': 'value',
    'estimated_budget': 'value',
}

# Direct submission: attribute → accepted keys, first non-blank wins
DIRECT_ALIASES = {
    'name': ('name', 'full_name'),
    'first_name': ('first_name',),
    'last_name': ('last_name',),
    'email': ('email', 'email_address'),
    'phone': ('phone', 'phone_number'),
    'company': ('company', 'company_name', 'organization'),
    'notes': ('message', 'comments', 'additional_info'),
    'value': ('budget', 'estimated_budget'),
}


class _NameParts:
    """
    Collects full/first/last name fragments in any order.

    Each part remembers the key it came from. When a full name is present it
    becomes the lead name and the unused first/last parts are kept in
    custom_fields under that key.
    """

    def __init__(self):
        self.parts: Dict[str, Tuple[str, Any]] = {}

    def offer(self, part: str, key: str, value: Any) -> bool:
        """Take a fragment. False when that part was already filled."""
        if part in self.parts:
            return False
        self.parts[part] = (key, value)
        return True

    def resolve(self, lead: ProcessedLead) -> None:
        full = self.parts.get('name')
        if full is None:
            lead.name = join_name(self._value('first_name'), self._value('last_name'))
            return

        lead.name = str(full[1]).strip()
        for part in ('first_name', 'last_name'):
            if part in self.parts:
                key, value = self.parts[part]
                lead.custom_fields.setdefault(key, value)

    def _value(self, part: str) -> Any:
        return self.parts[part][1] if part in self.parts else None


class GoogleFormsProcessor(WebhookProcessor):
    """Google Forms submissions relayed by automation tools, Apps Script or direct POST."""
    provider = 'google-forms'
    name = 'Google Forms'
    source = 'website'
    tag = 'google-forms'

    def validate(self, data: Any) -> bool:
        if not isinstance(data, dict):
            return False
        if data.get('form_response') or data.get('formId') or data.get('responseId'):
            return True
        if isinstance(data.get('values'), list):
            return True
        return bool(data.get('timestamp') and (data.get('email') or data.get('name')))

    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        if isinstance(data.get('form_response'), dict):
            build = self._from_relay
        elif isinstance(data.get('values'), list):
            build = self._from_rows
        else:
            build = self._from_direct
        logger.debug("Google Forms dialect: %s", build.__name__)
        return self.single_lead(data, build)

    # ── Dialects ─────────────────────────────────────────────────────────────

    def _from_relay(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        lead = self.new_lead()
        names = _NameParts()

        for key, value in data['form_response'].items():
            if is_blank(value):
                continue
            normalized = normalize_key(key, '_')
            target = RELAY_FIELD_MAPPINGS.get(normalized)
            if target is None or not self._assign(lead, names, target, normalized, value):
                custom_key = normalized if normalized not in lead.custom_fields else str(key)
                lead.custom_fields[custom_key] = value

        names.resolve(lead)
        self._keep_envelope_keys(lead, data, {'form_response'})
        return lead

    def _from_rows(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        lead = self.new_lead()
        names = _NameParts()
        headers = data.get('headers') or []
        values = data['values']

        for index, value in enumerate(values):
            if is_blank(value):
                continue
            if index >= len(headers):
                lead.custom_fields[f'column_{index}'] = value
                continue
            header = str(headers[index]).lower()
            target = self._match_header(header)
            if target is None or not self._assign(lead, names, target, header, value):
                custom_key = header if header not in lead.custom_fields else f'column_{index}'
                lead.custom_fields[custom_key] = value

        names.resolve(lead)
        self._keep_envelope_keys(lead, data, {'headers', 'values'})
        return lead

    def _from_direct(self, data: Dict[str, Any]) -> Optional[ProcessedLead]:
        lead = self.new_lead()
        names = _NameParts()
        used: Set[str] = set()

        for target, keys in DIRECT_ALIASES.items():
            for key in keys:
                if is_blank(data.get(key)):
                    continue
                if self._assign(lead, names, target, key, data[key]):
                    used.add(key)
                break

        names.resolve(lead)
        self._keep_envelope_keys(lead, data, used)
        return lead

    # ── Helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _match_header(header: str) -> Optional[str]:
        """Substring match on a lowercased sheet header. Specific fields win over 'name'."""
        if 'email' in header:
            return 'email'
        if 'phone' in header:
            return 'phone'
        if 'company' in header:
            return 'company'
        if 'message' in header or 'comment' in header:
            return 'notes'
        if 'budget' in header:
            return 'value'
        if 'name' in header:
            if 'last' in header:
                return 'last_name'
            if 'first' in header:
                return 'first_name'
            return 'name'
        return None

    @staticmethod
    def _assign(lead: ProcessedLead, names: _NameParts, target: str, key: str, value: Any) -> bool:
        """
        Set one lead attribute from the answer under `key`.

        False means the value was not used (attribute already filled, or an
        unparseable budget) and belongs in custom_fields. Notes concatenate.
        """
        if target in ('name', 'first_name', 'last_name'):
            return names.offer(target, key, value)
        if target == 'notes':
            lead.notes = f"{lead.notes}\n{value}" if lead.notes else str(value)
            return True
        if target == 'value':
            amount = parse_amount(value)
            if amount is None or lead.value is not None:
                return False
            lead.value = amount
            return True
        if getattr(lead, target) is not None:
            return False
        setattr(lead, target, str(value))
        return True

    @staticmethod
    def _keep_envelope_keys(lead: ProcessedLead, data: Dict[str, Any], consumed: Set[str]) -> None:
        """Carry the remaining top-level keys (formId, timestamp, ...) into custom_fields."""
        for key, value in data.items():
            if key in consumed or is_blank(value):
                continue
            lead.custom_fields.setdefault(key, value)
