"""
Webhook processor contracts.

Every provider normalizer implements WebhookProcessor.validate() and
WebhookProcessor.extract_leads(). process() wraps the extracted leads into a
ProcessedWebhookData; the registry and the HTTP layer only see that uniform
interface.
"""
import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from werkzeug.datastructures import Headers

from leadintake.processors.parsing import collapse_whitespace, is_blank
from leadintake.processors.processor_config import (
    get_high_value_threshold,
    get_medium_value_threshold,
)

logger = logging.getLogger('processors.base')


# ── Errors ────────────────────────────────────────────────────────────────────

class WebhookError(Exception):
    """Base class for every failure surfaced by the webhook pipeline."""

    def __init__(self, message: str, provider: str = ''):
        super().__init__(message)
        self.provider = provider


class InvalidPayloadError(WebhookError):
    """validate() rejected the payload. Callers map this to a client error."""


class ProcessingError(WebhookError):
    """A processor could not produce any structured result."""


# ── Canonical data model ──────────────────────────────────────────────────────

@dataclass
class ProcessedLead:
    """One normalized lead, identical in shape for every provider."""
    name: str = ''
    source: str = 'other'
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    value: Optional[float] = None
    notes: Optional[str] = None
    custom_fields: Dict[str, Any] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    priority: Optional[str] = None

    def add_tag(self, tag: str) -> None:
        if tag and tag not in self.tags:
            self.tags.append(tag)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly dict using the external (camelCase) field names."""
        data = {
            'name': self.name,
            'source': self.source,
            'customFields': dict(self.custom_fields),
            'tags': list(self.tags),
        }
        for key in ('email', 'phone', 'company', 'value', 'notes', 'priority'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass
class ProcessedWebhookData:
    """Uniform output of one inbound webhook call."""
    leads: List[ProcessedLead]
    source: str
    provider: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'leads': [lead.to_dict() for lead in self.leads],
            'source': self.source,
            'provider': self.provider,
            'metadata': self.metadata,
        }


# ── Request context ───────────────────────────────────────────────────────────

class RequestContext:
    """
    Request metadata a processor or the detector may consult.

    Header lookup is case-insensitive (werkzeug Headers). The pipeline never
    reads the request body through the context; callers hand in the parsed
    payload separately.
    """

    def __init__(self, headers=None, user_agent: str = None, content_type: str = None):
        if isinstance(headers, Headers):
            self.headers = headers
        else:
            self.headers = Headers(headers or {})
        self._user_agent = user_agent
        self._content_type = content_type

    @classmethod
    def from_request(cls, request) -> 'RequestContext':
        """Build a context from a Flask/werkzeug request."""
        return cls(headers=request.headers)

    @property
    def raw_user_agent(self) -> str:
        """User-Agent exactly as sent, '' when absent."""
        return self._user_agent or self.headers.get('User-Agent') or ''

    @property
    def user_agent(self) -> str:
        """Lowercased User-Agent for matching, '' when absent."""
        return self.raw_user_agent.lower()

    @property
    def content_type(self) -> str:
        return (self._content_type or self.headers.get('Content-Type') or '').lower()

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name, default)

    def has_header(self, name: str) -> bool:
        return self.headers.get(name) is not None


def as_batch(data: Any) -> List[Any]:
    """A list payload is a batch of candidates; anything else is one candidate."""
    if isinstance(data, list):
        return data
    return [data]


# ── Processor contract ────────────────────────────────────────────────────────

class WebhookProcessor(ABC):
    """
    Base class for all provider normalizers.

    Subclasses are stateless: the registry builds one instance per provider
    and shares it across every request.
    """
    provider: str = ''          # registry key, e.g. 'google-forms'
    name: str = ''              # human-readable label
    source: str = 'other'       # default source classification for the call
    tag: str = ''               # provenance tag every lead carries
    job_title_field: Optional[str] = None   # custom_fields key that counts toward medium priority

    @abstractmethod
    def validate(self, data: Any) -> bool:
        """
        Cheap, side-effect-free acceptance test. Must never raise.

        False tells the dispatcher the payload is not plausibly this
        provider's shape.
        """
        ...

    @abstractmethod
    def extract_leads(self, data: Any, context: RequestContext) -> List[ProcessedLead]:
        """
        Turn the raw payload into finalized leads.

        Batch payloads go through collect_leads() so a single malformed
        candidate is skipped; single-lead payloads go through single_lead()
        and fail the whole call instead.
        """
        ...

    def process(self, data: Any, context: Optional[RequestContext] = None) -> ProcessedWebhookData:
        """Normalize one payload. Unexpected failures surface as ProcessingError."""
        context = context or RequestContext()
        try:
            leads = self.extract_leads(data, context)
            metadata = {
                'originalData': copy.deepcopy(data),
                'processedAt': datetime.now(timezone.utc).isoformat(),
            }
            metadata.update(self.extra_metadata(data, context))
            source = self.call_source(data, leads)
        except WebhookError:
            raise
        except Exception as e:
            raise ProcessingError(
                f"Failed to process {self.name} webhook: {e}", provider=self.provider,
            ) from e

        return ProcessedWebhookData(
            leads=leads,
            source=source,
            provider=self.provider,
            metadata=metadata,
        )

    def call_source(self, data: Any, leads: List[ProcessedLead]) -> str:
        """Dominant source classification for the whole call."""
        return self.source

    def extra_metadata(self, data: Any, context: RequestContext) -> Dict[str, Any]:
        """Provider-specific metadata merged next to originalData/processedAt."""
        return {}

    # ── Shared lead helpers ──────────────────────────────────────────────────

    def new_lead(self, source: Optional[str] = None) -> ProcessedLead:
        lead = ProcessedLead(source=source or self.source)
        lead.add_tag(self.tag)
        return lead

    def single_lead(
        self,
        data: Any,
        build: Callable[[Any], Optional[ProcessedLead]],
    ) -> List[ProcessedLead]:
        """
        Build and finalize the one candidate of a single-lead payload.

        Unlike collect_leads() nothing is caught here: a structure the
        builder cannot read fails the whole call, and process() wraps it
        as ProcessingError.
        """
        lead = build(data)
        if lead is not None:
            lead = self.finalize_lead(lead)
        return [lead] if lead is not None else []

    def collect_leads(
        self,
        candidates: Iterable[Any],
        build: Callable[[Any], Optional[ProcessedLead]],
    ) -> List[ProcessedLead]:
        """
        Build and finalize each candidate of a batch in order.

        A failing candidate is logged and skipped; the rest of the batch
        still goes through.
        """
        leads = []
        for index, candidate in enumerate(candidates):
            try:
                lead = build(candidate)
                if lead is not None:
                    lead = self.finalize_lead(lead)
            except Exception as e:
                logger.warning("Skipping %s lead #%d: %s", self.provider, index, e)
                continue
            if lead is not None:
                leads.append(lead)
        return leads

    def finalize_lead(self, lead: ProcessedLead) -> Optional[ProcessedLead]:
        """
        Drop leads without name and email, derive a missing name from the
        email local part, assign priority and guarantee the provider tag.
        """
        if is_blank(lead.name) and is_blank(lead.email):
            return None

        if is_blank(lead.name):
            local_part = lead.email.split('@')[0]
            lead.name = local_part if local_part.strip() else lead.email
        lead.name = collapse_whitespace(lead.name)

        lead.priority = self.assign_priority(lead)

        if not lead.tags:
            lead.add_tag(self.tag or self.provider)
        return lead

    def assign_priority(self, lead: ProcessedLead) -> str:
        high = get_high_value_threshold(self.provider)
        medium = get_medium_value_threshold(self.provider)

        if high is not None and lead.value is not None and lead.value > high:
            return 'high'
        if lead.company:
            return 'medium'
        if self.job_title_field and not is_blank(lead.custom_fields.get(self.job_title_field)):
            return 'medium'
        if medium is not None and lead.value is not None and lead.value > medium:
            return 'medium'
        return 'low'
