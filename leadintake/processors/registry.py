"""
Processor registry + dispatch facade.

The registry is built once at import time and never mutated: every
processor is stateless, so one shared instance per provider serves all
requests. Unknown provider keys resolve to the generic processor so a lead
is never rejected just because its source is unrecognized.
"""
import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from leadintake.processors.base import (
    InvalidPayloadError,
    ProcessedWebhookData,
    ProcessingError,
    RequestContext,
    WebhookProcessor,
)
from leadintake.processors.facebook import FacebookLeadsProcessor
from leadintake.processors.generic import GenericProcessor
from leadintake.processors.google_forms import GoogleFormsProcessor
from leadintake.processors.hubspot import HubSpotProcessor
from leadintake.processors.linkedin import LinkedInProcessor
from leadintake.processors.processor_config import get_description
from leadintake.processors.swipepages import SwipePagesProcessor
from leadintake.processors.zapier import ZapierProcessor

logger = logging.getLogger('processors.registry')

FALLBACK_TYPE = 'generic'


def build_registry() -> Mapping[str, WebhookProcessor]:
    """Instantiate every processor once, keyed by its lowercase provider key."""
    processors = [
        FacebookLeadsProcessor(),
        GoogleFormsProcessor(),
        LinkedInProcessor(),
        HubSpotProcessor(),
        ZapierProcessor(),
        SwipePagesProcessor(),
        GenericProcessor(),
    ]
    return MappingProxyType({p.provider: p for p in processors})


WEBHOOK_PROCESSORS: Mapping[str, WebhookProcessor] = build_registry()


def get_webhook_processor(webhook_type: Optional[str]) -> WebhookProcessor:
    """Case-insensitive lookup; unknown or empty keys fall back to generic."""
    key = (webhook_type or '').strip().lower()
    processor = WEBHOOK_PROCESSORS.get(key)
    if processor is None:
        logger.debug("No processor for '%s', falling back to %s", webhook_type, FALLBACK_TYPE)
        return WEBHOOK_PROCESSORS[FALLBACK_TYPE]
    return processor


def get_available_webhook_types() -> List[str]:
    return list(WEBHOOK_PROCESSORS.keys())


def get_processor_info(webhook_type: str) -> Dict[str, str]:
    """Display name + description for one registry key."""
    key = (webhook_type or '').strip().lower()
    processor = WEBHOOK_PROCESSORS.get(key)
    if processor is None:
        return {'name': 'Unknown', 'description': 'Unknown processor type'}
    return {'name': processor.name, 'description': get_description(key)}


def get_registry_info() -> Dict[str, Dict[str, str]]:
    """
    Serialize the full registry into a JSON-friendly dict.

    Returns: { "facebook": { "name": "...", "description": "..." }, ... }
    """
    return {key: get_processor_info(key) for key in WEBHOOK_PROCESSORS}


def process_webhook(
    webhook_type: str,
    data: Any,
    context: Optional[RequestContext] = None,
) -> ProcessedWebhookData:
    """
    Validate and normalize one payload with the processor for webhook_type.

    Raises:
        InvalidPayloadError: the processor's validate() rejected the payload.
        ProcessingError:     the processor failed to produce any result.
    """
    processor = get_webhook_processor(webhook_type)
    log_context = {'provider': processor.provider, 'webhook_type': webhook_type}

    if not processor.validate(data):
        logger.info("Rejected %s webhook: payload failed validation", webhook_type, extra=log_context)
        raise InvalidPayloadError(
            f"Invalid data format for {webhook_type} webhook", provider=processor.provider,
        )

    try:
        result = processor.process(data, context)
    except ProcessingError as e:
        logger.error("%s processor failed: %s", processor.provider, e, extra=log_context)
        raise

    logger.info(
        "Processed %s webhook via %s: %d leads", webhook_type, processor.provider, len(result.leads),
        extra={**log_context, 'lead_count': len(result.leads)},
    )
    return result
