"""
Provider detection for webhooks posted without an explicit type.

Ordered, independent tests over the user agent, provider headers and
payload shape markers. First match wins; generic is the unconditional
default.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from leadintake.processors.base import RequestContext

logger = logging.getLogger('processors.detector')


def _is_facebook(ua: str, context: RequestContext, data: Dict[str, Any]) -> bool:
    return 'facebook' in ua or data.get('object') == 'page' or bool(data.get('entry'))


def _is_google_forms(ua: str, context: RequestContext, data: Dict[str, Any]) -> bool:
    return 'google' in ua or bool(data.get('form_response') or data.get('formId'))


def _is_linkedin(ua: str, context: RequestContext, data: Dict[str, Any]) -> bool:
    return 'linkedin' in ua or bool(data.get('leadGenForms') or data.get('sponsoredAccount'))


def _is_hubspot(ua: str, context: RequestContext, data: Dict[str, Any]) -> bool:
    return 'hubspot' in ua or bool(data.get('subscriptionType') or data.get('portalId'))


def _is_zapier(ua: str, context: RequestContext, data: Dict[str, Any]) -> bool:
    return 'zapier' in ua or context.has_header('X-Zapier-Source')


def _is_swipepages(ua: str, context: RequestContext, data: Dict[str, Any]) -> bool:
    if 'swipepages' in ua or context.has_header('X-SwipePages-Webhook'):
        return True
    if data.get('form_name') or data.get('landing_page'):
        return True
    company = data.get('company')
    return bool(company) and 'swipe' in str(company).lower()


# Checked in this order
DETECTION_RULES: List[Tuple[str, Callable[[str, RequestContext, Dict[str, Any]], bool]]] = [
    ('facebook', _is_facebook),
    ('google-forms', _is_google_forms),
    ('linkedin', _is_linkedin),
    ('hubspot', _is_hubspot),
    ('zapier', _is_zapier),
    ('swipepages', _is_swipepages),
]


def detect_webhook_type(context: Optional[RequestContext], data: Any) -> str:
    """Best-guess provider key for a payload; 'generic' when nothing matches."""
    context = context or RequestContext()
    ua = context.user_agent
    # Shape markers only exist on objects; batches are matched by headers alone
    payload = data if isinstance(data, dict) else {}

    for provider, matches in DETECTION_RULES:
        if matches(ua, context, payload):
            logger.debug("Detected %s webhook (ua=%r)", provider, ua)
            return provider

    return 'generic'
