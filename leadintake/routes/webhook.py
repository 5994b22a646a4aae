"""
Webhook routes — receive endpoint, processor catalogue, health check.

Thin HTTP layer over the processor pipeline: parses the body, picks the
processor, returns the normalized leads. Storage, signature checks and
notifications belong to the caller.
"""
import json
import logging

from flask import Blueprint, current_app, jsonify, request

from leadintake.processors.base import InvalidPayloadError, ProcessingError, RequestContext
from leadintake.processors.detector import detect_webhook_type
from leadintake.processors.registry import get_registry_info, process_webhook
from leadintake.services.lead_validation import split_valid_leads

logger = logging.getLogger('routes.webhook')

bp = Blueprint('webhook', __name__)


@bp.route('/health')
def health_check():
    return jsonify({"status": "healthy"}), 200


@bp.route('/api/webhooks/types')
def list_webhook_types():
    """Every registered processor with its display name and description."""
    info = get_registry_info()
    return jsonify([{'type': key, **details} for key, details in info.items()])


@bp.route('/api/webhooks/receive/<webhook_type>', methods=['POST'])
def receive_webhook(webhook_type):
    """
    Normalize one inbound webhook.

    <webhook_type> is a registry key, or 'auto' to detect the provider from
    headers and payload shape.
    """
    raw_body = request.get_data(as_text=True)
    try:
        data = json.loads(raw_body) if raw_body.strip() else {}
    except ValueError:
        logger.warning("Rejected %s webhook: invalid JSON", webhook_type, extra={'webhook_type': webhook_type})
        return jsonify({'error': 'Invalid JSON payload'}), 400

    context = RequestContext.from_request(request)

    if webhook_type.lower() == 'auto':
        webhook_type = current_app.config.get('DEFAULT_WEBHOOK_TYPE', 'auto')
    if webhook_type.lower() == 'auto':
        webhook_type = detect_webhook_type(context, data)

    try:
        result = process_webhook(webhook_type, data, context)
    except InvalidPayloadError as e:
        return jsonify({'error': str(e)}), 400
    except ProcessingError as e:
        return jsonify({'error': 'Data transformation failed', 'details': str(e)}), 400

    valid, rejected = split_valid_leads(result.leads)

    message = f"Processed {len(valid)} leads successfully"
    if rejected:
        message += f", {len(rejected)} failed"
        logger.warning(
            "%d of %d %s leads failed validation", len(rejected), len(result.leads), result.provider,
            extra={'provider': result.provider, 'webhook_type': webhook_type},
        )

    return jsonify({
        'success': True,
        'message': message,
        'provider': result.provider,
        'source': result.source,
        'created': len(valid),
        'failed': len(rejected),
        'leads': [lead.to_dict() for lead in valid],
        'errors': rejected,
        'metadata': result.metadata,
    }), 200
