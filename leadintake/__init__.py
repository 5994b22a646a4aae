"""
Flask application factory.

Creates and configures the Flask app, registers the webhook blueprint and
the JSON error handlers webhook senders see.
"""
import logging

from flask import Flask, jsonify

logger = logging.getLogger('leadintake')


def create_app():
    """Create and configure the Flask application."""
    from leadintake.config import DEFAULT_WEBHOOK_TYPE, MAX_PAYLOAD_BYTES
    from leadintake.logging_config import configure_logging

    app = Flask(__name__)

    configure_logging(app)

    app.config['MAX_CONTENT_LENGTH'] = MAX_PAYLOAD_BYTES
    app.config['DEFAULT_WEBHOOK_TYPE'] = DEFAULT_WEBHOOK_TYPE

    @app.errorhandler(413)
    def payload_too_large(e):
        logger.warning("Rejected webhook body over %d bytes", app.config['MAX_CONTENT_LENGTH'])
        return jsonify({
            'error': 'Payload too large',
            'maxBytes': app.config['MAX_CONTENT_LENGTH'],
        }), 413

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    from leadintake.routes.webhook import bp as webhook_bp

    app.register_blueprint(webhook_bp)

    logger.debug("App created (default webhook type=%s)", DEFAULT_WEBHOOK_TYPE)
    return app
