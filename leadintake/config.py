"""
Centralized configuration — env vars and webhook intake constants.

LOG_LEVEL / LOG_FORMAT are read by logging_config.configure_logging() at
call time so tests and re-inits pick up changes.
"""
import os


# ── Webhook intake ────────────────────────────────────────────────────────────
# 'auto' runs the provider detector on every request
DEFAULT_WEBHOOK_TYPE = os.getenv('DEFAULT_WEBHOOK_TYPE', 'auto')
MAX_PAYLOAD_BYTES = int(os.getenv('MAX_PAYLOAD_BYTES', str(1024 * 1024)))

# ── Processor tunables ────────────────────────────────────────────────────────
# Falls back to processors/processor_config.yaml when unset
PROCESSOR_CONFIG_PATH = os.getenv('PROCESSOR_CONFIG_PATH')

# ── Lead source classification ────────────────────────────────────────────────
LEAD_SOURCES = [
    'manual',
    'website',
    'referral',
    'social_media',
    'email',
    'phone',
    'other',
]

# ── Lead priority values ──────────────────────────────────────────────────────
PRIORITIES = [
    'low',
    'medium',
    'high',
]
