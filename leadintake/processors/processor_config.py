"""
Processor configuration loader — priority cutoffs, descriptions, budget ranges.

YAML file with in-memory cache and hardcoded fallback if the file is missing.
PROCESSOR_CONFIG_PATH overrides the bundled processor_config.yaml.
"""
import logging
import os
from typing import List, Optional, Tuple

import yaml

from leadintake.config import PROCESSOR_CONFIG_PATH

logger = logging.getLogger('processors.config')


_processor_config = None


def _default_config():
    """Hardcoded fallback if YAML is missing."""
    return {
        'version': 'default',
        'priority': {
            'facebook':     {'high_value': 10000},
            'google-forms': {'high_value': 5000},
            'swipepages':   {'high_value': 10000},
            'generic':      {'high_value': 10000, 'medium_value': 1000},
        },
        'descriptions': {
            'facebook': 'Facebook Lead Ads - Processes leads from Facebook advertising campaigns',
            'google-forms': 'Google Forms - Processes form submissions from Google Forms',
            'linkedin': 'LinkedIn Lead Gen Forms - Processes leads from LinkedIn advertising',
            'hubspot': 'HubSpot - Processes leads and contacts from HubSpot CRM',
            'zapier': 'Zapier - Processes leads from Zapier automation workflows',
            'swipepages': 'SwipePages - Processes form submissions from SwipePages landing pages',
            'generic': 'Generic - Processes leads from any source with flexible field mapping',
        },
        'budget_ranges': [
            {'label': 'under 1k', 'value': 500},
            {'label': 'under 5k', 'value': 2500},
            {'label': '1k-5k', 'value': 3000},
            {'label': '5k-10k', 'value': 7500},
            {'label': '10k-25k', 'value': 17500},
            {'label': '25k-50k', 'value': 37500},
            {'label': '50k-100k', 'value': 75000},
            {'label': '100k+', 'value': 150000},
            {'label': 'enterprise', 'value': 250000},
        ],
    }


def load_processor_config() -> dict:
    """Load processor config from YAML, with in-memory cache and hardcoded fallback."""
    global _processor_config
    if _processor_config is not None:
        return _processor_config

    config_path = PROCESSOR_CONFIG_PATH or os.path.join(
        os.path.dirname(__file__), 'processor_config.yaml')
    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f)
        if not isinstance(loaded, dict):
            raise ValueError('top-level YAML node is not a mapping')
        _processor_config = loaded
        logger.info("Config loaded from YAML (version=%s)", _processor_config.get('version', '?'))
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.warning("YAML config not usable (%s), using defaults", e)
        _processor_config = _default_config()

    return _processor_config


def get_high_value_threshold(provider: str) -> Optional[float]:
    """Value above which a lead from this provider is high priority (None = no cutoff)."""
    cfg = load_processor_config()
    return cfg.get('priority', {}).get(provider, {}).get('high_value')


def get_medium_value_threshold(provider: str) -> Optional[float]:
    """Value above which a lead from this provider is at least medium priority."""
    cfg = load_processor_config()
    return cfg.get('priority', {}).get(provider, {}).get('medium_value')


def get_description(provider: str) -> str:
    cfg = load_processor_config()
    return cfg.get('descriptions', {}).get(provider, 'Custom webhook processor')


def get_budget_ranges() -> List[Tuple[str, float]]:
    """Ordered (label, value) pairs for free-text budget estimation."""
    cfg = load_processor_config()
    return [
        (str(item['label']).lower(), float(item['value']))
        for item in cfg.get('budget_ranges', [])
        if isinstance(item, dict) and 'label' in item and 'value' in item
    ]


def reset_cache():
    """Reset the in-memory cache (useful for testing)."""
    global _processor_config
    _processor_config = None
