"""
Engine configuration.

Defaults can be overridden from the host project's Django settings:

    DISCREPANCY_ENGINE = {
        'MAX_WORKERS': 4,
        'TIMEOUT_SECONDS': 30.0,
        'MAX_FINDINGS': 10000,
    }
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

SETTINGS_NAME = 'DISCREPANCY_ENGINE'


@dataclass(frozen=True)
class EngineConfig:
    max_workers: int = 4
    timeout_seconds: float = 30.0
    max_findings: int = 10000

    def __post_init__(self):
        if self.max_workers < 1:
            raise ImproperlyConfigured(f'{SETTINGS_NAME}.MAX_WORKERS must be at least 1')
        if self.timeout_seconds <= 0:
            raise ImproperlyConfigured(f'{SETTINGS_NAME}.TIMEOUT_SECONDS must be positive')
        if self.max_findings < 1:
            raise ImproperlyConfigured(f'{SETTINGS_NAME}.MAX_FINDINGS must be at least 1')


def _coerce(overrides: Dict[str, Any], key: str, cast, default):
    if key not in overrides:
        return default
    try:
        return cast(overrides[key])
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(f'{SETTINGS_NAME}.{key} is not a valid {cast.__name__}') from exc


def load_config(overrides: Optional[Dict[str, Any]] = None) -> EngineConfig:
    """
    Build the engine config from Django settings.

    Falls back to defaults when Django is not configured or the setting
    is absent.
    """
    if overrides is None:
        overrides = getattr(settings, SETTINGS_NAME, {}) if settings.configured else {}

    defaults = EngineConfig()
    return EngineConfig(
        max_workers=_coerce(overrides, 'MAX_WORKERS', int, defaults.max_workers),
        timeout_seconds=_coerce(overrides, 'TIMEOUT_SECONDS', float, defaults.timeout_seconds),
        max_findings=_coerce(overrides, 'MAX_FINDINGS', int, defaults.max_findings),
    )
