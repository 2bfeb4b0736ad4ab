"""Access to the `SAND_SAMPLES` settings block with per-key defaults."""
from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "REQUIRED_FIELDS": ["LAT", "LON", "Number_of_Grains", "D50", "Dmean", "Dmed"],
    "MAX_REPORTED_REJECTIONS": 50,
    "LOCATION_HISTORY_RADIUS": 0.001,
    "UPLOAD_HISTORY_LIMIT": 5,
}


def sand_samples_setting(name: str) -> Any:
    """Value of ``settings.SAND_SAMPLES[name]``, falling back to `DEFAULTS`."""
    return getattr(settings, "SAND_SAMPLES", {}).get(name, DEFAULTS[name])
