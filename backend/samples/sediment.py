"""Sediment classification from the median grain diameter (mm)."""
from __future__ import annotations

from django.db import models


class SedimentType(models.TextChoices):
    """Ordinal sediment classes, finest first."""

    SILT_CLAY = "Silt/Clay"
    FINE_SAND = "Fine Sand"
    MEDIUM_SAND = "Medium Sand"
    VERY_COARSE_SAND = "Very Coarse Sand"
    GRAVEL = "Gravel"


# Lower bound (inclusive) of every class above Silt/Clay, ascending.
SEDIMENT_THRESHOLDS: list[tuple[float, SedimentType]] = [
    (0.063, SedimentType.FINE_SAND),
    (0.2, SedimentType.MEDIUM_SAND),
    (0.63, SedimentType.VERY_COARSE_SAND),
    (2.0, SedimentType.GRAVEL),
]


def classify(dmed: float) -> SedimentType:
    """
    Map a median diameter to its sediment class.

    Each class covers ``[lower, next_lower)`` so every finite value lands in
    exactly one class; anything below 0.063 mm is Silt/Clay.
    """
    sediment_type = SedimentType.SILT_CLAY
    for lower_bound, candidate in SEDIMENT_THRESHOLDS:
        if dmed < lower_bound:
            break
        sediment_type = candidate
    return sediment_type
