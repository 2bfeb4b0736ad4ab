"""
Read-side statistics over stored samples.

Every function queries the table afresh; nothing is cached between calls.
"""
from __future__ import annotations

from typing import Any

from django.db.models import Avg, Case, CharField, Count, Max, Min, QuerySet, Value, When

from .models import SandSample

# (upper bound exclusive, label); values at or above the last bound fall in "> 2mm".
D50_BUCKETS: list[tuple[float, str]] = [
    (0.1, "< 0.1mm"),
    (0.25, "0.1-0.25mm"),
    (0.5, "0.25-0.5mm"),
    (1.0, "0.5-1mm"),
    (2.0, "1-2mm"),
]
D50_OVERFLOW_LABEL = "> 2mm"


def d50_bucket(d50: float) -> str:
    """Label of the half-open d50 bucket ``[lower, upper)`` holding *d50*."""
    for upper_bound, label in D50_BUCKETS:
        if d50 < upper_bound:
            return label
    return D50_OVERFLOW_LABEL


def samples_within_bounds(north: float, south: float, east: float, west: float) -> QuerySet:
    """Samples inside the box; all four edges are inclusive."""
    return SandSample.objects.filter(
        latitude__gte=south,
        latitude__lte=north,
        longitude__gte=west,
        longitude__lte=east,
    )


def grain_size_stats() -> dict[str, Any]:
    """Overall d50/dmean/grain-count figures; zeros when nothing is stored."""
    stats = SandSample.objects.aggregate(
        totalSamples=Count("id"),
        avgD50=Avg("d50"),
        minD50=Min("d50"),
        maxD50=Max("d50"),
        avgDmean=Avg("dmean"),
        minDmean=Min("dmean"),
        maxDmean=Max("dmean"),
        avgNumberOfGrains=Avg("number_of_grains"),
    )
    return {key: (value if value is not None else 0.0) for key, value in stats.items()}


def sediment_distribution() -> list[dict[str, Any]]:
    """Sample count per sediment type, most common first."""
    rows = (
        SandSample.objects.values("sediment_type")
        .annotate(count=Count("id"))
        .order_by("-count", "sediment_type")
    )
    return [{"_id": row["sediment_type"], "count": row["count"]} for row in rows]


def d50_distribution() -> list[dict[str, Any]]:
    """
    Sample count per d50 bucket, finest bucket first.

    Empty buckets are included with a zero count so charts keep a stable
    x-axis.
    """
    bucket = Case(
        *[When(d50__lt=upper_bound, then=Value(label)) for upper_bound, label in D50_BUCKETS],
        default=Value(D50_OVERFLOW_LABEL),
        output_field=CharField(),
    )
    counts = {
        row["bucket"]: row["count"]
        for row in SandSample.objects.annotate(bucket=bucket).values("bucket").annotate(count=Count("id"))
    }
    labels = [label for _, label in D50_BUCKETS] + [D50_OVERFLOW_LABEL]
    return [{"_id": label, "count": counts.get(label, 0)} for label in labels]


def location_history(latitude: float, longitude: float, radius: float) -> dict[str, Any]:
    """
    Samples taken around one point, oldest first, plus simple trends.

    "Around" means within *radius* degrees on both axes (a square, not a
    circle). Trends compare the newest sample with the oldest one and are
    only reported when there are at least two samples.
    """
    samples = list(
        SandSample.objects.filter(
            latitude__gte=latitude - radius,
            latitude__lte=latitude + radius,
            longitude__gte=longitude - radius,
            longitude__lte=longitude + radius,
        ).order_by("created_at", "id")
    )

    result: dict[str, Any] = {
        "location": {"latitude": latitude, "longitude": longitude},
        "radius": radius,
        "totalSamples": len(samples),
        "samples": samples,
        "timeSpan": None,
        "trends": None,
    }
    if not samples:
        return result

    first, last = samples[0], samples[-1]
    result["timeSpan"] = {"earliest": first.created_at, "latest": last.created_at}

    if len(samples) > 1:
        dmean_change = None
        if first.dmean is not None and last.dmean is not None:
            dmean_change = last.dmean - first.dmean
        result["trends"] = {
            "d50Change": last.d50 - first.d50,
            "dmeanChange": dmean_change,
            "sedimentTypeEvolution": [
                {"date": sample.created_at, "type": sample.sediment_type, "d50": sample.d50}
                for sample in samples
            ],
        }
    return result
