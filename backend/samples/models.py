"""Models for stored sand samples and the upload log."""
from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .sediment import SedimentType

# Percentile and summary diameters, all in millimetres.
DIAMETER_FIELDS = ("d10", "d16", "d25", "d50", "d65", "d75", "d84", "d90", "dmean", "dmed")

# Fields that identify a sample; two uploads with the same triple are the same sample.
NATURAL_KEY_FIELDS = ("latitude", "longitude", "d50")


class SandSample(models.Model):
    """
    One geotagged grain-size analysis, i.e. one row of an uploaded CSV.

    Only the columns needed for the natural key and the sediment class are
    NOT NULL; the remaining measurements may be null when the source row
    could not provide them.
    """

    latitude = models.FloatField(validators=[MinValueValidator(-90), MaxValueValidator(90)])
    longitude = models.FloatField(validators=[MinValueValidator(-180), MaxValueValidator(180)])

    number_of_grains = models.IntegerField(null=True, blank=True, validators=[MinValueValidator(0)])

    d10 = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])
    d16 = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])
    d25 = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])
    d50 = models.FloatField(validators=[MinValueValidator(0)])
    d65 = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])
    d75 = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])
    d84 = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])
    d90 = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])

    dmean = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0)])
    dmed = models.FloatField(validators=[MinValueValidator(0)])

    # Derived from dmed, never taken from the uploaded file.
    sediment_type = models.CharField(max_length=32, choices=SedimentType.choices, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=list(NATURAL_KEY_FIELDS), name="uniq_sand_sample_natural_key"),
            models.CheckConstraint(
                condition=models.Q(latitude__gte=-90, latitude__lte=90),
                name="sand_sample_latitude_range",
            ),
            models.CheckConstraint(
                condition=models.Q(longitude__gte=-180, longitude__lte=180),
                name="sand_sample_longitude_range",
            ),
            models.CheckConstraint(
                condition=models.Q(number_of_grains__gte=0),
                name="sand_sample_number_of_grains_non_negative",
            ),
        ] + [
            models.CheckConstraint(
                condition=models.Q(**{f"{field}__gte": 0}),
                name=f"sand_sample_{field}_non_negative",
            )
            for field in DIAMETER_FIELDS
        ]
        indexes = [
            models.Index(fields=["latitude", "longitude"], name="sand_sample_lat_lon_idx"),
        ]

    @property
    def dedup_key(self) -> tuple[float, float, float]:
        return (self.latitude, self.longitude, self.d50)

    def __str__(self) -> str:  # type: ignore[override]
        return f"({self.latitude}, {self.longitude}) d50={self.d50} [{self.sediment_type}]"


class UploadHistory(models.Model):
    """
    Light‑weight log of each successful CSV upload.

    Only the counts are kept; the samples themselves live in `SandSample`.
    """

    uploaded_at = models.DateTimeField(auto_now_add=True)
    original_filename = models.CharField(max_length=255)
    accepted_count = models.PositiveIntegerField(default=0)
    duplicate_count = models.PositiveIntegerField(default=0)
    rejected_count = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-uploaded_at", "-id"]
        verbose_name_plural = "upload history"

    def __str__(self) -> str:  # type: ignore[override]
        return f"Upload on {self.uploaded_at:%Y-%m-%d %H:%M} - {self.original_filename}"
