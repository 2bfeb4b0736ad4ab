import django.core.validators
from django.db import migrations, models


def _non_negative():
    return [django.core.validators.MinValueValidator(0)]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SandSample",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "latitude",
                    models.FloatField(
                        validators=[
                            django.core.validators.MinValueValidator(-90),
                            django.core.validators.MaxValueValidator(90),
                        ]
                    ),
                ),
                (
                    "longitude",
                    models.FloatField(
                        validators=[
                            django.core.validators.MinValueValidator(-180),
                            django.core.validators.MaxValueValidator(180),
                        ]
                    ),
                ),
                ("number_of_grains", models.IntegerField(blank=True, null=True, validators=_non_negative())),
                ("d10", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("d16", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("d25", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("d50", models.FloatField(validators=_non_negative())),
                ("d65", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("d75", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("d84", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("d90", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("dmean", models.FloatField(blank=True, null=True, validators=_non_negative())),
                ("dmed", models.FloatField(validators=_non_negative())),
                (
                    "sediment_type",
                    models.CharField(
                        choices=[
                            ("Silt/Clay", "Silt Clay"),
                            ("Fine Sand", "Fine Sand"),
                            ("Medium Sand", "Medium Sand"),
                            ("Very Coarse Sand", "Very Coarse Sand"),
                            ("Gravel", "Gravel"),
                        ],
                        editable=False,
                        max_length=32,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["latitude", "longitude"], name="sand_sample_lat_lon_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("latitude", "longitude", "d50"), name="uniq_sand_sample_natural_key"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("latitude__gte", -90), ("latitude__lte", 90)),
                        name="sand_sample_latitude_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("longitude__gte", -180), ("longitude__lte", 180)),
                        name="sand_sample_longitude_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("number_of_grains__gte", 0)),
                        name="sand_sample_number_of_grains_non_negative",
                    ),
                ]
                + [
                    models.CheckConstraint(
                        condition=models.Q((f"{field}__gte", 0)),
                        name=f"sand_sample_{field}_non_negative",
                    )
                    for field in ("d10", "d16", "d25", "d50", "d65", "d75", "d84", "d90", "dmean", "dmed")
                ],
            },
        ),
        migrations.CreateModel(
            name="UploadHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                ("original_filename", models.CharField(max_length=255)),
                ("accepted_count", models.PositiveIntegerField(default=0)),
                ("duplicate_count", models.PositiveIntegerField(default=0)),
                ("rejected_count", models.PositiveIntegerField(default=0)),
            ],
            options={
                "verbose_name_plural": "upload history",
                "ordering": ["-uploaded_at", "-id"],
            },
        ),
    ]
