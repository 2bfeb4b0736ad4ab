"""Serializers used by the API views."""
from rest_framework import serializers

from .conf import sand_samples_setting
from .models import SandSample, UploadHistory


class SampleUploadSerializer(serializers.Serializer):
    """Checks that the multipart request actually carries a `file` field."""

    file = serializers.FileField()


class SandSampleSerializer(serializers.ModelSerializer):
    """
    Samples are exposed with the camelCase names the map and report
    frontends were built against.
    """

    _id = serializers.IntegerField(source="id", read_only=True)
    numberOfGrains = serializers.IntegerField(source="number_of_grains", read_only=True)
    sedimentType = serializers.CharField(source="sediment_type", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = SandSample
        fields = [
            "_id",
            "latitude",
            "longitude",
            "numberOfGrains",
            "d10",
            "d16",
            "d25",
            "d50",
            "d65",
            "d75",
            "d84",
            "d90",
            "dmean",
            "dmed",
            "sedimentType",
            "createdAt",
        ]


class BoundsQuerySerializer(serializers.Serializer):
    north = serializers.FloatField(min_value=-90, max_value=90)
    south = serializers.FloatField(min_value=-90, max_value=90)
    east = serializers.FloatField(min_value=-180, max_value=180)
    west = serializers.FloatField(min_value=-180, max_value=180)


class LocationHistoryQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lon = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.FloatField(min_value=0, required=False)

    def validate(self, attrs):
        if attrs.get("radius") is None:
            attrs["radius"] = sand_samples_setting("LOCATION_HISTORY_RADIUS")
        return attrs


class UploadHistorySerializer(serializers.ModelSerializer):
    """Expose a compact representation of an upload log entry."""

    class Meta:
        model = UploadHistory
        fields = [
            "id",
            "uploaded_at",
            "original_filename",
            "accepted_count",
            "duplicate_count",
            "rejected_count",
        ]
