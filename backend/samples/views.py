"""
API views for the `samples` app.

The upload view hands the file to the ingestion pipeline and only maps its
outcome onto HTTP; the read views are thin wrappers over `aggregations`.
"""
from __future__ import annotations

import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import aggregations
from .ingestion import InputError, IngestionError, ingest_csv
from .models import SandSample, UploadHistory
from .reports import build_summary_pdf, report_filename
from .serializers import (
    BoundsQuerySerializer,
    LocationHistoryQuerySerializer,
    SampleUploadSerializer,
    SandSampleSerializer,
    UploadHistorySerializer,
)

logger = logging.getLogger(__name__)


class SampleUploadView(APIView):
    """
    Upload endpoint: one CSV in, counts of stored, duplicate and rejected
    rows out.
    """

    def post(self, request, *args, **kwargs):
        serializer = SampleUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "No file uploaded", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        upload = serializer.validated_data["file"]
        try:
            summary = ingest_csv(upload, original_filename=upload.name)
        except InputError as exc:
            return Response(
                {"error": exc.message, "details": exc.details},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except IngestionError as exc:
            logger.warning("CSV upload failed", extra={"upload_filename": upload.name, "reason": exc.message})
            return Response(
                {"error": exc.message, "details": exc.details},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        finally:
            # Closing a TemporaryUploadedFile also deletes it from disk.
            upload.close()

        return Response(
            {
                "message": "CSV uploaded successfully",
                "samplesProcessed": summary.accepted_count,
                "duplicatesSkipped": summary.duplicate_skipped_count,
                "rejectedRows": summary.rejected_count,
                "rejections": [rejection.as_dict() for rejection in summary.rejections],
            },
            status=status.HTTP_200_OK,
        )


class SampleListView(APIView):
    def get(self, request, *args, **kwargs):
        serializer = SandSampleSerializer(SandSample.objects.all(), many=True)
        return Response(serializer.data)


class SampleCountView(APIView):
    def get(self, request, *args, **kwargs):
        return Response({"count": SandSample.objects.count()})


class SampleBoundsView(APIView):
    """Samples inside a north/south/east/west box, edges included."""

    def get(self, request, *args, **kwargs):
        query = BoundsQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        samples = aggregations.samples_within_bounds(**query.validated_data)
        return Response(SandSampleSerializer(samples, many=True).data)


class LocationHistoryView(APIView):
    """Everything sampled around one map point, oldest first."""

    def get(self, request, *args, **kwargs):
        query = LocationHistoryQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        params = query.validated_data
        history = aggregations.location_history(params["lat"], params["lon"], params["radius"])
        history["samples"] = SandSampleSerializer(history["samples"], many=True).data
        return Response(history)


class GrainSizeStatsView(APIView):
    def get(self, request, *args, **kwargs):
        return Response(aggregations.grain_size_stats())


class SedimentDistributionView(APIView):
    def get(self, request, *args, **kwargs):
        return Response(aggregations.sediment_distribution())


class D50DistributionView(APIView):
    def get(self, request, *args, **kwargs):
        return Response(aggregations.d50_distribution())


class SummaryReportView(APIView):
    """Download the current statistics as a PDF."""

    def get(self, request, *args, **kwargs):
        pdf_bytes = build_summary_pdf(
            stats=aggregations.grain_size_stats(),
            sediment_counts=aggregations.sediment_distribution(),
            d50_counts=aggregations.d50_distribution(),
        )
        response = HttpResponse(pdf_bytes, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{report_filename()}"'
        return response


class UploadHistoryListView(APIView):
    """Feeds the small "Recent uploads" panel, newest first."""

    def get(self, request, *args, **kwargs):
        serializer = UploadHistorySerializer(UploadHistory.objects.all(), many=True)
        return Response(serializer.data)
