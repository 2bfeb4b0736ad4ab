"""
URL patterns for the `samples` app, mounted at /api/sand-samples/.

Paths carry no trailing slash so `POST .../upload` works exactly as the
existing upload clients send it.
"""
from django.urls import path

from . import views

urlpatterns = [
    path("", views.SampleListView.as_view(), name="sample-list"),
    path("upload", views.SampleUploadView.as_view(), name="sample-upload"),
    path("count", views.SampleCountView.as_view(), name="sample-count"),
    path("bounds", views.SampleBoundsView.as_view(), name="sample-bounds"),
    path("location-history", views.LocationHistoryView.as_view(), name="location-history"),
    path("stats/grain-size", views.GrainSizeStatsView.as_view(), name="stats-grain-size"),
    path(
        "stats/sediment-distribution",
        views.SedimentDistributionView.as_view(),
        name="stats-sediment-distribution",
    ),
    path("stats/d50-distribution", views.D50DistributionView.as_view(), name="stats-d50-distribution"),
    path("stats/report", views.SummaryReportView.as_view(), name="stats-report"),
    path("history", views.UploadHistoryListView.as_view(), name="upload-history"),
]
