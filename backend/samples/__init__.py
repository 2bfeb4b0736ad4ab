"""
Sand sample application.

This app contains:
- The `SandSample` model (one geotagged grain-size analysis per row).
- The CSV ingestion pipeline with duplicate detection.
- Read-only query, statistics and report endpoints over stored samples.
"""
